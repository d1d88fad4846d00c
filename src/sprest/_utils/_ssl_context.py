import os
import ssl
from typing import Any, Dict, Optional

from .constants import DEFAULT_TIMEOUT

# checked in order; the first one set wins over certifi's bundle
_CA_FILE_VARS = ("SSL_CERT_FILE", "REQUESTS_CA_BUNDLE")
_CA_DIR_VAR = "SSL_CERT_DIR"


def _env_path(name: str) -> Optional[str]:
    value = os.environ.get(name)
    if not value:
        return None
    return os.path.expanduser(os.path.expandvars(value))


def create_ssl_context() -> ssl.SSLContext:
    """SSL context trusting the system store, or a CA bundle as fallback.

    Corporate SharePoint tenants often sit behind TLS-inspecting proxies whose
    root is only installed in the OS store, so ``truststore`` is preferred
    when it is installed (``pip install sprest[truststore]``).
    """
    try:
        import truststore

        return truststore.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    except ImportError:
        import certifi

        ca_file = next(
            (path for path in map(_env_path, _CA_FILE_VARS) if path),
            certifi.where(),
        )
        return ssl.create_default_context(cafile=ca_file, capath=_env_path(_CA_DIR_VAR))


def get_httpx_client_kwargs(timeout: Optional[float] = None) -> Dict[str, Any]:
    """Shared keyword arguments for every httpx client the SDK creates.

    Args:
        timeout: Request timeout in seconds, the library default when None.
    """
    if timeout is None:
        timeout = DEFAULT_TIMEOUT

    return {
        "verify": create_ssl_context(),
        "timeout": timeout,
        "follow_redirects": True,
        "trust_env": True,
    }
