import importlib.metadata

from .constants import CLIENT_TAG_PREFIX


def sdk_version() -> str:
    try:
        return importlib.metadata.version("sprest")
    except importlib.metadata.PackageNotFoundError:
        return "0.0.0"


def client_tag_value(specific_component: str = "") -> str:
    """Value of the ``X-ClientService-ClientTag`` header.

    SharePoint limits the tag to 32 characters in its usage logs, but accepts
    longer values, so the calling component is kept for local diagnostics.
    """
    component = f"/{specific_component}" if specific_component else ""
    return f"{CLIENT_TAG_PREFIX}{component}/{sdk_version()}"
