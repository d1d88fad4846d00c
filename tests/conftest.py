import logging
import sys
from pathlib import Path
from typing import Generator

import pytest
from click.testing import CliRunner

# Ensure local source package (src/sprest) is importable before tests collect
_PROJECT_ROOT: Path = Path(__file__).resolve().parents[1]
_SRC_PATH: Path = _PROJECT_ROOT / "src"
if _SRC_PATH.exists():
    sys.path.insert(0, str(_SRC_PATH))

from sprest._config import Config  # noqa: E402
from sprest._services import BaseService  # noqa: E402
from sprest._utils import sdk_version  # noqa: E402


@pytest.fixture
def anyio_backend() -> str:
    return "asyncio"


@pytest.fixture
def runner() -> CliRunner:
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Clean environment variables before each test."""
    monkeypatch.delenv("SPREST_URL", raising=False)
    monkeypatch.delenv("SPREST_ACCESS_TOKEN", raising=False)
    monkeypatch.delenv("SPREST_TIMEOUT", raising=False)


@pytest.fixture(autouse=True)
def reset_logging() -> Generator[None, None, None]:
    """Drop handlers bound to streams of a finished test."""
    yield
    logger = logging.getLogger("sprest")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def base_url() -> str:
    return "https://contoso.sharepoint.com/sites/dev"


@pytest.fixture
def secret() -> str:
    return "secret"


@pytest.fixture
def version() -> str:
    return sdk_version()


@pytest.fixture
def config(base_url: str, secret: str) -> Config:
    return Config(base_url=base_url, secret=secret)


@pytest.fixture
def service(config: Config) -> BaseService:
    return BaseService(config)
