import os
from typing import Any, Optional

from pydantic import BaseModel, Field, HttpUrl, field_validator

from ._utils.constants import ENV_TIMEOUT


class Config(BaseModel):
    base_url: str
    secret: str
    debug: bool = False
    timeout: Optional[float] = Field(default=None, validate_default=True)

    @field_validator("base_url", mode="before")
    @classmethod
    def validate_url(cls, value: str) -> str:
        # https://{tenant}.sharepoint.com[/sites/{site}]
        url_value = HttpUrl(url=value)
        assert url_value.scheme in ("http", "https"), "Invalid URL"
        assert url_value.host, "Invalid URL"
        return value.rstrip("/")

    @field_validator("timeout", mode="before")
    @classmethod
    def timeout_from_env(cls, value: Any) -> Any:
        if value is not None:
            return value
        raw = os.environ.get(ENV_TIMEOUT)
        if not raw:
            return None
        try:
            return float(raw)
        except ValueError:
            raise ValueError(
                f"{ENV_TIMEOUT} must be a number of seconds, got {raw!r}"
            ) from None
