from logging import getLogger
from os import environ as env
from typing import Optional

from dotenv import load_dotenv

from ._config import Config
from ._services import (
    BaseService,
    Batch,
    Profiles,
    SharePointQueryable,
    SharePointQueryableCollection,
)
from ._utils import combine, setup_logging
from ._utils.constants import ENV_ACCESS_TOKEN, ENV_BASE_URL
from .models.errors import BaseUrlMissingError, SecretMissingError

load_dotenv()


class SharePoint:
    """Entry point for a SharePoint site.

    Examples:
        ```python
        from sprest import SharePoint

        sp = SharePoint(
            base_url="https://contoso.sharepoint.com/sites/dev",
            secret="<access token>",
        )
        print(sp.profiles.edit_profile_link())
        ```
    """

    def __init__(
        self,
        *,
        base_url: Optional[str] = None,
        secret: Optional[str] = None,
        debug: bool = False,
        timeout: Optional[float] = None,
    ) -> None:
        base_url_value = base_url or env.get(ENV_BASE_URL)
        secret_value = secret or env.get(ENV_ACCESS_TOKEN)

        if not base_url_value:
            raise BaseUrlMissingError()
        if not secret_value:
            raise SecretMissingError()

        self._config = Config(
            base_url=base_url_value,
            secret=secret_value,
            debug=debug,
            timeout=timeout,
        )

        setup_logging(self._config.debug)
        log = getLogger("sprest")
        log.debug(f"Site: {self._config.base_url}")

        self._service = BaseService(self._config)

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @property
    def profiles(self) -> Profiles:
        return Profiles(self._config.base_url, service=self._service)

    def queryable(self, path: Optional[str] = None) -> SharePointQueryable:
        """Builder for an arbitrary ``_api`` endpoint of the site."""
        return SharePointQueryable(
            self._config.base_url, combine("_api", path), service=self._service
        )

    def collection(self, path: Optional[str] = None) -> SharePointQueryableCollection:
        """Collection builder for an arbitrary ``_api`` endpoint of the site."""
        return SharePointQueryableCollection(
            self._config.base_url, combine("_api", path), service=self._service
        )

    def create_batch(self) -> Batch:
        return Batch(self._service)
