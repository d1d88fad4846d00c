"""Fluent client for the SharePoint REST API."""

from ._config import Config
from ._services import (
    BaseService,
    Batch,
    ClientPeoplePickerQuery,
    ProfileLoader,
    Profiles,
    SharePointQueryable,
    SharePointQueryableCollection,
)
from ._sharepoint import SharePoint
from ._utils import QueryParams, RequestSpec, body, metadata
from .models import *  # noqa: F403
from .models import __all__ as _models_all

__all__ = [
    "BaseService",
    "Batch",
    "ClientPeoplePickerQuery",
    "Config",
    "ProfileLoader",
    "Profiles",
    "QueryParams",
    "RequestSpec",
    "SharePoint",
    "SharePointQueryable",
    "SharePointQueryableCollection",
    "body",
    "metadata",
    *_models_all,
]
