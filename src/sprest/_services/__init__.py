from ._base_service import BaseService
from ._batch import Batch
from ._queryable import SharePointQueryable, SharePointQueryableCollection
from .profiles_service import ClientPeoplePickerQuery, ProfileLoader, Profiles

__all__ = [
    "BaseService",
    "Batch",
    "ClientPeoplePickerQuery",
    "ProfileLoader",
    "Profiles",
    "SharePointQueryable",
    "SharePointQueryableCollection",
]
