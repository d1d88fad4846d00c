from .errors import (
    BaseUrlMissingError,
    ConstructionError,
    SecretMissingError,
    SubstitutionError,
)
from .exceptions import EnrichedException
from .profiles import (
    CLIENT_PEOPLE_PICKER_QUERY_PARAMETERS_TYPE,
    ClientPeoplePickerQueryParameters,
    FollowedContent,
    HashTag,
    HashTagCollection,
    PeoplePickerEntity,
    PeoplePickerEntityData,
    PeoplePickerQuerySettings,
    PrincipalSource,
    PrincipalType,
    UrlZone,
    UserProfile,
)

__all__ = [
    "BaseUrlMissingError",
    "CLIENT_PEOPLE_PICKER_QUERY_PARAMETERS_TYPE",
    "ClientPeoplePickerQueryParameters",
    "ConstructionError",
    "EnrichedException",
    "FollowedContent",
    "HashTag",
    "HashTagCollection",
    "PeoplePickerEntity",
    "PeoplePickerEntityData",
    "PeoplePickerQuerySettings",
    "PrincipalSource",
    "PrincipalType",
    "SecretMissingError",
    "SubstitutionError",
    "UrlZone",
    "UserProfile",
]
