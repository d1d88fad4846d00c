from datetime import datetime
from enum import IntEnum, IntFlag
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

CLIENT_PEOPLE_PICKER_QUERY_PARAMETERS_TYPE = (
    "SP.UI.ApplicationPages.ClientPeoplePickerQueryParameters"
)


class UrlZone(IntEnum):
    """Specifies the originating zone of a request received."""

    DEFAULT_ZONE = 0
    INTRANET = 1
    INTERNET = 2
    CUSTOM = 3
    EXTRANET = 4


class PrincipalType(IntFlag):
    """Principal types to search for in the people picker."""

    NONE = 0
    USER = 1
    DISTRIBUTION_LIST = 2
    SECURITY_GROUP = 4
    SHAREPOINT_GROUP = 8
    ALL = 15


class PrincipalSource(IntFlag):
    """Principal sources the people picker searches."""

    NONE = 0
    USER_INFO_LIST = 1
    WINDOWS = 2
    MEMBERSHIP_PROVIDER = 4
    ROLE_PROVIDER = 8
    ALL = 15


class PeoplePickerQuerySettings(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    exclude_all_users_on_tenant_claim: Optional[bool] = Field(
        default=None, alias="ExcludeAllUsersOnTenantClaim"
    )


class ClientPeoplePickerQueryParameters(BaseModel):
    """Query parameters for resolving or searching users and groups.

    Only ``query_string`` and ``maximum_entity_suggestions`` are required;
    unset options are left out of the request so the server defaults apply.
    """

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        use_enum_values=True,
        extra="allow",
    )
    query_string: str = Field(alias="QueryString")
    maximum_entity_suggestions: int = Field(alias="MaximumEntitySuggestions")
    allow_email_addresses: Optional[bool] = Field(
        default=None, alias="AllowEmailAddresses"
    )
    allow_multiple_entities: Optional[bool] = Field(
        default=None, alias="AllowMultipleEntities"
    )
    allow_only_email_addresses: Optional[bool] = Field(
        default=None, alias="AllowOnlyEmailAddresses"
    )
    all_url_zones: Optional[bool] = Field(default=None, alias="AllUrlZones")
    enabled_claim_providers: Optional[str] = Field(
        default=None, alias="EnabledClaimProviders"
    )
    force_claims: Optional[bool] = Field(default=None, alias="ForceClaims")
    principal_source: Optional[PrincipalSource] = Field(
        default=None, alias="PrincipalSource"
    )
    principal_type: Optional[PrincipalType] = Field(
        default=None, alias="PrincipalType"
    )
    query_settings: Optional[PeoplePickerQuerySettings] = Field(
        default=None, alias="QuerySettings"
    )
    sharepoint_group_id: Optional[int] = Field(default=None, alias="SharePointGroupID")
    url_zone: Optional[UrlZone] = Field(default=None, alias="UrlZone")
    url_zone_specified: Optional[bool] = Field(default=None, alias="UrlZoneSpecified")
    web_application_id: Optional[str] = Field(default=None, alias="WebApplicationID")


class PeoplePickerEntityData(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    account_name: Optional[str] = Field(default=None, alias="AccountName")
    department: Optional[str] = Field(default=None, alias="Department")
    email: Optional[str] = Field(default=None, alias="Email")
    is_alt_sec_id_present: Optional[str] = Field(
        default=None, alias="IsAltSecIdPresent"
    )
    mobile_phone: Optional[str] = Field(default=None, alias="MobilePhone")
    object_id: Optional[str] = Field(default=None, alias="ObjectId")
    other_mails: Optional[str] = Field(default=None, alias="OtherMails")
    principal_type: Optional[str] = Field(default=None, alias="PrincipalType")
    sp_group_id: Optional[str] = Field(default=None, alias="SPGroupID")
    sp_user_id: Optional[str] = Field(default=None, alias="SPUserID")
    title: Optional[str] = Field(default=None, alias="Title")


class PeoplePickerEntity(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    key: Optional[str] = Field(default=None, alias="Key")
    description: Optional[str] = Field(default=None, alias="Description")
    display_text: Optional[str] = Field(default=None, alias="DisplayText")
    entity_type: Optional[str] = Field(default=None, alias="EntityType")
    is_resolved: Optional[bool] = Field(default=None, alias="IsResolved")
    provider_display_name: Optional[str] = Field(
        default=None, alias="ProviderDisplayName"
    )
    provider_name: Optional[str] = Field(default=None, alias="ProviderName")
    entity_data: Optional[PeoplePickerEntityData] = Field(
        default=None, alias="EntityData"
    )
    multiple_matches: List[PeoplePickerEntityData] = Field(
        default_factory=list, alias="MultipleMatches"
    )


class HashTag(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    name: Optional[str] = Field(default=None, alias="Name")
    use_count: Optional[int] = Field(default=None, alias="UseCount")


class HashTagCollection(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    items: List[HashTag] = Field(default_factory=list, alias="Items")


class FollowedContent(BaseModel):
    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    followed_documents_url: Optional[str] = Field(
        default=None, alias="FollowedDocumentsUrl"
    )
    followed_sites_url: Optional[str] = Field(default=None, alias="FollowedSitesUrl")


class UserProfile(BaseModel):
    """Profile of a user as returned by the profile loader.

    Several fields are only populated by SharePoint Online.
    """

    model_config = ConfigDict(
        validate_by_name=True,
        validate_by_alias=True,
        extra="allow",
    )
    followed_content: Optional[FollowedContent] = Field(
        default=None, alias="FollowedContent"
    )
    account_name: Optional[str] = Field(default=None, alias="AccountName")
    display_name: Optional[str] = Field(default=None, alias="DisplayName")
    o15_first_run_experience: Optional[int] = Field(
        default=None, alias="O15FirstRunExperience"
    )
    personal_site: Optional[str] = Field(default=None, alias="PersonalSite")
    # bitwise: None 0, Profile 1, Social 2, Storage 4, MyTasksDashboard 8,
    # Education 16, Guest 32
    personal_site_capabilities: Optional[int] = Field(
        default=None, alias="PersonalSiteCapabilities"
    )
    personal_site_first_creation_error: Optional[str] = Field(
        default=None, alias="PersonalSiteFirstCreationError"
    )
    personal_site_first_creation_time: Optional[datetime] = Field(
        default=None, alias="PersonalSiteFirstCreationTime"
    )
    personal_site_instantiation_state: Optional[int] = Field(
        default=None, alias="PersonalSiteInstantiationState"
    )
    personal_site_last_creation_time: Optional[datetime] = Field(
        default=None, alias="PersonalSiteLastCreationTime"
    )
    personal_site_number_of_retries: Optional[int] = Field(
        default=None, alias="PersonalSiteNumberOfRetries"
    )
    picture_import_enabled: Optional[bool] = Field(
        default=None, alias="PictureImportEnabled"
    )
    public_url: Optional[str] = Field(default=None, alias="PublicUrl")
    url_to_create_personal_site: Optional[str] = Field(
        default=None, alias="UrlToCreatePersonalSite"
    )
