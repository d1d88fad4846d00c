import json
from typing import Any, Callable, Dict, List, Optional

from pydantic import TypeAdapter

from .._utils import metadata, odata_bool, quoted_literal
from .._utils.constants import HEADER_CONTENT_TYPE
from ..models import (
    CLIENT_PEOPLE_PICKER_QUERY_PARAMETERS_TYPE,
    ClientPeoplePickerQueryParameters,
    HashTagCollection,
    PeoplePickerEntity,
    UserProfile,
)
from ..tracing import traced
from ._base_service import BaseService
from ._queryable import (
    _USE_DEFAULT,
    Base,
    SharePointQueryable,
    SharePointQueryableCollection,
)


class ProfileLoader(SharePointQueryable):
    """Personal site provisioning and the current user's profile."""

    default_path = "_api/sp.userprofiles.profileloader.getprofileloader"

    @traced(
        name="profile_loader_create_personal_site_enqueue_bulk",
        run_type="sharepoint",
        hide_input=True,
    )
    def create_personal_site_enqueue_bulk(self, emails: List[str]) -> None:
        """Provision personal sites for the given users.

        Requires My Site administrator rights on SharePoint Online and is
        never batched.

        Args:
            emails: The email addresses of the users to provision sites for.
        """
        return self.clone(
            ProfileLoader, "createpersonalsiteenqueuebulk", keep_batch=False
        ).post({"emailIDs": list(emails)})

    @traced(
        name="profile_loader_create_personal_site_enqueue_bulk",
        run_type="sharepoint",
        hide_input=True,
    )
    async def create_personal_site_enqueue_bulk_async(self, emails: List[str]) -> None:
        return await self.clone(
            ProfileLoader, "createpersonalsiteenqueuebulk", keep_batch=False
        ).post_async({"emailIDs": list(emails)})

    def _owner_user_profile_query(self) -> "ProfileLoader":
        # sibling of the loader, not a child of it
        return self.get_parent(
            ProfileLoader,
            self.parent_url,
            "_api/sp.userprofiles.profileloader.getowneruserprofile",
            batch=self.batch,
        )

    @traced(name="profile_loader_owner_user_profile", run_type="sharepoint")
    def owner_user_profile(self) -> UserProfile:
        """Get the user profile of the site owner."""
        return self._owner_user_profile_query().post(model=UserProfile)

    @traced(name="profile_loader_owner_user_profile", run_type="sharepoint")
    async def owner_user_profile_async(self) -> UserProfile:
        return await self._owner_user_profile_query().post_async(model=UserProfile)

    @traced(name="profile_loader_user_profile", run_type="sharepoint")
    def user_profile(self) -> Dict[str, Any]:
        """Get the user profile of the current user."""
        return self.clone(ProfileLoader, "getuserprofile").post()

    @traced(name="profile_loader_user_profile", run_type="sharepoint")
    async def user_profile_async(self) -> Dict[str, Any]:
        return await self.clone(ProfileLoader, "getuserprofile").post_async()

    @traced(name="profile_loader_create_personal_site", run_type="sharepoint")
    def create_personal_site(self, interactive_request: bool = False) -> None:
        """Enqueue creating a personal site for the current user.

        Args:
            interactive_request: True if the request was initiated
                interactively (web), False for client-initiated requests.
        """
        interactive = odata_bool(interactive_request)
        path = f"getuserprofile/createpersonalsiteenque({interactive})"
        return self.clone(ProfileLoader, path).post()

    @traced(name="profile_loader_create_personal_site", run_type="sharepoint")
    async def create_personal_site_async(
        self, interactive_request: bool = False
    ) -> None:
        interactive = odata_bool(interactive_request)
        path = f"getuserprofile/createpersonalsiteenque({interactive})"
        return await self.clone(ProfileLoader, path).post_async()

    @traced(name="profile_loader_share_all_social_data", run_type="sharepoint")
    def share_all_social_data(self, share: bool) -> None:
        """Set the privacy settings for the current user's profile.

        Args:
            share: True to make all social data public, False to make it private.
        """
        path = f"getuserprofile/shareallsocialdata({odata_bool(share)})"
        return self.clone(ProfileLoader, path).post()

    @traced(name="profile_loader_share_all_social_data", run_type="sharepoint")
    async def share_all_social_data_async(self, share: bool) -> None:
        path = f"getuserprofile/shareallsocialdata({odata_bool(share)})"
        return await self.clone(ProfileLoader, path).post_async()


def _people_picker_parser(result_key: str, model: Any) -> Callable[[Any], Any]:
    adapter = TypeAdapter(model)

    def _parse(result: Any) -> Any:
        # verbose responses nest the serialized result under the method name
        if isinstance(result, dict):
            result = result[result_key]
        return adapter.validate_python(json.loads(result))

    return _parse


class ClientPeoplePickerQuery(SharePointQueryable):
    """Resolves and searches users and groups the way the people picker does."""

    default_path = "_api/sp.ui.applicationpages.clientpeoplepickerwebserviceinterface"

    def _body_from(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> Dict[str, Any]:
        return {
            "queryParams": {
                **metadata(CLIENT_PEOPLE_PICKER_QUERY_PARAMETERS_TYPE),
                **query_params.model_dump(
                    by_alias=True, exclude_none=True, mode="json"
                ),
            }
        }

    @traced(name="people_picker_resolve_user", run_type="sharepoint", hide_input=True)
    def client_people_picker_resolve_user(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> PeoplePickerEntity:
        """Resolve a user or group.

        Args:
            query_params: The people picker query to resolve.

        Returns:
            PeoplePickerEntity: The resolved entity.
        """
        q = self.clone(ClientPeoplePickerQuery, None)
        q.concat(".clientpeoplepickerresolveuser")
        return q.post(
            self._body_from(query_params),
            parser=_people_picker_parser(
                "ClientPeoplePickerResolveUser", PeoplePickerEntity
            ),
        )

    @traced(name="people_picker_resolve_user", run_type="sharepoint", hide_input=True)
    async def client_people_picker_resolve_user_async(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> PeoplePickerEntity:
        q = self.clone(ClientPeoplePickerQuery, None)
        q.concat(".clientpeoplepickerresolveuser")
        return await q.post_async(
            self._body_from(query_params),
            parser=_people_picker_parser(
                "ClientPeoplePickerResolveUser", PeoplePickerEntity
            ),
        )

    @traced(name="people_picker_search_user", run_type="sharepoint", hide_input=True)
    def client_people_picker_search_user(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> List[PeoplePickerEntity]:
        """Search for users or groups.

        Args:
            query_params: The people picker query to run.

        Returns:
            List[PeoplePickerEntity]: The matching entities.
        """
        q = self.clone(ClientPeoplePickerQuery, None)
        q.concat(".clientpeoplepickersearchuser")
        return q.post(
            self._body_from(query_params),
            parser=_people_picker_parser(
                "ClientPeoplePickerSearchUser", List[PeoplePickerEntity]
            ),
        )

    @traced(name="people_picker_search_user", run_type="sharepoint", hide_input=True)
    async def client_people_picker_search_user_async(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> List[PeoplePickerEntity]:
        q = self.clone(ClientPeoplePickerQuery, None)
        q.concat(".clientpeoplepickersearchuser")
        return await q.post_async(
            self._body_from(query_params),
            parser=_people_picker_parser(
                "ClientPeoplePickerSearchUser", List[PeoplePickerEntity]
            ),
        )


class Profiles(SharePointQueryable):
    """User profiles, following and tags via the people manager.

    The loader and people picker endpoints live next to the people manager
    rather than under it, so they are rooted at the same base as this builder.

    Examples:
        ```python
        from sprest import SharePoint

        sp = SharePoint()

        sp.profiles.am_i_following("i:0#.f|membership|alice@contoso.com")
        sp.profiles.get_user_profile_property_for(
            "i:0#.f|membership|bob@contoso.com", "Title"
        )
        ```
    """

    default_path = "_api/sp.userprofiles.peoplemanager"

    def __init__(
        self,
        base: Base,
        path: Optional[str] = _USE_DEFAULT,
        *,
        service: Optional[BaseService] = None,
    ) -> None:
        super().__init__(base, path, service=service)
        # clones keep the site root so the sibling endpoints stay siblings
        self._base = base._base if isinstance(base, Profiles) else base

    @property
    def _profile_loader(self) -> ProfileLoader:
        loader = ProfileLoader(self._base).configure_from(self)
        if self.batch is not None:
            loader.in_batch(self.batch)
        return loader

    @property
    def _client_people_picker_query(self) -> ClientPeoplePickerQuery:
        query = ClientPeoplePickerQuery(self._base).configure_from(self)
        if self.batch is not None:
            query.in_batch(self.batch)
        return query

    def _with_login(self, path: str, login_name: str) -> "Profiles":
        q = self.clone(Profiles, path)
        q.query.set("@v", quoted_literal(login_name))
        return q

    @traced(name="profiles_edit_profile_link", run_type="sharepoint")
    def edit_profile_link(self) -> str:
        """The url of the edit profile page for the current user."""
        return self.clone(Profiles, "EditProfileLink").get()

    @traced(name="profiles_edit_profile_link", run_type="sharepoint")
    async def edit_profile_link_async(self) -> str:
        return await self.clone(Profiles, "EditProfileLink").get_async()

    @traced(name="profiles_is_my_people_list_public", run_type="sharepoint")
    def is_my_people_list_public(self) -> bool:
        """Whether the current user's "People I'm Following" list is public."""
        return self.clone(Profiles, "IsMyPeopleListPublic").get()

    @traced(name="profiles_is_my_people_list_public", run_type="sharepoint")
    async def is_my_people_list_public_async(self) -> bool:
        return await self.clone(Profiles, "IsMyPeopleListPublic").get_async()

    @traced(name="profiles_am_i_followed_by", run_type="sharepoint", hide_input=True)
    def am_i_followed_by(self, login_name: str) -> bool:
        """Whether the current user is followed by the specified user.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("amifollowedby(@v)", login_name).get()

    @traced(name="profiles_am_i_followed_by", run_type="sharepoint", hide_input=True)
    async def am_i_followed_by_async(self, login_name: str) -> bool:
        return await self._with_login("amifollowedby(@v)", login_name).get_async()

    @traced(name="profiles_am_i_following", run_type="sharepoint", hide_input=True)
    def am_i_following(self, login_name: str) -> bool:
        """Whether the current user is following the specified user.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("amifollowing(@v)", login_name).get()

    @traced(name="profiles_am_i_following", run_type="sharepoint", hide_input=True)
    async def am_i_following_async(self, login_name: str) -> bool:
        return await self._with_login("amifollowing(@v)", login_name).get_async()

    @traced(name="profiles_get_followed_tags", run_type="sharepoint")
    def get_followed_tags(self, max_count: int = 20) -> List[str]:
        """Get the tags the current user is following.

        Args:
            max_count: The maximum number of tags to retrieve.
        """
        return self.clone(Profiles, f"getfollowedtags({max_count})").get()

    @traced(name="profiles_get_followed_tags", run_type="sharepoint")
    async def get_followed_tags_async(self, max_count: int = 20) -> List[str]:
        return await self.clone(Profiles, f"getfollowedtags({max_count})").get_async()

    @traced(name="profiles_get_followers_for", run_type="sharepoint", hide_input=True)
    def get_followers_for(self, login_name: str) -> List[Dict[str, Any]]:
        """Get the people who are following the specified user.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("getfollowersfor(@v)", login_name).get()

    @traced(name="profiles_get_followers_for", run_type="sharepoint", hide_input=True)
    async def get_followers_for_async(self, login_name: str) -> List[Dict[str, Any]]:
        return await self._with_login("getfollowersfor(@v)", login_name).get_async()

    @property
    def my_followers(self) -> SharePointQueryableCollection:
        """Builder for the people who are following the current user."""
        return self.clone(SharePointQueryableCollection, "getmyfollowers")

    @property
    def my_properties(self) -> "Profiles":
        """Builder for the current user's properties."""
        return self.clone(Profiles, "getmyproperties")

    @traced(
        name="profiles_get_people_followed_by", run_type="sharepoint", hide_input=True
    )
    def get_people_followed_by(self, login_name: str) -> List[Dict[str, Any]]:
        """Get the people the specified user is following.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("getpeoplefollowedby(@v)", login_name).get()

    @traced(
        name="profiles_get_people_followed_by", run_type="sharepoint", hide_input=True
    )
    async def get_people_followed_by_async(
        self, login_name: str
    ) -> List[Dict[str, Any]]:
        return await self._with_login("getpeoplefollowedby(@v)", login_name).get_async()

    @traced(name="profiles_get_properties_for", run_type="sharepoint", hide_input=True)
    def get_properties_for(self, login_name: str) -> Dict[str, Any]:
        """Get the user properties of the specified user.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("getpropertiesfor(@v)", login_name).get()

    @traced(name="profiles_get_properties_for", run_type="sharepoint", hide_input=True)
    async def get_properties_for_async(self, login_name: str) -> Dict[str, Any]:
        return await self._with_login("getpropertiesfor(@v)", login_name).get_async()

    @traced(name="profiles_trending_tags", run_type="sharepoint")
    def trending_tags(self) -> HashTagCollection:
        """The 20 most popular hash tags over the past week, most popular first."""
        q = self.clone(Profiles, None)
        q.concat(".gettrendingtags")
        return q.get(model=HashTagCollection)

    @traced(name="profiles_trending_tags", run_type="sharepoint")
    async def trending_tags_async(self) -> HashTagCollection:
        q = self.clone(Profiles, None)
        q.concat(".gettrendingtags")
        return await q.get_async(model=HashTagCollection)

    def _user_profile_property_query(
        self, login_name: str, property_name: str
    ) -> "Profiles":
        return self._with_login(
            f"getuserprofilepropertyfor(accountname=@v, propertyname='{property_name}')",
            login_name,
        )

    @traced(
        name="profiles_get_user_profile_property_for",
        run_type="sharepoint",
        hide_input=True,
    )
    def get_user_profile_property_for(self, login_name: str, property_name: str) -> str:
        """Get a single user profile property for the specified user.

        Args:
            login_name: The account name of the user.
            property_name: The case-sensitive name of the property to get.
        """
        return self._user_profile_property_query(login_name, property_name).get()

    @traced(
        name="profiles_get_user_profile_property_for",
        run_type="sharepoint",
        hide_input=True,
    )
    async def get_user_profile_property_for_async(
        self, login_name: str, property_name: str
    ) -> str:
        return await self._user_profile_property_query(
            login_name, property_name
        ).get_async()

    @traced(name="profiles_hide_suggestion", run_type="sharepoint", hide_input=True)
    def hide_suggestion(self, login_name: str) -> None:
        """Remove the specified user from the current user's suggestions.

        Args:
            login_name: The account name of the user.
        """
        return self._with_login("hidesuggestion(@v)", login_name).post()

    @traced(name="profiles_hide_suggestion", run_type="sharepoint", hide_input=True)
    async def hide_suggestion_async(self, login_name: str) -> None:
        return await self._with_login("hidesuggestion(@v)", login_name).post_async()

    def _is_following_query(self, follower: str, followee: str) -> "Profiles":
        q = self.clone(Profiles, None)
        q.concat(
            ".isfollowing(possiblefolloweraccountname=@v, possiblefolloweeaccountname=@y)"
        )
        q.query.set("@v", quoted_literal(follower))
        q.query.set("@y", quoted_literal(followee))
        return q

    @traced(name="profiles_is_following", run_type="sharepoint", hide_input=True)
    def is_following(self, follower: str, followee: str) -> bool:
        """Whether the first user is following the second user.

        Args:
            follower: The account name of the user who might be following.
            followee: The account name of the user who might be followed.
        """
        return self._is_following_query(follower, followee).get()

    @traced(name="profiles_is_following", run_type="sharepoint", hide_input=True)
    async def is_following_async(self, follower: str, followee: str) -> bool:
        return await self._is_following_query(follower, followee).get_async()

    @traced(name="profiles_set_my_profile_pic", run_type="sharepoint", hide_input=True)
    def set_my_profile_pic(self, picture: bytes) -> None:
        """Upload and set the current user's profile picture.

        Users can only change their own picture. Never batched.

        Args:
            picture: BMP, JPEG or PNG image data, up to 4.76MB.
        """
        request = Profiles(self, "setmyprofilepicture")
        return request.post(
            content=picture,
            headers={HEADER_CONTENT_TYPE: "application/octet-stream"},
        )

    @traced(name="profiles_set_my_profile_pic", run_type="sharepoint", hide_input=True)
    async def set_my_profile_pic_async(self, picture: bytes) -> None:
        request = Profiles(self, "setmyprofilepicture")
        return await request.post_async(
            content=picture,
            headers={HEADER_CONTENT_TYPE: "application/octet-stream"},
        )

    @traced(
        name="profiles_set_single_value_profile_property",
        run_type="sharepoint",
        hide_input=True,
    )
    def set_single_value_profile_property(
        self, account_name: str, property_name: str, property_value: str
    ) -> None:
        """Set a single valued user profile property.

        Args:
            account_name: The account name of the user.
            property_name: Property name.
            property_value: Property value.
        """
        return self.clone(Profiles, "SetSingleValueProfileProperty").post(
            {
                "accountName": account_name,
                "propertyName": property_name,
                "propertyValue": property_value,
            }
        )

    @traced(
        name="profiles_set_single_value_profile_property",
        run_type="sharepoint",
        hide_input=True,
    )
    async def set_single_value_profile_property_async(
        self, account_name: str, property_name: str, property_value: str
    ) -> None:
        return await self.clone(Profiles, "SetSingleValueProfileProperty").post_async(
            {
                "accountName": account_name,
                "propertyName": property_name,
                "propertyValue": property_value,
            }
        )

    @traced(
        name="profiles_set_multi_valued_profile_property",
        run_type="sharepoint",
        hide_input=True,
    )
    def set_multi_valued_profile_property(
        self, account_name: str, property_name: str, property_values: List[str]
    ) -> None:
        """Set a multi valued user profile property.

        Args:
            account_name: The account name of the user.
            property_name: Property name.
            property_values: Property values.
        """
        return self.clone(Profiles, "SetMultiValuedProfileProperty").post(
            {
                "accountName": account_name,
                "propertyName": property_name,
                "propertyValues": list(property_values),
            }
        )

    @traced(
        name="profiles_set_multi_valued_profile_property",
        run_type="sharepoint",
        hide_input=True,
    )
    async def set_multi_valued_profile_property_async(
        self, account_name: str, property_name: str, property_values: List[str]
    ) -> None:
        return await self.clone(Profiles, "SetMultiValuedProfileProperty").post_async(
            {
                "accountName": account_name,
                "propertyName": property_name,
                "propertyValues": list(property_values),
            }
        )

    def create_personal_site_enqueue_bulk(self, *emails: str) -> None:
        """Provision personal sites for the given users (My Site admins only)."""
        return self._profile_loader.create_personal_site_enqueue_bulk(list(emails))

    async def create_personal_site_enqueue_bulk_async(self, *emails: str) -> None:
        return await self._profile_loader.create_personal_site_enqueue_bulk_async(
            list(emails)
        )

    def owner_user_profile(self) -> UserProfile:
        """Get the user profile of the site owner."""
        return self._profile_loader.owner_user_profile()

    async def owner_user_profile_async(self) -> UserProfile:
        return await self._profile_loader.owner_user_profile_async()

    def user_profile(self) -> Dict[str, Any]:
        """Get the user profile of the current user."""
        return self._profile_loader.user_profile()

    async def user_profile_async(self) -> Dict[str, Any]:
        return await self._profile_loader.user_profile_async()

    def create_personal_site(self, interactive_request: bool = False) -> None:
        """Enqueue creating a personal site for the current user."""
        return self._profile_loader.create_personal_site(interactive_request)

    async def create_personal_site_async(
        self, interactive_request: bool = False
    ) -> None:
        return await self._profile_loader.create_personal_site_async(interactive_request)

    def share_all_social_data(self, share: bool) -> None:
        """Make all of the current user's social data public or private."""
        return self._profile_loader.share_all_social_data(share)

    async def share_all_social_data_async(self, share: bool) -> None:
        return await self._profile_loader.share_all_social_data_async(share)

    def client_people_picker_resolve_user(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> PeoplePickerEntity:
        """Resolve a user or group using the people picker."""
        return self._client_people_picker_query.client_people_picker_resolve_user(
            query_params
        )

    async def client_people_picker_resolve_user_async(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> PeoplePickerEntity:
        return await self._client_people_picker_query.client_people_picker_resolve_user_async(
            query_params
        )

    def client_people_picker_search_user(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> List[PeoplePickerEntity]:
        """Search for users or groups using the people picker."""
        return self._client_people_picker_query.client_people_picker_search_user(
            query_params
        )

    async def client_people_picker_search_user_async(
        self, query_params: ClientPeoplePickerQueryParameters
    ) -> List[PeoplePickerEntity]:
        return await self._client_people_picker_query.client_people_picker_search_user_async(
            query_params
        )
