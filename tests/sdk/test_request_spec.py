import pytest

from sprest._utils import Endpoint, QueryParams, RequestSpec
from sprest.models import SubstitutionError

BASE = "https://contoso.sharepoint.com/_api/sp.userprofiles.peoplemanager"


def _spec(path: str, **params: str) -> RequestSpec:
    return RequestSpec(method="GET", endpoint=Endpoint(path), params=params)


class TestBuildUrl:
    def test_no_params(self):
        assert _spec(f"{BASE}/EditProfileLink").build_url() == f"{BASE}/EditProfileLink"

    def test_params_are_appended_verbatim_in_insertion_order(self):
        spec = _spec(f"{BASE}/getmyfollowers", **{"$top": "5", "$select": "Title,Email"})
        assert spec.build_url() == f"{BASE}/getmyfollowers?$top=5&$select=Title,Email"

    def test_alias_placeholder_is_resolved(self):
        spec = _spec(f"{BASE}/amifollowing(@v)", **{"@v": "'alice'"})
        assert spec.build_url() == f"{BASE}/amifollowing(@v)?@v='alice'"

    def test_multiple_placeholders(self):
        spec = _spec(
            f"{BASE}.isfollowing(possiblefolloweraccountname=@v, possiblefolloweeaccountname=@y)",
            **{"@v": "'a'", "@y": "'b'"},
        )
        assert spec.build_url().endswith("?@v='a'&@y='b'")

    def test_missing_placeholder_raises(self):
        spec = _spec(f"{BASE}/amifollowing(@v)")

        with pytest.raises(SubstitutionError) as exc_info:
            spec.build_url()

        assert exc_info.value.missing == ["@v"]
        assert exc_info.value.url == f"{BASE}/amifollowing(@v)"
        assert "@v" in str(exc_info.value)

    def test_reports_every_missing_placeholder_once(self):
        spec = _spec(f"{BASE}.isfollowing(a=@v, b=@y, c=@v)")

        with pytest.raises(SubstitutionError) as exc_info:
            spec.build_url()

        assert exc_info.value.missing == ["@v", "@y"]

    def test_construction_does_not_validate(self):
        # only building the url checks placeholders
        spec = _spec(f"{BASE}/getfollowersfor(@v)")
        spec.params["@v"] = "'bob'"
        assert spec.build_url() == f"{BASE}/getfollowersfor(@v)?@v='bob'"

    def test_at_sign_inside_literal_is_not_a_placeholder(self):
        spec = _spec(f"{BASE}/getpropertiesfor('alice@contoso.com')")
        assert spec.build_url() == f"{BASE}/getpropertiesfor('alice@contoso.com')"

    def test_separator_and_alias_inside_literal_is_not_a_placeholder(self):
        url = "https://contoso.sharepoint.com/_api/web/lists/getbytitle('R&D, @home')"
        assert _spec(url).build_url() == url

    def test_literal_next_to_bound_placeholder(self):
        spec = _spec(
            f"{BASE}/getuserprofilepropertyfor(accountname=@v, propertyname='a=@b')",
            **{"@v": "'alice'"},
        )
        assert spec.build_url().endswith("propertyname='a=@b')?@v='alice'")

    def test_escaped_quote_does_not_end_literal(self):
        url = f"{BASE}/getpropertiesfor('it''s (@x')"
        assert _spec(url).build_url() == url

    def test_placeholder_after_literal_is_still_checked(self):
        spec = _spec(f"{BASE}.isfollowing(a='x, @y', b=@v)")

        with pytest.raises(SubstitutionError) as exc_info:
            spec.build_url()

        assert exc_info.value.missing == ["@v"]

    def test_aliased_literal_is_lifted_into_query(self):
        spec = _spec(f"{BASE}/getfollowersfor('!@p1::i:0#.f|membership|bob')")
        assert (
            spec.build_url()
            == f"{BASE}/getfollowersfor(@p1)?@p1='i:0#.f|membership|bob'"
        )

    def test_does_not_mutate_params(self):
        spec = _spec(f"{BASE}/getfollowersfor('!@p1::bob')")
        spec.build_url()
        assert spec.params == {}

    def test_existing_query_string_is_extended(self):
        spec = _spec(f"{BASE}/x?a=1", b="2")
        assert spec.build_url() == f"{BASE}/x?a=1&b=2"


class TestQueryParams:
    def test_set_get_has_delete(self):
        params = QueryParams()
        assert params.set("$top", "5") is params
        assert params.get("$top") == "5"
        assert params.has("$top")
        assert "$top" in params

        params.delete("$top")
        assert not params.has("$top")
        assert params.get("$top", "default") == "default"

    def test_delete_missing_is_noop(self):
        params = QueryParams()
        params.delete("@v")
        assert len(params) == 0

    def test_copy_is_independent(self):
        params = QueryParams({"@v": "'a'"})
        copy = params.copy()
        copy.set("@y", "'b'")
        assert list(params) == ["@v"]
        assert copy.to_dict() == {"@v": "'a'", "@y": "'b'"}

    def test_preserves_insertion_order(self):
        params = QueryParams().set("b", "1").set("a", "2")
        assert list(params.items()) == [("b", "1"), ("a", "2")]
