import json
from datetime import datetime, timedelta, timezone
from typing import List
from unittest.mock import patch

import httpx
import pytest
from httpx import Headers
from pydantic import BaseModel
from pytest_httpx import HTTPXMock

from sprest._services import BaseService
from sprest._services._base_service import is_retryable_exception
from sprest._utils import Endpoint, RequestSpec
from sprest._utils.constants import HEADER_CLIENT_TAG
from sprest.models import EnrichedException, SubstitutionError


class Person(BaseModel):
    Title: str


def _spec(base_url: str, path: str, method: str = "GET", **kwargs) -> RequestSpec:
    return RequestSpec(method=method, endpoint=Endpoint(f"{base_url}/{path}"), **kwargs)


class TestBaseService:
    def test_init_base_service(self, service: BaseService):
        assert service is not None

    def test_base_service_default_headers(self, service: BaseService, secret: str):
        assert service.default_headers == {
            "Accept": "application/json;odata=nometadata",
            "Authorization": f"Bearer {secret}",
        }

    def test_base_url(self, service: BaseService, base_url: str):
        assert service.base_url == base_url

    class TestRequest:
        def test_simple_request(
            self,
            httpx_mock: HTTPXMock,
            service: BaseService,
            base_url: str,
            version: str,
            secret: str,
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=200,
                json={"test": "test"},
            )

            response = service.request("GET", "/_api/web", component="Web")

            sent_request = httpx_mock.get_request()
            if sent_request is None:
                raise Exception("No request was sent")

            assert sent_request.method == "GET"
            assert sent_request.url == f"{base_url}/_api/web"

            assert (
                sent_request.headers[HEADER_CLIENT_TAG]
                == f"SpRest.Python/Web/{version}"
            )
            assert sent_request.headers["Authorization"] == f"Bearer {secret}"
            assert sent_request.headers["Accept"] == "application/json;odata=nometadata"

            assert response.status_code == 200
            assert response.json() == {"test": "test"}

        def test_error_is_enriched(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=404,
                json={
                    "odata.error": {
                        "code": "-1, Microsoft.SharePoint.Client.ResourceNotFoundException",
                        "message": {"lang": "en-US", "value": "Cannot find resource."},
                    }
                },
            )

            with pytest.raises(EnrichedException) as exc_info:
                service.request("GET", "/_api/web")

            error = exc_info.value
            assert error.status_code == 404
            assert error.http_method == "GET"
            assert error.url == f"{base_url}/_api/web"
            assert error.error_code == (
                "-1, Microsoft.SharePoint.Client.ResourceNotFoundException"
            )
            assert error.error_message == "Cannot find resource."
            assert "Cannot find resource." in str(error)
            assert isinstance(error, httpx.HTTPStatusError)

        def test_error_without_odata_payload(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web", status_code=403, text="Access denied"
            )

            with pytest.raises(EnrichedException) as exc_info:
                service.request("GET", "/_api/web")

            assert exc_info.value.error_message is None
            assert "Access denied" in str(exc_info.value)

    class TestRequestAsync:
        @pytest.mark.anyio
        async def test_simple_request_async(
            self,
            httpx_mock: HTTPXMock,
            service: BaseService,
            base_url: str,
            version: str,
            secret: str,
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=200,
                json={"test": "test"},
            )

            response = await service.request_async("GET", "/_api/web", component="Web")

            sent_request = httpx_mock.get_request()
            if sent_request is None:
                raise Exception("No request was sent")

            assert sent_request.method == "GET"
            assert (
                sent_request.headers[HEADER_CLIENT_TAG]
                == f"SpRest.Python/Web/{version}"
            )
            assert sent_request.headers["Authorization"] == f"Bearer {secret}"
            assert response.json() == {"test": "test"}

    class TestParseRetryAfter:
        def test_parse_retry_after_with_seconds(self, service: BaseService):
            assert service._parse_retry_after(Headers({"Retry-After": "5"})) == 5.0

        def test_parse_retry_after_with_date(self, service: BaseService):
            future = datetime.now(timezone.utc) + timedelta(seconds=30)
            headers = Headers(
                {"Retry-After": future.strftime("%a, %d %b %Y %H:%M:%S GMT")}
            )
            assert 25 <= service._parse_retry_after(headers) <= 30

        def test_parse_retry_after_with_past_date(self, service: BaseService):
            headers = Headers({"Retry-After": "Wed, 21 Oct 2015 07:28:00 GMT"})
            assert service._parse_retry_after(headers) == 0.0

        def test_parse_retry_after_missing(self, service: BaseService):
            assert service._parse_retry_after(Headers({})) == 1.0

        def test_parse_retry_after_invalid(self, service: BaseService):
            assert service._parse_retry_after(Headers({"Retry-After": "soon"})) == 1.0

        def test_parse_retry_after_negative(self, service: BaseService):
            assert service._parse_retry_after(Headers({"Retry-After": "-3"})) == 0.0

    class TestRequest429Retry:
        def test_429_retry_with_numeric_retry_after(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=429,
                headers={"Retry-After": "1"},
            )
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=200,
                json={"test": "success"},
            )

            with (
                patch("time.sleep") as mock_sleep,
                patch("random.uniform", return_value=0.05),
            ):
                response = service.request("GET", "/_api/web")

            assert response.status_code == 200
            mock_sleep.assert_called_once()
            assert 1.0 <= mock_sleep.call_args[0][0] <= 1.1

        def test_429_max_retries_exceeded(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            # initial attempt plus MAX_RETRIES
            for _ in range(4):
                httpx_mock.add_response(
                    url=f"{base_url}/_api/web",
                    status_code=429,
                    headers={"Retry-After": "1"},
                )

            with (
                patch("time.sleep") as mock_sleep,
                patch("random.uniform", return_value=0.05),
            ):
                with pytest.raises(EnrichedException) as exc_info:
                    service.request("GET", "/_api/web")

            assert exc_info.value.status_code == 429
            assert mock_sleep.call_count == 3

        def test_429_retry_logs_warning(
            self,
            httpx_mock: HTTPXMock,
            service: BaseService,
            base_url: str,
            caplog: pytest.LogCaptureFixture,
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=429,
                headers={"Retry-After": "2"},
            )
            httpx_mock.add_response(url=f"{base_url}/_api/web", json={})

            with (
                caplog.at_level("WARNING", logger="sprest"),
                patch("time.sleep"),
                patch("random.uniform", return_value=0.1),
            ):
                service.request("GET", "/_api/web")

            assert any(
                "Rate limited (429)" in record.message for record in caplog.records
            )

        @pytest.mark.anyio
        async def test_429_retry_async(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/web",
                status_code=429,
                headers={"Retry-After": "0"},
            )
            httpx_mock.add_response(url=f"{base_url}/_api/web", json={"ok": True})

            response = await service.request_async("GET", "/_api/web")

            assert response.json() == {"ok": True}

    class TestRetryableErrors:
        @pytest.mark.parametrize("status_code", [502, 503, 504])
        def test_gateway_errors_are_retried(
            self,
            httpx_mock: HTTPXMock,
            service: BaseService,
            base_url: str,
            status_code: int,
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/web", status_code=status_code)
            httpx_mock.add_response(url=f"{base_url}/_api/web", json={"ok": True})

            with patch("time.sleep"):
                response = service.request("GET", "/_api/web")

            assert response.json() == {"ok": True}

        def test_client_errors_are_not_retried(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/web", status_code=400)

            with pytest.raises(EnrichedException):
                service.request("GET", "/_api/web")

            assert len(httpx_mock.get_requests()) == 1

        def test_is_retryable_exception(self):
            request = httpx.Request("GET", "https://contoso.sharepoint.com")
            assert is_retryable_exception(httpx.ReadTimeout("timeout", request=request))
            assert not is_retryable_exception(ValueError("nope"))

    class TestExecute:
        def test_unwraps_nometadata_value(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/x", json={"value": True})

            assert service.execute(_spec(base_url, "_api/x")) is True

        def test_unwraps_verbose_results(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/x",
                json={"d": {"results": [{"Title": "a"}, {"Title": "b"}]}},
            )

            people = service.execute(_spec(base_url, "_api/x"), List[Person])

            assert people == [Person(Title="a"), Person(Title="b")]

        def test_validates_against_model(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/x", json={"Title": "a"})

            assert service.execute(_spec(base_url, "_api/x"), Person) == Person(Title="a")

        def test_empty_response(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/x", status_code=204)

            assert service.execute(_spec(base_url, "_api/x", "POST"), Person) is None

        def test_text_response(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/x", text="plain")

            assert service.execute(_spec(base_url, "_api/x")) == "plain"

        def test_sends_params_and_json(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(
                url=f"{base_url}/_api/amifollowing(@v)?@v='alice'", json={"value": False}
            )

            spec = _spec(
                base_url,
                "_api/amifollowing(@v)",
                "POST",
                params={"@v": "'alice'"},
                headers={"Content-Type": "application/json;odata=verbose"},
                json={"a": 1},
            )
            assert service.execute(spec, component="Profiles") is False

            sent_request = httpx_mock.get_request()
            assert sent_request is not None
            assert sent_request.headers["Content-Type"] == "application/json;odata=verbose"
            assert json.loads(sent_request.read()) == {"a": 1}

        def test_substitution_error_before_sending(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            with pytest.raises(SubstitutionError):
                service.execute(_spec(base_url, "_api/amifollowing(@v)"))

            assert httpx_mock.get_requests() == []

        @pytest.mark.anyio
        async def test_execute_async(
            self, httpx_mock: HTTPXMock, service: BaseService, base_url: str
        ):
            httpx_mock.add_response(url=f"{base_url}/_api/x", json={"d": {"Title": "a"}})

            result = await service.execute_async(_spec(base_url, "_api/x"), Person)

            assert result == Person(Title="a")
