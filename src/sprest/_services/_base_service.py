import asyncio
import random
import time
from datetime import datetime
from email.utils import parsedate_to_datetime
from logging import getLogger
from typing import Any, Dict, Optional, Union

from httpx import (
    URL,
    AsyncClient,
    Client,
    ConnectTimeout,
    Headers,
    HTTPStatusError,
    Response,
    TimeoutException,
)
from pydantic import TypeAdapter
from tenacity import (
    retry,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from .._config import Config
from .._utils import RequestSpec, client_tag_value, parse_odata_json
from .._utils._ssl_context import get_httpx_client_kwargs
from .._utils.constants import ACCEPT_NOMETADATA, HEADER_CLIENT_TAG
from ..models.exceptions import EnrichedException

RETRYABLE_STATUS_CODES = (502, 503, 504)

_DEFAULT_RETRY_AFTER = 1.0


def is_retryable_exception(exception: BaseException) -> bool:
    if isinstance(exception, (ConnectTimeout, TimeoutException)):
        return True
    return (
        isinstance(exception, EnrichedException)
        and exception.status_code in RETRYABLE_STATUS_CODES
    )


class BaseService:
    """HTTP executor shared by every request builder.

    Owns the httpx clients, sends finalized request specs and unwraps the
    OData response bodies.
    """

    MAX_RETRIES = 3

    def __init__(self, config: Config) -> None:
        self._logger = getLogger("sprest")
        self._config = config

        default_client_kwargs = get_httpx_client_kwargs(self._config.timeout)

        client_kwargs = {
            **default_client_kwargs,  # SSL, proxy, timeout, redirects
            "base_url": self._config.base_url,
            "headers": Headers(self.default_headers),
        }

        self._client = Client(**client_kwargs)
        self._client_async = AsyncClient(**client_kwargs)

        super().__init__()

    @property
    def base_url(self) -> str:
        return self._config.base_url

    @staticmethod
    def _parse_retry_after(headers: Headers) -> float:
        """Seconds to wait as told by a ``Retry-After`` header.

        The header holds either delta-seconds or an HTTP date (RFC 7231).
        Falls back to one second when it is missing or unreadable, and never
        returns a negative delay.
        """
        value = headers.get("Retry-After")
        if not value:
            return _DEFAULT_RETRY_AFTER

        try:
            return max(float(value), 0.0)
        except ValueError:
            pass

        try:
            when = parsedate_to_datetime(value)
        except (ValueError, TypeError):
            return _DEFAULT_RETRY_AFTER
        return max((when - datetime.now(when.tzinfo)).total_seconds(), 0.0)

    def _throttle_delay(self, response: Response, attempt: int) -> Optional[float]:
        """Delay before re-sending a throttled request, None to give up."""
        if response.status_code != 429 or attempt >= self.MAX_RETRIES:
            return None

        delay = self._parse_retry_after(response.headers)
        delay += random.uniform(0, 0.1 * delay)
        self._logger.warning(
            f"Rate limited (429). Retrying after {delay:.2f}s "
            f"(attempt {attempt + 1}/{self.MAX_RETRIES})"
        )
        return delay

    def _prepare_headers(self, kwargs: Dict[str, Any], component: str) -> None:
        headers = dict(kwargs.get("headers") or {})
        headers[HEADER_CLIENT_TAG] = client_tag_value(component)
        kwargs["headers"] = headers

    @retry(
        retry=retry_if_exception(is_retryable_exception),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(MAX_RETRIES),
        reraise=True,
    )
    def request(
        self,
        method: str,
        url: Union[URL, str],
        *,
        component: str = "",
        **kwargs: Any,
    ) -> Response:
        """Send one request, waiting out 429 throttling.

        Gateway errors (502-504) and timeouts are retried with exponential
        backoff; any other non-2xx status raises :class:`EnrichedException`.
        """
        self._logger.debug(f"Request: {method} {url}")
        self._prepare_headers(kwargs, component)

        attempt = 0
        while True:
            response = self._client.request(method, url, **kwargs)
            delay = self._throttle_delay(response, attempt)
            if delay is None:
                break
            response.close()
            time.sleep(delay)
            attempt += 1

        try:
            response.raise_for_status()
        except HTTPStatusError as e:
            response.close()
            raise EnrichedException(e) from e
        return response

    @retry(
        retry=retry_if_exception(is_retryable_exception),
        wait=wait_exponential(multiplier=1, min=1, max=10),
        stop=stop_after_attempt(MAX_RETRIES),
        reraise=True,
    )
    async def request_async(
        self,
        method: str,
        url: Union[URL, str],
        *,
        component: str = "",
        **kwargs: Any,
    ) -> Response:
        self._logger.debug(f"Request: {method} {url}")
        self._prepare_headers(kwargs, component)

        attempt = 0
        while True:
            response = await self._client_async.request(method, url, **kwargs)
            delay = self._throttle_delay(response, attempt)
            if delay is None:
                break
            await response.aclose()
            await asyncio.sleep(delay)
            attempt += 1

        try:
            response.raise_for_status()
        except HTTPStatusError as e:
            await response.aclose()
            raise EnrichedException(e) from e
        return response

    def execute(
        self, spec: RequestSpec, model: Optional[Any] = None, *, component: str = ""
    ) -> Any:
        """Send a request spec and return its parsed, unwrapped body.

        Args:
            spec: The request to send. Its url is finalized here, so missing
                placeholder parameters raise :class:`SubstitutionError` now.
            model: Optional type (pydantic model, ``List[...]``) to validate
                the unwrapped body against.
            component: Name of the calling builder, sent in the client tag.
        """
        url = spec.build_url()
        response = self.request(
            spec.method, url, component=component, **self._request_kwargs(spec)
        )
        return self._parse_response(response, model)

    async def execute_async(
        self, spec: RequestSpec, model: Optional[Any] = None, *, component: str = ""
    ) -> Any:
        url = spec.build_url()
        response = await self.request_async(
            spec.method, url, component=component, **self._request_kwargs(spec)
        )
        return self._parse_response(response, model)

    def _request_kwargs(self, spec: RequestSpec) -> Dict[str, Any]:
        kwargs: Dict[str, Any] = {"headers": dict(spec.headers)}
        if spec.json is not None:
            kwargs["json"] = spec.json
        if spec.content is not None:
            kwargs["content"] = spec.content
        if spec.timeout is not None:
            kwargs["timeout"] = spec.timeout
        return kwargs

    def _parse_response(self, response: Response, model: Optional[Any]) -> Any:
        if response.status_code == 204 or not response.content:
            return None

        if "json" not in response.headers.get("content-type", "json"):
            return response.text

        payload = parse_odata_json(response.json())
        if model is None or payload is None:
            return payload

        return TypeAdapter(model).validate_python(payload)

    @property
    def default_headers(self) -> dict[str, str]:
        return {
            "Accept": ACCEPT_NOMETADATA,
            **self.auth_headers,
            **self.custom_headers,
        }

    @property
    def auth_headers(self) -> dict[str, str]:
        header = f"Bearer {self._config.secret}"
        return {"Authorization": header}

    @property
    def custom_headers(self) -> dict[str, str]:
        return {}
