import asyncio
import re
from typing import (
    Any,
    Callable,
    ClassVar,
    Dict,
    Optional,
    TypeVar,
    Union,
)

from .._utils import (
    Endpoint,
    QueryParams,
    RequestSpec,
    body as wrap_body,
    combine,
    validate_relative_path,
)
from .._utils.constants import CONTENT_TYPE_VERBOSE, HEADER_CONTENT_TYPE, TARGET_ALIAS
from ._base_service import BaseService
from ._batch import Batch, then

Q = TypeVar("Q", bound="SharePointQueryable")

Base = Union[str, "SharePointQueryable"]
QueryableFactory = Callable[[Base, Optional[str]], Q]

_ABSOLUTE_URL = re.compile(r"^(https?:)?//", re.IGNORECASE)

# marks "no path given" so None can mean "append nothing"
_USE_DEFAULT: Any = object()


class SharePointQueryable:
    """Composes one SharePoint REST request through chained calls.

    A builder is rooted either at a url string or at another builder. Its path
    is fixed at construction (apart from :meth:`concat`), while its query
    parameters are its own: deriving a builder with :meth:`clone` copies the
    resolved path as a prefix and starts a fresh parameter map, so parents are
    never affected by what is set on their clones.

    Subclasses describe endpoint groups. They set :attr:`default_path`, used
    when no path is passed to the constructor, and add methods that clone
    themselves onto vendor endpoints before calling :meth:`get` or
    :meth:`post`.

    Examples:
        ```python
        q = SharePointQueryable("https://contoso.sharepoint.com/sites/dev", "_api/web")
        lists = q.clone(SharePointQueryableCollection, "lists").top(5)
        lists.to_url_and_query()
        # 'https://contoso.sharepoint.com/sites/dev/_api/web/lists?$top=5'
        ```
    """

    default_path: ClassVar[Optional[str]] = None

    def __init__(
        self,
        base: Base,
        path: Optional[str] = _USE_DEFAULT,
        *,
        service: Optional[BaseService] = None,
    ) -> None:
        if path is _USE_DEFAULT:
            path = self.default_path
        path = validate_relative_path(path)

        self.query = QueryParams()
        self._batch: Optional[Batch] = None
        self._headers: Dict[str, str] = {}

        if isinstance(base, SharePointQueryable):
            self._parent_url = base.to_url()
            self._url = Endpoint(combine(self._parent_url, path))
            self._service = service or base._service
            self._headers = dict(base._headers)
            if base.query.has(TARGET_ALIAS):
                self.query.set(TARGET_ALIAS, base.query.get(TARGET_ALIAS))  # type: ignore[arg-type]
        else:
            self._parent_url, url = self._split_url(base, path)
            self._url = Endpoint(url)
            self._service = service

    @staticmethod
    def _split_url(base: str, path: Optional[str]) -> tuple[str, str]:
        if _ABSOLUTE_URL.match(base) or "/" not in base:
            return base, combine(base, path)

        slash = base.rfind("/")
        paren = base.rfind("(")
        if slash > paren:
            # .../items(19)/fields
            parent = base[:slash]
            return parent, combine(parent, base[slash:], path)

        # .../items(19)
        return base[:paren], combine(base, path)

    @property
    def parent_url(self) -> str:
        return self._parent_url

    @property
    def has_batch(self) -> bool:
        return self._batch is not None

    @property
    def batch(self) -> Optional[Batch]:
        return self._batch

    @property
    def service(self) -> Optional[BaseService]:
        return self._service

    def to_url(self) -> str:
        return str(self._url)

    def to_url_and_query(self) -> str:
        """The finalized url, query string included.

        Raises:
            SubstitutionError: If an ``@name`` placeholder has no parameter.
        """
        return self.to_request_spec("GET").build_url()

    def configure(self, headers: Dict[str, str]) -> "SharePointQueryable":
        """Add headers sent with this builder's requests and its clones'."""
        self._headers.update(headers)
        return self

    def configure_from(self: Q, other: "SharePointQueryable") -> Q:
        self._service = other._service
        self._headers = dict(other._headers)
        return self

    def clone(
        self,
        factory: QueryableFactory[Q],
        path: Optional[str] = None,
        keep_batch: bool = True,
    ) -> Q:
        """Derive a builder whose url is this one's plus ``path``.

        Args:
            factory: Builds the new instance from ``(base, path)``; usually the
                endpoint-group class itself.
            path: Relative path to append, or None to keep the url as is.
            keep_batch: Attach the clone to this builder's batch, if any.

        Raises:
            ConstructionError: If ``path`` is not a valid relative path.
        """
        clone = factory(self, path)
        clone.configure_from(self)
        if keep_batch and self._batch is not None:
            clone = clone.in_batch(self._batch)
        return clone

    def get_parent(
        self,
        factory: QueryableFactory[Q],
        parent_url: Optional[str] = None,
        path: Optional[str] = None,
        batch: Optional[Batch] = None,
    ) -> Q:
        """Derive a sibling builder rooted at ``parent_url`` instead of this url.

        Args:
            factory: Builds the new instance from ``(base, path)``.
            parent_url: Root for the new builder, defaults to this builder's
                parent url.
            path: Relative path appended to ``parent_url``.
            batch: Batch to attach the new builder to.
        """
        parent = factory(parent_url if parent_url is not None else self._parent_url, path)
        parent.configure_from(self)
        if self.query.has(TARGET_ALIAS):
            parent.query.set(TARGET_ALIAS, self.query.get(TARGET_ALIAS))  # type: ignore[arg-type]
        if batch is not None:
            parent = parent.in_batch(batch)
        return parent

    def concat(self: Q, suffix: str) -> Q:
        """Append ``suffix`` to the url with no separator.

        Used for dotted method calls such as ``.gettrendingtags``. Concat
        before setting the parameters that belong to the concatenated call.
        """
        self._url = self._url.concat(suffix)
        return self

    def in_batch(self: Q, batch: Batch) -> Q:
        if self._batch is not None:
            raise ValueError("This query is already part of a batch.")
        self._batch = batch
        return self

    def select(self: Q, *fields: str) -> Q:
        if fields:
            self.query.set("$select", ",".join(fields))
        return self

    def expand(self: Q, *fields: str) -> Q:
        if fields:
            self.query.set("$expand", ",".join(fields))
        return self

    def to_request_spec(
        self,
        method: str,
        body: Any = None,
        *,
        content: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> RequestSpec:
        spec_headers = {**self._headers, **(headers or {})}
        json_body = None
        if body is not None:
            json_body = wrap_body(body)
            spec_headers.setdefault(HEADER_CONTENT_TYPE, CONTENT_TYPE_VERBOSE)

        return RequestSpec(
            method=method,
            endpoint=self._url,
            params=self.query.to_dict(),
            headers=spec_headers,
            json=json_body,
            content=content,
        )

    def get(
        self,
        model: Optional[Any] = None,
        *,
        parser: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        """Send a GET for this url.

        Returns the unwrapped response body, validated against ``model`` when
        given. When the builder is part of a batch, the request is queued and
        a :class:`concurrent.futures.Future` for the result is returned.
        """
        return self._invoke(self.to_request_spec("GET"), model, parser)

    async def get_async(
        self,
        model: Optional[Any] = None,
        *,
        parser: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        return await self._invoke_async(self.to_request_spec("GET"), model, parser)

    def post(
        self,
        body: Any = None,
        model: Optional[Any] = None,
        *,
        content: Any = None,
        headers: Optional[Dict[str, str]] = None,
        parser: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        spec = self.to_request_spec("POST", body, content=content, headers=headers)
        return self._invoke(spec, model, parser)

    async def post_async(
        self,
        body: Any = None,
        model: Optional[Any] = None,
        *,
        content: Any = None,
        headers: Optional[Dict[str, str]] = None,
        parser: Optional[Callable[[Any], Any]] = None,
    ) -> Any:
        spec = self.to_request_spec("POST", body, content=content, headers=headers)
        return await self._invoke_async(spec, model, parser)

    @property
    def _component(self) -> str:
        return type(self).__name__

    def _require_service(self) -> BaseService:
        if self._service is None:
            raise RuntimeError(
                f"{self._component} for '{self._url}' is not bound to a SharePoint client"
            )
        return self._service

    def _invoke(
        self,
        spec: RequestSpec,
        model: Optional[Any],
        parser: Optional[Callable[[Any], Any]],
    ) -> Any:
        if self._batch is not None:
            future = self._batch.attach(spec, model, component=self._component)
            return then(future, parser) if parser else future

        result = self._require_service().execute(
            spec, model, component=self._component
        )
        return parser(result) if parser else result

    async def _invoke_async(
        self,
        spec: RequestSpec,
        model: Optional[Any],
        parser: Optional[Callable[[Any], Any]],
    ) -> Any:
        if self._batch is not None:
            future = self._batch.attach(spec, model, component=self._component)
            return asyncio.wrap_future(then(future, parser) if parser else future)

        result = await self._require_service().execute_async(
            spec, model, component=self._component
        )
        return parser(result) if parser else result

    def __str__(self) -> str:
        return self.to_url()

    def __repr__(self) -> str:
        return f"{self._component}({self.to_url()!r})"


class SharePointQueryableCollection(SharePointQueryable):
    """Builder for endpoints that return a list of entities."""

    def filter(self: Q, expression: str) -> Q:
        self.query.set("$filter", expression)
        return self

    def orderby(self: Q, field: str, ascending: bool = True) -> Q:
        clause = f"{field} {'asc' if ascending else 'desc'}"
        existing = self.query.get("$orderby")
        self.query.set("$orderby", f"{existing},{clause}" if existing else clause)
        return self

    def top(self: Q, count: int) -> Q:
        self.query.set("$top", str(count))
        return self

    def skip(self: Q, count: int) -> Q:
        self.query.set("$skip", str(count))
        return self

