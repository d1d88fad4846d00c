from concurrent.futures import Future
from dataclasses import dataclass, field
from logging import getLogger
from typing import Any, Callable, List, Optional

from .._utils import RequestSpec
from ._base_service import BaseService

logger = getLogger("sprest")


@dataclass
class _BatchEntry:
    spec: RequestSpec
    model: Optional[Any] = None
    component: str = ""
    future: Future = field(default_factory=Future)


def then(future: Future, fn: Callable[[Any], Any]) -> Future:
    """Return a future resolving to ``fn(result)`` once ``future`` completes.

    Exceptions from either the source future or ``fn`` propagate unchanged,
    and cancelling the source cancels the returned future. A returned future
    cancelled by the caller is left as is.
    """
    chained: Future = Future()

    def _done(source: Future) -> None:
        if chained.done():
            return
        if source.cancelled():
            chained.cancel()
            return
        error = source.exception()
        if error is not None:
            chained.set_exception(error)
            return
        try:
            result = fn(source.result())
        except Exception as e:
            chained.set_exception(e)
        else:
            chained.set_result(result)

    future.add_done_callback(_done)
    return chained


class Batch:
    """Defers requests until :meth:`execute` is called.

    Requests attached through a builder's terminal call (``get``/``post``)
    return a future instead of running immediately. Executing the batch sends
    the pending requests in attach order and resolves each future with its
    parsed result or with the error that request raised; one failing request
    does not stop the rest.

    Examples:
        ```python
        batch = sp.create_batch()
        profiles = sp.profiles.in_batch(batch)

        following = profiles.am_i_following("i:0#.f|membership|alice@contoso.com")
        tags = profiles.get_followed_tags()

        batch.execute()
        print(following.result(), tags.result())
        ```
    """

    def __init__(self, service: BaseService) -> None:
        self._service = service
        self._entries: List[_BatchEntry] = []

    def attach(
        self, spec: RequestSpec, model: Optional[Any] = None, *, component: str = ""
    ) -> Future:
        entry = _BatchEntry(spec=spec, model=model, component=component)
        self._entries.append(entry)
        logger.debug(f"Batched: {spec.method} {spec.endpoint}")
        return entry.future

    def _drain(self) -> List[_BatchEntry]:
        entries, self._entries = self._entries, []
        return [e for e in entries if e.future.set_running_or_notify_cancel()]

    def execute(self) -> None:
        """Send every pending request and resolve its future."""
        for entry in self._drain():
            try:
                result = self._service.execute(
                    entry.spec, entry.model, component=entry.component
                )
            except Exception as e:
                logger.debug(f"Batched request failed: {entry.spec.endpoint}: {e}")
                entry.future.set_exception(e)
            else:
                entry.future.set_result(result)

    async def execute_async(self) -> None:
        """Asynchronously send every pending request and resolve its future."""
        for entry in self._drain():
            try:
                result = await self._service.execute_async(
                    entry.spec, entry.model, component=entry.component
                )
            except Exception as e:
                logger.debug(f"Batched request failed: {entry.spec.endpoint}: {e}")
                entry.future.set_exception(e)
            else:
                entry.future.set_result(result)

    def __len__(self) -> int:
        return len(self._entries)
