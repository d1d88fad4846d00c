from concurrent.futures import Future

import pytest
from pytest_httpx import HTTPXMock

from sprest._services import BaseService, Batch
from sprest._services._batch import then
from sprest._utils import Endpoint, RequestSpec
from sprest.models import EnrichedException, SubstitutionError


@pytest.fixture
def batch(service: BaseService) -> Batch:
    return Batch(service)


def _spec(base_url: str, path: str, **params: str) -> RequestSpec:
    return RequestSpec(method="GET", endpoint=Endpoint(f"{base_url}/{path}"), params=params)


class TestBatch:
    def test_attach_defers_requests(
        self, httpx_mock: HTTPXMock, batch: Batch, base_url: str
    ):
        future = batch.attach(_spec(base_url, "_api/a"))

        assert isinstance(future, Future)
        assert not future.done()
        assert len(batch) == 1
        assert httpx_mock.get_requests() == []

    def test_execute_resolves_in_attach_order(
        self, httpx_mock: HTTPXMock, batch: Batch, base_url: str
    ):
        httpx_mock.add_response(url=f"{base_url}/_api/a", json={"value": "a"})
        httpx_mock.add_response(url=f"{base_url}/_api/b", json={"value": "b"})

        first = batch.attach(_spec(base_url, "_api/a"))
        second = batch.attach(_spec(base_url, "_api/b"))
        batch.execute()

        assert first.result() == "a"
        assert second.result() == "b"
        assert [str(r.url) for r in httpx_mock.get_requests()] == [
            f"{base_url}/_api/a",
            f"{base_url}/_api/b",
        ]
        assert len(batch) == 0

    def test_failures_are_isolated(
        self, httpx_mock: HTTPXMock, batch: Batch, base_url: str
    ):
        httpx_mock.add_response(url=f"{base_url}/_api/a", status_code=404)
        httpx_mock.add_response(url=f"{base_url}/_api/b", json={"value": "b"})

        failing = batch.attach(_spec(base_url, "_api/a"))
        missing = batch.attach(_spec(base_url, "_api/c(@v)"))
        ok = batch.attach(_spec(base_url, "_api/b"))
        batch.execute()

        assert isinstance(failing.exception(), EnrichedException)
        assert isinstance(missing.exception(), SubstitutionError)
        assert ok.result() == "b"

    def test_cancelled_entries_are_skipped(
        self, httpx_mock: HTTPXMock, batch: Batch, base_url: str
    ):
        httpx_mock.add_response(url=f"{base_url}/_api/b", json={"value": "b"})

        cancelled = batch.attach(_spec(base_url, "_api/a"))
        kept = batch.attach(_spec(base_url, "_api/b"))
        cancelled.cancel()
        batch.execute()

        assert cancelled.cancelled()
        assert kept.result() == "b"
        assert len(httpx_mock.get_requests()) == 1

    def test_execute_empty_batch(self, httpx_mock: HTTPXMock, batch: Batch):
        batch.execute()
        assert httpx_mock.get_requests() == []

    @pytest.mark.anyio
    async def test_execute_async(
        self, httpx_mock: HTTPXMock, batch: Batch, base_url: str
    ):
        httpx_mock.add_response(url=f"{base_url}/_api/a", json={"value": 1})
        httpx_mock.add_response(url=f"{base_url}/_api/b", status_code=400)

        first = batch.attach(_spec(base_url, "_api/a"))
        second = batch.attach(_spec(base_url, "_api/b"))
        await batch.execute_async()

        assert first.result() == 1
        assert isinstance(second.exception(), EnrichedException)


class TestThen:
    def test_maps_result(self):
        source: Future = Future()
        chained = then(source, lambda v: v * 2)
        source.set_result(21)
        assert chained.result() == 42

    def test_propagates_source_error(self):
        source: Future = Future()
        chained = then(source, lambda v: v)
        source.set_exception(KeyError("x"))
        assert isinstance(chained.exception(), KeyError)

    def test_propagates_mapping_error(self):
        source: Future = Future()
        chained = then(source, lambda v: v["missing"])
        source.set_result({})
        assert isinstance(chained.exception(), KeyError)

    def test_cancelled_source_cancels_chained(self):
        source: Future = Future()
        chained = then(source, lambda v: v)
        assert source.cancel()
        assert chained.cancelled()

    def test_chained_cancelled_by_caller_stays_cancelled(self):
        source: Future = Future()
        calls = []
        chained = then(source, calls.append)
        assert chained.cancel()

        source.set_result(1)

        assert chained.cancelled()
        assert calls == []

    def test_cancelled_entry_is_skipped_by_execute(self, batch: Batch, base_url: str):
        future = batch.attach(_spec(base_url, "_api/web"))
        chained = then(future, lambda v: v)
        future.cancel()

        batch.execute()

        assert chained.cancelled()
