"""Unit tests for the read hook."""

from __future__ import annotations

import asyncio

import pytest

from nexen_client.cache.store import QueryCache, QueryStatus
from nexen_client.errors import TransportError
from nexen_client.hooks.query import Query, QueryResult

KEY = ("suppliers", "list")


class _Counter:
    def __init__(self, fail_after: int | None = None) -> None:
        self.calls = 0
        self.fail_after = fail_after

    async def __call__(self) -> list[int]:
        self.calls += 1
        if self.fail_after is not None and self.calls > self.fail_after:
            raise TransportError()
        return list(range(self.calls))


class TestDisabled:
    @pytest.mark.asyncio
    async def test_disabled_query_never_fetches(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        query = Query(cache, KEY, fetcher, enabled=False).mount()

        result = await query.wait()

        assert result == QueryResult()
        assert result.status is QueryStatus.IDLE
        assert fetcher.calls == 0
        assert KEY not in cache
        query.unmount()

    @pytest.mark.asyncio
    async def test_enabling_a_mounted_query_fetches(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        query = Query(cache, KEY, fetcher, enabled=False).mount()

        query.set_enabled(True)
        result = await query.wait()

        assert result.data == [0]
        assert fetcher.calls == 1
        query.unmount()


class TestMounted:
    @pytest.mark.asyncio
    async def test_loading_then_success(self) -> None:
        cache = QueryCache()
        query = Query(cache, KEY, _Counter()).mount()

        assert query.is_loading
        result = await query.wait()

        assert not result.is_loading
        assert result.is_success
        assert result.data == [0]
        query.unmount()

    @pytest.mark.asyncio
    async def test_select_projects_data(self) -> None:
        cache = QueryCache()
        async with Query(cache, KEY, _Counter(), select=len) as query:
            result = await query.wait()
        assert result.data == 1
        assert cache.peek(KEY) == [0]

    @pytest.mark.asyncio
    async def test_observers_of_one_key_share_a_request(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        first = Query(cache, KEY, fetcher).mount()
        second = Query(cache, KEY, fetcher).mount()

        await asyncio.gather(first.wait(), second.wait())

        assert fetcher.calls == 1
        assert first.data == second.data == [0]
        first.unmount()
        second.unmount()

    @pytest.mark.asyncio
    async def test_on_change_stops_after_unmount(self) -> None:
        cache = QueryCache()
        seen: list[QueryResult] = []
        query = Query(cache, KEY, _Counter(), on_change=seen.append).mount()
        await query.wait()
        count = len(seen)

        query.unmount()
        cache.set_data(KEY, ["late"])

        assert count >= 2
        assert len(seen) == count
        assert seen[-1].data == [0]

    @pytest.mark.asyncio
    async def test_refetch_failure_keeps_data(self) -> None:
        cache = QueryCache()
        query = Query(cache, KEY, _Counter(fail_after=1)).mount()
        await query.wait()

        result = await query.refetch()

        assert result.data == [0]
        assert result.is_error
        assert isinstance(result.error, TransportError)
        query.unmount()


class TestPolling:
    @pytest.mark.asyncio
    async def test_polls_while_mounted_only(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        query = Query(cache, KEY, fetcher, refetch_interval=0.01).mount()

        await asyncio.sleep(0.06)
        query.unmount()
        polled = fetcher.calls
        await asyncio.sleep(0.05)

        assert polled >= 3
        assert fetcher.calls == polled

    @pytest.mark.asyncio
    async def test_disabled_query_does_not_poll(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        query = Query(cache, KEY, fetcher, enabled=False, refetch_interval=0.01).mount()

        await asyncio.sleep(0.03)

        assert fetcher.calls == 0
        query.unmount()


class TestClear:
    @pytest.mark.asyncio
    async def test_mounted_query_survives_cache_clear(self) -> None:
        cache = QueryCache()
        gate = asyncio.Event()
        calls = []

        async def fetcher() -> list[int]:
            calls.append(len(calls))
            if len(calls) == 1:
                await gate.wait()
            return list(calls)

        seen: list[QueryResult] = []
        query = Query(cache, KEY, fetcher, on_change=seen.append).mount()
        interrupted = asyncio.ensure_future(query.refetch())
        await asyncio.sleep(0)

        cache.clear()
        result = await interrupted

        assert result.data is None
        assert not result.is_error
        assert seen[-1].status is QueryStatus.IDLE

        result = await query.refetch()

        assert result.is_success
        assert result.data == [0, 1]
        assert seen[-1].data == [0, 1]
        query.unmount()

    @pytest.mark.asyncio
    async def test_polling_continues_after_cache_clear(self) -> None:
        cache = QueryCache()
        fetcher = _Counter()
        query = Query(cache, KEY, fetcher, refetch_interval=0.01).mount()
        await asyncio.sleep(0.03)

        cache.clear()
        polled = fetcher.calls
        await asyncio.sleep(0.05)

        assert fetcher.calls > polled
        assert query.data is not None
        query.unmount()
