"""Query cache: staleness, de-duplication, invalidation and garbage collection.

One ``QueryCache`` is constructed per signed-in session and handed to every
query and mutation. All state changes happen synchronously inside event-loop
turns; only fetchers await, so no locking is needed.

Revalidation discipline
-----------------------
Invalidating a prefix marks every matching entry stale without dropping its
value. Entries with at least one observer are refetched immediately (eager);
entries nobody observes are refetched on their next access (lazy). A fetch
that was already in flight when an entry was invalidated is followed by a
fresh one, since its response may predate the write.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Awaitable, Callable, Iterable, Mapping

from nexen_client.cache.keys import QueryKey, is_prefix
from nexen_client.errors import FetchCancelledError

logger = logging.getLogger(__name__)

Fetcher = Callable[[], Awaitable[Any]]
Listener = Callable[["QuerySnapshot"], None]


class QueryStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    ERROR = "error"
    SUCCESS = "success"


class FetchStatus(str, Enum):
    IDLE = "idle"
    FETCHING = "fetching"


@dataclass(frozen=True)
class QuerySnapshot:
    """Immutable view of one cache entry at a point in time."""

    key: QueryKey
    data: Any = None
    has_data: bool = False
    status: QueryStatus = QueryStatus.IDLE
    fetch_status: FetchStatus = FetchStatus.IDLE
    updated_at: float | None = None
    error: BaseException | None = None
    error_updated_at: float | None = None
    is_invalidated: bool = False
    is_stale: bool = True


@dataclass(eq=False)
class CacheEntry:
    """Mutable state for one query key. Owned by ``QueryCache``."""

    key: QueryKey
    data: Any = None
    has_data: bool = False
    status: QueryStatus = QueryStatus.IDLE
    fetch_status: FetchStatus = FetchStatus.IDLE
    updated_at: float | None = None
    error: BaseException | None = None
    error_updated_at: float | None = None
    is_invalidated: bool = False
    observers: list[Subscription] = field(default_factory=list)
    task: asyncio.Task | None = None
    gc_handle: asyncio.TimerHandle | None = None
    fetcher: Fetcher | None = None
    generation: int = 0


class Subscription:
    """An observer's handle on a cache entry.

    The listener is called with a fresh snapshot after every state change of
    the entry until ``close()``; closing does not cancel in-flight fetches.
    """

    def __init__(
        self,
        cache: QueryCache,
        entry: CacheEntry,
        listener: Listener | None,
        stale_time: float | None,
    ) -> None:
        self._cache = cache
        self._entry = entry
        self._listener = listener
        self.stale_time = stale_time
        self._closed = False

    @property
    def key(self) -> QueryKey:
        return self._entry.key

    @property
    def active(self) -> bool:
        return not self._closed

    def snapshot(self) -> QuerySnapshot:
        return self._cache._snapshot(self._entry, self.stale_time)

    def notify(self, snapshot: QuerySnapshot) -> None:
        if self._closed or self._listener is None:
            return
        try:
            self._listener(snapshot)
        except Exception:
            logger.exception("Query listener failed", extra={"query_key": self.key})

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._cache._remove_observer(self._entry, self)


def _consume_result(task: asyncio.Task) -> None:
    # Errors are recorded on the entry; retrieving them here keeps asyncio
    # from reporting background fetch failures as never retrieved.
    if not task.cancelled():
        task.exception()


class QueryCache:
    """Keyed store of query results.

    Parameters
    ----------
    stale_time:
        Seconds after a successful fetch during which data is served without
        revalidation (default 300 = 5 min).
    gc_time:
        Seconds an entry with no observers is kept before removal
        (default 600 = 10 min).
    clock:
        Monotonic time source, injectable for tests.
    """

    def __init__(
        self,
        stale_time: float = 300.0,
        gc_time: float = 600.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.stale_time = stale_time
        self.gc_time = gc_time
        self._clock = clock
        self._entries: dict[QueryKey, CacheEntry] = {}

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def get(
        self,
        key: QueryKey,
        fetcher: Fetcher | None = None,
        *,
        stale_time: float | None = None,
    ) -> QuerySnapshot:
        """Return the last known state of *key* without waiting.

        When a fetcher is known and the entry is missing or stale, a
        background fetch is scheduled; the stale value is still returned.
        """
        entry = self._entries.get(key)
        if entry is None:
            if fetcher is None:
                return QuerySnapshot(key=key)
            entry = self._entry(key)
        if fetcher is not None:
            entry.fetcher = fetcher
        if (
            entry.fetcher is not None
            and entry.task is None
            and self._is_stale(entry, stale_time)
            and _running_loop() is not None
        ):
            self._start_fetch(entry, entry.fetcher)
        return self._snapshot(entry, stale_time)

    async def fetch(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        *,
        force: bool = False,
        stale_time: float | None = None,
    ) -> Any:
        """Return fresh data for *key*, fetching when missing, stale or forced.

        Concurrent callers share one in-flight request. Cancelling one caller
        leaves the request running for the others.
        """
        entry = self._entry(key)
        entry.fetcher = fetcher
        if not force and entry.task is None and not self._is_stale(entry, stale_time):
            logger.debug("Cache hit", extra={"query_key": key})
            return entry.data
        task = entry.task if entry.task is not None else self._start_fetch(entry, fetcher)
        try:
            return await asyncio.shield(task)
        except asyncio.CancelledError:
            if task.cancelled():
                raise FetchCancelledError(query_key=key) from None
            raise

    async def prefetch(self, key: QueryKey, fetcher: Fetcher) -> None:
        """Warm *key*; a failure is recorded on the entry instead of raised."""
        try:
            await self.fetch(key, fetcher)
        except Exception as exc:
            logger.debug("Prefetch failed: %s", exc, extra={"query_key": key})

    def peek(self, key: QueryKey) -> Any:
        """Return the cached value for *key* (or None) with no side effects."""
        entry = self._entries.get(key)
        return entry.data if entry is not None else None

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def set_data(self, key: QueryKey, value: Any) -> None:
        """Store *value* under *key* as if it had just been fetched."""
        entry = self._entry(key)
        self._record_success(entry, value)
        self._notify(entry)
        if not entry.observers:
            self._schedule_gc(entry)

    def invalidate(self, prefix: QueryKey) -> list[QueryKey]:
        """Mark every entry under *prefix* stale; return the keys touched."""
        return [key for key, _ in self._invalidate(prefix)]

    async def invalidate_queries(self, prefixes: Iterable[QueryKey]) -> list[QueryKey]:
        """Invalidate several prefixes and wait for the eager refetches.

        Refetch failures are recorded on their entries, not raised.
        """
        touched: list[QueryKey] = []
        pending: list[asyncio.Task] = []
        for prefix in prefixes:
            for key, task in self._invalidate(prefix):
                if key not in touched:
                    touched.append(key)
                if task is not None and task not in pending:
                    pending.append(task)
        if pending:
            await asyncio.gather(*(asyncio.shield(t) for t in pending), return_exceptions=True)
        return touched

    def clear(self) -> None:
        """Drop every entry, cancelling in-flight fetches and GC timers.

        Entries that still have observers are kept but reset to their initial
        state, so mounted queries are notified and refetch on next use.
        """
        count = len(self._entries)
        kept: list[CacheEntry] = []
        for entry in self._entries.values():
            if entry.gc_handle is not None:
                entry.gc_handle.cancel()
                entry.gc_handle = None
            if entry.task is not None:
                entry.task.cancel()
            if entry.observers:
                self._reset(entry)
                kept.append(entry)
        self._entries = {entry.key: entry for entry in kept}
        for entry in kept:
            self._notify(entry)
        logger.info("Query cache cleared (%d entries, %d observed kept)", count, len(kept))

    # ------------------------------------------------------------------
    # Observers
    # ------------------------------------------------------------------

    def subscribe(
        self,
        key: QueryKey,
        fetcher: Fetcher,
        listener: Listener | None = None,
        *,
        stale_time: float | None = None,
    ) -> Subscription:
        """Observe *key*; fetches immediately when the entry is missing or stale."""
        entry = self._entry(key)
        if entry.gc_handle is not None:
            entry.gc_handle.cancel()
            entry.gc_handle = None
        entry.fetcher = fetcher
        subscription = Subscription(self, entry, listener, stale_time)
        entry.observers.append(subscription)
        if entry.task is None and self._is_stale(entry, stale_time):
            self._start_fetch(entry, fetcher)
        return subscription

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------

    def snapshot(self) -> Mapping[QueryKey, QuerySnapshot]:
        """Immutable view of every entry."""
        return MappingProxyType(
            {key: self._snapshot(entry, None) for key, entry in self._entries.items()}
        )

    def state(self, key: QueryKey, *, stale_time: float | None = None) -> QuerySnapshot:
        entry = self._entries.get(key)
        if entry is None:
            return QuerySnapshot(key=key)
        return self._snapshot(entry, stale_time)

    def keys(self) -> list[QueryKey]:
        return list(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _entry(self, key: QueryKey) -> CacheEntry:
        entry = self._entries.get(key)
        if entry is None:
            entry = CacheEntry(key=key)
            self._entries[key] = entry
        return entry

    def _is_stale(self, entry: CacheEntry, stale_time: float | None) -> bool:
        if not entry.has_data or entry.is_invalidated or entry.updated_at is None:
            return True
        window = self.stale_time if stale_time is None else stale_time
        return self._clock() - entry.updated_at >= window

    def _snapshot(self, entry: CacheEntry, stale_time: float | None) -> QuerySnapshot:
        return QuerySnapshot(
            key=entry.key,
            data=entry.data,
            has_data=entry.has_data,
            status=entry.status,
            fetch_status=entry.fetch_status,
            updated_at=entry.updated_at,
            error=entry.error,
            error_updated_at=entry.error_updated_at,
            is_invalidated=entry.is_invalidated,
            is_stale=self._is_stale(entry, stale_time),
        )

    def _notify(self, entry: CacheEntry) -> None:
        for subscription in list(entry.observers):
            subscription.notify(subscription.snapshot())

    def _start_fetch(self, entry: CacheEntry, fetcher: Fetcher) -> asyncio.Task:
        if entry.task is not None:
            return entry.task
        entry.fetch_status = FetchStatus.FETCHING
        if not entry.has_data:
            entry.status = QueryStatus.LOADING
        task = asyncio.get_running_loop().create_task(self._run_fetch(entry, fetcher))
        task.add_done_callback(_consume_result)
        entry.task = task
        logger.debug("Fetching", extra={"query_key": entry.key})
        self._notify(entry)
        return task

    async def _run_fetch(self, entry: CacheEntry, fetcher: Fetcher) -> Any:
        generation = entry.generation
        try:
            data = await fetcher()
        except asyncio.CancelledError:
            self._finish(entry)
            raise
        except Exception as exc:
            if entry.generation == generation:
                entry.error = exc
                entry.error_updated_at = self._clock()
                entry.status = QueryStatus.ERROR
            logger.debug("Fetch failed: %s", exc, extra={"query_key": entry.key})
            self._finish(entry)
            raise
        if entry.generation == generation:
            if entry.task is asyncio.current_task():
                self._record_success(entry, data)
            else:
                # Superseded by a refetch scheduled on invalidation; keep the
                # value but leave the entry marked stale.
                entry.data = data
                entry.has_data = True
        self._finish(entry)
        return data

    async def _refetch_after(self, previous: asyncio.Task, entry: CacheEntry) -> Any:
        await asyncio.gather(previous, return_exceptions=True)
        fetcher = entry.fetcher
        if fetcher is None:
            return entry.data
        entry.fetch_status = FetchStatus.FETCHING
        self._notify(entry)
        return await self._run_fetch(entry, fetcher)

    def _record_success(self, entry: CacheEntry, data: Any) -> None:
        entry.data = data
        entry.has_data = True
        entry.updated_at = self._clock()
        entry.error = None
        entry.status = QueryStatus.SUCCESS
        entry.is_invalidated = False

    def _reset(self, entry: CacheEntry) -> None:
        entry.generation += 1
        entry.data = None
        entry.has_data = False
        entry.status = QueryStatus.IDLE
        entry.fetch_status = FetchStatus.IDLE
        entry.updated_at = None
        entry.error = None
        entry.error_updated_at = None
        entry.is_invalidated = False
        entry.task = None

    def _finish(self, entry: CacheEntry) -> None:
        if entry.task is asyncio.current_task():
            entry.task = None
            entry.fetch_status = FetchStatus.IDLE
            if entry.status is QueryStatus.LOADING:
                entry.status = QueryStatus.IDLE
        if self._entries.get(entry.key) is not entry:
            return
        self._notify(entry)
        if not entry.observers and entry.task is None:
            self._schedule_gc(entry)

    def _invalidate(self, prefix: QueryKey) -> list[tuple[QueryKey, asyncio.Task | None]]:
        touched: list[tuple[QueryKey, asyncio.Task | None]] = []
        for key, entry in list(self._entries.items()):
            if not is_prefix(prefix, key):
                continue
            entry.is_invalidated = True
            task: asyncio.Task | None = None
            if entry.task is not None:
                # The in-flight response may predate the write.
                task = asyncio.get_running_loop().create_task(
                    self._refetch_after(entry.task, entry)
                )
                task.add_done_callback(_consume_result)
                entry.task = task
            elif entry.observers and entry.fetcher is not None:
                task = self._start_fetch(entry, entry.fetcher)
            self._notify(entry)
            touched.append((key, task))
        if touched:
            logger.debug(
                "Invalidated %d entries",
                len(touched),
                extra={"query_key": prefix},
            )
        return touched

    def _remove_observer(self, entry: CacheEntry, subscription: Subscription) -> None:
        if subscription in entry.observers:
            entry.observers.remove(subscription)
        if not entry.observers and self._entries.get(entry.key) is entry:
            self._schedule_gc(entry)

    def _schedule_gc(self, entry: CacheEntry) -> None:
        loop = _running_loop()
        if loop is None:
            return
        if entry.gc_handle is not None:
            entry.gc_handle.cancel()
        entry.gc_handle = loop.call_later(self.gc_time, self._collect, entry)

    def _collect(self, entry: CacheEntry) -> None:
        entry.gc_handle = None
        if self._entries.get(entry.key) is not entry:
            return
        if entry.observers or entry.task is not None:
            return
        del self._entries[entry.key]
        logger.debug("Garbage-collected idle entry", extra={"query_key": entry.key})


def _running_loop() -> asyncio.AbstractEventLoop | None:
    try:
        return asyncio.get_running_loop()
    except RuntimeError:
        return None
