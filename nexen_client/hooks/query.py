"""Read hook: one observer of one query key.

A ``Query`` is the unit a view holds on to while it is on screen. Mounting
subscribes it to the shared cache entry, unmounting detaches it; the entry
itself lives on for other observers and is garbage-collected later.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Callable

from nexen_client.cache.keys import QueryKey
from nexen_client.cache.store import (
    Fetcher,
    FetchStatus,
    QueryCache,
    QuerySnapshot,
    QueryStatus,
    Subscription,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class QueryResult:
    """What a view renders from."""

    data: Any = None
    is_loading: bool = False
    is_fetching: bool = False
    error: BaseException | None = None
    status: QueryStatus = QueryStatus.IDLE
    is_stale: bool = False
    updated_at: float | None = None

    @property
    def is_success(self) -> bool:
        return self.status is QueryStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is QueryStatus.ERROR


_DISABLED = QueryResult()


class Query:
    """Observer of a single cache key.

    Parameters
    ----------
    cache:
        The session's query cache.
    key:
        Canonical query key.
    fetcher:
        Zero-argument coroutine function returning the data for *key*.
    enabled:
        When False no request is issued and the result stays idle.
    stale_time:
        Overrides the cache-wide stale time for this observer.
    refetch_interval:
        Seconds between background refetches while mounted (polling).
    select:
        Projection applied to the cached data before it is returned.
    on_change:
        Called with a new ``QueryResult`` after each change while mounted.
    """

    def __init__(
        self,
        cache: QueryCache,
        key: QueryKey,
        fetcher: Fetcher,
        *,
        enabled: bool = True,
        stale_time: float | None = None,
        refetch_interval: float | None = None,
        select: Callable[[Any], Any] | None = None,
        on_change: Callable[[QueryResult], None] | None = None,
    ) -> None:
        self.cache = cache
        self.key = key
        self._fetcher = fetcher
        self._enabled = enabled
        self.stale_time = stale_time
        self.refetch_interval = refetch_interval
        self._select = select
        self._on_change = on_change
        self._subscription: Subscription | None = None
        self._poll_task: asyncio.Task | None = None
        self._mounted = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def is_mounted(self) -> bool:
        return self._mounted

    def mount(self) -> Query:
        """Start observing; must be called from a running event loop."""
        if self._mounted:
            return self
        self._mounted = True
        if self._enabled:
            self._attach()
        return self

    def unmount(self) -> None:
        """Stop observing. In-flight fetches complete for other observers."""
        self._mounted = False
        self._detach()

    def set_enabled(self, enabled: bool) -> None:
        if enabled == self._enabled:
            return
        self._enabled = enabled
        if not self._mounted:
            return
        if enabled:
            self._attach()
        else:
            self._detach()

    async def __aenter__(self) -> Query:
        return self.mount()

    async def __aexit__(self, *exc_info: object) -> None:
        self.unmount()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def result(self) -> QueryResult:
        if not self._enabled:
            return _DISABLED
        return self._to_result(self.cache.state(self.key, stale_time=self.stale_time))

    @property
    def data(self) -> Any:
        return self.result.data

    @property
    def error(self) -> BaseException | None:
        return self.result.error

    @property
    def is_loading(self) -> bool:
        return self.result.is_loading

    async def refetch(self) -> QueryResult:
        """Force revalidation; failures land in ``result.error``."""
        if not self._enabled:
            return _DISABLED
        try:
            await self.cache.fetch(self.key, self._fetcher, force=True, stale_time=self.stale_time)
        except Exception as exc:
            logger.debug("Refetch failed: %s", exc, extra={"query_key": self.key})
        return self.result

    async def wait(self) -> QueryResult:
        """Return once the entry holds fresh data or an error."""
        if not self._enabled:
            return _DISABLED
        try:
            await self.cache.fetch(self.key, self._fetcher, stale_time=self.stale_time)
        except Exception as exc:
            logger.debug("Query failed: %s", exc, extra={"query_key": self.key})
        return self.result

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _attach(self) -> None:
        if self._subscription is not None:
            return
        self._subscription = self.cache.subscribe(
            self.key, self._fetcher, self._changed, stale_time=self.stale_time
        )
        if self.refetch_interval:
            self._poll_task = asyncio.get_running_loop().create_task(self._poll())

    def _detach(self) -> None:
        if self._poll_task is not None:
            self._poll_task.cancel()
            self._poll_task = None
        if self._subscription is not None:
            self._subscription.close()
            self._subscription = None

    async def _poll(self) -> None:
        """Refetch every ``refetch_interval`` seconds until unmounted."""
        while True:
            await asyncio.sleep(self.refetch_interval)
            await self.refetch()

    def _changed(self, snapshot: QuerySnapshot) -> None:
        if self._on_change is not None:
            self._on_change(self._to_result(snapshot))

    def _to_result(self, snapshot: QuerySnapshot) -> QueryResult:
        data = snapshot.data
        if snapshot.has_data and self._select is not None:
            data = self._select(data)
        return QueryResult(
            data=data,
            is_loading=not snapshot.has_data and snapshot.fetch_status is FetchStatus.FETCHING,
            is_fetching=snapshot.fetch_status is FetchStatus.FETCHING,
            error=snapshot.error,
            status=snapshot.status,
            is_stale=snapshot.is_stale,
            updated_at=snapshot.updated_at,
        )

    def __repr__(self) -> str:
        return f"Query({self.key!r}, enabled={self._enabled}, mounted={self._mounted})"
