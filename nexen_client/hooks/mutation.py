"""Write hook: one remote write plus its declared cache effect.

The cache effect of every mutation comes from the invalidation table, keyed
by the mutation's name; binding a mutation that has no rule fails at
construction. The effect is applied only after the write succeeds, so a
failed write leaves every cache entry exactly as it was.
"""

from __future__ import annotations

import asyncio
import logging
from enum import Enum
from typing import Any, Awaitable, Callable

from pydantic import BaseModel

from nexen_client.cache.keys import QueryKey
from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationRule, InvalidationTable

logger = logging.getLogger(__name__)

MutationFn = Callable[[Any], Awaitable[Any]]
SuccessCallback = Callable[[Any, Any], Any]
ErrorCallback = Callable[[BaseException, Any], Any]


class MutationStatus(str, Enum):
    IDLE = "idle"
    PENDING = "pending"
    SUCCESS = "success"
    ERROR = "error"


async def _call(callback: Callable[..., Any] | None, *args: Any) -> None:
    if callback is None:
        return
    result = callback(*args)
    if asyncio.iscoroutine(result):
        await result


class Mutation:
    """A bound write operation.

    Parameters
    ----------
    name:
        Mutation identity; selects the invalidation rule.
    mutation_fn:
        Coroutine function performing the write for a given ``variables``.
    cache:
        The session's query cache.
    rules:
        Invalidation table.
    on_success:
        Called with ``(data, variables)`` after the write succeeds and before
        the cache effect is applied (e.g. storing a session token).
    on_error:
        Called with ``(error, variables)`` when the write fails.
    """

    def __init__(
        self,
        name: str,
        mutation_fn: MutationFn,
        *,
        cache: QueryCache,
        rules: InvalidationTable,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> None:
        self.name = name
        self.rule: InvalidationRule = rules.get(name)
        self._fn = mutation_fn
        self._cache = cache
        self._on_success = on_success
        self._on_error = on_error
        self._pending = 0
        self.status = MutationStatus.IDLE
        self.data: Any = None
        self.error: BaseException | None = None
        self.variables: Any = None

    @property
    def is_pending(self) -> bool:
        return self._pending > 0

    @property
    def is_success(self) -> bool:
        return self.status is MutationStatus.SUCCESS

    @property
    def is_error(self) -> bool:
        return self.status is MutationStatus.ERROR

    async def mutate_async(self, variables: Any = None) -> Any:
        """Run the write and apply the rule; re-raises the write's error.

        Returns after the eager refetches of observed entries have finished.
        """
        if isinstance(variables, BaseModel):
            variables = variables.model_dump(mode="json")
        # Resolve first: a misconfigured rule must fail before the server write.
        prefixes = self.rule.resolve(variables)

        self._pending += 1
        self.status = MutationStatus.PENDING
        self.variables = variables
        self.error = None
        try:
            data = await self._fn(variables)
        except Exception as exc:
            self.status = MutationStatus.ERROR
            self.error = exc
            logger.warning(
                "Mutation %s failed: %s",
                self.name,
                exc,
                extra={"mutation": self.name, "error_reason": type(exc).__name__},
            )
            await _call(self._on_error, exc, variables)
            raise
        finally:
            self._pending -= 1

        self.data = data
        self.status = MutationStatus.SUCCESS
        try:
            await _call(self._on_success, data, variables)
        finally:
            await self._apply(prefixes)
        return data

    def mutate(
        self,
        variables: Any = None,
        *,
        on_success: SuccessCallback | None = None,
        on_error: ErrorCallback | None = None,
    ) -> asyncio.Task:
        """Fire-and-forget variant; errors go to *on_error* and the log."""
        return asyncio.get_running_loop().create_task(
            self._mutate_quietly(variables, on_success, on_error)
        )

    def reset(self) -> None:
        self.status = MutationStatus.IDLE
        self.data = None
        self.error = None
        self.variables = None

    async def _mutate_quietly(
        self,
        variables: Any,
        on_success: SuccessCallback | None,
        on_error: ErrorCallback | None,
    ) -> Any:
        try:
            data = await self.mutate_async(variables)
        except Exception as exc:
            await _call(on_error, exc, variables)
            return None
        await _call(on_success, data, variables)
        return data

    async def _apply(self, prefixes: list[QueryKey]) -> None:
        if self.rule.clears_cache:
            self._cache.clear()
        elif self.rule.invalidates_nothing:
            logger.debug("Mutation %s invalidates nothing", self.name, extra={"mutation": self.name})
        else:
            touched = await self._cache.invalidate_queries(prefixes)
            logger.info(
                "Mutation %s invalidated %d entries",
                self.name,
                len(touched),
                extra={"mutation": self.name},
            )

    def __repr__(self) -> str:
        return f"Mutation({self.name!r}, status={self.status.value})"
