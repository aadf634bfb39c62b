"""Unit tests for the write hook and its cache effects."""

from __future__ import annotations

import asyncio

import pytest
from pydantic import BaseModel

from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationTable
from nexen_client.errors import ConfigurationError, UnknownMutationError, ValidationFailedError
from nexen_client.hooks.mutation import Mutation, MutationStatus

LIST = ("suppliers", "list")
DETAIL_2 = ("suppliers", "detail", 2)
DETAIL_3 = ("suppliers", "detail", 3)
INVOICES = ("invoices", "list")


class _SupplierUpdate(BaseModel):
    id: int
    name: str


def _seed(cache: QueryCache) -> None:
    cache.set_data(LIST, [1, 2, 3])
    cache.set_data(DETAIL_2, {"id": 2})
    cache.set_data(DETAIL_3, {"id": 3})
    cache.set_data(INVOICES, [])


async def _ok(variables):
    return {"ok": True, "variables": variables}


async def _reject(variables):
    raise ValidationFailedError(field_errors={"name": ["required"]})


class TestBinding:
    def test_unknown_mutation_fails_at_construction(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        with pytest.raises(UnknownMutationError):
            Mutation("teleport_supplier", _ok, cache=cache, rules=rules)

    def test_starts_idle(self, cache: QueryCache, rules: InvalidationTable) -> None:
        mutation = Mutation("update_supplier", _ok, cache=cache, rules=rules)
        assert mutation.status is MutationStatus.IDLE
        assert not mutation.is_pending


class TestMutateAsync:
    @pytest.mark.asyncio
    async def test_success_invalidates_declared_keys_only(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        _seed(cache)
        mutation = Mutation("update_supplier", _ok, cache=cache, rules=rules)

        data = await mutation.mutate_async({"id": 2, "name": "Renamed"})

        assert data["ok"]
        assert mutation.is_success
        assert cache.state(LIST).is_invalidated
        assert cache.state(DETAIL_2).is_invalidated
        assert not cache.state(DETAIL_3).is_invalidated
        assert not cache.state(INVOICES).is_invalidated

    @pytest.mark.asyncio
    async def test_failure_leaves_cache_untouched(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        _seed(cache)
        before = dict(cache.snapshot())
        mutation = Mutation("update_supplier", _reject, cache=cache, rules=rules)

        with pytest.raises(ValidationFailedError):
            await mutation.mutate_async({"id": 2, "name": ""})

        assert dict(cache.snapshot()) == before
        assert mutation.is_error
        assert isinstance(mutation.error, ValidationFailedError)
        assert not mutation.is_pending

    @pytest.mark.asyncio
    async def test_missing_placeholder_fails_before_the_write(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        calls = []

        async def record(variables):
            calls.append(variables)

        mutation = Mutation("delete_supplier", record, cache=cache, rules=rules)

        with pytest.raises(ConfigurationError):
            await mutation.mutate_async({})
        assert calls == []

    @pytest.mark.asyncio
    async def test_clears_cache_rule(self, cache: QueryCache, rules: InvalidationTable) -> None:
        _seed(cache)
        await Mutation("logout", _ok, cache=cache, rules=rules).mutate_async()
        assert len(cache) == 0

    @pytest.mark.asyncio
    async def test_invalidates_nothing_rule(self, cache: QueryCache, rules: InvalidationTable) -> None:
        _seed(cache)
        await Mutation("export_suppliers", _ok, cache=cache, rules=rules).mutate_async({"format": "csv"})
        assert not any(state.is_invalidated for state in cache.snapshot().values())

    @pytest.mark.asyncio
    async def test_returns_after_observed_entries_refetched(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        versions = iter(range(10))

        async def fetch_list():
            return next(versions)

        subscription = cache.subscribe(LIST, fetch_list)
        await cache.fetch(LIST, fetch_list)

        await Mutation("create_supplier", _ok, cache=cache, rules=rules).mutate_async({"name": "New"})

        assert cache.state(LIST).data == 1
        assert not cache.state(LIST).is_invalidated
        subscription.close()

    @pytest.mark.asyncio
    async def test_callbacks_run_in_order(self, cache: QueryCache, rules: InvalidationTable) -> None:
        _seed(cache)
        events: list[str] = []

        def on_success(data, variables):
            events.append(f"success invalidated={cache.state(LIST).is_invalidated}")

        async def on_error(error, variables):
            events.append("error")

        ok = Mutation("update_supplier", _ok, cache=cache, rules=rules, on_success=on_success)
        await ok.mutate_async({"id": 2})
        failing = Mutation("update_supplier", _reject, cache=cache, rules=rules, on_error=on_error)
        with pytest.raises(ValidationFailedError):
            await failing.mutate_async({"id": 2})

        assert events == ["success invalidated=False", "error"]

    @pytest.mark.asyncio
    async def test_model_variables_resolve_placeholders(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        _seed(cache)
        sent = []

        async def record(variables):
            sent.append(variables)

        mutation = Mutation("update_supplier", record, cache=cache, rules=rules)
        await mutation.mutate_async(_SupplierUpdate(id=2, name="Renamed"))

        assert sent == [{"id": 2, "name": "Renamed"}]
        assert mutation.variables == {"id": 2, "name": "Renamed"}
        assert cache.state(DETAIL_2).is_invalidated
        assert not cache.state(DETAIL_3).is_invalidated

    @pytest.mark.asyncio
    async def test_string_id_invalidates_integer_detail_key(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        _seed(cache)
        await Mutation("update_supplier", _ok, cache=cache, rules=rules).mutate_async({"id": "2"})

        assert cache.state(DETAIL_2).is_invalidated
        assert not cache.state(DETAIL_3).is_invalidated

    @pytest.mark.asyncio
    async def test_rule_applied_when_success_callback_raises(
        self, cache: QueryCache, rules: InvalidationTable
    ) -> None:
        _seed(cache)

        def on_success(data, variables):
            raise RuntimeError("toast failed")

        mutation = Mutation("update_supplier", _ok, cache=cache, rules=rules, on_success=on_success)

        with pytest.raises(RuntimeError, match="toast failed"):
            await mutation.mutate_async({"id": 2})

        assert mutation.is_success
        assert cache.state(LIST).is_invalidated
        assert cache.state(DETAIL_2).is_invalidated


class TestMutate:
    @pytest.mark.asyncio
    async def test_routes_errors_to_callback(self, cache: QueryCache, rules: InvalidationTable) -> None:
        errors: list[BaseException] = []
        mutation = Mutation("update_supplier", _reject, cache=cache, rules=rules)

        task = mutation.mutate({"id": 2}, on_error=lambda exc, _: errors.append(exc))
        assert await task is None

        assert len(errors) == 1
        assert mutation.is_error

    @pytest.mark.asyncio
    async def test_routes_success_to_callback(self, cache: QueryCache, rules: InvalidationTable) -> None:
        results = []
        mutation = Mutation("update_supplier", _ok, cache=cache, rules=rules)

        await mutation.mutate({"id": 2}, on_success=lambda data, _: results.append(data))

        assert results[0]["variables"] == {"id": 2}

    @pytest.mark.asyncio
    async def test_pending_while_running(self, cache: QueryCache, rules: InvalidationTable) -> None:
        gate = asyncio.Event()

        async def slow(variables):
            await gate.wait()

        mutation = Mutation("update_supplier", slow, cache=cache, rules=rules)
        task = mutation.mutate({"id": 1})
        await asyncio.sleep(0)
        assert mutation.is_pending
        assert mutation.status is MutationStatus.PENDING

        gate.set()
        await task
        assert not mutation.is_pending
        mutation.reset()
        assert mutation.status is MutationStatus.IDLE
