"""Canonical query keys.

A query key is a tuple of primitive segments: the resource name first, then
fixed positional discriminators (sub-resource, entity id), then an optional
canonicalised parameter object. Keys are hashable, compare structurally, and
double as prefixes for bulk invalidation:

    query_key("suppliers", "list", params={"b": 2, "a": 1})
    == query_key("suppliers", "list", params={"a": 1, "b": 2})
    == ("suppliers", "list", (("a", 1), ("b", 2)))

``None`` parameters, empty parameter mappings and ``None``-valued parameter
entries are dropped, so an omitted argument and an explicit ``None`` share a
cache entry.
"""

from __future__ import annotations

from collections.abc import Mapping, Set
from typing import Any, Tuple

from pydantic import BaseModel

QueryKey = Tuple[Any, ...]


def _pairs(mapping: Mapping[Any, Any]) -> tuple:
    return tuple(
        sorted(
            ((str(k), _canonical_value(v)) for k, v in mapping.items() if v is not None),
            key=lambda kv: kv[0],
        )
    )


def _canonical_value(value: Any) -> Any:
    # Bools, floats and containers are tagged: True and 1, or a list of pairs
    # and a mapping, are different requests.
    if isinstance(value, BaseModel):
        value = value.model_dump(exclude_none=True)
    if isinstance(value, bool):
        return ("bool", value)
    if isinstance(value, float):
        return ("float", value)
    if isinstance(value, Mapping):
        return ("map", _pairs(value))
    if isinstance(value, Set):
        return ("set", tuple(sorted((_canonical_value(v) for v in value), key=repr)))
    if isinstance(value, (list, tuple)):
        return ("seq", tuple(_canonical_value(v) for v in value))
    return value


def entity_id(value: Any) -> Any:
    """Normalise an entity id segment: ``"7"`` and ``7`` address the same entity."""
    if isinstance(value, str) and value.isascii() and value.isdigit():
        return int(value)
    return value


def canonical_params(params: Mapping[str, Any] | BaseModel | None) -> tuple | None:
    """Return an order-independent, hashable form of *params*.

    The top level is a tuple of ``(name, value)`` pairs sorted by name; nested
    values are tagged with their kind. Returns ``None`` when there is nothing
    left after dropping ``None`` values.
    """
    if params is None:
        return None
    if isinstance(params, BaseModel):
        params = params.model_dump(exclude_none=True)
    return _pairs(params) or None


def query_key(
    resource: str,
    *discriminators: Any,
    params: Mapping[str, Any] | BaseModel | None = None,
) -> QueryKey:
    """Build the canonical key for *resource* with optional discriminators and params."""
    key: list[Any] = [resource, *discriminators]
    canonical = canonical_params(params)
    if canonical is not None:
        key.append(canonical)
    return tuple(key)


def is_prefix(prefix: QueryKey, key: QueryKey) -> bool:
    """True if *key* starts with every segment of *prefix*."""
    return len(prefix) <= len(key) and key[: len(prefix)] == tuple(prefix)


class ResourceKeys:
    """Key factory for one resource (or one collection inside a resource).

    ``ResourceKeys("crm", "contacts")`` produces keys under
    ``("crm", "contacts", ...)``; ``all`` is the prefix that matches every one
    of them.
    """

    def __init__(self, *root: str) -> None:
        if not root:
            raise ValueError("ResourceKeys needs at least a resource name")
        self._root: tuple[str, ...] = root

    @property
    def all(self) -> QueryKey:
        return self._root

    def key(self, *segments: Any, params: Mapping[str, Any] | BaseModel | None = None) -> QueryKey:
        return query_key(self._root[0], *self._root[1:], *segments, params=params)

    def list(self, params: Mapping[str, Any] | BaseModel | None = None) -> QueryKey:
        return self.key("list", params=params)

    def detail(self, item_id: Any) -> QueryKey:
        return self.key("detail", entity_id(item_id))

    def child(self, name: str) -> ResourceKeys:
        return ResourceKeys(*self._root, name)

    def __repr__(self) -> str:
        return f"ResourceKeys{self._root!r}"


class QueryKeys:
    """Registry of every key family the resource bindings use."""

    auth = ResourceKeys("auth")
    dashboard = ResourceKeys("dashboard")
    alerts = ResourceKeys("alerts")

    inventory = ResourceKeys("inventory")
    inventory_products = inventory.child("products")
    inventory_categories = inventory.child("categories")

    suppliers = ResourceKeys("suppliers")

    crm = ResourceKeys("crm")
    crm_contacts = crm.child("contacts")
    crm_opportunities = crm.child("opportunities")

    sales = ResourceKeys("sales")
    sales_transactions = sales.child("transactions")

    finance = ResourceKeys("finance")
    finance_transactions = finance.child("transactions")
    finance_accounts = finance.child("chart-of-accounts")

    hr = ResourceKeys("hr")
    hr_employees = hr.child("employees")
    hr_departments = hr.child("departments")
    hr_leave_requests = hr.child("leave-requests")

    projects = ResourceKeys("projects")
    projects_projects = projects.child("projects")
    projects_tasks = projects.child("tasks")
