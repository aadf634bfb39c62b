"""Stable single-field sorting with missing values last."""

from __future__ import annotations

import locale
from collections.abc import Iterable
from enum import Enum
from numbers import Number
from typing import Any

from nexen_client.views.fields import get_field


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"

    def toggled(self) -> SortDirection:
        return SortDirection.DESC if self is SortDirection.ASC else SortDirection.ASC


def sort_key(value: Any) -> tuple:
    """Comparable key: numbers numerically, text by locale collation."""
    if isinstance(value, bool):
        return (0, int(value))
    if isinstance(value, Number):
        return (0, value)
    if isinstance(value, str):
        return (1, locale.strxfrm(value.casefold()))
    return (2, str(value))


def sort_items(
    items: Iterable[Any],
    field: str | None,
    direction: SortDirection | str = SortDirection.ASC,
) -> list[Any]:
    """Return *items* sorted on *field*.

    The sort is stable in both directions and items whose value is None sort
    last either way. ``field=None`` keeps the input order.
    """
    items = list(items)
    if not field:
        return items
    present = []
    missing = []
    for item in items:
        (missing if get_field(item, field) is None else present).append(item)
    present.sort(
        key=lambda item: sort_key(get_field(item, field)),
        reverse=SortDirection(direction) is SortDirection.DESC,
    )
    return present + missing
