"""Search, equality and date-window filters over loaded lists."""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from datetime import date, datetime, timedelta
from enum import Enum
from typing import Any

from nexen_client.views.fields import get_field

# Filter values that mean "no constraint".
_ANY = (None, "", "all")


def matches_search(item: Any, search: str | None, fields: Sequence[str]) -> bool:
    """Case-insensitive substring match against any of *fields*."""
    if not search:
        return True
    needle = search.casefold()
    for path in fields:
        value = get_field(item, path)
        if value is not None and needle in str(value).casefold():
            return True
    return False


def matches_equals(item: Any, equals: Mapping[str, Any] | None) -> bool:
    if not equals:
        return True
    return all(
        get_field(item, path) == expected
        for path, expected in equals.items()
        if expected not in _ANY
    )


def filter_items(
    items: Iterable[Any],
    search: str | None = None,
    fields: Sequence[str] = (),
    equals: Mapping[str, Any] | None = None,
) -> list[Any]:
    """Keep items matching *search* on any of *fields* AND every equality filter.

    Equality filters set to None, "" or "all" are ignored. Relative order is
    preserved.
    """
    return [
        item
        for item in items
        if matches_search(item, search, fields) and matches_equals(item, equals)
    ]


class DatePreset(str, Enum):
    ALL = "all"
    TODAY = "today"
    YESTERDAY = "yesterday"
    THIS_WEEK = "this_week"
    THIS_MONTH = "this_month"
    CUSTOM = "custom"


def _as_date(value: Any) -> date | None:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value:
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00")).date()
        except ValueError:
            return None
    return None


def filter_by_date(
    items: Iterable[Any],
    field: str,
    preset: DatePreset | str = DatePreset.ALL,
    *,
    start: date | str | None = None,
    end: date | str | None = None,
    today: date | None = None,
) -> list[Any]:
    """Keep items whose *field* date falls in the preset window.

    Items without a parseable date are kept, as are all items when a custom
    window is missing either bound. Weeks start on Monday.
    """
    preset = DatePreset(preset)
    if preset is DatePreset.ALL:
        return list(items)
    today = today or date.today()
    if preset is DatePreset.TODAY:
        low = high = today
    elif preset is DatePreset.YESTERDAY:
        low = high = today - timedelta(days=1)
    elif preset is DatePreset.THIS_WEEK:
        low = today - timedelta(days=today.weekday())
        high = low + timedelta(days=6)
    elif preset is DatePreset.THIS_MONTH:
        low = today.replace(day=1)
        high = (low + timedelta(days=32)).replace(day=1) - timedelta(days=1)
    else:
        low, high = _as_date(start), _as_date(end)
        if low is None or high is None:
            return list(items)

    kept = []
    for item in items:
        value = _as_date(get_field(item, field))
        if value is None or low <= value <= high:
            kept.append(item)
    return kept
