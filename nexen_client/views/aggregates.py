"""Single-pass aggregates over a filtered list."""

from __future__ import annotations

import math
from collections import Counter
from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass, field
from numbers import Number
from typing import Any

from nexen_client.views.fields import get_field


def _number(value: Any) -> float | None:
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, Number):
        return float(value)
    if isinstance(value, str):
        try:
            return float(value)
        except ValueError:
            return None
    return None


def sum_by(items: Iterable[Any], field: str) -> float:
    """Sum of the numeric values of *field*; non-numeric values count as 0."""
    return sum(_number(get_field(item, field)) or 0.0 for item in items)


def count_by(items: Iterable[Any], predicate: Callable[[Any], bool]) -> int:
    return sum(1 for item in items if predicate(item))


def tally(items: Iterable[Any], field: str) -> dict[Any, int]:
    """Group-by counts of *field*; missing values are grouped under None."""
    return dict(Counter(get_field(item, field) for item in items))


def percentile(values: Sequence[float], pct: float) -> float | None:
    """Linear-interpolated percentile (0-100) of *values*; None when empty."""
    data = sorted(v for v in values if v is not None)
    if not data:
        return None
    pct = min(max(pct, 0.0), 100.0)
    rank = (len(data) - 1) * pct / 100.0
    low = math.floor(rank)
    high = math.ceil(rank)
    if low == high:
        return float(data[low])
    return data[low] + (data[high] - data[low]) * (rank - low)


@dataclass(frozen=True)
class Summary:
    count: int = 0
    total: float = 0.0
    average: float = 0.0
    by_group: dict[Any, int] = field(default_factory=dict)
    totals_by_group: dict[Any, float] = field(default_factory=dict)


def summarize(
    items: Iterable[Any],
    amount_field: str | None = None,
    group_field: str | None = None,
) -> Summary:
    """Count, total, average and per-group figures in one pass."""
    count = 0
    total = 0.0
    by_group: Counter = Counter()
    totals_by_group: dict[Any, float] = {}
    for item in items:
        count += 1
        amount = (_number(get_field(item, amount_field)) or 0.0) if amount_field else 0.0
        total += amount
        if group_field:
            group = get_field(item, group_field)
            by_group[group] += 1
            totals_by_group[group] = totals_by_group.get(group, 0.0) + amount
    return Summary(
        count=count,
        total=total,
        average=total / count if count else 0.0,
        by_group=dict(by_group),
        totals_by_group=totals_by_group,
    )
