"""Client-side pagination over an already filtered and sorted list."""

from __future__ import annotations

import math
from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class PageSlice:
    items: list[Any] = field(default_factory=list)
    page: int = 1
    pages: int = 1
    total: int = 0
    size: int = 1

    @property
    def has_previous(self) -> bool:
        return self.page > 1

    @property
    def has_next(self) -> bool:
        return self.page < self.pages

    @property
    def start_index(self) -> int:
        """1-based index of the first item on the page (0 when empty)."""
        return (self.page - 1) * self.size + 1 if self.items else 0

    @property
    def end_index(self) -> int:
        return self.start_index + len(self.items) - 1 if self.items else 0


def _size(size: int) -> int:
    return size if size > 0 else 1


def page_count(total: int, size: int) -> int:
    """Number of pages for *total* items; at least 1."""
    return max(1, math.ceil(max(total, 0) / _size(size)))


def clamp_page(page: int, total: int, size: int) -> int:
    """Clamp *page* into ``[1, page_count(total, size)]``."""
    return min(max(page, 1), page_count(total, size))


def paginate(items: Sequence[Any], page: int, size: int) -> PageSlice:
    """Return page *page* of *items* with *size* items per page.

    Never raises: a page below 1 is treated as 1, a non-positive size as 1,
    and a page past the last one yields an empty slice.
    """
    size = _size(size)
    page = max(page, 1)
    start = (page - 1) * size
    return PageSlice(
        items=list(items[start : start + size]),
        page=page,
        pages=page_count(len(items), size),
        total=len(items),
        size=size,
    )
