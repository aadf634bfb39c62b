"""Bulk selection of rows by id."""

from __future__ import annotations

from collections.abc import Iterable
from typing import Any


class Selection:
    """Set of selected row ids, scoped to one table view."""

    def __init__(self, ids: Iterable[Any] = ()) -> None:
        self._ids: set[Any] = set(ids)

    @property
    def ids(self) -> frozenset:
        return frozenset(self._ids)

    def toggle(self, item_id: Any) -> bool:
        """Flip *item_id*; returns whether it is now selected."""
        if item_id in self._ids:
            self._ids.discard(item_id)
            return False
        self._ids.add(item_id)
        return True

    def select_all(self, visible_ids: Iterable[Any]) -> None:
        self._ids.update(visible_ids)

    def toggle_all(self, visible_ids: Iterable[Any]) -> None:
        """Select every visible id, or clear them all if they already are."""
        visible = list(visible_ids)
        if self.is_all_selected(visible):
            self._ids.difference_update(visible)
        else:
            self._ids.update(visible)

    def clear(self) -> None:
        self._ids.clear()

    def is_all_selected(self, visible_ids: Iterable[Any]) -> bool:
        visible = list(visible_ids)
        return bool(visible) and all(i in self._ids for i in visible)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._ids

    def __len__(self) -> int:
        return len(self._ids)

    def __iter__(self):
        return iter(self._ids)
