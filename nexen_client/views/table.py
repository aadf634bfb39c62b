"""Stateful table view: filter, sort, page, select and summarise one list.

The view state is local to the table that owns it and is never cached.
Filtering is memoised on the source list and the filter inputs, and the
summary is recomputed only when the filtered list itself changes.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date
from typing import Any

from nexen_client.models.requests import ExportFormat
from nexen_client.views.aggregates import Summary, summarize
from nexen_client.views.export import export_items
from nexen_client.views.fields import item_id
from nexen_client.views.filtering import DatePreset, filter_by_date, filter_items
from nexen_client.views.pagination import PageSlice, clamp_page, paginate
from nexen_client.views.selection import Selection
from nexen_client.views.sorting import SortDirection, sort_items


@dataclass
class ViewState:
    search: str = ""
    filters: dict[str, Any] = field(default_factory=dict)
    date_preset: DatePreset = DatePreset.ALL
    date_start: date | None = None
    date_end: date | None = None
    sort_field: str | None = None
    sort_direction: SortDirection = SortDirection.ASC
    page: int = 1
    page_size: int = 10


@dataclass(frozen=True)
class TableResult:
    page: PageSlice
    filtered_count: int
    summary: Summary


class TableView:
    """Derived view over a loaded list.

    Parameters
    ----------
    search_fields:
        Dotted paths searched by the free-text box.
    amount_field, group_field:
        Fields fed to ``summarize`` for the totals panel.
    date_field:
        Field used by the date-window filter.
    """

    def __init__(
        self,
        search_fields: Sequence[str] = (),
        *,
        amount_field: str | None = None,
        group_field: str | None = None,
        date_field: str | None = None,
        sort_field: str | None = None,
        sort_direction: SortDirection | str = SortDirection.ASC,
        page_size: int = 10,
    ) -> None:
        self.search_fields = tuple(search_fields)
        self.amount_field = amount_field
        self.group_field = group_field
        self.date_field = date_field
        self.state = ViewState(
            sort_field=sort_field,
            sort_direction=SortDirection(sort_direction),
            page_size=page_size,
        )
        self.selection = Selection()
        self._items: Sequence[Any] = []
        self._filter_key: tuple | None = None
        self._filtered: list[Any] = []
        self._summary_source: list[Any] | None = None
        self._summary = Summary()

    # ------------------------------------------------------------------
    # Inputs
    # ------------------------------------------------------------------

    def set_items(self, items: Sequence[Any] | None) -> None:
        self._items = items if items is not None else []

    def set_search(self, search: str) -> None:
        self.state.search = search
        self.state.page = 1

    def set_filter(self, path: str, value: Any) -> None:
        self.state.filters[path] = value
        self.state.page = 1

    def set_date_window(
        self,
        preset: DatePreset | str,
        start: date | None = None,
        end: date | None = None,
    ) -> None:
        self.state.date_preset = DatePreset(preset)
        self.state.date_start = start
        self.state.date_end = end
        self.state.page = 1

    def set_sort(self, path: str, direction: SortDirection | str | None = None) -> None:
        """Sort on *path*; repeating the current field flips the direction."""
        if direction is not None:
            self.state.sort_direction = SortDirection(direction)
        elif path == self.state.sort_field:
            self.state.sort_direction = self.state.sort_direction.toggled()
        else:
            self.state.sort_direction = SortDirection.ASC
        self.state.sort_field = path

    def set_page(self, page: int) -> None:
        self.state.page = clamp_page(page, len(self.filtered), self.state.page_size)

    def set_page_size(self, size: int) -> None:
        self.state.page_size = size if size > 0 else 1
        self.state.page = 1

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------

    @property
    def filtered(self) -> list[Any]:
        state = self.state
        key = (
            id(self._items),
            state.search,
            tuple(sorted(state.filters.items(), key=lambda kv: kv[0])),
            state.date_preset,
            state.date_start,
            state.date_end,
        )
        if key != self._filter_key:
            rows = filter_items(self._items, state.search, self.search_fields, state.filters)
            if self.date_field:
                rows = filter_by_date(
                    rows,
                    self.date_field,
                    state.date_preset,
                    start=state.date_start,
                    end=state.date_end,
                )
            self._filtered = rows
            self._filter_key = key
        return self._filtered

    @property
    def rows(self) -> list[Any]:
        """Filtered rows in display order (all pages)."""
        return sort_items(self.filtered, self.state.sort_field, self.state.sort_direction)

    @property
    def summary(self) -> Summary:
        filtered = self.filtered
        if filtered is not self._summary_source:
            self._summary = summarize(filtered, self.amount_field, self.group_field)
            self._summary_source = filtered
        return self._summary

    def page(self) -> PageSlice:
        rows = self.rows
        page = clamp_page(self.state.page, len(rows), self.state.page_size)
        return paginate(rows, page, self.state.page_size)

    def result(self) -> TableResult:
        return TableResult(
            page=self.page(),
            filtered_count=len(self.filtered),
            summary=self.summary,
        )

    def visible_ids(self) -> list[Any]:
        return [item_id(item) for item in self.page().items]

    def toggle_select_all(self) -> None:
        self.selection.toggle_all(self.visible_ids())

    def export(
        self,
        fmt: ExportFormat | str = ExportFormat.CSV,
        columns: Sequence[str] | Mapping[str, str] = (),
    ) -> str:
        """Export every filtered row in display order."""
        return export_items(self.rows, fmt, columns)
