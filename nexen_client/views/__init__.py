"""Derived-view helpers: filter, sort, paginate, select, aggregate, export."""

from nexen_client.views.aggregates import Summary, count_by, percentile, sum_by, summarize, tally
from nexen_client.views.export import export_filename, export_items, to_csv, to_json
from nexen_client.views.fields import get_field
from nexen_client.views.filtering import DatePreset, filter_by_date, filter_items
from nexen_client.views.pagination import PageSlice, clamp_page, page_count, paginate
from nexen_client.views.selection import Selection
from nexen_client.views.sorting import SortDirection, sort_items
from nexen_client.views.table import TableResult, TableView, ViewState

__all__ = [
    "DatePreset",
    "PageSlice",
    "Selection",
    "SortDirection",
    "Summary",
    "TableResult",
    "TableView",
    "ViewState",
    "clamp_page",
    "count_by",
    "export_filename",
    "export_items",
    "filter_by_date",
    "filter_items",
    "get_field",
    "page_count",
    "paginate",
    "percentile",
    "sort_items",
    "sum_by",
    "summarize",
    "tally",
    "to_csv",
    "to_json",
]
