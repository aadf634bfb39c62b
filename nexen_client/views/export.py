"""CSV and JSON export of view rows."""

from __future__ import annotations

import csv
import io
import json
from collections.abc import Iterable, Mapping, Sequence
from datetime import date
from typing import Any

from pydantic import BaseModel

from nexen_client.models.requests import ExportFormat
from nexen_client.views.fields import get_field


def _columns(columns: Sequence[str] | Mapping[str, str]) -> list[tuple[str, str]]:
    if isinstance(columns, Mapping):
        return [(path, header) for path, header in columns.items()]
    return [(path, path) for path in columns]


def to_csv(items: Iterable[Any], columns: Sequence[str] | Mapping[str, str]) -> str:
    """Render *items* as CSV with a header row.

    *columns* is a list of dotted field paths, or a mapping of path to header
    label. Missing values render as empty cells.
    """
    layout = _columns(columns)
    buffer = io.StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow([header for _, header in layout])
    for item in items:
        row = []
        for path, _ in layout:
            value = get_field(item, path)
            row.append("" if value is None else value)
        writer.writerow(row)
    return buffer.getvalue()


def to_json(items: Iterable[Any]) -> str:
    rows = [
        item.model_dump(mode="json") if isinstance(item, BaseModel) else item for item in items
    ]
    return json.dumps(rows, default=str, indent=2)


def export_filename(prefix: str, fmt: ExportFormat | str = ExportFormat.CSV, on: date | None = None) -> str:
    """Download name such as ``sales-history-2024-05-01.csv``."""
    on = on or date.today()
    return f"{prefix}-{on.isoformat()}.{ExportFormat(fmt).value}"


def export_items(
    items: Iterable[Any],
    fmt: ExportFormat | str,
    columns: Sequence[str] | Mapping[str, str] = (),
) -> str:
    if ExportFormat(fmt) is ExportFormat.JSON:
        return to_json(items)
    return to_csv(items, columns)
