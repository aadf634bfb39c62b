"""Field access shared by the view helpers."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any


def get_field(item: Any, path: str) -> Any:
    """Return the value at a dotted *path* (``"contact.name"``), or None.

    Works on mappings, pydantic models (extra fields included) and plain
    objects; a missing segment anywhere yields None.
    """
    value = item
    for part in path.split("."):
        if value is None:
            return None
        if isinstance(value, Mapping):
            value = value.get(part)
        else:
            value = getattr(value, part, None)
    return value


def item_id(item: Any) -> Any:
    return get_field(item, "id")
