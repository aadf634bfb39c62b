"""Generic API response envelope models.

Every endpoint answers with the same envelope:
{ success: bool, message: str | None, data: T | None, errors: dict | None }

List endpoints return either a bare list or a Laravel-style page object in
``data``; ``unwrap_items`` is the only accessor callers should use for both.
"""

from __future__ import annotations

from typing import Any, Generic, TypeVar

from pydantic import BaseModel, ConfigDict

T = TypeVar("T")


class Envelope(BaseModel, Generic[T]):
    """JSON envelope for all API responses."""

    model_config = ConfigDict(extra="ignore")

    success: bool
    message: str | None = None
    data: T | None = None
    errors: dict[str, list[str]] | None = None


class Page(BaseModel, Generic[T]):
    """Paginated list payload."""

    model_config = ConfigDict(extra="ignore")

    data: list[T]
    current_page: int = 1
    last_page: int = 1
    per_page: int | None = None
    total: int = 0
    next_page_url: str | None = None


def unwrap_items(data: Any) -> list:
    """Return the list of items from a list payload of any supported shape.

    Accepts a ``Page`` model, a raw page dict (``{"data": [...], ...}``),
    a bare list, or ``None`` (treated as empty).
    """
    if data is None:
        return []
    if isinstance(data, Page):
        return list(data.data)
    if isinstance(data, list):
        return data
    if isinstance(data, dict) and isinstance(data.get("data"), list):
        return data["data"]
    raise TypeError(f"Payload of type {type(data).__name__} is not a list payload")
