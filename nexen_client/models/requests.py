"""Pydantic request models for writes that have a fixed shape."""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field


class Credentials(BaseModel):
    """Login request body."""

    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)


class BulkAction(str, Enum):
    """Supported supplier bulk actions."""

    ACTIVATE = "activate"
    DEACTIVATE = "deactivate"
    DELETE = "delete"


class SupplierBulkRequest(BaseModel):
    """Request model for supplier bulk operations."""

    action: BulkAction
    supplier_ids: list[int] = Field(..., min_length=1)


class ExportFormat(str, Enum):
    CSV = "csv"
    JSON = "json"
