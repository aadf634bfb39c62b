"""Payload schemas for the resources the client binds.

Business fields are treated as opaque: each schema pins only the fields the
client itself relies on (ids, names used for search) and keeps the rest via
``extra="allow"`` so that no server attribute is lost in decoding.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class Record(BaseModel):
    """Base payload for any entity with a server-assigned id."""

    model_config = ConfigDict(extra="allow")

    id: int | None = None


class User(Record):
    name: str | None = None
    email: str | None = None


class AuthPayload(BaseModel):
    """Payload returned by login and register."""

    model_config = ConfigDict(extra="allow")

    user: User | None = None
    token: str | None = None


class Supplier(Record):
    name: str | None = None
    supplier_code: str | None = None
    email: str | None = None
    status: str | None = None


class Contact(Record):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    type: str | None = None


class SaleTransaction(Record):
    transaction_number: str | None = None
    customer_name: str | None = None
    total_amount: float | None = None
    status: str | None = None
    payment_method: str | None = None
    contact_id: int | None = None


class ExportFile(BaseModel):
    """Export payload: base64 content plus suggested filename."""

    model_config = ConfigDict(extra="allow")

    content: str | None = None
    filename: str | None = None
