"""Public wire models for the API client."""

from nexen_client.models.requests import (
    BulkAction,
    Credentials,
    ExportFormat,
    SupplierBulkRequest,
)
from nexen_client.models.responses import Envelope, Page, unwrap_items
from nexen_client.models.schemas import (
    AuthPayload,
    Contact,
    ExportFile,
    Record,
    SaleTransaction,
    Supplier,
    User,
)

__all__ = [
    "AuthPayload",
    "BulkAction",
    "Contact",
    "Credentials",
    "Envelope",
    "ExportFile",
    "ExportFormat",
    "Page",
    "Record",
    "SaleTransaction",
    "Supplier",
    "SupplierBulkRequest",
    "User",
    "unwrap_items",
]
