"""Supplier bindings, including bulk actions, code settings and export."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.requests import SupplierBulkRequest
from nexen_client.models.schemas import ExportFile, Supplier

_keys = QueryKeys.suppliers


class SupplierHooks(ResourceHooks):
    domain = "suppliers"
    mutations = (
        "create_supplier",
        "update_supplier",
        "delete_supplier",
        "bulk_supplier_operations",
        "update_supplier_code_prefix",
        "export_suppliers",
    )

    def list(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(_keys.list(params), "/suppliers", params=params, model=list_of(Supplier))

    def detail(self, supplier_id: int | None) -> Query:
        return self.query(
            _keys.detail(supplier_id),
            f"/suppliers/{supplier_id}",
            model=Supplier,
            enabled=bool(supplier_id),
        )

    def analytics(self) -> Query:
        return self.query(_keys.key("analytics"), "/suppliers/analytics")

    def next_code(self) -> Query:
        return self.query(_keys.key("next-code"), "/suppliers/next-code")

    def code_settings(self) -> Query:
        return self.query(_keys.key("code-settings"), "/suppliers/code-settings")

    def create(self) -> Mutation:
        return self.mutation("create_supplier", "POST", "/suppliers", model=Supplier)

    def update(self) -> Mutation:
        return self.mutation("update_supplier", "PUT", "/suppliers/{id}", model=Supplier)

    def delete(self) -> Mutation:
        return self.mutation("delete_supplier", "DELETE", "/suppliers/{id}")

    def bulk_operations(self) -> Mutation:
        return self.mutation(
            "bulk_supplier_operations", "POST", "/suppliers/bulk", body=SupplierBulkRequest
        )

    def update_code_prefix(self) -> Mutation:
        return self.mutation("update_supplier_code_prefix", "PUT", "/suppliers/code-settings")

    def export(self) -> Mutation:
        """Download suppliers; variables take an optional ``format`` (csv or json)."""
        return self.mutation(
            "export_suppliers", "GET", "/suppliers/export", model=ExportFile, as_params=True
        )
