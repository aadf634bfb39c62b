"""Inventory bindings: products, categories and stock actions."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Record


class InventoryHooks(ResourceHooks):
    domain = "inventory"
    mutations = (
        "create_product",
        "update_product",
        "delete_product",
        "restock_product",
        "toggle_product_status",
        "create_category",
        "update_category",
        "delete_category",
    )

    def stats(self) -> Query:
        return self.query(QueryKeys.inventory.key("stats"), "/inventory/stats")

    def products(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.inventory_products.list(params),
            "/inventory/products",
            params=params,
            model=list_of(Record),
        )

    def product(self, product_id: int | None) -> Query:
        return self.query(
            QueryKeys.inventory_products.detail(product_id),
            f"/inventory/products/{product_id}",
            model=Record,
            enabled=bool(product_id),
        )

    def categories(self) -> Query:
        return self.query(QueryKeys.inventory_categories.list(), "/inventory/categories")

    def create_product(self) -> Mutation:
        return self.mutation("create_product", "POST", "/inventory/products", model=Record)

    def update_product(self) -> Mutation:
        return self.mutation("update_product", "PUT", "/inventory/products/{id}", model=Record)

    def delete_product(self) -> Mutation:
        return self.mutation("delete_product", "DELETE", "/inventory/products/{id}")

    def restock_product(self) -> Mutation:
        return self.mutation("restock_product", "POST", "/inventory/products/{id}/restock")

    def toggle_product_status(self) -> Mutation:
        return self.mutation("toggle_product_status", "PATCH", "/inventory/products/{id}/toggle-status")

    def create_category(self) -> Mutation:
        return self.mutation("create_category", "POST", "/inventory/categories")

    def update_category(self) -> Mutation:
        return self.mutation("update_category", "PUT", "/inventory/categories/{id}")

    def delete_category(self) -> Mutation:
        return self.mutation("delete_category", "DELETE", "/inventory/categories/{id}")
