"""Sales bindings: point-of-sale transactions and reporting."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Record, SaleTransaction


class SalesHooks(ResourceHooks):
    domain = "sales"
    mutations = ("process_transaction",)

    def history(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.sales_transactions.list(params),
            "/sales/transactions",
            params=params,
            model=list_of(SaleTransaction),
        )

    def customers(self) -> Query:
        return self.query(QueryKeys.sales.key("customers"), "/sales/customers", model=list_of(Record))

    def daily_summary(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.sales.key("daily-summary", params=params), "/sales/daily-summary", params=params
        )

    def analytics(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(QueryKeys.sales.key("analytics", params=params), "/sales/analytics", params=params)

    def top_products(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.sales.key("top-products", params=params), "/sales/top-products", params=params
        )

    def process_transaction(self) -> Mutation:
        return self.mutation(
            "process_transaction", "POST", "/sales/transactions", model=SaleTransaction
        )
