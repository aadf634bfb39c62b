"""Finance bindings: ledger transactions and the chart of accounts."""

from __future__ import annotations

from typing import Any, Mapping

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.mutation import Mutation
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.models.schemas import Record


class FinanceHooks(ResourceHooks):
    domain = "finance"
    mutations = (
        "create_transaction",
        "update_transaction",
        "delete_transaction",
        "create_account",
        "update_account",
        "delete_account",
    )

    def summary(self) -> Query:
        return self.query(QueryKeys.finance.key("summary"), "/finance/summary")

    def transactions(self, params: Mapping[str, Any] | None = None) -> Query:
        return self.query(
            QueryKeys.finance_transactions.list(params),
            "/finance/transactions",
            params=params,
            model=list_of(Record),
        )

    def chart_of_accounts(self) -> Query:
        return self.query(
            QueryKeys.finance_accounts.list(), "/finance/chart-of-accounts", model=list_of(Record)
        )

    # Transactions are written through the sales endpoint.
    def create_transaction(self) -> Mutation:
        return self.mutation("create_transaction", "POST", "/sales/transactions")

    def update_transaction(self) -> Mutation:
        return self.mutation("update_transaction", "PUT", "/sales/transactions/{id}")

    def delete_transaction(self) -> Mutation:
        return self.mutation("delete_transaction", "DELETE", "/sales/transactions/{id}")

    def create_account(self) -> Mutation:
        return self.mutation("create_account", "POST", "/finance/chart-of-accounts")

    def update_account(self) -> Mutation:
        return self.mutation("update_account", "PUT", "/finance/chart-of-accounts/{id}")

    def delete_account(self) -> Mutation:
        return self.mutation("delete_account", "DELETE", "/finance/chart-of-accounts/{id}")
