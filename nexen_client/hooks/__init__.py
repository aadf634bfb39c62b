"""Query and mutation hooks."""

from nexen_client.hooks.mutation import Mutation, MutationStatus
from nexen_client.hooks.query import Query, QueryResult

__all__ = ["Mutation", "MutationStatus", "Query", "QueryResult"]
