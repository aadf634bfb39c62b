"""Async client for the business-management REST API with a query cache."""

from nexen_client.app import NexenClient, open_client
from nexen_client.cache import QueryCache, QueryKeys, query_key
from nexen_client.config import ClientSettings, load_invalidation_rules
from nexen_client.errors import (
    AuthenticationError,
    ConfigurationError,
    FetchCancelledError,
    NexenClientError,
    NotFoundError,
    PermissionDeniedError,
    ResponseDecodeError,
    ServerRejectedError,
    TransportError,
    UnknownMutationError,
    ValidationFailedError,
)
from nexen_client.hooks import Mutation, Query, QueryResult
from nexen_client.integration import ApiClient
from nexen_client.session import SessionStore

__all__ = [
    "ApiClient",
    "AuthenticationError",
    "ClientSettings",
    "ConfigurationError",
    "FetchCancelledError",
    "Mutation",
    "NexenClient",
    "NexenClientError",
    "NotFoundError",
    "PermissionDeniedError",
    "Query",
    "QueryCache",
    "QueryKeys",
    "QueryResult",
    "ResponseDecodeError",
    "ServerRejectedError",
    "SessionStore",
    "TransportError",
    "UnknownMutationError",
    "ValidationFailedError",
    "load_invalidation_rules",
    "open_client",
    "query_key",
]
