"""Query cache: canonical keys and the staleness engine."""

from nexen_client.cache.keys import (
    QueryKey,
    QueryKeys,
    ResourceKeys,
    canonical_params,
    entity_id,
    is_prefix,
    query_key,
)
from nexen_client.cache.store import (
    CacheEntry,
    FetchStatus,
    QueryCache,
    QuerySnapshot,
    QueryStatus,
    Subscription,
)

__all__ = [
    "CacheEntry",
    "FetchStatus",
    "QueryCache",
    "QueryKey",
    "QueryKeys",
    "QuerySnapshot",
    "QueryStatus",
    "ResourceKeys",
    "Subscription",
    "canonical_params",
    "entity_id",
    "is_prefix",
    "query_key",
]
