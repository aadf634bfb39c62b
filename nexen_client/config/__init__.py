"""Configuration: settings and the invalidation table."""

from nexen_client.config.invalidation_rules import (
    InvalidationRule,
    InvalidationTable,
    load_invalidation_rules,
)
from nexen_client.config.settings import ClientSettings

__all__ = [
    "ClientSettings",
    "InvalidationRule",
    "InvalidationTable",
    "load_invalidation_rules",
]
