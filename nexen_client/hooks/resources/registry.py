"""Pluggable hook registry.

Maps a domain name → ``ResourceHooks`` instance. Adding a new domain
requires only creating a binding subclass, declaring its mutations in the
invalidation table and calling ``register()``.
"""

from __future__ import annotations

import logging

from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationTable
from nexen_client.config.settings import ClientSettings
from nexen_client.errors import UnknownMutationError
from nexen_client.hooks.resources.auth import AuthHooks
from nexen_client.hooks.resources.base import ResourceHooks
from nexen_client.hooks.resources.crm import CrmHooks
from nexen_client.hooks.resources.dashboard import DashboardHooks
from nexen_client.hooks.resources.finance import FinanceHooks
from nexen_client.hooks.resources.hr import HrHooks
from nexen_client.hooks.resources.inventory import InventoryHooks
from nexen_client.hooks.resources.projects import ProjectHooks
from nexen_client.hooks.resources.sales import SalesHooks
from nexen_client.hooks.resources.suppliers import SupplierHooks
from nexen_client.integration.api_client import ApiClient

logger = logging.getLogger(__name__)

DEFAULT_HOOKS: tuple[type[ResourceHooks], ...] = (
    AuthHooks,
    DashboardHooks,
    InventoryHooks,
    SupplierHooks,
    CrmHooks,
    SalesHooks,
    FinanceHooks,
    HrHooks,
    ProjectHooks,
)


class HookRegistry:
    """Registry that maps domain names to their hook bindings."""

    def __init__(self, rules: InvalidationTable) -> None:
        self._rules = rules
        self._hooks: dict[str, ResourceHooks] = {}

    def register(self, hooks: ResourceHooks) -> None:
        """Register a binding under its declared ``domain``.

        Raises
        ------
        ValueError
            If a binding for the same domain is already registered.
        UnknownMutationError
            If the binding declares a mutation with no invalidation rule.
        """
        domain = hooks.domain
        if domain in self._hooks:
            raise ValueError(f"Hooks for domain '{domain}' are already registered")
        missing = [name for name in hooks.mutations if name not in self._rules]
        if missing:
            raise UnknownMutationError(
                f"No invalidation rule declared for: {', '.join(missing)}",
                domain=domain,
                mutations=missing,
            )
        self._hooks[domain] = hooks
        logger.info("Registered hooks for domain '%s'", domain)

    def get(self, domain: str) -> ResourceHooks:
        """Return the binding for *domain*.

        Raises
        ------
        KeyError
            If no binding is registered for the given domain.
        """
        try:
            return self._hooks[domain]
        except KeyError:
            raise KeyError(f"No hooks registered for domain '{domain}'") from None

    def list_domains(self) -> list[str]:
        """Return a list of all registered domains."""
        return list(self._hooks.keys())

    def __contains__(self, domain: object) -> bool:
        return domain in self._hooks


def build_default_registry(
    client: ApiClient,
    cache: QueryCache,
    rules: InvalidationTable,
    settings: ClientSettings | None = None,
) -> HookRegistry:
    """Create a registry holding every built-in domain binding."""
    registry = HookRegistry(rules)
    for hooks_cls in DEFAULT_HOOKS:
        registry.register(hooks_cls(client, cache, rules, settings))
    return registry
