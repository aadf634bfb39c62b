"""Client facade with lifecycle management.

Startup: validate settings, configure logging, load the invalidation table,
build the API client, the query cache and every domain binding.
Shutdown: drop the cache (cancelling in-flight fetches and timers) and close
the HTTP connection pool.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

import httpx

from nexen_client.cache.store import QueryCache
from nexen_client.config.invalidation_rules import InvalidationTable, load_invalidation_rules
from nexen_client.config.settings import ClientSettings
from nexen_client.errors import NexenClientError
from nexen_client.hooks.resources import (
    AuthHooks,
    CrmHooks,
    DashboardHooks,
    FinanceHooks,
    HrHooks,
    InventoryHooks,
    ProjectHooks,
    SalesHooks,
    SupplierHooks,
)
from nexen_client.hooks.resources.registry import HookRegistry, build_default_registry
from nexen_client.integration.api_client import ApiClient
from nexen_client.logging_config import configure_logging
from nexen_client.session import SessionStore

logger = logging.getLogger(__name__)


class NexenClient:
    """One signed-in (or signed-out) session against the API.

    Owns the query cache for the session; logging out clears it. Domain
    bindings are reachable as attributes (``client.suppliers.list()``).
    """

    def __init__(
        self,
        api: ApiClient,
        cache: QueryCache,
        rules: InvalidationTable,
        settings: ClientSettings | None = None,
    ) -> None:
        self.api = api
        self.cache = cache
        self.rules = rules
        self.settings = settings
        self.registry: HookRegistry = build_default_registry(api, cache, rules, settings)

    @classmethod
    def from_settings(
        cls,
        settings: ClientSettings | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> NexenClient:
        """Wire a client from validated settings (environment by default)."""
        settings = settings or ClientSettings()  # type: ignore[call-arg]
        rules = load_invalidation_rules(settings.invalidation_rules_path)
        api = ApiClient(
            settings.api_base_url,
            session=SessionStore(settings.session_path),
            timeout_seconds=settings.request_timeout_seconds,
            transport=transport,
        )
        cache = QueryCache(
            stale_time=settings.stale_time_seconds,
            gc_time=settings.gc_time_seconds,
        )
        return cls(api, cache, rules, settings)

    # ------------------------------------------------------------------
    # Domains
    # ------------------------------------------------------------------

    @property
    def session(self) -> SessionStore:
        return self.api.session

    @property
    def auth(self) -> AuthHooks:
        return self.registry.get("auth")  # type: ignore[return-value]

    @property
    def dashboard(self) -> DashboardHooks:
        return self.registry.get("dashboard")  # type: ignore[return-value]

    @property
    def inventory(self) -> InventoryHooks:
        return self.registry.get("inventory")  # type: ignore[return-value]

    @property
    def suppliers(self) -> SupplierHooks:
        return self.registry.get("suppliers")  # type: ignore[return-value]

    @property
    def crm(self) -> CrmHooks:
        return self.registry.get("crm")  # type: ignore[return-value]

    @property
    def sales(self) -> SalesHooks:
        return self.registry.get("sales")  # type: ignore[return-value]

    @property
    def finance(self) -> FinanceHooks:
        return self.registry.get("finance")  # type: ignore[return-value]

    @property
    def hr(self) -> HrHooks:
        return self.registry.get("hr")  # type: ignore[return-value]

    @property
    def projects(self) -> ProjectHooks:
        return self.registry.get("projects")  # type: ignore[return-value]

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> dict | None:
        """Sign in and return the stored user."""
        await self.auth.login().mutate_async({"email": email, "password": password})
        return self.session.user

    async def logout(self) -> None:
        """Sign out; the local session and cache are dropped even if the call fails."""
        try:
            await self.auth.logout().mutate_async()
        except NexenClientError as exc:
            logger.warning("Server logout failed (%s); clearing local session", exc.message)
            self.session.clear()
            self.cache.clear()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        self.cache.clear()
        await self.api.aclose()

    async def __aenter__(self) -> NexenClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()


@asynccontextmanager
async def open_client(
    settings: ClientSettings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> AsyncIterator[NexenClient]:
    """Application lifespan: configure logging, yield a client, close it."""
    settings = settings or ClientSettings()  # type: ignore[call-arg]
    configure_logging(settings.log_level)
    logger.info("Starting client for %s", settings.api_base_url)
    client = NexenClient.from_settings(settings, transport=transport)
    try:
        yield client
    finally:
        await client.aclose()
        logger.info("Client closed")
