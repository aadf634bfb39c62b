"""Per-domain query and mutation bindings."""

from nexen_client.hooks.resources.auth import AuthHooks
from nexen_client.hooks.resources.base import ResourceHooks, list_of
from nexen_client.hooks.resources.crm import CrmHooks
from nexen_client.hooks.resources.dashboard import DashboardHooks
from nexen_client.hooks.resources.finance import FinanceHooks
from nexen_client.hooks.resources.hr import HrHooks
from nexen_client.hooks.resources.inventory import InventoryHooks
from nexen_client.hooks.resources.projects import ProjectHooks
from nexen_client.hooks.resources.registry import (
    DEFAULT_HOOKS,
    HookRegistry,
    build_default_registry,
)
from nexen_client.hooks.resources.sales import SalesHooks
from nexen_client.hooks.resources.suppliers import SupplierHooks

__all__ = [
    "DEFAULT_HOOKS",
    "AuthHooks",
    "CrmHooks",
    "DashboardHooks",
    "FinanceHooks",
    "HookRegistry",
    "HrHooks",
    "InventoryHooks",
    "ProjectHooks",
    "ResourceHooks",
    "SalesHooks",
    "SupplierHooks",
    "build_default_registry",
    "list_of",
]
