"""Remote API integration."""

from nexen_client.integration.api_client import ApiClient

__all__ = ["ApiClient"]
