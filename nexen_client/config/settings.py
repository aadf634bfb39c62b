"""Pydantic Settings for the API client.

All environment variables use the NEXEN_ prefix.
Example: NEXEN_API_BASE_URL=https://erp.example.com/api, NEXEN_STALE_TIME_SECONDS=60
"""

from __future__ import annotations

from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings

_BUNDLED_RULES = Path(__file__).with_name("invalidation_rules.yaml")


class ClientSettings(BaseSettings):
    """Client configuration validated from environment variables."""

    # Remote API
    api_base_url: str  # e.g. "https://erp.example.com/api"
    request_timeout_seconds: float = Field(default=30.0, ge=1)
    log_level: str = "INFO"

    # Query cache
    stale_time_seconds: float = Field(default=300.0, ge=0)  # 5 minutes
    gc_time_seconds: float = Field(default=600.0, ge=0)  # 10 minutes

    # Polling intervals for "real-time" resources
    critical_alerts_interval_seconds: float = Field(default=60.0, gt=0)
    insights_interval_seconds: float = Field(default=300.0, gt=0)

    # Persisted session token
    session_path: str = str(Path.home() / ".nexen" / "session.json")

    # Invalidation table
    invalidation_rules_path: str = str(_BUNDLED_RULES)

    model_config = {"env_prefix": "NEXEN_"}
