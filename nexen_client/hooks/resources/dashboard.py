"""Dashboard bindings, including the polled alert feeds."""

from __future__ import annotations

from nexen_client.cache.keys import QueryKeys
from nexen_client.hooks.query import Query
from nexen_client.hooks.resources.base import ResourceHooks

_CRITICAL_ALERTS_INTERVAL = 60.0
_INSIGHTS_INTERVAL = 300.0


class DashboardHooks(ResourceHooks):
    domain = "dashboard"

    def stats(self, period: str = "today") -> Query:
        return self.query(
            QueryKeys.dashboard.key("stats", period), "/dashboard/stats", params={"period": period}
        )

    def recent_activity(self) -> Query:
        return self.query(QueryKeys.dashboard.key("recent-activity"), "/dashboard/recent-activity")

    def critical_alerts(self) -> Query:
        interval = (
            self.settings.critical_alerts_interval_seconds
            if self.settings is not None
            else _CRITICAL_ALERTS_INTERVAL
        )
        return self.query(
            QueryKeys.alerts.key("critical"),
            "/dashboard/critical-alerts",
            refetch_interval=interval,
        )

    def ai_insights(self) -> Query:
        interval = (
            self.settings.insights_interval_seconds if self.settings is not None else _INSIGHTS_INTERVAL
        )
        return self.query(
            QueryKeys.alerts.key("ai-insights"),
            "/dashboard/ai-insights",
            refetch_interval=interval,
        )
