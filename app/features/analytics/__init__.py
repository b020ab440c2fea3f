"""Analytics module: revenue dashboard aggregated from order snapshots."""

from app.features.analytics.aggregator import build_revenue_dashboard
from app.features.analytics.routes import router
from app.features.analytics.service import AnalyticsService
from app.features.analytics.snapshot import InvalidAmountError

__all__ = ["AnalyticsService", "InvalidAmountError", "build_revenue_dashboard", "router"]
