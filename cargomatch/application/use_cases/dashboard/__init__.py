"""Dashboard aggregation: live dashboards, market insights and analytics."""

from .aggregator import DashboardAggregator, DashboardView
from .insights import (
    DemandTrend,
    DriverAnalytics,
    JobApplicationsSummary,
    MarketInsights,
    MonthlyTrend,
    Recommendation,
    get_cargo_owner_applications_summary,
    get_driver_analytics,
    get_market_insights,
)
from .live import ActiveJob, subscribe_to_cargo_dashboard, subscribe_to_driver_dashboard

__all__ = [
    "ActiveJob",
    "DashboardAggregator",
    "DashboardView",
    "DemandTrend",
    "DriverAnalytics",
    "JobApplicationsSummary",
    "MarketInsights",
    "MonthlyTrend",
    "Recommendation",
    "get_cargo_owner_applications_summary",
    "get_driver_analytics",
    "get_market_insights",
    "subscribe_to_cargo_dashboard",
    "subscribe_to_driver_dashboard",
]
