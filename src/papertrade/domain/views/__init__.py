"""View models package."""

from papertrade.domain.views.ledger import (
    Quote,
    PositionView,
    TodayPnlView,
    AccountView,
)
from papertrade.domain.views.performance import (
    HistoryPoint,
    PerformanceStats,
    PerformanceView,
)
from papertrade.domain.views.analytics import (
    SectorAllocationItem,
    AttributionItem,
    PerformanceAttribution,
    RiskMetrics,
    BenchmarkComparison,
    HoldingItem,
    RebalancingSuggestion,
    PerformanceSummary,
    AnalyticsView,
)

__all__ = [
    "Quote",
    "PositionView",
    "TodayPnlView",
    "AccountView",
    "HistoryPoint",
    "PerformanceStats",
    "PerformanceView",
    "SectorAllocationItem",
    "AttributionItem",
    "PerformanceAttribution",
    "RiskMetrics",
    "BenchmarkComparison",
    "HoldingItem",
    "RebalancingSuggestion",
    "PerformanceSummary",
    "AnalyticsView",
]
