"""View models for risk and attribution outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models.enums import SuggestionAction


@dataclass
class SectorAllocationItem:
    """Single sector in the allocation breakdown."""

    sector: str
    market_value: Decimal
    weight: Decimal
    average_return: Decimal
    position_count: int
    best_performer: Optional[str] = None
    worst_performer: Optional[str] = None


@dataclass
class AttributionItem:
    """Contribution of one position or sector to portfolio return."""

    name: str
    weight: Decimal
    return_percent: Decimal
    contribution: Decimal


@dataclass
class PerformanceAttribution:
    by_sector: list[AttributionItem] = field(default_factory=list)
    by_position: list[AttributionItem] = field(default_factory=list)


@dataclass
class RiskMetrics:
    """Portfolio-level risk figures."""

    concentration_risk: Decimal
    herfindahl_index: Decimal
    volatility: Decimal
    volatility_source: str
    value_at_risk_95: Decimal
    expected_shortfall_95: Decimal
    sharpe_ratio: Decimal
    sortino_ratio: Decimal
    max_drawdown: Decimal
    correlation_matrix: dict[str, dict[str, Decimal]] = field(default_factory=dict)


@dataclass
class BenchmarkComparison:
    benchmark: str
    benchmark_return: Decimal
    portfolio_return: Decimal
    alpha: Decimal
    tracking_error: Decimal
    information_ratio: Decimal


@dataclass
class HoldingItem:
    symbol: str
    sector: str
    market_value: Decimal
    weight: Decimal
    unrealized_pnl: Decimal
    unrealized_return_percent: Decimal


@dataclass
class RebalancingSuggestion:
    """Advisory only; never executed."""

    action: SuggestionAction
    symbol: Optional[str]
    current_weight: Decimal
    target_weight: Decimal
    reason: str


@dataclass
class PerformanceSummary:
    total_return: Decimal
    annualized_return: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal


@dataclass
class AnalyticsView:
    """Bundle returned by ``get_analytics``."""

    account_id: str
    total_value: Decimal
    sector_allocation: list[SectorAllocationItem]
    concentration_risk: Decimal
    risk_metrics: RiskMetrics
    benchmark_comparison: list[BenchmarkComparison]
    rebalancing_suggestions: list[RebalancingSuggestion]
    performance_summary: PerformanceSummary
    performance_attribution: PerformanceAttribution
    top_holdings: list[HoldingItem]
    as_of: Optional[datetime] = None
