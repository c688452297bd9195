"""Pydantic schemas for performance and analytics endpoints."""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel

from papertrade.domain.models.enums import SuggestionAction


class QuoteResponse(BaseModel):
    """Market quote for one symbol."""

    model_config = {"from_attributes": True}

    symbol: str
    last_price: Decimal
    prev_close: Optional[Decimal] = None
    as_of: datetime


class HistoryPointResponse(BaseModel):
    model_config = {"from_attributes": True}

    timestamp: datetime
    total_value: Decimal
    cash: Decimal
    invested_value: Decimal
    day_change: Decimal
    day_change_percent: Decimal


class PerformanceStatsResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_return: Decimal
    period_return: Decimal
    annualized_return: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal
    sortino_ratio: Decimal
    max_drawdown: Decimal
    best_day: Decimal
    worst_day: Decimal
    trade_count: int


class PerformanceResponse(BaseModel):
    """Value history and derived statistics."""

    model_config = {"from_attributes": True}

    account_id: str
    history: list[HistoryPointResponse]
    stats: PerformanceStatsResponse
    as_of: Optional[datetime] = None


class SectorAllocationResponse(BaseModel):
    model_config = {"from_attributes": True}

    sector: str
    market_value: Decimal
    weight: Decimal
    average_return: Decimal
    position_count: int
    best_performer: Optional[str] = None
    worst_performer: Optional[str] = None


class AttributionItemResponse(BaseModel):
    model_config = {"from_attributes": True}

    name: str
    weight: Decimal
    return_percent: Decimal
    contribution: Decimal


class PerformanceAttributionResponse(BaseModel):
    model_config = {"from_attributes": True}

    by_sector: list[AttributionItemResponse]
    by_position: list[AttributionItemResponse]


class RiskMetricsResponse(BaseModel):
    model_config = {"from_attributes": True}

    concentration_risk: Decimal
    herfindahl_index: Decimal
    volatility: Decimal
    volatility_source: str
    value_at_risk_95: Decimal
    expected_shortfall_95: Decimal
    sharpe_ratio: Decimal
    sortino_ratio: Decimal
    max_drawdown: Decimal
    correlation_matrix: dict[str, dict[str, Decimal]]


class BenchmarkComparisonResponse(BaseModel):
    model_config = {"from_attributes": True}

    benchmark: str
    benchmark_return: Decimal
    portfolio_return: Decimal
    alpha: Decimal
    tracking_error: Decimal
    information_ratio: Decimal


class HoldingResponse(BaseModel):
    model_config = {"from_attributes": True}

    symbol: str
    sector: str
    market_value: Decimal
    weight: Decimal
    unrealized_pnl: Decimal
    unrealized_return_percent: Decimal


class RebalancingSuggestionResponse(BaseModel):
    model_config = {"from_attributes": True}

    action: SuggestionAction
    symbol: Optional[str] = None
    current_weight: Decimal
    target_weight: Decimal
    reason: str


class PerformanceSummaryResponse(BaseModel):
    model_config = {"from_attributes": True}

    total_return: Decimal
    annualized_return: Decimal
    volatility: Decimal
    sharpe_ratio: Decimal


class AnalyticsResponse(BaseModel):
    """Risk and attribution bundle."""

    model_config = {"from_attributes": True}

    account_id: str
    total_value: Decimal
    sector_allocation: list[SectorAllocationResponse]
    concentration_risk: Decimal
    risk_metrics: RiskMetricsResponse
    benchmark_comparison: list[BenchmarkComparisonResponse]
    rebalancing_suggestions: list[RebalancingSuggestionResponse]
    performance_summary: PerformanceSummaryResponse
    performance_attribution: PerformanceAttributionResponse
    top_holdings: list[HoldingResponse]
    as_of: Optional[datetime] = None
