"""Pydantic schemas for API request/response."""

from papertrade.api.schemas.account import (
    AccountCreate,
    AccountResponse,
    AccountSummaryResponse,
    AccountListResponse,
    PositionResponse,
    TodayPnlResponse,
)
from papertrade.api.schemas.trade import (
    TradeCreateRequest,
    TradeResponse,
    TradeListResponse,
)
from papertrade.api.schemas.analytics import (
    PerformanceResponse,
    AnalyticsResponse,
    QuoteResponse,
)

__all__ = [
    "AccountCreate",
    "AccountResponse",
    "AccountSummaryResponse",
    "AccountListResponse",
    "PositionResponse",
    "TodayPnlResponse",
    "TradeCreateRequest",
    "TradeResponse",
    "TradeListResponse",
    "PerformanceResponse",
    "AnalyticsResponse",
    "QuoteResponse",
]
