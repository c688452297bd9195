"""Dependency injection for FastAPI."""

from fastapi import Depends, Request

from papertrade.app_context import TradingContext
from papertrade.services import (
    LedgerService,
    PerformanceCalculator,
    PriceService,
    RiskAttributionEngine,
)


def get_context(request: Request) -> TradingContext:
    """Provide the TradingContext created by the app lifespan."""
    return request.app.state.context


def get_ledger_service(context: TradingContext = Depends(get_context)) -> LedgerService:
    """Provide LedgerService instance."""
    return context.ledger()


def get_performance_calculator(
    context: TradingContext = Depends(get_context),
) -> PerformanceCalculator:
    """Provide PerformanceCalculator instance."""
    return context.performance()


def get_risk_engine(context: TradingContext = Depends(get_context)) -> RiskAttributionEngine:
    """Provide RiskAttributionEngine instance."""
    return context.risk()


def get_price_service(context: TradingContext = Depends(get_context)) -> PriceService:
    """Provide the shared PriceService."""
    return context.prices
