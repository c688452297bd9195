"""Performance and risk analytics endpoints."""

from fastapi import APIRouter, Depends

from papertrade.api.deps import get_performance_calculator, get_risk_engine
from papertrade.api.schemas import PerformanceResponse, AnalyticsResponse
from papertrade.services import PerformanceCalculator, RiskAttributionEngine

router = APIRouter(prefix="/accounts/{account_id}", tags=["analytics"])


@router.get("/performance", response_model=PerformanceResponse)
def get_performance(
    account_id: str,
    calculator: PerformanceCalculator = Depends(get_performance_calculator),
) -> PerformanceResponse:
    """Value history rebuilt from trades, with return statistics."""
    return PerformanceResponse.model_validate(calculator.get_performance(account_id))


@router.get("/analytics", response_model=AnalyticsResponse)
def get_analytics(
    account_id: str,
    engine: RiskAttributionEngine = Depends(get_risk_engine),
) -> AnalyticsResponse:
    """Sector allocation, concentration, risk metrics and rebalancing suggestions."""
    return AnalyticsResponse.model_validate(engine.analyze(account_id))
