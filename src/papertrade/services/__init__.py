"""Service layer - business logic and orchestration."""

from papertrade.services.price_service import PriceService
from papertrade.services.compliance_gate import DayTradingComplianceGate, ComplianceDecision
from papertrade.services.events import TradeEventBus, Subscription
from papertrade.services.trade_execution import TradeExecutionEngine
from papertrade.services.ledger_service import LedgerService
from papertrade.services.performance import PerformanceCalculator
from papertrade.services.correlation import (
    CorrelationEstimator,
    SectorProxyCorrelationEstimator,
    ReturnSeriesCorrelationEstimator,
)
from papertrade.services.risk_engine import RiskAttributionEngine
from papertrade.services.maintenance import LedgerMaintenanceJob, MaintenanceReport

__all__ = [
    "PriceService",
    "DayTradingComplianceGate",
    "ComplianceDecision",
    "TradeEventBus",
    "Subscription",
    "TradeExecutionEngine",
    "LedgerService",
    "PerformanceCalculator",
    "CorrelationEstimator",
    "SectorProxyCorrelationEstimator",
    "ReturnSeriesCorrelationEstimator",
    "RiskAttributionEngine",
    "LedgerMaintenanceJob",
    "MaintenanceReport",
]
