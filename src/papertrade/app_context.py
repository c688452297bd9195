"""Application context for in-process service wiring.

Owns the database engine, the per-account lock registry, the trade event
bus and the maintenance job, and hands out services bound to them. The
FastAPI app keeps one instance on ``app.state``; tests and scripts can
build their own.
"""

import logging
from decimal import Decimal
from typing import Optional

from sqlalchemy import Engine
from sqlalchemy.orm import sessionmaker

from papertrade.config.settings import Settings, get_settings
from papertrade.core.locks import AccountLockRegistry
from papertrade.core.timezone import Clock, now_eastern
from papertrade.domain.models import AccountTypeCatalog, default_account_types, default_rules
from papertrade.providers import (
    PriceSource,
    SectorMap,
    StaticSectorMap,
    StubPriceSource,
    YFinancePriceSource,
)
from papertrade.repositories.sqlalchemy import (
    SqlAlchemyUnitOfWork,
    build_engine,
    build_session_factory,
    init_db,
)
from papertrade.services import (
    CorrelationEstimator,
    DayTradingComplianceGate,
    LedgerMaintenanceJob,
    LedgerService,
    PerformanceCalculator,
    PriceService,
    RiskAttributionEngine,
    TradeEventBus,
    TradeExecutionEngine,
)

logger = logging.getLogger(__name__)


def build_price_source(settings: Settings) -> PriceSource:
    """Price source named by ``settings.price_provider``."""
    provider = settings.price_provider.strip().lower()
    if provider == "yfinance":
        return YFinancePriceSource()
    if provider == "stub":
        return StubPriceSource()
    raise ValueError(f"Unknown price provider: {settings.price_provider}")


class TradingContext:
    """
    Wires every service of the ledger around shared state.

    Engines built from the same context share one lock registry, so
    mutations to one account are serialized across all of them.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        engine: Optional[Engine] = None,
        price_source: Optional[PriceSource] = None,
        sector_map: Optional[SectorMap] = None,
        catalog: Optional[AccountTypeCatalog] = None,
        correlation_estimator: Optional[CorrelationEstimator] = None,
        clock: Clock = now_eastern,
    ):
        self.settings = settings or get_settings()
        self.clock = clock
        self.engine = engine or build_engine(self.settings.get_database_url())
        self.session_factory: sessionmaker = build_session_factory(self.engine)
        self.locks = AccountLockRegistry()
        self.events = TradeEventBus()
        self.catalog = catalog or AccountTypeCatalog(
            default_account_types(self.settings.pattern_day_trader_min_equity)
        )
        self.price_source = price_source or build_price_source(self.settings)
        self.sector_map = sector_map or StaticSectorMap()
        self.correlation_estimator = correlation_estimator
        self.prices = PriceService(
            self.price_source,
            timeout_seconds=self.settings.price_timeout_seconds,
            cache_ttl_seconds=self.settings.price_cache_ttl_seconds,
            clock=clock,
        )
        self.compliance = DayTradingComplianceGate(
            self.catalog,
            day_trade_limit=self.settings.day_trade_limit,
            window_business_days=self.settings.day_trade_window_business_days,
        )
        self.maintenance = LedgerMaintenanceJob(
            self.unit_of_work,
            self.prices,
            self.compliance,
            self.locks,
            interval_seconds=self.settings.maintenance_interval_seconds,
            clock=clock,
        )
        self._started = False

    @property
    def is_started(self) -> bool:
        return self._started

    def start(self) -> None:
        """Create tables and start background maintenance if enabled."""
        if self._started:
            return
        init_db(self.engine)
        if self.settings.maintenance_enabled:
            self.maintenance.start()
        self._started = True
        logger.info("Trading context started (%s)", self.engine.url.render_as_string(hide_password=True))

    def close(self) -> None:
        """Stop background work and release resources."""
        self.maintenance.stop()
        self.events.clear()
        self.prices.close()
        self.engine.dispose()
        self._started = False

    def __enter__(self) -> "TradingContext":
        self.start()
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def unit_of_work(self) -> SqlAlchemyUnitOfWork:
        return SqlAlchemyUnitOfWork(self.session_factory())

    # Service accessors
    def execution_engine(self) -> TradeExecutionEngine:
        return TradeExecutionEngine(
            self.unit_of_work,
            self.prices,
            self.compliance,
            self.locks,
            event_bus=self.events,
            clock=self.clock,
        )

    def ledger(self) -> LedgerService:
        default_cash = self.settings.default_initial_cash
        return LedgerService(
            self.unit_of_work,
            self.catalog,
            self.execution_engine(),
            self.prices,
            self.locks,
            default_initial_cash=Decimal(str(default_cash)) if default_cash is not None else None,
            clock=self.clock,
        )

    def performance(self) -> PerformanceCalculator:
        return PerformanceCalculator(
            self.unit_of_work,
            self.prices,
            risk_free_rate=self.settings.risk_free_rate,
            clock=self.clock,
        )

    def risk(self) -> RiskAttributionEngine:
        return RiskAttributionEngine(
            self.unit_of_work,
            self.prices,
            self.sector_map,
            self.performance(),
            correlation_estimator=self.correlation_estimator,
            rules=default_rules(
                position_weight_limit=self.settings.position_weight_limit,
                sector_weight_limit=self.settings.sector_weight_limit,
                concentration_threshold=self.settings.concentration_risk_threshold,
                stop_loss_percent=self.settings.stop_loss_percent,
            ),
            benchmarks=self.settings.benchmarks,
            risk_free_rate=self.settings.risk_free_rate,
            max_suggestions=self.settings.max_suggestions,
            top_holdings_limit=self.settings.top_holdings_limit,
            clock=self.clock,
        )
