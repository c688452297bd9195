"""
Pytest configuration and fixtures for paper trading ledger tests.

This module provides:
- In-memory SQLite database fixtures
- A movable clock pinned to US/Eastern market time
- Deterministic, slow and failing price sources
- Service fixtures wired through TradingContext
- Factory helpers for accounts and trades
"""

import threading
from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import pytest
from fastapi.testclient import TestClient

from papertrade.app_context import TradingContext
from papertrade.config.settings import Settings, reset_settings
from papertrade.core.timezone import EASTERN_TZ
from papertrade.domain.models import (
    Account,
    AccountTypeCatalog,
    AccountTypeProfile,
    Trade,
    default_account_types,
)
from papertrade.main import create_app
from papertrade.providers import StaticSectorMap, StubPriceSource
from papertrade.repositories.sqlalchemy import build_engine, init_db
from papertrade.services import (
    LedgerService,
    PerformanceCalculator,
    RiskAttributionEngine,
    TradeExecutionEngine,
)


# =============================================================================
# TIMEZONE HELPERS
# =============================================================================


def eastern_datetime(
    year: int,
    month: int,
    day: int,
    hour: int = 10,
    minute: int = 0,
    second: int = 0,
) -> datetime:
    """Create a localized datetime in US/Eastern timezone."""
    return EASTERN_TZ.localize(datetime(year, month, day, hour, minute, second))


class MovableClock:
    """Clock returning a pinned time that tests can move forward."""

    def __init__(self, now: datetime):
        self._now = now

    def __call__(self) -> datetime:
        return self._now

    def set(self, now: datetime) -> None:
        self._now = now

    def advance(self, **kwargs) -> datetime:
        self._now = self._now + timedelta(**kwargs)
        return self._now


@pytest.fixture
def fixed_now() -> datetime:
    """Monday 2024-06-10 10:00 US/Eastern."""
    return eastern_datetime(2024, 6, 10, 10, 0, 0)


@pytest.fixture
def clock(fixed_now) -> MovableClock:
    return MovableClock(fixed_now)


# =============================================================================
# MARKET DATA FIXTURES
# =============================================================================


FIXED_PRICES = {
    "X": (Decimal("100"), Decimal("98")),
    "Y": (Decimal("50"), Decimal("50")),
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "NVDA": (Decimal("485.25"), Decimal("482.50")),
    "JPM": (Decimal("172.40"), Decimal("171.90")),
    "XOM": (Decimal("104.60"), Decimal("105.20")),
}

FIXED_SECTORS = {
    "AAPL": "Technology",
    "MSFT": "Technology",
    "NVDA": "Technology",
    "JPM": "Financials",
    "XOM": "Energy",
}


class SlowPriceSource:
    """Price source that blocks until released (or forever)."""

    def __init__(self, price: Decimal = Decimal("100")):
        self.release = threading.Event()
        self._price = price

    def current_price(self, symbol: str) -> Optional[Decimal]:
        self.release.wait(5)
        return self._price

    def previous_close(self, symbol: str) -> Optional[Decimal]:
        self.release.wait(5)
        return self._price


class FailingPriceSource:
    """Price source that always raises."""

    def current_price(self, symbol: str) -> Optional[Decimal]:
        raise ConnectionError("Network unavailable")

    def previous_close(self, symbol: str) -> Optional[Decimal]:
        raise ConnectionError("Network unavailable")


class CountingPriceSource(StubPriceSource):
    """Stub source that records how often it was asked."""

    def __init__(self, prices=None):
        super().__init__(prices if prices is not None else FIXED_PRICES)
        self.calls = 0

    def current_price(self, symbol: str) -> Optional[Decimal]:
        self.calls += 1
        return super().current_price(symbol)


@pytest.fixture
def price_source() -> StubPriceSource:
    """Deterministic prices; tests move them with ``set_price``."""
    return StubPriceSource(FIXED_PRICES)


@pytest.fixture
def sector_map() -> StaticSectorMap:
    return StaticSectorMap(FIXED_SECTORS)


# =============================================================================
# CONFIGURATION / DATABASE FIXTURES
# =============================================================================


TEST_DAY_TRADER = "TEST_DAY_TRADER"


@pytest.fixture
def settings() -> Settings:
    """Settings for tests: in-memory database, no price caching."""
    reset_settings()
    return Settings(
        database_url="sqlite://",
        price_cache_ttl_seconds=0,
        price_timeout_seconds=2.0,
        maintenance_enabled=False,
        maintenance_interval_seconds=0.05,
    )


@pytest.fixture
def catalog() -> AccountTypeCatalog:
    """Built-in account types plus a day-trading type with no minimum."""
    profiles = default_account_types()
    profiles.append(
        AccountTypeProfile(
            key=TEST_DAY_TRADER,
            name="Test Day Trader",
            default_initial_cash=Decimal("10000"),
            day_trading_enabled=True,
            minimum_balance=Decimal("0"),
        )
    )
    return AccountTypeCatalog(profiles)


@pytest.fixture(scope="function")
def test_engine(settings):
    """Create test database engine with shared in-memory SQLite."""
    engine = build_engine(settings.get_database_url())
    init_db(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def context(settings, test_engine, price_source, sector_map, catalog, clock) -> TradingContext:
    """TradingContext wired to the in-memory database and stub prices."""
    ctx = TradingContext(
        settings,
        engine=test_engine,
        price_source=price_source,
        sector_map=sector_map,
        catalog=catalog,
        clock=clock,
    )
    ctx.start()
    yield ctx
    ctx.close()


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def ledger_service(context) -> LedgerService:
    return context.ledger()


@pytest.fixture
def execution_engine(context) -> TradeExecutionEngine:
    return context.execution_engine()


@pytest.fixture
def performance_calculator(context) -> PerformanceCalculator:
    return context.performance()


@pytest.fixture
def risk_engine(context) -> RiskAttributionEngine:
    return context.risk()


# =============================================================================
# FACTORY FIXTURES
# =============================================================================


@pytest.fixture
def account_factory(ledger_service) -> Callable[..., Account]:
    """Factory for opening test accounts."""

    def _create_account(
        account_type: str = TEST_DAY_TRADER,
        initial_cash: Optional[Decimal] = Decimal("10000"),
        owner_id: str = "trader-1",
    ) -> Account:
        return ledger_service.create_account(
            owner_id=owner_id,
            account_type=account_type,
            initial_cash=initial_cash,
        )

    return _create_account


@pytest.fixture
def trade_factory(ledger_service, price_source) -> Callable[..., Trade]:
    """Factory for executing a trade at a chosen price."""

    def _trade(
        account_id: str,
        symbol: str,
        side: str,
        quantity: Decimal,
        price: Optional[Decimal] = None,
    ) -> Trade:
        if price is not None:
            price_source.set_price(symbol, price)
        return ledger_service.execute_trade(account_id, symbol, side, quantity)

    return _trade


@pytest.fixture
def sample_account(account_factory) -> Account:
    """Day-trading account with $10,000 and no minimum balance."""
    return account_factory()


# =============================================================================
# API TEST CLIENT FIXTURE
# =============================================================================


@pytest.fixture
def client(context) -> TestClient:
    """Provide FastAPI test client bound to the test context."""
    app = create_app(context)
    with TestClient(app) as c:
        yield c


# =============================================================================
# HELPER FUNCTIONS (exported for use in tests)
# =============================================================================


def assert_decimal_equal(
    actual: Decimal,
    expected: Decimal,
    tolerance: Decimal = Decimal("0.01"),
) -> None:
    """Assert two Decimals are equal within tolerance."""
    diff = abs(Decimal(str(actual)) - Decimal(str(expected)))
    assert diff <= tolerance, f"Expected {expected}, got {actual} (diff={diff})"
