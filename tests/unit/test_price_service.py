"""
Unit tests for PriceService.

Tests cover:
- Symbol normalization and quotes
- Unknown symbols, timeouts and source failures
- TTL caching and invalidation
- Batch lookups with last-known fallback
- A timed-out price leaves the ledger untouched
"""

from decimal import Decimal

import pytest

from papertrade.core.exceptions import (
    DependencyFailureError,
    PriceUnavailableError,
    ValidationError,
)
from papertrade.providers import StubPriceSource
from papertrade.services import PriceService, TradeExecutionEngine
from papertrade.services.price_service import normalize_symbol

from tests.conftest import (
    FIXED_PRICES,
    CountingPriceSource,
    FailingPriceSource,
    SlowPriceSource,
)


@pytest.fixture
def slow_source():
    source = SlowPriceSource()
    yield source
    source.release.set()


# =============================================================================
# LOOKUPS
# =============================================================================


class TestLookups:
    """Tests for single-symbol lookups."""

    def test_normalize_symbol(self):
        assert normalize_symbol("  aapl ") == "AAPL"
        with pytest.raises(ValidationError):
            normalize_symbol("   ")

    def test_quote_includes_previous_close(self, clock):
        service = PriceService(StubPriceSource(FIXED_PRICES), clock=clock)

        quote = service.get_quote("x")

        assert quote.symbol == "X"
        assert quote.last_price == Decimal("100")
        assert quote.prev_close == Decimal("98")
        assert quote.as_of == clock()
        service.close()

    def test_unknown_symbol_is_validation_error(self):
        service = PriceService(StubPriceSource(FIXED_PRICES))

        with pytest.raises(ValidationError):
            service.get_price("NOPE")
        assert service.get_previous_close("NOPE") is None
        service.close()

    def test_non_positive_price_is_unavailable(self):
        source = StubPriceSource(FIXED_PRICES)
        source.set_price("X", Decimal("0"))
        service = PriceService(source)

        with pytest.raises(PriceUnavailableError):
            service.get_price("X")
        service.close()


# =============================================================================
# FAILURES
# =============================================================================


class TestFailures:
    """Tests for slow and failing sources."""

    def test_slow_source_times_out(self, slow_source):
        """
        GIVEN a source that does not answer
        WHEN I ask for a price with a 50ms timeout
        THEN PriceUnavailableError is raised instead of blocking
        """
        service = PriceService(slow_source, timeout_seconds=0.05)

        with pytest.raises(PriceUnavailableError) as exc_info:
            service.get_price("X")

        assert exc_info.value.code == "PRICE_UNAVAILABLE"
        assert exc_info.value.symbol == "X"
        service.close()

    def test_failing_source_is_dependency_failure(self):
        service = PriceService(FailingPriceSource())

        with pytest.raises(DependencyFailureError) as exc_info:
            service.get_price("X")

        assert isinstance(exc_info.value.__cause__, ConnectionError)
        service.close()

    def test_timed_out_trade_leaves_no_trace(
        self,
        context,
        ledger_service,
        sample_account,
        slow_source,
        clock,
    ):
        """
        GIVEN an execution engine whose price source never answers
        WHEN I submit a buy
        THEN PriceUnavailableError is raised and no trade or position is written
        """
        engine = TradeExecutionEngine(
            context.unit_of_work,
            PriceService(slow_source, timeout_seconds=0.05),
            context.compliance,
            context.locks,
            clock=clock,
        )

        with pytest.raises(PriceUnavailableError):
            engine.execute(sample_account.account_id, "X", "buy", Decimal("1"))

        account = ledger_service.get_account(sample_account.account_id)
        assert account.cash_balance == Decimal("10000")
        assert account.positions == []
        assert ledger_service.list_trades(sample_account.account_id) == []


# =============================================================================
# CACHING
# =============================================================================


class TestCaching:
    """Tests for the TTL cache."""

    def test_cached_price_is_reused_within_ttl(self):
        source = CountingPriceSource()
        service = PriceService(source, cache_ttl_seconds=60)

        service.get_price("X")
        service.get_price("x")

        assert source.calls == 1
        service.close()

    def test_invalidate_forces_refetch(self):
        source = CountingPriceSource()
        service = PriceService(source, cache_ttl_seconds=60)
        service.get_price("X")
        source.set_price("X", Decimal("101"))

        service.invalidate("X")

        assert service.get_price("X") == Decimal("101")
        assert source.calls == 2
        service.close()

    def test_zero_ttl_disables_cache(self):
        source = CountingPriceSource()
        service = PriceService(source, cache_ttl_seconds=0)

        service.get_price("X")
        service.get_price("X")

        assert source.calls == 2
        service.close()


# =============================================================================
# BATCH
# =============================================================================


class TestBatch:
    """Tests for get_prices."""

    def test_unpriced_symbol_uses_fallback_or_is_omitted(self):
        """
        GIVEN X is known, GONE has a last known price and NOPE has none
        WHEN I ask for all three
        THEN X is live, GONE uses its fallback and NOPE is left out
        """
        service = PriceService(StubPriceSource(FIXED_PRICES))

        prices = service.get_prices(
            ["x", "GONE", "NOPE"],
            fallback={"GONE": Decimal("12.5")},
        )

        assert prices == {"X": Decimal("100"), "GONE": Decimal("12.5")}
        service.close()

    def test_failing_source_falls_back(self):
        service = PriceService(FailingPriceSource())

        assert service.get_prices(["X"], fallback={"X": Decimal("99")}) == {"X": Decimal("99")}
        service.close()
