"""
Tests for price sources and the sector map: stub, static map, and
yfinance with a mocked module.
"""

from decimal import Decimal
from unittest.mock import MagicMock, patch

import pytest

from papertrade.app_context import build_price_source
from papertrade.config.settings import Settings
from papertrade.core.exceptions import DependencyFailureError
from papertrade.providers import StaticSectorMap, StubPriceSource, YFinancePriceSource
from papertrade.services import PriceService


def _mock_yf(info: dict) -> MagicMock:
    mock_yf = MagicMock()
    mock_yf.Ticker.return_value = MagicMock(info=info)
    return mock_yf


# -----------------------------------------------------------------------------
# YFinancePriceSource with mocked yfinance
# -----------------------------------------------------------------------------


@patch("papertrade.providers.yfinance_provider._get_yf")
def test_yfinance_reads_current_price_and_previous_close(mock_get_yf):
    mock_get_yf.return_value = _mock_yf({"currentPrice": 180.0, "previousClose": 178.5})

    source = YFinancePriceSource()

    assert source.current_price("aapl") == Decimal("180.0")
    assert source.previous_close("aapl") == Decimal("178.5")
    mock_get_yf.return_value.Ticker.assert_called_with("AAPL")


@patch("papertrade.providers.yfinance_provider._get_yf")
def test_yfinance_falls_back_to_regular_market_price(mock_get_yf):
    mock_get_yf.return_value = _mock_yf({"regularMarketPrice": 401.25})

    source = YFinancePriceSource()

    assert source.current_price("MSFT") == Decimal("401.25")
    assert source.previous_close("MSFT") is None


@patch("papertrade.providers.yfinance_provider._get_yf")
def test_yfinance_unknown_symbol_is_none(mock_get_yf):
    mock_get_yf.return_value = _mock_yf({})

    assert YFinancePriceSource().current_price("ZZZZ") is None


@patch("papertrade.providers.yfinance_provider._get_yf")
def test_yfinance_error_becomes_dependency_failure(mock_get_yf):
    """When yfinance raises, the price service reports a dependency failure."""
    mock_get_yf.return_value.Ticker.side_effect = RuntimeError("rate limited")
    service = PriceService(YFinancePriceSource())

    with pytest.raises(DependencyFailureError):
        service.get_price("AAPL")
    service.close()


# -----------------------------------------------------------------------------
# Stub source and sector map
# -----------------------------------------------------------------------------


def test_stub_set_price_keeps_previous_close():
    source = StubPriceSource({"X": (Decimal("100"), Decimal("98"))})

    source.set_price("x", Decimal("105"))

    assert source.current_price("X") == Decimal("105")
    assert source.previous_close("X") == Decimal("98")


def test_stub_default_prices_cover_common_symbols():
    source = StubPriceSource()

    assert source.current_price("AAPL") == Decimal("185.50")
    assert source.current_price("NOPE") is None


def test_static_sector_map_assign():
    sectors = StaticSectorMap({})
    sectors.assign("abc", "Materials")

    assert sectors.sector_of("ABC") == "Materials"
    assert sectors.sector_of("XYZ") is None
    assert StaticSectorMap().sector_of("JPM") == "Financials"


def test_build_price_source_by_name():
    assert isinstance(build_price_source(Settings(price_provider="stub")), StubPriceSource)
    assert isinstance(build_price_source(Settings(price_provider="YFinance")), YFinancePriceSource)
    with pytest.raises(ValueError):
        build_price_source(Settings(price_provider="bloomberg"))
