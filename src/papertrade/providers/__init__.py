"""Market data providers module."""

from papertrade.providers.price_source import PriceSource, SectorMap
from papertrade.providers.stub_provider import StubPriceSource
from papertrade.providers.sector_map import StaticSectorMap
from papertrade.providers.yfinance_provider import YFinancePriceSource

__all__ = [
    "PriceSource",
    "SectorMap",
    "StubPriceSource",
    "StaticSectorMap",
    "YFinancePriceSource",
]
