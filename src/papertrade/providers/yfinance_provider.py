"""
Price source backed by Yahoo Finance via yfinance.

Lookups are synchronous; ``PriceService`` applies the timeout and cache.
"""

from decimal import Decimal
from typing import Any, Optional


# Lazy import so tests can patch before import
def _get_yf():
    import yfinance as yf
    return yf


def _to_decimal(value: Any) -> Optional[Decimal]:
    if value is None:
        return None
    try:
        return Decimal(str(float(value)))
    except (TypeError, ValueError):
        return None


class YFinancePriceSource:
    """``PriceSource`` reading ``Ticker.info`` from yfinance."""

    def _info(self, symbol: str) -> dict:
        yf = _get_yf()
        info = yf.Ticker(symbol.upper()).info
        return info if isinstance(info, dict) else {}

    def current_price(self, symbol: str) -> Optional[Decimal]:
        info = self._info(symbol)
        # currentPrice preferred, then regularMarketPrice
        price = info.get("currentPrice")
        if price is None:
            price = info.get("regularMarketPrice")
        return _to_decimal(price)

    def previous_close(self, symbol: str) -> Optional[Decimal]:
        info = self._info(symbol)
        prev_close = info.get("previousClose") or info.get("regularMarketPreviousClose")
        return _to_decimal(prev_close)
