"""Stub price source for offline/testing use."""

import threading
from decimal import Decimal
from typing import Optional


# Deterministic fake prices for common symbols: (last, previous close)
_STUB_PRICES: dict[str, tuple[Decimal, Decimal]] = {
    "AAPL": (Decimal("185.50"), Decimal("184.25")),
    "GOOGL": (Decimal("142.75"), Decimal("141.50")),
    "MSFT": (Decimal("378.25"), Decimal("376.80")),
    "AMZN": (Decimal("178.50"), Decimal("177.25")),
    "TSLA": (Decimal("248.75"), Decimal("250.10")),
    "NVDA": (Decimal("485.25"), Decimal("482.50")),
    "META": (Decimal("505.50"), Decimal("502.75")),
    "JPM": (Decimal("172.40"), Decimal("171.90")),
    "XOM": (Decimal("104.60"), Decimal("105.20")),
    "JNJ": (Decimal("158.30"), Decimal("157.95")),
    "SPY": (Decimal("485.25"), Decimal("484.10")),
    "QQQ": (Decimal("418.75"), Decimal("417.50")),
    "VTI": (Decimal("252.30"), Decimal("251.80")),
}


class StubPriceSource:
    """
    Stub provider with deterministic prices for offline operation.

    Prices can be moved with ``set_price`` (tests use this to simulate
    market moves). Unknown symbols resolve to ``None``.
    """

    def __init__(self, prices: Optional[dict[str, tuple[Decimal, Decimal]]] = None):
        self._lock = threading.Lock()
        source = _STUB_PRICES if prices is None else prices
        self._prices: dict[str, tuple[Decimal, Decimal]] = {
            symbol.upper(): (Decimal(str(last)), Decimal(str(prev)))
            for symbol, (last, prev) in source.items()
        }

    def set_price(self, symbol: str, last: Decimal, prev_close: Optional[Decimal] = None) -> None:
        """Set the current price; previous close defaults to the old value."""
        key = symbol.upper()
        with self._lock:
            _, old_prev = self._prices.get(key, (last, last))
            self._prices[key] = (Decimal(str(last)), Decimal(str(prev_close)) if prev_close is not None else old_prev)

    def remove(self, symbol: str) -> None:
        with self._lock:
            self._prices.pop(symbol.upper(), None)

    def current_price(self, symbol: str) -> Optional[Decimal]:
        with self._lock:
            entry = self._prices.get(symbol.upper())
        return entry[0] if entry else None

    def previous_close(self, symbol: str) -> Optional[Decimal]:
        with self._lock:
            entry = self._prices.get(symbol.upper())
        return entry[1] if entry else None
