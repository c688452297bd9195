"""Static instrument-to-sector classification."""

from typing import Optional


_DEFAULT_SECTORS: dict[str, str] = {
    "AAPL": "Technology",
    "MSFT": "Technology",
    "NVDA": "Technology",
    "GOOGL": "Communication Services",
    "META": "Communication Services",
    "AMZN": "Consumer Discretionary",
    "TSLA": "Consumer Discretionary",
    "JPM": "Financials",
    "XOM": "Energy",
    "JNJ": "Health Care",
    "SPY": "ETF",
    "QQQ": "ETF",
    "VTI": "ETF",
}


class StaticSectorMap:
    """Dictionary-backed ``SectorMap``."""

    def __init__(self, sectors: Optional[dict[str, str]] = None):
        source = _DEFAULT_SECTORS if sectors is None else sectors
        self._sectors = {symbol.upper(): sector for symbol, sector in source.items()}

    def assign(self, symbol: str, sector: str) -> None:
        self._sectors[symbol.upper()] = sector

    def sector_of(self, symbol: str) -> Optional[str]:
        return self._sectors.get(symbol.upper())
