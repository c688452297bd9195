"""Price source and sector map protocols."""

from decimal import Decimal
from typing import Optional, Protocol


class PriceSource(Protocol):
    """
    Protocol for market price providers.

    Implementations return ``None`` for a symbol they do not know and
    may raise on transport failure; ``PriceService`` turns both into
    typed errors and applies the timeout.
    """

    def current_price(self, symbol: str) -> Optional[Decimal]:
        """Latest trade price for ``symbol``."""
        ...

    def previous_close(self, symbol: str) -> Optional[Decimal]:
        """Prior session's closing price for ``symbol``."""
        ...


class SectorMap(Protocol):
    """Instrument to sector lookup."""

    def sector_of(self, symbol: str) -> Optional[str]:
        """Sector name, or ``None`` when the symbol is not classified."""
        ...
