"""Domain layer - pure business models with no external dependencies."""

from papertrade.domain.models import (
    Account,
    Position,
    Trade,
    TradeSide,
    TradeStatus,
    AccountTypeProfile,
    AccountTypeCatalog,
)

__all__ = [
    "Account",
    "Position",
    "Trade",
    "TradeSide",
    "TradeStatus",
    "AccountTypeProfile",
    "AccountTypeCatalog",
]
