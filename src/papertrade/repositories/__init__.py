"""Repository layer - data access abstractions and implementations."""

from papertrade.repositories.protocols import (
    AccountRepository,
    PositionRepository,
    TradeRepository,
    UnitOfWork,
)

__all__ = [
    "AccountRepository",
    "PositionRepository",
    "TradeRepository",
    "UnitOfWork",
]
