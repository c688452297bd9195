"""Repository protocol definitions (interfaces)."""

from papertrade.repositories.protocols.account_repo import AccountRepository
from papertrade.repositories.protocols.position_repo import PositionRepository
from papertrade.repositories.protocols.trade_repo import TradeRepository
from papertrade.repositories.protocols.unit_of_work import UnitOfWork

__all__ = [
    "AccountRepository",
    "PositionRepository",
    "TradeRepository",
    "UnitOfWork",
]
