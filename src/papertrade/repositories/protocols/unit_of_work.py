"""Unit-of-work protocol."""

from typing import Protocol

from papertrade.repositories.protocols.account_repo import AccountRepository
from papertrade.repositories.protocols.position_repo import PositionRepository
from papertrade.repositories.protocols.trade_repo import TradeRepository


class UnitOfWork(Protocol):
    """
    Groups the repository writes of one operation.

    Nothing written through the repositories is durable until
    ``commit()``; ``rollback()`` discards all of it.
    """

    accounts: AccountRepository
    positions: PositionRepository
    trades: TradeRepository

    def commit(self) -> None:
        ...

    def rollback(self) -> None:
        ...

    def refresh(self) -> None:
        """Drop cached state so the next read sees committed rows."""
        ...

    def close(self) -> None:
        """Release the underlying session."""
        ...
