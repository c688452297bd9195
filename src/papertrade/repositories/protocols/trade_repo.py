"""Trade repository protocol."""

from datetime import datetime
from typing import Protocol, Optional

from papertrade.domain.models import Trade, TradeSide


class TradeRepository(Protocol):
    """Interface for the append-only trade history."""

    def create(self, trade: Trade) -> Trade:
        """Append a trade record."""
        ...

    def get_by_id(self, trade_id: str) -> Optional[Trade]:
        ...

    def list_by_account(self, account_id: str) -> list[Trade]:
        """List all trades for an account, ordered by executed_at."""
        ...

    def exists_between(
        self,
        account_id: str,
        symbol: str,
        side: TradeSide,
        start: datetime,
        end: datetime,
    ) -> bool:
        """Whether an executed trade matching the filters lies in [start, end]."""
        ...
