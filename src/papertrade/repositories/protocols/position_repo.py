"""Position repository protocol."""

from typing import Protocol, Optional

from papertrade.domain.models import Position


class PositionRepository(Protocol):
    """Interface for position data access. Keyed by (account_id, symbol)."""

    def get(self, account_id: str, symbol: str) -> Optional[Position]:
        ...

    def list_by_account(self, account_id: str) -> list[Position]:
        """List open positions for an account, ordered by symbol."""
        ...

    def save(self, position: Position) -> Position:
        """Insert or update a position."""
        ...

    def delete(self, account_id: str, symbol: str) -> None:
        ...
