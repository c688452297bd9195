"""Account repository protocol."""

from typing import Protocol, Optional

from papertrade.domain.models import Account


class AccountRepository(Protocol):
    """Interface for account data access."""

    def create(self, account: Account) -> Account:
        """Persist a new account."""
        ...

    def get_by_id(self, account_id: str) -> Optional[Account]:
        """Retrieve account by ID (without positions)."""
        ...

    def list_all(self, owner_id: Optional[str] = None, active_only: bool = False) -> list[Account]:
        """List accounts, optionally for one owner."""
        ...

    def update(self, account: Account) -> Account:
        """Write back mutable account fields."""
        ...
