"""Account domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Iterable, Optional

from papertrade.domain.models.position import Position


@dataclass
class Account:
    """
    Virtual trading book (aka portfolio).

    Holds cash and the derived aggregates of its positions. Accounts are
    never deleted; closing one clears ``is_active``.
    """

    account_id: str
    owner_id: str
    account_type: str
    initial_cash: Decimal
    cash_balance: Decimal
    market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    realized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    day_trade_count: int = 0
    last_day_trade_reset: Optional[datetime] = field(default=None)
    is_active: bool = True
    created_at: Optional[datetime] = field(default=None)
    updated_at: Optional[datetime] = field(default=None)
    positions: list[Position] = field(default_factory=list)

    @property
    def total_value(self) -> Decimal:
        """Account equity: cash plus market value of all positions."""
        return self.cash_balance + self.market_value

    @property
    def total_pnl(self) -> Decimal:
        return self.realized_pnl + self.unrealized_pnl

    @property
    def total_return_percent(self) -> Decimal:
        if self.initial_cash == Decimal("0"):
            return Decimal("0")
        return (self.total_value - self.initial_cash) / self.initial_cash * 100

    def recompute_totals(self, positions: Iterable[Position]) -> None:
        """Re-derive market value and unrealized P&L from the given positions."""
        market_value = Decimal("0")
        unrealized = Decimal("0")
        for position in positions:
            market_value += position.market_value
            unrealized += position.unrealized_pnl
        self.market_value = market_value
        self.unrealized_pnl = unrealized
