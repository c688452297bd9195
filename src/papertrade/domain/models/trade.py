"""Trade domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.domain.models.enums import TradeSide, TradeStatus


@dataclass(frozen=True)
class Trade:
    """
    Executed trade (append-only history).

    Trades are the source of truth for replaying account value and for
    day-trade detection; they are never edited after creation.
    """

    trade_id: str
    account_id: str
    symbol: str
    side: TradeSide
    quantity: Decimal
    price: Decimal
    total_amount: Decimal
    executed_at: datetime
    status: TradeStatus = TradeStatus.EXECUTED
    realized_pnl: Optional[Decimal] = None
    is_day_trade: bool = False
    created_at: Optional[datetime] = field(default=None)

    def __post_init__(self) -> None:
        if isinstance(self.side, str):
            object.__setattr__(self, "side", TradeSide(self.side))
        if isinstance(self.status, str):
            object.__setattr__(self, "status", TradeStatus(self.status))

    @property
    def is_buy(self) -> bool:
        return self.side == TradeSide.BUY

    @property
    def net_cash_impact(self) -> Decimal:
        """Positive = cash added, negative = cash removed."""
        return -self.total_amount if self.is_buy else self.total_amount
