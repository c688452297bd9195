"""Position domain model."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_EVEN, Decimal
from typing import Optional

ZERO = Decimal("0")

# Smallest quantity or amount the ledger stores (8 decimal places)
LEDGER_PLACES = 8
LEDGER_INCREMENT = Decimal(1).scaleb(-LEDGER_PLACES)


def to_ledger(value: Decimal) -> Decimal:
    """Round an amount to the ledger's storage increment."""
    return value.quantize(LEDGER_INCREMENT, rounding=ROUND_HALF_EVEN)


def fits_ledger(value: Decimal) -> bool:
    """True when ``value`` is representable without rounding."""
    return value.normalize().as_tuple().exponent >= -LEDGER_PLACES


@dataclass
class Position:
    """
    Holding of one symbol inside one account (long only).

    ``total_cost`` is the authoritative cost basis; ``average_cost`` is
    kept in step with it at the ledger increment. All amounts are held at
    the precision they are stored with, so a reloaded position equals the
    one that was saved. A position whose quantity reaches zero is deleted
    by the caller.
    """

    account_id: str
    symbol: str
    quantity: Decimal = field(default_factory=lambda: Decimal("0"))
    average_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    total_cost: Decimal = field(default_factory=lambda: Decimal("0"))
    last_price: Optional[Decimal] = None
    market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    updated_at: Optional[datetime] = field(default=None)

    @property
    def is_closed(self) -> bool:
        return abs(self.quantity) < LEDGER_INCREMENT

    @property
    def unrealized_return_percent(self) -> Decimal:
        """Unrealized P&L as a percentage of cost basis."""
        if self.total_cost == ZERO:
            return ZERO
        return self.unrealized_pnl / self.total_cost * 100

    def apply_buy(self, quantity: Decimal, price: Decimal) -> None:
        """Add shares and re-weight the average cost."""
        self.total_cost += to_ledger(quantity * price)
        self.quantity += quantity
        self.average_cost = to_ledger(self.total_cost / self.quantity)
        self.mark_to_market(price)

    def apply_sell(self, quantity: Decimal, price: Decimal) -> Decimal:
        """
        Remove shares at ``price`` and return the realized P&L.

        Cost basis shrinks in proportion to the shares sold; the average
        cost of the remaining shares is unchanged.
        """
        if quantity > self.quantity:
            raise ValueError(f"Cannot sell {quantity} of {self.symbol}; holding {self.quantity}")

        if quantity == self.quantity:
            cost_removed = self.total_cost
        else:
            cost_removed = min(self.total_cost, to_ledger(self.total_cost * quantity / self.quantity))

        self.total_cost -= cost_removed
        self.quantity -= quantity
        if self.is_closed:
            self.quantity = ZERO
            self.total_cost = ZERO
            self.average_cost = ZERO
        self.mark_to_market(price)
        return to_ledger(quantity * price) - cost_removed

    def mark_to_market(self, price: Decimal) -> None:
        """Revalue the holding at ``price``."""
        self.last_price = to_ledger(price)
        self.market_value = to_ledger(self.quantity * self.last_price)
        self.unrealized_pnl = self.market_value - self.total_cost
