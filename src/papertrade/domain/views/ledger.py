"""View models for ledger outputs."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Quote:
    """Market quote data for a symbol."""

    symbol: str
    last_price: Decimal
    prev_close: Optional[Decimal]
    as_of: datetime


@dataclass
class PositionView:
    """View model for a single holding position."""

    symbol: str
    quantity: Decimal
    average_cost: Decimal
    total_cost: Decimal
    last_price: Optional[Decimal] = None
    market_value: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_pnl: Decimal = field(default_factory=lambda: Decimal("0"))
    unrealized_return_percent: Decimal = field(default_factory=lambda: Decimal("0"))
    prev_close: Optional[Decimal] = None
    updated_at: Optional[datetime] = None


@dataclass
class TodayPnlView:
    """Today's profit/loss calculation result."""

    pnl_dollars: Decimal
    pnl_percent: Optional[Decimal] = None
    prev_close_value: Decimal = field(default_factory=lambda: Decimal("0"))
    current_value: Decimal = field(default_factory=lambda: Decimal("0"))
    as_of: Optional[datetime] = None


@dataclass
class AccountView:
    """Account snapshot with positions and today's P&L."""

    account_id: str
    owner_id: str
    account_type: str
    initial_cash: Decimal
    cash_balance: Decimal
    market_value: Decimal
    total_value: Decimal
    realized_pnl: Decimal
    unrealized_pnl: Decimal
    total_pnl: Decimal
    total_return_percent: Decimal
    day_trade_count: int
    last_day_trade_reset: Optional[datetime]
    is_active: bool
    created_at: Optional[datetime]
    updated_at: Optional[datetime]
    positions: list[PositionView] = field(default_factory=list)
    today_pnl: Optional[TodayPnlView] = None
