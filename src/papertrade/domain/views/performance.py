"""View models for account value history and return statistics."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import Decimal
from typing import Optional


@dataclass
class HistoryPoint:
    """Account value after one replayed trade (or at inception)."""

    timestamp: datetime
    total_value: Decimal
    cash: Decimal
    invested_value: Decimal
    day_change: Decimal = field(default_factory=lambda: Decimal("0"))
    day_change_percent: Decimal = field(default_factory=lambda: Decimal("0"))


@dataclass
class PerformanceStats:
    """Derived return statistics. Ratios are 0 where undefined."""

    total_return: Decimal = field(default_factory=lambda: Decimal("0"))
    period_return: Decimal = field(default_factory=lambda: Decimal("0"))
    annualized_return: Decimal = field(default_factory=lambda: Decimal("0"))
    volatility: Decimal = field(default_factory=lambda: Decimal("0"))
    sharpe_ratio: Decimal = field(default_factory=lambda: Decimal("0"))
    sortino_ratio: Decimal = field(default_factory=lambda: Decimal("0"))
    max_drawdown: Decimal = field(default_factory=lambda: Decimal("0"))
    best_day: Decimal = field(default_factory=lambda: Decimal("0"))
    worst_day: Decimal = field(default_factory=lambda: Decimal("0"))
    trade_count: int = 0


@dataclass
class PerformanceView:
    """History plus stats, as returned by ``get_performance``."""

    account_id: str
    history: list[HistoryPoint] = field(default_factory=list)
    stats: PerformanceStats = field(default_factory=PerformanceStats)
    as_of: Optional[datetime] = None
