"""Pattern-day-trading compliance gate."""

import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal
from typing import Optional

from papertrade.core.exceptions import (
    BelowMinimumForDayTradingError,
    DayTradeLimitExceededError,
    DayTradingNotAllowedError,
)
from papertrade.core.timezone import (
    business_days_between,
    end_of_day_eastern,
    start_of_day_eastern,
)
from papertrade.domain.models import Account, AccountTypeCatalog, TradeSide
from papertrade.repositories.protocols import TradeRepository

logger = logging.getLogger(__name__)

DEFAULT_DAY_TRADE_LIMIT = 3
DEFAULT_WINDOW_BUSINESS_DAYS = 5


@dataclass(frozen=True)
class ComplianceDecision:
    """Approved outcome of a compliance check, to be committed with the trade."""

    is_day_trade: bool
    day_trade_count: int
    last_day_trade_reset: Optional[datetime]
    window_reset: bool = False

    def apply_to(self, account: Account) -> None:
        account.day_trade_count = self.day_trade_count
        account.last_day_trade_reset = self.last_day_trade_reset


class DayTradingComplianceGate:
    """
    Decides whether an order may proceed under day-trading rules.

    A sell is a day trade when the account already holds an executed buy
    of the same symbol on the same US/Eastern calendar day. Buys are
    never classified as day trades. The gate does not write anything;
    the caller commits the returned decision together with the trade.
    """

    def __init__(
        self,
        catalog: AccountTypeCatalog,
        day_trade_limit: int = DEFAULT_DAY_TRADE_LIMIT,
        window_business_days: int = DEFAULT_WINDOW_BUSINESS_DAYS,
    ):
        self._catalog = catalog
        self._limit = day_trade_limit
        self._window = window_business_days

    @property
    def day_trade_limit(self) -> int:
        return self._limit

    def window_elapsed(self, account: Account, now: datetime) -> bool:
        """Whether the rolling window has fully passed since the last reset."""
        anchor = account.last_day_trade_reset or account.created_at
        if anchor is None:
            return True
        return business_days_between(anchor, now) >= self._window

    def apply_window_reset(self, account: Account, now: datetime) -> bool:
        """Zero the counter in place if the window has elapsed."""
        if not self.window_elapsed(account, now):
            return False
        if account.day_trade_count:
            logger.info(
                "Resetting day trade count for account %s (was %d)",
                account.account_id,
                account.day_trade_count,
            )
        account.day_trade_count = 0
        account.last_day_trade_reset = now
        return True

    def is_day_trade(
        self,
        trades: TradeRepository,
        account_id: str,
        symbol: str,
        side: TradeSide,
        at: datetime,
    ) -> bool:
        if side != TradeSide.SELL:
            return False
        return trades.exists_between(
            account_id,
            symbol,
            TradeSide.BUY,
            start_of_day_eastern(at),
            end_of_day_eastern(at),
        )

    def evaluate(
        self,
        account: Account,
        trades: TradeRepository,
        symbol: str,
        side: TradeSide,
        equity: Decimal,
        now: datetime,
    ) -> ComplianceDecision:
        """
        Check a prospective order.

        Raises:
            DayTradingNotAllowedError: account type forbids day trades
            BelowMinimumForDayTradingError: equity under the type's minimum
            DayTradeLimitExceededError: limit already used in the window
        """
        count = account.day_trade_count
        last_reset = account.last_day_trade_reset
        reset = self.window_elapsed(account, now)
        if reset:
            count = 0
            last_reset = now

        if not self.is_day_trade(trades, account.account_id, symbol, side, now):
            return ComplianceDecision(
                is_day_trade=False,
                day_trade_count=count,
                last_day_trade_reset=last_reset,
                window_reset=reset,
            )

        profile = self._catalog.get(account.account_type)
        if not profile.day_trading_enabled:
            raise DayTradingNotAllowedError(profile.key)
        if equity < profile.minimum_balance:
            raise BelowMinimumForDayTradingError(str(equity), str(profile.minimum_balance))
        if count >= self._limit:
            raise DayTradeLimitExceededError(count, self._limit, self._window)

        return ComplianceDecision(
            is_day_trade=True,
            day_trade_count=count + 1,
            last_day_trade_reset=last_reset,
            window_reset=reset,
        )
