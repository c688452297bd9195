"""Ledger service: account lifecycle, account snapshots and trade history."""

import logging
import uuid
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Union

from papertrade.core.exceptions import (
    AccountNotFoundError,
    PriceUnavailableError,
    DependencyFailureError,
    ValidationError,
)
from papertrade.core.locks import AccountLockRegistry
from papertrade.core.timezone import Clock, now_eastern, parse_datetime_eastern, to_eastern
from papertrade.domain.models import (
    LEDGER_INCREMENT,
    Account,
    AccountTypeCatalog,
    Position,
    Trade,
    TradeSide,
    fits_ledger,
)
from papertrade.domain.views import AccountView, PositionView, TodayPnlView
from papertrade.repositories.protocols import UnitOfWork
from papertrade.services.price_service import PriceService
from papertrade.services.store_scope import ledger_store
from papertrade.services.trade_execution import TradeExecutionEngine

logger = logging.getLogger(__name__)


class LedgerService:
    """
    Entry point for account operations.

    Accounts are never deleted: ``close_account`` clears the active flag,
    after which trades are rejected but history stays readable.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        catalog: AccountTypeCatalog,
        engine: TradeExecutionEngine,
        price_service: PriceService,
        locks: AccountLockRegistry,
        default_initial_cash: Optional[Decimal] = None,
        clock: Clock = now_eastern,
    ):
        self._uow_factory = uow_factory
        self._catalog = catalog
        self._engine = engine
        self._prices = price_service
        self._locks = locks
        self._default_initial_cash = default_initial_cash
        self._clock = clock

    def create_account(
        self,
        owner_id: str,
        account_type: str,
        initial_cash: Optional[Union[Decimal, int, float, str]] = None,
    ) -> Account:
        """
        Open a new account.

        ``initial_cash`` defaults to the configured amount, else the
        account type's default. Day-trading account types must start at
        or above their minimum balance.
        """
        owner = (owner_id or "").strip()
        if not owner:
            raise ValidationError("owner_id is required")
        profile = self._catalog.get(account_type)

        if initial_cash is None:
            cash = self._default_initial_cash if self._default_initial_cash is not None else profile.default_initial_cash
        else:
            try:
                cash = Decimal(str(initial_cash))
            except (InvalidOperation, ValueError):
                raise ValidationError(f"Invalid initial cash: {initial_cash!r}")
        if not cash.is_finite() or cash < 0:
            raise ValidationError("Initial cash must be a non-negative number")
        if not fits_ledger(cash):
            raise ValidationError(f"Initial cash {cash} is finer than the ledger increment {LEDGER_INCREMENT}")
        if profile.day_trading_enabled and cash < profile.minimum_balance:
            raise ValidationError(
                f"Initial cash {cash} is below the {profile.minimum_balance} minimum "
                f"for account type {profile.key}"
            )

        now = self._clock()
        account = Account(
            account_id=str(uuid.uuid4()),
            owner_id=owner,
            account_type=profile.key,
            initial_cash=cash,
            cash_balance=cash,
            last_day_trade_reset=now,
            created_at=now,
            updated_at=now,
        )
        with ledger_store(self._uow_factory, "create_account") as uow:
            created = uow.accounts.create(account)
            uow.commit()
        logger.info("Created %s account %s for owner %s", profile.key, created.account_id, owner)
        return created

    def execute_trade(
        self,
        account_id: str,
        symbol: str,
        side: Union[TradeSide, str],
        quantity: Union[Decimal, int, float, str],
    ) -> Trade:
        return self._engine.execute(account_id, symbol, side, quantity)

    def get_account(self, account_id: str) -> Account:
        """Account with its positions attached."""
        with ledger_store(self._uow_factory, "get_account") as uow:
            account = uow.accounts.get_by_id(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            account.positions = uow.positions.list_by_account(account_id)
            return account

    def get_account_view(self, account_id: str) -> AccountView:
        """Account snapshot with positions and today's P&L, rounded for display."""
        account = self.get_account(account_id)
        prev_closes = self._previous_closes(account.positions)
        return AccountView(
            account_id=account.account_id,
            owner_id=account.owner_id,
            account_type=account.account_type,
            initial_cash=_q(account.initial_cash),
            cash_balance=_q(account.cash_balance),
            market_value=_q(account.market_value),
            total_value=_q(account.total_value),
            realized_pnl=_q(account.realized_pnl),
            unrealized_pnl=_q(account.unrealized_pnl),
            total_pnl=_q(account.total_pnl),
            total_return_percent=_q(account.total_return_percent),
            day_trade_count=account.day_trade_count,
            last_day_trade_reset=account.last_day_trade_reset,
            is_active=account.is_active,
            created_at=account.created_at,
            updated_at=account.updated_at,
            positions=[
                PositionView(
                    symbol=p.symbol,
                    quantity=p.quantity,
                    average_cost=_q(p.average_cost),
                    total_cost=_q(p.total_cost),
                    last_price=_q(p.last_price) if p.last_price is not None else None,
                    market_value=_q(p.market_value),
                    unrealized_pnl=_q(p.unrealized_pnl),
                    unrealized_return_percent=_q(p.unrealized_return_percent),
                    prev_close=prev_closes.get(p.symbol),
                    updated_at=p.updated_at,
                )
                for p in account.positions
            ],
            today_pnl=self.get_today_pnl(account.positions, prev_closes),
        )

    def get_today_pnl(
        self,
        positions: list[Position],
        prev_closes: Optional[dict[str, Decimal]] = None,
    ) -> TodayPnlView:
        """
        Today's P&L: sum of quantity x (current - previous close).

        Symbols without a previous close are left out of both sides.
        """
        if prev_closes is None:
            prev_closes = self._previous_closes(positions)
        current = self._prices.get_prices(
            [p.symbol for p in positions],
            fallback={p.symbol: p.last_price for p in positions},
        )
        pnl = Decimal("0")
        prev_value = Decimal("0")
        current_value = Decimal("0")
        for position in positions:
            prev_close = prev_closes.get(position.symbol)
            price = current.get(position.symbol)
            if prev_close is None or price is None:
                continue
            pnl += position.quantity * (price - prev_close)
            prev_value += position.quantity * prev_close
            current_value += position.quantity * price

        percent = None
        if prev_value > 0:
            percent = _q(pnl / prev_value * 100)
        return TodayPnlView(
            pnl_dollars=_q(pnl),
            pnl_percent=percent,
            prev_close_value=_q(prev_value),
            current_value=_q(current_value),
            as_of=self._clock(),
        )

    def list_accounts(self, owner_id: Optional[str] = None, active_only: bool = False) -> list[Account]:
        with ledger_store(self._uow_factory, "list_accounts") as uow:
            return uow.accounts.list_all(owner_id=owner_id, active_only=active_only)

    def list_trades(
        self,
        account_id: str,
        since: Optional[Union[datetime, str]] = None,
        until: Optional[Union[datetime, str]] = None,
    ) -> list[Trade]:
        """
        Trades in execution order, optionally limited to an inclusive
        window. String bounds without an offset are read as Eastern time.
        """
        start = _time_bound(since, "since")
        end = _time_bound(until, "until")
        if start is not None and end is not None and start > end:
            raise ValidationError("since must not be after until")

        with ledger_store(self._uow_factory, "list_trades") as uow:
            if uow.accounts.get_by_id(account_id) is None:
                raise AccountNotFoundError(account_id)
            trades = uow.trades.list_by_account(account_id)
        return [
            t for t in trades
            if (start is None or t.executed_at >= start) and (end is None or t.executed_at <= end)
        ]

    def close_account(self, account_id: str) -> Account:
        """Soft-close an account. Closing twice is harmless."""
        with self._locks.hold(account_id):
            with ledger_store(self._uow_factory, "close_account") as uow:
                uow.refresh()
                account = uow.accounts.get_by_id(account_id)
                if account is None:
                    raise AccountNotFoundError(account_id)
                if not account.is_active:
                    return account
                account.is_active = False
                account.updated_at = self._clock()
                closed = uow.accounts.update(account)
                uow.commit()
        logger.info("Closed account %s", account_id)
        return closed

    def _previous_closes(self, positions: list[Position]) -> dict[str, Decimal]:
        result: dict[str, Decimal] = {}
        for position in positions:
            try:
                prev_close = self._prices.get_previous_close(position.symbol)
            except (PriceUnavailableError, DependencyFailureError) as exc:
                logger.warning("No previous close for %s: %s", position.symbol, exc.message)
                continue
            if prev_close is not None:
                result[position.symbol] = prev_close
        return result


def _time_bound(value: Optional[Union[datetime, str]], name: str) -> Optional[datetime]:
    if value is None:
        return None
    if isinstance(value, datetime):
        return to_eastern(value)
    try:
        return parse_datetime_eastern(value)
    except (ValueError, OverflowError):
        raise ValidationError(f"Invalid {name} timestamp: {value!r}")


def _q(value: Decimal) -> Decimal:
    return value.quantize(Decimal("0.01"))
