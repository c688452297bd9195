"""Trade execution engine: applies one order to an account's ledger."""

import logging
import uuid
from decimal import Decimal, InvalidOperation
from typing import Callable, Optional, Union

from papertrade.core.exceptions import (
    AccountInactiveError,
    AccountNotFoundError,
    AppError,
    InsufficientFundsError,
    InsufficientSharesError,
    ValidationError,
)
from papertrade.core.locks import AccountLockRegistry
from papertrade.core.timezone import Clock, now_eastern
from papertrade.domain.models import (
    LEDGER_INCREMENT,
    Position,
    Trade,
    TradeSide,
    TradeStatus,
    fits_ledger,
    to_ledger,
)
from papertrade.repositories.protocols import UnitOfWork
from papertrade.services.compliance_gate import DayTradingComplianceGate
from papertrade.services.events import TradeEventBus
from papertrade.services.price_service import PriceService, normalize_symbol
from papertrade.services.store_scope import ledger_store

logger = logging.getLogger(__name__)


def parse_quantity(quantity: Union[Decimal, int, float, str]) -> Decimal:
    """Positive, finite quantity the ledger can store exactly, or ``ValidationError``."""
    try:
        value = Decimal(str(quantity))
    except (InvalidOperation, ValueError):
        raise ValidationError(f"Invalid quantity: {quantity!r}")
    if not value.is_finite() or value <= 0:
        raise ValidationError(f"Quantity must be a positive number, got {quantity!r}")
    if not fits_ledger(value):
        raise ValidationError(f"Quantity {quantity!r} is finer than the ledger increment {LEDGER_INCREMENT}")
    return value


def parse_side(side: Union[TradeSide, str]) -> TradeSide:
    try:
        return TradeSide(side)
    except ValueError:
        raise ValidationError(f"Invalid side '{side}'. Expected buy or sell")


class TradeExecutionEngine:
    """
    Executes buy/sell orders at the current price.

    The whole read-check-write cycle for an account runs under that
    account's lock and inside one unit of work: price lookup, funds or
    shares check, compliance gate, position and cash mutation, counter
    update and trade append either all commit or none do.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        price_service: PriceService,
        compliance_gate: DayTradingComplianceGate,
        locks: AccountLockRegistry,
        event_bus: Optional[TradeEventBus] = None,
        clock: Clock = now_eastern,
    ):
        self._uow_factory = uow_factory
        self._prices = price_service
        self._gate = compliance_gate
        self._locks = locks
        self._events = event_bus
        self._clock = clock

    def execute(
        self,
        account_id: str,
        symbol: str,
        side: Union[TradeSide, str],
        quantity: Union[Decimal, int, float, str],
    ) -> Trade:
        """
        Execute one order and return the recorded trade.

        Raises:
            ValidationError: bad quantity, side or symbol
            AccountNotFoundError / AccountInactiveError
            PriceUnavailableError: price not resolved within the timeout
            InsufficientFundsError / InsufficientSharesError
            DayTradingNotAllowedError / BelowMinimumForDayTradingError /
            DayTradeLimitExceededError: compliance rejection
            DependencyFailureError: store or price feed failed
        """
        qty = parse_quantity(quantity)
        trade_side = parse_side(side)
        key = normalize_symbol(symbol)

        with self._locks.hold(account_id):
            try:
                with ledger_store(self._uow_factory, "execute_trade") as uow:
                    trade = self._execute_locked(uow, account_id, key, trade_side, qty)
                    uow.commit()
            except AppError as exc:
                logger.warning(
                    "Rejected %s %s %s for account %s: %s (%s)",
                    trade_side.value, qty, key, account_id, exc.message, exc.code,
                )
                raise

        logger.info(
            "Executed %s %s %s @ %s for account %s (day trade: %s)",
            trade.side.value, trade.quantity, trade.symbol, trade.price,
            account_id, trade.is_day_trade,
        )
        if self._events is not None:
            self._events.publish(trade)
        return trade

    def _execute_locked(
        self,
        uow: UnitOfWork,
        account_id: str,
        symbol: str,
        side: TradeSide,
        quantity: Decimal,
    ) -> Trade:
        uow.refresh()
        account = uow.accounts.get_by_id(account_id)
        if account is None:
            raise AccountNotFoundError(account_id)
        if not account.is_active:
            raise AccountInactiveError(account_id)

        price = to_ledger(self._prices.get_price(symbol))
        notional = to_ledger(price * quantity)
        now = self._clock()

        positions = uow.positions.list_by_account(account_id)
        held = {p.symbol: p for p in positions}
        position = held.get(symbol)

        if side == TradeSide.BUY:
            if account.cash_balance < notional:
                raise InsufficientFundsError(str(notional), str(account.cash_balance))
        else:
            available = position.quantity if position else Decimal("0")
            if available < quantity:
                raise InsufficientSharesError(symbol, str(quantity), str(available))

        # Pre-trade equity, with the traded symbol marked at the execution price
        equity = account.cash_balance + sum(
            (p.quantity * price if p.symbol == symbol else p.market_value for p in positions),
            Decimal("0"),
        )
        decision = self._gate.evaluate(account, uow.trades, symbol, side, equity, now)

        realized: Optional[Decimal] = None
        if side == TradeSide.BUY:
            if position is None:
                position = Position(account_id=account_id, symbol=symbol)
                held[symbol] = position
            position.apply_buy(quantity, price)
            account.cash_balance -= notional
        else:
            realized = position.apply_sell(quantity, price)
            account.cash_balance += notional
            account.realized_pnl += realized

        position.updated_at = now
        if position.is_closed:
            uow.positions.delete(account_id, symbol)
            del held[symbol]
        else:
            uow.positions.save(position)

        decision.apply_to(account)
        account.recompute_totals(held.values())
        account.updated_at = now
        uow.accounts.update(account)

        return uow.trades.create(
            Trade(
                trade_id=str(uuid.uuid4()),
                account_id=account_id,
                symbol=symbol,
                side=side,
                quantity=quantity,
                price=price,
                total_amount=notional,
                executed_at=now,
                status=TradeStatus.EXECUTED,
                realized_pnl=realized,
                is_day_trade=decision.is_day_trade,
                created_at=now,
            )
        )
