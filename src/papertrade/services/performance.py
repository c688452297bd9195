"""Performance calculator: account value history and return statistics.

History is rebuilt from the trade log on every call. Each trade is
replayed against a scratch copy of the positions and valued at the
*current* price of every held symbol; point-in-time historical pricing
is not modelled.
"""

import logging
import statistics
from datetime import datetime
from decimal import Decimal
from typing import Callable, Iterable, Optional

from papertrade.core.exceptions import AccountNotFoundError
from papertrade.core.timezone import Clock, now_eastern, trading_date
from papertrade.domain.models import Position, Trade, TradeSide, TradeStatus
from papertrade.domain.views import HistoryPoint, PerformanceStats, PerformanceView
from papertrade.repositories.protocols import UnitOfWork
from papertrade.services.price_service import PriceService
from papertrade.services.store_scope import ledger_store

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
TRADING_DAYS_PER_YEAR = 252
DAYS_PER_YEAR = 365
CENTS = Decimal("0.01")
RATIO = Decimal("0.0001")


def replay_history(
    initial_cash: Decimal,
    start: datetime,
    trades: Iterable[Trade],
    prices: dict[str, Decimal],
) -> list[HistoryPoint]:
    """
    Rebuild the value series: one inception point plus one per trade.

    ``prices`` maps symbol to the price used to value holdings; symbols
    missing from it are valued at their last trade price.
    """
    cash = initial_cash
    book: dict[str, Position] = {}
    last_trade_price: dict[str, Decimal] = {}
    points = [
        HistoryPoint(timestamp=start, total_value=initial_cash, cash=initial_cash, invested_value=ZERO)
    ]

    for trade in trades:
        if trade.status != TradeStatus.EXECUTED:
            continue
        position = book.get(trade.symbol)
        if position is None:
            position = Position(account_id=trade.account_id, symbol=trade.symbol)
            book[trade.symbol] = position
        if trade.side == TradeSide.BUY:
            position.apply_buy(trade.quantity, trade.price)
            cash -= trade.total_amount
        else:
            position.apply_sell(trade.quantity, trade.price)
            cash += trade.total_amount
        if position.is_closed:
            del book[trade.symbol]
        last_trade_price[trade.symbol] = trade.price

        invested = sum(
            (p.quantity * prices.get(symbol, last_trade_price[symbol]) for symbol, p in book.items()),
            ZERO,
        )
        previous = points[-1]
        total = cash + invested
        change = total - previous.total_value
        points.append(
            HistoryPoint(
                timestamp=trade.executed_at,
                total_value=total,
                cash=cash,
                invested_value=invested,
                day_change=change,
                day_change_percent=change / previous.total_value * 100 if previous.total_value else ZERO,
            )
        )
    return points


def end_of_day_values(history: list[HistoryPoint]) -> list[Decimal]:
    """Last value of each US/Eastern calendar day, in date order."""
    by_day: dict = {}
    for point in history:
        by_day[trading_date(point.timestamp)] = point.total_value
    return [by_day[day] for day in sorted(by_day)]


def daily_returns(values: list[Decimal]) -> list[Decimal]:
    returns = []
    for prev, curr in zip(values, values[1:]):
        if prev != ZERO:
            returns.append((curr - prev) / prev)
    return returns


def max_drawdown(values: list[Decimal]) -> Decimal:
    """Largest peak-to-trough decline as a fraction of the peak."""
    peak: Optional[Decimal] = None
    worst = ZERO
    for value in values:
        if peak is None or value > peak:
            peak = value
        if peak > ZERO:
            drawdown = (peak - value) / peak
            if drawdown > worst:
                worst = drawdown
    return worst


def annualize(period_return: Decimal, days: int) -> Decimal:
    """Compound ``period_return`` over ``days`` calendar days to a yearly rate."""
    growth = ONE + period_return
    if growth <= ZERO:
        return -ONE
    return growth ** (Decimal(DAYS_PER_YEAR) / Decimal(max(days, 1))) - ONE


def annualized_volatility(returns: list[Decimal]) -> Decimal:
    if len(returns) < 2:
        return ZERO
    return statistics.pstdev(returns) * Decimal(TRADING_DAYS_PER_YEAR).sqrt()


def downside_deviation(returns: list[Decimal]) -> Decimal:
    """Annualized root-mean-square of the negative daily returns."""
    if len(returns) < 2:
        return ZERO
    squares = [min(r, ZERO) ** 2 for r in returns]
    return (sum(squares, ZERO) / len(squares)).sqrt() * Decimal(TRADING_DAYS_PER_YEAR).sqrt()


def compute_stats(
    history: list[HistoryPoint],
    risk_free_rate: Decimal,
    as_of: datetime,
    trade_count: int = 0,
) -> PerformanceStats:
    """
    Return statistics for a value history.

    All returns and ratios are fractions (0.05 == 5%), ``total_return``
    is in account currency. Everything is 0 when the history has fewer
    than two points or a denominator is zero.
    """
    if len(history) < 2:
        return PerformanceStats(trade_count=trade_count)

    start = history[0].total_value
    end = history[-1].total_value
    period_return = (end - start) / start if start != ZERO else ZERO
    days = (as_of - history[0].timestamp).days
    annualized = annualize(period_return, days)

    returns = daily_returns(end_of_day_values(history))
    volatility = annualized_volatility(returns)
    downside = downside_deviation(returns)
    excess = annualized - risk_free_rate

    return PerformanceStats(
        total_return=(end - start).quantize(CENTS),
        period_return=period_return.quantize(RATIO),
        annualized_return=annualized.quantize(RATIO),
        volatility=volatility.quantize(RATIO),
        sharpe_ratio=(excess / volatility).quantize(RATIO) if volatility != ZERO else ZERO,
        sortino_ratio=(excess / downside).quantize(RATIO) if downside != ZERO else ZERO,
        max_drawdown=max_drawdown([p.total_value for p in history]).quantize(RATIO),
        best_day=max(returns).quantize(RATIO) if returns else ZERO,
        worst_day=min(returns).quantize(RATIO) if returns else ZERO,
        trade_count=trade_count,
    )


class PerformanceCalculator:
    """Read-only: never takes the account lock and never writes."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        price_service: PriceService,
        risk_free_rate: Decimal = Decimal("0.02"),
        clock: Clock = now_eastern,
    ):
        self._uow_factory = uow_factory
        self._prices = price_service
        self._risk_free_rate = Decimal(str(risk_free_rate))
        self._clock = clock

    def history(self, account_id: str) -> list[HistoryPoint]:
        """Ordered value history, unrounded."""
        history, _ = self._load(account_id)
        return history

    def get_performance(self, account_id: str) -> PerformanceView:
        history, trade_count = self._load(account_id)
        as_of = self._clock()
        stats = compute_stats(history, self._risk_free_rate, as_of, trade_count)
        return PerformanceView(
            account_id=account_id,
            history=[
                HistoryPoint(
                    timestamp=p.timestamp,
                    total_value=p.total_value.quantize(CENTS),
                    cash=p.cash.quantize(CENTS),
                    invested_value=p.invested_value.quantize(CENTS),
                    day_change=p.day_change.quantize(CENTS),
                    day_change_percent=p.day_change_percent.quantize(CENTS),
                )
                for p in history
            ],
            stats=stats,
            as_of=as_of,
        )

    def _load(self, account_id: str) -> tuple[list[HistoryPoint], int]:
        with ledger_store(self._uow_factory, "performance") as uow:
            account = uow.accounts.get_by_id(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            trades = uow.trades.list_by_account(account_id)
            positions = uow.positions.list_by_account(account_id)

        fallback = {p.symbol: p.last_price for p in positions if p.last_price is not None}
        symbols = sorted({t.symbol for t in trades})
        prices = self._prices.get_prices(symbols, fallback=fallback)
        start = account.created_at or (trades[0].executed_at if trades else self._clock())
        history = replay_history(account.initial_cash, start, trades, prices)
        logger.debug("Rebuilt %d history points for account %s", len(history), account_id)
        return history, len(trades)
