"""Risk & attribution engine.

Computed fresh on every call from the current position snapshot; the
ledger is never written. Positions are revalued at current prices (last
known price when the feed has none) before any weights are taken.
"""

import logging
from collections import defaultdict
from dataclasses import dataclass
from decimal import Decimal
from typing import Callable, Optional, Sequence

from papertrade.config.settings import default_benchmarks
from papertrade.core.exceptions import AccountNotFoundError
from papertrade.core.timezone import Clock, now_eastern
from papertrade.domain.models import (
    ConcentrationRule,
    PositionSizeRule,
    RiskRule,
    SectorExposureRule,
    StopLossRule,
    SuggestionAction,
    default_rules,
)
from papertrade.domain.views import (
    AnalyticsView,
    AttributionItem,
    BenchmarkComparison,
    HoldingItem,
    PerformanceAttribution,
    PerformanceStats,
    PerformanceSummary,
    RebalancingSuggestion,
    RiskMetrics,
    SectorAllocationItem,
)
from papertrade.providers.price_source import SectorMap
from papertrade.repositories.protocols import UnitOfWork
from papertrade.services.correlation import CorrelationEstimator, SectorProxyCorrelationEstimator
from papertrade.services.performance import PerformanceCalculator, compute_stats
from papertrade.services.price_service import PriceService
from papertrade.services.store_scope import ledger_store

logger = logging.getLogger(__name__)

ZERO = Decimal("0")
ONE = Decimal("1")
HUNDRED = Decimal("100")
CENTS = Decimal("0.01")
RATIO = Decimal("0.0001")

VAR_95_Z = Decimal("1.65")
EXPECTED_SHORTFALL_MULTIPLIER = Decimal("1.3")
# Placeholder per-position volatility used while there is no usable history
ESTIMATED_POSITION_VOLATILITY = Decimal("0.15")
TRACKING_ERROR_FACTOR = Decimal("0.5")
UNCLASSIFIED_SECTOR = "Unknown"


@dataclass
class Holding:
    """Position revalued for analysis. Weights are percent of account value."""

    symbol: str
    sector: Optional[str]
    quantity: Decimal
    total_cost: Decimal
    market_value: Decimal
    unrealized_pnl: Decimal
    weight: Decimal

    @property
    def sector_label(self) -> str:
        return self.sector or UNCLASSIFIED_SECTOR

    @property
    def return_percent(self) -> Decimal:
        if self.total_cost == ZERO:
            return ZERO
        return self.unrealized_pnl / self.total_cost * HUNDRED


def herfindahl(values: Sequence[Decimal]) -> Decimal:
    """Sum of squared weights, weights taken relative to ``sum(values)``."""
    total = sum(values, ZERO)
    if total <= ZERO:
        return ZERO
    return sum(((v / total) ** 2 for v in values), ZERO)


def concentration_score(values: Sequence[Decimal]) -> Decimal:
    """
    Normalized HHI in [0, 1].

    0 for an empty book, 1 for a single position, otherwise
    ``(HHI - 1/n) / (1 - 1/n)``.
    """
    n = len([v for v in values if v > ZERO])
    if n == 0:
        return ZERO
    if n == 1:
        return ONE
    floor = ONE / n
    score = (herfindahl(values) - floor) / (ONE - floor)
    return max(ZERO, min(ONE, score))


class RiskAttributionEngine:
    """Produces the analytics bundle for one account."""

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        price_service: PriceService,
        sector_map: SectorMap,
        performance: PerformanceCalculator,
        correlation_estimator: Optional[CorrelationEstimator] = None,
        rules: Optional[Sequence[RiskRule]] = None,
        benchmarks: Optional[dict[str, Decimal]] = None,
        risk_free_rate: Decimal = Decimal("0.02"),
        max_suggestions: int = 5,
        top_holdings_limit: int = 10,
        clock: Clock = now_eastern,
    ):
        self._uow_factory = uow_factory
        self._prices = price_service
        self._sectors = sector_map
        self._performance = performance
        self._correlation = correlation_estimator or SectorProxyCorrelationEstimator()
        self._rules = list(rules) if rules is not None else default_rules()
        self._benchmarks = dict(benchmarks) if benchmarks is not None else default_benchmarks()
        self._risk_free_rate = Decimal(str(risk_free_rate))
        self._max_suggestions = max_suggestions
        self._top_holdings_limit = top_holdings_limit
        self._clock = clock

    def analyze(self, account_id: str) -> AnalyticsView:
        with ledger_store(self._uow_factory, "analytics") as uow:
            account = uow.accounts.get_by_id(account_id)
            if account is None:
                raise AccountNotFoundError(account_id)
            positions = uow.positions.list_by_account(account_id)

        prices = self._prices.get_prices(
            [p.symbol for p in positions],
            fallback={p.symbol: p.last_price for p in positions if p.last_price is not None},
        )
        invested = ZERO
        holdings: list[Holding] = []
        for p in positions:
            price = prices.get(p.symbol, p.last_price)
            market_value = p.quantity * price if price is not None else p.market_value
            invested += market_value
            holdings.append(
                Holding(
                    symbol=p.symbol,
                    sector=self._sectors.sector_of(p.symbol),
                    quantity=p.quantity,
                    total_cost=p.total_cost,
                    market_value=market_value,
                    unrealized_pnl=market_value - p.total_cost,
                    weight=ZERO,
                )
            )
        total_value = account.cash_balance + invested
        for h in holdings:
            h.weight = h.market_value / total_value * HUNDRED if total_value > ZERO else ZERO

        as_of = self._clock()
        stats = compute_stats(
            self._performance.history(account_id), self._risk_free_rate, as_of
        )

        values = [h.market_value for h in holdings]
        concentration = concentration_score(values)
        sector_allocation = self._sector_allocation(holdings, total_value)
        risk_metrics = self._risk_metrics(holdings, values, concentration, stats, total_value)
        suggestions = self.evaluate_rules(holdings, sector_allocation, concentration)

        logger.debug(
            "Analyzed account %s: %d holdings, concentration %s",
            account_id, len(holdings), concentration,
        )
        return AnalyticsView(
            account_id=account_id,
            total_value=total_value.quantize(CENTS),
            sector_allocation=sector_allocation,
            concentration_risk=concentration.quantize(RATIO),
            risk_metrics=risk_metrics,
            benchmark_comparison=self._benchmark_comparison(stats),
            rebalancing_suggestions=suggestions,
            performance_summary=PerformanceSummary(
                total_return=stats.total_return,
                annualized_return=stats.annualized_return,
                volatility=stats.volatility,
                sharpe_ratio=stats.sharpe_ratio,
            ),
            performance_attribution=self._attribution(holdings, total_value),
            top_holdings=self._top_holdings(holdings),
            as_of=as_of,
        )

    def _sector_allocation(self, holdings: list[Holding], total_value: Decimal) -> list[SectorAllocationItem]:
        groups: dict[str, list[Holding]] = defaultdict(list)
        for h in holdings:
            groups[h.sector_label].append(h)

        items = []
        for sector, members in groups.items():
            market_value = sum((h.market_value for h in members), ZERO)
            returns = [h.return_percent for h in members]
            best = max(members, key=lambda h: h.return_percent)
            worst = min(members, key=lambda h: h.return_percent)
            items.append(
                SectorAllocationItem(
                    sector=sector,
                    market_value=market_value.quantize(CENTS),
                    weight=(market_value / total_value * HUNDRED).quantize(CENTS) if total_value > ZERO else ZERO,
                    average_return=(sum(returns, ZERO) / len(returns)).quantize(CENTS),
                    position_count=len(members),
                    best_performer=best.symbol,
                    worst_performer=worst.symbol,
                )
            )
        items.sort(key=lambda item: item.market_value, reverse=True)
        return items

    def _risk_metrics(
        self,
        holdings: list[Holding],
        values: list[Decimal],
        concentration: Decimal,
        stats: PerformanceStats,
        total_value: Decimal,
    ) -> RiskMetrics:
        volatility = stats.volatility
        source = "historical"
        if volatility == ZERO and holdings:
            volatility = ESTIMATED_POSITION_VOLATILITY / Decimal(len(holdings)).sqrt()
            source = "estimated"

        value_at_risk = volatility * VAR_95_Z * total_value
        symbols = [h.symbol for h in holdings]
        matrix = self._correlation.estimate(symbols, {h.symbol: h.sector for h in holdings})
        return RiskMetrics(
            concentration_risk=concentration.quantize(RATIO),
            herfindahl_index=herfindahl(values).quantize(RATIO),
            volatility=volatility.quantize(RATIO),
            volatility_source=source,
            value_at_risk_95=value_at_risk.quantize(CENTS),
            expected_shortfall_95=(value_at_risk * EXPECTED_SHORTFALL_MULTIPLIER).quantize(CENTS),
            sharpe_ratio=stats.sharpe_ratio,
            sortino_ratio=stats.sortino_ratio,
            max_drawdown=stats.max_drawdown,
            correlation_matrix=matrix,
        )

    def _benchmark_comparison(self, stats: PerformanceStats) -> list[BenchmarkComparison]:
        portfolio_return = stats.period_return * HUNDRED
        rows = []
        for name, benchmark_return in self._benchmarks.items():
            benchmark_return = Decimal(str(benchmark_return))
            alpha = portfolio_return - benchmark_return
            tracking_error = abs(alpha) * TRACKING_ERROR_FACTOR
            rows.append(
                BenchmarkComparison(
                    benchmark=name,
                    benchmark_return=benchmark_return.quantize(CENTS),
                    portfolio_return=portfolio_return.quantize(CENTS),
                    alpha=alpha.quantize(CENTS),
                    tracking_error=tracking_error.quantize(CENTS),
                    information_ratio=(alpha / tracking_error).quantize(RATIO) if tracking_error != ZERO else ZERO,
                )
            )
        return rows

    def _attribution(self, holdings: list[Holding], total_value: Decimal) -> PerformanceAttribution:
        by_position = [
            AttributionItem(
                name=h.symbol,
                weight=h.weight.quantize(CENTS),
                return_percent=h.return_percent.quantize(CENTS),
                contribution=(h.weight / HUNDRED * h.return_percent).quantize(CENTS),
            )
            for h in holdings
        ]

        groups: dict[str, list[Holding]] = defaultdict(list)
        for h in holdings:
            groups[h.sector_label].append(h)
        by_sector = []
        for sector, members in groups.items():
            weight = sum((h.weight for h in members), ZERO)
            cost = sum((h.total_cost for h in members), ZERO)
            pnl = sum((h.unrealized_pnl for h in members), ZERO)
            sector_return = pnl / cost * HUNDRED if cost != ZERO else ZERO
            by_sector.append(
                AttributionItem(
                    name=sector,
                    weight=weight.quantize(CENTS),
                    return_percent=sector_return.quantize(CENTS),
                    contribution=(weight / HUNDRED * sector_return).quantize(CENTS),
                )
            )
        by_position.sort(key=lambda item: item.contribution, reverse=True)
        by_sector.sort(key=lambda item: item.contribution, reverse=True)
        return PerformanceAttribution(by_sector=by_sector, by_position=by_position)

    def _top_holdings(self, holdings: list[Holding]) -> list[HoldingItem]:
        ranked = sorted(holdings, key=lambda h: h.market_value, reverse=True)
        return [
            HoldingItem(
                symbol=h.symbol,
                sector=h.sector_label,
                market_value=h.market_value.quantize(CENTS),
                weight=h.weight.quantize(CENTS),
                unrealized_pnl=h.unrealized_pnl.quantize(CENTS),
                unrealized_return_percent=h.return_percent.quantize(CENTS),
            )
            for h in ranked[: self._top_holdings_limit]
        ]

    def evaluate_rules(
        self,
        holdings: list[Holding],
        sector_allocation: list[SectorAllocationItem],
        concentration: Decimal,
    ) -> list[RebalancingSuggestion]:
        """Advisory suggestions from the configured rule set, capped."""
        suggestions: list[RebalancingSuggestion] = []
        for rule in self._rules:
            if isinstance(rule, PositionSizeRule):
                suggestions.extend(self._position_size(rule, holdings))
            elif isinstance(rule, SectorExposureRule):
                suggestions.extend(self._sector_exposure(rule, holdings, sector_allocation))
            elif isinstance(rule, ConcentrationRule):
                if holdings and concentration > rule.max_score:
                    suggestions.append(
                        RebalancingSuggestion(
                            action=SuggestionAction.ADD,
                            symbol=None,
                            current_weight=ZERO,
                            target_weight=rule.target_percent,
                            reason=(
                                f"Concentration risk {concentration.quantize(CENTS)} exceeds "
                                f"{rule.max_score}; add positions in other sectors to diversify"
                            ),
                        )
                    )
            elif isinstance(rule, StopLossRule):
                suggestions.extend(self._stop_loss(rule, holdings))
            else:
                raise TypeError(f"Unsupported risk rule: {type(rule).__name__}")
        return suggestions[: self._max_suggestions]

    @staticmethod
    def _position_size(rule: PositionSizeRule, holdings: list[Holding]) -> list[RebalancingSuggestion]:
        target = min(rule.target_percent, rule.max_percent)
        return [
            RebalancingSuggestion(
                action=SuggestionAction.REDUCE,
                symbol=h.symbol,
                current_weight=h.weight.quantize(CENTS),
                target_weight=target,
                reason=f"Position is {h.weight.quantize(CENTS)}% of the account, above the {rule.max_percent}% limit",
            )
            for h in sorted(holdings, key=lambda h: h.weight, reverse=True)
            if h.weight > rule.max_percent
        ]

    @staticmethod
    def _sector_exposure(
        rule: SectorExposureRule,
        holdings: list[Holding],
        sector_allocation: list[SectorAllocationItem],
    ) -> list[RebalancingSuggestion]:
        result = []
        for sector in sector_allocation:
            if sector.weight <= rule.max_percent:
                continue
            members = [h for h in holdings if h.sector_label == sector.sector]
            largest = max(members, key=lambda h: h.market_value)
            result.append(
                RebalancingSuggestion(
                    action=SuggestionAction.REDUCE,
                    symbol=largest.symbol,
                    current_weight=largest.weight.quantize(CENTS),
                    target_weight=(largest.weight * rule.reduction_factor).quantize(CENTS),
                    reason=f"{sector.sector} sector is {sector.weight}% of the account, above the {rule.max_percent}% limit",
                )
            )
        return result

    @staticmethod
    def _stop_loss(rule: StopLossRule, holdings: list[Holding]) -> list[RebalancingSuggestion]:
        return [
            RebalancingSuggestion(
                action=SuggestionAction.SELL,
                symbol=h.symbol,
                current_weight=h.weight.quantize(CENTS),
                target_weight=ZERO,
                reason=f"Unrealized loss of {abs(h.return_percent).quantize(CENTS)}% exceeds the {rule.percent}% stop loss",
            )
            for h in holdings
            if h.return_percent < -rule.percent
        ]
