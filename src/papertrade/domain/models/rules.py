"""Advisory risk rules.

Each rule kind is its own frozen dataclass carrying only the fields it
needs. The set is closed: the risk engine dispatches on the concrete
type and rejects anything else.
"""

from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Union


@dataclass(frozen=True)
class PositionSizeRule:
    """Flag any single position above ``max_percent`` of account value."""

    max_percent: Decimal
    target_percent: Decimal = Decimal("15")


@dataclass(frozen=True)
class SectorExposureRule:
    """Flag any sector above ``max_percent`` of account value."""

    max_percent: Decimal
    reduction_factor: Decimal = Decimal("0.8")


@dataclass(frozen=True)
class ConcentrationRule:
    """Suggest diversification when normalized HHI exceeds ``max_score``."""

    max_score: Decimal
    target_percent: Decimal = Decimal("10")


@dataclass(frozen=True)
class StopLossRule:
    """Suggest selling positions whose unrealized loss exceeds ``percent``."""

    percent: Decimal


RiskRule = Union[PositionSizeRule, SectorExposureRule, ConcentrationRule, StopLossRule]


def default_rules(
    position_weight_limit: Decimal = Decimal("20"),
    sector_weight_limit: Decimal = Decimal("30"),
    concentration_threshold: Decimal = Decimal("0.3"),
    stop_loss_percent: Optional[Decimal] = None,
) -> list[RiskRule]:
    """Rule set used when the caller does not supply one."""
    rules: list[RiskRule] = [
        PositionSizeRule(max_percent=position_weight_limit),
        SectorExposureRule(max_percent=sector_weight_limit),
        ConcentrationRule(max_score=concentration_threshold),
    ]
    if stop_loss_percent is not None:
        rules.append(StopLossRule(percent=stop_loss_percent))
    return rules
