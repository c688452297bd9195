"""Domain models package."""

from papertrade.domain.models.enums import TradeSide, TradeStatus, SuggestionAction
from papertrade.domain.models.account_type import (
    AccountTypeProfile,
    AccountTypeCatalog,
    default_account_types,
    DAY_TRADING_PRO,
    DAY_TRADING_STANDARD,
    SMALL_ACCOUNT_BASIC,
    MICRO_ACCOUNT_STARTER,
)
from papertrade.domain.models.position import LEDGER_INCREMENT, Position, fits_ledger, to_ledger
from papertrade.domain.models.account import Account
from papertrade.domain.models.trade import Trade
from papertrade.domain.models.rules import (
    PositionSizeRule,
    SectorExposureRule,
    ConcentrationRule,
    StopLossRule,
    RiskRule,
    default_rules,
)

__all__ = [
    "TradeSide",
    "TradeStatus",
    "SuggestionAction",
    "AccountTypeProfile",
    "AccountTypeCatalog",
    "default_account_types",
    "DAY_TRADING_PRO",
    "DAY_TRADING_STANDARD",
    "SMALL_ACCOUNT_BASIC",
    "MICRO_ACCOUNT_STARTER",
    "Position",
    "LEDGER_INCREMENT",
    "fits_ledger",
    "to_ledger",
    "Account",
    "Trade",
    "PositionSizeRule",
    "SectorExposureRule",
    "ConcentrationRule",
    "StopLossRule",
    "RiskRule",
    "default_rules",
]
