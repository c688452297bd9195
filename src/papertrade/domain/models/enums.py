"""Enumerations for domain models."""

from enum import Enum


class TradeSide(str, Enum):
    """Direction of a trade."""

    BUY = "BUY"
    SELL = "SELL"

    @classmethod
    def _missing_(cls, value):
        # Accept "buy" / "sell" from callers
        if isinstance(value, str):
            upper = value.strip().upper()
            for member in cls:
                if member.value == upper:
                    return member
        return None


class TradeStatus(str, Enum):
    """Outcome recorded on a trade."""

    EXECUTED = "EXECUTED"
    REJECTED = "REJECTED"  # Never persisted; rejected orders leave no record


class SuggestionAction(str, Enum):
    """Advisory rebalancing actions."""

    REDUCE = "reduce"
    INCREASE = "increase"
    ADD = "add"
    SELL = "sell"
