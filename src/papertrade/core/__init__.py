"""Core utilities and shared functionality."""

from papertrade.core.timezone import (
    now_eastern,
    to_eastern,
    parse_datetime_eastern,
    business_days_between,
    trading_date,
    EASTERN_TZ,
)
from papertrade.core.exceptions import (
    AppError,
    DomainError,
    ValidationError,
    NotFoundError,
    AccountNotFoundError,
    AccountInactiveError,
    InsufficientFundsError,
    InsufficientSharesError,
    DayTradingNotAllowedError,
    BelowMinimumForDayTradingError,
    DayTradeLimitExceededError,
    PriceUnavailableError,
    DependencyFailureError,
)
from papertrade.core.locks import AccountLockRegistry

__all__ = [
    "now_eastern",
    "to_eastern",
    "parse_datetime_eastern",
    "business_days_between",
    "trading_date",
    "EASTERN_TZ",
    "AppError",
    "DomainError",
    "ValidationError",
    "NotFoundError",
    "AccountNotFoundError",
    "AccountInactiveError",
    "InsufficientFundsError",
    "InsufficientSharesError",
    "DayTradingNotAllowedError",
    "BelowMinimumForDayTradingError",
    "DayTradeLimitExceededError",
    "PriceUnavailableError",
    "DependencyFailureError",
    "AccountLockRegistry",
]
