"""Account type profiles: day-trading eligibility and balance rules."""

from dataclasses import dataclass
from decimal import Decimal
from typing import Iterable, Optional

from papertrade.core.exceptions import ValidationError


@dataclass(frozen=True)
class AccountTypeProfile:
    """Rules attached to an account-type tag."""

    key: str
    name: str
    default_initial_cash: Decimal
    day_trading_enabled: bool
    minimum_balance: Decimal = Decimal("0")


DAY_TRADING_PRO = "DAY_TRADING_PRO"
DAY_TRADING_STANDARD = "DAY_TRADING_STANDARD"
SMALL_ACCOUNT_BASIC = "SMALL_ACCOUNT_BASIC"
MICRO_ACCOUNT_STARTER = "MICRO_ACCOUNT_STARTER"


def default_account_types(
    pattern_day_trader_min_equity: Decimal = Decimal("25000"),
) -> list[AccountTypeProfile]:
    """Built-in account types."""
    return [
        AccountTypeProfile(
            key=DAY_TRADING_PRO,
            name="Professional Day Trader",
            default_initial_cash=Decimal("50000"),
            day_trading_enabled=True,
            minimum_balance=pattern_day_trader_min_equity,
        ),
        AccountTypeProfile(
            key=DAY_TRADING_STANDARD,
            name="Standard Day Trader",
            default_initial_cash=Decimal("30000"),
            day_trading_enabled=True,
            minimum_balance=pattern_day_trader_min_equity,
        ),
        AccountTypeProfile(
            key=SMALL_ACCOUNT_BASIC,
            name="Small Investor",
            default_initial_cash=Decimal("1000"),
            day_trading_enabled=False,
        ),
        AccountTypeProfile(
            key=MICRO_ACCOUNT_STARTER,
            name="Micro Starter",
            default_initial_cash=Decimal("500"),
            day_trading_enabled=False,
        ),
    ]


class AccountTypeCatalog:
    """Lookup of account-type tags to their profiles."""

    def __init__(self, profiles: Optional[Iterable[AccountTypeProfile]] = None):
        self._profiles: dict[str, AccountTypeProfile] = {}
        for profile in profiles if profiles is not None else default_account_types():
            self.register(profile)

    def register(self, profile: AccountTypeProfile) -> None:
        self._profiles[profile.key.upper()] = profile

    def get(self, key: str) -> AccountTypeProfile:
        """Resolve a tag; unknown tags are a validation error."""
        profile = self._profiles.get((key or "").strip().upper())
        if profile is None:
            raise ValidationError(
                f"Unknown account type '{key}'. Expected one of: {', '.join(self.keys())}"
            )
        return profile

    def keys(self) -> list[str]:
        return sorted(self._profiles)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and key.strip().upper() in self._profiles
