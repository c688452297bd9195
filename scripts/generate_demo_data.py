#!/usr/bin/env python3
"""
Generate demo ledger data for the last 3 months.

Opens one day-trading and one small account, then replays a simulated
quarter of trading against stub prices that follow a random walk. Every
order goes through the real execution engine, so compliance rejections
happen exactly as they would live.
"""

import random
import sys
from datetime import datetime, timedelta
from decimal import Decimal
from pathlib import Path

# Add src to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root / "src"))

from papertrade.app_context import TradingContext
from papertrade.config.settings import get_settings
from papertrade.core.exceptions import DomainError
from papertrade.core.timezone import EASTERN_TZ, is_business_day, now_eastern
from papertrade.domain.models import DAY_TRADING_PRO, SMALL_ACCOUNT_BASIC
from papertrade.providers import StubPriceSource

STOCKS = [
    ("AAPL", 180.0),
    ("MSFT", 420.0),
    ("NVDA", 500.0),
    ("GOOGL", 160.0),
    ("AMZN", 150.0),
    ("JPM", 170.0),
    ("XOM", 105.0),
    ("JNJ", 158.0),
]

DAYS = 90


class SimulatedClock:
    """Clock the script moves through the simulated quarter."""

    def __init__(self, start: datetime):
        self.now = start

    def __call__(self) -> datetime:
        return self.now


def _walk(prices: dict[str, float]) -> None:
    for symbol, price in prices.items():
        prices[symbol] = max(1.0, price * (1 + random.gauss(0.0005, 0.018)))


def generate_demo_data(seed: int = 7) -> None:
    """Simulate a quarter of trading for two demo accounts."""
    random.seed(seed)
    start = EASTERN_TZ.localize(
        datetime.combine((now_eastern() - timedelta(days=DAYS)).date(), datetime.min.time())
    )
    clock = SimulatedClock(start.replace(hour=9))
    prices = {symbol: base for symbol, base in STOCKS}
    source = StubPriceSource({s: (Decimal(str(round(p, 2))),) * 2 for s, p in prices.items()})

    settings = get_settings()
    with TradingContext(settings, price_source=source, clock=clock) as ctx:
        ledger = ctx.ledger()
        active = ledger.create_account("demo", DAY_TRADING_PRO)
        small = ledger.create_account("demo", SMALL_ACCOUNT_BASIC)
        print(f"✓ Created {DAY_TRADING_PRO} account {active.account_id}")
        print(f"✓ Created {SMALL_ACCOUNT_BASIC} account {small.account_id}")
        print("=" * 60)

        executed = 0
        rejected = 0
        for offset in range(DAYS):
            day = start + timedelta(days=offset)
            if not is_business_day(day.date()):
                continue

            # Yesterday's close becomes today's previous close
            for symbol, price in prices.items():
                source.set_price(symbol, Decimal(str(round(price, 2))), Decimal(str(round(price, 2))))
            _walk(prices)

            for hour in (10, 12, 15):
                clock.now = day.replace(hour=hour, minute=random.randint(0, 59))
                for symbol, price in prices.items():
                    source.set_price(symbol, Decimal(str(round(price, 2))))

                for account in (active, small):
                    symbol, _ = random.choice(STOCKS)
                    held = {p.symbol: p.quantity for p in ledger.get_account(account.account_id).positions}
                    side = "sell" if symbol in held and random.random() < 0.4 else "buy"
                    if side == "sell":
                        quantity = max(Decimal("1"), (held[symbol] / 2).to_integral_value())
                    else:
                        budget = 2500 if account is active else 150
                        quantity = Decimal(max(1, int(budget / prices[symbol])))
                    try:
                        ledger.execute_trade(account.account_id, symbol, side, quantity)
                        executed += 1
                    except DomainError as e:
                        rejected += 1
                        print(f"  {clock.now:%Y-%m-%d %H:%M} {side} {quantity} {symbol}: {e.code}")

            ctx.maintenance.run_once()

        print("\n" + "=" * 60)
        print("SUMMARY")
        print("=" * 60)
        print(f"Trades executed: {executed}")
        print(f"Orders rejected: {rejected}")
        for account in (active, small):
            view = ledger.get_account_view(account.account_id)
            print(f"\n{view.account_type} ({view.account_id})")
            print(f"  Cash: ${view.cash_balance:,.2f}")
            print(f"  Total value: ${view.total_value:,.2f} ({view.total_return_percent}%)")
            print(f"  Day trades in window: {view.day_trade_count}")
            for position in view.positions:
                print(f"  {position.symbol}: {position.quantity} @ {position.average_cost}")

    print("\n✓ Demo data generation complete!")
    print("\nYou can now:")
    print("  - View accounts: GET /accounts")
    print("  - View performance: GET /accounts/{id}/performance")
    print("  - View analytics: GET /accounts/{id}/analytics")


if __name__ == "__main__":
    try:
        generate_demo_data()
    except Exception as e:
        print(f"\n✗ Error: {e}", file=sys.stderr)
        import traceback
        traceback.print_exc()
        sys.exit(1)
