"""
Unit tests for LedgerMaintenanceJob.

Tests cover:
- Market value refresh for changed prices
- Day-trade window reset
- A second pass is a no-op
- Closed accounts are skipped
- Background start/stop
"""

import time
from decimal import Decimal

from papertrade.services import LedgerMaintenanceJob, LedgerService

from tests.conftest import assert_decimal_equal, eastern_datetime


class TestRunOnce:
    """Tests for a single maintenance pass."""

    def test_reprices_positions_whose_price_moved(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
        trade_factory,
        price_source,
    ):
        """
        GIVEN 10 X bought at $100
        WHEN X moves to $110 and maintenance runs
        THEN the stored market value and unrealized P&L follow the new price
        """
        account_id = sample_account.account_id
        trade_factory(account_id, "X", "buy", Decimal("10"), Decimal("100"))
        price_source.set_price("X", Decimal("110"))

        report = context.maintenance.run_once()

        account = ledger_service.get_account(account_id)
        assert report.accounts_checked == 1
        assert report.positions_repriced == 1
        assert report.failures == 0
        assert_decimal_equal(account.market_value, Decimal("1100"))
        assert_decimal_equal(account.unrealized_pnl, Decimal("100"))
        assert account.positions[0].last_price == Decimal("110")

    def test_second_pass_changes_nothing(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
        trade_factory,
        price_source,
    ):
        trade_factory(sample_account.account_id, "X", "buy", Decimal("10"), Decimal("100"))
        price_source.set_price("X", Decimal("110"))
        context.maintenance.run_once()
        before = ledger_service.get_account(sample_account.account_id)

        report = context.maintenance.run_once()

        after = ledger_service.get_account(sample_account.account_id)
        assert report.positions_repriced == 0
        assert report.counters_reset == 0
        assert after.updated_at == before.updated_at
        assert after.market_value == before.market_value

    def test_resets_day_trade_counter_after_window(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
        trade_factory,
        clock,
    ):
        """
        GIVEN one day trade on Monday 2024-06-10
        WHEN maintenance runs on Tuesday 2024-06-18
        THEN the counter is zeroed and the reset time is the run time
        """
        account_id = sample_account.account_id
        trade_factory(account_id, "X", "buy", Decimal("1"), Decimal("100"))
        trade_factory(account_id, "X", "sell", Decimal("1"), Decimal("100"))
        assert ledger_service.get_account(account_id).day_trade_count == 1

        clock.set(eastern_datetime(2024, 6, 18, 9, 0))
        report = context.maintenance.run_once()

        account = ledger_service.get_account(account_id)
        assert report.counters_reset == 1
        assert account.day_trade_count == 0
        assert account.last_day_trade_reset == eastern_datetime(2024, 6, 18, 9, 0)

    def test_counter_kept_inside_window(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
        trade_factory,
        clock,
    ):
        account_id = sample_account.account_id
        trade_factory(account_id, "X", "buy", Decimal("1"), Decimal("100"))
        trade_factory(account_id, "X", "sell", Decimal("1"), Decimal("100"))

        clock.set(eastern_datetime(2024, 6, 14, 9, 0))
        report = context.maintenance.run_once()

        assert report.counters_reset == 0
        assert ledger_service.get_account(account_id).day_trade_count == 1

    def test_closed_accounts_are_skipped(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
    ):
        ledger_service.close_account(sample_account.account_id)

        report = context.maintenance.run_once()

        assert report.accounts_checked == 0


class TestBackgroundLoop:
    """Tests for start/stop of the maintenance thread."""

    def test_start_runs_passes_until_stopped(
        self,
        context,
        ledger_service: LedgerService,
        sample_account,
        trade_factory,
        price_source,
    ):
        """
        GIVEN a job with a 50ms interval
        WHEN it runs in the background for a short while
        THEN positions are repriced and stop() joins the thread
        """
        trade_factory(sample_account.account_id, "X", "buy", Decimal("10"), Decimal("100"))
        price_source.set_price("X", Decimal("105"))
        job = LedgerMaintenanceJob(
            context.unit_of_work,
            context.prices,
            context.compliance,
            context.locks,
            interval_seconds=0.05,
            clock=context.clock,
        )

        job.start()
        job.start()
        assert job.running is True
        time.sleep(0.3)
        job.stop()

        assert job.running is False
        account = ledger_service.get_account(sample_account.account_id)
        assert_decimal_equal(account.market_value, Decimal("1050"))

    def test_stop_without_start_is_harmless(self, context):
        context.maintenance.stop()

        assert context.maintenance.running is False
