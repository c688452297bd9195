"""Periodic ledger maintenance: day-trade window resets and revaluation."""

import logging
import threading
from dataclasses import dataclass
from typing import Callable, Optional

from papertrade.core.exceptions import AppError
from papertrade.core.locks import AccountLockRegistry
from papertrade.core.timezone import Clock, now_eastern
from papertrade.domain.models import to_ledger
from papertrade.repositories.protocols import UnitOfWork
from papertrade.services.compliance_gate import DayTradingComplianceGate
from papertrade.services.price_service import PriceService
from papertrade.services.store_scope import ledger_store

logger = logging.getLogger(__name__)


@dataclass
class MaintenanceReport:
    accounts_checked: int = 0
    counters_reset: int = 0
    positions_repriced: int = 0
    failures: int = 0


class LedgerMaintenanceJob:
    """
    Re-applies the day-trade window reset and refreshes cached market
    values for every active account.

    Each account is handled under its own lock and committed on its own,
    so one failing account does not hold up the others. Running a pass
    twice in a row leaves the ledger unchanged the second time.
    """

    def __init__(
        self,
        uow_factory: Callable[[], UnitOfWork],
        price_service: PriceService,
        compliance_gate: DayTradingComplianceGate,
        locks: AccountLockRegistry,
        interval_seconds: float = 30.0,
        clock: Clock = now_eastern,
    ):
        self._uow_factory = uow_factory
        self._prices = price_service
        self._gate = compliance_gate
        self._locks = locks
        self._interval = interval_seconds
        self._clock = clock
        self._thread: Optional[threading.Thread] = None
        self._stop_event = threading.Event()

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop_event.clear()
        self._thread = threading.Thread(
            target=self._loop,
            name="LedgerMaintenance",
            daemon=True,
        )
        self._thread.start()
        logger.info("Ledger maintenance started (every %ss)", self._interval)

    def stop(self, timeout: float = 10.0) -> None:
        if self._thread is None:
            return
        self._stop_event.set()
        self._thread.join(timeout=timeout)
        if self._thread.is_alive():
            logger.warning("Ledger maintenance did not stop within %ss", timeout)
        self._thread = None
        logger.info("Ledger maintenance stopped")

    def run_once(self) -> MaintenanceReport:
        """One pass over all active accounts."""
        report = MaintenanceReport()
        with ledger_store(self._uow_factory, "maintenance") as uow:
            account_ids = [a.account_id for a in uow.accounts.list_all(active_only=True)]

        for account_id in account_ids:
            report.accounts_checked += 1
            try:
                reset, repriced = self._maintain(account_id)
            except AppError:
                report.failures += 1
                logger.exception("Maintenance failed for account %s", account_id)
                continue
            report.counters_reset += int(reset)
            report.positions_repriced += repriced

        logger.debug(
            "Maintenance pass: %d accounts, %d counters reset, %d positions repriced, %d failures",
            report.accounts_checked, report.counters_reset,
            report.positions_repriced, report.failures,
        )
        return report

    def _maintain(self, account_id: str) -> tuple[bool, int]:
        with self._locks.hold(account_id):
            with ledger_store(self._uow_factory, "maintenance") as uow:
                uow.refresh()
                account = uow.accounts.get_by_id(account_id)
                if account is None or not account.is_active:
                    return False, 0
                now = self._clock()
                reset = self._gate.apply_window_reset(account, now)

                positions = uow.positions.list_by_account(account_id)
                prices = self._prices.get_prices(
                    [p.symbol for p in positions],
                    fallback={p.symbol: p.last_price for p in positions if p.last_price is not None},
                )
                repriced = 0
                for position in positions:
                    price = prices.get(position.symbol)
                    if price is None or to_ledger(price) == position.last_price:
                        continue
                    position.mark_to_market(price)
                    position.updated_at = now
                    uow.positions.save(position)
                    repriced += 1

                if reset or repriced:
                    account.recompute_totals(positions)
                    account.updated_at = now
                    uow.accounts.update(account)
                    uow.commit()
                return reset, repriced

    def _loop(self) -> None:
        while not self._stop_event.is_set():
            try:
                self.run_once()
            except Exception:
                logger.exception("Ledger maintenance pass failed")
            self._stop_event.wait(self._interval)
