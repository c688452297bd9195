"""Per-account mutual exclusion for ledger mutations."""

import threading
from contextlib import contextmanager
from typing import Iterator


class AccountLockRegistry:
    """
    Hands out one lock per account id.

    All read-modify-write cycles on a single account (cash, positions,
    day-trade counter) run inside ``hold(account_id)``. Different accounts
    never contend. The registry is owned by whoever wires the services
    (see ``TradingContext``) and shared by every engine instance that
    mutates the same ledger.
    """

    def __init__(self) -> None:
        self._guard = threading.Lock()
        self._locks: dict[str, threading.RLock] = {}

    def lock_for(self, account_id: str) -> threading.RLock:
        with self._guard:
            lock = self._locks.get(account_id)
            if lock is None:
                lock = threading.RLock()
                self._locks[account_id] = lock
            return lock

    @contextmanager
    def hold(self, account_id: str) -> Iterator[None]:
        lock = self.lock_for(account_id)
        with lock:
            yield

    def __len__(self) -> int:
        with self._guard:
            return len(self._locks)
