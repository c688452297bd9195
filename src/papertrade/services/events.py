"""In-process publish/subscribe channel for executed trades."""

import itertools
import logging
import threading
from typing import Callable

from papertrade.domain.models import Trade

logger = logging.getLogger(__name__)

TradeListener = Callable[[Trade], None]


class Subscription:
    """Handle returned by ``TradeEventBus.subscribe``."""

    def __init__(self, bus: "TradeEventBus", token: int):
        self._bus = bus
        self._token = token
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        """Stop receiving events. Calling it again is a no-op."""
        if not self._active:
            return
        self._active = False
        self._bus._remove(self._token)


class TradeEventBus:
    """
    Delivers committed trades to registered listeners.

    Publishing happens after the trade is durable, so a failing listener
    is logged and skipped; it cannot undo or block the trade.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._listeners: dict[int, TradeListener] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, listener: TradeListener) -> Subscription:
        with self._lock:
            token = next(self._tokens)
            self._listeners[token] = listener
        return Subscription(self, token)

    def publish(self, trade: Trade) -> int:
        """Deliver ``trade`` to every listener; returns how many succeeded."""
        with self._lock:
            listeners = list(self._listeners.values())
        delivered = 0
        for listener in listeners:
            try:
                listener(trade)
                delivered += 1
            except Exception:
                logger.exception("Trade listener failed for trade %s", trade.trade_id)
        return delivered

    def clear(self) -> None:
        with self._lock:
            self._listeners.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._listeners)

    def _remove(self, token: int) -> None:
        with self._lock:
            self._listeners.pop(token, None)
