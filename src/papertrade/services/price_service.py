"""
Price service: current price and previous close from a PriceSource.

In-memory cache with TTL; every source call runs on a worker thread and
is abandoned after the configured timeout.
"""

import logging
import time
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FuturesTimeoutError
from decimal import Decimal
from typing import Callable, Iterable, Optional

from papertrade.core.exceptions import (
    DependencyFailureError,
    PriceUnavailableError,
    ValidationError,
)
from papertrade.core.timezone import Clock, now_eastern
from papertrade.domain.views import Quote
from papertrade.providers.price_source import PriceSource

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30
DEFAULT_FETCH_TIMEOUT_SECONDS = 5.0


def normalize_symbol(symbol: str) -> str:
    """Upper-case, trimmed ticker; empty input is a validation error."""
    key = (symbol or "").strip().upper()
    if not key:
        raise ValidationError("Symbol is required")
    return key


class PriceService:
    """
    Resolves prices with a bounded wait.

    - source returns ``None``: unknown symbol, ``ValidationError``
    - no answer within the timeout: ``PriceUnavailableError``
    - source raises: ``DependencyFailureError`` (original kept as cause)
    """

    def __init__(
        self,
        source: PriceSource,
        timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS,
        cache_ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Clock = now_eastern,
        max_workers: int = 4,
    ):
        self._source = source
        self._timeout = timeout_seconds
        self._ttl = cache_ttl_seconds
        self._clock = clock
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="price-fetch")
        # Cache: (kind, symbol) -> (value, cached_at)
        self._cache: dict[tuple[str, str], tuple[Decimal, float]] = {}

    def get_price(self, symbol: str) -> Decimal:
        """Current price of ``symbol``."""
        key = normalize_symbol(symbol)
        price = self._lookup("price", key, self._source.current_price)
        if price is None:
            raise ValidationError(f"Unknown symbol: {key}")
        if price <= 0:
            raise PriceUnavailableError(key, reason=f"invalid price {price}")
        return price

    def get_previous_close(self, symbol: str) -> Optional[Decimal]:
        """Previous close, or ``None`` if the source has none."""
        key = normalize_symbol(symbol)
        return self._lookup("prev_close", key, self._source.previous_close)

    def get_quote(self, symbol: str) -> Quote:
        key = normalize_symbol(symbol)
        return Quote(
            symbol=key,
            last_price=self.get_price(key),
            prev_close=self.get_previous_close(key),
            as_of=self._clock(),
        )

    def get_prices(
        self,
        symbols: Iterable[str],
        fallback: Optional[dict[str, Decimal]] = None,
    ) -> dict[str, Decimal]:
        """
        Batch lookup for read paths.

        A symbol that cannot be priced falls back to ``fallback[symbol]``
        (typically the position's last known price) or is omitted.
        """
        fallback = fallback or {}
        result: dict[str, Decimal] = {}
        for symbol in symbols:
            key = normalize_symbol(symbol)
            try:
                result[key] = self.get_price(key)
            except (PriceUnavailableError, DependencyFailureError, ValidationError) as exc:
                if key in fallback and fallback[key] is not None:
                    logger.warning("Using last known price for %s: %s", key, exc.message)
                    result[key] = fallback[key]
                else:
                    logger.warning("No price for %s: %s", key, exc.message)
        return result

    def invalidate(self, symbol: Optional[str] = None) -> None:
        """Drop cached entries for one symbol, or all of them."""
        if symbol is None:
            self._cache.clear()
            return
        key = normalize_symbol(symbol)
        for kind in ("price", "prev_close"):
            self._cache.pop((kind, key), None)

    def close(self) -> None:
        self._executor.shutdown(wait=False, cancel_futures=True)

    def _lookup(
        self,
        kind: str,
        symbol: str,
        fetch: Callable[[str], Optional[Decimal]],
    ) -> Optional[Decimal]:
        now = time.monotonic()
        cached = self._cache.get((kind, symbol))
        if cached is not None and now - cached[1] <= self._ttl:
            return cached[0]

        future = self._executor.submit(fetch, symbol)
        try:
            value = future.result(timeout=self._timeout)
        except FuturesTimeoutError:
            future.cancel()
            logger.warning("Price lookup for %s timed out after %ss", symbol, self._timeout)
            raise PriceUnavailableError(symbol, reason=f"no response within {self._timeout}s")
        except Exception as exc:
            logger.exception("Price source failed for %s", symbol)
            raise DependencyFailureError("price source", f"{symbol}: {exc}") from exc

        if value is None:
            return None
        value = Decimal(str(value))
        if self._ttl > 0:
            self._cache[(kind, symbol)] = (value, time.monotonic())
        return value
