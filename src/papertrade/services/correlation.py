"""Pairwise correlation estimators for held symbols.

``SectorProxyCorrelationEstimator`` is a labelled placeholder: it does
not look at prices at all, it only assumes that names in the same sector
move together more than names in different sectors. Swap in
``ReturnSeriesCorrelationEstimator`` (or any ``CorrelationEstimator``)
once real return history is available.
"""

import math
import statistics
from decimal import Decimal
from typing import Optional, Protocol

Matrix = dict[str, dict[str, Decimal]]

SELF_CORRELATION = Decimal("1.0")
SAME_SECTOR = Decimal("0.75")
DIFFERENT_SECTOR = Decimal("0.25")
UNKNOWN_SECTOR = Decimal("0.5")


class CorrelationEstimator(Protocol):
    def estimate(self, symbols: list[str], sectors: dict[str, Optional[str]]) -> Matrix:
        """Symmetric matrix keyed by symbol; diagonal is 1.0."""
        ...


class SectorProxyCorrelationEstimator:
    """Correlation assumed from sector co-membership."""

    def __init__(
        self,
        same_sector: Decimal = SAME_SECTOR,
        different_sector: Decimal = DIFFERENT_SECTOR,
        unknown: Decimal = UNKNOWN_SECTOR,
    ):
        self._same = same_sector
        self._different = different_sector
        self._unknown = unknown

    def pair(self, a: str, b: str, sectors: dict[str, Optional[str]]) -> Decimal:
        if a == b:
            return SELF_CORRELATION
        sector_a = sectors.get(a)
        sector_b = sectors.get(b)
        if sector_a is None or sector_b is None:
            return self._unknown
        return self._same if sector_a == sector_b else self._different

    def estimate(self, symbols: list[str], sectors: dict[str, Optional[str]]) -> Matrix:
        return {a: {b: self.pair(a, b, sectors) for b in symbols} for a in symbols}


def pearson(xs: list[float], ys: list[float]) -> Optional[float]:
    """Pearson correlation of two equal-length series, or None if undefined."""
    n = min(len(xs), len(ys))
    if n < 2:
        return None
    xs, ys = xs[-n:], ys[-n:]
    mean_x = statistics.fmean(xs)
    mean_y = statistics.fmean(ys)
    cov = sum((x - mean_x) * (y - mean_y) for x, y in zip(xs, ys))
    var_x = sum((x - mean_x) ** 2 for x in xs)
    var_y = sum((y - mean_y) ** 2 for y in ys)
    if var_x == 0 or var_y == 0:
        return None
    return cov / math.sqrt(var_x * var_y)


class ReturnSeriesCorrelationEstimator:
    """
    Pearson correlation of per-symbol return series.

    Series are aligned on their most recent observations. Pairs without
    enough data fall back to ``fallback`` (sector proxy by default).
    """

    def __init__(
        self,
        returns: dict[str, list[Decimal]],
        fallback: Optional[SectorProxyCorrelationEstimator] = None,
    ):
        self._returns = {symbol.upper(): [float(r) for r in series] for symbol, series in returns.items()}
        self._fallback = fallback or SectorProxyCorrelationEstimator()

    def estimate(self, symbols: list[str], sectors: dict[str, Optional[str]]) -> Matrix:
        matrix: Matrix = {a: {} for a in symbols}
        for i, a in enumerate(symbols):
            matrix[a][a] = SELF_CORRELATION
            for b in symbols[i + 1:]:
                rho = pearson(self._returns.get(a, []), self._returns.get(b, []))
                if rho is None:
                    value = self._fallback.pair(a, b, sectors)
                else:
                    value = Decimal(str(round(max(-1.0, min(1.0, rho)), 4)))
                matrix[a][b] = value
                matrix[b][a] = value
        return matrix
