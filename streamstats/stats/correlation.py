"""
Correlation Module

Pearson correlation between numeric fields and the symmetric correlation
matrices shown in the multi-platform and Shazam heatmaps.
"""

import logging
import math
from typing import Dict, List, Optional, Sequence, Tuple, Union

import numpy as np
import pandas as pd

from streamstats.pipeline.errors import InvalidInputError
from streamstats.pipeline.records import Records, field_values

logger = logging.getLogger(__name__)


def _is_constant(values: np.ndarray) -> bool:
    return bool(values.size) and bool(np.all(values == values[0]))


def pearson(x: Union[Sequence[float], np.ndarray], y: Union[Sequence[float], np.ndarray]) -> float:
    """
    Pearson correlation coefficient of two equally long series.

    Uses population covariance and standard deviations (denominator n).

    Args:
        x: First series
        y: Second series, same length as ``x``

    Returns:
        r in [-1, 1], or NaN when either series is constant (no correlation
        can be computed; callers must not read that as 0)
    """
    x = np.asarray(x, dtype=float)
    y = np.asarray(y, dtype=float)

    if x.shape != y.shape:
        raise InvalidInputError(f"Series lengths differ: {x.size} vs {y.size}")
    if x.size < 2:
        raise InvalidInputError("Correlation needs at least two observations")

    # Decided on the raw values: a float mean need not cancel exactly
    if _is_constant(x) or _is_constant(y):
        return math.nan
    if np.array_equal(x, y):
        return 1.0

    dx = x - x.mean()
    dy = y - y.mean()
    cov = np.mean(dx * dy)
    std_x = math.sqrt(np.mean(dx ** 2))
    std_y = math.sqrt(np.mean(dy ** 2))

    r = cov / (std_x * std_y)
    # Rounding can push |r| just past 1
    return float(min(1.0, max(-1.0, r)))


def correlation_matrix(records: Records, fields: Sequence[str]) -> List[List[float]]:
    """
    Square correlation matrix over ``fields`` across all records.

    The diagonal is exactly 1. Only the upper triangle is computed; the lower
    triangle mirrors it so the result is symmetric bit for bit.
    """
    vectors = [field_values(records, f) for f in fields]
    n = len(fields)
    matrix = [[1.0] * n for _ in range(n)]

    for i in range(n):
        for j in range(i + 1, n):
            r = pearson(vectors[i], vectors[j])
            matrix[i][j] = r
            matrix[j][i] = r

    constant = [f for f, v in zip(fields, vectors) if _is_constant(v)]
    if n > 1 and constant:
        logger.warning(f"Constant fields have no defined correlation: {constant}")

    return matrix


def correlation_frame(records: Records, fields: Sequence[str]) -> pd.DataFrame:
    """Correlation matrix labelled with field names on both axes."""
    return pd.DataFrame(correlation_matrix(records, fields), index=list(fields), columns=list(fields))


def strongest_pairs(matrix: pd.DataFrame, n: int = 5) -> List[Tuple[str, str, float]]:
    """Off-diagonal pairs ranked by absolute correlation, undefined pairs skipped."""
    pairs = []
    labels = list(matrix.index)
    for i, a in enumerate(labels):
        for b in labels[i + 1:]:
            r = matrix.loc[a, b]
            if not math.isnan(r):
                pairs.append((a, b, float(r)))
    pairs.sort(key=lambda p: abs(p[2]), reverse=True)
    return pairs[:n]


class CorrelationCache:
    """Memoize the correlation matrix of one field selection.

    An entry is reused only while the same fields are requested and their
    values across the record set are unchanged, so editing a list in place
    still recomputes. Callers receive a fresh copy of the cached matrix.
    """

    def __init__(self):
        self._fields: Optional[Tuple[str, ...]] = None
        self._vectors: Optional[List[np.ndarray]] = None
        self._matrix: Optional[Tuple[Tuple[float, ...], ...]] = None
        self.hits = 0
        self.misses = 0

    def _is_current(self, fields: Tuple[str, ...], vectors: List[np.ndarray]) -> bool:
        if self._matrix is None or fields != self._fields:
            return False
        return all(np.array_equal(a, b, equal_nan=True) for a, b in zip(vectors, self._vectors))

    def get(self, records: Records, fields: Sequence[str]) -> List[List[float]]:
        fields = tuple(fields)
        vectors = [field_values(records, f) for f in fields]

        if self._is_current(fields, vectors):
            self.hits += 1
        else:
            self.misses += 1
            matrix = correlation_matrix(records, fields)
            self._matrix = tuple(tuple(row) for row in matrix)
            self._fields = fields
            # field_values may return a view into a DataFrame column
            self._vectors = [v.copy() for v in vectors]

        return [list(row) for row in self._matrix]

    def invalidate(self):
        self._fields = None
        self._vectors = None
        self._matrix = None

    def stats(self) -> Dict[str, int]:
        return {"hits": self.hits, "misses": self.misses}
