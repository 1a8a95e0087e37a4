"""
Regression Module

Ordinary least squares fits for the scatter plots: linear trends (track age vs
streams or popularity) and log-log power-law fits (TikTok posts vs views).
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple, Union

import numpy as np
from scipy import stats

from streamstats.pipeline.errors import DegenerateFitError, DomainViolationError, InvalidInputError
from streamstats.pipeline.records import Records, get_field, iter_records
from streamstats.stats.correlation import pearson

logger = logging.getLogger(__name__)

Point = Union[Tuple[float, float], Dict[str, float]]


@dataclass(frozen=True)
class RegressionResult:
    """Fitted line ``y = slope * x + intercept`` (in log space for log-log fits)."""

    slope: float
    intercept: float
    r: float
    r_squared: float
    n: int
    log_base: Optional[float] = None

    @property
    def log_space(self) -> bool:
        return self.log_base is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "slope": self.slope,
            "intercept": self.intercept,
            "r": self.r,
            "r_squared": self.r_squared,
            "n": self.n,
            "log_space": self.log_space,
        }


def _unzip(points: Iterable[Point]) -> Tuple[np.ndarray, np.ndarray]:
    xs, ys = [], []
    for p in points:
        if isinstance(p, dict):
            xs.append(p["x"])
            ys.append(p["y"])
        else:
            xs.append(p[0])
            ys.append(p[1])
    return np.asarray(xs, dtype=float), np.asarray(ys, dtype=float)


def points_from(records: Records, x_field: str, y_field: str) -> List[Tuple[float, float]]:
    """Pair two record fields into (x, y) points."""
    return [(float(get_field(r, x_field)), float(get_field(r, y_field))) for r in iter_records(records)]


def _fit(x: np.ndarray, y: np.ndarray, log_base: Optional[float] = None) -> RegressionResult:
    if x.size < 2:
        raise InvalidInputError("Regression needs at least two points")
    if np.unique(x).size < 2:
        raise DegenerateFitError("Regression needs at least two distinct x values")

    fit = stats.linregress(x, y)
    # linregress reports r = 0 for a constant y; pearson keeps it undefined
    r = pearson(x, y)
    if math.isnan(r):
        # Constant y: the line is flat but no correlation is defined
        logger.warning("Dependent variable is constant; r is undefined")

    return RegressionResult(
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        r=r,
        r_squared=r * r,
        n=int(x.size),
        log_base=log_base,
    )


def linear_regression(points: Iterable[Point]) -> RegressionResult:
    """
    Least squares line through ``points``.

    Args:
        points: (x, y) tuples or {"x": ..., "y": ...} dicts

    Returns:
        RegressionResult with slope, intercept and Pearson r

    Raises:
        InvalidInputError: fewer than two points
        DegenerateFitError: all x values identical
    """
    x, y = _unzip(points)
    return _fit(x, y)


def log_transform(values: Union[Sequence[float], np.ndarray], base: float = math.e) -> np.ndarray:
    """Logarithm of strictly positive values."""
    if base <= 0 or base == 1:
        raise ValueError(f"Logarithm base must be positive and not 1, got {base}")
    values = np.asarray(values, dtype=float)
    if np.any(values <= 0):
        raise DomainViolationError(f"Logarithm of {int(np.sum(values <= 0))} non-positive value(s)")
    return np.log(values) / math.log(base)


def log_log_regression(points: Iterable[Point], base: float = math.e) -> RegressionResult:
    """
    Power-law fit: least squares on (log x, log y).

    Points with a zero or negative coordinate are dropped before the fit;
    the number dropped is logged.
    """
    x, y = _unzip(points)
    positive = (x > 0) & (y > 0)
    dropped = int(x.size - positive.sum())
    if dropped:
        logger.info(f"Log-log fit: excluded {dropped} of {x.size} points with non-positive values")

    return _fit(log_transform(x[positive], base), log_transform(y[positive], base), log_base=base)


def r_squared(actual: Union[Sequence[float], np.ndarray], predicted: Union[Sequence[float], np.ndarray]) -> float:
    """
    Coefficient of determination ``1 - SS_res / SS_tot``.

    Raises:
        DegenerateFitError: every actual value is identical (SS_tot == 0)
    """
    actual = np.asarray(actual, dtype=float)
    predicted = np.asarray(predicted, dtype=float)
    if actual.shape != predicted.shape:
        raise InvalidInputError(f"Length mismatch: {actual.size} actual vs {predicted.size} predicted")
    if actual.size == 0:
        raise InvalidInputError("R squared of an empty sample")

    ss_tot = float(np.sum((actual - actual.mean()) ** 2))
    if ss_tot == 0:
        raise DegenerateFitError("R squared is undefined when all actual values are identical")
    ss_res = float(np.sum((actual - predicted) ** 2))
    return 1.0 - ss_res / ss_tot


def predict(result: RegressionResult, xs: Union[Sequence[float], np.ndarray]) -> np.ndarray:
    """Evaluate a fitted line in the original (untransformed) units."""
    xs = np.asarray(xs, dtype=float)
    if not result.log_space:
        return result.slope * xs + result.intercept

    log_x = log_transform(xs, result.log_base)
    return np.power(result.log_base, result.slope * log_x + result.intercept)


def trend_line(result: RegressionResult, x_extent: Tuple[float, float]) -> List[Dict[str, float]]:
    """The two end points of the fitted line over ``x_extent``."""
    ys = predict(result, x_extent)
    return [{"x": float(x), "y": float(y)} for x, y in zip(x_extent, ys)]


def fit_fields(records: Records, x_field: str, y_field: str, log_log: bool = False) -> RegressionResult:
    """Fit ``y_field`` against ``x_field`` across records."""
    points = points_from(records, x_field, y_field)
    return log_log_regression(points) if log_log else linear_regression(points)
