"""
Descriptive Statistics Module

Quartiles and Tukey-fence outlier detection for the box plots.
"""

import logging
import math
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence, Union

import numpy as np

from streamstats.pipeline import config
from streamstats.pipeline.errors import InvalidInputError
from streamstats.pipeline.records import Records, get_field
from streamstats.stats.aggregation import count, group_records

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoxStats:
    """Five-number summary with Tukey outliers."""

    q1: float
    median: float
    q3: float
    min: float
    max: float
    outliers: List[float] = field(default_factory=list)

    @property
    def iqr(self) -> float:
        return self.q3 - self.q1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "q1": self.q1,
            "median": self.median,
            "q3": self.q3,
            "min": self.min,
            "max": self.max,
            "outliers": list(self.outliers),
        }


def quantile_sorted(sorted_values: Sequence[float], p: float) -> float:
    """
    Quantile of an ascending sample by linear interpolation.

    The position is ``p * (n - 1)``; the result interpolates between the values
    at the floor and ceiling of that position.
    """
    n = len(sorted_values)
    if n == 0:
        raise InvalidInputError("Quantile of an empty sample")
    if not 0.0 <= p <= 1.0:
        raise ValueError(f"Quantile must be in [0, 1], got {p}")

    position = p * (n - 1)
    lower = math.floor(position)
    upper = math.ceil(position)
    low_value = float(sorted_values[lower])
    if lower == upper:
        return low_value
    return low_value + (float(sorted_values[upper]) - low_value) * (position - lower)


def compute_box_stats(values: Union[Sequence[float], np.ndarray], factor: float = config.TUKEY_FACTOR) -> BoxStats:
    """
    Compute box plot statistics for a numeric sample.

    Whiskers end at the most extreme values inside the Tukey fences
    ``[q1 - factor*IQR, q3 + factor*IQR]``; everything outside is an outlier
    (duplicates kept). When one side has no in-fence value, that whisker falls
    back to the sample extreme on that side.

    Args:
        values: Non-empty numeric sample
        factor: Fence multiplier (1.5 for standard Tukey fences)

    Returns:
        BoxStats with min <= q1 <= median <= q3 <= max
    """
    ordered = np.sort(np.asarray(values, dtype=float))
    if ordered.size == 0:
        raise InvalidInputError("Box statistics need at least one value")

    q1 = quantile_sorted(ordered, 0.25)
    median = quantile_sorted(ordered, 0.5)
    q3 = quantile_sorted(ordered, 0.75)

    iqr = q3 - q1
    lower_fence = q1 - factor * iqr
    upper_fence = q3 + factor * iqr

    outliers = ordered[(ordered < lower_fence) | (ordered > upper_fence)]
    above_lower = ordered[ordered >= lower_fence]
    below_upper = ordered[ordered <= upper_fence]

    whisker_low = float(above_lower.min()) if above_lower.size else float(ordered[0])
    whisker_high = float(below_upper.max()) if below_upper.size else float(ordered[-1])

    # With few points (e.g. [0, 10, 10, 10]) the nearest in-fence value can sit
    # inside the box; whiskers stop at the box edge then.
    return BoxStats(
        q1=q1,
        median=median,
        q3=q3,
        min=min(whisker_low, q1),
        max=max(whisker_high, q3),
        outliers=[float(v) for v in outliers],
    )


def box_stats_by_group(
    records: Records,
    group_fn: Callable[[Any], Hashable],
    value_field: str,
) -> Dict[Hashable, Dict[str, Any]]:
    """Box statistics of ``value_field`` per group, with the group size.

    Groups whose sample would be empty never occur; every group comes from
    at least one record.
    """
    result = {}
    for key, group in group_records(records, group_fn).items():
        stats = compute_box_stats([get_field(r, value_field) for r in group])
        result[key] = {"count": count(group), **stats.to_dict()}
    return result


def explicit_box_stats(records: Records, value_field: str) -> Dict[str, Dict[str, Any]]:
    """Box statistics split into non-explicit and explicit tracks.

    Missing groups (e.g. no explicit tracks after filtering) are omitted.
    """
    by_flag = box_stats_by_group(records, lambda r: bool(get_field(r, "explicit_track")), value_field)
    labels = {False: "non_explicit", True: "explicit"}
    return {labels[flag]: by_flag[flag] for flag in (False, True) if flag in by_flag}


def jitter_offsets(
    n: int,
    width: float = config.OUTLIER_JITTER_WIDTH,
    seed: Optional[Union[int, np.random.Generator]] = None,
) -> np.ndarray:
    """Uniform horizontal offsets in [-width/2, width/2] for outlier dots.

    Pass a seed or a Generator for reproducible placement.
    """
    rng = seed if isinstance(seed, np.random.Generator) else np.random.default_rng(seed)
    return rng.uniform(-width / 2, width / 2, size=n)
