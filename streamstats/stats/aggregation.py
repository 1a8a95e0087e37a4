"""
Aggregation Module

Group-by + reduce utilities and the per-period series built on them
(yearly popularity bars, radial monthly profiles, engagement ratios).
"""

import logging
import math
from typing import Any, Callable, Dict, Hashable, List, Optional, Sequence

import numpy as np

from streamstats.pipeline import config
from streamstats.pipeline.records import Records, get_field, iter_records

logger = logging.getLogger(__name__)

KeyFn = Callable[[Any], Hashable]
ReduceFn = Callable[[List[Any]], Any]


def group_records(records: Records, key_fn: KeyFn) -> Dict[Hashable, List[Any]]:
    """Split records into groups, keeping group-discovery order."""
    groups: Dict[Hashable, List[Any]] = {}
    for record in iter_records(records):
        groups.setdefault(key_fn(record), []).append(record)
    return groups


def group_reduce(records: Records, key_fn: KeyFn, reduce_fn: ReduceFn) -> Dict[Hashable, Any]:
    """
    Group records by ``key_fn`` and reduce each group with ``reduce_fn``.

    Groups only come from records that are present, so ``reduce_fn`` never
    sees an empty list. Keys appear in the order they were first encountered.

    Args:
        records: Records (or DataFrame rows) to group
        key_fn: Maps a record to its grouping key (release year, artist, ...)
        reduce_fn: Maps a group's record list to a value (mean, sum, ...)

    Returns:
        Dict mapping key -> reduced value
    """
    return {key: reduce_fn(group) for key, group in group_records(records, key_fn).items()}


def rollup(records: Records, key_fn: KeyFn, **reducers: ReduceFn) -> Dict[Hashable, Dict[str, Any]]:
    """Apply several named reducers per group."""
    return group_reduce(
        records,
        key_fn,
        lambda group: {name: reduce_fn(group) for name, reduce_fn in reducers.items()},
    )


# =============================================================================
# REDUCERS
# =============================================================================

def mean_of(field: str) -> ReduceFn:
    """Reducer returning the mean of ``field``."""
    def reduce(group: List[Any]) -> float:
        return float(np.mean([get_field(r, field) for r in group]))
    return reduce


def sum_of(field: str) -> ReduceFn:
    """Reducer returning the sum of ``field``."""
    def reduce(group: List[Any]) -> float:
        return float(sum(get_field(r, field) for r in group))
    return reduce


def count(group: List[Any]) -> int:
    return len(group)


# =============================================================================
# PERIOD SERIES
# =============================================================================

def _release_year(record: Any) -> int:
    return get_field(record, "release_date").year


def _release_month(record: Any) -> int:
    return get_field(record, "release_date").month - 1


def yearly_mean(records: Records, field: str = "spotify_popularity") -> List[Dict[str, Any]]:
    """Mean of ``field`` per release year, sorted by year."""
    by_year = group_reduce(records, _release_year, mean_of(field))
    return [{"year": year, "value": value} for year, value in sorted(by_year.items())]


def monthly_profile(
    records: Records,
    field: str = config.SEASONAL_METRIC,
    year: Optional[int] = None,
) -> List[Dict[str, Any]]:
    """
    Mean of ``field`` per release month, January first.

    Always returns twelve entries. A month with no releases has value NaN,
    which the radial chart draws as a gap.

    Args:
        records: Records to aggregate
        field: Metric to average
        year: Restrict to releases from this year (None = all years)
    """
    if year is not None:
        records = [r for r in iter_records(records) if _release_year(r) == year]

    by_month = group_reduce(records, _release_month, mean_of(field))
    return [
        {"month": name, "value": by_month.get(index, math.nan)}
        for index, name in enumerate(config.MONTH_NAMES)
    ]


def release_years(records: Records) -> List[int]:
    """Distinct release years, ascending."""
    return sorted(group_records(records, _release_year))


def _mean_ratio(group: Sequence[Any], numerator: str, denominator: str) -> float:
    # Tracks with a zero denominator have no defined ratio and are left out
    ratios = [
        get_field(r, numerator) / get_field(r, denominator)
        for r in group
        if get_field(r, denominator) > 0
    ]
    return float(np.mean(ratios)) if ratios else math.nan


def engagement_ratios(records: Records, top_n: int = config.TOP_ENGAGEMENT_ARTISTS) -> List[Dict[str, Any]]:
    """
    Views-per-like ratios per artist for YouTube and TikTok.

    Args:
        records: Records to aggregate
        top_n: Number of artists kept, ranked by combined YouTube + TikTok views

    Returns:
        List of dicts with artist, youtube_ratio, tiktok_ratio, total_views.
        A ratio is NaN when none of the artist's tracks has any likes.
    """
    per_artist = rollup(
        records,
        lambda r: get_field(r, "artist"),
        youtube_ratio=lambda g: _mean_ratio(g, "youtube_views", "youtube_likes"),
        tiktok_ratio=lambda g: _mean_ratio(g, "tiktok_views", "tiktok_likes"),
        total_views=lambda g: float(sum(get_field(r, "youtube_views") + get_field(r, "tiktok_views") for r in g)),
    )

    ranked = sorted(per_artist.items(), key=lambda item: item[1]["total_views"], reverse=True)
    return [{"artist": artist, **values} for artist, values in ranked[:top_n]]
