"""
Filter Module

Range predicates for multi-axis brushing, the sidebar artist filter and the
popularity level buckets used to colour parallel coordinates.
"""

import logging
import math
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import numpy as np

from streamstats.pipeline import config
from streamstats.pipeline.records import Records, get_field, iter_records

logger = logging.getLogger(__name__)

Range = Tuple[float, float]

UNBOUNDED: Range = (-math.inf, math.inf)


def is_within_ranges(record: Any, ranges: Mapping[str, Range]) -> bool:
    """
    True when the record lies inside every constrained range.

    Bounds are inclusive on both ends. Fields absent from ``ranges``, or
    constrained to ``(-inf, inf)``, always pass.
    """
    for field, (low, high) in ranges.items():
        value = get_field(record, field)
        if not low <= value <= high:
            return False
    return True


def filter_by_ranges(records: Records, ranges: Mapping[str, Range]) -> List[Any]:
    return [r for r in iter_records(records) if is_within_ranges(r, ranges)]


def filter_by_artist(records: Records, artist: Optional[str]) -> List[Any]:
    """Records of one artist; ``None`` keeps everything."""
    if artist is None:
        return list(iter_records(records))
    return [r for r in iter_records(records) if get_field(r, "artist") == artist]


def list_artists(records: Records) -> List[str]:
    """Distinct artist names, sorted."""
    return sorted({get_field(r, "artist") for r in iter_records(records)})


class BrushState:
    """Active brush selections, one range per axis.

    Instances are immutable: ``brush`` and ``clear`` return a new state.
    Clearing an axis resets only that axis to ``(-inf, inf)``.
    """

    def __init__(self, fields: Sequence[str] = (), ranges: Optional[Mapping[str, Range]] = None):
        self._ranges: Dict[str, Range] = {f: UNBOUNDED for f in fields}
        for field, bounds in (ranges or {}).items():
            self._ranges[field] = _normalize(bounds)

    @property
    def ranges(self) -> Dict[str, Range]:
        return dict(self._ranges)

    @property
    def active(self) -> Dict[str, Range]:
        """Only the axes with a real selection."""
        return {f: r for f, r in self._ranges.items() if r != UNBOUNDED}

    def brush(self, field: str, low: float, high: float) -> "BrushState":
        ranges = self.ranges
        ranges[field] = _normalize((low, high))
        return BrushState(ranges=ranges)

    def clear(self, field: str) -> "BrushState":
        ranges = self.ranges
        ranges[field] = UNBOUNDED
        return BrushState(ranges=ranges)

    def clear_all(self) -> "BrushState":
        return BrushState(fields=list(self._ranges))

    def matches(self, record: Any) -> bool:
        return is_within_ranges(record, self.active)

    def apply(self, records: Records) -> List[Any]:
        return filter_by_ranges(records, self.active)

    def __repr__(self) -> str:
        return f"BrushState(active={self.active})"


def _normalize(bounds: Range) -> Range:
    # Brushes can be dragged in either direction
    low, high = bounds
    return (low, high) if low <= high else (high, low)


def parse_range(text: str) -> Tuple[str, Range]:
    """Parse ``FIELD:MIN:MAX``; an empty bound means unbounded on that side."""
    parts = text.split(":")
    if len(parts) != 3 or not parts[0]:
        raise ValueError(f"Expected FIELD:MIN:MAX, got '{text}'")
    field, low, high = parts
    return field, (float(low) if low else -math.inf, float(high) if high else math.inf)


def popularity_level(score: float, extent: Tuple[float, float]) -> str:
    """
    Bucket a score into five equal-width levels over ``extent``.

    A zero-width extent puts every score in the lowest level.
    """
    low, high = extent
    width = high - low
    for index, label in enumerate(config.POPULARITY_LEVELS[:-1]):
        if score < low + width * (index + 1) / len(config.POPULARITY_LEVELS):
            return label
    if width == 0:
        return config.POPULARITY_LEVELS[0]
    return config.POPULARITY_LEVELS[-1]


def popularity_levels(records: Records, field: str = "spotify_popularity") -> List[str]:
    """Level of every record relative to the observed extent of ``field``."""
    records = list(iter_records(records))
    if not records:
        return []
    values = np.array([get_field(r, field) for r in records], dtype=float)
    extent = (float(values.min()), float(values.max()))
    return [popularity_level(v, extent) for v in values]
