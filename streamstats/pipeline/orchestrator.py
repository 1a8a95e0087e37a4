#!/usr/bin/env python3
"""Pipeline orchestration for the streaming statistics dashboard.

This module coordinates every engine to produce the derived series the
dashboard charts bind to: filtering first, then aggregation, box statistics,
correlation matrices, regressions and sunburst hierarchies.

Used by run_stats.py CLI for batch export.
"""

import logging
from typing import Any, Callable, Dict, List, Mapping, Optional, Sequence

import numpy as np

from streamstats.pipeline import config
from streamstats.pipeline.errors import StatsError
from streamstats.pipeline.records import Records, field_values, iter_records
from streamstats.stats import aggregation, correlation, descriptive, filters, hierarchy, regression

logger = logging.getLogger(__name__)

NUMERIC_FIELDS = set(config.METRIC_FIELDS) | {"age"}


def _safe(name: str, compute: Callable[[], Any]) -> Optional[Any]:
    """Run one chart computation; an undefined statistic yields None."""
    try:
        return compute()
    except StatsError as e:
        logger.warning(f"Skipping {name}: {e}")
        return None


def _scatter_fit(records: Records, x_field: str, y_field: str, log_log: bool) -> Dict[str, Any]:
    result = regression.fit_fields(records, x_field, y_field, log_log=log_log)

    xs = field_values(records, x_field)
    if log_log:
        ys = field_values(records, y_field)
        xs = xs[(xs > 0) & (ys > 0)]
    extent = (float(np.min(xs)), float(np.max(xs)))

    return {
        "x": x_field,
        "y": y_field,
        "fit": result.to_dict(),
        "trend": regression.trend_line(result, extent),
    }


def _correlation(records: Records, fields: Sequence[str]) -> Dict[str, Any]:
    frame = correlation.correlation_frame(records, fields)
    return {
        "fields": list(fields),
        "matrix": frame.values.tolist(),
        "strongest": [
            {"a": a, "b": b, "r": r}
            for a, b, r in correlation.strongest_pairs(frame, n=config.STRONGEST_PAIRS)
        ],
    }


def build_dashboard_data(
    records: Records,
    artist: Optional[str] = None,
    ranges: Optional[Mapping[str, filters.Range]] = None,
    correlation_fields: Optional[Sequence[str]] = None,
    parallel_fields: Optional[Sequence[str]] = None,
) -> Dict[str, Any]:
    """Compute every derived series for the dashboard.

    Args:
        records: All loaded records
        artist: Sidebar artist selection (None = all artists)
        ranges: Brushed ranges per field, ANDed together
        correlation_fields: Fields of the multi-platform correlation matrix
        parallel_fields: Axes of the parallel coordinates chart

    Returns:
        Plain dict of series keyed by chart. A chart whose statistic is
        undefined for the filtered records maps to None.
    """
    correlation_fields = list(correlation_fields or config.DEFAULT_CORRELATION_FIELDS)
    parallel_fields = list(parallel_fields or config.DEFAULT_PARALLEL_FIELDS)

    unknown = [f for f in [*correlation_fields, *parallel_fields, *(ranges or {})] if f not in NUMERIC_FIELDS]
    if unknown:
        raise ValueError(f"Unknown numeric field(s): {unknown}")

    all_records = list(iter_records(records))
    selected = filters.filter_by_artist(all_records, artist)
    brush = filters.BrushState(fields=parallel_fields, ranges=ranges)
    selected = brush.apply(selected)

    logger.info(
        f"Building dashboard data: {len(selected)}/{len(all_records)} records "
        f"(artist={artist}, ranges={brush.active})"
    )

    data: Dict[str, Any] = {
        "n_records": len(selected),
        "n_total": len(all_records),
        "filters": {
            "artist": artist,
            "ranges": {f: list(r) for f, r in brush.active.items()},
        },
        "artists": filters.list_artists(all_records),
    }

    # Temporal section
    data["yearly_popularity"] = aggregation.yearly_mean(selected, "spotify_popularity")
    data["seasonal"] = {
        "metric": config.SEASONAL_METRIC,
        "years": aggregation.release_years(selected),
        "all_years": aggregation.monthly_profile(selected, config.SEASONAL_METRIC),
    }

    # Scatter fits
    data["regressions"] = {
        name: _safe(name, lambda x=x, y=y, log=log: _scatter_fit(selected, x, y, log))
        for name, (x, y, log) in config.SCATTER_FITS.items()
    }

    # Explicit vs non-explicit box plots
    data["explicit_box"] = {
        metric: _safe(f"box plot of {metric}", lambda m=metric: descriptive.explicit_box_stats(selected, m))
        for metric in config.EXPLICIT_BOX_METRICS
    }

    # Correlation heatmaps
    data["correlation"] = _safe("correlation matrix", lambda: _correlation(selected, correlation_fields))
    data["shazam_correlation"] = _safe(
        "Shazam correlation", lambda: _correlation(selected, config.SHAZAM_CORRELATION_FIELDS)
    )

    # Engagement
    data["engagement_ratios"] = aggregation.engagement_ratios(selected)

    # Sunbursts
    data["sunburst_years"] = hierarchy.to_dict(hierarchy.year_artist_track_hierarchy(selected))
    data["sunburst_platforms"] = hierarchy.to_dict(hierarchy.artist_platform_hierarchy(selected))

    # Parallel coordinates
    data["parallel"] = {
        "fields": parallel_fields,
        "levels": filters.popularity_levels(selected),
    }

    return data


def summarize(data: Dict[str, Any]) -> List[str]:
    """Short human-readable lines describing a dashboard payload."""
    lines = [f"Records: {data['n_records']} of {data['n_total']}"]

    skipped = [name for name, value in data["regressions"].items() if value is None]
    fitted = {name: value["fit"] for name, value in data["regressions"].items() if value is not None}
    for name, fit in fitted.items():
        lines.append(f"  {name}: slope={fit['slope']:.3g} r={fit['r']:.3f} (n={fit['n']})")
    if skipped:
        lines.append(f"  Insufficient data for: {', '.join(skipped)}")

    if data["correlation"] is None:
        lines.append("Correlation matrix: insufficient data")
    else:
        lines.append(f"Correlation matrix: {len(data['correlation']['fields'])} fields")
        for pair in data["correlation"]["strongest"]:
            lines.append(f"  {pair['a']} ~ {pair['b']}: r={pair['r']:.3f}")

    lines.append(f"Sunburst artists: {len(data['sunburst_platforms']['children'])}")
    return lines
