"""
Statistics Engines

Pure functions over track records:
- Aggregation: group-by + reduce, yearly/monthly series, engagement ratios
- Descriptive: quartiles and Tukey outliers for box plots
- Correlation: Pearson r and symmetric correlation matrices
- Regression: linear and log-log least squares with R squared
- Hierarchy: nested group trees for sunbursts, with top-N cuts
- Filters: range brushing, artist selection, popularity levels
"""

from streamstats.stats.aggregation import (
    group_reduce,
    rollup,
    mean_of,
    sum_of,
    yearly_mean,
    monthly_profile,
    engagement_ratios,
)

from streamstats.stats.descriptive import (
    BoxStats,
    quantile_sorted,
    compute_box_stats,
    box_stats_by_group,
    explicit_box_stats,
    jitter_offsets,
)

from streamstats.stats.correlation import (
    pearson,
    correlation_matrix,
    correlation_frame,
    CorrelationCache,
)

from streamstats.stats.regression import (
    RegressionResult,
    linear_regression,
    log_log_regression,
    r_squared,
    predict,
    trend_line,
)

from streamstats.stats.hierarchy import (
    HierarchyNode,
    build_hierarchy,
    node_value,
    iter_leaves,
    year_artist_track_hierarchy,
    artist_platform_hierarchy,
)

from streamstats.stats.filters import (
    is_within_ranges,
    filter_by_ranges,
    filter_by_artist,
    BrushState,
    popularity_level,
)

__all__ = [
    # Aggregation
    "group_reduce",
    "rollup",
    "mean_of",
    "sum_of",
    "yearly_mean",
    "monthly_profile",
    "engagement_ratios",
    # Descriptive
    "BoxStats",
    "quantile_sorted",
    "compute_box_stats",
    "box_stats_by_group",
    "explicit_box_stats",
    "jitter_offsets",
    # Correlation
    "pearson",
    "correlation_matrix",
    "correlation_frame",
    "CorrelationCache",
    # Regression
    "RegressionResult",
    "linear_regression",
    "log_log_regression",
    "r_squared",
    "predict",
    "trend_line",
    # Hierarchy
    "HierarchyNode",
    "build_hierarchy",
    "node_value",
    "iter_leaves",
    "year_artist_track_hierarchy",
    "artist_platform_hierarchy",
    # Filters
    "is_within_ranges",
    "filter_by_ranges",
    "filter_by_artist",
    "BrushState",
    "popularity_level",
]
