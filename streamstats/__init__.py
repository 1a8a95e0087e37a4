"""Statistical transformation layer for a music-streaming analytics dashboard.

Turns parsed track records into the derived series each chart displays:
aggregations, box statistics, correlation matrices, regressions, sunburst
hierarchies and brushing filters.
"""

__version__ = "0.1.0"
