"""Exceptions raised by the statistics engines.

Each one marks a quantity that is undefined for the given input. Callers decide
whether to skip the chart, show "insufficient data" or drop the point; the
engines never substitute a numeric default.
"""


class StatsError(ValueError):
    """Base class for statistics errors."""


class InvalidInputError(StatsError):
    """Sample too small (or mismatched) for the requested statistic."""


class DegenerateFitError(StatsError):
    """Zero variance where a fit or goodness-of-fit needs some."""


class DomainViolationError(StatsError):
    """Non-positive value passed to a logarithmic transform."""
