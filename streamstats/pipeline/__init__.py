"""Streaming Statistics Pipeline

Record loading, configuration and errors shared by the statistics engines.
The orchestrator (streamstats.pipeline.orchestrator) is imported directly by
the CLI, since it depends on the engines themselves.
"""

from .errors import StatsError, InvalidInputError, DegenerateFitError, DomainViolationError
from .records import Record, load_dataframe, load_records, frame_to_records, to_number

__all__ = [
    'StatsError',
    'InvalidInputError',
    'DegenerateFitError',
    'DomainViolationError',
    'Record',
    'load_dataframe',
    'load_records',
    'frame_to_records',
    'to_number',
]
