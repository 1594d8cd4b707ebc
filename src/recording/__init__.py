"""Result recording package for evolutionary runs.

This package provides:
- Collaborator data types handed over by the evolutionary engine
- The fixed column schema of the best-stats log
- Record building and row serialization
- The append-only best-stats log
- Experiment directory management with a "latest" alias
- The completion barrier for asynchronously written generation output
- Per-generation summaries
"""

from recording.abstractions import (
    AuctionStats,
    ObjectiveFunction,
    ScenarioOutcome,
    SimulationStats,
)
from recording.schema import BEST_STATS_SCHEMA, CsvField, CsvSchema
from recording.result_record import (
    SchemaViolationError,
    build_record,
    check_complete,
    format_row,
)
from recording.run_log import RunLog, RunLogError, read_stats_rows
from recording.experiment_io import ExperimentDirectory, ExperimentDirectoryError
from recording.completion_barrier import (
    BarrierCancelledError,
    BarrierTimeoutError,
    CompletionCounter,
    await_completion,
)
from recording.summary import (
    GenerationSummary,
    SummaryError,
    summarize_generations,
    write_summary,
)

__all__ = [
    # Abstractions
    "AuctionStats",
    "ObjectiveFunction",
    "ScenarioOutcome",
    "SimulationStats",
    # Schema
    "BEST_STATS_SCHEMA",
    "CsvField",
    "CsvSchema",
    # Records
    "SchemaViolationError",
    "build_record",
    "check_complete",
    "format_row",
    # Run log
    "RunLog",
    "RunLogError",
    "read_stats_rows",
    # Experiments
    "ExperimentDirectory",
    "ExperimentDirectoryError",
    # Barrier
    "BarrierCancelledError",
    "BarrierTimeoutError",
    "CompletionCounter",
    "await_completion",
    # Summaries
    "GenerationSummary",
    "SummaryError",
    "summarize_generations",
    "write_summary",
]
