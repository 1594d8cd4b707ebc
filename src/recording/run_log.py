"""Append-only CSV log of the best candidate's results per generation.

Provides the best-stats.csv file of an experiment directory: one header line
followed by one row per (generation, scenario).
"""

import csv
import logging
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from constants import CSV_DELIMITER
from recording.abstractions import ObjectiveFunction, ScenarioOutcome
from recording.result_record import build_record, format_row
from recording.schema import BEST_STATS_SCHEMA, CsvSchema

logger = logging.getLogger(__name__)


class RunLogError(Exception):
    """Raised when the run log cannot be written; fatal for the run."""

    pass


class RunLog:
    """Append-only logger for per-generation scenario results.

    The file is never truncated. initialize() appends the header, so calling
    it twice on the same path leaves two header lines in the file.

    Usage:
        run_log = RunLog(exp_dir.stats_path, objective)
        run_log.initialize()
        run_log.append_generation(0, outcomes)
    """

    def __init__(
        self,
        path: Path,
        objective: Optional[ObjectiveFunction] = None,
        schema: CsvSchema = BEST_STATS_SCHEMA,
        delimiter: str = CSV_DELIMITER,
    ) -> None:
        """Initialize the run log.

        Args:
            path: Path to the CSV file
            objective: Cost function used to build records; required for
                append_generation()
            schema: Column layout of the file
            delimiter: Field delimiter
        """
        self._path = Path(path)
        self._objective = objective
        self._schema = schema
        self._delimiter = delimiter
        self._header_written = False
        self._row_count = 0

    @property
    def path(self) -> Path:
        """Return the path to the CSV file."""
        return self._path

    @property
    def schema(self) -> CsvSchema:
        return self._schema

    @property
    def header_written(self) -> bool:
        return self._header_written

    @property
    def row_count(self) -> int:
        """Return the number of data rows appended through this instance."""
        return self._row_count

    def initialize(self) -> None:
        """Create parent directories and append the header line.

        Raises:
            RunLogError: If the directory or file cannot be written
        """
        if self._header_written:
            logger.warning(f"Header already written to {self._path}, writing it again")

        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            with open(self._path, "a", encoding="utf-8", newline="") as f:
                f.write(self._schema.header_line(self._delimiter) + "\n")
        except OSError as e:
            raise RunLogError(f"Failed to write header to {self._path}: {e}") from e

        self._header_written = True
        logger.info(f"Stats log initialized: {self._path}")

    def append_generation(
        self,
        generation_id: Any,
        outcomes: Iterable[ScenarioOutcome],
    ) -> int:
        """Append one row per outcome as a single write.

        All rows are built and validated before the file is touched, so a
        schema violation in any outcome leaves the file unchanged.

        Args:
            generation_id: Generation the outcomes belong to
            outcomes: Scenario outcomes of the generation's best candidate

        Returns:
            Number of rows written

        Raises:
            RunLogError: If called before initialize(), without an objective,
                or if the append fails
            SchemaViolationError: If an outcome cannot be serialized
        """
        if not self._header_written:
            raise RunLogError(
                f"Stats log not initialized: {self._path}. Call initialize() first."
            )
        if self._objective is None:
            raise RunLogError("An objective function is required to build records")

        lines = []
        for outcome in outcomes:
            record = build_record(outcome, generation_id, self._objective, self._schema)
            lines.append(format_row(record, self._schema, self._delimiter) + "\n")

        try:
            with open(self._path, "a", encoding="utf-8", newline="") as f:
                f.write("".join(lines))
        except OSError as e:
            raise RunLogError(
                f"Failed to append generation {generation_id} to {self._path}: {e}"
            ) from e

        self._row_count += len(lines)
        logger.debug(f"Logged {len(lines)} rows for generation {generation_id}")
        return len(lines)

    def read_rows(self) -> List[Dict[str, str]]:
        """Read all data rows from the file.

        Returns:
            List of dictionaries keyed by header token, values as strings
        """
        return read_stats_rows(self._path, self._delimiter)


def read_stats_rows(path: Path, delimiter: str = CSV_DELIMITER) -> List[Dict[str, str]]:
    """Read a stats log back as header-keyed rows.

    Values are split on the delimiter only, the way they were written.
    Repeated header lines are skipped.
    """
    path = Path(path)
    if not path.exists():
        return []

    rows = []
    with open(path, "r", encoding="utf-8", newline="") as f:
        reader = csv.reader(f, delimiter=delimiter, quoting=csv.QUOTE_NONE)
        header: Optional[List[str]] = None
        for values in reader:
            if not values:
                continue
            if header is None:
                header = values
                continue
            if values == header:
                continue
            rows.append(dict(zip(header, values)))
    return rows
