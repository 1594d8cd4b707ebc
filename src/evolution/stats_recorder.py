"""Run hooks that record an evolutionary run's best results.

The evolutionary engine calls these hooks:
- setup() once at run start
- record_generation() at every generation boundary
- final_statistics() once at run end
"""

import logging
import re
import threading
import time
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Dict, Iterable, Optional, Union

from config import RecordingConfig
from constants import SUMMARY_FILENAME
from recording.abstractions import ObjectiveFunction, ScenarioOutcome
from recording.completion_barrier import await_completion
from recording.experiment_io import ExperimentDirectory
from recording.run_log import RunLog, RunLogError
from recording.summary import write_summary

logger = logging.getLogger(__name__)


class ConfigurationError(ValueError):
    """Raised when the run parameters are unusable; nothing has been created yet."""

    pass


def parse_seed(master_seed: Any) -> int:
    """Parse the master seed, accepting ints and integer strings.

    Raises:
        ConfigurationError: If the seed is missing or not an integer
    """
    if master_seed is None or isinstance(master_seed, bool):
        raise ConfigurationError("master seed must be defined")
    if isinstance(master_seed, int):
        return master_seed
    text = str(master_seed).strip()
    if not re.fullmatch(r"[+-]?\d+", text):
        raise ConfigurationError(f"master seed must be an integer, got {master_seed!r}")
    return int(text)


def format_runtime(seconds: float) -> str:
    """Format a duration as H:MM:SS.mmm."""
    delta = timedelta(seconds=round(seconds, 3))
    text = str(delta)
    if "." in text:
        head, fraction = text.split(".")
        return f"{head}.{fraction[:3]}"
    return f"{text}.000"


class StatsRecorder:
    """Records the best candidate's scenario results of every generation.

    Usage:
        recorder = StatsRecorder(RecordingConfig(), objective)
        recorder.setup(master_seed=123, scenarios_regex=".*0\\.50-.*")
        recorder.record_generation(0, outcomes, program_text)
        ...
        recorder.final_statistics(final_generation=49)
    """

    def __init__(self, config: RecordingConfig, objective: ObjectiveFunction) -> None:
        """Initialize the recorder.

        Args:
            config: Recording configuration
            objective: Cost function used to derive the logged cost columns
        """
        self._config = config
        self._objective = objective
        self._start_time = time.perf_counter()
        self._experiment_dir: Optional[ExperimentDirectory] = None
        self._run_log: Optional[RunLog] = None
        self._seed: Optional[int] = None

    @property
    def config(self) -> RecordingConfig:
        return self._config

    @property
    def experiment_dir(self) -> Optional[ExperimentDirectory]:
        """Return the run directory, None before setup()."""
        return self._experiment_dir

    @property
    def run_log(self) -> Optional[RunLog]:
        return self._run_log

    @property
    def seed(self) -> Optional[int]:
        return self._seed

    def setup(
        self,
        master_seed: Any,
        scenarios_regex: str,
        config_source_dir: Optional[Union[str, Path]] = None,
        timestamp: Optional[datetime] = None,
    ) -> ExperimentDirectory:
        """Validate the run parameters and prepare the run directory.

        Args:
            master_seed: Seed of the evolutionary run
            scenarios_regex: Scenario selector, must be a key of scenario_tags
            config_source_dir: Configuration directory to snapshot
                (default: config.config_source_dir)
            timestamp: Run start time used in the directory name (default: now)

        Returns:
            The created experiment directory

        Raises:
            ConfigurationError: If the seed or scenario selector is invalid
            ExperimentDirectoryError: If the directory cannot be created
            RunLogError: If the stats log cannot be initialized
        """
        seed = parse_seed(master_seed)
        logger.info(f"master seed: {seed}")

        tags = self._config.scenario_tags
        if scenarios_regex not in tags:
            raise ConfigurationError(
                f"Unexpected regex: {scenarios_regex}, expected one of {sorted(tags)}."
            )

        name_suffix = f"{tags[scenarios_regex]}-s{seed}"
        exp_dir = ExperimentDirectory.create(
            self._config.results_root,
            name_suffix,
            timestamp=timestamp,
            latest_alias=self._config.latest_alias,
            stats_filename=self._config.stats_filename,
        )

        run_log = RunLog(exp_dir.stats_path, self._objective)
        run_log.initialize()

        source = config_source_dir or self._config.config_source_dir
        if source is not None:
            exp_dir.snapshot_config(source)

        self._seed = seed
        self._experiment_dir = exp_dir
        self._run_log = run_log
        return exp_dir

    def _require_setup(self) -> ExperimentDirectory:
        if self._experiment_dir is None or self._run_log is None:
            raise RunLogError("StatsRecorder not set up. Call setup() first.")
        return self._experiment_dir

    def record_generation(
        self,
        generation: int,
        outcomes: Iterable[ScenarioOutcome],
        program_text: Optional[str] = None,
    ) -> int:
        """Append the generation's results and dump its best program.

        Args:
            generation: Generation number
            outcomes: Scenario outcomes of the generation's best candidate
            program_text: Printed form of the best program, None to skip the dump

        Returns:
            Number of rows written
        """
        exp_dir = self._require_setup()
        rows = self._run_log.append_generation(generation, outcomes)
        if program_text is not None:
            exp_dir.write_program(generation, program_text)
        return rows

    def final_statistics(
        self,
        final_generation: int,
        cancel_event: Optional[threading.Event] = None,
    ) -> Dict[str, Any]:
        """Report the runtime and wait until the last generation is on disk.

        Args:
            final_generation: Index of the last generation
            cancel_event: Event that aborts the wait when set

        Returns:
            The run summary written to summary.json

        Raises:
            BarrierTimeoutError: If barrier_timeout elapses first
            BarrierCancelledError: If cancel_event is set first
            SummaryError: If summary.json cannot be written
        """
        exp_dir = self._require_setup()

        logger.info("End of evolutionary run.")
        logger.info(f"Total runtime: {format_runtime(time.perf_counter() - self._start_time)}")

        await_completion(
            exp_dir.generation_path(0),
            exp_dir.generation_path(final_generation),
            poll_interval=self._config.poll_interval,
            timeout=self._config.barrier_timeout,
            cancel_event=cancel_event,
        )

        summary = write_summary(exp_dir.stats_path, exp_dir.root_path / SUMMARY_FILENAME)
        logger.info("Done.")
        return summary
