"""Experiment directory management for evolutionary runs.

Each run gets its own timestamped directory below the results root. The
"latest" symlink in the results root always points at the newest run.
"""

import logging
import os
import shutil
from datetime import datetime
from pathlib import Path
from typing import Optional, Union

from constants import (
    CONFIG_DIRNAME,
    GENERATION_DIR_PREFIX,
    LATEST_ALIAS,
    PROGRAM_FILE_TEMPLATE,
    PROGRAMS_DIRNAME,
    STATS_FILENAME,
    TIMESTAMP_FORMAT,
)

logger = logging.getLogger(__name__)


class ExperimentDirectoryError(Exception):
    """Raised when the experiment directory cannot be set up; fatal for the run."""

    pass


def format_timestamp(moment: datetime) -> str:
    """Return a second-resolution, colon-free timestamp for directory names."""
    return moment.strftime(TIMESTAMP_FORMAT)


class ExperimentDirectory:
    """Manages the directory of one evolutionary run.

    Directory structure:
        {results_root}/{timestamp}-{suffix}/
            best-stats.csv               # Header + one row per (generation, scenario)
            config/                      # Copy of the run configuration
            programs/
                best-individual-{gen}.txt
            generation{N}/               # Written by external workers
        {results_root}/latest -> {timestamp}-{suffix}/

    Usage:
        exp_dir = ExperimentDirectory.create("files/results/evo", "dyn50-s123")
        exp_dir.snapshot_config("files/config")
        exp_dir.write_program(0, program_text)
    """

    def __init__(self, root: Union[str, Path], stats_filename: str = STATS_FILENAME) -> None:
        """Wrap an experiment directory path.

        Args:
            root: Path to the run directory
            stats_filename: Name of the stats log inside the run directory
        """
        self._root = Path(root)
        self._stats_path = self._root / stats_filename
        self._config_path = self._root / CONFIG_DIRNAME
        self._programs_path = self._root / PROGRAMS_DIRNAME

    @classmethod
    def create(
        cls,
        parent_dir: Union[str, Path],
        name_suffix: str,
        timestamp: Optional[datetime] = None,
        latest_alias: str = LATEST_ALIAS,
        stats_filename: str = STATS_FILENAME,
    ) -> "ExperimentDirectory":
        """Create a new run directory and repoint the latest alias to it.

        Names have second resolution. Two runs started in the same second with
        the same suffix share one directory, and the second run's header is
        appended to the first run's stats log.

        Args:
            parent_dir: Results root holding all run directories
            name_suffix: Human-readable suffix, e.g. '<tag>-s<seed>'
            timestamp: Run start time (default: now)
            latest_alias: Name of the symlink in parent_dir
            stats_filename: Name of the stats log inside the run directory

        Returns:
            ExperimentDirectory for the created directory

        Raises:
            ExperimentDirectoryError: If the directory or alias cannot be created
        """
        parent = Path(parent_dir)
        moment = timestamp or datetime.now()
        root = parent / f"{format_timestamp(moment)}-{name_suffix}"

        try:
            root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ExperimentDirectoryError(
                f"Failed to create experiment directory {root}: {e}"
            ) from e

        latest = parent / latest_alias
        try:
            if latest.is_symlink() or latest.exists():
                latest.unlink()
            os.symlink(root.resolve(), latest, target_is_directory=True)
        except OSError as e:
            raise ExperimentDirectoryError(
                f"Failed to point {latest} at {root}: {e}"
            ) from e

        logger.info(f"Created experiment directory: {root}")
        return cls(root, stats_filename)

    @property
    def root_path(self) -> Path:
        """Return the run directory path."""
        return self._root

    @property
    def name(self) -> str:
        return self._root.name

    @property
    def stats_path(self) -> Path:
        """Return the best-stats.csv path."""
        return self._stats_path

    @property
    def config_path(self) -> Path:
        """Return the config/ directory path."""
        return self._config_path

    @property
    def programs_path(self) -> Path:
        """Return the programs/ directory path."""
        return self._programs_path

    def generation_path(self, generation: int) -> Path:
        """Return the output directory of a generation's workers."""
        return self._root / f"{GENERATION_DIR_PREFIX}{generation}"

    def program_path(self, generation: int) -> Path:
        return self._programs_path / PROGRAM_FILE_TEMPLATE.format(generation=generation)

    def snapshot_config(self, source_dir: Union[str, Path]) -> Path:
        """Copy a configuration directory into config/ for provenance.

        Args:
            source_dir: Directory holding the run's configuration files

        Returns:
            The config/ directory path

        Raises:
            ExperimentDirectoryError: If the copy fails
        """
        try:
            shutil.copytree(source_dir, self._config_path, dirs_exist_ok=True)
        except OSError as e:
            raise ExperimentDirectoryError(
                f"Failed to copy config from {source_dir} to {self._config_path}: {e}"
            ) from e

        logger.info(f"Config snapshot copied from {source_dir}")
        return self._config_path

    def write_program(self, generation: int, program_text: str) -> Path:
        """Append the best program of a generation to its dump file.

        Raises:
            ExperimentDirectoryError: If the file cannot be written
        """
        path = self.program_path(generation)
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with open(path, "a", encoding="utf-8") as f:
                f.write(program_text)
        except OSError as e:
            raise ExperimentDirectoryError(f"Failed to write program {path}: {e}") from e

        logger.debug(f"Best program of generation {generation} written to {path}")
        return path
