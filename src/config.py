"""Configuration dataclasses for recording evolutionary runs."""

from dataclasses import dataclass, field
from typing import Dict, Optional

from constants import LATEST_ALIAS, STATS_FILENAME


# Scenario selector (regex handed to the evaluator) -> short directory tag
DEFAULT_SCENARIO_TAGS: Dict[str, str] = {
    ".*": "all",
    ".*0\\.20-.*": "dyn20",
    ".*0\\.50-.*": "dyn50",
    ".*0\\.80-.*": "dyn80",
}


@dataclass(frozen=True)
class RecordingConfig:
    """Configuration for where and how a run's results are recorded."""

    results_root: str = "files/results/evo"
    stats_filename: str = STATS_FILENAME
    latest_alias: str = LATEST_ALIAS

    # Directory snapshotted into <run>/config/ at setup, None to skip
    config_source_dir: Optional[str] = "files/config"

    # Completion barrier polling, in seconds
    poll_interval: float = 1.0
    # None = wait forever for the last generation to be flushed
    barrier_timeout: Optional[float] = None

    scenario_tags: Dict[str, str] = field(
        default_factory=lambda: dict(DEFAULT_SCENARIO_TAGS)
    )

    def __post_init__(self) -> None:
        if self.poll_interval <= 0:
            raise ValueError(f"poll_interval must be positive, got {self.poll_interval}")
        if self.barrier_timeout is not None and self.barrier_timeout < 0:
            raise ValueError(
                f"barrier_timeout must be non-negative, got {self.barrier_timeout}"
            )
        if not self.stats_filename.strip():
            raise ValueError("stats_filename cannot be empty")
        if not self.latest_alias.strip() or "/" in self.latest_alias:
            raise ValueError(f"Invalid latest_alias: {self.latest_alias!r}")
        for tag in self.scenario_tags.values():
            if not tag or "/" in tag:
                raise ValueError(f"Invalid scenario tag: {tag!r}")
