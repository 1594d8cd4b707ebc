"""Per-generation summary of a best-stats log.

The log is the RAW tier; summary.json is DERIVED from it and can always be
regenerated with write_summary().
"""

import json
import logging
from dataclasses import asdict, dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence

import numpy as np

from constants import INVALID_MARKER, SUMMARY_SCHEMA_VERSION
from recording.run_log import read_stats_rows
from recording.schema import COST, COST_PER_PARCEL, GENERATION, IS_VALID

logger = logging.getLogger(__name__)


class SummaryError(Exception):
    """Raised when the run summary cannot be written."""

    pass


@dataclass(frozen=True)
class GenerationSummary:
    """Aggregated results of one generation's best candidate.

    Attributes:
        generation: Generation number
        num_scenarios: Rows logged for the generation
        num_valid: Rows the objective accepted
        mean_cost: Mean cost over all rows
        best_cost: Lowest cost over all rows
        mean_cost_per_parcel: Mean over valid rows, None if none were valid
    """

    generation: int
    num_scenarios: int
    num_valid: int
    mean_cost: float
    best_cost: float
    mean_cost_per_parcel: Optional[float]

    @property
    def valid_rate(self) -> float:
        return self.num_valid / self.num_scenarios if self.num_scenarios else 0.0


def summarize_generations(rows: Sequence[Mapping[str, str]]) -> List[GenerationSummary]:
    """Group log rows by generation and aggregate them.

    Args:
        rows: Rows as returned by RunLog.read_rows()

    Returns:
        One summary per generation, sorted by generation number
    """
    grouped: Dict[int, List[Mapping[str, str]]] = {}
    for row in rows:
        grouped.setdefault(int(row[GENERATION.name]), []).append(row)

    summaries = []
    for generation in sorted(grouped):
        group = grouped[generation]
        costs = np.array([float(r[COST.name]) for r in group], dtype=np.float64)
        per_parcel = np.array(
            [
                float(r[COST_PER_PARCEL.name])
                for r in group
                if r[IS_VALID.name] == "true" and r[COST_PER_PARCEL.name] != INVALID_MARKER
            ],
            dtype=np.float64,
        )

        summaries.append(GenerationSummary(
            generation=generation,
            num_scenarios=len(group),
            num_valid=sum(1 for r in group if r[IS_VALID.name] == "true"),
            mean_cost=float(np.mean(costs)),
            best_cost=float(np.min(costs)),
            mean_cost_per_parcel=float(np.mean(per_parcel)) if per_parcel.size else None,
        ))
    return summaries


def build_summary(stats_path: Path) -> Dict[str, Any]:
    """Build the summary dictionary of a stats log."""
    generations = summarize_generations(read_stats_rows(stats_path))

    summary: Dict[str, Any] = {
        "_metadata": {
            "schema_version": SUMMARY_SCHEMA_VERSION,
            "stats_path": str(stats_path),
            "generation_count": len(generations),
            "created_at": datetime.now().isoformat(),
        },
        "generations": [asdict(g) for g in generations],
    }

    if generations:
        best = min(generations, key=lambda g: g.mean_cost)
        summary["best_generation"] = {
            "generation": best.generation,
            "mean_cost": best.mean_cost,
        }
    return summary


def write_summary(stats_path: Path, dest: Path) -> Dict[str, Any]:
    """Compute the summary of a stats log and write it as JSON.

    Returns:
        The written summary dictionary

    Raises:
        SummaryError: If the summary file cannot be written
    """
    summary = build_summary(Path(stats_path))
    try:
        with open(dest, "w", encoding="utf-8") as f:
            json.dump(summary, f, indent=2, ensure_ascii=False)
    except OSError as e:
        raise SummaryError(f"Failed to write summary to {dest}: {e}") from e

    logger.info(f"Run summary written to {dest}")
    return summary
