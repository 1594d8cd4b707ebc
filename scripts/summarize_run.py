#!/usr/bin/env python3
"""Summarize the best-stats log of an evolutionary run.

Usage:
    python summarize_run.py                          # files/results/evo/latest
    python summarize_run.py --run files/results/evo/2024-01-02T134507-dyn50-s7
    python summarize_run.py --run ... --write        # also write summary.json

The script:
1. Reads best-stats.csv from the run directory
2. Aggregates every generation's rows
3. Prints one line per generation
4. Optionally writes the summary to summary.json in the run directory
"""

import argparse
import logging
import sys
from pathlib import Path

# Add src to path for imports
SCRIPT_DIR = Path(__file__).parent
PROJECT_ROOT = SCRIPT_DIR.parent
SRC_DIR = PROJECT_ROOT / "src"
sys.path.insert(0, str(SRC_DIR))

from config import RecordingConfig
from constants import SUMMARY_FILENAME
from recording.run_log import read_stats_rows
from recording.summary import summarize_generations, write_summary

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s | %(levelname)s | %(message)s',
    datefmt='%H:%M:%S'
)
logger = logging.getLogger(__name__)


def main():
    config = RecordingConfig()

    parser = argparse.ArgumentParser(
        description="Summarize the best-stats log of an evolutionary run"
    )
    parser.add_argument(
        "--run",
        default=str(Path(config.results_root) / config.latest_alias),
        help="Run directory (default: the latest run)",
    )
    parser.add_argument(
        "--write",
        action="store_true",
        help=f"Write {SUMMARY_FILENAME} into the run directory",
    )
    args = parser.parse_args()

    run_dir = Path(args.run)
    stats_path = run_dir / config.stats_filename
    if not stats_path.exists():
        print(f"Error: Stats log not found: {stats_path}")
        return 1

    generations = summarize_generations(read_stats_rows(stats_path))
    if not generations:
        print(f"No rows logged yet in {stats_path}")
        return 0

    print("=" * 60)
    print(f"Run: {run_dir.resolve().name}")
    print("=" * 60)
    print(f"{'gen':>5} {'scenarios':>9} {'valid':>6} {'mean cost':>12} {'best cost':>12} {'cost/parcel':>12}")
    for g in generations:
        per_parcel = "-" if g.mean_cost_per_parcel is None else f"{g.mean_cost_per_parcel:.2f}"
        print(
            f"{g.generation:>5} {g.num_scenarios:>9} {g.valid_rate:>6.0%} "
            f"{g.mean_cost:>12.2f} {g.best_cost:>12.2f} {per_parcel:>12}"
        )

    if args.write:
        write_summary(stats_path, run_dir / SUMMARY_FILENAME)

    return 0


if __name__ == "__main__":
    sys.exit(main())
