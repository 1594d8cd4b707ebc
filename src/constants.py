"""Shared constants for the evolution stats recorder.

File names and sentinel values used by the recording package and the
evolution hooks.
"""

# =============================================================================
# CSV Serialization
# =============================================================================

CSV_DELIMITER: str = ","

# Written in place of cost_per_parcel when the objective rejects a result
INVALID_MARKER: str = "invalid"

# Written for each auction counter when no auction payload was produced
MISSING_COUNTER: int = -1

# =============================================================================
# Experiment Directory Layout
# =============================================================================

STATS_FILENAME: str = "best-stats.csv"
SUMMARY_FILENAME: str = "summary.json"
LATEST_ALIAS: str = "latest"
CONFIG_DIRNAME: str = "config"
PROGRAMS_DIRNAME: str = "programs"
GENERATION_DIR_PREFIX: str = "generation"
PROGRAM_FILE_TEMPLATE: str = "best-individual-{generation}.txt"

# Second resolution, no colons so the name is valid on every filesystem
TIMESTAMP_FORMAT: str = "%Y-%m-%dT%H%M%S"

SUMMARY_SCHEMA_VERSION: str = "1.0.0"
