"""Conversion of scenario outcomes into complete, ordered log rows.

A record is a plain dict keyed by schema field name. Every field must be
present before a record is serialized; optional auction counters fall back
to their sentinel default instead of being left out.
"""

from typing import Any, Dict, Mapping

from constants import CSV_DELIMITER, INVALID_MARKER
from recording.abstractions import ObjectiveFunction, ScenarioOutcome
from recording.schema import (
    AUCTION_FIELDS,
    BEST_STATS_SCHEMA,
    COST,
    COST_PER_PARCEL,
    CsvSchema,
    GENERATION,
    IS_VALID,
    NUM_FAILED_REAUCTIONS,
    NUM_ORDERS,
    NUM_REAUCTIONS,
    NUM_UNSUC_REAUCTIONS,
    NUM_VEHICLES,
    OVER_TIME,
    RANDOM_SEED,
    SCENARIO_ID,
    TARDINESS,
    TRAVEL_TIME,
)


class SchemaViolationError(ValueError):
    """Raised when a record cannot be serialized as a well-formed row."""

    pass


def build_record(
    outcome: ScenarioOutcome,
    generation_id: Any,
    objective: ObjectiveFunction,
    schema: CsvSchema = BEST_STATS_SCHEMA,
) -> Dict[str, Any]:
    """Build the field -> value mapping for one scenario outcome.

    Args:
        outcome: Evaluated scenario with its statistics payload
        generation_id: Generation the outcome belongs to
        objective: Cost function used for validity and cost components
        schema: Schema the record must satisfy

    Returns:
        Dictionary with exactly one entry per schema field

    Raises:
        SchemaViolationError: If the built record does not cover the schema
    """
    stats = outcome.stats
    is_valid = bool(objective.is_valid_result(stats))
    cost = objective.compute_cost(stats)

    record: Dict[str, Any] = {
        GENERATION.name: generation_id,
        SCENARIO_ID.name: outcome.scenario_id,
        RANDOM_SEED.name: outcome.random_seed,
        COST.name: cost,
        TRAVEL_TIME.name: objective.travel_time(stats),
        TARDINESS.name: objective.tardiness(stats),
        OVER_TIME.name: objective.over_time(stats),
        IS_VALID.name: is_valid,
        NUM_ORDERS.name: stats.total_parcels,
        NUM_VEHICLES.name: stats.total_vehicles,
        COST_PER_PARCEL.name: (
            _per_parcel(cost, stats.total_parcels) if is_valid else INVALID_MARKER
        ),
    }

    auction = outcome.auction_stats
    if auction is not None:
        record[NUM_REAUCTIONS.name] = auction.num_reauctions
        record[NUM_UNSUC_REAUCTIONS.name] = auction.num_unsuccessful_reauctions
        record[NUM_FAILED_REAUCTIONS.name] = auction.num_failed_reauctions
    else:
        for f in AUCTION_FIELDS:
            record[f.name] = f.default

    check_complete(record, schema)
    return record


def _per_parcel(cost: float, total_parcels: int) -> float:
    # Zero parcels follows IEEE division: inf, -inf or nan
    if total_parcels == 0:
        if cost == 0 or cost != cost:
            return float("nan")
        return float("inf") if cost > 0 else float("-inf")
    return cost / float(total_parcels)


def check_complete(record: Mapping[str, Any], schema: CsvSchema = BEST_STATS_SCHEMA) -> None:
    """Verify that the record's keys are exactly the schema's field names.

    Raises:
        SchemaViolationError: Listing the missing and unexpected fields
    """
    expected = set(schema.field_names)
    actual = set(record)
    if actual == expected:
        return

    missing = [name for name in schema.field_names if name not in actual]
    extra = sorted(actual - expected)
    raise SchemaViolationError(
        f"Record does not match schema: missing={missing}, unexpected={extra}"
    )


def format_value(value: Any) -> str:
    """Render a scalar as it appears in the log."""
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)


def format_row(
    record: Mapping[str, Any],
    schema: CsvSchema = BEST_STATS_SCHEMA,
    delimiter: str = CSV_DELIMITER,
) -> str:
    """Join the record's values in schema order (no line terminator).

    Values are not quoted, so a value containing the delimiter would shift
    every following column. Such values are rejected instead.

    Raises:
        SchemaViolationError: If the record is incomplete or a value contains
            the delimiter or a line break
    """
    check_complete(record, schema)

    values = []
    for name in schema.field_names:
        text = format_value(record[name])
        if delimiter in text or "\n" in text or "\r" in text:
            raise SchemaViolationError(
                f"Value for '{name}' contains a delimiter or line break: {text!r}"
            )
        values.append(text)
    return delimiter.join(values)
