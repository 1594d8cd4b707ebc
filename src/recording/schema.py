"""Ordered column layout of the best-stats log."""

from dataclasses import dataclass
from typing import Any, Iterator, Sequence, Tuple

from constants import CSV_DELIMITER, MISSING_COUNTER


@dataclass(frozen=True)
class CsvField:
    """A named column, optionally with the value used when its source is absent."""

    name: str
    default: Any = None

    def __post_init__(self) -> None:
        if not self.name or self.name != self.name.lower():
            raise ValueError(f"Field names must be non-empty lowercase, got {self.name!r}")

    def __str__(self) -> str:
        return self.name


class CsvSchema:
    """Immutable ordered set of uniquely named fields.

    The same schema writes the header and orders every row, so adding or
    removing a field is a breaking change that requires a fresh run directory.
    """

    def __init__(self, fields: Sequence[CsvField]) -> None:
        names = [f.name for f in fields]
        duplicates = sorted({n for n in names if names.count(n) > 1})
        if duplicates:
            raise ValueError(f"Duplicate field names in schema: {duplicates}")
        self._fields: Tuple[CsvField, ...] = tuple(fields)
        self._names: Tuple[str, ...] = tuple(names)

    @property
    def fields(self) -> Tuple[CsvField, ...]:
        return self._fields

    @property
    def field_names(self) -> Tuple[str, ...]:
        return self._names

    def header_line(self, delimiter: str = CSV_DELIMITER) -> str:
        """Return the header tokens joined in schema order (no line terminator)."""
        return delimiter.join(self._names)

    def __iter__(self) -> Iterator[CsvField]:
        return iter(self._fields)

    def __len__(self) -> int:
        return len(self._fields)

    def __contains__(self, name: object) -> bool:
        return name in self._names

    def __repr__(self) -> str:
        return f"CsvSchema({', '.join(self._names)})"


GENERATION = CsvField("generation")
COST_PER_PARCEL = CsvField("cost_per_parcel")
COST = CsvField("cost")
TRAVEL_TIME = CsvField("travel_time")
TARDINESS = CsvField("tardiness")
OVER_TIME = CsvField("over_time")
IS_VALID = CsvField("is_valid")
SCENARIO_ID = CsvField("scenario_id")
RANDOM_SEED = CsvField("random_seed")
NUM_VEHICLES = CsvField("num_vehicles")
NUM_ORDERS = CsvField("num_orders")
NUM_REAUCTIONS = CsvField("num_reauctions", default=MISSING_COUNTER)
NUM_UNSUC_REAUCTIONS = CsvField("num_unsuc_reauctions", default=MISSING_COUNTER)
NUM_FAILED_REAUCTIONS = CsvField("num_failed_reauctions", default=MISSING_COUNTER)

BEST_STATS_SCHEMA = CsvSchema([
    GENERATION,
    COST_PER_PARCEL,
    COST,
    TRAVEL_TIME,
    TARDINESS,
    OVER_TIME,
    IS_VALID,
    SCENARIO_ID,
    RANDOM_SEED,
    NUM_VEHICLES,
    NUM_ORDERS,
    NUM_REAUCTIONS,
    NUM_UNSUC_REAUCTIONS,
    NUM_FAILED_REAUCTIONS,
])

AUCTION_FIELDS: Tuple[CsvField, ...] = (
    NUM_REAUCTIONS,
    NUM_UNSUC_REAUCTIONS,
    NUM_FAILED_REAUCTIONS,
)
