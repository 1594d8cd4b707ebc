"""Formal abstractions for the data handed over by the evolutionary engine.

Defines the collaborator types the recorder consumes:
- SimulationStats: raw statistics of one simulated scenario
- AuctionStats: optional counters produced when re-auctioning was enabled
- ScenarioOutcome: one candidate evaluated against one scenario
- ObjectiveFunction: the cost function that turns statistics into scalars
"""

from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class SimulationStats:
    """Statistics of one simulation run.

    Only total_parcels and total_vehicles are read directly by the recorder;
    the remaining fields exist for the objective function.

    Attributes:
        total_parcels: Number of parcels (orders) in the scenario
        total_vehicles: Number of vehicles in the scenario
        total_travel_time: Summed vehicle travel time
        pickup_tardiness: Summed lateness of pickups
        delivery_tardiness: Summed lateness of deliveries
        over_time: Time vehicles spent beyond the end of the horizon
        simulation_finished: Whether the simulation reached its end state
        total_delivered: Number of parcels actually delivered
    """

    total_parcels: int
    total_vehicles: int
    total_travel_time: float = 0.0
    pickup_tardiness: float = 0.0
    delivery_tardiness: float = 0.0
    over_time: float = 0.0
    simulation_finished: bool = True
    total_delivered: int = 0

    def __post_init__(self) -> None:
        if self.total_parcels < 0:
            raise ValueError(f"total_parcels must be non-negative, got {self.total_parcels}")
        if self.total_vehicles < 0:
            raise ValueError(f"total_vehicles must be non-negative, got {self.total_vehicles}")


@dataclass(frozen=True)
class AuctionStats:
    """Re-auction counters of one simulation run."""

    num_reauctions: int
    num_unsuccessful_reauctions: int
    num_failed_reauctions: int


@dataclass(frozen=True)
class ScenarioOutcome:
    """Result of evaluating one candidate against one scenario.

    Attributes:
        problem_class: Identifier of the scenario's problem class
        instance_id: Identifier of the instance within the class
        random_seed: Seed the simulation was run with
        stats: Statistics payload of the simulation
        auction_stats: Present only when the re-auction subsystem was active
    """

    problem_class: str
    instance_id: str
    random_seed: int
    stats: SimulationStats
    auction_stats: Optional[AuctionStats] = None

    @property
    def scenario_id(self) -> str:
        """Return the scenario name used in the stats log."""
        return f"{self.problem_class}-{self.instance_id}"


class ObjectiveFunction(Protocol):
    """Cost function evaluated on the statistics of a simulation."""

    def is_valid_result(self, stats: SimulationStats) -> bool:
        ...

    def compute_cost(self, stats: SimulationStats) -> float:
        ...

    def travel_time(self, stats: SimulationStats) -> float:
        ...

    def tardiness(self, stats: SimulationStats) -> float:
        ...

    def over_time(self, stats: SimulationStats) -> float:
        ...
