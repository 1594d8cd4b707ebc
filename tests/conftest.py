"""Pytest fixtures for the stats recorder tests."""

import shutil
import tempfile

# Add src to path for imports
import sys
from pathlib import Path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

import pytest

from recording.abstractions import AuctionStats, ScenarioOutcome, SimulationStats


class FakeObjective:
    """Objective function with a fixed cost per statistics payload.

    A result is valid when the simulation finished and every parcel was
    delivered. The cost is the sum of its three components.
    """

    def is_valid_result(self, stats):
        return stats.simulation_finished and stats.total_delivered == stats.total_parcels

    def compute_cost(self, stats):
        return self.travel_time(stats) + self.tardiness(stats) + self.over_time(stats)

    def travel_time(self, stats):
        return stats.total_travel_time

    def tardiness(self, stats):
        return stats.pickup_tardiness + stats.delivery_tardiness

    def over_time(self, stats):
        return stats.over_time


@pytest.fixture
def temp_dir():
    """Create a temporary directory for tests."""
    temp = tempfile.mkdtemp()
    yield temp
    shutil.rmtree(temp, ignore_errors=True)


@pytest.fixture
def objective():
    return FakeObjective()


@pytest.fixture
def valid_stats():
    """Statistics of a finished run: cost 120.0 over 4 parcels."""
    return SimulationStats(
        total_parcels=4,
        total_vehicles=2,
        total_travel_time=100.0,
        pickup_tardiness=5.0,
        delivery_tardiness=10.0,
        over_time=5.0,
        simulation_finished=True,
        total_delivered=4,
    )


@pytest.fixture
def invalid_stats():
    """Statistics of a run that left a parcel undelivered."""
    return SimulationStats(
        total_parcels=4,
        total_vehicles=2,
        total_travel_time=80.0,
        simulation_finished=False,
        total_delivered=3,
    )


@pytest.fixture
def make_outcome(valid_stats):
    """Factory for scenario outcomes with sensible defaults."""

    def _make(
        problem_class="classA",
        instance_id="inst1",
        random_seed=42,
        stats=None,
        auction_stats=None,
    ):
        return ScenarioOutcome(
            problem_class=problem_class,
            instance_id=instance_id,
            random_seed=random_seed,
            stats=stats or valid_stats,
            auction_stats=auction_stats,
        )

    return _make


@pytest.fixture
def auction_stats():
    return AuctionStats(
        num_reauctions=3,
        num_unsuccessful_reauctions=1,
        num_failed_reauctions=0,
    )
