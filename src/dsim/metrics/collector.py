"""
Metrics Collector — per-tick infection and movement statistics.

Reads a World after each tick and keeps a history that can be sliced into
time series or exported for visualization.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from typing import Any

import numpy as np

from dsim.core.config import WorldConfig
from dsim.core.world import World

# Distance within which a node counts as sitting on its travel limit.
_TRAVEL_LIMIT_TOLERANCE = 1e-9


@dataclass
class TickMetrics:
    """Metrics for a single tick."""

    tick: int
    population_size: int

    # Infection
    infected_count: int
    susceptible_count: int
    newly_infected: int
    infected_fraction: float

    # Movement
    mean_displacement: float
    max_displacement: float
    at_travel_limit: int


_METRIC_FIELDS = frozenset(f.name for f in fields(TickMetrics))


class MetricsCollector:
    """Collects and aggregates metrics across ticks."""

    def __init__(self, config: WorldConfig):
        self.config = config
        self.metrics_history: list[TickMetrics] = []
        self._previous_infected: int | None = None

    def collect(self, world: World) -> TickMetrics:
        """Collect metrics for the world's current tick."""
        nodes = world.nodes
        population = len(nodes)
        infected = sum(1 for n in nodes if n.infected)

        displacements = self.displacements(world)
        travel = np.array([n.max_travel for n in nodes])
        at_limit = int(np.sum(np.abs(displacements - travel) <= _TRAVEL_LIMIT_TOLERANCE))

        # First collection has no baseline; everything infected counts as new
        previous = self._previous_infected if self._previous_infected is not None else 0

        metrics = TickMetrics(
            tick=world.tick,
            population_size=population,
            infected_count=infected,
            susceptible_count=population - infected,
            newly_infected=infected - previous,
            infected_fraction=infected / population if population else 0.0,
            mean_displacement=float(displacements.mean()) if population else 0.0,
            max_displacement=float(displacements.max()) if population else 0.0,
            at_travel_limit=at_limit,
        )

        self._previous_infected = infected
        self.metrics_history.append(metrics)
        return metrics

    def get_time_series(self, field_name: str) -> list[Any]:
        """Extract a time series for a specific metric field."""
        if field_name not in _METRIC_FIELDS:
            raise AttributeError(f"TickMetrics has no field '{field_name}'")
        return [getattr(m, field_name) for m in self.metrics_history]

    def export_for_visualization(self) -> list[dict[str, Any]]:
        """Export all metrics as a list of JSON-serializable dicts."""
        return [asdict(m) for m in self.metrics_history]

    # ------------------------------------------------------------------
    # Position helpers for presentation layers
    # ------------------------------------------------------------------
    @staticmethod
    def snapshot_positions(world: World) -> np.ndarray:
        """Current positions as an (n, 2) array in node order."""
        if not len(world):
            return np.zeros((0, 2))
        return np.array([n.current_position for n in world.nodes])

    @staticmethod
    def displacements(world: World) -> np.ndarray:
        """Distance of every node from its home, in node order."""
        if not len(world):
            return np.zeros(0)
        offsets = np.array([n.current_position - n.start_position for n in world.nodes])
        return np.hypot(offsets[:, 0], offsets[:, 1])
