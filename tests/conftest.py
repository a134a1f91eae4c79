"""
Shared test configuration.

Provides a small-world config factory and a helper that pins a node's home
to a fixed spot, for tests that need hand-placed scenarios.
"""

import numpy as np
import pytest

from dsim.core.config import WorldConfig

SMALL_WORLD = {
    "num_nodes": 40,
    "min_pos": (0.0, 0.0),
    "max_pos": (60.0, 60.0),
    "min_max_travel": 2.0,
    "max_max_travel": 6.0,
    "max_speed": 1.5,
    "random_seed": 42,
}


@pytest.fixture
def make_config():
    """Factory for a 40-node world on a 60x60 field, seed 42."""

    def _make(**overrides) -> WorldConfig:
        return WorldConfig(**{**SMALL_WORLD, **overrides})

    return _make


@pytest.fixture
def place():
    """Move a node's home (and current position) to a fixed spot."""

    def _place(world, node_id: int, x: float, y: float) -> None:
        node = world.node(node_id)
        home = np.array([x, y], dtype=float)
        home.flags.writeable = False
        node.start_position = home
        node.current_position = home.copy()

    return _place
