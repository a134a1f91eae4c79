"""
World — the population of nodes and the per-tick driver.

The world owns its random generator. Each tick begins by re-creating the
generator from ``next_seed`` and ends by drawing the seed for the following
tick, so tick N is reproducible from the seed captured after tick N-1
regardless of what else consumed randomness in between.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import TextIO

import numpy as np

from dsim.core.config import WorldConfig
from dsim.core.node import Node
from dsim.core.records import RecordLog

logger = logging.getLogger(__name__)

# Exclusive upper bound for chained seeds (matches a 31-bit rand()).
SEED_LIMIT = 2**31


class World:
    """
    A fixed population of wandering nodes.

    Tick phases:
    1. Re-seed the generator from ``next_seed``
    2. Move every node, in creation order
    3. Check infection for every node, writing its record right after
    4. Draw ``next_seed`` for the following tick
    """

    def __init__(self, config: WorldConfig, stream: TextIO | None = None):
        self.config = config
        self.records = RecordLog(stream)
        self.rng = np.random.default_rng(config.random_seed)
        self.tick = 0

        self.records.run_header(config)
        self.records.column_header()

        self._nodes: list[Node] = self._create_nodes()
        self.next_seed = self._draw_seed()

        logger.debug(
            "Created world %r: %d nodes, seed=%d, next_seed=%d",
            config.experiment_name, len(self._nodes), config.random_seed, self.next_seed,
        )

    # ------------------------------------------------------------------
    # Population
    # ------------------------------------------------------------------
    def _create_nodes(self) -> list[Node]:
        cfg = self.config
        (min_x, min_y), (max_x, max_y) = cfg.min_pos, cfg.max_pos
        travel_span = cfg.max_max_travel - cfg.min_max_travel

        nodes: list[Node] = []
        for i in range(cfg.num_nodes):
            x = min_x + self.rng.random() * (max_x - min_x)
            y = min_y + self.rng.random() * (max_y - min_y)
            max_travel = cfg.min_max_travel + self.rng.random() * travel_span
            node = Node.create(i, (x, y), max_travel, cfg.max_speed, cfg.reinfect)
            self.records.node(node)
            nodes.append(node)
        return nodes

    @property
    def nodes(self) -> Sequence[Node]:
        """Nodes in creation order. The sequence itself is read-only."""
        return tuple(self._nodes)

    def node(self, node_id: int) -> Node:
        if not 0 <= node_id < len(self._nodes):
            raise KeyError(f"Node {node_id} not found")
        return self._nodes[node_id]

    def infect(self, node_id: int) -> None:
        """Mark a node infected (used by drivers to seed patient zero)."""
        self.node(node_id).infected = True

    @property
    def infected_count(self) -> int:
        return sum(1 for n in self._nodes if n.infected)

    def __len__(self) -> int:
        return len(self._nodes)

    # ------------------------------------------------------------------
    # Tick
    # ------------------------------------------------------------------
    def advance_tick(self) -> None:
        """Run one tick: move all nodes, then check infection for all nodes."""
        self.rng = np.random.default_rng(self.next_seed)
        self.records.column_header()

        for node in self._nodes:
            node.move(self.rng)

        # Sources are fixed before the pass so a node infected this tick
        # does not pass it on until the next tick.
        sources = [n for n in self._nodes if n.infected]
        radius = self.config.contact_radius
        for node in self._nodes:
            node.check_infection(sources, radius)
            self.records.node(node)

        self.next_seed = self._draw_seed()
        self.tick += 1
        logger.debug(
            "Tick %d done: %d/%d infected, next_seed=%d",
            self.tick, self.infected_count, len(self._nodes), self.next_seed,
        )

    def run(self, ticks: int) -> None:
        for _ in range(ticks):
            self.advance_tick()

    def _draw_seed(self) -> int:
        return int(self.rng.integers(0, SEED_LIMIT))
