"""
Node — a single mobile agent in the world.

A node has a fixed home (``start_position``), wanders around it each tick
within its ``max_travel`` radius, and catches the infection from any
infected node closer than the contact radius.
"""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

import numpy as np


@dataclass(eq=False)
class Node:
    """A simulated individual with a home, a position and infection state."""

    # === Identity ===
    id: int

    # === Position ===
    current_position: np.ndarray
    start_position: np.ndarray

    # === Movement bounds ===
    max_travel: float
    max_speed: float

    # === Infection state ===
    # infected_for and reinfectable are carried but never updated: there is
    # no recovery or reinfection model yet.
    reinfectable: bool = False
    infectable: bool = True
    infected: bool = False
    infected_for: int = 0

    @classmethod
    def create(
        cls,
        node_id: int,
        position,
        max_travel: float,
        max_speed: float,
        reinfectable: bool,
    ) -> Node:
        """Build a node standing at its home position."""
        home = np.array(position, dtype=float)
        home.flags.writeable = False
        return cls(
            id=node_id,
            current_position=home.copy(),
            start_position=home,
            max_travel=float(max_travel),
            max_speed=float(max_speed),
            reinfectable=reinfectable,
        )

    # ------------------------------------------------------------------
    # Movement
    # ------------------------------------------------------------------
    def move(self, rng: np.random.Generator) -> None:
        """
        Take one random step, snapping back toward home.

        The step is drawn as an angle then a speed. It is added to the
        current offset from home to form the candidate offset; the node is
        then reset to home and pushed along the candidate direction by the
        candidate length clipped to ``max_travel``.
        """
        direction = rng.random() * 2 * math.pi
        speed = rng.random() * self.max_speed
        step = np.array([math.sin(direction), math.cos(direction)]) * speed

        candidate = step + self.current_position - self.start_position
        distance = float(np.hypot(candidate[0], candidate[1]))

        self.current_position = self.start_position.copy()
        if distance != 0:
            self.current_position += candidate / distance * min(distance, self.max_travel)

    def distance_from_home(self) -> float:
        offset = self.current_position - self.start_position
        return float(np.hypot(offset[0], offset[1]))

    # ------------------------------------------------------------------
    # Infection
    # ------------------------------------------------------------------
    def check_infection(self, nodes: Iterable[Node], contact_radius: float) -> None:
        """Become infected if any other node in ``nodes`` is an infected contact."""
        for other in nodes:
            if self.infected:
                return
            if other.id != self.id:
                self.infected = in_contact(self, other, contact_radius)

    def __repr__(self) -> str:
        status = "infected" if self.infected else "healthy"
        x, y = self.current_position
        return f"Node(id={self.id}, pos=({x:.3f}, {y:.3f}), {status})"


def in_contact(node: Node, other: Node, contact_radius: float) -> bool:
    """True if ``other`` is infected and strictly closer than ``contact_radius``."""
    offset = node.current_position - other.current_position
    return bool(np.hypot(offset[0], offset[1]) < contact_radius) and other.infected
