"""
Serializers for converting simulation objects to JSON-safe dicts.
"""

from __future__ import annotations

from typing import Any

from dsim.api.sessions import SimulationSession
from dsim.core.node import Node


def _point(p) -> list[float]:
    return [float(p[0]), float(p[1])]


def serialize_node(node: Node) -> dict[str, Any]:
    """Node state for drawing and inspection."""
    return {
        "id": int(node.id),
        "current_position": _point(node.current_position),
        "start_position": _point(node.start_position),
        "infectable": node.infectable,
        "infected": node.infected,
        "infected_for": int(node.infected_for),
        "reinfectable": node.reinfectable,
        "max_travel": float(node.max_travel),
        "max_speed": float(node.max_speed),
        "distance_from_home": round(node.distance_from_home(), 6),
    }


def serialize_session(session: SimulationSession) -> dict[str, Any]:
    return {
        "id": session.id,
        "name": session.name,
        "status": session.status,
        "current_tick": session.current_tick,
        "max_ticks": session.max_ticks,
        "population_size": len(session.world),
        "infected_count": session.world.infected_count,
        "next_seed": session.world.next_seed,
        "config": session.config.to_dict(),
    }
