"""
Session manager for interactive simulation runs.

Each session wraps a World, a MetricsCollector and an in-memory record
stream, and is advanced tick by tick on request. Sessions live in memory
only. Tick advancement is serialized per session with a lock, since a
World is not safe to step from several threads at once.
"""

from __future__ import annotations

import io
import logging
import threading
import uuid
from dataclasses import dataclass, field

from dsim.core.config import WorldConfig
from dsim.core.world import World
from dsim.metrics.collector import MetricsCollector

logger = logging.getLogger(__name__)


@dataclass
class SimulationSession:
    """A running or completed simulation session."""

    id: str
    name: str
    config: WorldConfig
    world: World
    collector: MetricsCollector
    stream: io.StringIO
    status: str = "created"  # created | running | completed
    max_ticks: int = 0
    lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    @property
    def current_tick(self) -> int:
        return self.world.tick


class SessionManager:
    """Manages multiple in-memory simulation sessions."""

    def __init__(self):
        self.sessions: dict[str, SimulationSession] = {}
        self._lock = threading.Lock()

    # ------------------------------------------------------------------
    # Construction helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _build_world(config: WorldConfig) -> tuple[World, MetricsCollector, io.StringIO]:
        stream = io.StringIO()
        world = World(config, stream=stream)
        if config.patient_zero is not None:
            world.infect(config.patient_zero)
        collector = MetricsCollector(config)
        collector.collect(world)
        return world, collector, stream

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def create_session(
        self,
        config: WorldConfig | None = None,
        name: str | None = None,
    ) -> SimulationSession:
        """Create a new simulation session."""
        if config is None:
            config = WorldConfig()

        session_id = uuid.uuid4().hex[:8]
        world, collector, stream = self._build_world(config)

        session = SimulationSession(
            id=session_id,
            name=name or config.experiment_name,
            config=config,
            world=world,
            collector=collector,
            stream=stream,
            max_ticks=config.ticks_to_run,
        )
        if session.max_ticks == 0:
            session.status = "completed"

        with self._lock:
            self.sessions[session_id] = session
        logger.info(
            "Created session %s (%s): %d nodes, seed=%d",
            session_id, session.name, config.num_nodes, config.random_seed,
        )
        return session

    def get_session(self, session_id: str) -> SimulationSession:
        """Get a session by ID. Raises KeyError if not found."""
        try:
            return self.sessions[session_id]
        except KeyError:
            raise KeyError(f"Session '{session_id}' not found") from None

    def list_sessions(self) -> list[dict]:
        return [
            {
                "id": s.id,
                "name": s.name,
                "status": s.status,
                "current_tick": s.current_tick,
                "max_ticks": s.max_ticks,
                "population_size": len(s.world),
                "infected_count": s.world.infected_count,
            }
            for s in self.sessions.values()
        ]

    def step(self, session_id: str, n: int = 1) -> SimulationSession:
        """Advance a session by up to N ticks, stopping at max_ticks."""
        session = self.get_session(session_id)

        with session.lock:
            if session.status == "completed":
                return session
            session.status = "running"

            for _ in range(n):
                if session.current_tick >= session.max_ticks:
                    break
                session.world.advance_tick()
                session.collector.collect(session.world)

            if session.current_tick >= session.max_ticks:
                session.status = "completed"
                logger.info("Session %s completed at tick %d", session_id, session.current_tick)

        return session

    def run_full(self, session_id: str) -> SimulationSession:
        """Run a session to completion."""
        session = self.get_session(session_id)
        remaining = session.max_ticks - session.current_tick
        if remaining > 0:
            self.step(session_id, remaining)
        return session

    def reset_session(self, session_id: str) -> SimulationSession:
        """Rebuild a session's world from its config, back at tick 0."""
        session = self.get_session(session_id)

        with session.lock:
            world, collector, stream = self._build_world(session.config)
            session.world = world
            session.collector = collector
            session.stream = stream
            session.status = "completed" if session.max_ticks == 0 else "created"

        logger.info("Reset session %s", session_id)
        return session

    def delete_session(self, session_id: str) -> None:
        """Delete a session from memory."""
        with self._lock:
            if session_id not in self.sessions:
                raise KeyError(f"Session '{session_id}' not found")
            del self.sessions[session_id]
        logger.info("Deleted session %s", session_id)
