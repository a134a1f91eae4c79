"""
World configuration for dSim.

Every parameter of a run lives here. The value is immutable once built and
is validated on construction, so the engine never has to check ranges.
"""

from __future__ import annotations

import dataclasses
import json
from dataclasses import dataclass
from typing import Any


class ConfigError(ValueError):
    """Raised when a WorldConfig is built with out-of-range parameters."""


@dataclass(frozen=True)
class WorldConfig:
    """
    Master configuration for a single simulated world.

    Use ``to_dict()`` / ``from_dict()`` for serialization and comparison,
    and ``with_overrides()`` to derive a modified copy.
    """

    # === Experiment identity ===
    experiment_name: str = "default"
    random_seed: int = 0

    # === Population ===
    num_nodes: int = 3000

    # === Infection (recorded only; see Node.infected_for) ===
    min_inf_time: int = 5
    max_inf_time: int = 20
    survival_rate: float = 0.8
    reinfect: bool = False
    contact_radius: float = 4.0

    # === Movement ===
    min_max_travel: float = 3.0
    max_max_travel: float = 10.0
    max_speed: float = 1.0

    # === Spatial bounds (x, y) ===
    min_pos: tuple[float, float] = (0.0, 0.0)
    max_pos: tuple[float, float] = (500.0, 500.0)

    # === Driver settings ===
    patient_zero: int | None = 0
    ticks_to_run: int = 100

    def __post_init__(self) -> None:
        # JSON round trips hand positions back as lists
        object.__setattr__(self, "min_pos", _as_point(self.min_pos, "min_pos"))
        object.__setattr__(self, "max_pos", _as_point(self.max_pos, "max_pos"))
        self.validate()

    def validate(self) -> None:
        """Raise ConfigError if any parameter is out of range."""
        if self.random_seed < 0:
            raise ConfigError(f"random_seed must be non-negative, got {self.random_seed}")
        if self.num_nodes <= 0:
            raise ConfigError(f"num_nodes must be positive, got {self.num_nodes}")
        if self.min_inf_time < 0 or self.max_inf_time < 0:
            raise ConfigError("infection times must be non-negative")
        if self.min_inf_time > self.max_inf_time:
            raise ConfigError(
                f"min_inf_time ({self.min_inf_time}) exceeds "
                f"max_inf_time ({self.max_inf_time})"
            )
        if not 0.0 <= self.survival_rate <= 1.0:
            raise ConfigError(f"survival_rate must be in [0, 1], got {self.survival_rate}")
        if self.min_max_travel < 0:
            raise ConfigError(f"min_max_travel must be non-negative, got {self.min_max_travel}")
        if self.min_max_travel > self.max_max_travel:
            raise ConfigError(
                f"min_max_travel ({self.min_max_travel}) exceeds "
                f"max_max_travel ({self.max_max_travel})"
            )
        if self.max_speed < 0:
            raise ConfigError(f"max_speed must be non-negative, got {self.max_speed}")
        if self.contact_radius < 0:
            raise ConfigError(f"contact_radius must be non-negative, got {self.contact_radius}")
        for axis, (lo, hi) in enumerate(zip(self.min_pos, self.max_pos)):
            if lo > hi:
                raise ConfigError(f"min_pos exceeds max_pos on axis {'xy'[axis]}: {lo} > {hi}")
        if self.patient_zero is not None and not 0 <= self.patient_zero < self.num_nodes:
            raise ConfigError(
                f"patient_zero {self.patient_zero} outside population of {self.num_nodes}"
            )
        if self.ticks_to_run < 0:
            raise ConfigError(f"ticks_to_run must be non-negative, got {self.ticks_to_run}")

    # ------------------------------------------------------------------
    # Derivation
    # ------------------------------------------------------------------
    def with_overrides(self, **kwargs: Any) -> WorldConfig:
        """Return a validated copy with the given fields replaced."""
        unknown = set(kwargs) - _field_names()
        if unknown:
            raise ConfigError(f"Unknown config fields: {sorted(unknown)}")
        return dataclasses.replace(self, **kwargs)

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------
    def to_dict(self) -> dict[str, Any]:
        """Serialize to a JSON-compatible dict."""
        d: dict[str, Any] = {}
        for f in dataclasses.fields(self):
            v = getattr(self, f.name)
            d[f.name] = list(v) if isinstance(v, tuple) else v
        return d

    @classmethod
    def from_dict(cls, d: dict[str, Any]) -> WorldConfig:
        """Deserialize from a dict."""
        unknown = set(d) - _field_names()
        if unknown:
            raise ConfigError(f"Unknown config fields: {sorted(unknown)}")
        return cls(**d)

    def to_json(self, indent: int = 2) -> str:
        return json.dumps(self.to_dict(), indent=indent)

    @classmethod
    def from_json(cls, s: str) -> WorldConfig:
        return cls.from_dict(json.loads(s))

    def diff(self, other: WorldConfig) -> dict[str, tuple[Any, Any]]:
        """Return parameters that differ between two configs."""
        diffs: dict[str, tuple[Any, Any]] = {}
        for name in _field_names():
            v1 = getattr(self, name)
            v2 = getattr(other, name)
            if v1 != v2:
                diffs[name] = (v1, v2)
        return diffs


def _field_names() -> set[str]:
    return {f.name for f in dataclasses.fields(WorldConfig)}


def _as_point(value: Any, name: str) -> tuple[float, float]:
    try:
        x, y = value
    except (TypeError, ValueError):
        raise ConfigError(f"{name} must be an (x, y) pair, got {value!r}") from None
    return (float(x), float(y))
