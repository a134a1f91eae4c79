"""
Experiment presets — pre-configured world templates.

Each preset returns a WorldConfig tuned to show a different spreading
regime.
"""

from __future__ import annotations

from collections.abc import Callable

from dsim.core.config import WorldConfig


def baseline() -> WorldConfig:
    """Default settings: 3000 nodes on a 500x500 field."""
    return WorldConfig(experiment_name="baseline")


def small_town() -> WorldConfig:
    """A few hundred nodes on a small field; quick to run and spreads fast."""
    return WorldConfig(
        experiment_name="small_town",
        num_nodes=300,
        max_pos=(120.0, 120.0),
        ticks_to_run=200,
    )


def dense_crowd() -> WorldConfig:
    """Same population squeezed into a quarter of the baseline area."""
    return WorldConfig(
        experiment_name="dense_crowd",
        max_pos=(250.0, 250.0),
    )


def homebodies() -> WorldConfig:
    """Nodes barely leave home; spread relies on neighbours living close."""
    return WorldConfig(
        experiment_name="homebodies",
        min_max_travel=0.5,
        max_max_travel=2.0,
        max_speed=0.5,
    )


def wanderers() -> WorldConfig:
    """Wide travel radii and fast movement."""
    return WorldConfig(
        experiment_name="wanderers",
        min_max_travel=10.0,
        max_max_travel=40.0,
        max_speed=4.0,
    )


def reinfection() -> WorldConfig:
    """Baseline with reinfection enabled (recorded only for now)."""
    return WorldConfig(
        experiment_name="reinfection",
        reinfect=True,
    )


# Registry of all presets
PRESETS: dict[str, Callable[[], WorldConfig]] = {
    "baseline": baseline,
    "small_town": small_town,
    "dense_crowd": dense_crowd,
    "homebodies": homebodies,
    "wanderers": wanderers,
    "reinfection": reinfection,
}


def get_preset(name: str) -> WorldConfig:
    """Get a preset config by name."""
    if name not in PRESETS:
        raise KeyError(f"Unknown preset: '{name}'. Available: {list(PRESETS.keys())}")
    return PRESETS[name]()


def list_presets() -> list[str]:
    """Return list of available preset names."""
    return list(PRESETS.keys())
