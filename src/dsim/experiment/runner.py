"""
Experiment Runner — comparisons, parameter sweeps, and batch execution.

Each run builds a World, infects patient zero, advances the requested
number of ticks, and summarizes the epidemic curve.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TextIO

from dsim.core.config import WorldConfig
from dsim.core.world import World
from dsim.metrics.collector import MetricsCollector, TickMetrics


@dataclass
class ExperimentResult:
    """Result of a single experiment run."""
    config: WorldConfig
    metrics: list[TickMetrics]
    ticks_run: int
    final_infected: int
    peak_infected: int
    ticks_to_half_infected: int | None  # None if half the population never got infected


@dataclass
class ComparisonResult:
    """Result of comparing two or more experiments."""
    results: dict[str, ExperimentResult]
    config_diffs: dict[str, Any]


class ExperimentRunner:
    """
    Run, compare, and sweep simulation experiments.
    """

    def run_experiment(
        self,
        config: WorldConfig,
        ticks: int | None = None,
        collect_metrics: bool = True,
        stream: TextIO | None = None,
    ) -> ExperimentResult:
        """Run a single experiment and return results."""
        ticks = config.ticks_to_run if ticks is None else ticks
        world = World(config, stream=stream)
        if config.patient_zero is not None:
            world.infect(config.patient_zero)

        collector = MetricsCollector(config)
        if collect_metrics:
            collector.collect(world)

        half = len(world) / 2
        peak = world.infected_count
        ticks_to_half = 0 if peak >= half else None
        for _ in range(ticks):
            world.advance_tick()
            infected = world.infected_count
            peak = max(peak, infected)
            if ticks_to_half is None and infected >= half:
                ticks_to_half = world.tick
            if collect_metrics:
                collector.collect(world)

        return ExperimentResult(
            config=config,
            metrics=collector.metrics_history,
            ticks_run=world.tick,
            final_infected=world.infected_count,
            peak_infected=peak,
            ticks_to_half_infected=ticks_to_half,
        )

    def compare_experiments(
        self,
        configs: dict[str, WorldConfig],
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> ComparisonResult:
        """Run multiple experiments and compare results."""
        results: dict[str, ExperimentResult] = {}
        for name, config in configs.items():
            results[name] = self.run_experiment(config, ticks, collect_metrics)

        config_names = list(configs.keys())
        diffs: dict[str, Any] = {}
        if len(config_names) >= 2:
            base = configs[config_names[0]]
            for name in config_names[1:]:
                diffs[f"{config_names[0]}_vs_{name}"] = base.diff(configs[name])

        return ComparisonResult(results=results, config_diffs=diffs)

    def run_parameter_sweep(
        self,
        base_config: WorldConfig,
        param_name: str,
        values: list[Any],
        ticks: int | None = None,
        collect_metrics: bool = True,
    ) -> dict[str, ExperimentResult]:
        """
        Sweep a single parameter across multiple values.

        Args:
            base_config: Base configuration to modify
            param_name: Name of the field on WorldConfig to sweep
            values: List of values to test
            ticks: Ticks per run (defaults to the config's ticks_to_run)
            collect_metrics: Whether to collect per-tick metrics

        Returns:
            Dict mapping "param=value" label -> ExperimentResult
        """
        results: dict[str, ExperimentResult] = {}
        for val in values:
            config = base_config.with_overrides(
                **{param_name: val},
                experiment_name=f"sweep_{param_name}={val}",
            )
            results[f"{param_name}={val}"] = self.run_experiment(config, ticks, collect_metrics)
        return results

    def run_multi_seed(
        self,
        config: WorldConfig,
        seeds: list[int],
        ticks: int | None = None,
        collect_metrics: bool = False,
    ) -> list[ExperimentResult]:
        """
        Run the same configuration with multiple random seeds.

        Useful for measuring variance in outcomes.
        """
        results: list[ExperimentResult] = []
        for seed in seeds:
            seed_config = config.with_overrides(
                random_seed=seed,
                experiment_name=f"{config.experiment_name}_seed{seed}",
            )
            results.append(self.run_experiment(seed_config, ticks, collect_metrics))
        return results
