#!/usr/bin/env python3
"""Run a baseline dSim world and print the infection curve."""

import sys

from dsim.experiment.presets import baseline
from dsim.core.world import World
from dsim.metrics.collector import MetricsCollector


def main(log_path: str | None = None):
    config = baseline().with_overrides(random_seed=42, ticks_to_run=50)

    print(f"=== dSim: {config.experiment_name} ===")
    print(f"Nodes: {config.num_nodes}")
    print(f"Field: {config.min_pos} .. {config.max_pos}")
    print(f"Travel radius: {config.min_max_travel} .. {config.max_max_travel}")
    print(f"Max speed: {config.max_speed}, contact radius: {config.contact_radius}")
    print()

    log = open(log_path, "w") if log_path else None
    try:
        world = World(config, stream=log)
        world.infect(config.patient_zero)
        collector = MetricsCollector(config)
        collector.collect(world)

        print(f"{'Tick':>5} {'Infected':>9} {'New':>5} {'Frac':>6} {'MeanDisp':>9} {'AtLimit':>8}")
        print("-" * 48)
        for _ in range(config.ticks_to_run):
            world.advance_tick()
            m = collector.collect(world)
            print(
                f"{m.tick:5d} {m.infected_count:9d} {m.newly_infected:5d} "
                f"{m.infected_fraction:6.3f} {m.mean_displacement:9.3f} "
                f"{m.at_travel_limit:8d}"
            )
    finally:
        if log is not None:
            log.close()

    final = collector.metrics_history[-1]
    print()
    print(f"=== Final State (Tick {final.tick}) ===")
    print(f"Infected: {final.infected_count}/{final.population_size}")
    print(f"Next seed: {world.next_seed}")
    if log_path:
        print(f"Record log written to {log_path}")


if __name__ == "__main__":
    main(sys.argv[1] if len(sys.argv) > 1 else None)
