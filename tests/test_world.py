"""Integration tests for World: population setup, ticks and seed chaining."""

import io
import math

import numpy as np
import pytest

from dsim.core.records import NODE_HEADER, parse_node_record
from dsim.core.world import SEED_LIMIT, World


def _positions(world: World) -> np.ndarray:
    return np.array([n.current_position for n in world.nodes])


class TestCreation:
    def test_node_count(self, make_config):
        world = World(make_config(num_nodes=25))
        assert len(world) == 25
        assert len(world.nodes) == 25

    def test_ids_in_creation_order(self, make_config):
        world = World(make_config())
        assert [n.id for n in world.nodes] == list(range(40))

    def test_initial_node_state(self, make_config):
        world = World(make_config())
        for n in world.nodes:
            np.testing.assert_array_equal(n.current_position, n.start_position)
            assert n.infected is False
            assert n.infected_for == 0
            assert n.infectable is True

    def test_positions_within_bounds(self, make_config):
        config = make_config(min_pos=(10.0, -20.0), max_pos=(30.0, 5.0), num_nodes=200)
        world = World(config)
        pos = _positions(world)
        assert np.all(pos[:, 0] >= 10.0) and np.all(pos[:, 0] <= 30.0)
        assert np.all(pos[:, 1] >= -20.0) and np.all(pos[:, 1] <= 5.0)

    def test_travel_within_bounds(self, make_config):
        world = World(make_config(num_nodes=200))
        travel = np.array([n.max_travel for n in world.nodes])
        assert np.all(travel >= 2.0) and np.all(travel <= 6.0)

    def test_shared_max_speed(self, make_config):
        world = World(make_config(max_speed=2.5))
        assert {n.max_speed for n in world.nodes} == {2.5}

    def test_reinfect_copied_to_nodes(self, make_config):
        world = World(make_config(reinfect=True))
        assert all(n.reinfectable for n in world.nodes)

    def test_no_one_infected_until_driver_says_so(self, make_config):
        world = World(make_config())
        assert world.infected_count == 0
        world.infect(0)
        assert world.infected_count == 1
        assert world.node(0).infected is True

    def test_unknown_node(self, make_config):
        world = World(make_config(num_nodes=3))
        with pytest.raises(KeyError):
            world.node(3)
        with pytest.raises(KeyError):
            world.infect(-1)

    def test_nodes_sequence_is_a_copy(self, make_config):
        world = World(make_config())
        assert isinstance(world.nodes, tuple)

    def test_starts_at_tick_zero(self, make_config):
        assert World(make_config()).tick == 0


class TestMovement:
    def test_displacement_bounded(self, make_config):
        world = World(make_config(num_nodes=100, max_speed=4.0))
        for _ in range(30):
            world.advance_tick()
            for n in world.nodes:
                assert 0.0 <= n.distance_from_home() <= n.max_travel + 1e-9

    def test_homes_never_move(self, make_config):
        world = World(make_config())
        homes = np.array([n.start_position for n in world.nodes])
        world.run(10)
        np.testing.assert_array_equal(
            np.array([n.start_position for n in world.nodes]), homes,
        )

    def test_nodes_move(self, make_config):
        world = World(make_config())
        before = _positions(world)
        world.advance_tick()
        assert not np.allclose(before, _positions(world))

    def test_tick_counter(self, make_config):
        world = World(make_config())
        world.run(7)
        assert world.tick == 7


class TestInfectionScenarios:
    def test_same_spot_infects_in_one_tick(self, make_config, place):
        config = make_config(
            num_nodes=2, min_max_travel=1.0, max_max_travel=1.0, contact_radius=4.0,
        )
        world = World(config)
        place(world, 0, 30.0, 30.0)
        place(world, 1, 30.0, 30.0)
        world.infect(0)
        world.advance_tick()
        assert world.node(1).infected is True

    def test_identical_bounds_put_everyone_together(self, make_config):
        config = make_config(
            num_nodes=2, min_pos=(5.0, 5.0), max_pos=(5.0, 5.0),
            min_max_travel=1.0, max_max_travel=1.0,
        )
        world = World(config)
        world.infect(0)
        world.advance_tick()
        assert world.node(1).infected is True

    def test_far_apart_never_meet(self, make_config, place):
        config = make_config(num_nodes=2, max_max_travel=10.0, max_speed=5.0)
        world = World(config)
        place(world, 0, 0.0, 0.0)
        place(world, 1, 1000.0, 0.0)
        world.infect(0)
        world.run(50)
        assert world.node(1).infected is False
        assert world.node(0).infected is True

    def test_no_patient_zero_no_epidemic(self, make_config):
        world = World(make_config(num_nodes=100, max_pos=(10.0, 10.0)))
        world.run(10)
        assert world.infected_count == 0

    def test_contact_radius_zero_blocks_spread(self, make_config):
        config = make_config(num_nodes=50, max_pos=(5.0, 5.0), contact_radius=0.0)
        world = World(config)
        world.infect(0)
        world.run(10)
        assert world.infected_count == 1

    def test_new_cases_wait_a_tick_to_spread(self, make_config, place):
        # 0 --3-- 1 --3-- 2 on a line, nobody moves
        config = make_config(num_nodes=3, min_max_travel=0.0, max_max_travel=0.0)
        world = World(config)
        place(world, 0, 10.0, 10.0)
        place(world, 1, 13.0, 10.0)
        place(world, 2, 16.0, 10.0)
        world.infect(0)

        world.advance_tick()
        assert [n.infected for n in world.nodes] == [True, True, False]

        world.advance_tick()
        assert [n.infected for n in world.nodes] == [True, True, True]

    def test_spread_rule_after_each_tick(self, make_config):
        config = make_config(num_nodes=80, max_pos=(40.0, 40.0))
        world = World(config)
        world.infect(0)
        radius = config.contact_radius

        for _ in range(10):
            before = [n.infected for n in world.nodes]
            world.advance_tick()
            pos = _positions(world)
            for i, node in enumerate(world.nodes):
                exposed = any(
                    before[j] and j != i
                    and math.dist(pos[i], pos[j]) < radius
                    for j in range(len(pos))
                )
                assert node.infected == (before[i] or exposed), f"node {i}"

    def test_infection_is_monotonic(self, make_config):
        world = World(make_config(num_nodes=80, max_pos=(40.0, 40.0)))
        world.infect(0)
        previous = [n.infected for n in world.nodes]
        for _ in range(20):
            world.advance_tick()
            current = [n.infected for n in world.nodes]
            assert all(c or not p for p, c in zip(previous, current))
            previous = current

    def test_unused_fields_stay_put(self, make_config):
        world = World(make_config(num_nodes=60, max_pos=(30.0, 30.0)))
        world.infect(0)
        world.run(15)
        assert all(n.infected_for == 0 for n in world.nodes)
        assert all(n.infectable for n in world.nodes)
        assert len(world) == 60


class TestSeedChaining:
    def test_next_seed_in_range(self, make_config):
        world = World(make_config())
        for _ in range(5):
            assert 0 <= world.next_seed < SEED_LIMIT
            world.advance_tick()

    def test_next_seed_changes_each_tick(self, make_config):
        world = World(make_config())
        seeds = [world.next_seed]
        for _ in range(5):
            world.advance_tick()
            seeds.append(world.next_seed)
        assert len(set(seeds)) == len(seeds)

    def test_outside_draws_do_not_disturb_run(self, make_config):
        a = World(make_config())
        b = World(make_config())
        a.infect(0)
        b.infect(0)
        for _ in range(5):
            b.rng.random(1000)
            a.advance_tick()
            b.advance_tick()
        np.testing.assert_array_equal(_positions(a), _positions(b))
        assert a.next_seed == b.next_seed

    def test_tick_depends_only_on_chained_seed(self, make_config):
        a = World(make_config(random_seed=1))
        b = World(make_config(random_seed=1))
        a.advance_tick()
        b.advance_tick()
        # Knock b's generator off course; the stored seed still drives the next tick
        b.rng = np.random.default_rng(999)
        a.advance_tick()
        b.advance_tick()
        np.testing.assert_array_equal(_positions(a), _positions(b))

    def test_seed_42_golden_run(self, make_config):
        """Seed 42, five nodes: node 0's path and the seed chain over five ticks."""
        stream = io.StringIO()
        world = World(make_config(num_nodes=5, random_seed=42), stream=stream)

        node = world.node(0)
        np.testing.assert_allclose(node.start_position, [46.4373629133578, 26.33270638512314], rtol=1e-12)
        assert node.max_travel == pytest.approx(5.43439167964553, rel=1e-12)
        assert world.next_seed == 967354525
        assert stream.getvalue().splitlines()[8] == "0,46.4374,26.3327,46.4374,26.3327,1,0,0,5.43439,1.5"

        expected_path = [
            (46.410223441141184, 26.662337088814905),
            (46.406241347158456, 26.676940547542877),
            (45.940975618385366, 25.793718462512079),
            (47.362543482920387, 25.870777926528248),
            (48.166391877184843, 25.778379017892409),
        ]
        expected_seeds = [1339411066, 1591118722, 1328948224, 2005429421, 972714721]

        path, seeds = [], []
        for _ in range(5):
            world.advance_tick()
            path.append(world.node(0).current_position.copy())
            seeds.append(world.next_seed)

        np.testing.assert_allclose(np.array(path), np.array(expected_path), rtol=1e-12)
        assert seeds == expected_seeds
        assert stream.getvalue().splitlines()[-5] == "0,48.1664,25.7784,46.4374,26.3327,1,0,0,5.43439,1.5"


class TestDeterminism:
    def test_same_config_same_log(self, make_config):
        logs = []
        for _ in range(2):
            stream = io.StringIO()
            world = World(make_config(), stream=stream)
            world.infect(0)
            world.run(10)
            logs.append(stream.getvalue())
        assert logs[0] == logs[1]

    def test_different_seed_different_log(self, make_config):
        logs = []
        for seed in (1, 2):
            stream = io.StringIO()
            World(make_config(random_seed=seed), stream=stream).run(2)
            logs.append(stream.getvalue())
        assert logs[0] != logs[1]


class TestRecordStream:
    def test_creation_records(self, make_config):
        stream = io.StringIO()
        World(make_config(num_nodes=4, random_seed=9), stream=stream)
        lines = stream.getvalue().splitlines()
        assert lines[0] == "seed,9"
        assert lines[1] == "Node count,4"
        assert lines[7] == NODE_HEADER
        assert len(lines) == 7 + 1 + 4
        assert [parse_node_record(line)["id"] for line in lines[8:]] == [0, 1, 2, 3]

    def test_tick_records(self, make_config):
        stream = io.StringIO()
        world = World(make_config(num_nodes=4), stream=stream)
        world.infect(2)
        world.advance_tick()
        lines = stream.getvalue().splitlines()
        tick_lines = lines[12:]
        assert tick_lines[0] == NODE_HEADER
        records = [parse_node_record(line) for line in tick_lines[1:]]
        assert [r["id"] for r in records] == [0, 1, 2, 3]
        assert records[2]["infected"] is True
        for r, node in zip(records, world.nodes):
            assert r["current_x"] == pytest.approx(node.current_position[0], rel=1e-5, abs=1e-4)
            assert r["current_y"] == pytest.approx(node.current_position[1], rel=1e-5, abs=1e-4)

    def test_line_count_per_tick(self, make_config):
        stream = io.StringIO()
        world = World(make_config(num_nodes=6), stream=stream)
        world.run(3)
        assert len(stream.getvalue().splitlines()) == 7 + 3 * (1 + 6) + 1 + 6

    def test_no_stream(self, make_config):
        world = World(make_config())
        world.run(2)
        assert world.tick == 2
