"""
Unit tests for kmst/algorithm/swarm.py and kmst/algorithm/steps

Tests initialization, the three-set transition, the alpha schedule,
monotone convergence, reproducibility and configuration errors.
"""

import numpy as np
import pytest

from kmst.algorithm.swarm import DiscreteSwarm
from kmst.algorithm.components.particle import Particle
from kmst.algorithm import steps
from kmst.config import InvalidConfigurationError, SwarmParams, params_from_preset
from kmst.data.graph import WeightedGraph

from conftest import brute_force_kmst, random_complete_graph


class TestInitialization:
    """Tests for initialize_phase"""

    def test_particles_are_valid_k_subsets(self, completed_cycle_graph, quick_params, rng):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        state = swarm.initialize(rng)

        assert len(state.particles) == quick_params.swarm_size
        for p in state.particles:
            assert len(p.current) == 3
            assert len(set(p.current)) == 3
            assert all(0 <= v < 5 for v in p.current)
            assert p.best == p.current
            assert p.best_value == p.current_value

    def test_gbest_is_best_initial_particle(self, completed_cycle_graph, quick_params, rng):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        state = swarm.initialize(rng)

        assert state.gbest_value == min(p.current_value for p in state.particles)
        assert swarm.oracle.weight(state.gbest) == state.gbest_value

    def test_k_equals_n(self, completed_cycle_graph, quick_params, rng):
        swarm = DiscreteSwarm(completed_cycle_graph, 5, quick_params)
        state = swarm.initialize(rng)
        assert all(sorted(p.current) == [0, 1, 2, 3, 4] for p in state.particles)


class TestTransition:
    """Tests for the three-set transition rule"""

    def test_pick_from_global_best(self, rng):
        p = Particle(current=[0, 1, 2], best=[0, 1, 2])
        # alpha_g = 1: A = {7, 8} is always used
        for _ in range(50):
            new = steps.transition(p, [7, 8, 2], 10, rng, 1.0, 0.0, 8)
            added = set(new) - set(p.current)
            assert len(added) == 1
            assert added <= {7, 8}
            assert len(set(new)) == 3

    def test_pick_from_personal_best(self, rng):
        p = Particle(current=[0, 1, 2], best=[5, 1, 2])
        for _ in range(50):
            new = steps.transition(p, [0, 1, 2], 10, rng, 0.0, 1.0, 8)
            assert set(new) - set(p.current) == {5}

    def test_exploration_avoids_current_and_bests(self, rng):
        p = Particle(current=[0, 1, 2], best=[3, 1, 2])
        for _ in range(100):
            new = steps.transition(p, [4, 1, 2], 12, rng, 0.0, 0.0, 32)
            if new is None:
                continue
            added = set(new) - set(p.current)
            assert len(added) == 1
            assert added.isdisjoint({0, 1, 2, 3, 4})
            assert len(set(new)) == 3

    def test_fallback_when_pool_is_empty(self, rng):
        # every vertex is in S | G | P, so C is always empty
        p = Particle(current=[0, 1], best=[2, 1])
        new = steps.transition(p, [0, 1], 3, rng, 0.0, 0.0, 8)
        assert set(new) - {0, 1} == {2}

    def test_no_move_when_everything_is_used(self, rng):
        p = Particle(current=[0, 1, 2], best=[0, 1, 2])
        assert steps.transition(p, [2, 1, 0], 3, rng, 0.3, 0.3, 8) is None

    def test_position_size_is_preserved(self, rng):
        p = Particle(current=[0, 5, 9, 3], best=[1, 5, 9, 3])
        for _ in range(100):
            new = steps.transition(p, [2, 4, 9, 3], 20, rng, 0.3, 0.3, 16)
            assert len(new) == 4
            assert len(set(new)) == 4

    def test_exploration_pool_is_bounded(self, rng):
        pool = steps.exploration_pool(1000, {0, 1, 2}, rng, 5, [])
        assert len(pool) <= 5
        assert len(set(pool)) == len(pool)
        assert not {0, 1, 2} & set(pool)


class TestSchedule:
    """Tests for the linear alpha schedule"""

    def test_endpoints(self, completed_cycle_graph, quick_params):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        assert swarm.alpha_schedule(0) == pytest.approx((0.2, 0.4))
        ag, ap = swarm.alpha_schedule(quick_params.iters)
        assert ag == pytest.approx(0.6)
        assert ap == pytest.approx(0.3)

    def test_sum_stays_below_one(self, completed_cycle_graph, quick_params):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        for t in range(quick_params.iters):
            ag, ap = swarm.alpha_schedule(t)
            assert ag + ap < 1.0

    def test_zero_iters(self):
        assert steps.linear_schedule(0.2, 0.6, 0, 0) == 0.2


class TestRun:
    """Tests for the full run loop"""

    def test_gbest_curve_non_increasing(self, rng):
        g = random_complete_graph(rng, 20)
        params = params_from_preset("QUICK_TEST", swarm_size=12, iters=120)
        res = DiscreteSwarm(g, 6, params).run(seed=7)

        curve = res["gbest_curve"]
        assert curve.size == 120
        assert np.all(np.diff(curve) <= 0)
        assert res["best_value"] == curve[-1]

    def test_reproducible_with_seed(self, rng):
        g = random_complete_graph(rng, 25)
        params = params_from_preset("QUICK_TEST", swarm_size=10, iters=80)

        r1 = DiscreteSwarm(g, 7, params).run(seed=123)
        r2 = DiscreteSwarm(g, 7, params).run(seed=123)

        assert r1["best_set"] == r2["best_set"]
        assert r1["best_value"] == r2["best_value"]
        assert np.array_equal(r1["gbest_curve"], r2["gbest_curve"])

    def test_best_value_matches_best_set(self, completed_cycle_graph, quick_params):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        res = swarm.run(seed=1)
        assert swarm.oracle.weight(res["best_set"]) == res["best_value"]
        assert len(set(res["best_set"])) == 3

    def test_cycle_converges_to_brute_force_optimum(self, completed_cycle_graph):
        params = params_from_preset("QUICK_TEST", swarm_size=10, iters=500)
        res = DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=42)

        value, _ = brute_force_kmst(completed_cycle_graph.adjacency, 5, 3)
        assert value == 3.0  # a-b-c
        assert res["best_value"] == value
        assert sorted(completed_cycle_graph.vertex_name(v) for v in res["best_set"]) == ["a", "b", "c"]

    def test_normalizer_only_rescales_report(self, completed_cycle_graph):
        params = params_from_preset("QUICK_TEST", iters=100)
        res = DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=3)
        assert res["normalizer"] == completed_cycle_graph.normalizer(3)
        assert res["best_scaled"] == pytest.approx(res["best_value"] / res["normalizer"])

    def test_stagnation_stops_early(self, completed_cycle_graph):
        params = params_from_preset("QUICK_TEST", iters=1000, stagnation_limit=15)
        res = DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=5)

        assert res["stopped_early"]
        assert res["iters_run"] < 1000
        assert res["gbest_curve"].size == res["iters_run"]

    def test_zero_iterations_returns_initial_best(self, completed_cycle_graph):
        params = params_from_preset("QUICK_TEST", iters=0)
        res = DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=5)
        assert res["iters_run"] == 0
        assert np.isfinite(res["best_value"])
        assert res["evals_used"] == params.swarm_size

    def test_logger_receives_one_row_per_iteration(self, completed_cycle_graph, tmp_path):
        from kmst.logging import RunLogger

        logger = RunLogger(base_dir=tmp_path, filename="log.csv")
        params = params_from_preset("QUICK_TEST", iters=25)
        DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=2, logger=logger)
        assert len(logger) == 25

    def test_verbose_prints_progress(self, completed_cycle_graph, capsys):
        params = params_from_preset("QUICK_TEST", iters=5)
        DiscreteSwarm(completed_cycle_graph, 3, params).run(seed=2, verbose=True)
        out = capsys.readouterr().out
        assert "[PSO] Swarm initialized" in out
        assert "[PSO] Done" in out

    def test_step_requires_initialize(self, completed_cycle_graph, quick_params, rng):
        swarm = DiscreteSwarm(completed_cycle_graph, 3, quick_params)
        with pytest.raises(RuntimeError):
            swarm.step(0, rng)


class TestConfiguration:
    """Tests for invalid configurations"""

    @pytest.mark.parametrize("k", [0, -1, 6])
    def test_bad_k(self, completed_cycle_graph, quick_params, k):
        with pytest.raises(InvalidConfigurationError):
            DiscreteSwarm(completed_cycle_graph, k, quick_params)

    def test_bool_k_rejected(self, completed_cycle_graph, quick_params):
        with pytest.raises(InvalidConfigurationError):
            DiscreteSwarm(completed_cycle_graph, True, quick_params)

    def test_numpy_integer_k_accepted(self, completed_cycle_graph, quick_params):
        swarm = DiscreteSwarm(completed_cycle_graph, np.int64(3), quick_params)
        res = swarm.run(seed=1)
        assert len(res["best_set"]) == 3

    def test_bad_swarm_size(self, completed_cycle_graph):
        with pytest.raises(InvalidConfigurationError):
            DiscreteSwarm(completed_cycle_graph, 3, params_from_preset("FAST", swarm_size=0))

    def test_empty_graph(self, quick_params):
        with pytest.raises(InvalidConfigurationError):
            DiscreteSwarm(WeightedGraph(), 1, quick_params)

    def test_alpha_sum_must_leave_exploration(self, completed_cycle_graph):
        params = params_from_preset("FAST", alpha_g_end=0.7, alpha_p_end=0.3)
        with pytest.raises(InvalidConfigurationError):
            DiscreteSwarm(completed_cycle_graph, 3, params)

    def test_missing_fields(self, completed_cycle_graph):
        with pytest.raises(InvalidConfigurationError, match="swarm_size"):
            DiscreteSwarm(completed_cycle_graph, 3, SwarmParams(iters=10))

    def test_unknown_preset(self):
        with pytest.raises(InvalidConfigurationError):
            params_from_preset("NOPE")

    def test_preset_overrides_ignore_none(self):
        p = params_from_preset("FAST", iters=None, swarm_size=7)
        assert p.iters == 300
        assert p.swarm_size == 7

    def test_configuration_error_is_value_error(self):
        assert issubclass(InvalidConfigurationError, ValueError)
