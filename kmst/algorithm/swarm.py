"""Discrete Particle Swarm Optimization (D-PSO) for the k-MST problem.

This module orchestrates the full PSO loop:
- validates the problem and builds one MST oracle for the run
- initializes random k-subsets (initialize phase)
- moves each particle with the three-set transition (transition phase)
- scores moves and updates personal/global bests (evaluate phase)
- anneals alpha_g / alpha_p, tracks stagnation, logs progress

The main entry point is the DiscreteSwarm class.
"""

import time
from typing import Any, Dict, Optional

import numpy as np

from kmst.config import SwarmParams, validate_problem
from kmst.data.graph import scale
from kmst.algorithm import steps
from kmst.algorithm.components.mst import MstOracle
from kmst.algorithm.constants import LOG_EVERY
from kmst.logging import RunLogger


class DiscreteSwarm:
    """Set-based PSO: each particle is a k-subset, fitness is its induced MST weight."""

    def __init__(self, graph, k: int, params: SwarmParams, oracle: Optional[MstOracle] = None):
        validate_problem(graph, k, params)
        self.graph = graph
        self.k = k
        self.n = graph.num_vertices
        self.params = params

        self.swarm_size = params.swarm_size
        self.iters = params.iters
        self.alpha_g_start = params.alpha_g_start
        self.alpha_g_end = params.alpha_g_end
        self.alpha_p_start = params.alpha_p_start
        self.alpha_p_end = params.alpha_p_end
        self.exploration_attempts = params.exploration_attempts
        self.stagnation_limit = params.stagnation_limit
        self.log_every = LOG_EVERY if params.log_every is None else int(params.log_every)

        self.oracle = oracle if oracle is not None else MstOracle(graph, params.dense_threshold)
        self.normalizer = graph.normalizer(k)

        self.state = None
        self.convergence_history = []
        self._scratch = steps.ScratchBuffers()

    def alpha_schedule(self, t: int):
        """(alpha_g, alpha_p) at iteration t: linear from the start to the end endpoints."""
        ag = steps.linear_schedule(self.alpha_g_start, self.alpha_g_end, t, self.iters)
        ap = steps.linear_schedule(self.alpha_p_start, self.alpha_p_end, t, self.iters)
        return ag, ap

    def initialize(self, rng: np.random.Generator):
        self.state = steps.initialize_phase(self, rng)
        self.convergence_history = []
        return self.state

    def step(self, t: int, rng: np.random.Generator):
        """Advance every particle once. Returns (personal improvements, global improved)."""
        if self.state is None:
            raise RuntimeError("call initialize() before step().")
        ag, ap = self.alpha_schedule(t)
        improvements = 0
        improved = False
        for p in self.state.particles:
            position = steps.transition(
                p, self.state.gbest, self.n, rng, ag, ap,
                self.exploration_attempts, self._scratch,
            )
            if position is None:
                continue
            personal, global_ = steps.evaluate_move(self, self.state, p, position)
            improvements += int(personal)
            improved = improved or global_
        self.convergence_history.append(self.state.gbest_value)
        return improvements, improved

    def run(self,
            seed: Optional[int] = None,
            rng: Optional[np.random.Generator] = None,
            logger: Optional[RunLogger] = None,
            logger_metadata: Optional[Dict[str, Any]] = None,
            verbose: bool = False) -> Dict:
        """Run one PSO trial and return the incumbent plus its convergence curve."""
        start_time = time.time()
        if rng is None:
            rng = np.random.default_rng(self.params.seed if seed is None else seed)

        if logger is not None:
            metadata = {
                "n": self.n,
                "k": self.k,
                "seed": seed,
                "swarm_size": self.swarm_size,
                "iters": self.iters,
                "normalizer": self.normalizer,
            }
            if logger_metadata:
                metadata.update(logger_metadata)
            logger.update_metadata(**metadata)

        calls_before = self.oracle.calls
        self.initialize(rng)
        if verbose:
            print(f"[PSO] Swarm initialized with {self.swarm_size} particles.")
            print(f"[PSO] Initial best: weight = {self.state.gbest_value:.6f}")

        since_improvement = 0
        stopped_early = False
        iters_run = 0

        for t in range(self.iters):
            ag, ap = self.alpha_schedule(t)
            improvements, improved = self.step(t, rng)
            iters_run = t + 1

            if verbose and self.log_every > 0 and (t % self.log_every == 0 or improved):
                print(f"[PSO] Iter {t:4d} | a_g={ag:.2f} a_p={ap:.2f} | "
                      f"Best: {self.state.gbest_value:.10g} | Improvements: {improvements}")

            if logger is not None:
                logger.log_iteration(
                    iteration=t + 1,
                    best_value=self.state.gbest_value,
                    best_scaled=scale(self.state.gbest_value, self.normalizer),
                    alpha_g=ag,
                    alpha_p=ap,
                    improvements=improvements,
                    runtime_ms=(time.time() - start_time) * 1000,
                )

            # the stagnation counter restarts on improvement; the budget never does
            since_improvement = 0 if improved else since_improvement + 1
            if self.stagnation_limit is not None and since_improvement >= self.stagnation_limit:
                stopped_early = True
                break

        if verbose:
            print(f"[PSO] Done after {iters_run} iterations. Best: weight = {self.state.gbest_value:.10g}")

        return {
            "best_set": list(self.state.gbest),
            "best_value": float(self.state.gbest_value),
            "best_scaled": scale(self.state.gbest_value, self.normalizer),
            "normalizer": float(self.normalizer),
            "gbest_curve": np.asarray(self.convergence_history, dtype=float),
            "iters_run": int(iters_run),
            "evals_used": int(self.oracle.calls - calls_before),
            "stopped_early": bool(stopped_early),
            "runtime": time.time() - start_time,
        }
