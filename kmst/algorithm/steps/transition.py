"""Transition phase: the discrete three-set move of one particle.

For a particle at S with personal best P and swarm best G:
    A = G \\ S                          (pull towards the global best)
    B = P \\ S                          (pull towards the personal best)
    C = sample of V \\ (S | G | P)      (exploration pool)
With r ~ U[0,1): take from A if r < alpha_g, else from B if r < alpha_g + alpha_p,
else from C, and overwrite a random position of S with the picked vertex.
Picked vertices are never in S, so the new position has no duplicates.
"""

from typing import List, Optional, Sequence, Set

import numpy as np


class ScratchBuffers:
    """Reusable per-run containers for transition candidate lists."""

    def __init__(self):
        self.in_current: Set[int] = set()
        self.excluded: Set[int] = set()
        self.pool: List[int] = []

    def reset(self, current: Sequence[int]) -> None:
        self.in_current.clear()
        self.in_current.update(current)
        self.excluded.clear()
        self.pool.clear()


def linear_schedule(start: float, end: float, t: int, iters: int) -> float:
    """Linear interpolation start -> end with progress t / iters."""
    if iters <= 0:
        return float(start)
    progress = float(t) / float(iters)
    return float(start) + (float(end) - float(start)) * progress


def exploration_pool(n: int, excluded: Set[int], rng: np.random.Generator,
                     attempts: int, pool: List[int]) -> List[int]:
    """Fill `pool` with distinct random vertices outside `excluded` using at most `attempts` draws."""
    for v in rng.integers(0, n, size=attempts).tolist():
        if v not in excluded:
            excluded.add(v)
            pool.append(v)
    return pool


def transition(particle, gbest: Sequence[int], n: int, rng: np.random.Generator,
               alpha_g: float, alpha_p: float, attempts: int,
               scratch: Optional[ScratchBuffers] = None) -> Optional[List[int]]:
    """
    Return the particle's next position, or None when no vertex could be picked.
    """
    current = particle.current
    if not current:
        return None

    scratch = scratch if scratch is not None else ScratchBuffers()
    scratch.reset(current)
    in_current = scratch.in_current

    A = [v for v in gbest if v not in in_current]
    B = [v for v in particle.best if v not in in_current]

    r = rng.random()
    pick = None
    if r < alpha_g and A:
        pick = A[int(rng.integers(len(A)))]
    elif r < alpha_g + alpha_p and B:
        pick = B[int(rng.integers(len(B)))]
    else:
        excluded = scratch.excluded
        excluded.update(in_current)
        excluded.update(gbest)
        excluded.update(particle.best)
        C = exploration_pool(n, excluded, rng, attempts, scratch.pool)
        # fallback order when the pool came back empty: A, then B
        for candidates in (C, A, B):
            if candidates:
                pick = candidates[int(rng.integers(len(candidates)))]
                break

    if pick is None:
        return None

    position = list(current)
    position[int(rng.integers(len(position)))] = int(pick)
    return position
