"""Particle and swarm state for the discrete PSO.

A particle's position is a list of k distinct vertex ids. Values are raw MST
weights (lower is better); the normalizer never enters these comparisons.
"""

from dataclasses import dataclass, field
from typing import List


INF = float("inf")


@dataclass
class Particle:
    current: List[int] = field(default_factory=list)
    current_value: float = INF
    best: List[int] = field(default_factory=list)
    best_value: float = INF

    def move_to(self, position: List[int], value: float) -> bool:
        """Replace the current position; return True if the personal best improved."""
        self.current = position
        self.current_value = value
        if value < self.best_value:
            self.best = list(position)
            self.best_value = value
            return True
        return False


@dataclass
class SwarmState:
    particles: List[Particle] = field(default_factory=list)
    gbest: List[int] = field(default_factory=list)
    gbest_value: float = INF

    def offer(self, position: List[int], value: float) -> bool:
        """Adopt (position, value) as the incumbent if it is strictly better."""
        if value < self.gbest_value:
            self.gbest = list(position)
            self.gbest_value = value
            return True
        return False
