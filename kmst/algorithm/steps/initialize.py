"""Initialization phase: random k-subsets for every particle.

Each particle draws k distinct vertex ids uniformly without replacement,
is evaluated once, and starts with personal best == current. The swarm
incumbent is the best of these initial positions.
"""

import numpy as np

from ..components.particle import Particle, SwarmState


def random_subset(n: int, k: int, rng: np.random.Generator) -> list:
    """k distinct ids from [0, n), uniformly without replacement."""
    return [int(v) for v in rng.choice(n, size=k, replace=False)]


def initialize_phase(swarm, rng: np.random.Generator) -> SwarmState:
    """Create and evaluate the particle population for one run."""
    state = SwarmState()
    for _ in range(swarm.swarm_size):
        position = random_subset(swarm.n, swarm.k, rng)
        value = swarm.oracle.weight(position)
        particle = Particle(current=position, current_value=value,
                            best=list(position), best_value=value)
        state.particles.append(particle)
        state.offer(position, value)
    return state
