"""Evaluation phase: score a moved particle and update the bests.

The new position always replaces `current`. The personal best changes only on
strict improvement, and the swarm incumbent only when that improvement also
beats it, so gbest_value never increases.
"""

from typing import List, Tuple


def evaluate_move(swarm, state, particle, position: List[int]) -> Tuple[bool, bool]:
    """Return (personal_best_improved, global_best_improved)."""
    value = swarm.oracle.weight(position)
    personal = particle.move_to(position, value)
    improved_global = personal and state.offer(position, value)
    return personal, improved_global
