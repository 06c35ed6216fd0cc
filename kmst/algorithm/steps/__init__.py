from .initialize import initialize_phase, random_subset
from .transition import ScratchBuffers, exploration_pool, linear_schedule, transition
from .evaluate import evaluate_move

__all__ = [
    "initialize_phase",
    "random_subset",
    "ScratchBuffers",
    "exploration_pool",
    "linear_schedule",
    "transition",
    "evaluate_move",
]
