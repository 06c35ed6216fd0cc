from .swarm import DiscreteSwarm
from .sweep import LocalSearchRefiner, sweep
from .components import MstOracle, MstResult, Particle, SwarmState

__all__ = [
    "DiscreteSwarm",
    "LocalSearchRefiner",
    "sweep",
    "MstOracle",
    "MstResult",
    "Particle",
    "SwarmState",
]
