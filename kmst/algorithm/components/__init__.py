from .mst import MstOracle, MstResult
from .particle import Particle, SwarmState

__all__ = ["MstOracle", "MstResult", "Particle", "SwarmState"]
