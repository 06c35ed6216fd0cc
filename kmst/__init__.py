"""
kmst
====
Low-weight k-cardinality minimum spanning trees via discrete Particle Swarm
Optimization.

Modules:
--------
- config: SwarmParams override layer, presets, problem validation
- data: WeightedGraph (completion, normalizer) and the edge-list loader
- algorithm: MST oracle, discrete swarm, sweep local search
- experiment: multi-seed (optionally parallel) runs with CSV persistence
- visualization: tree rendering and convergence plots
- run: command-line entry point

Example Usage:
--------------
>>> from kmst import load_graph_string, params_from_preset, DiscreteSwarm
>>> g = load_graph_string("a,b,1;b,c,2;c,d,3;d,e,4;e,a,5")
>>> _ = g.floyd_warshall()
>>> g.complete(3)
>>> res = DiscreteSwarm(g, 3, params_from_preset("QUICK_TEST")).run(seed=42)
"""

__version__ = "1.0.0"

from .config import (
    SwarmParams,
    InvalidConfigurationError,
    params_from_preset,
    require_params,
    validate_problem,
)

from .data import (
    WeightedGraph,
    GraphStateError,
    GraphFormatError,
    scale,
    parse_edges,
    load_graph,
    load_graph_string,
)

from .algorithm import (
    DiscreteSwarm,
    LocalSearchRefiner,
    sweep,
    MstOracle,
    MstResult,
)

from .logging import RunLogger
