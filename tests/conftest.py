"""
Pytest configuration and shared fixtures for the k-MST swarm tests.
"""

import itertools
import sys
from pathlib import Path

import numpy as np
import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))


CYCLE_EDGES = "a,b,1;b,c,2;c,d,3;d,e,4;e,a,5"


def brute_force_mst(adj, subset):
    """MST weight by enumerating every (k-1)-edge subset that spans `subset`."""
    k = len(subset)
    if k <= 1:
        return 0.0
    pairs = [(subset[i], subset[j]) for i in range(k) for j in range(i + 1, k)
             if np.isfinite(adj[subset[i], subset[j]])]
    best = float("inf")
    for chosen in itertools.combinations(pairs, k - 1):
        root = {v: v for v in subset}

        def find(x):
            while root[x] != x:
                root[x] = root[root[x]]
                x = root[x]
            return x

        ok = True
        for u, v in chosen:
            ru, rv = find(u), find(v)
            if ru == rv:
                ok = False
                break
            root[ru] = rv
        if ok:
            best = min(best, sum(adj[u, v] for u, v in chosen))
    return best


def brute_force_kmst(adj, n, k):
    """(value, subset) of the best k-subset by exhaustive search."""
    best = (float("inf"), None)
    for subset in itertools.combinations(range(n), k):
        value = brute_force_mst(adj, list(subset))
        if value < best[0]:
            best = (value, list(subset))
    return best


def random_complete_graph(rng, n, low=1, high=20):
    from kmst.data.graph import WeightedGraph

    g = WeightedGraph(n)
    for u in range(n):
        for v in range(u + 1, n):
            g.add_edge(str(u), str(v), float(rng.integers(low, high)))
    return g


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests"""
    return np.random.default_rng(42)


@pytest.fixture
def cycle_graph():
    """5-vertex cycle a-b-c-d-e-a with weights 1..5, not completed"""
    from kmst.data.loader import load_graph_string
    return load_graph_string(CYCLE_EDGES)


@pytest.fixture
def completed_cycle_graph(cycle_graph):
    """Cycle graph completed for k=3 (cross edges get d(u,v) * diameter * k)"""
    cycle_graph.floyd_warshall()
    cycle_graph.complete(3)
    return cycle_graph


@pytest.fixture
def sparse_graph():
    """Connected 10-vertex sparse graph from the sample data file"""
    from kmst.data.loader import load_graph
    return load_graph(project_root / "data" / "sample_graph.txt")


@pytest.fixture
def quick_params():
    """Small, fully-specified swarm parameters"""
    from kmst.config import params_from_preset
    return params_from_preset("QUICK_TEST", swarm_size=10, iters=60)
