"""Weighted undirected graph backed by a dense numpy matrix.

Contains the n x n weight matrix W and the vertex-name bookkeeping:
- add_edge / from_edges: build the matrix from (name, name, weight) triples
- floyd_warshall: all-pairs shortest paths on the original weights
- complete: synthesize weights for non-adjacent pairs from d(u,v) * diameter * k
- normalizer: sum of the k-1 largest completed weights (reporting only)

W[i][j] = inf means "no edge"; the diagonal is always 0.
"""

from __future__ import annotations

import warnings
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np


INF = float("inf")


class GraphStateError(RuntimeError):
    """Raised when a graph operation is applied in the wrong lifecycle state."""


class WeightedGraph:
    """
    Undirected weighted graph with named vertices.

    Vertex ids are dense integers assigned in first-seen order, so the same
    edge list always yields the same ids.
    """

    def __init__(self, n: int = 0, names: Optional[Iterable[str]] = None):
        self._names: List[str] = []
        self._ids: Dict[str, int] = {}
        if names is not None:
            for name in names:
                self._register(str(name))
        n = max(int(n), len(self._names))
        for i in range(len(self._names), n):
            self._register(str(i))

        self.adj = np.full((n, n), INF, dtype=float)
        np.fill_diagonal(self.adj, 0.0)
        self.m = 0
        self._diameter = 0.0
        self._distances: Optional[np.ndarray] = None
        self._completed = False
        self._normalizer: Dict[int, float] = {}

    # --- construction ---

    @classmethod
    def from_edges(cls, edges: Iterable[Tuple[str, str, float]]) -> "WeightedGraph":
        """Build a graph in one pass: resolve names first, then fill a fixed-size matrix."""
        edges = list(edges)
        order: Dict[str, None] = {}
        for u, v, _ in edges:
            order.setdefault(str(u), None)
            order.setdefault(str(v), None)

        g = cls(names=order.keys())
        for u, v, w in edges:
            g._set_weight(g._ids[str(u)], g._ids[str(v)], float(w))
        return g

    def _register(self, name: str) -> int:
        idx = len(self._names)
        self._names.append(name)
        self._ids[name] = idx
        return idx

    def _grow(self) -> None:
        """Append one row/column of inf (diagonal 0) for a freshly registered vertex."""
        self.adj = np.pad(self.adj, ((0, 1), (0, 1)), constant_values=INF)
        self.adj[-1, -1] = 0.0

    def _vertex(self, name) -> int:
        name = str(name)
        idx = self._ids.get(name)
        if idx is None:
            idx = self._register(name)
            self._grow()
        return idx

    def _set_weight(self, u: int, v: int, w: float) -> None:
        if u == v:
            # self-loops carry no MST weight; keep the diagonal at 0
            self.m += 1
            return
        self.adj[u, v] = w
        self.adj[v, u] = w
        self.m += 1

    def add_edge(self, u, v, w: float) -> None:
        """Add (or overwrite) the undirected edge u-v, creating named vertices on demand."""
        if self._completed:
            raise GraphStateError("cannot add edges to a completed graph.")
        self._set_weight(self._vertex(u), self._vertex(v), float(w))
        self._distances = None
        self._normalizer.clear()

    # --- queries ---

    @property
    def num_vertices(self) -> int:
        return len(self._names)

    @property
    def num_edges(self) -> int:
        return self.m

    @property
    def diameter(self) -> float:
        return self._diameter

    @property
    def distances(self) -> Optional[np.ndarray]:
        return self._distances

    @property
    def completed(self) -> bool:
        return self._completed

    @property
    def adjacency(self) -> np.ndarray:
        return self.adj

    @property
    def vertex_names(self) -> List[str]:
        return list(self._names)

    def weight(self, u: int, v: int) -> float:
        return float(self.adj[u, v])

    def has_edge(self, u: int, v: int) -> bool:
        return bool(np.isfinite(self.adj[u, v]))

    def vertex_id(self, name) -> Optional[int]:
        return self._ids.get(str(name))

    def vertex_name(self, idx: int) -> str:
        return self._names[idx]

    # --- algorithms ---

    def floyd_warshall(self) -> np.ndarray:
        """
        All-pairs shortest paths on the current weights.

        inf is absorbing under numpy addition, so unreachable pairs stay inf.
        Sets the diameter to the largest finite distance (0 if there is none).
        """
        if self._completed:
            raise GraphStateError("shortest paths must be computed on the original (pre-completion) weights.")

        dist = self.adj.copy()
        n = dist.shape[0]
        for k in range(n):
            np.minimum(dist, dist[:, k, None] + dist[None, k, :], out=dist)

        finite = dist[np.isfinite(dist)]
        self._diameter = float(finite.max()) if n > 1 and finite.size else 0.0
        self._distances = dist
        return dist

    def complete(self, k: int) -> None:
        """
        Fill every missing edge with f(u,v) = d(u,v) * diameter * k.

        Existing edges keep their weight. Runs floyd_warshall first if needed.
        Not repeatable: the original inf markers are gone afterwards.
        """
        if self._completed:
            raise GraphStateError("graph is already completed; completing twice corrupts the weights.")
        if self._distances is None:
            self.floyd_warshall()

        dist = self._distances
        missing = ~np.isfinite(self.adj)
        fillable = missing & np.isfinite(dist)
        self.adj[fillable] = dist[fillable] * self._diameter * float(k)

        unreachable = int(np.count_nonzero(missing & ~fillable)) // 2
        if unreachable:
            warnings.warn(
                f"{unreachable} vertex pairs are unreachable; their weights stay infinite.",
                UserWarning,
                stacklevel=2,
            )
        self._completed = True
        self._normalizer.clear()

    def normalizer(self, k: int) -> float:
        """Sum of the k-1 largest finite upper-triangle weights (0 when k <= 1)."""
        if k <= 1:
            return 0.0
        if k in self._normalizer:
            return self._normalizer[k]

        iu = np.triu_indices(self.num_vertices, k=1)
        weights = self.adj[iu]
        weights = weights[np.isfinite(weights)]
        take = min(k - 1, weights.size)
        if take == 0:
            total = 0.0
        else:
            total = float(np.sum(np.partition(weights, weights.size - take)[weights.size - take:]))
        self._normalizer[k] = total
        return total

    def __repr__(self):
        return (f"WeightedGraph(n={self.num_vertices}, m={self.num_edges}, "
                f"diameter={self._diameter}, completed={self._completed})")


def scale(value: float, normalizer: float) -> float:
    """Rescale a reported value; a zero normalizer means "report raw"."""
    if normalizer == 0:
        return float(value)
    return float(value) / float(normalizer)
