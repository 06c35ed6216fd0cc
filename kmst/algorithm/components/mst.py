"""Minimum spanning tree oracle: fitness function of the k-MST search.

Computes Prim's MST over the subgraph induced by a vertex subset:
- weight: fast path used inside the swarm loop (dense scan or binary heap)
- tree: full result with a parent array for reporting and rendering

Both fast-path variants add up their chosen edges with math.fsum, so the
total does not depend on the order in which edges joined the tree. Under tied
weights the two variants may still pick different edges (different tree shape,
same total).
"""

from __future__ import annotations

import heapq
import math
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from ..constants import DENSE_PRIM_THRESHOLD


INF = float("inf")


@dataclass
class MstResult:
    """MST over `vertices`; parent/weights are indexed by local position (-1 = root)."""

    vertices: List[int]
    parent: List[int]
    weights: List[float]
    total: float

    def edges(self) -> List[Tuple[int, int, float]]:
        """Tree edges as (parent_id, child_id, weight) in global vertex ids."""
        out = []
        for i, p in enumerate(self.parent):
            if p != -1:
                out.append((self.vertices[p], self.vertices[i], self.weights[i]))
        return out

    def edge_string(self, graph) -> str:
        """Edges in "u,v,w;u,v,w" form using the graph's vertex names."""
        return ";".join(
            f"{graph.vertex_name(u)},{graph.vertex_name(v)},{w:g}" for u, v, w in self.edges()
        )


class MstOracle:
    """
    Prim's algorithm over induced subgraphs of a (normally completed) graph.

    The oracle never mutates the graph, so one instance can be shared by every
    particle of a run.
    """

    def __init__(self, graph, dense_threshold: Optional[int] = None):
        self.graph = graph
        self.dense_threshold = DENSE_PRIM_THRESHOLD if dense_threshold is None else int(dense_threshold)
        self.calls = 0

    def _submatrix(self, subset: Sequence[int]) -> np.ndarray:
        idx = np.asarray(subset, dtype=np.intp)
        return self.graph.adj[np.ix_(idx, idx)]

    def weight(self, subset: Sequence[int]) -> float:
        """Total MST weight of the induced subgraph, rooted at subset[0]."""
        self.calls += 1
        if len(subset) < self.dense_threshold:
            return self.dense_weight(subset)
        return self.heap_weight(subset)

    def dense_weight(self, subset: Sequence[int]) -> float:
        """O(k^2) scan-for-minimum Prim. Stops early if the subgraph is disconnected."""
        k = len(subset)
        if k <= 1:
            return 0.0
        sub = self._submatrix(subset)

        in_tree = np.zeros(k, dtype=bool)
        in_tree[0] = True
        min_edge = sub[0].copy()
        chosen = []
        for _ in range(k - 1):
            cand = np.where(in_tree, INF, min_edge)
            u = int(np.argmin(cand))
            best = cand[u]
            if not math.isfinite(best):
                break
            in_tree[u] = True
            chosen.append(float(best))
            np.minimum(min_edge, sub[u], out=min_edge)
        return math.fsum(chosen)

    def heap_weight(self, subset: Sequence[int]) -> float:
        """Binary-heap Prim with lazy deletion. Stops when the heap runs dry."""
        k = len(subset)
        if k <= 1:
            return 0.0
        sub = self._submatrix(subset)

        in_tree = np.zeros(k, dtype=bool)
        key = np.full(k, INF)
        key[0] = 0.0
        heap = [(0.0, 0)]
        chosen = []
        while heap:
            w, u = heapq.heappop(heap)
            if in_tree[u]:
                continue
            in_tree[u] = True
            if u != 0:
                chosen.append(w)
            row = sub[u]
            relax = np.flatnonzero(~in_tree & (row < key))
            if relax.size:
                key[relax] = row[relax]
                for v, wv in zip(relax.tolist(), row[relax].tolist()):
                    heapq.heappush(heap, (wv, v))
        return math.fsum(chosen)

    def tree(self, subset: Optional[Sequence[int]] = None, start: Optional[str] = None) -> MstResult:
        """
        Full MST with parent pointers.

        With no subset the tree spans every vertex, rooted at vertex 0 or at
        the vertex named `start`. With a subset the root is subset[0].
        Vertices unreachable from the root keep parent -1.
        """
        if subset is None:
            vertices = list(range(self.graph.num_vertices))
            root = 0
            if start is not None:
                root = self.graph.vertex_id(start)
                if root is None:
                    raise KeyError(f"unknown start vertex {start!r}")
        else:
            vertices = [int(v) for v in subset]
            root = 0

        k = len(vertices)
        if k == 0:
            return MstResult(vertices=[], parent=[], weights=[], total=0.0)

        sub = self._submatrix(vertices)
        in_tree = np.zeros(k, dtype=bool)
        in_tree[root] = True
        min_edge = sub[root].copy()
        parent = np.where(np.isfinite(min_edge), root, -1)
        parent[root] = -1
        weights = np.zeros(k, dtype=float)

        for _ in range(k - 1):
            cand = np.where(in_tree, INF, min_edge)
            u = int(np.argmin(cand))
            if not math.isfinite(cand[u]):
                break
            in_tree[u] = True
            weights[u] = cand[u]
            better = ~in_tree & (sub[u] < min_edge)
            min_edge[better] = sub[u][better]
            parent[better] = u

        parent[~in_tree] = -1
        weights[~in_tree] = 0.0
        return MstResult(
            vertices=vertices,
            parent=[int(p) for p in parent],
            weights=[float(w) for w in weights],
            total=math.fsum(weights.tolist()),
        )
