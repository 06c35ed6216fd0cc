"""Rendering of k-MST results.

Draws the tree found by a run either as a layered hierarchy (root on top,
each subtree as wide as its leaf count) or with the vertices on a circle.
Also plots per-seed convergence curves.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

import matplotlib
matplotlib.use('Agg')  # Use non-interactive backend
import matplotlib.pyplot as plt
import numpy as np


EDGE_COLOR = "#2563eb"


def _children(parent: Sequence[int]) -> Tuple[List[List[int]], List[int]]:
    children: List[List[int]] = [[] for _ in parent]
    roots = []
    for i, p in enumerate(parent):
        if p == -1:
            roots.append(i)
        else:
            children[p].append(i)
    return children, roots


def _leaf_counts(children: List[List[int]], roots: List[int]) -> List[int]:
    counts = [1] * len(children)
    order = []
    stack = list(roots)
    while stack:
        node = stack.pop()
        order.append(node)
        stack.extend(children[node])
    for node in reversed(order):
        if children[node]:
            counts[node] = sum(counts[c] for c in children[node])
    return counts


def tree_layout(parent: Sequence[int], level_gap: float = 1.0) -> np.ndarray:
    """(k, 2) positions: children centred under their parent, one row per depth."""
    k = len(parent)
    pos = np.zeros((k, 2), dtype=float)
    if k == 0:
        return pos
    children, roots = _children(parent)
    counts = _leaf_counts(children, roots)

    left = 0.0
    stack: List[Tuple[int, float, int]] = []
    for r in roots:
        stack.append((r, left, 0))
        left += counts[r]

    while stack:
        node, node_left, depth = stack.pop()
        pos[node] = (node_left + counts[node] / 2.0, -depth * level_gap)
        child_left = node_left
        for c in children[node]:
            stack.append((c, child_left, depth + 1))
            child_left += counts[c]
    return pos


def circular_layout(k: int, radius: float = 1.0) -> np.ndarray:
    """(k, 2) positions evenly spaced on a circle."""
    if k <= 1:
        return np.zeros((k, 2), dtype=float)
    angles = 2 * np.pi * np.arange(k) / k
    return np.column_stack([radius * np.cos(angles), radius * np.sin(angles)])


def plot_tree(graph, result, layout: str = "tree", title: Optional[str] = None,
              show_weights: bool = True):
    """Figure of an MstResult with named vertices."""
    if layout == "tree":
        pos = tree_layout(result.parent)
    elif layout == "circular":
        pos = circular_layout(len(result.vertices))
    else:
        raise ValueError(f"Unknown layout: {layout!r} (expected 'tree' or 'circular').")

    k = len(result.vertices)
    side = max(4.0, 0.8 * k + 2)
    fig, ax = plt.subplots(figsize=(side, max(3.0, 0.6 * k + 2) if layout == "tree" else side))
    for i, p in enumerate(result.parent):
        if p == -1:
            continue
        (x0, y0), (x1, y1) = pos[p], pos[i]
        ax.plot([x0, x1], [y0, y1], color=EDGE_COLOR, linewidth=3, zorder=1)
        if show_weights:
            ax.text((x0 + x1) / 2, (y0 + y1) / 2, f"{result.weights[i]:g}",
                    color="dimgray", fontsize=8, ha="center", va="center",
                    bbox=dict(facecolor="white", edgecolor="none", pad=0.5), zorder=2)

    if k:
        ax.scatter(pos[:, 0], pos[:, 1], s=700, facecolor="white", edgecolor="black",
                   linewidth=2, zorder=3)
    for i, v in enumerate(result.vertices):
        ax.text(pos[i, 0], pos[i, 1], graph.vertex_name(v), ha="center", va="center",
                fontsize=10, zorder=4)

    ax.set_title(title or f"k-MST: {k} vertices, weight {result.total:g}")
    ax.set_aspect("equal" if layout == "circular" else "auto")
    ax.margins(0.15)
    ax.set_axis_off()
    return fig


def save_tree(graph, result, path, layout: str = "tree", title: Optional[str] = None) -> Path:
    """Write the tree figure to `path` (format from the extension, e.g. .svg)."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    fig = plot_tree(graph, result, layout=layout, title=title)
    fig.savefig(path, bbox_inches='tight')
    plt.close(fig)
    return path


def plot_convergence(curves: Dict[int, np.ndarray], outpath: str, normalizer: float = 0.0):
    """Global-best curve per seed; values divided by the normalizer when it is non-zero."""
    plt.figure()
    for seed, curve in sorted(curves.items()):
        curve = np.asarray(curve, dtype=float)
        if normalizer:
            curve = curve / normalizer
        plt.plot(np.arange(1, curve.size + 1), curve, linewidth=1, label=f"seed {seed}")
    plt.xlabel("Iteration")
    plt.ylabel("Global best MST weight" + (" (normalized)" if normalizer else ""))
    plt.title("D-PSO convergence")
    if len(curves) <= 10:
        plt.legend(fontsize=8)
    os.makedirs(os.path.dirname(outpath) or ".", exist_ok=True)
    plt.savefig(outpath, bbox_inches="tight")
    plt.close()
