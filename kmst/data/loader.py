from pathlib import Path
from typing import List, Tuple, Union
import math

from .graph import WeightedGraph


class GraphFormatError(ValueError):
    """Raised when an edge record cannot be parsed."""


def parse_edges(text: str) -> List[Tuple[str, str, float]]:
    """
    Parse edge records from the "u,v,w;u,v,w;..." text format.

    Format:
    - records separated by ';', fields by ','
    - whitespace (including newlines) is ignored everywhere
    - empty records are skipped, so a trailing ';' is fine
    - u and v are vertex names, w a non-negative number
    """
    content = "".join(text.split())
    edges = []

    for idx, record in enumerate(content.split(";")):
        if not record:
            continue
        parts = record.split(",")
        if len(parts) != 3 or not parts[0] or not parts[1]:
            raise GraphFormatError(f"record {idx} is not 'u,v,w': {record!r}")
        u, v, w_str = parts
        try:
            w = float(w_str)
        except ValueError:
            raise GraphFormatError(f"record {idx} has a non-numeric weight: {record!r}") from None
        if math.isnan(w) or w < 0:
            raise GraphFormatError(f"record {idx} has an invalid weight {w_str!r}; weights must be >= 0.")
        edges.append((u, v, w))

    return edges


def load_graph_string(text: str) -> WeightedGraph:
    """Build a graph from edge-record text; vertex ids follow first-seen order."""
    return WeightedGraph.from_edges(parse_edges(text))


def load_graph(filepath: Union[str, Path]) -> WeightedGraph:
    """Load a graph file in the "u,v,w;..." format."""
    with open(filepath, 'r') as f:
        return load_graph_string(f.read())
