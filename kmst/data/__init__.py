from .graph import WeightedGraph, GraphStateError, scale
from .loader import GraphFormatError, parse_edges, load_graph, load_graph_string

__all__ = [
    "WeightedGraph",
    "GraphStateError",
    "GraphFormatError",
    "scale",
    "parse_edges",
    "load_graph",
    "load_graph_string",
]
