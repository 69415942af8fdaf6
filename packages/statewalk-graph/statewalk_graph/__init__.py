"""statewalk-graph - Directed graphs and depth-first edge traversal."""
from __future__ import annotations

from statewalk_graph.graph import Graph, GraphSettings, construct_graph
from statewalk_graph.strategies import (
    SearchPredicate,
    SearchStrategy,
    all_n_transitions,
    all_transitions,
    compute_times_circled_on,
)
from statewalk_graph.traversal import (
    EdgeVisit,
    GoalEvaluation,
    SearchSpec,
    VisitSpec,
    depth_first_traverse_graph_edges,
)

__all__ = [
    "EdgeVisit",
    "GoalEvaluation",
    "Graph",
    "GraphSettings",
    "SearchPredicate",
    "SearchSpec",
    "SearchStrategy",
    "VisitSpec",
    "all_n_transitions",
    "all_transitions",
    "compute_times_circled_on",
    "construct_graph",
    "depth_first_traverse_graph_edges",
]
