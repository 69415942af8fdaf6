"""Search strategies: when to stop a path and which edges to follow."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

if TYPE_CHECKING:
    from statewalk_graph.graph import Graph

# (edge, graph, path_traversal_state, goal_eval_state) -> bool
SearchPredicate = Callable[[Any, "Graph", Any, Any], bool]


@dataclass(frozen=True)
class SearchStrategy:
    is_goal_reached: SearchPredicate
    is_traversable_edge: SearchPredicate


def compute_times_circled_on(edge_path: Iterable[Any], edge: Any) -> int:
    """Number of times ``edge`` already appears in ``edge_path``."""
    return sum(1 for path_edge in edge_path if path_edge == edge)


def all_n_transitions(target_vertex: Any, max_number_of_traversals: int = 1) -> SearchStrategy:
    """Every path ending in ``target_vertex`` that takes each edge at most n times.

    The path state must expose the edges walked so far as ``path``.
    """
    limit = max_number_of_traversals or 1

    def is_traversable_edge(edge: Any, graph: Graph, path_state: Any, goal_state: Any) -> bool:
        return compute_times_circled_on(path_state.path, edge) < limit

    def is_goal_reached(edge: Any, graph: Graph, path_state: Any, goal_state: Any) -> bool:
        return graph.get_edge_target(edge) == target_vertex

    return SearchStrategy(is_goal_reached=is_goal_reached, is_traversable_edge=is_traversable_edge)


def all_transitions(target_vertex: Any) -> SearchStrategy:
    """Every path ending in ``target_vertex`` that takes each edge at most once."""
    return all_n_transitions(target_vertex, max_number_of_traversals=1)
