"""Depth-first traversal over graph edges, driven by visitor and goal callbacks."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Generic, TypeVar

if TYPE_CHECKING:
    from statewalk_graph.graph import Graph

P = TypeVar("P")  # per-path state
G = TypeVar("G")  # goal evaluation state, shared across paths


@dataclass(frozen=True)
class EdgeVisit(Generic[P]):
    """Result of visiting an edge: the extended path state and whether to follow it."""

    path_traversal_state: P
    is_traversable_edge: bool


@dataclass(frozen=True)
class GoalEvaluation(Generic[G]):
    """Result of evaluating the goal after traversing an edge."""

    is_goal_reached: bool
    goal_eval_state: G


@dataclass(frozen=True)
class SearchSpec(Generic[G]):
    """Goal side of a traversal.

    Attributes:
        initial_goal_eval_state: State threaded through every goal evaluation.
        show_results: Maps the final goal state to the traversal result.
        evaluate_goal: (edge, graph, path_state, goal_state) -> GoalEvaluation.
    """

    initial_goal_eval_state: G
    show_results: Callable[[G], Any]
    evaluate_goal: Callable[[Any, "Graph", Any, G], GoalEvaluation[G]]


@dataclass(frozen=True)
class VisitSpec(Generic[P]):
    """Path side of a traversal.

    Attributes:
        initial_path_traversal_state: Path state for edges leaving the start vertex.
        visit_edge: (edge, graph, path_state, goal_state) -> EdgeVisit.
    """

    initial_path_traversal_state: P
    visit_edge: Callable[[Any, "Graph", P, Any], EdgeVisit[P]]


def depth_first_traverse_graph_edges(
    search: SearchSpec[G],
    visit: VisitSpec[P],
    start_vertex: Any,
    graph: Graph,
) -> Any:
    """Walk every edge path from ``start_vertex`` depth-first.

    Each stack entry owns the path state it was pushed with, so sibling
    branches never see each other's updates. Outgoing edges are explored in
    insertion order. A path stops at an edge that is not traversable or at
    an edge where the goal is reached.
    """
    goal_state = search.initial_goal_eval_state
    stack: list[tuple[Any, P]] = [
        (edge, visit.initial_path_traversal_state)
        for edge in reversed(graph.outgoing_edges(start_vertex))
    ]

    while stack:
        edge, path_state = stack.pop()
        visited = visit.visit_edge(edge, graph, path_state, goal_state)
        if not visited.is_traversable_edge:
            continue

        new_path_state = visited.path_traversal_state
        evaluation = search.evaluate_goal(edge, graph, new_path_state, goal_state)
        goal_state = evaluation.goal_eval_state
        if evaluation.is_goal_reached:
            continue

        target = graph.get_edge_target(edge)
        for next_edge in reversed(graph.outgoing_edges(target)):
            stack.append((next_edge, new_path_state))

    return search.show_results(goal_state)
