"""Tests for depth_first_traverse_graph_edges and the search strategies."""
from dataclasses import dataclass

from statewalk_graph import (
    EdgeVisit,
    GoalEvaluation,
    GraphSettings,
    SearchSpec,
    VisitSpec,
    all_n_transitions,
    all_transitions,
    compute_times_circled_on,
    construct_graph,
    depth_first_traverse_graph_edges,
)

SETTINGS = GraphSettings(
    get_edge_origin=lambda edge: edge[0],
    get_edge_target=lambda edge: edge[1],
)


@dataclass(frozen=True)
class PathState:
    path: tuple = ()


def collect_paths(graph, strategy, start):
    """Run a traversal that records every path reaching the strategy's goal."""

    def visit_edge(edge, graph, path_state, goal_state):
        traversable = strategy.is_traversable_edge(edge, graph, path_state, goal_state)
        return EdgeVisit(
            path_traversal_state=PathState(path=path_state.path + (edge,)),
            is_traversable_edge=traversable,
        )

    def evaluate_goal(edge, graph, path_state, goal_state):
        reached = strategy.is_goal_reached(edge, graph, path_state, goal_state)
        if reached:
            goal_state = goal_state + [path_state.path]
        return GoalEvaluation(is_goal_reached=reached, goal_eval_state=goal_state)

    search = SearchSpec(initial_goal_eval_state=[], show_results=list, evaluate_goal=evaluate_goal)
    visit = VisitSpec(initial_path_traversal_state=PathState(), visit_edge=visit_edge)
    return depth_first_traverse_graph_edges(search, visit, start, graph)

class TestDepthFirstTraversal:
    """Test cases for the edge-based depth-first traversal."""

    def test_paths_in_insertion_order(self):
        """Outgoing edges are explored in the order they were added."""
        # Arrange
        edges = [("s", "a", 1), ("s", "b", 2), ("a", "t", 3), ("b", "t", 4)]
        graph = construct_graph(SETTINGS, edges, [])

        # Act
        paths = collect_paths(graph, all_transitions("t"), "s")

        # Assert
        assert paths == [
            (("s", "a", 1), ("a", "t", 3)),
            (("s", "b", 2), ("b", "t", 4)),
        ]

    def test_path_stops_at_goal(self):
        """Edges beyond the goal vertex are not followed."""
        # Arrange
        edges = [("s", "t", 1), ("t", "u", 2), ("u", "t", 3)]
        graph = construct_graph(SETTINGS, edges, [])

        # Act
        paths = collect_paths(graph, all_transitions("t"), "s")

        # Assert
        assert paths == [(("s", "t", 1),)]

    def test_each_branch_owns_its_path_state(self):
        """Sibling branches start from the same path, not from each other's."""
        # Arrange
        edges = [("s", "a", 1), ("a", "t", 2), ("a", "t", 3)]
        graph = construct_graph(SETTINGS, edges, [])

        # Act
        paths = collect_paths(graph, all_transitions("t"), "s")

        # Assert
        assert paths == [
            (("s", "a", 1), ("a", "t", 2)),
            (("s", "a", 1), ("a", "t", 3)),
        ]

    def test_non_traversable_edge_is_skipped(self):
        """A rejected edge is neither evaluated as a goal nor followed."""
        # Arrange
        edges = [("s", "a", 1), ("s", "t", 2), ("a", "t", 3)]
        graph = construct_graph(SETTINGS, edges, [])
        visited = []

        def visit_edge(edge, graph, path_state, goal_state):
            visited.append(edge)
            return EdgeVisit(path_traversal_state=path_state, is_traversable_edge=edge[2] != 1)

        def evaluate_goal(edge, graph, path_state, goal_state):
            return GoalEvaluation(is_goal_reached=graph.get_edge_target(edge) == "t", goal_eval_state=goal_state + 1)

        search = SearchSpec(initial_goal_eval_state=0, show_results=lambda count: count, evaluate_goal=evaluate_goal)
        visit = VisitSpec(initial_path_traversal_state=None, visit_edge=visit_edge)

        # Act
        evaluations = depth_first_traverse_graph_edges(search, visit, "s", graph)

        # Assert
        assert visited == [("s", "a", 1), ("s", "t", 2)]
        assert evaluations == 1

    def test_start_without_outgoing_edges(self):
        """A start vertex with no outgoing edges yields no paths."""
        # Arrange
        graph = construct_graph(SETTINGS, [], ["s"])

        # Act / Assert
        assert collect_paths(graph, all_transitions("t"), "s") == []


class TestStrategies:
    """Test cases for the edge-counting strategies."""

    def test_compute_times_circled_on(self):
        """Occurrences of an edge in a path are counted by equality."""
        # Arrange
        path = [("a", "b", 1), ("b", "a", 2), ("a", "b", 1)]

        # Act / Assert
        assert compute_times_circled_on(path, ("a", "b", 1)) == 2
        assert compute_times_circled_on(path, ("b", "a", 2)) == 1
        assert compute_times_circled_on([], ("b", "a", 2)) == 0

    def test_all_transitions_takes_loops_once(self):
        """A self loop is taken at most once per path."""
        # Arrange
        edges = [("s", "a", 1), ("a", "a", 2), ("a", "t", 3)]
        graph = construct_graph(SETTINGS, edges, [])

        # Act
        paths = collect_paths(graph, all_transitions("t"), "s")

        # Assert
        assert paths == [
            (("s", "a", 1), ("a", "a", 2), ("a", "t", 3)),
            (("s", "a", 1), ("a", "t", 3)),
        ]

    def test_all_n_transitions_takes_loops_n_times(self):
        """With a limit of two, the loop appears zero, one or two times."""
        # Arrange
        edges = [("s", "a", 1), ("a", "a", 2), ("a", "t", 3)]
        graph = construct_graph(SETTINGS, edges, [])

        # Act
        paths = collect_paths(graph, all_n_transitions("t", 2), "s")

        # Assert
        assert [len(path) for path in paths] == [4, 3, 2]
