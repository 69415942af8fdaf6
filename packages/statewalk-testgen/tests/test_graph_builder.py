"""Tests for lowering machine definitions into graphs."""
import logging

import pytest

from statewalk import (
    DEEP,
    INIT_EVENT,
    INIT_STATE,
    SHALLOW,
    FSMDef,
    Guard,
    HistoryTarget,
    InvalidInputError,
    Transition,
    make_history_states,
)
from statewalk_testgen import (
    CompoundEdge,
    CompoundHistoryEdge,
    HistoryEdge,
    PlainEdge,
    configured_origin,
    convert_fsm_to_graph,
)

NESTED = {
    "OUTER": {
        "INNER": {"inner_s": "", "inner_t": ""},
        "outer_a": "",
        "outer_b": "",
    },
    "z": "",
}
hs = make_history_states(NESTED)


def nested_def(*transitions):
    return FSMDef(
        states=NESTED,
        transitions=[
            Transition(INIT_STATE, INIT_EVENT, "OUTER"),
            Transition("OUTER", INIT_EVENT, "outer_a"),
            Transition("INNER", INIT_EVENT, "inner_s"),
            *transitions,
        ],
    )


def edges_of(graph, transition_index):
    return [edge for edge in graph.edges if edge.transition_index == transition_index]


class TestConvertFsmToGraph:
    """Test cases for convert_fsm_to_graph."""

    def test_single_state_machine(self):
        """One init transition gives one edge nok -> A."""
        # Arrange
        fsm_def = FSMDef(states={"A": ""}, transitions=[Transition(INIT_STATE, INIT_EVENT, "A")])

        # Act
        graph = convert_fsm_to_graph(fsm_def)

        # Assert
        assert len(graph.edges) == 1
        edge = graph.edges[0]
        assert isinstance(edge, PlainEdge)
        assert (edge.from_state, edge.event, edge.to) == (INIT_STATE, INIT_EVENT, "A")
        assert set(graph.vertices) == {"A", INIT_STATE}

    def test_guard_fan_out(self):
        """Each guard becomes its own edge with its own guard index."""
        # Arrange
        fsm_def = FSMDef(
            states={"A": "", "B": ""},
            transitions=[
                Transition(INIT_STATE, INIT_EVENT, "A"),
                Transition("A", "ev", guards=(
                    Guard(to="B", predicate=lambda s, e: False),
                    Guard(to="B", predicate=lambda s, e: True),
                )),
            ],
        )

        # Act
        graph = convert_fsm_to_graph(fsm_def)

        # Assert
        fanned = edges_of(graph, 1)
        assert len(fanned) == 2
        assert {(e.from_state, e.event, e.transition_index) for e in fanned} == {("A", "ev", 1)}
        assert [e.guard_index for e in fanned] == [0, 1]

    def test_compound_origin_expands_to_leaves(self):
        """A non-init transition from a compound state starts at each of its leaves."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("INNER", "ev", "outer_b")))

        # Assert
        expanded = edges_of(graph, 3)
        assert [e.from_state for e in expanded] == ["inner_s", "inner_t"]
        assert all(isinstance(e, CompoundEdge) for e in expanded)
        assert all(e.compound == "INNER" for e in expanded)
        assert all(configured_origin(e) == "INNER" for e in expanded)

    def test_compound_to_compound_expands(self):
        """Leaving OUTER for INNER starts at every leaf of OUTER, nested ones included."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("OUTER", "ev", "INNER")))

        # Assert
        expanded = edges_of(graph, 3)
        assert [e.from_state for e in expanded] == ["inner_s", "inner_t", "outer_a", "outer_b"]
        assert {e.to for e in expanded} == {"INNER"}

    def test_init_from_compound_kept(self):
        """Init transitions of compound states are kept as configured."""
        # Act
        graph = convert_fsm_to_graph(nested_def())

        # Assert
        init_edges = edges_of(graph, 1)
        assert init_edges == [PlainEdge("OUTER", INIT_EVENT, "outer_a", None, None, 0, 1)]

    def test_atomic_to_compound_kept(self):
        """An atomic origin targeting a compound state stays a single plain edge."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("z", "ev", "INNER")))

        # Assert
        edges = edges_of(graph, 3)
        assert len(edges) == 1
        assert isinstance(edges[0], PlainEdge)
        assert (edges[0].from_state, edges[0].to) == ("z", "INNER")

    @pytest.mark.parametrize("kind, expected", [
        (SHALLOW, ["INNER", "outer_a", "outer_b"]),
        (DEEP, ["inner_s", "inner_t", "outer_a", "outer_b"]),
    ])
    def test_history_trace_set(self, kind, expected):
        """Shallow history fans out to direct children, deep history to leaves."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("z", "ev", hs(kind, "OUTER"))))

        # Assert
        history_edges = edges_of(graph, 3)
        assert [e.to for e in history_edges] == expected
        assert all(isinstance(e, HistoryEdge) for e in history_edges)
        assert all(e.history == HistoryTarget(kind, "OUTER") for e in history_edges)
        assert all(e.from_state == "z" for e in history_edges)

    def test_compound_history_edges(self):
        """A history transition from a compound state covers every (leaf, member) pair."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("INNER", "ev", hs(SHALLOW, "OUTER"))))

        # Assert
        edges = edges_of(graph, 3)
        assert len(edges) == 2 * 3
        assert all(isinstance(e, CompoundHistoryEdge) for e in edges)
        assert [(e.from_state, e.to) for e in edges[:2]] == [("inner_s", "INNER"), ("inner_t", "INNER")]

    def test_compound_init_to_history_keeps_origin(self):
        """An init transition into history keeps the compound state as its origin."""
        # Act
        graph = convert_fsm_to_graph(nested_def(Transition("OUTER", INIT_EVENT, hs(SHALLOW, "INNER"))))

        # Assert
        edges = edges_of(graph, 3)
        assert [(e.from_state, e.to) for e in edges] == [("OUTER", "inner_s"), ("OUTER", "inner_t")]
        assert all(isinstance(e, HistoryEdge) for e in edges)

    def test_unknown_history_parent_raises(self):
        """History of a state missing from the hierarchy is rejected."""
        # Arrange
        fsm_def = nested_def(Transition("z", "ev", HistoryTarget(SHALLOW, "nowhere")))

        # Act / Assert
        with pytest.raises(InvalidInputError):
            convert_fsm_to_graph(fsm_def)

    def test_building_twice_gives_same_graph(self):
        """Lowering the same definition twice yields the same edges and vertices."""
        # Arrange
        fsm_def = nested_def(
            Transition("OUTER", "leave", "z"),
            Transition("z", "back", hs(DEEP, "OUTER")),
        )

        # Act
        first = convert_fsm_to_graph(fsm_def)
        second = convert_fsm_to_graph(fsm_def)

        # Assert
        assert set(first.edges) == set(second.edges)
        assert set(first.vertices) == set(second.vertices)

    def test_lowering_is_logged(self, caplog):
        """Each lowered branch logs how many edges it produced."""
        # Arrange
        fsm_def = nested_def(Transition("INNER", "ev", "z"))

        # Act
        with caplog.at_level(logging.DEBUG, logger="statewalk_testgen.graph_builder"):
            convert_fsm_to_graph(fsm_def)

        # Assert
        assert "2 edge(s)" in caplog.text
