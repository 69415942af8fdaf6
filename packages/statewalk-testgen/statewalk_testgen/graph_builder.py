"""Lower a hierarchical transition table into a flat traversable graph.

Transitions configured on a compound state are re-rooted on each of its
atomic descendants, so every traversed edge starts at a vertex the machine
can actually be in. History targets become one edge per member of their
trace set: the direct children of the history parent (shallow) or its
atomic descendants (deep). Only one member is reachable on any given path;
the others are pruned during traversal.
"""
from __future__ import annotations

import logging

from statewalk.hierarchy import StateTreeAnalysis, analyze_state_tree, get_state_list, is_compound_state
from statewalk.types import (
    INIT_STATE,
    SHALLOW,
    ControlState,
    FSMDef,
    GuardedTransition,
    HistoryTarget,
    InvalidInputError,
    is_init_event,
    iter_guards,
)
from statewalk_graph import Graph, GraphSettings, construct_graph

from statewalk_testgen.edges import CompoundEdge, CompoundHistoryEdge, Edge, HistoryEdge, PlainEdge

logger = logging.getLogger(__name__)

GRAPH_SETTINGS = GraphSettings(
    get_edge_origin=lambda edge: edge.from_state,
    get_edge_target=lambda edge: edge.to,
)


def trace_set(analysis: StateTreeAnalysis, history: HistoryTarget) -> list[ControlState]:
    """Every state the history target could resolve to."""
    table = analysis.adjacency if history.kind == SHALLOW else analysis.leaf_descendants
    if history.state not in table:
        raise InvalidInputError(f"History target refers to unknown state {history.state!r}")
    return list(table[history.state])


def _plain(branch: GuardedTransition, from_state: ControlState, to: ControlState) -> PlainEdge:
    return PlainEdge(
        from_state=from_state,
        event=branch.event,
        to=to,
        action=branch.action,
        predicate=branch.predicate,
        guard_index=branch.guard_index,
        transition_index=branch.transition_index,
    )


def _history_edges(
    branch: GuardedTransition, from_state: ControlState, members: list[ControlState],
) -> list[Edge]:
    return [
        HistoryEdge(
            from_state=from_state,
            event=branch.event,
            to=member,
            action=branch.action,
            predicate=branch.predicate,
            guard_index=branch.guard_index,
            transition_index=branch.transition_index,
            history=branch.to,
        )
        for member in members
    ]


def lower_transition(analysis: StateTreeAnalysis, branch: GuardedTransition) -> list[Edge]:
    """Edges for one guard branch of one transition."""
    origin = branch.from_state
    to = branch.to
    origin_is_compound = is_compound_state(analysis, origin)

    if isinstance(to, HistoryTarget):
        members = trace_set(analysis, to)
        if not origin_is_compound or is_init_event(branch.event):
            return _history_edges(branch, origin, members)
        return [
            CompoundHistoryEdge(
                from_state=leaf,
                event=branch.event,
                to=member,
                action=branch.action,
                predicate=branch.predicate,
                guard_index=branch.guard_index,
                transition_index=branch.transition_index,
                compound=origin,
                history=to,
            )
            for member in members
            for leaf in analysis.leaf_descendants[origin]
        ]

    if not origin_is_compound or is_init_event(branch.event):
        return [_plain(branch, origin, to)]

    return [
        CompoundEdge(
            from_state=leaf,
            event=branch.event,
            to=to,
            action=branch.action,
            predicate=branch.predicate,
            guard_index=branch.guard_index,
            transition_index=branch.transition_index,
            compound=origin,
        )
        for leaf in analysis.leaf_descendants[origin]
    ]


def build_edges(fsm_def: FSMDef) -> list[Edge]:
    analysis = analyze_state_tree(fsm_def.states)
    edges: list[Edge] = []
    for branch in iter_guards(fsm_def.transitions):
        lowered = lower_transition(analysis, branch)
        logger.debug(
            "transition %d guard %d (%s -%s-> %s): %d edge(s)",
            branch.transition_index, branch.guard_index,
            branch.from_state, branch.event, branch.to, len(lowered),
        )
        edges.extend(lowered)
    return edges


def convert_fsm_to_graph(fsm_def: FSMDef) -> Graph:
    """Flat graph over every control state plus INIT_STATE."""
    vertices = [*get_state_list(fsm_def.states), INIT_STATE]
    return construct_graph(GRAPH_SETTINGS, build_edges(fsm_def), vertices)
