"""Graph edge variants produced by lowering a hierarchical transition table."""
from __future__ import annotations

from dataclasses import dataclass

from statewalk.types import Action, ControlState, EventLabel, HistoryTarget, Predicate


@dataclass(frozen=True)
class PlainEdge:
    """A configured transition branch, kept as-is."""

    from_state: ControlState
    event: EventLabel | None
    to: ControlState
    action: Action | None
    predicate: Predicate | None
    guard_index: int
    transition_index: int


@dataclass(frozen=True)
class CompoundEdge:
    """A transition configured on ``compound``, re-rooted on one of its leaves."""

    from_state: ControlState
    event: EventLabel | None
    to: ControlState
    action: Action | None
    predicate: Predicate | None
    guard_index: int
    transition_index: int
    compound: ControlState


@dataclass(frozen=True)
class HistoryEdge:
    """One member of the trace set of a history target."""

    from_state: ControlState
    event: EventLabel | None
    to: ControlState
    action: Action | None
    predicate: Predicate | None
    guard_index: int
    transition_index: int
    history: HistoryTarget


@dataclass(frozen=True)
class CompoundHistoryEdge:
    """A history transition configured on ``compound``, re-rooted on one of its leaves."""

    from_state: ControlState
    event: EventLabel | None
    to: ControlState
    action: Action | None
    predicate: Predicate | None
    guard_index: int
    transition_index: int
    compound: ControlState
    history: HistoryTarget


Edge = PlainEdge | CompoundEdge | HistoryEdge | CompoundHistoryEdge


def configured_origin(edge: Edge) -> ControlState:
    """Origin as written in the machine definition."""
    if isinstance(edge, (CompoundEdge, CompoundHistoryEdge)):
        return edge.compound
    return edge.from_state


def history_of(edge: Edge) -> HistoryTarget | None:
    if isinstance(edge, (HistoryEdge, CompoundHistoryEdge)):
        return edge.history
    return None
