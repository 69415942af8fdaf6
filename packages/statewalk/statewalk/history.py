"""History tracking: last exited descendant per compound state.

Deep history of a compound state is the last atomic descendant exited under
it; shallow history is the last direct child exited under it. History only
changes when a state is exited, and exiting INIT_STATE never changes it.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable

from statewalk.hierarchy import StateTree
from statewalk.types import DEEP, INIT_STATE, SHALLOW, ControlState, InvalidInputError, States

HISTORY_KINDS = (SHALLOW, DEEP)


@dataclass(frozen=True)
class StateAncestors:
    """Per-state ancestor lists. Top-level states have no entry."""

    shallow: dict[ControlState, list[ControlState]]
    deep: dict[ControlState, list[ControlState]]

    def of(self, kind: str, state: ControlState) -> list[ControlState]:
        table = self.deep if kind == DEEP else self.shallow
        return table.get(state, [])


@dataclass
class History:
    """Mutable history record, ``""`` meaning no history yet."""

    deep: dict[ControlState, ControlState] = field(default_factory=dict)
    shallow: dict[ControlState, ControlState] = field(default_factory=dict)

    def get(self, kind: str, state: ControlState) -> ControlState:
        table = self.deep if kind == DEEP else self.shallow
        return table.get(state, "")


def compute_ancestors(states: States) -> tuple[list[ControlState], StateAncestors]:
    """Return the pre-order state list and the shallow/deep ancestor maps.

    Raises InvalidInputError for an empty control-state set.
    """
    if not states:
        raise InvalidInputError("compute_ancestors: empty control states")

    tree = StateTree.from_states(states)
    shallow: dict[ControlState, list[ControlState]] = {}
    deep: dict[ControlState, list[ControlState]] = {}
    for name in tree.names:
        ancestors = tree.ancestors_of(name)
        if not ancestors:
            continue
        shallow[name] = [ancestors[0]]
        deep[name] = ancestors
    return list(tree.names), StateAncestors(shallow=shallow, deep=deep)


def init_history(state_list: Iterable[ControlState]) -> History:
    """Fresh history with no recorded states. The two maps are distinct objects."""
    states = list(state_list)
    return History(
        deep={state: "" for state in states},
        shallow={state: "" for state in states},
    )


def update_history(
    history: History, state_ancestors: StateAncestors, exited_state: ControlState,
) -> History:
    """Record ``exited_state`` under each of its ancestors. Mutates and returns ``history``."""
    if exited_state == INIT_STATE:
        return history

    for ancestor in state_ancestors.shallow.get(exited_state, []):
        history.shallow[ancestor] = exited_state
    for ancestor in state_ancestors.deep.get(exited_state, []):
        history.deep[ancestor] = exited_state
    return history


def resolve_history(
    states: States,
    control_state_sequence: Iterable[ControlState],
    kind: str,
    parent: ControlState,
) -> ControlState:
    """History of ``parent`` after exiting every state of the sequence in order.

    Recomputed from scratch on every call.
    """
    state_list, state_ancestors = compute_ancestors(states)
    history = init_history(state_list)
    for state in control_state_sequence:
        update_history(history, state_ancestors, state)
    return history.get(kind, parent)
