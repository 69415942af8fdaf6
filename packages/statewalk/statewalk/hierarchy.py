"""Control-state tree analysis: children, leaf descendants, compound/atomic."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Mapping

from statewalk.types import DEEP, SHALLOW, ControlState, HistoryTarget, InvalidInputError, States

ROOT = -1


@dataclass
class StateTree:
    """Arena of control states in pre-order.

    ``parents[i]`` is the index of the parent of ``names[i]`` (ROOT for
    top-level states), ``children[i]`` the indices of its direct children.
    """

    names: list[ControlState] = field(default_factory=list)
    parents: list[int] = field(default_factory=list)
    children: list[list[int]] = field(default_factory=list)
    index: dict[ControlState, int] = field(default_factory=dict)

    @classmethod
    def from_states(cls, states: States) -> StateTree:
        """Build the arena with an explicit worklist pre-order walk."""
        tree = cls()
        stack: list[tuple[ControlState, Any, int]] = [
            (name, sub, ROOT) for name, sub in reversed(list(states.items()))
        ]
        while stack:
            name, sub, parent = stack.pop()
            if name in tree.index:
                raise InvalidInputError(f"Duplicate control state name {name!r}")
            idx = len(tree.names)
            tree.names.append(name)
            tree.parents.append(parent)
            tree.children.append([])
            tree.index[name] = idx
            if parent != ROOT:
                tree.children[parent].append(idx)
            if isinstance(sub, Mapping):
                for child_name, child_sub in reversed(list(sub.items())):
                    stack.append((child_name, child_sub, idx))
        return tree

    def __len__(self) -> int:
        return len(self.names)

    def __contains__(self, state: object) -> bool:
        return state in self.index

    def is_leaf(self, idx: int) -> bool:
        return not self.children[idx]

    def parent_of(self, state: ControlState) -> ControlState | None:
        """Direct parent, or None for top-level states and unknown names."""
        idx = self.index.get(state)
        if idx is None or self.parents[idx] == ROOT:
            return None
        return self.names[self.parents[idx]]

    def ancestors_of(self, state: ControlState) -> list[ControlState]:
        """Ancestors nearest first, excluding the synthetic root."""
        result: list[ControlState] = []
        idx = self.index.get(state)
        if idx is None:
            return result
        current = self.parents[idx]
        while current != ROOT:
            result.append(self.names[current])
            current = self.parents[current]
        return result


@dataclass(frozen=True)
class StateTreeAnalysis:
    adjacency: dict[ControlState, list[ControlState]]
    leaf_descendants: dict[ControlState, list[ControlState]]


def analyze_state_tree(states: States) -> StateTreeAnalysis:
    """Map every control state to its direct children and its atomic descendants.

    Atomic states map to empty lists in both. An empty tree gives empty maps.
    """
    tree = StateTree.from_states(states)
    adjacency = {
        name: [tree.names[c] for c in tree.children[idx]]
        for idx, name in enumerate(tree.names)
    }
    leaf_descendants: dict[ControlState, list[ControlState]] = {name: [] for name in tree.names}
    # Pre-order: each leaf is appended to all its ancestors in document order.
    for idx, name in enumerate(tree.names):
        if not tree.is_leaf(idx):
            continue
        for ancestor in tree.ancestors_of(name):
            leaf_descendants[ancestor].append(name)
    return StateTreeAnalysis(adjacency=adjacency, leaf_descendants=leaf_descendants)


def get_state_list(states: States) -> list[ControlState]:
    """Every control state in pre-order."""
    return list(StateTree.from_states(states).names)


def is_compound_state(analysis: StateTreeAnalysis, state: Any) -> bool:
    if not isinstance(state, str):
        return False
    return bool(analysis.adjacency.get(state))


def is_atomic_state(analysis: StateTreeAnalysis, state: Any) -> bool:
    return not is_compound_state(analysis, state)


def make_history_states(states: States) -> Callable[[str, ControlState], HistoryTarget]:
    """Return ``hs(kind, state)`` building HistoryTargets for known states."""
    tree = StateTree.from_states(states)

    def hs(kind: str, state: ControlState) -> HistoryTarget:
        if kind not in (SHALLOW, DEEP):
            raise InvalidInputError(f"Unknown history kind {kind!r}")
        if state not in tree:
            raise InvalidInputError(f"Unknown history parent state {state!r}")
        return HistoryTarget(kind=kind, state=state)

    return hs
