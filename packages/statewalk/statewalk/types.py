"""Shared constants, machine definition types and errors for statewalk."""
from __future__ import annotations

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Callable, Iterator, Mapping, Union

ControlState = str
EventLabel = str
ExtendedState = Any

INIT_STATE: ControlState = "nok"
INIT_EVENT: EventLabel = "init"
NO_OUTPUT = None
NO_STATE_UPDATE: Mapping[str, Any] = MappingProxyType({})
SHALLOW = "shallow"
DEEP = "deep"

# Nested control-state tree; "" marks an atomic state.
States = Mapping[str, Any]


class ConfigurationError(Exception):
    """Raised when a machine definition cannot be executed or traversed."""


class InvalidInputError(ConfigurationError, ValueError):
    """Raised on structurally invalid input (empty state set, duplicate names)."""


@dataclass(frozen=True)
class HistoryTarget:
    """Transition target resolved to the last visited descendant of ``state``.

    ``kind`` is SHALLOW (last direct child) or DEEP (last atomic descendant).
    """

    kind: str
    state: ControlState


Target = Union[ControlState, HistoryTarget]


@dataclass(frozen=True)
class ActionResult:
    outputs: Any = NO_OUTPUT
    updates: Mapping[str, Any] = field(default_factory=dict)


Action = Callable[[ExtendedState, Any, Any], ActionResult]
Predicate = Callable[[ExtendedState, Any], bool]
# (extended_state, generator_state) -> GeneratedInput, see statewalk_testgen.
InputGenerator = Callable[[ExtendedState, Any], Any]


def action_identity(extended_state: ExtendedState, event_data: Any, settings: Any) -> ActionResult:
    """No output, no extended-state update."""
    return ActionResult(outputs=NO_OUTPUT, updates=NO_STATE_UPDATE)


@dataclass(frozen=True)
class Guard:
    """One guarded branch of a transition. ``gen`` is only read by test generation."""

    to: Target
    action: Action | None = None
    predicate: Predicate | None = None
    gen: InputGenerator | None = None


@dataclass(frozen=True)
class Transition:
    """Configured transition. ``guards`` None means one unconditional branch."""

    from_state: ControlState
    event: EventLabel | None = None
    to: Target | None = None
    action: Action | None = None
    guards: tuple[Guard, ...] | None = None
    gen: InputGenerator | None = None

    def branches(self) -> tuple[Guard, ...]:
        if self.guards is None:
            return (Guard(to=self.to, action=self.action, gen=self.gen),)
        return tuple(self.guards)


@dataclass(frozen=True)
class GuardedTransition:
    """A transition flattened to a single guard branch."""

    from_state: ControlState
    event: EventLabel | None
    to: Target
    action: Action | None
    predicate: Predicate | None
    gen: InputGenerator | None
    guard_index: int
    transition_index: int


@dataclass
class FSMDef:
    """Hierarchical machine definition."""

    states: States
    transitions: list[Transition]
    initial_extended_state: ExtendedState = None
    events: list[EventLabel] = field(default_factory=list)


@dataclass(frozen=True)
class InputEvent:
    """A labelled input fed to the machine."""

    event: EventLabel
    data: Any = None


@dataclass(frozen=True)
class TraceRecord:
    """One fired transition, in firing order.

    ``to`` is the configured target, ``target_control_state`` the state the
    transition actually entered (history resolved). ``extended_state`` is the
    state the guard and action saw, ``new_extended_state`` the state after
    the action's updates.
    """

    event: EventLabel | None
    event_data: Any
    from_state: ControlState
    to: Target
    target_control_state: ControlState
    extended_state: ExtendedState
    new_extended_state: ExtendedState
    outputs: Any
    guard_index: int
    transition_index: int
    predicate: Predicate | None = None
    action: Action | None = None


def iter_guards(transitions: list[Transition]) -> Iterator[GuardedTransition]:
    """Yield one GuardedTransition per guard branch, in configuration order."""
    for transition_index, transition in enumerate(transitions):
        for guard_index, guard in enumerate(transition.branches()):
            yield GuardedTransition(
                from_state=transition.from_state,
                event=transition.event,
                to=guard.to,
                action=guard.action,
                predicate=guard.predicate,
                gen=guard.gen,
                guard_index=guard_index,
                transition_index=transition_index,
            )


def is_init_state(state: Any) -> bool:
    return state == INIT_STATE


def is_init_event(event: EventLabel | None) -> bool:
    return event == INIT_EVENT


def is_eventless(event: EventLabel | None) -> bool:
    return event is None


def is_history_target(to: Any) -> bool:
    return isinstance(to, HistoryTarget)
