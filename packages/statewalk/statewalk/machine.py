"""Hierarchical machine execution with full transition tracing."""
from __future__ import annotations

import logging
from typing import Any, Iterable

from statewalk.config import MachineSettings
from statewalk.hierarchy import StateTree, analyze_state_tree, is_compound_state
from statewalk.history import History, StateAncestors, compute_ancestors, init_history, update_history
from statewalk.types import (
    INIT_EVENT,
    INIT_STATE,
    ConfigurationError,
    ControlState,
    EventLabel,
    ExtendedState,
    FSMDef,
    GuardedTransition,
    HistoryTarget,
    InputEvent,
    Target,
    TraceRecord,
    action_identity,
    iter_guards,
)

logger = logging.getLogger(__name__)


class StateMachine:
    """Executes an FSMDef one input at a time.

    Calling the machine with an InputEvent returns the TraceRecords of every
    transition the input fired: the triggered transition first, then the
    automatic init/eventless transitions it cascaded into. An input that no
    transition accepts returns an empty list.
    """

    def __init__(self, fsm_def: FSMDef, settings: MachineSettings | None = None) -> None:
        self._settings = settings if settings is not None else MachineSettings()
        self._tree = StateTree.from_states(fsm_def.states)
        self._analysis = analyze_state_tree(fsm_def.states)
        self._by_origin: dict[ControlState, list[GuardedTransition]] = {}
        for branch in iter_guards(fsm_def.transitions):
            self._by_origin.setdefault(branch.from_state, []).append(branch)

        if fsm_def.states:
            state_list, self._ancestors = compute_ancestors(fsm_def.states)
        else:
            state_list, self._ancestors = [], StateAncestors(shallow={}, deep={})
        self._history = init_history(state_list)
        self._state: ControlState = INIT_STATE
        self._extended_state: ExtendedState = fsm_def.initial_extended_state
        self._start_trace: tuple[TraceRecord, ...] = ()

    @property
    def state(self) -> ControlState:
        return self._state

    @property
    def extended_state(self) -> ExtendedState:
        return self._extended_state

    @property
    def history(self) -> History:
        return self._history

    @property
    def started(self) -> bool:
        return self._state != INIT_STATE

    @property
    def start_trace(self) -> tuple[TraceRecord, ...]:
        """Records fired when the machine left INIT_STATE."""
        return self._start_trace

    def start(self, event_data: Any = None) -> list[TraceRecord]:
        """Fire INIT_EVENT from INIT_STATE. Event data defaults to the initial extended state."""
        if self.started:
            raise ConfigurationError(f"Machine already started, now in {self._state!r}")
        data = self._extended_state if event_data is None else event_data
        records = self._process(INIT_EVENT, data)
        if not records:
            raise ConfigurationError(
                f"No transition leaves {INIT_STATE!r} on {INIT_EVENT!r}; check the machine configuration"
            )
        self._start_trace = tuple(records)
        return records

    def __call__(self, input_event: InputEvent) -> list[TraceRecord]:
        if not self.started:
            if input_event.event != INIT_EVENT:
                raise ConfigurationError(
                    f"Machine in {INIT_STATE!r} cannot receive {input_event.event!r}, only {INIT_EVENT!r}"
                )
            return self.start(input_event.data)
        return self._process(input_event.event, input_event.data)

    # --- Processing ---

    def _process(self, event: EventLabel, data: Any) -> list[TraceRecord]:
        records: list[TraceRecord] = []
        origins = [self._state, *self._tree.ancestors_of(self._state)]
        if not self._fire(event, data, origins, records):
            logger.warning("Input %r not accepted in state %r", event, self._state)
            return records
        self._settle(data, records)
        return records

    def _settle(self, data: Any, records: list[TraceRecord]) -> None:
        """Fire init and eventless transitions until the machine is stable."""
        fired = 0
        while True:
            state = self._state
            if is_compound_state(self._analysis, state):
                if not self._fire(INIT_EVENT, data, [state], records):
                    raise ConfigurationError(
                        f"Compound state {state!r} has no {INIT_EVENT!r} transition"
                    )
            elif not self._fire(None, data, [state, *self._tree.ancestors_of(state)], records):
                return
            fired += 1
            if fired > self._settings.max_automatic_transitions:
                raise ConfigurationError(
                    f"More than {self._settings.max_automatic_transitions} automatic "
                    f"transitions fired from {state!r}"
                )

    def _fire(
        self,
        event: EventLabel | None,
        data: Any,
        origins: Iterable[ControlState],
        records: list[TraceRecord],
    ) -> bool:
        """Take the first branch whose guard passes, nearest origin first."""
        for origin in origins:
            for branch in self._by_origin.get(origin, ()):
                if branch.event != event:
                    continue
                if branch.predicate is not None and not branch.predicate(self._extended_state, data):
                    continue
                records.append(self._take(branch, data))
                return True
        return False

    def _take(self, branch: GuardedTransition, data: Any) -> TraceRecord:
        extended_state = self._extended_state
        action = branch.action if branch.action is not None else action_identity
        result = action(extended_state, data, self._settings)
        new_extended_state = self._settings.update_state(extended_state, result.updates)

        self._exit(self._state)
        target = self._resolve_target(branch)
        logger.debug(
            "%s -%s-> %s (guard %d of transition %d)",
            self._state, branch.event, target, branch.guard_index, branch.transition_index,
        )
        record = TraceRecord(
            event=branch.event,
            event_data=data,
            from_state=self._state,
            to=branch.to,
            target_control_state=target,
            extended_state=extended_state,
            new_extended_state=new_extended_state,
            outputs=result.outputs,
            guard_index=branch.guard_index,
            transition_index=branch.transition_index,
            predicate=branch.predicate,
            action=branch.action,
        )
        self._state = target
        self._extended_state = new_extended_state
        return record

    def _exit(self, state: ControlState) -> None:
        # Outermost ancestors first so the exited state itself is recorded last.
        for ancestor in reversed(self._tree.ancestors_of(state)):
            update_history(self._history, self._ancestors, ancestor)
        update_history(self._history, self._ancestors, state)

    def _resolve_target(self, branch: GuardedTransition) -> ControlState:
        to: Target | None = branch.to
        if isinstance(to, HistoryTarget):
            if to.state not in self._tree:
                raise ConfigurationError(f"History target refers to unknown state {to.state!r}")
            recorded = self._history.get(to.kind, to.state)
            return recorded or to.state
        if to is None or to not in self._tree:
            raise ConfigurationError(
                f"Transition from {branch.from_state!r} on {branch.event!r} targets unknown state {to!r}"
            )
        return to


def create_state_machine(fsm_def: FSMDef, settings: MachineSettings | None = None) -> StateMachine:
    """Build a machine and start it, firing the initial INIT_EVENT."""
    machine = StateMachine(fsm_def, settings)
    machine.start()
    return machine
