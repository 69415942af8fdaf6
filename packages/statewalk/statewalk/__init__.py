"""statewalk - Hierarchical state machine definitions, analysis and execution."""
from __future__ import annotations

from statewalk.config import MachineSettings, merge_updates
from statewalk.hierarchy import (
    StateTree,
    StateTreeAnalysis,
    analyze_state_tree,
    get_state_list,
    is_atomic_state,
    is_compound_state,
    make_history_states,
)
from statewalk.history import (
    History,
    StateAncestors,
    compute_ancestors,
    init_history,
    resolve_history,
    update_history,
)
from statewalk.machine import StateMachine, create_state_machine
from statewalk.types import (
    DEEP,
    INIT_EVENT,
    INIT_STATE,
    NO_OUTPUT,
    NO_STATE_UPDATE,
    SHALLOW,
    ActionResult,
    ConfigurationError,
    FSMDef,
    Guard,
    GuardedTransition,
    HistoryTarget,
    InputEvent,
    InvalidInputError,
    TraceRecord,
    Transition,
    action_identity,
    iter_guards,
)

__all__ = [
    "DEEP",
    "INIT_EVENT",
    "INIT_STATE",
    "NO_OUTPUT",
    "NO_STATE_UPDATE",
    "SHALLOW",
    "ActionResult",
    "ConfigurationError",
    "FSMDef",
    "Guard",
    "GuardedTransition",
    "History",
    "HistoryTarget",
    "InputEvent",
    "InvalidInputError",
    "MachineSettings",
    "StateAncestors",
    "StateMachine",
    "StateTree",
    "StateTreeAnalysis",
    "TraceRecord",
    "Transition",
    "action_identity",
    "analyze_state_tree",
    "compute_ancestors",
    "create_state_machine",
    "get_state_list",
    "init_history",
    "is_atomic_state",
    "is_compound_state",
    "iter_guards",
    "make_history_states",
    "merge_updates",
    "resolve_history",
    "update_history",
]
