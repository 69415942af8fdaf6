"""Execution settings dataclass."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping

from statewalk.types import ExtendedState


def merge_updates(extended_state: ExtendedState, updates: Mapping[str, Any]) -> ExtendedState:
    """Return a new mapping with ``updates`` applied. Never mutates ``extended_state``."""
    if not updates:
        return extended_state
    merged = dict(extended_state or {})
    merged.update(updates)
    return merged


@dataclass(frozen=True)
class MachineSettings:
    """Immutable configuration for machine execution.

    Attributes:
        update_state: (extended_state, updates) -> new extended state.
        max_automatic_transitions: Upper bound on chained init/eventless
            transitions fired for a single input.
    """

    update_state: Callable[[ExtendedState, Any], ExtendedState] = merge_updates
    max_automatic_transitions: int = 100
