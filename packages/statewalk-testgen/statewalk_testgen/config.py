"""Test generation settings dataclass."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable

from statewalk.config import MachineSettings
from statewalk_graph import SearchStrategy

if TYPE_CHECKING:
    from statewalk_testgen.generate import TestCase


@dataclass(frozen=True)
class GenerationSettings:
    """Immutable configuration for generate_test_sequences.

    Attributes:
        strategy: Decides which edges a path may follow and where it ends.
        on_result: Called with every result collected so far each time a
            new test case is captured.
        machine: Settings for the machines replayed during generation.
    """

    strategy: SearchStrategy
    on_result: Callable[[list[TestCase]], None] | None = None
    machine: MachineSettings = field(default_factory=MachineSettings)
