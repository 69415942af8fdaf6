"""Input generators bound to transition branches."""
from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Callable, Iterable

from statewalk.types import ControlState, EventLabel, ExtendedState, Transition, iter_guards

from statewalk_testgen.edges import configured_origin

if TYPE_CHECKING:
    from statewalk_testgen.edges import Edge


class _KeepGeneratorState:
    def __repr__(self) -> str:
        return "KEEP_GENERATOR_STATE"


# Returned as generator_state to leave the current generator state untouched.
KEEP_GENERATOR_STATE: Any = _KeepGeneratorState()


@dataclass(frozen=True)
class GeneratedInput:
    """What a generator produced for one transition.

    ``has_generated_input`` False means no input can trigger the transition
    from the given extended state. Any ``generator_state`` other than
    KEEP_GENERATOR_STATE, None included, replaces the current one.
    """

    input: Any
    has_generated_input: bool
    generator_state: Any = KEEP_GENERATOR_STATE


Generator = Callable[[ExtendedState, Any], GeneratedInput]
GeneratorKey = tuple[ControlState, EventLabel | None, int]


def const_gen(input: Any, generator_state: Any = KEEP_GENERATOR_STATE) -> Generator:
    """Generator that always produces ``input``."""

    def gen(extended_state: ExtendedState, current_state: Any) -> GeneratedInput:
        return GeneratedInput(input=input, has_generated_input=True, generator_state=generator_state)

    return gen


class GeneratorIndex:
    """Maps (origin, event, guard index) to the generator of that transition branch."""

    def __init__(self) -> None:
        self._generators: dict[GeneratorKey, Generator] = {}

    @classmethod
    def from_generators(cls, generators: Iterable[Transition]) -> GeneratorIndex:
        """Index every branch that carries a ``gen``.

        Branches are matched to the machine's transitions by position, so the
        generators must list guards in the same order as the machine does.
        """
        index = cls()
        for branch in iter_guards(list(generators)):
            if branch.gen is not None:
                index.register(branch.from_state, branch.event, branch.guard_index, branch.gen)
        return index

    def register(
        self, from_state: ControlState, event: EventLabel | None, guard_index: int, gen: Generator,
    ) -> None:
        """Register a generator. Overwrites if already registered."""
        self._generators[(from_state, event, guard_index)] = gen

    def lookup(
        self, from_state: ControlState, event: EventLabel | None, guard_index: int,
    ) -> Generator | None:
        return self._generators.get((from_state, event, guard_index))

    def lookup_edge(self, edge: Edge) -> Generator | None:
        """Generator for the configured transition an edge was lowered from."""
        return self.lookup(configured_origin(edge), edge.event, edge.guard_index)

    def has(self, from_state: ControlState, event: EventLabel | None, guard_index: int) -> bool:
        return (from_state, event, guard_index) in self._generators

    def keys(self) -> list[GeneratorKey]:
        return list(self._generators)
