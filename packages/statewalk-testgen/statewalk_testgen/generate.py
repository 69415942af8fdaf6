"""Test sequence generation by depth-first traversal of the lowered machine graph.

Each visited edge is classified into one of six cases. Structural init
edges advance the control-state sequence without input. Eventless edges are
checked against the trace of the last input fed to the machine: the traced
record must be the edge's own branch and must enter the edge's target. History
edges are kept only when the history computed from the path so far resolves
to their target. Every other edge asks the bound generator for an input and
feeds it to a machine replayed from the path's input sequence.

A path is pruned (the edge is not traversable) whenever the case handler or
the caller's strategy rejects the edge. Pruning is never an error.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any, Iterable

from statewalk.history import resolve_history
from statewalk.machine import StateMachine, create_state_machine
from statewalk.types import (
    INIT_EVENT,
    INIT_STATE,
    NO_OUTPUT,
    ConfigurationError,
    ControlState,
    FSMDef,
    InputEvent,
    TraceRecord,
    Transition,
    is_eventless,
    is_init_event,
    is_init_state,
)
from statewalk_graph import (
    EdgeVisit,
    Graph,
    GoalEvaluation,
    SearchSpec,
    VisitSpec,
    depth_first_traverse_graph_edges,
)

from statewalk_testgen.config import GenerationSettings
from statewalk_testgen.edges import Edge, history_of
from statewalk_testgen.generators import KEEP_GENERATOR_STATE, GeneratorIndex
from statewalk_testgen.graph_builder import convert_fsm_to_graph

logger = logging.getLogger(__name__)


class EdgeCase(Enum):
    INVALID_INIT_STATE_EVENT = "invalid_init_state_event"
    MANUAL_INIT = "manual_init"
    AUTOMATIC_INIT = "automatic_init"
    EVENTLESS = "eventless"
    HISTORY = "history"
    BASE = "base"


def classify_edge(edge: Edge) -> EdgeCase:
    """Case of an edge, from its origin, its event and whether it targets history."""
    if is_init_state(edge.from_state):
        if not is_init_event(edge.event):
            return EdgeCase.INVALID_INIT_STATE_EVENT
        return EdgeCase.MANUAL_INIT
    if is_init_event(edge.event):
        return EdgeCase.AUTOMATIC_INIT
    if is_eventless(edge.event):
        return EdgeCase.EVENTLESS
    if history_of(edge) is not None:
        return EdgeCase.HISTORY
    return EdgeCase.BASE


@dataclass(frozen=True)
class PathTraversalState:
    """Everything accumulated along one path.

    ``control_state_sequence`` starts with INIT_STATE and has one more entry
    than ``path``. ``output_index`` is the position, in the trace of the last
    input, of the record matching the last edge of the path.
    """

    path: tuple[Edge, ...] = ()
    control_state_sequence: tuple[ControlState, ...] = (INIT_STATE,)
    input_sequence: tuple[InputEvent, ...] = ()
    output_sequence: tuple[Any, ...] = ()
    output_index: int = 0
    generator_state: Any = None

    def advance(self, edge: Edge, **changes: Any) -> PathTraversalState:
        """Extend the path with ``edge`` and apply ``changes``."""
        return replace(
            self,
            path=self.path + (edge,),
            control_state_sequence=self.control_state_sequence + (edge.to,),
            **changes,
        )


@dataclass(frozen=True)
class TestCase:
    """One generated test: inputs to feed and the outputs and states they should produce."""

    __test__ = False

    input_sequence: tuple[InputEvent, ...]
    output_sequence: tuple[Any, ...]
    control_state_sequence: tuple[ControlState, ...]


class TestSequenceGenerator:
    """Walks the lowered graph of ``fsm_def`` and collects test cases."""

    __test__ = False

    def __init__(
        self,
        fsm_def: FSMDef,
        generators: GeneratorIndex,
        settings: GenerationSettings,
    ) -> None:
        self._fsm_def = fsm_def
        self._generators = generators
        self._settings = settings
        self._strategy = settings.strategy
        self.graph: Graph = convert_fsm_to_graph(fsm_def)

    def run(self) -> list[TestCase]:
        search: SearchSpec[tuple[TestCase, ...]] = SearchSpec(
            initial_goal_eval_state=(),
            show_results=list,
            evaluate_goal=self.evaluate_goal,
        )
        visit: VisitSpec[PathTraversalState] = VisitSpec(
            initial_path_traversal_state=PathTraversalState(),
            visit_edge=self.visit_edge,
        )
        return depth_first_traverse_graph_edges(search, visit, INIT_STATE, self.graph)

    # --- Goal ---

    def evaluate_goal(
        self,
        edge: Edge,
        graph: Graph,
        path_state: PathTraversalState,
        results: tuple[TestCase, ...],
    ) -> GoalEvaluation[tuple[TestCase, ...]]:
        if not self._strategy.is_goal_reached(edge, graph, path_state, results):
            return GoalEvaluation(is_goal_reached=False, goal_eval_state=results)

        test_case = TestCase(
            input_sequence=path_state.input_sequence,
            output_sequence=path_state.output_sequence,
            control_state_sequence=path_state.control_state_sequence,
        )
        new_results = results + (test_case,)
        logger.debug(
            "test case %d captured: %s",
            len(new_results), " -> ".join(map(str, test_case.control_state_sequence)),
        )
        if self._settings.on_result is not None:
            self._settings.on_result(list(new_results))
        return GoalEvaluation(is_goal_reached=True, goal_eval_state=new_results)

    # --- Edge visits ---

    def visit_edge(
        self,
        edge: Edge,
        graph: Graph,
        path_state: PathTraversalState,
        results: tuple[TestCase, ...],
    ) -> EdgeVisit[PathTraversalState]:
        case = classify_edge(edge)
        if case is EdgeCase.INVALID_INIT_STATE_EVENT:
            raise ConfigurationError(
                f"Cannot leave {INIT_STATE!r} on {edge.event!r}, only {INIT_EVENT!r} is accepted; "
                f"check the machine configuration"
            )
        if case is EdgeCase.MANUAL_INIT:
            return self._visit_init(edge, path_state, path_state.output_index)
        if case is EdgeCase.AUTOMATIC_INIT:
            return self._visit_init(edge, path_state, path_state.output_index + 1)

        if not self._strategy.is_traversable_edge(edge, graph, path_state, results):
            return self._prune(edge, path_state, "rejected by strategy")
        if case is EdgeCase.EVENTLESS:
            return self._visit_eventless(edge, path_state)
        if case is EdgeCase.HISTORY and not self._history_matches(edge, path_state):
            return self._prune(edge, path_state, "history resolves elsewhere")
        return self._visit_base(edge, path_state)

    def _visit_init(
        self, edge: Edge, path_state: PathTraversalState, output_index: int,
    ) -> EdgeVisit[PathTraversalState]:
        # Structural descent: no input, no output.
        if history_of(edge) is not None and not self._history_matches(edge, path_state):
            return self._prune(edge, path_state, "history resolves elsewhere")
        return EdgeVisit(
            path_traversal_state=path_state.advance(edge, output_index=output_index),
            is_traversable_edge=True,
        )

    def _visit_eventless(
        self, edge: Edge, path_state: PathTraversalState,
    ) -> EdgeVisit[PathTraversalState]:
        _, traced = self._replay(path_state.input_sequence)
        slot = path_state.output_index + 1
        if slot >= len(traced):
            return self._prune(edge, path_state, "no automatic transition was traced")

        record = traced[slot]
        if edge.predicate is not None and not edge.predicate(record.extended_state, record.event_data):
            return self._prune(edge, path_state, "guard not satisfied")
        if (record.transition_index, record.guard_index) != (edge.transition_index, edge.guard_index):
            return self._prune(edge, path_state, "machine took another branch")
        if record.target_control_state != edge.to:
            return self._prune(edge, path_state, f"machine entered {record.target_control_state!r}")
        return EdgeVisit(
            path_traversal_state=path_state.advance(
                edge,
                output_sequence=path_state.output_sequence + (record.outputs,),
                output_index=slot,
            ),
            is_traversable_edge=True,
        )

    def _visit_base(
        self, edge: Edge, path_state: PathTraversalState,
    ) -> EdgeVisit[PathTraversalState]:
        gen = self._generators.lookup_edge(edge)
        if gen is None:
            return self._prune(edge, path_state, "no input generator")

        machine, _ = self._replay(path_state.input_sequence)
        extended_state = (
            machine.extended_state if path_state.input_sequence
            else self._fsm_def.initial_extended_state
        )
        generated = gen(extended_state, path_state.generator_state)
        if not generated.has_generated_input:
            return self._prune(edge, path_state, "generator produced no input")

        input_event = InputEvent(event=edge.event, data=generated.input)
        records = machine(input_event)
        output = records[0].outputs if records else NO_OUTPUT
        generator_state = (
            path_state.generator_state if generated.generator_state is KEEP_GENERATOR_STATE
            else generated.generator_state
        )
        return EdgeVisit(
            path_traversal_state=path_state.advance(
                edge,
                input_sequence=path_state.input_sequence + (input_event,),
                output_sequence=path_state.output_sequence + (output,),
                output_index=0,
                generator_state=generator_state,
            ),
            is_traversable_edge=True,
        )

    # --- Helpers ---

    def _history_matches(self, edge: Edge, path_state: PathTraversalState) -> bool:
        history = history_of(edge)
        resolved = resolve_history(
            self._fsm_def.states, path_state.control_state_sequence, history.kind, history.state,
        )
        return resolved == edge.to

    def _replay(
        self, input_sequence: Iterable[InputEvent],
    ) -> tuple[StateMachine, tuple[TraceRecord, ...]]:
        """Fresh started machine fed ``input_sequence``, with the trace of the last input."""
        machine = create_state_machine(self._fsm_def, self._settings.machine)
        traced = machine.start_trace
        for input_event in input_sequence:
            traced = tuple(machine(input_event))
        return machine, traced

    def _prune(
        self, edge: Edge, path_state: PathTraversalState, reason: str,
    ) -> EdgeVisit[PathTraversalState]:
        logger.debug("pruned %s -%s-> %s: %s", edge.from_state, edge.event, edge.to, reason)
        return EdgeVisit(path_traversal_state=path_state, is_traversable_edge=False)


def generate_test_sequences(
    fsm_def: FSMDef,
    generators: Iterable[Transition] | GeneratorIndex,
    settings: GenerationSettings,
) -> list[TestCase]:
    """Generate test cases for ``fsm_def`` following ``settings.strategy``.

    ``generators`` mirrors the machine's transitions, each branch carrying
    the ``gen`` that produces its triggering input. It can also be given as
    an already built GeneratorIndex.

    Raises ConfigurationError when the machine definition cannot be
    traversed, e.g. INIT_STATE is left on an event other than INIT_EVENT.
    """
    index = generators if isinstance(generators, GeneratorIndex) else GeneratorIndex.from_generators(generators)
    return TestSequenceGenerator(fsm_def, index, settings).run()
