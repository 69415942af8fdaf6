"""statewalk-testgen - Test sequence generation for hierarchical state machines."""
from __future__ import annotations

from statewalk_testgen.config import GenerationSettings
from statewalk_testgen.edges import (
    CompoundEdge,
    CompoundHistoryEdge,
    Edge,
    HistoryEdge,
    PlainEdge,
    configured_origin,
)
from statewalk_testgen.generate import (
    EdgeCase,
    PathTraversalState,
    TestCase,
    TestSequenceGenerator,
    classify_edge,
    generate_test_sequences,
)
from statewalk_testgen.generators import (
    KEEP_GENERATOR_STATE,
    GeneratedInput,
    GeneratorIndex,
    const_gen,
)
from statewalk_testgen.graph_builder import convert_fsm_to_graph

__all__ = [
    "KEEP_GENERATOR_STATE",
    "CompoundEdge",
    "CompoundHistoryEdge",
    "Edge",
    "EdgeCase",
    "GeneratedInput",
    "GenerationSettings",
    "GeneratorIndex",
    "HistoryEdge",
    "PathTraversalState",
    "PlainEdge",
    "TestCase",
    "TestSequenceGenerator",
    "classify_edge",
    "configured_origin",
    "const_gen",
    "convert_fsm_to_graph",
    "generate_test_sequences",
]
