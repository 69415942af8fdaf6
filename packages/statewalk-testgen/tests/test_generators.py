"""Tests for GeneratorIndex and const_gen."""
from statewalk import INIT_EVENT, INIT_STATE, Guard, Transition
from statewalk_testgen import (
    KEEP_GENERATOR_STATE,
    CompoundEdge,
    GeneratedInput,
    GeneratorIndex,
    PlainEdge,
    const_gen,
)


def gen_a(extended_state, generator_state):
    return GeneratedInput(input="a", has_generated_input=True)


def gen_b(extended_state, generator_state):
    return GeneratedInput(input="b", has_generated_input=True)


class TestGeneratorIndex:
    """Test cases for the generator registry."""

    def test_from_generators_indexes_branches(self):
        """Each branch carrying a gen is indexed by (origin, event, guard index)."""
        # Arrange
        generators = [
            Transition(INIT_STATE, INIT_EVENT, "A"),
            Transition("A", "ev", guards=(
                Guard(to="B", gen=gen_a),
                Guard(to="C", gen=gen_b),
            )),
            Transition("B", "go", "C", gen=gen_a),
        ]

        # Act
        index = GeneratorIndex.from_generators(generators)

        # Assert
        assert index.lookup("A", "ev", 0) is gen_a
        assert index.lookup("A", "ev", 1) is gen_b
        assert index.lookup("B", "go", 0) is gen_a
        assert not index.has(INIT_STATE, INIT_EVENT, 0)
        assert index.keys() == [("A", "ev", 0), ("A", "ev", 1), ("B", "go", 0)]

    def test_lookup_missing(self):
        """An unregistered key has no generator."""
        assert GeneratorIndex().lookup("A", "ev", 0) is None

    def test_register_overwrites(self):
        """Registering a key twice keeps the last generator."""
        # Arrange
        index = GeneratorIndex()
        index.register("A", "ev", 0, gen_a)

        # Act
        index.register("A", "ev", 0, gen_b)

        # Assert
        assert index.lookup("A", "ev", 0) is gen_b
        assert index.has("A", "ev", 0) is True

    def test_lookup_edge_uses_configured_origin(self):
        """Edges expanded from a compound state find the compound state's generator."""
        # Arrange
        index = GeneratorIndex()
        index.register("P", "ev", 0, gen_a)
        expanded = CompoundEdge("p1", "ev", "q", None, None, 0, 2, compound="P")
        plain = PlainEdge("p1", "ev", "q", None, None, 0, 3)

        # Act / Assert
        assert index.lookup_edge(expanded) is gen_a
        assert index.lookup_edge(plain) is None


class TestConstGen:
    """Test cases for const_gen."""

    def test_always_produces_input(self):
        """The constant is produced whatever the extended state."""
        # Arrange
        gen = const_gen({"x": 1})

        # Act
        result = gen({"anything": True}, "state")

        # Assert
        assert result == GeneratedInput(input={"x": 1}, has_generated_input=True)
        assert result.generator_state is KEEP_GENERATOR_STATE

    def test_explicit_generator_state(self):
        """An explicit generator state, None included, replaces the current one."""
        # Act
        result = const_gen(None, generator_state=None)({}, "state")

        # Assert
        assert result.generator_state is None
