"""Unit tests for declaration ordering."""

import logging

from typed_client_gen.models import Class, Enum
from typed_client_gen.ordering import order_declarations, superclass_chain
from typed_client_gen.types import TypeRef


def make(name, superclass=None):
    return Class(name=name, simple_name=name, superclass=TypeRef(superclass) if superclass else None)


def lookup_for(*declarations):
    table = {d.name: d for d in declarations}
    return table.get


# =============================================================================
# Tests for superclass_chain()
# =============================================================================


class TestSuperclassChain:
    """Test cases for superclass_chain()."""

    def test_walks_to_root(self):
        """The chain starts at the class and ends at the root ancestor."""
        a, b, c = make("A", "B"), make("B", "C"), make("C")
        chain = superclass_chain(a, lookup_for(a, b, c), set())
        assert [x.name for x in chain] == ["A", "B", "C"]

    def test_stops_at_unresolved(self):
        """An unknown superclass ends the walk."""
        a = make("A", "missing.Base")
        assert [x.name for x in superclass_chain(a, lookup_for(a), set())] == ["A"]

    def test_stops_at_enum(self):
        """Only classes continue the walk."""
        a = make("A", "E")
        enum = Enum(name="E", simple_name="E")
        assert [x.name for x in superclass_chain(a, lookup_for(a, enum), set())] == ["A"]

    def test_stops_at_emitted(self):
        """A class already emitted is the last link."""
        a, b, c = make("A", "B"), make("B", "C"), make("C")
        assert [x.name for x in superclass_chain(a, lookup_for(a, b, c), {"B"})] == ["A", "B"]

    def test_cycle_terminates(self, caplog):
        """A superclass cycle stops at the first revisited class."""
        a, b = make("A", "B"), make("B", "A")
        with caplog.at_level(logging.DEBUG, logger="typed_client_gen.ordering"):
            chain = superclass_chain(a, lookup_for(a, b), set())
        assert [x.name for x in chain] == ["A", "B"]
        assert "cycle" in caplog.text


# =============================================================================
# Tests for order_declarations()
# =============================================================================


class TestOrderDeclarations:
    """Test cases for order_declarations()."""

    def test_ancestors_first(self):
        """A class discovered before its ancestors is emitted after them."""
        a, b, c, d = make("A", "B"), make("B", "C"), make("C", "D"), make("D")
        ordered = order_declarations([a, b, c, d], lookup_for(a, b, c, d))
        assert [x.name for x in ordered] == ["D", "C", "B", "A"]

    def test_unrelated_keep_input_order(self):
        """Unrelated classes are not reordered."""
        x, y, z = make("X"), make("Y"), make("Z")
        ordered = order_declarations([y, x, z], lookup_for(x, y, z))
        assert [c.name for c in ordered] == ["Y", "X", "Z"]

    def test_each_class_once(self):
        """Shared ancestors appear once."""
        base, left, right = make("Base"), make("Left", "Base"), make("Right", "Base")
        ordered = order_declarations([left, right, base], lookup_for(base, left, right))
        assert [c.name for c in ordered] == ["Base", "Left", "Right"]

    def test_cycle_emits_every_class(self):
        """Classes in a cycle are all emitted exactly once."""
        a, b = make("A", "B"), make("B", "A")
        ordered = order_declarations([a, b], lookup_for(a, b))
        assert sorted(c.name for c in ordered) == ["A", "B"]
        assert len(ordered) == 2

    def test_stable(self):
        """The same input always yields the same order."""
        classes = [make("A", "B"), make("B"), make("C", "B")]
        lookup = lookup_for(*classes)
        assert order_declarations(classes, lookup) == order_declarations(classes, lookup)
