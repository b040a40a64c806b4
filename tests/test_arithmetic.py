"""
Tests for arithmetic, comparison, logic and bitwise operations on values.
"""

import pytest

from chuk_strudel.lang import REGISTRY, seq
from chuk_strudel.lang.arithmetic import floor, values_equal
from chuk_strudel.pattern import Pattern, PatternEvent


def values(events: list[PatternEvent]) -> list:
    return [e.data.value for e in events]


def call(pattern: Pattern, name: str, *args: object) -> Pattern:
    return getattr(pattern, name)(*args)


class TestNumericOps:
    """Tests for mod and pow alongside the basic four."""

    def test_mod_wraps(self) -> None:
        """mod wraps into [0, divisor), negatives included."""
        assert values(seq("10 11 -1").mod(3).first_cycle()) == [1, 2, 2]

    def test_pow(self) -> None:
        """pow raises each value to the operand."""
        assert values(seq("2 3").pow(2).first_cycle()) == [4, 9]

    @pytest.mark.parametrize(
        ("source", "name", "operand"),
        [("4", "mod", 0), ("-8", "pow", 0.5), ("0", "pow", -1), ("x", "mul", 2)],
    )
    def test_unusable_values_unchanged(self, source: str, name: str, operand: float) -> None:
        """Zero divisors, complex results and non-numbers keep the old value."""
        assert values(call(seq(source), name, operand).first_cycle()) == [source]

    def test_patterned_operand(self) -> None:
        """The operand is sampled like any control."""
        pattern = seq("1 2").add("<0 10>")
        assert values(pattern.query_arc(1, 2)) == [11, 12]
        assert values(pattern.first_cycle()) == [1, 2]

    def test_structure_from_source(self) -> None:
        """The operand never changes the event count."""
        assert len(seq("1 2 3").mul("2 3").first_cycle()) == 3


class TestComparisons:
    """Tests for the 1 / 0 comparison operations."""

    @pytest.mark.parametrize(
        ("name", "expected"),
        [
            ("lt", [1, 0, 0]),
            ("gt", [0, 0, 1]),
            ("lte", [1, 1, 0]),
            ("gte", [0, 1, 1]),
            ("eq", [0, 1, 0]),
            ("ne", [1, 0, 1]),
        ],
    )
    def test_against_two(self, name: str, expected: list[int]) -> None:
        """Each value is compared with the operand."""
        assert values(call(seq("1 2 3"), name, 2).first_cycle()) == expected

    def test_eq_on_text(self) -> None:
        """Non-numeric values compare as text."""
        assert values(seq("c d").eq("c").first_cycle()) == [1, 0]

    def test_values_equal(self) -> None:
        """Numbers compare numerically, whatever their spelling."""
        assert values_equal("2", 2.0)
        assert values_equal("c", "c")
        assert not values_equal("2", "c")

    def test_non_numeric_unchanged(self) -> None:
        """Ordering comparisons skip values that are not numbers."""
        assert values(seq("x").lt(2).first_cycle()) == ["x"]

    def test_comparison_as_condition(self) -> None:
        """Comparison results drive when()."""
        source = seq("1 5 3")
        events = source.when(source.gt(2), lambda p: p.gain(0.5)).first_cycle()
        assert values(events) == ["1", "5", "3"]
        assert [e.data.gain for e in events] == [None, 0.5, 0.5]


class TestTruthiness:
    """Tests for eqt, net, and, or."""

    def test_eqt_and_net(self) -> None:
        """Truthiness equality and its negation."""
        assert values(seq("0 5").eqt(0).first_cycle()) == [1, 0]
        assert values(seq("0 5").net(0).first_cycle()) == [0, 1]

    def test_and(self) -> None:
        """and gives the operand where the value is truthy, else the value."""
        assert values(call(seq("0 5"), "and", 10).first_cycle()) == ["0", 10]

    def test_or(self) -> None:
        """or keeps truthy values and replaces falsy ones."""
        assert values(call(seq("0 5"), "or", 10).first_cycle()) == [10, "5"]


class TestBitwise:
    """Tests for integer bit operations."""

    @pytest.mark.parametrize(
        ("name", "operand", "expected"),
        [("band", 10, 8), ("bor", 10, 14), ("bxor", 10, 6), ("blshift", 2, 48), ("brshift", 2, 3)],
    )
    def test_bit_ops(self, name: str, operand: int, expected: int) -> None:
        """Values and operands are read as integers."""
        assert values(call(seq("12"), name, operand).first_cycle()) == [expected]

    def test_negative_shift_unchanged(self) -> None:
        """A negative shift count leaves the value."""
        assert values(seq("3").blshift(-1).first_cycle()) == ["3"]


class TestUnaryOps:
    """Tests for round, floor, ceil and log2."""

    def test_round_halves_up(self) -> None:
        """Halfway values round up."""
        assert values(call(seq("2.4 2.5 2.6"), "round").first_cycle()) == [2, 3, 3]

    def test_floor_and_ceil(self) -> None:
        """floor and ceil move toward minus and plus infinity."""
        assert values(seq("-2.1 2.9").floor().first_cycle()) == [-3, 2]
        assert values(seq("-2.9 2.1").ceil().first_cycle()) == [-2, 3]

    def test_log2(self) -> None:
        """log2 of powers of two gives the exponent; zero is unchanged."""
        assert values(seq("8 16 0").log2().first_cycle()) == [3, 4, "0"]

    def test_function_form(self) -> None:
        """The free-function form takes the pattern as its argument."""
        assert values(floor(seq("2.5")).first_cycle()) == [2]

    @pytest.mark.parametrize(
        "name",
        [
            "mod", "pow", "lt", "gt", "lte", "gte", "eq", "eqt", "ne", "net", "and", "or",
            "band", "bor", "bxor", "blshift", "brshift", "round", "floor", "ceil", "log2",
        ],
    )
    def test_registered(self, name: str) -> None:
        """Every operation is in the registry."""
        assert name in REGISTRY
