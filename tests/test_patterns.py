"""
Tests for primitive patterns and the mini-notation parser.
"""

from fractions import Fraction

import pytest

from chuk_strudel.constants import Waveform
from chuk_strudel.core import TimeSpan
from chuk_strudel.errors import MiniNotationError
from chuk_strudel.lang.args import value_atom
from chuk_strudel.mini import parse_mini_notation
from chuk_strudel.models import VoiceData
from chuk_strudel.pattern import (
    MapPattern,
    Pattern,
    PatternEvent,
    arrange,
    fast,
    pure,
    reverse,
    sequence,
    signal,
    silence,
    slow,
    slowcat,
    slowcat_prime,
    stack,
)

F = Fraction


def parse(text: str) -> Pattern:
    return parse_mini_notation(text, value_atom)


def values(events: list[PatternEvent]) -> list:
    return [e.data.value for e in events]


def parts(events: list[PatternEvent]) -> list[tuple[Fraction, Fraction]]:
    return [(e.part.begin, e.part.end) for e in events]


def atom(value: str) -> Pattern:
    return pure(VoiceData(value=value))


class TestPrimitives:
    """Tests for the composition leaves."""

    def test_pure_one_event_per_cycle(self) -> None:
        """pure fills each cycle."""
        events = atom("a").query_arc(0, 2)
        assert parts(events) == [(0, 1), (1, 2)]
        assert all(e.has_onset() for e in events)

    def test_fragments(self) -> None:
        """Queries across a cycle boundary return fragments."""
        events = atom("a").query_arc(0.5, 1.5)
        assert parts(events) == [(F(1, 2), 1), (1, F(3, 2))]
        assert [e.has_onset() for e in events] == [False, True]
        assert events[0].whole == TimeSpan.of(0, 1)

    def test_silence(self) -> None:
        """silence never produces events."""
        assert silence().query_arc(0, 10) == []

    def test_sequence_weights(self) -> None:
        """Weighted children share the cycle proportionally."""
        events = sequence([(atom("a"), 3), atom("b")]).first_cycle()
        assert values(events) == ["a", "b"]
        assert parts(events) == [(0, F(3, 4)), (F(3, 4), 1)]

    def test_stack(self) -> None:
        """stack plays children together."""
        events = stack([atom("a"), atom("b")]).first_cycle()
        assert values(events) == ["a", "b"]
        assert parts(events) == [(0, 1), (0, 1)]

    def test_slowcat(self) -> None:
        """slowcat plays one child per cycle."""
        events = slowcat([atom("a"), atom("b")]).query_arc(0, 3)
        assert values(events) == ["a", "b", "a"]

    def test_slowcat_prime_keeps_time(self) -> None:
        """slowcat_prime queries children at the real cycle."""
        inner = parse("<x y>")
        plain = slowcat([inner, atom("z")]).query_arc(2, 3)
        prime = slowcat_prime([inner, atom("z")]).query_arc(2, 3)
        assert values(plain) == ["y"]
        assert values(prime) == ["x"]

    def test_reverse(self) -> None:
        """reverse mirrors each cycle."""
        events = reverse(parse("a b c")).query_arc(1, 2)
        assert values(events) == ["c", "b", "a"]
        assert parts(events) == [(1, F(4, 3)), (F(4, 3), F(5, 3)), (F(5, 3), 2)]

    def test_fast_and_slow(self) -> None:
        """fast repeats, slow stretches."""
        assert values(fast(parse("a b"), 2).first_cycle()) == ["a", "b", "a", "b"]
        assert values(slow(parse("a b"), 2).query_arc(0, 2)) == ["a", "b"]
        assert fast(atom("a"), 0).first_cycle() == []

    def test_arrange(self) -> None:
        """Sections last their number of cycles."""
        pattern = arrange([(2, atom("a")), (1, atom("b"))])
        events = pattern.query_arc(0, 4)
        assert values(events) == ["a", "a", "b", "a"]
        assert parts(events) == [(0, 1), (1, 2), (2, 3), (3, 4)]

    def test_map(self) -> None:
        """MapPattern changes data, not time."""
        events = MapPattern(parse("a b"), lambda d: d.with_changes(gain=0.5)).first_cycle()
        assert [e.data.gain for e in events] == [0.5, 0.5]
        assert parts(events) == [(0, F(1, 2)), (F(1, 2), 1)]

    def test_signals(self) -> None:
        """Oscillators are sampled at the start of the query."""
        assert signal(Waveform.SINE).query_arc(0, 0.01)[0].data.value == pytest.approx(0.5)
        assert signal(Waveform.SAW).query_arc(0.25, 0.3)[0].data.value == pytest.approx(0.25)
        assert signal(Waveform.SQUARE).query_arc(0.75, 0.8)[0].data.value == 1.0
        assert signal(Waveform.TRI).query_arc(0.5, 0.6)[0].data.value == pytest.approx(1.0)
        assert signal(Waveform.SINE).query_arc(0, 0.01)[0].whole is None


class TestMiniNotation:
    """Tests for the mini-notation parser."""

    def test_sequence(self) -> None:
        """Words split the cycle evenly."""
        events = parse("c e g").first_cycle()
        assert values(events) == ["c", "e", "g"]
        assert parts(events) == [(0, F(1, 3)), (F(1, 3), F(2, 3)), (F(2, 3), 1)]

    def test_rest(self) -> None:
        """'~' leaves a gap."""
        events = parse("c ~ e").first_cycle()
        assert values(events) == ["c", "e"]
        assert parts(events) == [(0, F(1, 3)), (F(2, 3), 1)]

    def test_subsequence(self) -> None:
        """Brackets share one step."""
        events = parse("c [e g]").first_cycle()
        assert values(events) == ["c", "e", "g"]
        assert parts(events) == [(0, F(1, 2)), (F(1, 2), F(3, 4)), (F(3, 4), 1)]

    def test_alternation(self) -> None:
        """Angle brackets pick one step per cycle."""
        assert values(parse("<c e g>").query_arc(0, 4)) == ["c", "e", "g", "c"]

    def test_layers(self) -> None:
        """Commas stack layers."""
        events = parse("c, e g").first_cycle()
        assert values(events) == ["c", "e", "g"]
        assert parts(events)[0] == (0, 1)

    def test_fast_and_slow_steps(self) -> None:
        """'*' and '/' change a step's speed."""
        assert parts(parse("c*2 e").first_cycle()) == [(0, F(1, 4)), (F(1, 4), F(1, 2)), (F(1, 2), 1)]
        events = parse("c/2").query_arc(0, 2)
        assert len(events) == 1
        assert events[0].whole == TimeSpan.of(0, 2)

    def test_weight(self) -> None:
        """'@' weights a step."""
        assert parts(parse("c@3 e").first_cycle()) == [(0, F(3, 4)), (F(3, 4), 1)]

    def test_repeat(self) -> None:
        """'!n' and bare '!' repeat a step."""
        assert values(parse("c!3 e").first_cycle()) == ["c", "c", "c", "e"]
        assert values(parse("c ! e").first_cycle()) == ["c", "c", "e"]

    def test_feet(self) -> None:
        """'.' groups steps into equal feet."""
        events = parse("c e . g a b").first_cycle()
        assert values(events) == ["c", "e", "g", "a", "b"]
        assert parts(events)[1] == (F(1, 4), F(1, 2))
        assert parts(events)[2] == (F(1, 2), F(2, 3))

    def test_numeric_and_sample_words(self) -> None:
        """Words keep their raw text."""
        assert values(parse("0.5 -1 bd:2").first_cycle()) == ["0.5", "-1", "bd:2"]

    def test_blank(self) -> None:
        """Blank text and lone rests are silent."""
        assert parse("").first_cycle() == []
        assert parse("~").first_cycle() == []

    def test_atom_factory(self) -> None:
        """The caller decides what an atom means."""
        pattern = parse_mini_notation("1 2", lambda token: VoiceData(gain=float(token)))
        assert [e.data.gain for e in pattern.first_cycle()] == [1.0, 2.0]

    @pytest.mark.parametrize("text", ["[c e", "c ]", "c*", "c*x", "! c", "<c e"])
    def test_malformed(self, text: str) -> None:
        """Malformed text raises MiniNotationError."""
        with pytest.raises(MiniNotationError):
            parse(text)

    def test_error_is_value_error(self) -> None:
        """MiniNotationError is a ValueError with a position."""
        with pytest.raises(ValueError) as exc_info:
            parse("c ]")
        assert exc_info.value.position == 2
