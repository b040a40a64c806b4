"""
Primitive patterns - the composition leaves.

Silence, atoms, sequences, stacks, per-cycle concatenation, reversal,
tempo scaling and continuous signals. Everything the DSL builds is a tree
of these plus the control and conditional combinators.
"""

from __future__ import annotations

import math
from collections.abc import Callable, Sequence
from fractions import Fraction

from chuk_strudel.constants import Waveform
from chuk_strudel.core.rhythm import TimeLike, TimeSpan, bjorklund, cycle_of, to_time
from chuk_strudel.models.voice import VoiceData
from chuk_strudel.pattern.base import Pattern, PatternEvent, sort_events


class SilencePattern(Pattern):
    """Never produces events."""

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        return []

    def __repr__(self) -> str:
        return "silence"


class AtomicPattern(Pattern):
    """One event per cycle, filling the cycle."""

    def __init__(self, data: VoiceData):
        self.data = data

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        events = []
        for part in span.cycle_spans():
            whole = TimeSpan(part.cycle, part.cycle + 1)
            events.append(PatternEvent(part, whole, self.data))
        return events

    def __repr__(self) -> str:
        return f"pure({self.data.set_fields()})"


class ConstantPattern(Pattern):
    """
    One value valid for all time.

    Produces a single structureless event covering any query; used for
    literal control arguments so merges can skip per-event sampling.
    """

    def __init__(self, data: VoiceData):
        self.data = data

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        if span.is_empty():
            return []
        return [PatternEvent(span, None, self.data)]

    def __repr__(self) -> str:
        return f"constant({self.data.set_fields()})"


class SequencePattern(Pattern):
    """
    Children squeezed into one cycle, in proportion to their weights.

    Child i plays its own cycle c inside slot i of cycle c.
    """

    def __init__(self, children: Sequence[tuple[Pattern, Fraction]]):
        self.children = [(child, Fraction(weight)) for child, weight in children if weight > 0]
        self.total = sum((weight for _, weight in self.children), Fraction(0))

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        if not self.children:
            return []

        events: list[PatternEvent] = []
        for cycle_span in span.cycle_spans():
            cycle = cycle_span.cycle
            offset = Fraction(0)
            for child, weight in self.children:
                width = weight / self.total
                slot = TimeSpan(cycle + offset, cycle + offset + width)
                offset += width

                hit = slot.intersection(cycle_span)
                if hit is None:
                    continue

                # child cycle `cycle` is compressed into the slot
                start = slot.begin
                inner = hit.with_time(lambda t: cycle + (t - start) / width)
                for event in child.query(inner):
                    events.append(event.with_time(lambda t: start + (t - cycle) * width))
        return events


class StackPattern(Pattern):
    """All children at once."""

    def __init__(self, children: Sequence[Pattern]):
        self.children = list(children)

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        events: list[PatternEvent] = []
        for child in self.children:
            events.extend(child.query(span))
        return events


class SlowcatPattern(Pattern):
    """
    One child per cycle: cycle k plays child k mod n.

    By default each child sees consecutive cycles of its own, as if it were
    playing alone (child 0 plays its cycles 0, 1, 2 on real cycles 0, n, 2n).
    With keep_time the child is queried at the real cycle instead, so a
    child that varies per cycle stays aligned with the timeline.
    """

    def __init__(self, children: Sequence[Pattern], keep_time: bool = False):
        self.children = list(children)
        self.keep_time = keep_time

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        if not self.children:
            return []

        count = len(self.children)
        events: list[PatternEvent] = []
        for cycle_span in span.cycle_spans():
            cycle = int(cycle_span.cycle)
            child = self.children[cycle % count]
            if self.keep_time:
                events.extend(child.query(cycle_span))
                continue

            offset = Fraction(cycle - cycle // count)
            for event in child.query(cycle_span.shift(-offset)):
                events.append(event.with_time(lambda t, offset=offset: t + offset))
        return events


class ReversePattern(Pattern):
    """Each cycle played backwards. Events come out in time order."""

    def __init__(self, source: Pattern):
        self.source = source

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        events: list[PatternEvent] = []
        for cycle_span in span.cycle_spans():
            cycle = cycle_span.cycle
            pivot = 2 * cycle + 1
            reflected = TimeSpan(pivot - cycle_span.end, pivot - cycle_span.begin)
            for event in self.source.query(reflected):
                part = TimeSpan(pivot - event.part.end, pivot - event.part.begin)
                whole = None
                if event.whole is not None:
                    whole = TimeSpan(pivot - event.whole.end, pivot - event.whole.begin)
                events.append(PatternEvent(part, whole, event.data))
        return sort_events(events)


class TempoPattern(Pattern):
    """Speed up (factor > 1) or slow down (factor < 1)."""

    def __init__(self, source: Pattern, factor: Fraction):
        self.source = source
        self.factor = factor

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        if self.factor <= 0:
            return []
        inner = TimeSpan(span.begin * self.factor, span.end * self.factor)
        return [e.with_time(lambda t: t / self.factor) for e in self.source.query(inner)]


class ShiftPattern(Pattern):
    """The source moved in time; a positive offset plays it later."""

    def __init__(self, source: Pattern, offset: Fraction):
        self.source = source
        self.offset = offset

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        return [
            e.with_time(lambda t: t + self.offset) for e in self.source.query(span.shift(-self.offset))
        ]


class MapPattern(Pattern):
    """Same structure, data transformed per event."""

    def __init__(self, source: Pattern, func: Callable[[VoiceData], VoiceData]):
        self.source = source
        self.func = func

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        return [e.with_data(self.func(e.data)) for e in self.source.query(span)]


class ContinuousPattern(Pattern):
    """
    A signal sampled at the start of the query.

    Produces one structureless event per query; the value lands in the
    raw `value` field.
    """

    def __init__(self, func: Callable[[Fraction], float], name: str = "signal"):
        self.func = func
        self.name = name

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        if span.is_empty():
            return []
        return [PatternEvent(span, None, VoiceData(value=self.func(span.begin)))]

    def __repr__(self) -> str:
        return self.name


# --- constructors --------------------------------------------------------------

_SILENCE = SilencePattern()


def silence() -> Pattern:
    return _SILENCE


def pure(data: VoiceData) -> Pattern:
    return AtomicPattern(data)


def sequence(children: Sequence[Pattern | tuple[Pattern, TimeLike]]) -> Pattern:
    """
    Squeeze children into one cycle.

    Each child is a pattern (weight 1) or a (pattern, weight) pair.
    """
    weighted = [c if isinstance(c, tuple) else (c, 1) for c in children]
    if not weighted:
        return silence()
    if len(weighted) == 1:
        return weighted[0][0]
    return SequencePattern([(child, to_time(weight)) for child, weight in weighted])


def stack(children: Sequence[Pattern]) -> Pattern:
    if not children:
        return silence()
    if len(children) == 1:
        return children[0]
    return StackPattern(children)


def slowcat(children: Sequence[Pattern]) -> Pattern:
    if not children:
        return silence()
    if len(children) == 1:
        return children[0]
    return SlowcatPattern(children)


def slowcat_prime(children: Sequence[Pattern]) -> Pattern:
    """Like slowcat, but children are queried at the real cycle time."""
    if not children:
        return silence()
    if len(children) == 1:
        return children[0]
    return SlowcatPattern(children, keep_time=True)


def fast(source: Pattern, factor: TimeLike) -> Pattern:
    factor = to_time(factor)
    if factor == 1:
        return source
    if factor <= 0:
        return silence()
    return TempoPattern(source, factor)


def slow(source: Pattern, factor: TimeLike) -> Pattern:
    factor = to_time(factor)
    if factor <= 0:
        return silence()
    return fast(source, 1 / factor)


def reverse(source: Pattern) -> Pattern:
    return ReversePattern(source)


def arrange(sections: Sequence[tuple[TimeLike, Pattern]]) -> Pattern:
    """
    Play sections one after another, each lasting its number of cycles.

    arrange([(2, a), (1, b)]) plays a for two cycles, then b, then repeats.
    """
    sections = [(to_time(cycles), pattern) for cycles, pattern in sections if to_time(cycles) > 0]
    if not sections:
        return silence()
    total = sum((cycles for cycles, _ in sections), Fraction(0))
    return slow(sequence([(fast(pattern, cycles), cycles) for cycles, pattern in sections]), total)


def shift(source: Pattern, offset: TimeLike) -> Pattern:
    """Play `source` later by `offset` cycles (earlier if negative)."""
    offset = to_time(offset)
    if offset == 0:
        return source
    return ShiftPattern(source, offset)


def euclid_structure(pulses: int, steps: int, rotation: int = 0) -> Pattern:
    """One cycle of `steps` slots with a true atom on each Euclidean onset."""
    on = pure(VoiceData(value=True))
    return sequence([on if hit else silence() for hit in bjorklund(pulses, steps, rotation)])


def _frac(t: Fraction) -> float:
    return float(t - cycle_of(t))


_WAVEFORMS: dict[Waveform, Callable[[Fraction], float]] = {
    Waveform.SINE: lambda t: 0.5 + 0.5 * math.sin(2 * math.pi * float(t)),
    Waveform.COSINE: lambda t: 0.5 + 0.5 * math.cos(2 * math.pi * float(t)),
    Waveform.SAW: _frac,
    Waveform.ISAW: lambda t: 1.0 - _frac(t),
    Waveform.TRI: lambda t: 2 * _frac(t) if _frac(t) < 0.5 else 2 - 2 * _frac(t),
    Waveform.SQUARE: lambda t: 0.0 if _frac(t) < 0.5 else 1.0,
}


def signal(waveform: Waveform) -> Pattern:
    """Continuous oscillator with values in [0, 1]."""
    return ContinuousPattern(_WAVEFORMS[waveform], waveform.value)
