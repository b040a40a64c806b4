"""
Control patterns - structure from one pattern, values from another.

The source pattern decides *what* plays (timing, event count); the control
pattern decides *how* it sounds. Each source event samples the control at
its onset and merges the sampled data in with a combine rule.

This decoupling is what makes every parameter patternable:
`note("c e g").gain(sine)` keeps three notes and reads gain off the sine.
"""

from __future__ import annotations

from collections.abc import Callable
from fractions import Fraction

from chuk_strudel.config import get_config
from chuk_strudel.core.rhythm import TimeSpan
from chuk_strudel.models.voice import VoiceData, as_int, is_truthy
from chuk_strudel.pattern.base import Pattern, PatternEvent
from chuk_strudel.pattern.primitives import ConstantPattern, euclid_structure

Combine = Callable[[VoiceData, VoiceData], VoiceData]
Mapper = Callable[[VoiceData], VoiceData]


def sample_at(pattern: Pattern, time: Fraction) -> PatternEvent | None:
    """
    The event of `pattern` active at an instant, if any.

    Queries a tiny window starting at `time`; with several simultaneous
    events the first one wins.
    """
    if isinstance(pattern, ConstantPattern):
        return PatternEvent(TimeSpan(time, time + get_config().epsilon), None, pattern.data)
    events = pattern.query(TimeSpan(time, time + get_config().epsilon))
    return events[0] if events else None


def holds_at(pattern: Pattern, time: Fraction) -> bool:
    """True if the pattern's value at `time` is truthy; absence is false."""
    event = sample_at(pattern, time)
    return event is not None and is_truthy(event.data.value)


class ControlPattern(Pattern):
    """
    Source events with data merged from a sampled control.

    Output events are exactly the source events, with the same timespans;
    only their data changes. A source event with nothing to sample is
    passed through unchanged.
    """

    def __init__(
        self,
        source: Pattern,
        control: Pattern,
        combine: Combine,
        mapper: Mapper | None = None,
    ):
        self.source = source
        self.control = control
        self.combine = combine
        self.mapper = mapper

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        events = self.source.query(span)

        # Constant control: same data for every event, no sampling needed
        if isinstance(self.control, ConstantPattern):
            control_data = self._map(self.control.data)
            return [e.with_data(self.combine(e.data, control_data)) for e in events]

        result = []
        for event in events:
            hit = sample_at(self.control, event.onset)
            if hit is None:
                result.append(event)
                continue
            result.append(event.with_data(self.combine(event.data, self._map(hit.data))))
        return result

    def _map(self, data: VoiceData) -> VoiceData:
        return self.mapper(data) if self.mapper is not None else data


def apply_control(
    source: Pattern,
    control: Pattern,
    combine: Combine,
    mapper: Mapper | None = None,
) -> Pattern:
    """
    Merge a control pattern into a source pattern.

    Args:
        source: Defines output timing and event count
        control: Sampled at each source event's onset
        combine: (source_data, control_data) -> merged data
        mapper: Optional transform of control data before combining

    Returns:
        A pattern with the source's structure and merged values
    """
    return ControlPattern(source, control, combine, mapper)


class StructPattern(Pattern):
    """
    Structure from a boolean pattern, values from another.

    Every truthy event of `structure` becomes an event carrying the data
    of `values` at that onset. Structure events where `values` is silent
    are dropped.
    """

    def __init__(self, values: Pattern, structure: Pattern):
        self.values = values
        self.structure = structure

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        result = []
        for event in self.structure.query(span):
            if not is_truthy(event.data.value):
                continue
            hit = sample_at(self.values, event.onset)
            if hit is not None:
                result.append(event.with_data(hit.data))
        return result


class MaskPattern(Pattern):
    """Keeps source events whose onset falls on a truthy mask value."""

    def __init__(self, source: Pattern, flags: Pattern):
        self.source = source
        self.flags = flags

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        return [e for e in self.source.query(span) if holds_at(self.flags, e.onset)]


class SegmentPattern(Pattern):
    """
    Source sampled n times per count event.

    Each event of `counts` is cut into n equal slots (n read from its
    value) and every slot becomes an event carrying the source's data at
    the slot start. This turns continuous signals into discrete steps.
    """

    def __init__(self, source: Pattern, counts: Pattern):
        self.source = source
        self.counts = counts

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        result = []
        for count_event in self.counts.query(span):
            n = as_int(count_event.data.value)
            if n is None or n <= 0:
                continue
            frame = count_event.whole or count_event.part
            width = frame.duration / n
            for i in range(n):
                slot = TimeSpan(frame.begin + i * width, frame.begin + (i + 1) * width)
                part = slot.intersection(count_event.part)
                if part is None:
                    continue
                hit = sample_at(self.source, slot.begin)
                if hit is not None:
                    result.append(PatternEvent(part, slot, hit.data))
        return result


def _int_at(pattern: Pattern, time: Fraction) -> int | None:
    hit = sample_at(pattern, time)
    return None if hit is None else as_int(hit.data.value)


class EuclidPattern(Pattern):
    """
    Source restructured into a Euclidean rhythm.

    Pulses, steps and rotation are sampled at the start of each cycle.
    Cycles where they do not describe a rhythm (steps <= 0 or fewer steps
    than pulses) play the source unchanged.
    """

    def __init__(self, source: Pattern, pulses: Pattern, steps: Pattern, rotation: Pattern | None = None):
        self.source = source
        self.pulses = pulses
        self.steps = steps
        self.rotation = rotation

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        events: list[PatternEvent] = []
        for cycle_span in span.cycle_spans():
            start = cycle_span.cycle
            pulses = _int_at(self.pulses, start)
            steps = _int_at(self.steps, start)
            if pulses is None or steps is None or steps <= 0 or steps < abs(pulses):
                events.extend(self.source.query(cycle_span))
                continue
            rotation = _int_at(self.rotation, start) if self.rotation is not None else None
            structure = euclid_structure(pulses, steps, rotation or 0)
            events.extend(StructPattern(self.source, structure).query(cycle_span))
        return events
