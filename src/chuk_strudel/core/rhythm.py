"""
Rhythm primitives - cycle time and TimeSpan.

Pattern time is measured in cycles. Uses Fraction for exact subdivision
representation, so "c d e" splits a cycle into exact thirds.
"""

from __future__ import annotations

import math
from collections.abc import Callable
from dataclasses import dataclass
from fractions import Fraction

TimeLike = int | float | str | Fraction


def to_time(value: TimeLike) -> Fraction:
    """
    Convert a number to exact cycle time.

    Floats go through their shortest repr so 0.1 becomes 1/10, not
    3602879701896397/36028797018963968.
    """
    if isinstance(value, Fraction):
        return value
    if isinstance(value, float):
        return Fraction(repr(value))
    return Fraction(value)


def cycle_of(time: Fraction) -> Fraction:
    """Start of the cycle containing time ('sam')."""
    return Fraction(math.floor(time))


@dataclass(frozen=True)
class TimeSpan:
    """
    A half-open interval [begin, end) of cycle time.

    Immutable and hashable.
    """

    begin: Fraction
    end: Fraction

    def __post_init__(self) -> None:
        if self.end < self.begin:
            raise ValueError(f"TimeSpan end {self.end} is before begin {self.begin}")

    @classmethod
    def of(cls, begin: TimeLike, end: TimeLike) -> TimeSpan:
        """Build a span from any numbers."""
        return cls(to_time(begin), to_time(end))

    @property
    def duration(self) -> Fraction:
        return self.end - self.begin

    @property
    def midpoint(self) -> Fraction:
        return (self.begin + self.end) / 2

    @property
    def cycle(self) -> Fraction:
        """Start of the cycle containing begin."""
        return cycle_of(self.begin)

    def is_empty(self) -> bool:
        return self.end <= self.begin

    def contains(self, time: Fraction) -> bool:
        return self.begin <= time < self.end

    def cycle_spans(self) -> list[TimeSpan]:
        """
        Split at cycle boundaries.

        [0.5, 2.25) -> [0.5, 1), [1, 2), [2, 2.25). Empty spans yield nothing.
        """
        spans = []
        begin = self.begin
        while begin < self.end:
            next_cycle = cycle_of(begin) + 1
            end = min(next_cycle, self.end)
            spans.append(TimeSpan(begin, end))
            begin = end
        return spans

    def intersection(self, other: TimeSpan) -> TimeSpan | None:
        """Overlap of two spans, None if they do not overlap."""
        begin = max(self.begin, other.begin)
        end = min(self.end, other.end)
        if end <= begin:
            return None
        return TimeSpan(begin, end)

    def with_time(self, func: Callable[[Fraction], Fraction]) -> TimeSpan:
        """Apply a monotonic time mapping to both ends."""
        return TimeSpan(func(self.begin), func(self.end))

    def shift(self, offset: Fraction) -> TimeSpan:
        return TimeSpan(self.begin + offset, self.end + offset)

    def __str__(self) -> str:
        return f"[{self.begin}, {self.end})"


def _bjorklund(ons: int, offs: int, xs: list[list[int]], ys: list[list[int]]) -> list[int]:
    if min(ons, offs) <= 1:
        return [step for group in xs + ys for step in group]
    if ons > offs:
        return _bjorklund(offs, ons - offs, [a + b for a, b in zip(xs[:offs], ys)], xs[offs:])
    return _bjorklund(ons, offs - ons, [a + b for a, b in zip(xs, ys[:ons])], ys[ons:])


def bjorklund(pulses: int, steps: int, rotation: int = 0) -> list[bool]:
    """
    Euclidean rhythm: `pulses` onsets spread as evenly as possible over `steps`.

    bjorklund(3, 8) is x..x..x. Negative pulses invert the rhythm; a
    positive rotation moves every onset later by that many steps.

    Returns:
        One flag per step, empty if steps <= 0
    """
    if steps <= 0:
        return []
    count = abs(pulses)
    if count >= steps:
        rhythm = [1] * steps
    else:
        rhythm = _bjorklund(count, steps - count, [[1]] * count, [[0]] * (steps - count))
    flags = [bool(step) != (pulses < 0) for step in rhythm]
    shift = -rotation % steps
    return flags[shift:] + flags[:shift]
