"""
Pattern base - time-queryable producers of voice events.

A Pattern answers one question: which events are active in a query arc
[begin, end)? Queries are pure: the same arc always yields the same events.

Every pattern also exposes the DSL vocabulary as methods, resolved late
through the registry, so `note("c e g").gain(0.5).fast(2)` works from
Python exactly as it does from a script.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, replace
from fractions import Fraction
from typing import Any

from chuk_strudel.core.rhythm import TimeLike, TimeSpan
from chuk_strudel.models.voice import VoiceData


@dataclass(frozen=True)
class PatternEvent:
    """
    One event produced by a query.

    part is the fragment inside the query arc; whole is the full extent of
    the event (None for continuous signals, which have no onset).
    """

    part: TimeSpan
    whole: TimeSpan | None
    data: VoiceData

    @property
    def begin(self) -> Fraction:
        return self.part.begin

    @property
    def end(self) -> Fraction:
        return self.part.end

    @property
    def onset(self) -> Fraction:
        """Start of the whole event (or of the fragment for signals)."""
        return (self.whole or self.part).begin

    @property
    def midpoint(self) -> Fraction:
        return (self.whole or self.part).midpoint

    def has_onset(self) -> bool:
        """True if this fragment contains the start of the event."""
        return self.whole is not None and self.whole.begin == self.part.begin

    def with_data(self, data: VoiceData) -> PatternEvent:
        return replace(self, data=data)

    def with_time(self, func: Callable[[Fraction], Fraction]) -> PatternEvent:
        """Map both part and whole through a monotonic time function."""
        whole = self.whole.with_time(func) if self.whole is not None else None
        return PatternEvent(self.part.with_time(func), whole, self.data)

    def __str__(self) -> str:
        fields = ", ".join(f"{k}={v!r}" for k, v in self.data.set_fields().items())
        return f"{self.part} {fields}"


def sort_events(events: list[PatternEvent]) -> list[PatternEvent]:
    """Order events by start time (stable for simultaneous events)."""
    return sorted(events, key=lambda e: (e.part.begin, e.part.end))


class Pattern(ABC):
    """
    Abstract base for all patterns.

    Subclasses implement query(span). Unknown attributes are looked up in
    the DSL registry's pattern-method table.
    """

    @abstractmethod
    def query(self, span: TimeSpan) -> list[PatternEvent]:
        """Events active in the span."""

    def query_arc(self, begin: TimeLike, end: TimeLike) -> list[PatternEvent]:
        """Events active in [begin, end)."""
        return self.query(TimeSpan.of(begin, end))

    def first_cycle(self) -> list[PatternEvent]:
        """Events of cycle 0, convenient for inspection."""
        return self.query_arc(0, 1)

    def __getattr__(self, name: str) -> Any:
        if name.startswith("_"):
            raise AttributeError(name)

        # Deferred: the registry imports pattern modules
        from chuk_strudel.lang.args import CallInfo, normalize
        from chuk_strudel.lang.registry import resolve_method

        handler = resolve_method(Pattern, name)
        if handler is None:
            raise AttributeError(f"'{type(self).__name__}' has no attribute or DSL method '{name}'")

        def bound(*args: Any) -> Pattern:
            return handler(self, normalize(args), CallInfo(name))

        bound.__name__ = name
        return bound
