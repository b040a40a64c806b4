"""
Cycle-conditional patterns - transform some cycles or some events.

apply_on_selected_cycles builds n variants of a pattern, one transformed,
and plays them one per cycle. The selector n may itself be a pattern: it
is sampled at each source event's onset, so the source structure is kept
and there is no state between queries.

apply_when transforms only the events whose midpoint falls on a truthy
condition value.

User transforms are isolated: if one raises, the failure is logged and
the untransformed pattern is used in its place.
"""

from __future__ import annotations

import logging
from collections.abc import Callable

from chuk_strudel.constants import ErrorMessages
from chuk_strudel.core.rhythm import TimeSpan
from chuk_strudel.models.voice import as_int
from chuk_strudel.pattern.base import Pattern, PatternEvent, sort_events
from chuk_strudel.pattern.control import holds_at, sample_at
from chuk_strudel.pattern.primitives import slowcat_prime

logger = logging.getLogger(__name__)

Transform = Callable[[Pattern], Pattern]


def try_transform(transform: Transform, source: Pattern, name: str) -> Pattern | None:
    """
    Apply a user transform, isolating failures.

    Args:
        transform: Pattern -> Pattern callable
        source: Pattern to transform
        name: Operation name for the log message

    Returns:
        The transformed pattern, or None if the transform raised or did
        not return a pattern (the failure is logged)
    """
    try:
        result = transform(source)
    except Exception:
        logger.exception(ErrorMessages.TRANSFORM_FAILED.format(name=name))
        return None

    if not isinstance(result, Pattern):
        logger.warning(
            f"Transform for '{name}' returned {type(result).__name__}, not a pattern; layer skipped"
        )
        return None
    return result


def safe_transform(transform: Transform, source: Pattern, name: str) -> Pattern:
    """Like try_transform, but falls back to the untransformed source."""
    result = try_transform(transform, source, name)
    return source if result is None else result


def cycle_arrangement(source: Pattern, transformed: Pattern, n: int, pick_first: bool) -> Pattern:
    """
    n variants, one per cycle, with the transformed one first or last.

    n <= 1 always plays the transformed pattern.
    """
    if n <= 1:
        return transformed
    rest = [source] * (n - 1)
    variants = [transformed, *rest] if pick_first else [*rest, transformed]
    return slowcat_prime(variants)


class CycleSelectPattern(Pattern):
    """
    Cycle arrangement driven by a patterned selector.

    The selector is sampled at each source event's onset. That event then
    plays as it appears in the arrangement for the sampled integer count,
    keeping the source's timespans. Events where the selector is silent or
    not numeric play untransformed.
    """

    def __init__(self, source: Pattern, transformed: Pattern, selector: Pattern, pick_first: bool):
        self.source = source
        self.transformed = transformed
        self.selector = selector
        self.pick_first = pick_first

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        # Simultaneous events with the same timespans are resolved together
        groups: dict[tuple[TimeSpan, TimeSpan | None], list[PatternEvent]] = {}
        for event in self.source.query(span):
            groups.setdefault((event.part, event.whole), []).append(event)

        events: list[PatternEvent] = []
        arrangements: dict[int, Pattern] = {}
        for (part, whole), group in groups.items():
            hit = sample_at(self.selector, group[0].onset)
            n = None if hit is None else as_int(hit.data.value)
            if n is None:
                events.extend(group)
                continue
            if n not in arrangements:
                arrangements[n] = cycle_arrangement(self.source, self.transformed, n, self.pick_first)
            events.extend(e for e in arrangements[n].query(part) if e.whole == whole)

        return sort_events(events)


def apply_on_selected_cycles(
    source: Pattern,
    n: int | Pattern,
    transform: Transform,
    pick_first: bool,
    name: str = "firstOf",
) -> Pattern:
    """
    Apply `transform` on one cycle out of every n.

    Args:
        source: Pattern to vary
        n: Cycle count, a fixed integer or a pattern of integers
        transform: Pattern -> Pattern
        pick_first: Transform the first cycle of each group (else the last)
        name: Operation name for diagnostics

    Returns:
        Pattern where cycle k plays variant k mod n
    """
    transformed = safe_transform(transform, source, name)
    if isinstance(n, Pattern):
        return CycleSelectPattern(source, transformed, n, pick_first)
    return cycle_arrangement(source, transformed, n, pick_first)


class WhenPattern(Pattern):
    """
    Events taken from the transformed pattern where the condition holds.

    The condition is sampled at each event's midpoint, so a change exactly
    on an event boundary never counts for both neighbours.
    """

    def __init__(self, source: Pattern, transformed: Pattern, condition: Pattern):
        self.source = source
        self.transformed = transformed
        self.condition = condition

    def query(self, span: TimeSpan) -> list[PatternEvent]:
        chosen = [e for e in self.transformed.query(span) if holds_at(self.condition, e.midpoint)]
        kept = [e for e in self.source.query(span) if not holds_at(self.condition, e.midpoint)]
        return sort_events(chosen + kept)


def apply_when(source: Pattern, condition: Pattern, transform: Transform, name: str = "when") -> Pattern:
    """
    Apply `transform` to the events where `condition` is truthy.

    Missing condition values count as false.
    """
    transformed = try_transform(transform, source, name)
    if transformed is None:
        return source
    return WhenPattern(source, transformed, condition)
