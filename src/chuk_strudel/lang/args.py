"""
DSL arguments - one uniform shape for every call-site value.

Operations receive a list of DslArg no matter how they were called.
A DslArg may carry a literal (number, string, boolean), a pattern, a
transform function (pattern -> pattern) or nothing at all.

Strings are kept as text: they are only parsed as mini-notation when an
operation asks for a pattern, since the same argument list is shared by
the function, pattern-method and string-method call shapes.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Any

from chuk_strudel.constants import ArgKind, ErrorMessages
from chuk_strudel.mini import parse_mini_notation
from chuk_strudel.models.voice import EMPTY_VOICE, VoiceData, as_float, as_int, as_text
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.primitives import ConstantPattern, pure, sequence, silence

logger = logging.getLogger(__name__)

Modifier = Callable[[VoiceData, Any], VoiceData]
Transform = Callable[[Pattern], Pattern]


@dataclass(frozen=True)
class CallInfo:
    """Where an operation was called from. Diagnostics only."""

    name: str
    location: str | None = None

    def __str__(self) -> str:
        return f"{self.name} ({self.location})" if self.location else self.name


def value_modifier(data: VoiceData, raw: Any) -> VoiceData:
    """Default atom meaning: store the raw token in `value`."""
    return data.with_changes(value=raw)


def value_atom(token: str) -> VoiceData:
    """Atom factory for untyped mini-notation."""
    return value_modifier(EMPTY_VOICE, token)


@dataclass(frozen=True)
class DslArg:
    """One normalized call-site argument."""

    value: Any
    call_info: CallInfo | None = None

    @property
    def kind(self) -> ArgKind:
        if self.value is None:
            return ArgKind.ABSENT
        if isinstance(self.value, Pattern):
            return ArgKind.PATTERN
        if callable(self.value):
            return ArgKind.FUNCTION
        return ArgKind.LITERAL

    def as_float(self, default: float | None = None) -> float | None:
        """The value as a number, or `default` when it is not one."""
        number = as_float(self.value) if self.kind == ArgKind.LITERAL else None
        if number is None:
            self._malformed(default)
            return default
        return number

    def as_int(self, default: int | None = None) -> int | None:
        number = as_int(self.value) if self.kind == ArgKind.LITERAL else None
        if number is None:
            self._malformed(default)
            return default
        return number

    def as_text(self, default: str | None = None) -> str | None:
        if self.kind != ArgKind.LITERAL:
            return default
        return as_text(self.value)

    def as_function(self, default: Transform | None = None) -> Transform | None:
        return self.value if self.kind == ArgKind.FUNCTION else default

    def as_pattern(self, modify: Modifier = value_modifier) -> Pattern:
        """
        Materialize as a pattern.

        Strings are parsed as mini-notation with atoms built by `modify`;
        numbers and booleans become one atom per cycle.
        """
        kind = self.kind
        if kind == ArgKind.PATTERN:
            return self.value
        if kind != ArgKind.LITERAL:
            return silence()
        if isinstance(self.value, str):
            return parse_mini_notation(self.value, lambda token: modify(EMPTY_VOICE, token))
        return pure(modify(EMPTY_VOICE, self.value))

    def _malformed(self, default: Any) -> None:
        if self.kind == ArgKind.ABSENT:
            return
        name = self.call_info.name if self.call_info else "argument"
        logger.warning(
            ErrorMessages.INVALID_NUMBER.format(name=name, value=self.value) + f"; using {default!r}"
        )


def _flatten(raw_args: Iterable[Any]) -> Iterable[Any]:
    for raw in raw_args:
        if isinstance(raw, (list, tuple)):
            yield from _flatten(raw)
        else:
            yield raw


def normalize(raw_args: Iterable[Any], call_info: CallInfo | None = None) -> list[DslArg]:
    """
    Wrap raw call-site values as DslArgs.

    Nested lists and tuples are flattened; existing DslArgs are kept.
    """
    result = []
    for raw in _flatten(raw_args):
        if isinstance(raw, DslArg):
            result.append(raw)
        else:
            result.append(DslArg(raw, call_info))
    return result


def arg_or_default(args: list[DslArg], index: int) -> DslArg:
    """Positional access; missing trailing arguments are absent."""
    return args[index] if index < len(args) else DslArg(None)


def _materializable(args: list[DslArg]) -> list[DslArg]:
    return [a for a in args if a.kind in (ArgKind.LITERAL, ArgKind.PATTERN)]


def args_to_pattern(args: list[DslArg], modify: Modifier = value_modifier) -> Pattern:
    """
    Turn arguments into one pattern.

    One argument is returned as its pattern, several are played in
    sequence, none gives silence. Functions and absent values are skipped.
    """
    patterns = [a.as_pattern(modify) for a in _materializable(args)]
    return sequence(patterns) if patterns else silence()


def args_to_control(args: list[DslArg], modify: Modifier = value_modifier) -> Pattern:
    """
    Like args_to_pattern, but a single number or boolean becomes a
    ConstantPattern valid for all time.
    """
    usable = _materializable(args)
    if len(usable) == 1 and usable[0].kind == ArgKind.LITERAL and not isinstance(usable[0].value, str):
        return ConstantPattern(modify(EMPTY_VOICE, usable[0].value))
    return args_to_pattern(usable, modify)
