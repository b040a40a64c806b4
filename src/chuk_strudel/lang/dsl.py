"""
DSL declarations - one definition, three call shapes.

An operation is described by two functions:

- apply(source, args): the method form, transforming a receiver pattern
- create(args): the free-function form

dsl_operation() wraps them in a DslOperation and registers it as a
function, a pattern method and a string method under its name and every
alias. declare_param() covers the common case of an operation that sets
one VoiceData field from a patternable value.
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from typing import Any

from chuk_strudel.constants import ArgKind, ErrorMessages, RegistryTable
from chuk_strudel.lang.args import (
    CallInfo,
    DslArg,
    Modifier,
    args_to_control,
    args_to_pattern,
    normalize,
    value_atom,
)
from chuk_strudel.lang.registry import REGISTRY
from chuk_strudel.mini import parse_mini_notation
from chuk_strudel.models.voice import VoiceData, as_float
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.control import apply_control

logger = logging.getLogger(__name__)

ApplyFn = Callable[[Pattern, list[DslArg]], Pattern]
CreateFn = Callable[[list[DslArg]], Pattern]
Coerce = Callable[[Any], Any]

ALL_TABLES: tuple[RegistryTable, ...] = tuple(RegistryTable)


class DslOperation:
    """
    A declared operation.

    Calling it from Python runs the free-function form:

        note("c e g")
        fast(2, note("c e"))

    and `on()` runs the method form against an explicit receiver.
    """

    def __init__(self, name: str, apply: ApplyFn, create: CreateFn | None = None):
        self.name = name
        self.apply = apply
        self.create = create or self._receiver_last

    def __call__(self, *args: Any) -> Pattern:
        call_info = CallInfo(self.name)
        return self.call_function(normalize(args, call_info), call_info)

    def on(self, receiver: Pattern | str, *args: Any) -> Pattern:
        call_info = CallInfo(self.name)
        if isinstance(receiver, str):
            return self.call_string(receiver, normalize(args, call_info), call_info)
        return self.call_method(receiver, normalize(args, call_info), call_info)

    # Registered handlers

    def call_function(self, args: list[DslArg], call_info: CallInfo | None = None) -> Pattern:
        return self.create(args)

    def call_method(self, receiver: Pattern, args: list[DslArg], call_info: CallInfo | None = None) -> Pattern:
        return self.apply(receiver, args)

    def call_string(self, receiver: str, args: list[DslArg], call_info: CallInfo | None = None) -> Pattern:
        return self.apply(parse_mini_notation(receiver, value_atom), args)

    def _receiver_last(self, args: list[DslArg]) -> Pattern:
        # fast(2, pat): the last argument is the receiver
        return self.apply(args_to_pattern(args[-1:]), args[:-1])

    def __repr__(self) -> str:
        return f"DslOperation({self.name!r})"


def dsl_operation(
    name: str,
    apply: ApplyFn,
    create: CreateFn | None = None,
    aliases: Iterable[str] = (),
    tables: Iterable[RegistryTable] = ALL_TABLES,
) -> DslOperation:
    """
    Declare an operation and register it.

    Args:
        name: Canonical name
        apply: Method form, (source, args) -> Pattern
        create: Function form, args -> Pattern (default: last arg is the receiver)
        aliases: Extra names sharing the same handlers
        tables: Call shapes to expose (all three by default)

    Returns:
        The DslOperation, callable from Python
    """
    operation = DslOperation(name, apply, create)
    handlers = {
        RegistryTable.FUNCTIONS: operation.call_function,
        RegistryTable.PATTERN_METHODS: operation.call_method,
        RegistryTable.STRING_METHODS: operation.call_string,
    }
    tables = tuple(tables)
    for alias in (name, *aliases):
        for table in tables:
            REGISTRY.register(table, alias, handlers[table])
    return operation


def has_values(args: list[DslArg]) -> bool:
    """True if any argument can become a pattern."""
    return any(arg.kind in (ArgKind.LITERAL, ArgKind.PATTERN) for arg in args)


def field_modifier(field: str, coerce: Coerce = as_float, name: str | None = None) -> Modifier:
    """
    Modifier that sets one VoiceData field from a raw value.

    Values the coercion cannot read leave the data unchanged.
    """
    label = name or field

    def modify(data: VoiceData, raw: Any) -> VoiceData:
        value = coerce(raw)
        if value is None:
            if raw is not None:
                logger.warning(ErrorMessages.INVALID_NUMBER.format(name=label, value=raw) + "; ignored")
            return data
        return data.with_changes(**{field: value})

    return modify


def field_combine(field: str, coerce: Coerce = as_float) -> Callable[[VoiceData, VoiceData], VoiceData]:
    """Combine taking `field` from the control, else its coerced raw value."""

    def combine(source: VoiceData, control: VoiceData) -> VoiceData:
        value = getattr(control, field)
        if value is None:
            value = coerce(control.value)
        if value is None:
            return source
        return source.with_changes(**{field: value})

    return combine


def apply_numeric_param(
    source: Pattern,
    args: list[DslArg],
    modify: Modifier,
    field: str,
    coerce: Coerce = as_float,
) -> Pattern:
    """
    Set `field` on every source event from a patternable argument.

    No argument leaves the source unchanged.
    """
    if not has_values(args):
        return source
    return apply_control(source, args_to_control(args, modify), field_combine(field, coerce))


def declare_param(
    name: str,
    field: str,
    coerce: Coerce = as_float,
    aliases: Iterable[str] = (),
) -> DslOperation:
    """
    Declare a single-field parameter such as gain or cutoff.

    The function form builds a pattern of that parameter; the method form
    merges it into the receiver:

        gain("0.5 1")              events carrying only gain
        note("c e").gain("0.5 1")  notes with sampled gain
    """
    modify = field_modifier(field, coerce, name)

    def apply(source: Pattern, args: list[DslArg]) -> Pattern:
        return apply_numeric_param(source, args, modify, field, coerce)

    def create(args: list[DslArg]) -> Pattern:
        return args_to_pattern(args, modify)

    return dsl_operation(name, apply, create, aliases)
