"""Tempo vocabulary - fast, slow, rev, palindrome, early, late."""

from __future__ import annotations

import logging

from chuk_strudel.core.rhythm import to_time
from chuk_strudel.lang.args import DslArg, arg_or_default
from chuk_strudel.lang.dsl import dsl_operation
from chuk_strudel.pattern import primitives
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.conditional import apply_on_selected_cycles

logger = logging.getLogger(__name__)


def _number(args: list[DslArg], name: str) -> float | None:
    factor = arg_or_default(args, 0).as_float()
    if factor is None:
        logger.warning(f"{name} needs a number; pattern unchanged")
    return factor


def _apply_fast(source: Pattern, args: list[DslArg]) -> Pattern:
    factor = _number(args, "fast")
    return source if factor is None else primitives.fast(source, factor)


def _apply_slow(source: Pattern, args: list[DslArg]) -> Pattern:
    factor = _number(args, "slow")
    return source if factor is None else primitives.slow(source, factor)


fast = dsl_operation("fast", apply=_apply_fast)
slow = dsl_operation("slow", apply=_apply_slow)
rev = dsl_operation("rev", apply=lambda source, args: primitives.reverse(source))

# Forwards then backwards on alternate cycles
palindrome = dsl_operation(
    "palindrome",
    apply=lambda source, args: apply_on_selected_cycles(
        source, 2, primitives.reverse, pick_first=False, name="palindrome"
    ),
)


def _shifted(source: Pattern, args: list[DslArg], name: str, direction: int) -> Pattern:
    amount = _number(args, name)
    return source if amount is None else primitives.shift(source, direction * to_time(amount))


early = dsl_operation("early", apply=lambda source, args: _shifted(source, args, "early", -1))
late = dsl_operation("late", apply=lambda source, args: _shifted(source, args, "late", 1))
