"""
Arithmetic on raw values.

Binary operations take a patternable operand, sampled like any control:

    "0 2 4".add("<0 7>").scale("C:major")
    "1 5 3".gt(2)                      -> 0 1 1, ready for when()

- numeric: add, sub, mul, div, mod, pow
- comparison: lt, gt, lte, gte, eq, ne (1 or 0)
- truthiness: eqt, net (1 or 0), and, or
- bitwise: band, bor, bxor, blshift, brshift
- unary: round, floor, ceil, log2

A value an operation cannot use is left unchanged.
"""

from __future__ import annotations

import math
import operator
from collections.abc import Callable
from typing import Any

from chuk_strudel.lang.args import DslArg, args_to_control
from chuk_strudel.lang.dsl import ApplyFn, dsl_operation, has_values
from chuk_strudel.models.voice import VoiceData, as_float, as_int, as_text, is_truthy
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.control import apply_control
from chuk_strudel.pattern.primitives import MapPattern

BinaryOp = Callable[[float, float], float]
RawOp = Callable[[Any, Any], Any]

# Failures of a single value; the event keeps its old value
_VALUE_ERRORS = (ZeroDivisionError, OverflowError, ValueError)


def _raw_combine(op: RawOp) -> Callable[[VoiceData, VoiceData], VoiceData]:
    def combine(source: VoiceData, control: VoiceData) -> VoiceData:
        if source.value is None or control.value is None:
            return source
        try:
            result = op(source.value, control.value)
        except _VALUE_ERRORS:
            return source
        if result is None or isinstance(result, complex):
            return source
        return source.with_changes(value=result)

    return combine


def _binary(op: RawOp) -> ApplyFn:
    combine = _raw_combine(op)

    def apply(source: Pattern, args: list[DslArg]) -> Pattern:
        if not has_values(args):
            return source
        return apply_control(source, args_to_control(args), combine)

    return apply


def _numeric(op: BinaryOp) -> RawOp:
    def run(left: Any, right: Any) -> float | None:
        a, b = as_float(left), as_float(right)
        if a is None or b is None:
            return None
        return op(a, b)

    return run


def _integer(op: Callable[[int, int], int]) -> RawOp:
    def run(left: Any, right: Any) -> int | None:
        a, b = as_int(left), as_int(right)
        if a is None or b is None:
            return None
        return op(a, b)

    return run


def _flag(result: bool) -> int:
    return 1 if result else 0


def _compare(op: Callable[[float, float], bool]) -> RawOp:
    def run(left: Any, right: Any) -> int | None:
        a, b = as_float(left), as_float(right)
        if a is None or b is None:
            return None
        return _flag(op(a, b))

    return run


def values_equal(left: Any, right: Any) -> bool:
    """Numeric equality when both read as numbers, else text equality."""
    a, b = as_float(left), as_float(right)
    if a is not None and b is not None:
        return a == b
    return as_text(left) == as_text(right)


def _unary(op: Callable[[float], float]) -> ApplyFn:
    def modify(data: VoiceData) -> VoiceData:
        number = as_float(data.value)
        if number is None:
            return data
        try:
            return data.with_changes(value=op(number))
        except _VALUE_ERRORS:
            return data

    return lambda source, args: MapPattern(source, modify)


# --- numeric ------------------------------------------------------------------

add = dsl_operation("add", apply=_binary(_numeric(operator.add)))
sub = dsl_operation("sub", apply=_binary(_numeric(operator.sub)))
mul = dsl_operation("mul", apply=_binary(_numeric(operator.mul)))
div = dsl_operation("div", apply=_binary(_numeric(operator.truediv)))
mod = dsl_operation("mod", apply=_binary(_numeric(operator.mod)))
pow_ = dsl_operation("pow", apply=_binary(_numeric(operator.pow)))

# --- comparison ---------------------------------------------------------------

lt = dsl_operation("lt", apply=_binary(_compare(operator.lt)))
gt = dsl_operation("gt", apply=_binary(_compare(operator.gt)))
lte = dsl_operation("lte", apply=_binary(_compare(operator.le)))
gte = dsl_operation("gte", apply=_binary(_compare(operator.ge)))
eq = dsl_operation("eq", apply=_binary(lambda a, b: _flag(values_equal(a, b))))
ne = dsl_operation("ne", apply=_binary(lambda a, b: _flag(not values_equal(a, b))))

# --- truthiness ---------------------------------------------------------------

eqt = dsl_operation("eqt", apply=_binary(lambda a, b: _flag(is_truthy(a) == is_truthy(b))))
net = dsl_operation("net", apply=_binary(lambda a, b: _flag(is_truthy(a) != is_truthy(b))))
# and / or return one of their operands, like the scripting language's && and ||
logical_and = dsl_operation("and", apply=_binary(lambda a, b: b if is_truthy(a) else a))
logical_or = dsl_operation("or", apply=_binary(lambda a, b: a if is_truthy(a) else b))

# --- bitwise ------------------------------------------------------------------

band = dsl_operation("band", apply=_binary(_integer(operator.and_)))
bor = dsl_operation("bor", apply=_binary(_integer(operator.or_)))
bxor = dsl_operation("bxor", apply=_binary(_integer(operator.xor)))
blshift = dsl_operation("blshift", apply=_binary(_integer(operator.lshift)))
brshift = dsl_operation("brshift", apply=_binary(_integer(operator.rshift)))

# --- unary --------------------------------------------------------------------

round_ = dsl_operation("round", apply=_unary(lambda x: math.floor(x + 0.5)))
floor = dsl_operation("floor", apply=_unary(math.floor))
ceil = dsl_operation("ceil", apply=_unary(math.ceil))
log2 = dsl_operation("log2", apply=_unary(math.log2))
