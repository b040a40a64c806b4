"""
Conditional vocabulary - firstOf / every, lastOf, when.

    note("c d e f").firstOf(4, rev)        reverse every 4th cycle
    note("c d e f").lastOf("<2 3>", fast2)  patterned cycle count
    note("c d e f").when("t ~ t ~", up)     transform steps 0 and 2
"""

from __future__ import annotations

import logging

from chuk_strudel.constants import ArgKind
from chuk_strudel.lang.args import DslArg, arg_or_default, args_to_control
from chuk_strudel.lang.dsl import ApplyFn, dsl_operation
from chuk_strudel.models.voice import as_int
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.conditional import apply_on_selected_cycles, apply_when

logger = logging.getLogger(__name__)


def _cycle_count(arg: DslArg) -> int | Pattern | None:
    """A numeric literal stays an integer; text such as "<2 4>" becomes a selector pattern."""
    if arg.kind == ArgKind.PATTERN:
        return arg.value
    if arg.kind != ArgKind.LITERAL:
        return None
    count = as_int(arg.value)
    if count is not None:
        return count
    return args_to_control([arg])


def _selected_cycles(pick_first: bool, name: str) -> ApplyFn:
    def apply(source: Pattern, args: list[DslArg]) -> Pattern:
        count = _cycle_count(arg_or_default(args, 0))
        transform = arg_or_default(args, 1).as_function()
        if count is None or transform is None:
            logger.warning(f"{name} needs a cycle count and a transform; pattern unchanged")
            return source
        return apply_on_selected_cycles(source, count, transform, pick_first, name)

    return apply


first_of = dsl_operation("firstOf", apply=_selected_cycles(True, "firstOf"), aliases=("every",))
last_of = dsl_operation("lastOf", apply=_selected_cycles(False, "lastOf"))


def _apply_when(source: Pattern, args: list[DslArg]) -> Pattern:
    condition = arg_or_default(args, 0)
    transform = arg_or_default(args, 1).as_function()
    if condition.kind not in (ArgKind.LITERAL, ArgKind.PATTERN) or transform is None:
        logger.warning("when needs a condition and a transform; pattern unchanged")
        return source
    return apply_when(source, args_to_control([condition]), transform)


when = dsl_operation("when", apply=_apply_when)
