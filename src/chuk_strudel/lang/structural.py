"""
Structural vocabulary - building and layering patterns.

Sequencing: seq / sequence / fastcat, cat / slowcat, slowcatPrime, arrange.
Layering: stack, superimpose, layer / apply.
Structure from other patterns: struct, mask, segment / seg, euclid, euclidRot.
"""

from __future__ import annotations

import logging

from chuk_strudel.constants import ArgKind
from chuk_strudel.lang.args import DslArg, arg_or_default, args_to_control, args_to_pattern
from chuk_strudel.lang.dsl import dsl_operation, has_values
from chuk_strudel.models.voice import EMPTY_VOICE, as_float
from chuk_strudel.pattern import primitives
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.conditional import try_transform
from chuk_strudel.pattern.control import EuclidPattern, MaskPattern, SegmentPattern, StructPattern

logger = logging.getLogger(__name__)


def _patterns(args: list[DslArg]) -> list[Pattern]:
    """Each argument as its own pattern."""
    return [arg.as_pattern() for arg in args if arg.kind in (ArgKind.LITERAL, ArgKind.PATTERN)]


# --- sequencing ---------------------------------------------------------------

seq = dsl_operation(
    "seq",
    apply=lambda source, args: primitives.sequence([source, *_patterns(args)]),
    create=lambda args: primitives.sequence(_patterns(args)),
    aliases=("sequence", "fastcat"),
)

cat = dsl_operation(
    "cat",
    apply=lambda source, args: primitives.slowcat([source, *_patterns(args)]),
    create=lambda args: primitives.slowcat(_patterns(args)),
    aliases=("slowcat",),
)

slowcat_prime = dsl_operation(
    "slowcatPrime",
    apply=lambda source, args: primitives.slowcat_prime([source, *_patterns(args)]),
    create=lambda args: primitives.slowcat_prime(_patterns(args)),
)


def _sections(args: list[DslArg]) -> list[tuple[float, Pattern]]:
    """
    Read (cycles, pattern) pairs from a flat argument list.

    A pattern without a preceding number lasts one cycle.
    """
    sections = []
    cycles: float | None = None
    for arg in args:
        number = as_float(arg.value) if arg.kind == ArgKind.LITERAL and not isinstance(arg.value, str) else None
        if number is not None:
            cycles = number
            continue
        if arg.kind in (ArgKind.LITERAL, ArgKind.PATTERN):
            sections.append((cycles if cycles is not None else 1.0, arg.as_pattern()))
            cycles = None
    return sections


arrange = dsl_operation(
    "arrange",
    apply=lambda source, args: primitives.arrange([(1.0, source), *_sections(args)]),
    create=lambda args: primitives.arrange(_sections(args)),
)


def _create_pure(args: list[DslArg]) -> Pattern:
    if not args or args[0].kind != ArgKind.LITERAL:
        return primitives.silence()
    return primitives.pure(EMPTY_VOICE.with_changes(value=args[0].value))


pure = dsl_operation("pure", apply=lambda source, args: _create_pure(args), create=_create_pure)

silence = dsl_operation(
    "silence",
    apply=lambda source, args: primitives.silence(),
    create=lambda args: primitives.silence(),
)


# --- layering -----------------------------------------------------------------

stack = dsl_operation(
    "stack",
    apply=lambda source, args: primitives.stack([source, *_patterns(args)]),
    create=lambda args: primitives.stack(_patterns(args)),
)


def _transformed_layers(source: Pattern, args: list[DslArg], name: str) -> list[Pattern]:
    """One layer per transform argument; failing transforms are skipped."""
    layers = []
    for arg in args:
        transform = arg.as_function()
        if transform is None:
            continue
        result = try_transform(transform, source, name)
        if result is not None:
            layers.append(result)
    return layers


superimpose = dsl_operation(
    "superimpose",
    apply=lambda source, args: primitives.stack([source, *_transformed_layers(source, args, "superimpose")]),
)

layer = dsl_operation(
    "layer",
    apply=lambda source, args: primitives.stack(_transformed_layers(source, args, "layer")),
    aliases=("apply",),
)


# --- structure ----------------------------------------------------------------


def _apply_struct(source: Pattern, args: list[DslArg]) -> Pattern:
    if not _patterns(args):
        return source
    return StructPattern(source, args_to_pattern(args))


def _apply_mask(source: Pattern, args: list[DslArg]) -> Pattern:
    if not _patterns(args):
        return source
    return MaskPattern(source, args_to_pattern(args))


struct = dsl_operation("struct", apply=_apply_struct)
mask = dsl_operation("mask", apply=_apply_mask)


def _apply_segment(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args[:1]):
        logger.warning("segment needs a count; pattern unchanged")
        return source
    return SegmentPattern(source, args_to_pattern(args[:1]))


# Samples a continuous signal into n discrete steps per cycle: saw.segment(4)
segment = dsl_operation("segment", apply=_apply_segment, aliases=("seg",))


# --- euclidean rhythms --------------------------------------------------------


def _euclid(source: Pattern, args: list[DslArg], name: str, rotated: bool) -> Pattern:
    needed = 3 if rotated else 2
    controls = [arg_or_default(args, i) for i in range(needed)]
    if not all(has_values([arg]) for arg in controls):
        logger.warning(f"{name} needs {needed} numeric arguments; pattern unchanged")
        return source
    pulses, steps, *rest = [args_to_control([arg]) for arg in controls]
    return EuclidPattern(source, pulses, steps, rest[0] if rest else None)


euclid = dsl_operation("euclid", apply=lambda source, args: _euclid(source, args, "euclid", rotated=False))
euclid_rot = dsl_operation(
    "euclidRot",
    apply=lambda source, args: _euclid(source, args, "euclidRot", rotated=True),
    aliases=("euclidrot",),
)
