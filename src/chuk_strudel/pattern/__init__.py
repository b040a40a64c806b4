"""
Patterns - time-queryable producers of voice events.

- base: Pattern, PatternEvent
- primitives: silence, pure, sequence, stack, slowcat, fast/slow, signals
- control: apply_control (structure from one pattern, values from another),
  struct, mask, segment, euclid
- conditional: apply_on_selected_cycles, apply_when
"""

from chuk_strudel.pattern.base import Pattern, PatternEvent, sort_events
from chuk_strudel.pattern.conditional import (
    CycleSelectPattern,
    WhenPattern,
    apply_on_selected_cycles,
    apply_when,
    safe_transform,
    try_transform,
)
from chuk_strudel.pattern.control import (
    ControlPattern,
    EuclidPattern,
    MaskPattern,
    SegmentPattern,
    StructPattern,
    apply_control,
    holds_at,
    sample_at,
)
from chuk_strudel.pattern.primitives import (
    AtomicPattern,
    ConstantPattern,
    ContinuousPattern,
    MapPattern,
    ShiftPattern,
    arrange,
    euclid_structure,
    fast,
    pure,
    reverse,
    sequence,
    shift,
    signal,
    silence,
    slow,
    slowcat,
    slowcat_prime,
    stack,
)

__all__ = [
    # Base
    "Pattern",
    "PatternEvent",
    "sort_events",
    # Primitives
    "AtomicPattern",
    "ConstantPattern",
    "ContinuousPattern",
    "MapPattern",
    "ShiftPattern",
    "arrange",
    "euclid_structure",
    "fast",
    "pure",
    "reverse",
    "sequence",
    "shift",
    "signal",
    "silence",
    "slow",
    "slowcat",
    "slowcat_prime",
    "stack",
    # Control
    "ControlPattern",
    "EuclidPattern",
    "MaskPattern",
    "SegmentPattern",
    "StructPattern",
    "apply_control",
    "holds_at",
    "sample_at",
    # Conditional
    "CycleSelectPattern",
    "WhenPattern",
    "apply_on_selected_cycles",
    "apply_when",
    "safe_transform",
    "try_transform",
]
