"""
Dynamics vocabulary - level, panning, voicing and the amplitude envelope.

Each parameter sets one VoiceData field. adsr sets all four envelope
stages from one "attack:decay:sustain:release" value.
"""

from __future__ import annotations

from typing import Any

from chuk_strudel.lang.args import DslArg, args_to_control, args_to_pattern
from chuk_strudel.lang.dsl import declare_param, dsl_operation, has_values
from chuk_strudel.models.voice import VoiceData, as_float, as_int, as_text
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.control import apply_control

gain = declare_param("gain", "gain")
velocity = declare_param("velocity", "velocity", aliases=("vel",))
postgain = declare_param("postgain", "postgain")
pan = declare_param("pan", "pan")
orbit = declare_param("orbit", "orbit", coerce=as_int, aliases=("o",))

# Unison voicing
unison = declare_param("unison", "voices", aliases=("uni",))
detune = declare_param("detune", "freq_spread")
spread = declare_param("spread", "pan_spread")
density = declare_param("density", "density", aliases=("d",))

attack = declare_param("attack", "attack")
decay = declare_param("decay", "decay")
sustain = declare_param("sustain", "sustain")
release = declare_param("release", "release")

_ENVELOPE_FIELDS = ("attack", "decay", "sustain", "release")


def adsr_mutation(data: VoiceData, raw: Any) -> VoiceData:
    """'0.01:0.1:0.5:0.3' -> attack, decay, sustain, release. Missing stages are left alone."""
    text = as_text(raw)
    if not text:
        return data
    changes = {}
    for field, part in zip(_ENVELOPE_FIELDS, text.split(":")):
        value = as_float(part)
        if value is not None:
            changes[field] = value
    return data.with_changes(**changes)


def _adsr_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    if control.value is not None:
        control = adsr_mutation(control, control.value)
    changes = {f: getattr(control, f) for f in _ENVELOPE_FIELDS if getattr(control, f) is not None}
    return source.with_changes(**changes)


def _apply_adsr(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return source
    return apply_control(source, args_to_control(args, adsr_mutation), _adsr_combine)


adsr = dsl_operation(
    "adsr",
    apply=_apply_adsr,
    create=lambda args: args_to_pattern(args, adsr_mutation),
)
