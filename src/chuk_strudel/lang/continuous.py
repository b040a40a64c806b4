"""
Continuous signals - sine, cosine, saw, isaw, tri, square.

Oscillators with values in [0, 1], meant to be used as controls:

    note("c e g").gain(sine)

The module attributes are the signal patterns themselves; the registry
exposes them as zero-argument functions.
"""

from __future__ import annotations

from chuk_strudel.constants import RegistryTable, Waveform
from chuk_strudel.lang.dsl import dsl_operation
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.primitives import signal


def _declare(waveform: Waveform) -> Pattern:
    pattern = signal(waveform)
    dsl_operation(
        waveform.value,
        apply=lambda source, args: pattern,
        create=lambda args: pattern,
        tables=(RegistryTable.FUNCTIONS,),
    )
    return pattern


sine = _declare(Waveform.SINE)
cosine = _declare(Waveform.COSINE)
saw = _declare(Waveform.SAW)
isaw = _declare(Waveform.ISAW)
tri = _declare(Waveform.TRI)
square = _declare(Waveform.SQUARE)
