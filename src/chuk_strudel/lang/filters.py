"""
Filter vocabulary.

Four filters (low-pass, high-pass, band-pass, notch), each with a cutoff,
a resonance and a five-stage envelope. VoiceData.filters turns the fields
into an ordered filter chain.
"""

from __future__ import annotations

from chuk_strudel.lang.dsl import DslOperation, declare_param

# Cutoff and resonance: (name, field, aliases)
_FILTER_PARAMS: tuple[tuple[str, str, tuple[str, ...]], ...] = (
    ("lpf", "cutoff", ("cutoff", "ctf", "lp")),
    ("resonance", "resonance", ("res", "lpq")),
    ("hpf", "hcutoff", ("hp", "hcutoff")),
    ("hresonance", "hresonance", ("hres", "hpq")),
    ("bandf", "bandf", ("bpf", "bp")),
    ("bandq", "bandq", ("bpq",)),
    ("notchf", "notchf", ()),
    ("nresonance", "nresonance", ("nres",)),
)

# Envelope stages: DSL suffix, short suffix, VoiceData field suffix
_ENVELOPE_STAGES: tuple[tuple[str, str, str], ...] = (
    ("attack", "a", "attack"),
    ("decay", "d", "decay"),
    ("sustain", "s", "sustain"),
    ("release", "r", "release"),
    ("env", "e", "env"),
)

_ENVELOPE_PREFIXES = ("lp", "hp", "bp", "nf")


def _declare_filters() -> dict[str, DslOperation]:
    operations = {}
    for name, field, aliases in _FILTER_PARAMS:
        operations[name] = declare_param(name, field, aliases=aliases)

    # lpattack / lpa ... nfenv / nfe
    for prefix in _ENVELOPE_PREFIXES:
        for stage, short, suffix in _ENVELOPE_STAGES:
            name = f"{prefix}{stage}"
            operations[name] = declare_param(name, f"{prefix}_{suffix}", aliases=(f"{prefix}{short}",))
    return operations


FILTER_OPERATIONS = _declare_filters()

lpf = FILTER_OPERATIONS["lpf"]
hpf = FILTER_OPERATIONS["hpf"]
bandf = FILTER_OPERATIONS["bandf"]
notchf = FILTER_OPERATIONS["notchf"]
resonance = FILTER_OPERATIONS["resonance"]
