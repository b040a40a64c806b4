"""
The pattern language - registry, arguments and vocabulary.

Importing this package registers the whole vocabulary. From Python:

    from chuk_strudel.lang import note, rev

    pattern = note("c e g").gain(0.5).firstOf(4, rev)
    events = pattern.query_arc(0, 1)

An embedding interpreter uses resolve_function / resolve_method instead.
"""

from chuk_strudel.lang.args import CallInfo, DslArg, args_to_control, args_to_pattern, normalize
from chuk_strudel.lang.conditional import first_of, last_of, when
from chuk_strudel.lang.continuous import cosine, isaw, saw, sine, square, tri
from chuk_strudel.lang.dsl import DslOperation, declare_param, dsl_operation
from chuk_strudel.lang.dynamics import adsr, attack, decay, gain, pan, release, sustain
from chuk_strudel.lang.registry import (
    REGISTRY,
    DslRegistry,
    initialize_registry,
    resolve_function,
    resolve_method,
)
from chuk_strudel.lang.structural import (
    cat,
    euclid,
    euclid_rot,
    layer,
    mask,
    segment,
    seq,
    stack,
    struct,
    superimpose,
)
from chuk_strudel.lang.tempo import early, fast, late, palindrome, rev, slow
from chuk_strudel.lang.tonal import n, note, resolve_note, scale, sound, transpose, transpose_voice

initialize_registry()

__all__ = [
    # Registry
    "REGISTRY",
    "DslRegistry",
    "initialize_registry",
    "resolve_function",
    "resolve_method",
    # Declarations
    "DslOperation",
    "declare_param",
    "dsl_operation",
    # Arguments
    "CallInfo",
    "DslArg",
    "args_to_control",
    "args_to_pattern",
    "normalize",
    # Tonal
    "n",
    "note",
    "resolve_note",
    "scale",
    "sound",
    "transpose",
    "transpose_voice",
    # Structure and tempo
    "cat",
    "early",
    "euclid",
    "euclid_rot",
    "fast",
    "late",
    "layer",
    "mask",
    "palindrome",
    "rev",
    "segment",
    "seq",
    "slow",
    "stack",
    "struct",
    "superimpose",
    # Conditionals
    "first_of",
    "last_of",
    "when",
    # Dynamics
    "adsr",
    "attack",
    "decay",
    "gain",
    "pan",
    "release",
    "sustain",
    # Signals
    "cosine",
    "isaw",
    "saw",
    "sine",
    "square",
    "tri",
]
