"""
Tonal vocabulary - note, n, scale, transpose, sound and friends.

Pitch can reach a voice three ways:

- by name:              note("c e g")
- by scale degree:      n("0 2 4").scale("C4:major")
- by raw value:         "0 2 4".scale("C:minor")

resolve_note() turns whatever is present into a consistent note name and
frequency. An index is consumed when it resolves through a scale, so a
later merge never re-applies it.
"""

from __future__ import annotations

import logging
from typing import Any

from chuk_strudel.config import get_config
from chuk_strudel.constants import ArgKind
from chuk_strudel.core.note import freq_to_note_name, is_note_name, note_to_freq, transpose_note
from chuk_strudel.core.pitch import Interval
from chuk_strudel.core.scale import scale_steps
from chuk_strudel.lang.args import DslArg, args_to_control, args_to_pattern
from chuk_strudel.lang.dsl import declare_param, dsl_operation, has_values
from chuk_strudel.models.voice import EMPTY_VOICE, VoiceData, as_float, as_int, as_text
from chuk_strudel.pattern.base import Pattern
from chuk_strudel.pattern.control import apply_control
from chuk_strudel.pattern.primitives import MapPattern

logger = logging.getLogger(__name__)


# --- resolution ---------------------------------------------------------------


def clean_scale_name(name: str) -> str:
    """'C4:major' -> 'C4 major'."""
    return name.replace(":", " ").strip()


def with_default_gain(data: VoiceData) -> VoiceData:
    """Set the reference gain unless a gain is already present."""
    if data.gain is not None:
        return data
    return data.with_changes(gain=get_config().default_gain)


def _numeric_index(value: Any) -> int | None:
    """A raw value usable as an index (booleans are not)."""
    if isinstance(value, bool):
        return None
    return as_int(value)


def _note_name_of(value: Any) -> str | None:
    if isinstance(value, str) and is_note_name(value):
        return value.strip()
    return None


def resolve_note(data: VoiceData, explicit_index: int | None = None) -> VoiceData:
    """
    Derive a note name and frequency from what the voice carries.

    Effective index: `explicit_index`, else `sound_index`, else a numeric
    raw `value`. With an index and a scale, the index-th scale step becomes
    the note and both the index and the value are cleared.

    Otherwise an explicit index is kept as a sample index, a numeric value
    that produced the index moves to `sound_index`, and the note comes from
    `note`, else from a `value` that reads as a note name. The first letter
    is capitalised and the frequency derived when the name can be read.

    Gain is set to the configured default once, never overwritten.
    """
    scale_name = clean_scale_name(data.scale) if data.scale else None
    value_index = _numeric_index(data.value)
    if explicit_index is not None:
        index = explicit_index
    elif data.sound_index is not None:
        index = data.sound_index
    else:
        index = value_index

    if scale_name != data.scale:
        data = data.with_changes(scale=scale_name or None)
    data = with_default_gain(data)

    if index is not None and scale_name:
        name = scale_steps(scale_name)(index)
        if name:
            return data.with_changes(note=name, freq_hz=note_to_freq(name), sound_index=None, value=None)

    changes: dict[str, Any] = {}
    if explicit_index is not None:
        changes["sound_index"] = explicit_index
    elif data.sound_index is None and value_index is not None:
        changes["sound_index"] = value_index
        changes["value"] = None

    name = data.note
    if name is None:
        name = _note_name_of(data.value)
        if name is not None:
            changes["value"] = None
    if name:
        name = name[:1].upper() + name[1:]
        changes["note"] = name
        freq = note_to_freq(name)
        if freq is not None:
            changes["freq_hz"] = freq

    return data.with_changes(**changes)


def _coerce_amount(amount: Any) -> tuple[float, Interval | None] | None:
    """(semitones, interval) from a number first, then an interval name."""
    number = as_float(amount)
    if number is not None:
        interval = Interval.from_semitones(int(number)) if number.is_integer() else None
        return number, interval

    text = as_text(amount)
    if not text:
        return None
    try:
        interval = Interval.parse(text)
    except ValueError:
        return None
    return float(interval.semitones), interval


def transpose_voice(data: VoiceData, amount: Any) -> VoiceData:
    """
    Transpose a voice by semitones or by a named interval.

    Interval arithmetic on the note name is tried first, so spelling
    follows the interval (C3 + 3m = Eb3). Without a usable note name the
    frequency is shifted and the nearest sharp note name derived from it.

    The raw value is consumed and the gain defaulted. An unreadable amount
    leaves the voice unchanged.
    """
    coerced = _coerce_amount(amount)
    if coerced is None:
        logger.warning(f"Cannot transpose by {amount!r}; voice unchanged")
        return data
    semitones, interval = coerced

    name = data.note or _note_name_of(data.value)
    data = with_default_gain(data.with_changes(value=None))

    if name and interval is not None:
        moved = transpose_note(name, interval)
        if moved:
            return data.with_changes(note=moved, freq_hz=note_to_freq(moved))

    freq = data.freq_hz
    if freq is None and name:
        freq = note_to_freq(name)
    if freq is None or freq <= 0:
        return data

    shifted = freq * 2 ** (semitones / 12)
    return data.with_changes(note=freq_to_note_name(shifted), freq_hz=shifted)


# --- atom mutations -----------------------------------------------------------


def note_mutation(data: VoiceData, raw: Any) -> VoiceData:
    """Set the note name and its frequency."""
    text = as_text(raw)
    if not text:
        return data
    if is_note_name(text):
        text = text[:1].upper() + text[1:]
    return with_default_gain(data.with_changes(note=text, freq_hz=note_to_freq(text)))


def n_mutation(data: VoiceData, raw: Any) -> VoiceData:
    """Set the index; unreadable values keep the existing one."""
    index = _numeric_index(raw)
    if index is None:
        index = data.sound_index
    return with_default_gain(data.with_changes(sound_index=index))


def scale_mutation(data: VoiceData, raw: Any) -> VoiceData:
    text = as_text(raw)
    if not text:
        return data
    return resolve_note(data.with_changes(scale=clean_scale_name(text)))


def sound_mutation(data: VoiceData, raw: Any) -> VoiceData:
    """'bd:3:0.5' -> sound bd, index 3, gain 0.5."""
    text = as_text(raw)
    if not text:
        return data
    name, *rest = text.split(":")
    changes: dict[str, Any] = {"sound": name}
    if rest and as_int(rest[0]) is not None:
        changes["sound_index"] = as_int(rest[0])
    if len(rest) > 1 and as_float(rest[1]) is not None:
        changes["gain"] = as_float(rest[1])
    return data.with_changes(**changes)


def _to_note(data: VoiceData) -> VoiceData:
    if data.note is None and data.value is not None:
        data = note_mutation(data, data.value)
    return resolve_note(data).with_changes(sound_index=None, value=None)


def _to_index(data: VoiceData) -> VoiceData:
    index = data.sound_index if data.sound_index is not None else _numeric_index(data.value)
    return with_default_gain(data.with_changes(sound_index=index, value=None))


def _value_to_scale(data: VoiceData) -> VoiceData:
    return scale_mutation(data.with_changes(value=None), data.value)


def _value_to_sound(data: VoiceData) -> VoiceData:
    return sound_mutation(data.with_changes(value=None), data.value)


# --- combines -----------------------------------------------------------------


def _note_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    name = control.note or as_text(control.value)
    return note_mutation(source, name) if name else source


def _n_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    raw = control.sound_index if control.sound_index is not None else control.value
    return n_mutation(source, raw)


def _scale_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    name = control.scale or as_text(control.value)
    if not name:
        return source
    return resolve_note(source.with_changes(scale=clean_scale_name(name)))


def _sound_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    if control.sound is None:
        control = sound_mutation(EMPTY_VOICE, control.value)
        if control.sound is None:
            return source
    return source.with_changes(
        sound=control.sound,
        sound_index=control.sound_index if control.sound_index is not None else source.sound_index,
        gain=control.gain if control.gain is not None else source.gain,
    )


def _transpose_combine(source: VoiceData, control: VoiceData) -> VoiceData:
    if control.value is None:
        return source
    return transpose_voice(source, control.value)


# --- declarations -------------------------------------------------------------


def _apply_note(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return MapPattern(source, _to_note)
    return apply_control(source, args_to_control(args, note_mutation), _note_combine)


note = dsl_operation(
    "note",
    apply=_apply_note,
    create=lambda args: MapPattern(args_to_pattern(args, note_mutation), _to_note),
)


def _apply_n(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return MapPattern(source, _to_index)
    return apply_control(source, args_to_control(args, n_mutation), _n_combine)


n = dsl_operation(
    "n",
    apply=_apply_n,
    create=lambda args: MapPattern(args_to_pattern(args, n_mutation), _to_index),
)


def _apply_scale(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return MapPattern(source, _value_to_scale)
    return apply_control(source, args_to_control(args, scale_mutation), _scale_combine)


scale = dsl_operation(
    "scale",
    apply=_apply_scale,
    create=lambda args: args_to_pattern(args, scale_mutation),
)


def _apply_sound(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return MapPattern(source, _value_to_sound)
    return apply_control(source, args_to_control(args, sound_mutation), _sound_combine)


sound = dsl_operation(
    "sound",
    apply=_apply_sound,
    create=lambda args: args_to_pattern(args, sound_mutation),
    aliases=("s",),
)


def _apply_transpose(source: Pattern, args: list[DslArg]) -> Pattern:
    if not has_values(args):
        return source
    return apply_control(source, args_to_control(args), _transpose_combine)


def _create_transpose(args: list[DslArg]) -> Pattern:
    # transpose(amount, pattern) transposes the pattern; otherwise the
    # arguments are a pattern of amounts
    if len(args) >= 2 and args[-1].kind == ArgKind.PATTERN:
        return _apply_transpose(args[-1].value, args[:-1])
    return args_to_pattern(args)


transpose = dsl_operation("transpose", apply=_apply_transpose, create=_create_transpose)

bank = declare_param("bank", "bank", coerce=as_text)
legato = declare_param("legato", "legato", aliases=("clip",))
vibrato = declare_param("vibrato", "vibrato", aliases=("vib",))
vibrato_mod = declare_param("vibratoMod", "vibrato_mod", aliases=("vibmod",))
accelerate = declare_param("accelerate", "accelerate")
