"""
Note names, MIDI numbers and frequencies.

Note names follow scientific pitch notation: letter, accidentals, octave
("c3", "Eb4", "f#", "bb2"). Legacy mini-notation spellings are accepted
after the first letter: 's' for sharp and 'f' for flat ("cs3", "ef").

A note without an octave is a pitch class. For sounding purposes it is
placed in the configured default octave (3).
"""

from __future__ import annotations

import math
import re

from chuk_strudel.config import get_config
from chuk_strudel.constants import REFERENCE_MIDI
from chuk_strudel.core.pitch import Interval, Pitch, PitchClass

_NOTE_REGEX = re.compile(r"^([a-gA-G]?)(#{1,}|b{1,}|x{1,}|)(-?\d*)\s*(.*)$")
_NUMERIC_REGEX = re.compile(r"^-?\d+(\.\d+)?$")


def _normalize_legacy(name: str) -> str:
    """'cs3' -> 'c#3', 'ef' -> 'eb'. Only the accidental part is rewritten."""
    if len(name) < 2:
        return name
    return name[0] + name[1:].replace("s", "#").replace("f", "b")


def parse_note(name: str) -> Pitch | None:
    """
    Parse a note name into a spelled pitch.

    Returns:
        Pitch (octave None for pitch classes), or None if not a note name
    """
    text = _normalize_legacy(name.strip())
    match = _NOTE_REGEX.match(text)
    if match is None:
        return None
    letter, accidentals, octave, rest = match.groups()
    if not letter or rest:
        return None

    step = "CDEFGAB".index(letter.upper())
    if not accidentals:
        alt = 0
    elif accidentals[0] == "b":
        alt = -len(accidentals)
    elif accidentals[0] == "x":
        alt = 2 * len(accidentals)
    else:
        alt = len(accidentals)

    return Pitch(step, alt, int(octave) if octave else None)


def is_note_name(name: str) -> bool:
    """True if the text parses as a note name."""
    return parse_note(name) is not None


def note_to_midi(name: str) -> float | None:
    """
    Convert a note name to a MIDI number.

    Numeric strings are taken as raw MIDI numbers ("60" -> 60).
    Pitch classes sound in the configured default octave.

    Returns:
        MIDI number, or None if the name cannot be read
    """
    text = name.strip()
    if not text:
        return None
    if _NUMERIC_REGEX.match(text):
        return float(text)

    pitch = parse_note(text)
    if pitch is None:
        return None
    if pitch.octave is None:
        pitch = Pitch(pitch.step, pitch.alt, get_config().default_octave)
    return float(pitch.midi) if pitch.midi is not None else None


def midi_to_freq(midi: float) -> float:
    """MIDI number to Hz (A4 = 69 = reference pitch)."""
    return get_config().reference_pitch * 2 ** ((midi - REFERENCE_MIDI) / 12)


def freq_to_midi(freq: float) -> float:
    """Hz to fractional MIDI number, rounded to cents."""
    midi = 12 * math.log2(freq / get_config().reference_pitch) + REFERENCE_MIDI
    return round(midi * 100) / 100


def note_to_freq(name: str) -> float | None:
    """Note name to Hz, or None if the name cannot be read."""
    midi = note_to_midi(name)
    return None if midi is None else midi_to_freq(midi)


def midi_to_note_name(midi: float, sharps: bool = True) -> str:
    """
    Nearest note name for a MIDI number.

    Args:
        midi: MIDI number (rounded to the nearest semitone)
        sharps: Spell black keys with sharps (default) or flats

    Returns:
        Name such as 'C4', 'F#2' or 'Bb1'
    """
    nearest = round(midi)
    pitch_class = PitchClass.from_midi(nearest).spell(prefer_flats=not sharps)
    octave = nearest // 12 - 1
    return f"{pitch_class}{octave}"


def freq_to_note_name(freq: float, sharps: bool = True) -> str:
    """Nearest note name for a frequency."""
    return midi_to_note_name(freq_to_midi(freq), sharps)


def transpose_note(name: str, interval: Interval | str) -> str:
    """
    Transpose a note name by a named interval.

    Spelling is interval-correct: C3 + 3m = Eb3, A + 3M = C#.

    Returns:
        The new note name, or "" if the note or interval cannot be read
    """
    pitch = parse_note(name)
    if pitch is None:
        return ""
    if isinstance(interval, str):
        try:
            interval = Interval.parse(interval)
        except ValueError:
            return ""
    return pitch.transpose(interval).name
