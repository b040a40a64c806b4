"""
Tonal and time primitives.

- PitchClass, Pitch, Interval: spelled pitches on the line of fifths
- Note helpers: note names <-> MIDI <-> Hz, interval transposition
- ScaleType, Scale, ScaleLibrary: YAML-defined scales and scale steps
- TimeSpan: half-open arcs of cycle time; bjorklund: Euclidean rhythms
"""

from chuk_strudel.core.note import (
    freq_to_midi,
    freq_to_note_name,
    is_note_name,
    midi_to_freq,
    midi_to_note_name,
    note_to_freq,
    note_to_midi,
    parse_note,
    transpose_note,
)
from chuk_strudel.core.pitch import Interval, Pitch, PitchClass
from chuk_strudel.core.rhythm import TimeLike, TimeSpan, bjorklund, cycle_of, to_time
from chuk_strudel.core.scale import Scale, ScaleLibrary, ScaleType, get_scale_library, scale_steps

__all__ = [
    # Pitch
    "PitchClass",
    "Pitch",
    "Interval",
    # Notes
    "parse_note",
    "is_note_name",
    "note_to_midi",
    "note_to_freq",
    "midi_to_freq",
    "freq_to_midi",
    "midi_to_note_name",
    "freq_to_note_name",
    "transpose_note",
    # Scale
    "ScaleType",
    "Scale",
    "ScaleLibrary",
    "get_scale_library",
    "scale_steps",
    # Time
    "TimeLike",
    "TimeSpan",
    "bjorklund",
    "cycle_of",
    "to_time",
]
