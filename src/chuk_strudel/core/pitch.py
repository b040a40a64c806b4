"""
Pitch primitives - PitchClass, Interval and pitch coordinates.

PitchClass represents the 12 chromatic pitches (octave-independent).
Interval is a *named* interval ("5P", "-2M", "3m"): unlike a bare semitone
count it knows its letter distance, so transposing by it preserves
scale-correct spelling (C + 3m = Eb, never D#).

Both notes and intervals are encoded as coordinates on the line of fifths:
(fifths, octaves). Transposition is coordinate addition.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import IntEnum
from typing import ClassVar

from chuk_strudel.constants import ErrorMessages

# Display name mappings (module level to avoid IntEnum member issues)
_SHARP_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
_FLAT_NAMES: list[str] = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]

# Letter steps C D E F G A B
STEP_LETTERS = "CDEFGABC"
# Semitones of each natural step above C
STEP_SEMITONES: tuple[int, ...] = (0, 2, 4, 5, 7, 9, 11)

# Position of each step on the line of fifths (C=0, G=1, D=2 ...)
_FIFTHS: tuple[int, ...] = (0, 2, 4, -1, 1, 3, 5)
# Octave correction per step when moving along fifths
_STEPS_TO_OCTS: tuple[int, ...] = tuple((f * 7) // 12 for f in _FIFTHS)
# Inverse of _FIFTHS for unaltered positions
_FIFTHS_TO_STEPS: tuple[int, ...] = (3, 0, 4, 1, 5, 2, 6)

# Interval base qualities per step: P = perfectable, M = majorable
_INTERVAL_TYPES = "PMMPPMM"
# Interval number / quality for each semitone count 0-11
_SEMITONE_NUMBERS: tuple[int, ...] = (1, 2, 2, 3, 3, 4, 5, 5, 6, 6, 7, 7)
_SEMITONE_QUALITIES: tuple[str, ...] = ("P", "m", "M", "m", "M", "P", "d", "P", "m", "M", "m", "M")

# "5P", "-2M", "3dd"
_INTERVAL_REGEX = re.compile(r"^([-+]?\d+)(d{1,4}|m|M|P|A{1,4})$")
# "P5", "M-2" (quality first, shorthand form)
_INTERVAL_SHORTHAND_REGEX = re.compile(r"^(AA|A|P|M|m|d|dd)([-+]?\d+)$")


class PitchClass(IntEnum):
    """
    The 12 chromatic pitch classes (0-11).

    Octave-independent - C4 and C5 are both PitchClass.C.
    Enharmonic equivalents share the same value (C# == Db == 1).
    """

    C = 0
    Cs = 1  # C# / Db
    D = 2
    Ds = 3  # D# / Eb
    E = 4
    F = 5
    Fs = 6  # F# / Gb
    G = 7
    Gs = 8  # G# / Ab
    A = 9
    As = 10  # A# / Bb
    B = 11

    def transpose(self, semitones: int) -> PitchClass:
        """Transpose by a number of semitones (positive or negative)."""
        return PitchClass((self.value + semitones) % 12)

    def to_midi(self, octave: int = 4) -> int:
        """Convert to MIDI note number. C4 = 60."""
        return self.value + (octave + 1) * 12

    def spell(self, prefer_flats: bool = False) -> str:
        """Get human-readable name."""
        names = _FLAT_NAMES if prefer_flats else _SHARP_NAMES
        return names[self.value]

    @classmethod
    def from_midi(cls, midi_note: int) -> PitchClass:
        """Extract pitch class from MIDI note number."""
        return cls(midi_note % 12)


@dataclass(frozen=True)
class Pitch:
    """
    A spelled pitch: letter step, alteration and optional octave.

    step is 0-6 (C-B), alt counts sharps (+) or flats (-).
    octave None means a pitch class ("Eb" rather than "Eb4").
    direction only matters for intervals (-1 = descending).
    """

    step: int
    alt: int = 0
    octave: int | None = None
    direction: int = 1

    def coord(self) -> tuple[int, ...]:
        """Encode as (fifths,) or (fifths, octaves)."""
        fifths = _FIFTHS[self.step] + 7 * self.alt
        if self.octave is None:
            return (self.direction * fifths,)
        octaves = self.octave - _STEPS_TO_OCTS[self.step] - 4 * self.alt
        return (self.direction * fifths, self.direction * octaves)

    @classmethod
    def from_coord(cls, coord: tuple[int, ...]) -> Pitch:
        """Decode a (fifths[, octaves]) coordinate back to a spelled pitch."""
        fifths = coord[0]
        step = _FIFTHS_TO_STEPS[(fifths + 1) % 7]
        alt = (fifths + 1) // 7
        if len(coord) == 1:
            return cls(step, alt)
        octave = coord[1] + 4 * alt + _STEPS_TO_OCTS[step]
        return cls(step, alt, octave)

    @property
    def letter(self) -> str:
        return STEP_LETTERS[self.step]

    @property
    def accidentals(self) -> str:
        return "#" * self.alt if self.alt > 0 else "b" * -self.alt

    @property
    def name(self) -> str:
        """Scientific name, e.g. 'Bb1' or 'F#'."""
        octave = "" if self.octave is None else str(self.octave)
        return f"{self.letter}{self.accidentals}{octave}"

    @property
    def chroma(self) -> int:
        """Pitch class number 0-11."""
        return (STEP_SEMITONES[self.step] + self.alt) % 12

    @property
    def midi(self) -> int | None:
        """MIDI number, None for pitch classes."""
        if self.octave is None:
            return None
        return STEP_SEMITONES[self.step] + self.alt + 12 * (self.octave + 1)

    def transpose(self, interval: Interval) -> Pitch:
        """Move by an interval; pitch classes only move along fifths."""
        mine = self.coord()
        other = interval.coord()
        if len(mine) == 1:
            return Pitch.from_coord((mine[0] + other[0],))
        return Pitch.from_coord((mine[0] + other[0], mine[1] + other[1]))

    def shift_octaves(self, octaves: int) -> Pitch:
        """Move by whole octaves (no-op for pitch classes)."""
        if self.octave is None:
            return self
        return Pitch(self.step, self.alt, self.octave + octaves)


@dataclass(frozen=True)
class Interval:
    """
    A named interval such as '3m', '5P' or '-2M'.

    number is the signed interval number (1 = unison, 8 = octave),
    quality one of P, M, m, A..., d....

    Immutable and hashable.
    """

    number: int
    quality: str

    # Named intervals (class constants)
    UNISON: ClassVar[Interval]
    MINOR_SECOND: ClassVar[Interval]
    MAJOR_SECOND: ClassVar[Interval]
    MINOR_THIRD: ClassVar[Interval]
    MAJOR_THIRD: ClassVar[Interval]
    PERFECT_FOURTH: ClassVar[Interval]
    TRITONE: ClassVar[Interval]
    PERFECT_FIFTH: ClassVar[Interval]
    MINOR_SIXTH: ClassVar[Interval]
    MAJOR_SIXTH: ClassVar[Interval]
    MINOR_SEVENTH: ClassVar[Interval]
    MAJOR_SEVENTH: ClassVar[Interval]
    OCTAVE: ClassVar[Interval]

    def __post_init__(self) -> None:
        if self.number == 0:
            raise ValueError("Interval number cannot be 0")
        if _INTERVAL_TYPES[self.step] == "P" and self.quality in ("M", "m"):
            raise ValueError(f"Perfect interval cannot be {self.quality}: {self}")
        if _INTERVAL_TYPES[self.step] == "M" and self.quality == "P":
            raise ValueError(f"Majorable interval cannot be perfect: {self}")

    @property
    def direction(self) -> int:
        return -1 if self.number < 0 else 1

    @property
    def step(self) -> int:
        """Letter distance within the octave (0-6)."""
        return (abs(self.number) - 1) % 7

    @property
    def octaves(self) -> int:
        """Whole octaves spanned."""
        return (abs(self.number) - 1) // 7

    @property
    def alt(self) -> int:
        """Alteration relative to the major/perfect form."""
        perfectable = _INTERVAL_TYPES[self.step] == "P"
        q = self.quality
        if q in ("M", "P"):
            return 0
        if q == "m":
            return -1
        if q.startswith("A"):
            return len(q)
        # diminished: one step below perfect, two below major
        return -len(q) if perfectable else -(len(q) + 1)

    @property
    def semitones(self) -> int:
        """Signed size in semitones."""
        return self.direction * (STEP_SEMITONES[self.step] + self.alt + 12 * self.octaves)

    def coord(self) -> tuple[int, int]:
        """Line-of-fifths coordinate, signed by direction."""
        pitch = Pitch(self.step, self.alt, self.octaves, self.direction)
        fifths, octaves = pitch.coord()
        return fifths, octaves

    def __neg__(self) -> Interval:
        return Interval(-self.number, self.quality)

    def __str__(self) -> str:
        return f"{self.number}{self.quality}"

    @classmethod
    def parse(cls, name: str) -> Interval:
        """
        Parse an interval name.

        Accepts number-first ('5P', '-2M', '3m') and quality-first ('P5', 'M-2').

        Raises:
            ValueError: If the name is not an interval
        """
        text = name.strip()
        match = _INTERVAL_REGEX.match(text)
        if match:
            return cls(int(match.group(1)), match.group(2))
        match = _INTERVAL_SHORTHAND_REGEX.match(text)
        if match:
            return cls(int(match.group(2)), match.group(1))
        raise ValueError(ErrorMessages.INVALID_INTERVAL.format(name=name))

    @classmethod
    def from_semitones(cls, semitones: int) -> Interval:
        """
        Canonical interval for a semitone count.

        7 -> 5P, 12 -> 8P, 2 -> 2M, -2 -> -2M, 6 -> 5d.
        """
        direction = -1 if semitones < 0 else 1
        size = abs(semitones)
        chroma = size % 12
        octaves = size // 12
        number = _SEMITONE_NUMBERS[chroma] + 7 * octaves
        return cls(direction * number, _SEMITONE_QUALITIES[chroma])


Interval.UNISON = Interval(1, "P")
Interval.MINOR_SECOND = Interval(2, "m")
Interval.MAJOR_SECOND = Interval(2, "M")
Interval.MINOR_THIRD = Interval(3, "m")
Interval.MAJOR_THIRD = Interval(3, "M")
Interval.PERFECT_FOURTH = Interval(4, "P")
Interval.TRITONE = Interval(5, "d")
Interval.PERFECT_FIFTH = Interval(5, "P")
Interval.MINOR_SIXTH = Interval(6, "m")
Interval.MAJOR_SIXTH = Interval(6, "M")
Interval.MINOR_SEVENTH = Interval(7, "m")
Interval.MAJOR_SEVENTH = Interval(7, "M")
Interval.OCTAVE = Interval(8, "P")
