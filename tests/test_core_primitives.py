"""
Tests for core tonal and time primitives.

Tests cover:
- PitchClass, Pitch and Interval (pitch.py)
- Note names, MIDI and frequencies (note.py)
- ScaleType, Scale, ScaleLibrary (scale.py)
- TimeSpan and Euclidean rhythms (rhythm.py)
"""

from fractions import Fraction
from pathlib import Path

import pytest

from chuk_strudel.core import (
    Interval,
    Pitch,
    PitchClass,
    ScaleLibrary,
    ScaleType,
    TimeSpan,
    bjorklund,
    freq_to_midi,
    freq_to_note_name,
    is_note_name,
    midi_to_freq,
    midi_to_note_name,
    note_to_freq,
    note_to_midi,
    parse_note,
    scale_steps,
    to_time,
    transpose_note,
)


class TestPitchClass:
    """Tests for PitchClass enum."""

    def test_pitch_values(self) -> None:
        """Pitch classes have correct values."""
        assert PitchClass.C == 0
        assert PitchClass.E == 4
        assert PitchClass.G == 7
        assert PitchClass.B == 11

    def test_transpose_wraps(self) -> None:
        """Transposing wraps around the octave."""
        assert PitchClass.B.transpose(1) == PitchClass.C
        assert PitchClass.C.transpose(-1) == PitchClass.B

    def test_to_midi(self) -> None:
        """C4 is MIDI 60."""
        assert PitchClass.C.to_midi(4) == 60
        assert PitchClass.A.to_midi(4) == 69

    def test_spell(self) -> None:
        """Black keys spell with sharps or flats."""
        assert PitchClass.Cs.spell() == "C#"
        assert PitchClass.Cs.spell(prefer_flats=True) == "Db"


class TestPitch:
    """Tests for spelled pitches."""

    def test_name(self) -> None:
        """Names combine letter, accidentals and octave."""
        assert Pitch(6, -1, 1).name == "Bb1"
        assert Pitch(3, 1).name == "F#"

    def test_midi(self) -> None:
        """MIDI numbers follow scientific pitch notation."""
        assert Pitch(0, 0, 4).midi == 60
        assert Pitch(2, -1, 4).midi == 63
        assert Pitch(0, 0).midi is None

    def test_coord_round_trip(self) -> None:
        """Coordinates decode back to the same spelling."""
        for pitch in (Pitch(0, 0, 3), Pitch(6, -1, 1), Pitch(3, 1, 5), Pitch(2, -2, 0)):
            assert Pitch.from_coord(pitch.coord()) == pitch

    def test_shift_octaves(self) -> None:
        """Octave shifts leave pitch classes alone."""
        assert Pitch(0, 0, 3).shift_octaves(2).name == "C5"
        assert Pitch(0, 0).shift_octaves(2).name == "C"


class TestInterval:
    """Tests for named intervals."""

    def test_parse(self) -> None:
        """Number-first and quality-first forms parse."""
        assert Interval.parse("5P") == Interval(5, "P")
        assert Interval.parse("-2M") == Interval(-2, "M")
        assert Interval.parse("P5") == Interval(5, "P")
        assert Interval.parse("3m") == Interval.MINOR_THIRD

    def test_parse_invalid(self) -> None:
        """Unknown names raise ValueError naming the input."""
        with pytest.raises(ValueError, match="Invalid interval: 'bogus'"):
            Interval.parse("bogus")

    def test_invalid_quality(self) -> None:
        """Perfect intervals cannot be major or minor."""
        with pytest.raises(ValueError):
            Interval(5, "M")
        with pytest.raises(ValueError):
            Interval(0, "P")

    def test_semitones(self) -> None:
        """Semitone sizes are signed."""
        assert Interval.parse("5P").semitones == 7
        assert Interval.parse("-2M").semitones == -2
        assert Interval.parse("8P").semitones == 12
        assert Interval.TRITONE.semitones == 6

    def test_from_semitones(self) -> None:
        """Semitone counts map to canonical names."""
        assert str(Interval.from_semitones(7)) == "5P"
        assert str(Interval.from_semitones(-2)) == "-2M"
        assert str(Interval.from_semitones(12)) == "8P"
        assert str(Interval.from_semitones(6)) == "5d"

    def test_from_semitones_preserves_size(self) -> None:
        """The canonical interval always has the requested size."""
        for semitones in range(-24, 25):
            assert Interval.from_semitones(semitones).semitones == semitones

    def test_negation(self) -> None:
        """Negation flips direction."""
        assert -Interval.PERFECT_FIFTH == Interval(-5, "P")


class TestNotes:
    """Tests for note names, MIDI and frequency conversion."""

    def test_parse_note(self) -> None:
        """Note names parse with or without octave."""
        assert parse_note("c3") == Pitch(0, 0, 3)
        assert parse_note("Eb4") == Pitch(2, -1, 4)
        assert parse_note("f#") == Pitch(3, 1)

    def test_parse_legacy_accidentals(self) -> None:
        """'s' and 'f' after the letter mean sharp and flat."""
        assert parse_note("cs3") == Pitch(0, 1, 3)
        assert parse_note("ef") == Pitch(2, -1)
        assert parse_note("f3") == Pitch(3, 0, 3)

    def test_not_note_names(self) -> None:
        """Words that are not notes are rejected."""
        assert not is_note_name("bd")
        assert not is_note_name("t")
        assert not is_note_name("0")
        assert not is_note_name("")

    def test_note_to_midi(self) -> None:
        """Pitch classes sound in octave 3; numbers are raw MIDI."""
        assert note_to_midi("c3") == 48
        assert note_to_midi("c") == 48
        assert note_to_midi("60") == 60
        assert note_to_midi("xyz") is None

    def test_frequencies(self) -> None:
        """A4 is the reference pitch."""
        assert midi_to_freq(69) == 440.0
        assert note_to_freq("a4") == 440.0
        assert note_to_freq("C4") == pytest.approx(261.6256, abs=1e-3)
        assert note_to_freq("nope") is None
        assert freq_to_midi(440.0) == 69.0

    def test_midi_to_note_name(self) -> None:
        """Nearest note names use sharps by default."""
        assert midi_to_note_name(60) == "C4"
        assert midi_to_note_name(61) == "C#4"
        assert midi_to_note_name(61, sharps=False) == "Db4"
        assert freq_to_note_name(261.63) == "C4"

    def test_transpose_note_spelling(self) -> None:
        """Interval transposition keeps letter names correct."""
        assert transpose_note("C3", "3m") == "Eb3"
        assert transpose_note("A", "3M") == "C#"
        assert transpose_note("C2", "-2M") == "Bb1"
        assert transpose_note("C2", "4P") == "F2"
        assert transpose_note("C2", "1P") == "C2"

    def test_transpose_note_failures(self) -> None:
        """Unreadable notes or intervals give an empty name."""
        assert transpose_note("xyz", "3m") == ""
        assert transpose_note("C3", "zz") == ""


class TestScales:
    """Tests for scale types, scales and the scale library."""

    def test_library_lookup(self) -> None:
        """Scale types resolve by name or alias, case-insensitively."""
        library = ScaleLibrary()
        major = library.get_scale_type("major")
        assert major is not None
        assert len(major) == 7
        assert library.get_scale_type("Ionian") == major
        assert library.get_scale_type("nope") is None

    def test_list_scale_types(self) -> None:
        """Each scale type is listed once."""
        names = [s.name for s in ScaleLibrary().list_scale_types()]
        assert "major" in names
        assert "ionian" not in names
        assert len(names) == len(set(names))

    def test_steps_wrap_octaves(self) -> None:
        """Indices past the scale length move to the next octave."""
        scale = ScaleLibrary().parse("C4 major")
        assert scale is not None
        assert [scale.step(i) for i in range(3)] == ["C4", "D4", "E4"]
        assert scale.step(7) == "C5"
        assert scale.step(-1) == "B3"

    def test_colon_separator(self) -> None:
        """'C:minor' is the same as 'C minor'."""
        scale = ScaleLibrary().parse("C:minor")
        assert scale is not None
        assert scale.step(2) == "Eb"

    def test_tonic_defaults_to_major(self) -> None:
        """A bare tonic is a major scale."""
        scale = ScaleLibrary().parse("D")
        assert scale is not None
        assert scale.scale_type.name == "major"
        assert scale.step(2) == "F#"

    def test_scale_without_tonic(self) -> None:
        """Without a tonic there are no steps."""
        scale = ScaleLibrary().parse("dorian")
        assert scale is not None
        assert scale.step(0) == ""

    def test_unknown_scale(self) -> None:
        """Unknown scale types parse to None."""
        assert ScaleLibrary().parse("C4 nonsense") is None

    def test_scale_steps(self) -> None:
        """scale_steps gives a step function, empty for unknown scales."""
        assert scale_steps("C4 major")(2) == "E4"
        assert scale_steps("C4 nonsense")(2) == ""

    def test_project_scales_override(self, temp_dir: Path) -> None:
        """Project scale files override the library."""
        (temp_dir / "mine.yaml").write_text(
            "scales:\n  major:\n    intervals: 1P 2M 3M\n  tritone:\n    intervals: [1P, 5d]\n"
        )
        library = ScaleLibrary(project_path=temp_dir)
        major = library.get_scale_type("major")
        assert major is not None
        assert len(major) == 3
        tritone = library.get_scale_type("tritone")
        assert tritone is not None
        assert tritone.intervals == (Interval.UNISON, Interval.TRITONE)

    def test_unreadable_scale_file_skipped(self, temp_dir: Path) -> None:
        """A broken file does not hide the library."""
        (temp_dir / "broken.yaml").write_text("scales:\n  bad:\n    intervals: 9Z\n")
        library = ScaleLibrary(project_path=temp_dir)
        assert library.get_scale_type("major") is not None
        assert library.get_scale_type("bad") is None

    def test_register(self) -> None:
        """Scale types can be registered programmatically."""
        library = ScaleLibrary()
        library.register(ScaleType("fifths", (Interval.UNISON, Interval.PERFECT_FIFTH), ("quints",)))
        scale = library.parse("C3 quints")
        assert scale is not None
        assert [scale.step(i) for i in range(3)] == ["C3", "G3", "C4"]

    def test_empty_scale_type_rejected(self) -> None:
        """A scale type needs intervals."""
        with pytest.raises(ValueError):
            ScaleType("empty", ())


class TestTimeSpan:
    """Tests for cycle time spans."""

    def test_float_conversion_is_exact(self) -> None:
        """Floats convert through their shortest repr."""
        assert to_time(0.1) == Fraction(1, 10)

    def test_cycle_spans(self) -> None:
        """Spans split at cycle boundaries."""
        spans = TimeSpan.of(0.5, 2.25).cycle_spans()
        assert [(s.begin, s.end) for s in spans] == [
            (Fraction(1, 2), Fraction(1)),
            (Fraction(1), Fraction(2)),
            (Fraction(2), Fraction(9, 4)),
        ]

    def test_intersection(self) -> None:
        """Touching spans do not intersect."""
        assert TimeSpan.of(0, 1).intersection(TimeSpan.of(1, 2)) is None
        assert TimeSpan.of(0, 1).intersection(TimeSpan.of(0.5, 2)) == TimeSpan.of(0.5, 1)

    def test_reversed_span_rejected(self) -> None:
        """End before begin is invalid."""
        with pytest.raises(ValueError):
            TimeSpan.of(1, 0)


class TestBjorklund:
    """Tests for Euclidean rhythm generation."""

    @pytest.mark.parametrize(
        ("pulses", "steps", "expected"),
        [
            (3, 8, "x..x..x."),
            (5, 8, "x.xx.xx."),
            (2, 5, "x.x.."),
            (4, 4, "xxxx"),
            (0, 4, "...."),
        ],
    )
    def test_rhythms(self, pulses: int, steps: int, expected: str) -> None:
        """Pulses are spread as evenly as possible."""
        rhythm = bjorklund(pulses, steps)
        assert "".join("x" if hit else "." for hit in rhythm) == expected

    def test_negative_pulses_invert(self) -> None:
        """Negative pulses swap hits and rests."""
        assert bjorklund(-3, 8) == [not hit for hit in bjorklund(3, 8)]

    def test_rotation(self) -> None:
        """Rotation moves onsets later and wraps around."""
        assert bjorklund(3, 8, 1) == [False, True, False, False, True, False, False, True]
        assert bjorklund(3, 8, 8) == bjorklund(3, 8)

    def test_no_steps(self) -> None:
        """Zero steps give an empty rhythm."""
        assert bjorklund(3, 0) == []
