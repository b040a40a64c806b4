"""
Constants and enums for the pattern language.

No magic strings - use enums and Literal types for constrained values.
"""

from enum import Enum
from fractions import Fraction
from typing import Literal


class RegistryTable(str, Enum):
    """
    The three call shapes an operation is exposed under.

    One declaration registers into all three tables.
    """

    FUNCTIONS = "functions"  # note("c e g")
    PATTERN_METHODS = "pattern_methods"  # pat.note("c e g")
    STRING_METHODS = "string_methods"  # "c e g".note()


class ArgKind(str, Enum):
    """What a normalized DSL argument carries."""

    LITERAL = "literal"  # number, string, boolean
    PATTERN = "pattern"
    FUNCTION = "function"  # pattern -> pattern transform
    ABSENT = "absent"


class FilterType(str, Enum):
    """Filter kinds derived from voice data."""

    LOWPASS = "lowpass"
    HIGHPASS = "highpass"
    BANDPASS = "bandpass"
    NOTCH = "notch"


class Waveform(str, Enum):
    """Continuous oscillator shapes."""

    SINE = "sine"
    COSINE = "cosine"
    SAW = "saw"
    ISAW = "isaw"
    TRI = "tri"
    SQUARE = "square"


# Voice defaults
DEFAULT_GAIN: float = 1.0
DEFAULT_OCTAVE: int = 3  # pitch classes without octave ("c") sound in octave 3
REFERENCE_PITCH: float = 440.0  # A4
REFERENCE_MIDI: int = 69  # A4

# Width of the window used to sample a control pattern at an instant
SAMPLE_EPSILON: Fraction = Fraction(1, 100_000)

# Strings that read as false in a boolean context
FALSY_STRINGS: frozenset[str] = frozenset({"", "false"})

# Mini-notation rest token
REST_TOKEN = "~"

# Environment variable pointing at a YAML config file
CONFIG_ENV_VAR = "CHUK_STRUDEL_CONFIG"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ErrorMessages:
    """Standard error messages."""

    UNKNOWN_FUNCTION = "Unknown function: {name}"
    UNKNOWN_METHOD = "Unknown method '{name}' on {receiver}"
    UNKNOWN_SCALE = "Unknown scale: {name}"
    INVALID_INTERVAL = "Invalid interval: {name!r}"
    INVALID_NUMBER = "Expected a number for '{name}', got {value!r}"
    UNEXPECTED_TOKEN = "Unexpected '{token}' at position {position} in {text!r}"
    UNCLOSED_GROUP = "Missing '{closing}' in {text!r}"
    TRANSFORM_FAILED = "Transform for '{name}' failed; layer skipped"
    CONFIG_NOT_FOUND = "Config file not found: {path}"
    CONFIG_INVALID = "Invalid config file {path}: {reason}"
