"""
Voice data - the immutable per-event payload.

Every event a pattern produces carries one VoiceData. Operations never
mutate it; they derive a new instance with with_changes() or merge().

The raw `value` field holds whatever an untyped mini-notation atom or
oscillator produced (number, string or boolean). The helpers below read it
as a number, integer, text or truth value.
"""

from __future__ import annotations

import math
from typing import Any

from pydantic import BaseModel, Field

from chuk_strudel.constants import FALSY_STRINGS, FilterType

VoiceValue = float | int | str | bool


# --- raw value helpers -------------------------------------------------------


def as_float(value: Any) -> float | None:
    """Read a raw value as a number, None if it is not one."""
    if value is None:
        return None
    if isinstance(value, bool):
        return 1.0 if value else 0.0
    if isinstance(value, (int, float)):
        return float(value)
    try:
        number = float(str(value).strip())
    except ValueError:
        return None
    return number if math.isfinite(number) else None


def as_int(value: Any) -> int | None:
    """Read a raw value as an integer (truncating), None if not numeric."""
    number = as_float(value)
    return None if number is None else int(number)


def as_text(value: Any) -> str | None:
    """Read a raw value as text; whole floats drop their '.0'."""
    if value is None:
        return None
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


def is_truthy(value: Any) -> bool:
    """
    Truthiness of a raw value.

    Numbers: non-zero. Numeric strings: numeric truthiness. Other strings:
    not blank and not "false". Booleans: themselves. None: false.
    """
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    number = as_float(value)
    if number is not None:
        return number != 0
    return str(value).strip().lower() not in FALSY_STRINGS


# --- derived views -----------------------------------------------------------


class Envelope(BaseModel):
    """ADSR stages; depth is only used by filter envelopes."""

    attack: float | None = Field(None, description="Attack time in seconds")
    decay: float | None = Field(None, description="Decay time in seconds")
    sustain: float | None = Field(None, description="Sustain level 0-1")
    release: float | None = Field(None, description="Release time in seconds")
    depth: float | None = Field(None, description="Envelope modulation depth")

    model_config = {"frozen": True}

    def is_empty(self) -> bool:
        return all(v is None for v in (self.attack, self.decay, self.sustain, self.release, self.depth))


class FilterDef(BaseModel):
    """One filter stage derived from voice data."""

    filter_type: FilterType = Field(..., description="Filter kind")
    cutoff: float = Field(..., description="Cutoff / center frequency in Hz")
    q: float | None = Field(None, description="Resonance")
    envelope: Envelope | None = Field(None, description="Cutoff envelope")

    model_config = {"frozen": True}


# --- voice data --------------------------------------------------------------


class VoiceData(BaseModel):
    """
    Immutable sound parameters of one event.

    All fields are optional: None means "not set", so merge() can tell an
    explicit value from an absent one.
    """

    # Pitch
    note: str | None = Field(None, description="Note name, e.g. 'C4'")
    freq_hz: float | None = Field(None, description="Frequency derived from note")
    scale: str | None = Field(None, description="Scale context, e.g. 'C4 major'")

    # Sample selection
    sound: str | None = Field(None, description="Sound or sample name")
    sound_index: int | None = Field(None, description="Sample index or scale degree")
    bank: str | None = Field(None, description="Sample bank")

    # Dynamics
    gain: float | None = None
    velocity: float | None = None
    postgain: float | None = None
    pan: float | None = None
    legato: float | None = None
    orbit: int | None = None

    # Voicing
    voices: float | None = Field(None, description="Unison voice count")
    freq_spread: float | None = Field(None, description="Unison detune")
    pan_spread: float | None = Field(None, description="Unison stereo spread")
    density: float | None = None

    # Amplitude envelope
    attack: float | None = None
    decay: float | None = None
    sustain: float | None = None
    release: float | None = None

    # Pitch modulation
    accelerate: float | None = None
    vibrato: float | None = None
    vibrato_mod: float | None = None

    # Filters
    cutoff: float | None = None
    resonance: float | None = None
    hcutoff: float | None = None
    hresonance: float | None = None
    bandf: float | None = None
    bandq: float | None = None
    notchf: float | None = None
    nresonance: float | None = None

    # Filter envelopes
    lp_attack: float | None = None
    lp_decay: float | None = None
    lp_sustain: float | None = None
    lp_release: float | None = None
    lp_env: float | None = None
    hp_attack: float | None = None
    hp_decay: float | None = None
    hp_sustain: float | None = None
    hp_release: float | None = None
    hp_env: float | None = None
    bp_attack: float | None = None
    bp_decay: float | None = None
    bp_sustain: float | None = None
    bp_release: float | None = None
    bp_env: float | None = None
    nf_attack: float | None = None
    nf_decay: float | None = None
    nf_sustain: float | None = None
    nf_release: float | None = None
    nf_env: float | None = None

    # Effects
    distort: float | None = None
    coarse: float | None = None
    crush: float | None = None
    room: float | None = None
    room_size: float | None = None
    delay: float | None = None
    delay_time: float | None = None
    delay_feedback: float | None = None

    # Sample playback
    begin: float | None = None
    end: float | None = None
    speed: float | None = None
    loop: bool | None = None
    cut: int | None = None

    # Untyped atom value
    value: VoiceValue | None = Field(None, description="Raw value from mini-notation or signals")

    model_config = {"frozen": True}

    @classmethod
    def empty(cls) -> VoiceData:
        """The identity default."""
        return EMPTY_VOICE

    def with_changes(self, **changes: Any) -> VoiceData:
        """Return a copy with the given fields replaced."""
        if not changes:
            return self
        return self.model_copy(update=changes)

    def merge(self, other: VoiceData) -> VoiceData:
        """Return a copy where every field set on `other` wins."""
        updates = {
            name: getattr(other, name)
            for name in type(self).model_fields
            if getattr(other, name) is not None
        }
        return self.with_changes(**updates)

    def set_fields(self) -> dict[str, Any]:
        """Only the fields that are set (for display and JSON)."""
        return self.model_dump(exclude_none=True)

    @property
    def envelope(self) -> Envelope:
        return Envelope(
            attack=self.attack, decay=self.decay, sustain=self.sustain, release=self.release
        )

    @property
    def filters(self) -> list[FilterDef]:
        """
        Filter chain in fixed order: lowpass, highpass, bandpass, notch.

        A filter is present when its cutoff is set.
        """
        stages = (
            (FilterType.LOWPASS, self.cutoff, self.resonance, "lp"),
            (FilterType.HIGHPASS, self.hcutoff, self.hresonance, "hp"),
            (FilterType.BANDPASS, self.bandf, self.bandq, "bp"),
            (FilterType.NOTCH, self.notchf, self.nresonance, "nf"),
        )
        result = []
        for filter_type, cutoff, q, prefix in stages:
            if cutoff is None:
                continue
            envelope = Envelope(
                attack=getattr(self, f"{prefix}_attack"),
                decay=getattr(self, f"{prefix}_decay"),
                sustain=getattr(self, f"{prefix}_sustain"),
                release=getattr(self, f"{prefix}_release"),
                depth=getattr(self, f"{prefix}_env"),
            )
            result.append(
                FilterDef(
                    filter_type=filter_type,
                    cutoff=cutoff,
                    q=q,
                    envelope=None if envelope.is_empty() else envelope,
                )
            )
        return result


EMPTY_VOICE = VoiceData()
