"""
Pydantic models for voice data.

- VoiceData: immutable per-event sound parameters
- Envelope, FilterDef: derived views of VoiceData
"""

from chuk_strudel.models.voice import (
    EMPTY_VOICE,
    Envelope,
    FilterDef,
    VoiceData,
    VoiceValue,
    as_float,
    as_int,
    as_text,
    is_truthy,
)

__all__ = [
    "EMPTY_VOICE",
    "Envelope",
    "FilterDef",
    "VoiceData",
    "VoiceValue",
    "as_float",
    "as_int",
    "as_text",
    "is_truthy",
]
