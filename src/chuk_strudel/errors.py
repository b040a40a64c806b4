"""
Exception types.

Nothing raised here is fatal to a running pattern: query paths degrade
locally. These are raised at build/parse time and by the config layer.
"""

from __future__ import annotations


class ChukStrudelError(Exception):
    """Base class for all package errors."""


class MiniNotationError(ChukStrudelError, ValueError):
    """Mini-notation text could not be parsed."""

    def __init__(self, message: str, text: str = "", position: int | None = None):
        super().__init__(message)
        self.text = text
        self.position = position


class ConfigError(ChukStrudelError):
    """Configuration file missing or invalid."""
