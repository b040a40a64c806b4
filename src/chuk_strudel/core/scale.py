"""
Scale primitives - ScaleType, Scale, ScaleLibrary.

Scale types are lists of named intervals from the tonic ("1P 2M 3M ...").
A Scale is a scale type with an optional tonic ("C4 major", "Eb minor").
Scale steps map integer indices to note names, wrapping by octave.

Scale types are loaded from YAML:
1. Built-in library (shipped with package)
2. Project scales (user's directory, overrides the library)
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path
from typing import Any

import yaml

from chuk_strudel.config import get_config
from chuk_strudel.constants import ErrorMessages
from chuk_strudel.core.note import parse_note
from chuk_strudel.core.pitch import Interval

logger = logging.getLogger(__name__)

LIBRARY_PATH = Path(__file__).resolve().parent.parent / "library" / "scales"


@dataclass(frozen=True)
class ScaleType:
    """
    A scale defined by intervals from the tonic.

    Major is: 1P 2M 3M 4P 5P 6M 7M

    Immutable and hashable.
    """

    name: str
    intervals: tuple[Interval, ...]
    aliases: tuple[str, ...] = field(default=(), compare=False)

    def __post_init__(self) -> None:
        if not self.intervals:
            raise ValueError(f"Scale type '{self.name}' has no intervals")

    def __len__(self) -> int:
        return len(self.intervals)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Scale:
    """
    A scale type rooted on a tonic.

    The tonic may be a pitch class ("C") or carry an octave ("C4"); steps
    keep the same form.
    """

    tonic: str | None
    scale_type: ScaleType

    def step(self, index: int) -> str:
        """
        Note name of the index-th step.

        Indices past the scale length continue into the next octave;
        negative indices descend. "C4 major": 0 -> C4, 1 -> D4, 7 -> C5, -1 -> B3.

        Returns:
            Note name, or "" when the scale has no tonic
        """
        if not self.tonic:
            return ""
        tonic = parse_note(self.tonic)
        if tonic is None:
            return ""
        size = len(self.scale_type)
        octaves, degree = divmod(index, size)
        root = tonic.shift_octaves(octaves)
        return root.transpose(self.scale_type.intervals[degree]).name

    def __str__(self) -> str:
        return f"{self.tonic} {self.scale_type}" if self.tonic else str(self.scale_type)


class ScaleLibrary:
    """
    Discovers and loads scale type definitions.

    Each YAML file maps scale names to interval lists and aliases.
    Project scales override library scales with the same name.
    """

    def __init__(
        self,
        library_path: Path | None = None,
        project_path: Path | None = None,
    ):
        """
        Initialize the scale library.

        Args:
            library_path: Path to built-in scale definitions
            project_path: Path to project scale definitions
        """
        self.library_path = library_path or LIBRARY_PATH
        self.project_path = project_path
        self._cache: dict[str, ScaleType] = {}
        self._parsed: dict[str, Scale | None] = {}

    def get_scale_type(self, name: str) -> ScaleType | None:
        """
        Look up a scale type by name or alias (case-insensitive).

        Returns:
            ScaleType if found, None otherwise
        """
        self._ensure_loaded()
        return self._cache.get(name.strip().lower())

    def list_scale_types(self) -> list[ScaleType]:
        """All scale types, one entry per canonical name."""
        self._ensure_loaded()
        unique = {scale_type.name: scale_type for scale_type in self._cache.values()}
        return sorted(unique.values(), key=lambda s: s.name)

    def register(self, scale_type: ScaleType) -> None:
        """Register a scale type programmatically (name and aliases)."""
        self._ensure_loaded()
        self._parsed.clear()
        for key in (scale_type.name, *scale_type.aliases):
            self._cache[key.lower()] = scale_type

    def parse(self, name: str) -> Scale | None:
        """
        Parse a scale name such as 'C4 major', 'C:minor' or 'dorian'.

        The first word is the tonic when it reads as a note name.

        Returns:
            Scale, or None if the scale type is unknown
        """
        if name in self._parsed:
            return self._parsed[name]

        text = name.replace(":", " ").strip()
        if not text:
            return None

        tonic: str | None = None
        type_name = text
        first, _, rest = text.partition(" ")
        pitch = parse_note(first)
        if pitch is not None:
            tonic = pitch.name
            type_name = rest.strip() or "major"

        scale_type = self.get_scale_type(type_name)
        if scale_type is None:
            logger.warning(ErrorMessages.UNKNOWN_SCALE.format(name=name))
            self._parsed[name] = None
            return None

        scale = Scale(tonic, scale_type)
        self._parsed[name] = scale
        return scale

    def clear_cache(self) -> None:
        """Clear the scale cache."""
        self._cache.clear()
        self._parsed.clear()

    def _ensure_loaded(self) -> None:
        if self._cache:
            return

        if self.library_path.exists():
            self._scan_directory(self.library_path)

        # Project scales (override library)
        if self.project_path and self.project_path.exists():
            self._scan_directory(self.project_path)

    def _scan_directory(self, base_path: Path) -> None:
        for path in sorted(base_path.glob("*.yaml")):
            try:
                with open(path) as f:
                    data = yaml.safe_load(f) or {}
                for scale_type in self._parse_scales(data):
                    for key in (scale_type.name, *scale_type.aliases):
                        self._cache[key.lower()] = scale_type
            except (OSError, yaml.YAMLError, ValueError, TypeError, AttributeError):
                logger.warning(f"Skipping unreadable scale file {path}", exc_info=True)

    def _parse_scales(self, data: dict[str, Any]) -> list[ScaleType]:
        scales = []
        for name, sdata in data.get("scales", {}).items():
            intervals = sdata.get("intervals", [])
            if isinstance(intervals, str):
                intervals = intervals.split()
            scales.append(
                ScaleType(
                    name=name,
                    intervals=tuple(Interval.parse(str(i)) for i in intervals),
                    aliases=tuple(sdata.get("aliases", [])),
                )
            )
        return scales


@lru_cache(maxsize=4)
def _library_for(library_path: Path | None, project_path: Path | None) -> ScaleLibrary:
    return ScaleLibrary(library_path, project_path)


def get_scale_library() -> ScaleLibrary:
    """The scale library for the active configuration."""
    config = get_config()
    return _library_for(config.scale_library_path, config.project_scales_path)


def scale_steps(name: str) -> Callable[[int], str]:
    """
    Step function for a scale name.

    scale_steps("C4 major")(2) -> "E4"

    Unknown scales yield a function that always returns "".
    """
    scale = get_scale_library().parse(name)
    if scale is None:
        return lambda index: ""
    return scale.step
