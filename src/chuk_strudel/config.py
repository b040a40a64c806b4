"""
Engine configuration.

Configuration can come from:
1. Built-in defaults
2. A YAML file passed explicitly to load_config()
3. A YAML file named by the CHUK_STRUDEL_CONFIG environment variable

The active config is process-wide and read at pattern build and query time.
"""

from __future__ import annotations

import logging
import os
from fractions import Fraction
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError

from chuk_strudel.constants import (
    CONFIG_ENV_VAR,
    DEFAULT_GAIN,
    DEFAULT_OCTAVE,
    REFERENCE_PITCH,
    SAMPLE_EPSILON,
    ErrorMessages,
    LogLevel,
)
from chuk_strudel.errors import ConfigError

logger = logging.getLogger(__name__)


class EngineConfig(BaseModel):
    """
    Tunable defaults for voice resolution and control sampling.

    Immutable - use model_copy(update=...) to derive a variant.
    """

    default_gain: float = Field(DEFAULT_GAIN, ge=0.0, description="Gain applied on first resolution")
    default_octave: int = Field(DEFAULT_OCTAVE, description="Octave for pitch classes like 'c'")
    reference_pitch: float = Field(REFERENCE_PITCH, gt=0.0, description="Frequency of A4 in Hz")
    sample_epsilon: float = Field(
        float(SAMPLE_EPSILON), gt=0.0, lt=1.0, description="Control sampling window in cycles"
    )
    scale_library_path: Path | None = Field(None, description="Override for the built-in scales")
    project_scales_path: Path | None = Field(None, description="Extra scale definitions")
    log_level: LogLevel = Field("INFO", description="Log level used by the CLI")

    model_config = {"frozen": True, "extra": "forbid"}

    @property
    def epsilon(self) -> Fraction:
        """Sampling window as an exact cycle fraction."""
        return Fraction(str(self.sample_epsilon))


_active: EngineConfig = EngineConfig()


def get_config() -> EngineConfig:
    """Get the active engine configuration."""
    return _active


def set_config(config: EngineConfig) -> EngineConfig:
    """
    Replace the active configuration.

    Returns:
        The previously active configuration (handy for tests)
    """
    global _active
    previous = _active
    _active = config
    logger.debug(f"Engine config replaced: {config}")
    return previous


def load_config(path: Path | str | None = None) -> EngineConfig:
    """
    Load configuration from YAML and make it active.

    Args:
        path: YAML file. Falls back to $CHUK_STRUDEL_CONFIG, then defaults.

    Returns:
        The loaded configuration

    Raises:
        ConfigError: If the file is missing or does not validate
    """
    if path is None:
        env_path = os.environ.get(CONFIG_ENV_VAR)
        if not env_path:
            config = EngineConfig()
            set_config(config)
            return config
        path = env_path

    config_path = Path(path)
    if not config_path.exists():
        raise ConfigError(ErrorMessages.CONFIG_NOT_FOUND.format(path=config_path))

    try:
        with open(config_path) as f:
            data: Any = yaml.safe_load(f) or {}
        if not isinstance(data, dict):
            raise ConfigError(
                ErrorMessages.CONFIG_INVALID.format(path=config_path, reason="expected a mapping")
            )
        config = EngineConfig(**data)
    except (yaml.YAMLError, ValidationError) as e:
        raise ConfigError(ErrorMessages.CONFIG_INVALID.format(path=config_path, reason=e)) from e

    logger.info(f"Loaded engine config from {config_path}")
    set_config(config)
    return config
