"""
Pytest configuration and shared fixtures.
"""

import tempfile
from collections.abc import Iterator
from pathlib import Path

import pytest

from chuk_strudel.config import EngineConfig, set_config


@pytest.fixture
def temp_dir() -> Iterator[Path]:
    """Create a temporary directory for test files."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture(autouse=True)
def default_config() -> Iterator[EngineConfig]:
    """Run every test against the default engine config."""
    config = EngineConfig()
    previous = set_config(config)
    yield config
    set_config(previous)
