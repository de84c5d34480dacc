"""Shared fixtures for boxmatch tests.

The default arena and the diagnostics settings are process-wide, so
every test starts from an empty arena and a silent sink.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from boxmatch import (
    Registry,
    RegistryBuilder,
    install_sink,
    register_core_types,
    reset_arena,
    reset_diagnostics,
)
from boxmatch.testing import RecordingSink, register

if TYPE_CHECKING:
    from collections.abc import Iterator


@pytest.fixture(autouse=True)
def _fresh_state() -> Iterator[None]:
    reset_arena()
    reset_diagnostics()
    yield
    reset_arena()
    reset_diagnostics()


@pytest.fixture
def sink() -> RecordingSink:
    """A RecordingSink installed as the diagnostic sink."""
    recording = RecordingSink()
    install_sink(recording)
    return recording


@pytest.fixture
def registry() -> Registry:
    """Core types plus the sample functions from boxmatch.testing."""
    builder = RegistryBuilder()
    register_core_types(builder)
    register(builder)
    return builder.build()
