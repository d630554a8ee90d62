"""Pytest configuration and shared fixtures."""

import pytest

from cobs_framing.transport import BufferSink


@pytest.fixture
def sink() -> BufferSink:
    """Fresh in-memory sink."""
    return BufferSink()


@pytest.fixture(scope="session")
def ascending_254() -> bytes:
    """254 non-zero bytes, exactly one full block."""
    return bytes(range(1, 0xFF))
