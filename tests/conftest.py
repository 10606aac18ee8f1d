#!/usr/bin/env python3
"""Pytest fixtures for copysync tests.

Provides in-memory clipboard and connection fakes, sample content, and
fresh session state.
"""

import pytest

from conftest_fakes import SAMPLE_PIXELS, FakeClipboard
from copysync.content import ImageContent
from copysync.sync_state import PeerState


@pytest.fixture
def clipboard() -> FakeClipboard:
    """Create an empty in-memory clipboard."""
    return FakeClipboard()


@pytest.fixture
def peer_state() -> PeerState:
    """Create a fresh PeerState instance for testing."""
    return PeerState()


@pytest.fixture
def sample_image() -> ImageContent:
    """The 2x2 red/green/blue/yellow RGBA image."""
    return ImageContent(2, 2, SAMPLE_PIXELS)
