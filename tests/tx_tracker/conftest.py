"""
Shared pytest fixtures for all tracker tests.

Provides a recording provider, a recording sink, and a tracker wired to both.
"""

from __future__ import annotations

import pytest

from tests.tx_tracker.helpers import RecordingChain, RecordingSink
from tx_tracker.subspecs.tracker import TransactionTracker


@pytest.fixture
def chain() -> RecordingChain:
    """Provider double with no blocks described yet."""
    return RecordingChain()


@pytest.fixture
def sink() -> RecordingSink:
    """Sink double with no signals recorded yet."""
    return RecordingSink()


@pytest.fixture
def tracker(chain: RecordingChain, sink: RecordingSink) -> TransactionTracker:
    """Tracker with no known frontier, wired to the recording doubles."""
    return TransactionTracker(provider=chain, output=sink)
