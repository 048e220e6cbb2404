"""Shared helpers for tracker tests."""

from .builders import GENESIS, finalized, new_block, new_tx
from .mocks import RecordingChain, RecordingSink

__all__ = [
    "GENESIS",
    "RecordingChain",
    "RecordingSink",
    "finalized",
    "new_block",
    "new_tx",
]
