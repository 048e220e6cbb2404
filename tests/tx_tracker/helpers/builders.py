"""Event builders for tracker tests."""

from __future__ import annotations

from tx_tracker.subspecs.tracker import FinalizedEvent, NewBlockEvent, NewTransactionEvent

GENESIS = "0x00"
"""Parent of the first block in most scenarios. Never announced itself."""


def new_block(block_hash: str, parent_hash: str = GENESIS) -> NewBlockEvent:
    """Create a newBlock event."""
    return NewBlockEvent(block_hash=block_hash, parent_hash=parent_hash)


def new_tx(tx_id: str) -> NewTransactionEvent:
    """Create a newTransaction event."""
    return NewTransactionEvent(value=tx_id)


def finalized(block_hash: str) -> FinalizedEvent:
    """Create a finalized event."""
    return FinalizedEvent(block_hash=block_hash)
