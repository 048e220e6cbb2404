"""
Abstract chain data provider interface.

Defines the Protocol that all chain data providers must follow.
Uses structural subtyping for flexibility.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class ChainProvider(Protocol):
    """
    Protocol for the chain data the tracker consumes.

    All lookups are synchronous and assumed total for any hash or id the
    tracker learned from prior events. Any class with matching methods
    satisfies the protocol.

    Pinning
    -------
    The provider retains state for every block it announces. The tracker
    calls `unpin` once per block when that state is no longer needed.
    """

    def get_body(self, block_hash: str) -> Sequence[str]:
        """
        Return the transactions included in a block.

        Args:
            block_hash: Hash of an announced block.

        Returns:
            Transaction identifiers in block order.
        """
        ...

    def is_tx_valid(self, block_hash: str, tx_id: str) -> bool:
        """
        Check whether a transaction is still valid as of a block.

        False means the transaction can never be included on this lineage.
        """
        ...

    def is_tx_successful(self, block_hash: str, tx_id: str) -> bool:
        """Check the execution outcome of a transaction included in a block."""
        ...

    def unpin(self, block_hash: str) -> None:
        """Release the state retained for a block."""
        ...
