"""
In-memory chain data provider.

Serves block bodies and transaction verdicts from a dictionary of block
descriptions. Used to replay recorded scenarios and as a deterministic
provider in tests.

Pinning
-------
Every described block starts pinned. Unpinning a block twice, or a block
that was never described, is an error: it means the consumer lost track of
what it released.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from pydantic import Field

from tx_tracker.types import BlockHash, StrictBaseModel, TxId, UnknownBlockError, UnpinError

logger = logging.getLogger(__name__)


class ChainBlock(StrictBaseModel):
    """Description of one block as the provider sees it."""

    parent: BlockHash
    """Hash of the parent block."""

    body: list[TxId] = Field(default_factory=list)
    """Transactions included in the block, in block order."""

    invalid: list[TxId] = Field(default_factory=list)
    """
    Transactions that are invalid as of this block.

    Only meaningful for transactions not in the body.
    """

    failed: list[TxId] = Field(default_factory=list)
    """
    Included transactions whose execution failed.

    Only meaningful for transactions in the body.
    """


@dataclass(slots=True)
class InMemoryChain:
    """A ChainProvider backed by block descriptions held in memory."""

    blocks: dict[str, ChainBlock] = field(default_factory=dict)
    """Block descriptions keyed by hash."""

    unpinned: list[str] = field(default_factory=list)
    """Hashes passed to unpin, in call order."""

    def add_block(
        self,
        block_hash: str,
        parent: str,
        body: Iterable[str] = (),
        *,
        invalid: Iterable[str] = (),
        failed: Iterable[str] = (),
    ) -> ChainBlock:
        """
        Describe a block.

        Args:
            block_hash: Hash of the block.
            parent: Hash of its parent.
            body: Included transactions.
            invalid: Transactions invalid as of this block.
            failed: Included transactions that failed.

        Returns:
            The stored description.
        """
        block = ChainBlock(
            parent=parent,
            body=list(body),
            invalid=list(invalid),
            failed=list(failed),
        )
        self.blocks[block_hash] = block
        return block

    @property
    def pinned(self) -> list[str]:
        """Described blocks that have not been unpinned, in description order."""
        released = set(self.unpinned)
        return [block_hash for block_hash in self.blocks if block_hash not in released]

    def _block(self, block_hash: str) -> ChainBlock:
        block = self.blocks.get(block_hash)
        if block is None:
            raise UnknownBlockError(block_hash)
        return block

    def get_body(self, block_hash: str) -> list[str]:
        """Return the transactions included in a block."""
        return list(self._block(block_hash).body)

    def is_tx_valid(self, block_hash: str, tx_id: str) -> bool:
        """A transaction is valid unless the block lists it as invalid."""
        return tx_id not in self._block(block_hash).invalid

    def is_tx_successful(self, block_hash: str, tx_id: str) -> bool:
        """An included transaction succeeded unless the block lists it as failed."""
        return tx_id not in self._block(block_hash).failed

    def unpin(self, block_hash: str) -> None:
        """
        Release a pinned block.

        Raises:
            UnpinError: If the block is unknown or already unpinned.
        """
        if block_hash not in self.blocks or block_hash in self.unpinned:
            raise UnpinError(block_hash)

        logger.debug("Unpinned block %s", block_hash)
        self.unpinned.append(block_hash)
