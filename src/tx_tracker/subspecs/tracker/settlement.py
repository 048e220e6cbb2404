"""
Settlement engine.

Decides, for every newly observed block, which pending transactions that
block settles.

Classification
--------------
Each pending transaction is checked against the block, oldest first:

1. **Included**: the block body contains it. Ask the provider whether it
   executed successfully. Settled as valid, successful or not.
2. **Invalidated**: not included, and the provider reports it invalid as of
   this block. Settled as invalid. This is final, even if a sibling fork
   would have included it.
3. **Still possible**: not included but valid. Stays pending for later blocks.

Lookups
-------
The body is fetched through the block tree cache, and only when something
is pending. Verdicts are memoised per identifier for the duration of a block
scan, and a block is scanned once, so no (block, transaction) pair is ever
queried twice.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from tx_tracker.subspecs import metrics
from tx_tracker.subspecs.chain.provider import ChainProvider

from .block_tree import BlockTree
from .outcome import InvalidOutcome, ValidOutcome, outcome_label
from .queue import PendingQueue, TxRecord
from .sink import OutputSink
from .states import BlockStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class SettlementEngine:
    """Matches pending transactions against new blocks and reports settlements."""

    provider: ChainProvider
    """Source of validity and execution outcomes."""

    queue: PendingQueue
    """Transactions awaiting settlement."""

    tree: BlockTree
    """Block tree that new blocks are inserted into."""

    output: OutputSink
    """Receiver of settled (and, for the frontier block, done) signals."""

    def on_new_block(self, block_hash: str, parent_hash: str) -> list[TxRecord]:
        """
        Insert a block and settle the pending transactions it decides.

        Args:
            block_hash: Hash of the new block.
            parent_hash: Hash of its parent.

        Returns:
            Records settled by this block, in arrival order.
        """
        if not self.tree.insert(block_hash, parent_hash):
            logger.debug("Ignoring already known block %s", block_hash)
            return []

        pending = self.queue.scan()
        if not pending:
            return []

        node = self.tree.get(block_hash)
        assert node is not None, f"Block {block_hash} missing right after insertion"

        included = frozenset(self.tree.body(block_hash))
        verdicts: dict[str, ValidOutcome | InvalidOutcome | None] = {}
        settled: list[TxRecord] = []

        for record in pending:
            # Duplicate lifecycles share the verdict for this block.
            if record.tx_id not in verdicts:
                verdicts[record.tx_id] = self._classify(block_hash, record.tx_id, included)

            outcome = verdicts[record.tx_id]
            if outcome is None:
                continue

            self.queue.remove(record)
            record.settle(block_hash, outcome)
            node.settled_here.append(record)
            settled.append(record)

            logger.debug(
                "Transaction %s (seq=%d) settled %s in %s",
                record.tx_id,
                record.arrival_seq,
                outcome_label(outcome),
                block_hash,
            )
            metrics.txs_settled.labels(outcome=outcome_label(outcome)).inc()
            self.output.on_tx_settled(record.tx_id, outcome)

        metrics.pending_txs.set(len(self.queue))

        # A late announcement of the frontier block settles into finalized history.
        if node.status is BlockStatus.FINALIZED and node.settled_here:
            for record in node.settled_here:
                record.finish()
                metrics.txs_done.inc()
                self.output.on_tx_done(record.tx_id)
            node.settled_here.clear()

        return settled

    def _classify(
        self,
        block_hash: str,
        tx_id: str,
        included: frozenset[str],
    ) -> ValidOutcome | InvalidOutcome | None:
        """
        Classify one transaction against one block.

        Returns:
            The settlement outcome, or None if the transaction stays pending.
        """
        if tx_id in included:
            metrics.provider_calls.labels(method="is_tx_successful").inc()
            successful = bool(self.provider.is_tx_successful(block_hash, tx_id))
            return ValidOutcome(block_hash=block_hash, successful=successful)

        metrics.provider_calls.labels(method="is_tx_valid").inc()
        if self.provider.is_tx_valid(block_hash, tx_id):
            return None

        return InvalidOutcome(block_hash=block_hash)
