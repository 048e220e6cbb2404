"""
Finalization and pinning manager.

Turns finalized events into done signals and unpin requests.

How It Works
------------
On finalized(B):

1. Walk parent links from B back to the current frontier. If the walk leaves
   the observed blocks, the lineage is partially unknown: only the observed
   ancestors of B are treated as finalized.
2. Release every block that can no longer become canonical (pruned forks).
3. Advance the frontier to B, releasing every tracked ancestor of B.
4. Emit done for every transaction settled in B or a released ancestor,
   merged across blocks by arrival order.
5. Unpin every released block exactly once. B stays pinned as the frontier,
   and its descendants stay pinned as open forks.

Transactions settled in pruned blocks never become done. They are dropped
with their block.
"""

from __future__ import annotations

import heapq
import logging
from dataclasses import dataclass, field
from operator import attrgetter

from tx_tracker.subspecs import metrics
from tx_tracker.subspecs.chain.provider import ChainProvider
from tx_tracker.types import UnknownAncestorError

from .block_tree import BlockNode, BlockTree
from .sink import OutputSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class FinalizationReport:
    """Summary of one processed finalized event."""

    block_hash: str
    """The finalized block."""

    done: tuple[str, ...] = ()
    """Transactions reported done, in emission order."""

    unpinned: tuple[str, ...] = ()
    """Blocks unpinned, in request order."""

    dropped: tuple[str, ...] = ()
    """Settled transactions discarded with pruned blocks."""

    complete: bool = True
    """Whether the lineage back to the previous frontier was fully observed."""


@dataclass(slots=True)
class FinalizationManager:
    """Moves the frontier, emits done signals, and unpins released blocks."""

    provider: ChainProvider
    """Receiver of unpin requests."""

    tree: BlockTree
    """Block tree whose frontier is advanced."""

    output: OutputSink
    """Receiver of done signals."""

    _finalized_count: int = field(default=0)
    """Number of finalized events that moved the frontier."""

    @property
    def finalized_count(self) -> int:
        """Number of finalized events that moved the frontier."""
        return self._finalized_count

    def on_finalized(self, block_hash: str) -> FinalizationReport:
        """
        Process a finalized event.

        Args:
            block_hash: Hash of the newly finalized block.

        Returns:
            What the event emitted and released.
        """
        tree = self.tree

        # Repeated or stale events must not revisit released blocks.
        if block_hash == tree.frontier or tree.is_retired(block_hash):
            logger.debug("Ignoring finalization of %s: already at or past it", block_hash)
            return FinalizationReport(block_hash=block_hash)

        complete = True
        try:
            path = tree.path_from(tree.frontier, block_hash)
        except UnknownAncestorError as e:
            logger.warning("%s; finalizing %d observed blocks only", e, len(e.known_path))
            metrics.unknown_ancestors.inc()
            path = list(e.known_path)
            complete = False

        pruned = tree.prune_siblings(block_hash)
        finalized = tree.advance_frontier(block_hash)
        self._finalized_count += 1

        head = tree.get(block_hash)
        done = self._drain([*finalized, head] if head is not None else finalized)

        dropped = tuple(record.tx_id for node in pruned for record in node.settled_here)
        if dropped:
            logger.warning(
                "Dropping %d settled transactions on %d pruned blocks",
                len(dropped),
                len(pruned),
            )
            metrics.txs_dropped.inc(len(dropped))
        for node in pruned:
            node.settled_here.clear()

        unpinned = self._unpin(finalized, pruned)

        logger.info(
            "Finalized %s (%d new blocks): %d done, %d unpinned, %d pruned",
            block_hash,
            len(path),
            len(done),
            len(unpinned),
            len(pruned),
        )

        return FinalizationReport(
            block_hash=block_hash,
            done=done,
            unpinned=unpinned,
            dropped=dropped,
            complete=complete,
        )

    def _drain(self, nodes: list[BlockNode]) -> tuple[str, ...]:
        """
        Emit done for every record settled in the given finalized blocks.

        Each block's records are already in arrival order. Merging the
        per-block lists keeps the global arrival order, even when an older
        transaction settled in a newer block.
        """
        batches = [node.settled_here for node in nodes if node.settled_here]
        done: list[str] = []

        for record in heapq.merge(*batches, key=attrgetter("arrival_seq")):
            record.finish()
            done.append(record.tx_id)
            metrics.txs_done.inc()
            self.output.on_tx_done(record.tx_id)

        for batch in batches:
            batch.clear()

        return tuple(done)

    def _unpin(self, finalized: list[BlockNode], pruned: list[BlockNode]) -> tuple[str, ...]:
        """Unpin released blocks once each, finalized ancestors first."""
        reasons = {node.hash: "finalized" for node in finalized}
        for node in pruned:
            reasons.setdefault(node.hash, "pruned")

        for released_hash, reason in reasons.items():
            self.provider.unpin(released_hash)
            metrics.blocks_unpinned.labels(reason=reason).inc()

        return tuple(reasons)
