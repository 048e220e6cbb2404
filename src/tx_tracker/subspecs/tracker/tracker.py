"""
Transaction tracker: the event-driven facade over the tracking components.

The tracker owns one pending queue and one block tree, and routes each chain
event to the component that handles it::

    newTransaction --> PendingQueue.enqueue
    newBlock       --> SettlementEngine.on_new_block
    finalized      --> FinalizationManager.on_finalized

Events are processed strictly one at a time. Every callback an event causes
is issued before handle() returns, so the sink observes signals in the same
order the events arrived.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass, field

from tx_tracker.subspecs import metrics
from tx_tracker.subspecs.chain.provider import ChainProvider

from .block_tree import BlockTree
from .events import FinalizedEvent, NewBlockEvent, NewTransactionEvent
from .finalization import FinalizationManager, FinalizationReport
from .queue import PendingQueue, TxRecord
from .settlement import SettlementEngine
from .sink import OutputSink

logger = logging.getLogger(__name__)

ChainEvent = NewBlockEvent | NewTransactionEvent | FinalizedEvent
"""Any event the tracker accepts."""


@dataclass(slots=True)
class TransactionTracker:
    """
    Follows transactions from submission to finality.

    Each instance holds its own state. Independent trackers never share
    queues or trees.

    The tracker is callable, so it can be handed to an event source as the
    per-event handler.
    """

    provider: ChainProvider
    """Chain data lookups and unpin requests."""

    output: OutputSink
    """Receiver of settled and done signals."""

    finalized: str | None = None
    """
    Hash of the last finalized block known at construction.

    When None, the parent of the first announced block becomes the frontier.
    """

    queue: PendingQueue = field(init=False)
    """Transactions observed but not yet settled."""

    tree: BlockTree = field(init=False)
    """Blocks from the frontier downward."""

    settlement: SettlementEngine = field(init=False)
    """Handles newBlock events."""

    finalization: FinalizationManager = field(init=False)
    """Handles finalized events."""

    def __post_init__(self) -> None:
        """Wire the components around shared state."""
        self.queue = PendingQueue()
        self.tree = BlockTree(provider=self.provider, frontier=self.finalized)
        self.settlement = SettlementEngine(
            provider=self.provider,
            queue=self.queue,
            tree=self.tree,
            output=self.output,
        )
        self.finalization = FinalizationManager(
            provider=self.provider,
            tree=self.tree,
            output=self.output,
        )

    def __call__(self, event: ChainEvent) -> None:
        """Handle one event."""
        self.handle(event)

    @property
    def frontier(self) -> str | None:
        """Hash of the most recently finalized block."""
        return self.tree.frontier

    def handle(self, event: ChainEvent) -> None:
        """
        Process one event to completion.

        Raises:
            TypeError: If the event is not a supported chain event.
        """
        match event:
            case NewTransactionEvent(value=tx_id):
                with metrics.event_processing_time.labels(event="newTransaction").time():
                    self.on_new_transaction(tx_id)
            case NewBlockEvent(block_hash=block_hash, parent_hash=parent_hash):
                with metrics.event_processing_time.labels(event="newBlock").time():
                    self.on_new_block(block_hash, parent_hash)
            case FinalizedEvent(block_hash=block_hash):
                with metrics.event_processing_time.labels(event="finalized").time():
                    self.on_finalized(block_hash)
            case _:
                raise TypeError(f"Unsupported event type: {type(event).__name__}")

    def replay(self, events: Iterable[ChainEvent]) -> int:
        """
        Handle a sequence of events in order.

        Returns:
            Number of events handled.
        """
        count = 0
        for event in events:
            self.handle(event)
            count += 1
        return count

    def on_new_transaction(self, tx_id: str) -> TxRecord:
        """Start tracking a submitted transaction."""
        record = self.queue.enqueue(tx_id)
        metrics.txs_observed.inc()
        metrics.pending_txs.set(len(self.queue))
        logger.debug("Tracking transaction %s (seq=%d)", tx_id, record.arrival_seq)
        return record

    def on_new_block(self, block_hash: str, parent_hash: str) -> list[TxRecord]:
        """Insert a block and settle what it decides."""
        return self.settlement.on_new_block(block_hash, parent_hash)

    def on_finalized(self, block_hash: str) -> FinalizationReport:
        """Finalize a block, emitting done signals and unpinning released blocks."""
        return self.finalization.on_finalized(block_hash)
