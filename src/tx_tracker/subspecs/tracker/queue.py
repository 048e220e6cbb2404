"""
Pending transaction queue.

Transactions wait here from the moment they are observed until a block
settles them. The queue is FIFO by arrival: scanning always yields the oldest
transaction first, which is what makes settlement callbacks come out in
arrival order.

Duplicates
----------
The queue does not coalesce identifiers. Each newTransaction event opens an
independent lifecycle with its own arrival sequence number, even when the same
identifier is already pending or settled. Records are therefore removed by
identity, not by identifier.
"""

from __future__ import annotations

import logging
from collections import Counter, OrderedDict
from dataclasses import dataclass, field

from .outcome import InvalidOutcome, ValidOutcome
from .states import TxState

logger = logging.getLogger(__name__)


@dataclass(slots=True, eq=False)
class TxRecord:
    """
    One observed transaction and its progress through the lifecycle.

    Records compare by identity: two records for the same identifier are
    distinct lifecycles.
    """

    tx_id: str
    """The transaction identifier."""

    arrival_seq: int
    """
    Position in the arrival order.

    Strictly increasing across all records of a tracker. Defines the order of
    every callback issued for this record relative to other records.
    """

    state: TxState = TxState.PENDING
    """Current lifecycle state."""

    settled_block: str | None = None
    """Block that settled the transaction. Set on settlement."""

    outcome: ValidOutcome | InvalidOutcome | None = None
    """Classification reported on settlement."""

    def settle(self, block_hash: str, outcome: ValidOutcome | InvalidOutcome) -> None:
        """Record the block and outcome that settled this transaction."""
        assert self.state.can_transition_to(TxState.SETTLED), (
            f"Transaction {self.tx_id} (seq={self.arrival_seq}) "
            f"cannot settle from {self.state.name}"
        )
        self.state = TxState.SETTLED
        self.settled_block = block_hash
        self.outcome = outcome

    def finish(self) -> None:
        """Mark the settling block as finalized."""
        assert self.state.can_transition_to(TxState.DONE), (
            f"Transaction {self.tx_id} (seq={self.arrival_seq}) "
            f"cannot finish from {self.state.name}"
        )
        self.state = TxState.DONE


@dataclass(slots=True)
class PendingQueue:
    """FIFO record of transactions observed but not yet settled."""

    _records: OrderedDict[int, TxRecord] = field(default_factory=OrderedDict)
    """Pending records keyed by arrival sequence, oldest first."""

    _next_seq: int = 0
    """Sequence number handed to the next enqueued record."""

    _ids: Counter[str] = field(default_factory=Counter)
    """Number of pending records per identifier."""

    def __len__(self) -> int:
        """Return the number of pending records."""
        return len(self._records)

    def __contains__(self, tx_id: str) -> bool:
        """Check if any pending record carries this identifier."""
        return self._ids[tx_id] > 0

    def enqueue(self, tx_id: str) -> TxRecord:
        """
        Append a new pending record.

        Args:
            tx_id: The observed transaction identifier.

        Returns:
            The new record, carrying the next arrival sequence number.
        """
        if tx_id in self:
            logger.debug("Transaction %s already pending, tracking a second lifecycle", tx_id)

        record = TxRecord(tx_id=tx_id, arrival_seq=self._next_seq)
        self._next_seq += 1
        self._records[record.arrival_seq] = record
        self._ids[tx_id] += 1
        return record

    def scan(self) -> list[TxRecord]:
        """
        Snapshot the pending records, oldest first.

        The snapshot is a new list, so records may be removed while iterating.
        """
        return list(self._records.values())

    def remove(self, record: TxRecord) -> None:
        """
        Delete a record from the queue.

        Args:
            record: A record previously returned by enqueue.
        """
        if self._records.pop(record.arrival_seq, None) is None:
            return

        self._ids[record.tx_id] -= 1
        if not self._ids[record.tx_id]:
            del self._ids[record.tx_id]
