"""
Output sink interface and a logging implementation.

The sink receives the two signals the tracker emits per transaction:
settled and done. Calls arrive synchronously, in arrival order of the
transactions, while the tracker processes an event.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Protocol, runtime_checkable

from .outcome import InvalidOutcome, ValidOutcome, outcome_label

logger = logging.getLogger(__name__)


@runtime_checkable
class OutputSink(Protocol):
    """Consumer of transaction lifecycle signals."""

    def on_tx_settled(self, tx_id: str, outcome: ValidOutcome | InvalidOutcome) -> None:
        """
        A transaction was included in, or invalidated by, a block.

        Args:
            tx_id: The transaction identifier.
            outcome: Classification, carrying the settling block hash.
        """
        ...

    def on_tx_done(self, tx_id: str) -> None:
        """The block a transaction settled in was finalized."""
        ...


@dataclass(slots=True)
class LoggingSink:
    """Sink that logs each signal and keeps a printable transcript."""

    lines: list[str] = field(default_factory=list)
    """One line per signal, in emission order."""

    def on_tx_settled(self, tx_id: str, outcome: ValidOutcome | InvalidOutcome) -> None:
        """Record a settlement."""
        line = f"settled {tx_id} {outcome_label(outcome)} in {outcome.block_hash}"
        logger.info("Transaction %s settled: %s", tx_id, line)
        self.lines.append(line)

    def on_tx_done(self, tx_id: str) -> None:
        """Record a finalization."""
        logger.info("Transaction %s done", tx_id)
        self.lines.append(f"done {tx_id}")
