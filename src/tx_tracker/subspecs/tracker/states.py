"""Lifecycle states for tracked transactions and blocks."""

from __future__ import annotations

from enum import Enum, auto


class TxState(Enum):
    """
    Lifecycle of a single observed transaction.

    State Machine Diagram
    ---------------------
    ::

        PENDING --> SETTLED --> DONE

    Transitions only move forward. A record whose settling block is pruned
    stays SETTLED and is dropped from tracking without reaching DONE.
    """

    PENDING = auto()
    """Observed via newTransaction; no block has decided its fate yet."""

    SETTLED = auto()
    """Included in, or invalidated by, a specific block."""

    DONE = auto()
    """The settling block has been finalized."""

    def can_transition_to(self, target: "TxState") -> bool:
        """
        Check if transition to target state is valid.

        Args:
            target: The proposed target state.

        Returns:
            True if the transition is allowed by the state machine rules.
        """
        return target in _VALID_TX_TRANSITIONS.get(self, set())


_VALID_TX_TRANSITIONS: dict[TxState, set[TxState]] = {
    TxState.PENDING: {TxState.SETTLED},
    TxState.SETTLED: {TxState.DONE},
    TxState.DONE: set(),
}


class BlockStatus(Enum):
    """
    Status of a block in the tracked tree.

    ::

        TRACKED --> FINALIZED
           |
           +------> PRUNED

    FINALIZED and PRUNED blocks are released to the provider, except the
    frontier block which stays FINALIZED and pinned until a later block is
    finalized.
    """

    TRACKED = auto()
    """Observed and not yet decided by finality."""

    FINALIZED = auto()
    """On the canonical chain at or below the frontier."""

    PRUNED = auto()
    """On a fork that can no longer become canonical."""
