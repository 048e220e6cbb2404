"""Tests for the transaction tracker facade."""

from __future__ import annotations

import pytest

from tests.tx_tracker.helpers import (
    GENESIS,
    RecordingChain,
    RecordingSink,
    finalized,
    new_block,
    new_tx,
)
from tx_tracker.subspecs.tracker import (
    InvalidOutcome,
    TransactionTracker,
    TxState,
    ValidOutcome,
)


class TestLifecycles:
    """End-to-end event streams through a single tracker."""

    def test_included_then_finalized_by_descendant(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """Settled on inclusion, done when a descendant is finalized."""
        chain.add_block("B1", GENESIS, ["A"])
        chain.add_block("B2", "B1")

        tracker(new_tx("A"))
        tracker(new_block("B1"))
        assert sink.signals == [("settled", "A", ValidOutcome(block_hash="B1", successful=True))]

        tracker(new_block("B2", "B1"))
        tracker(finalized("B2"))

        assert sink.done == ["A"]
        assert chain.unpinned == ["B1"]

    def test_invalidated_transaction(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """An invalidated transaction settles once and produces nothing else."""
        chain.add_block("B1", GENESIS, invalid=["A"])
        chain.add_block("B2", "B1", ["A"])

        tracker.replay([new_tx("A"), new_block("B1"), new_block("B2", "B1")])

        assert sink.signals == [("settled", "A", InvalidOutcome(block_hash="B1"))]
        assert chain.count("is_tx_successful") == 0

    def test_sibling_fork_is_pruned(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """Finalizing one sibling releases the other with its subtree."""
        chain.add_block("B1", GENESIS)
        chain.add_block("B1'", GENESIS, ["A"])
        chain.add_block("B2'", "B1'")

        tracker.replay(
            [
                new_tx("A"),
                new_tx("B"),
                new_block("B1"),
                new_block("B1'"),
                new_block("B2'", "B1'"),
                finalized("B1"),
            ]
        )

        assert sink.settled == [("A", ValidOutcome(block_hash="B1'", successful=True))]
        assert sink.done == []
        assert chain.unpinned == ["B1'", "B2'"]
        assert "B" in tracker.queue

    def test_signals_follow_event_order(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """Settled always precedes done, and both follow arrival order."""
        chain.add_block("B1", GENESIS, ["b", "a"])
        chain.add_block("B2", "B1", ["c"])

        tracker.replay(
            [
                new_tx("a"),
                new_tx("b"),
                new_tx("c"),
                new_block("B1"),
                new_block("B2", "B1"),
                finalized("B2"),
            ]
        )

        assert [(kind, tx_id) for kind, tx_id, _ in sink.signals] == [
            ("settled", "a"),
            ("settled", "b"),
            ("settled", "c"),
            ("done", "a"),
            ("done", "b"),
            ("done", "c"),
        ]

    def test_duplicate_transaction_is_independent(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """A second submission of the same identifier gets its own lifecycle."""
        chain.add_block("B1", GENESIS, ["A"])

        first = tracker.on_new_transaction("A")
        second = tracker.on_new_transaction("A")
        tracker(new_block("B1"))
        tracker(finalized("B1"))

        assert first is not second
        assert first.state is TxState.DONE
        assert second.state is TxState.DONE
        assert sink.done == ["A", "A"]
        assert chain.count("is_tx_successful", "B1", "A") == 1

    def test_transaction_after_block_waits_for_next(
        self,
        tracker: TransactionTracker,
        chain: RecordingChain,
        sink: RecordingSink,
    ) -> None:
        """Blocks seen before a submission are never rechecked for it."""
        chain.add_block("B1", GENESIS, ["A"])
        chain.add_block("B2", "B1")

        tracker.replay([new_block("B1"), new_tx("A"), new_block("B2", "B1")])

        assert sink.signals == []
        assert chain.count("get_body", "B1") == 0
        assert chain.count("is_tx_valid", "B2", "A") == 1


class TestDispatch:
    """Tests for event routing and construction."""

    def test_rejects_unknown_event(self, tracker: TransactionTracker) -> None:
        """Only the three chain events are accepted."""
        with pytest.raises(TypeError, match="Unsupported event type: str"):
            tracker.handle("newBlock")  # type: ignore[arg-type]

    def test_replay_counts_events(self, tracker: TransactionTracker, chain: RecordingChain) -> None:
        """Replay reports how many events were handled."""
        chain.add_block("B1", GENESIS)

        assert tracker.replay([new_tx("A"), new_block("B1"), finalized("B1")]) == 3
        assert tracker.frontier == "B1"

    def test_initial_frontier(self, chain: RecordingChain, sink: RecordingSink) -> None:
        """The frontier given at construction is used before any block arrives."""
        tracker = TransactionTracker(provider=chain, output=sink, finalized="F")

        assert tracker.frontier == "F"

    def test_frontier_adopted_from_first_block(self, tracker: TransactionTracker) -> None:
        """Without an initial frontier, the first block's parent becomes it."""
        assert tracker.frontier is None

        tracker(new_block("B1", "P"))

        assert tracker.frontier == "P"

    def test_instances_do_not_share_state(self, chain: RecordingChain) -> None:
        """Two trackers on one provider keep separate queues and trees."""
        left_sink, right_sink = RecordingSink(), RecordingSink()
        left = TransactionTracker(provider=chain, output=left_sink)
        right = TransactionTracker(provider=chain, output=right_sink)
        chain.add_block("B1", GENESIS, ["A"])

        left(new_tx("A"))
        right(new_block("B1"))

        assert len(left.queue) == 1
        assert len(right.queue) == 0
        assert "B1" not in left.tree
        assert right_sink.signals == []
