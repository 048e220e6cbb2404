"""Exception hierarchy for the transaction tracker."""

from __future__ import annotations

from collections.abc import Sequence


class TrackerError(Exception):
    """
    Base exception for all tracker errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r})"


class UnknownBlockError(TrackerError):
    """
    Raised when block data is requested for a block the tree does not track.

    Attributes:
        block_hash: The hash that was looked up.
    """

    def __init__(self, block_hash: str) -> None:
        self.block_hash = block_hash
        super().__init__(f"Block {block_hash} is not tracked")


class UnknownAncestorError(TrackerError):
    """
    Raised when a finalized block does not descend from the frontier in the tracked tree.

    The walk from the finalized block back to the frontier left the set of
    observed blocks. The part of the lineage that *was* observed is still
    carried so callers can act on it.

    Attributes:
        block_hash: The finalized block whose ancestry was walked.
        frontier: The frontier the walk was trying to reach.
        missing: The first hash on the walk that is not tracked.
        known_path: Tracked blocks on the walk, oldest first, ending at block_hash.
    """

    def __init__(
        self,
        block_hash: str,
        *,
        frontier: str | None,
        missing: str,
        known_path: Sequence[str] = (),
    ) -> None:
        self.block_hash = block_hash
        self.frontier = frontier
        self.missing = missing
        self.known_path = tuple(known_path)

        super().__init__(
            f"Block {block_hash} does not descend from frontier {frontier}: "
            f"ancestor {missing} was never observed"
        )


class UnpinError(TrackerError):
    """
    Raised by a chain provider when a block is unpinned that is not pinned.

    Attributes:
        block_hash: The hash passed to unpin.
    """

    def __init__(self, block_hash: str) -> None:
        self.block_hash = block_hash
        super().__init__(f"Block {block_hash} is not pinned")
