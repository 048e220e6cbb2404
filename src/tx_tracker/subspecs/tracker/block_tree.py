"""
Forking block tree rooted at the finalized frontier.

Why a Tree?
-----------
Blocks arrive on competing forks, and finality is announced only now and
then: a finalized event may name a block several generations past the
previous one. To decide which blocks became canonical and which can never
become canonical, the tracker needs explicit parent links, not a linear
history.

How It Works
------------
The tree maintains three data structures:

1. **Nodes**: Maps block hash to BlockNode (parent link, cached body, settlements)
2. **Children index**: Maps parent hash to child hashes for descendant lookup
3. **Retired set**: Hashes already released to the provider

The root is the **frontier**, the most recently finalized block. Finalizing a
block B:

- releases every tracked ancestor of B as FINALIZED (strictly older than B),
- releases every block that is neither B, a descendant of B, nor an ancestor
  of B as PRUNED,
- keeps B itself as the new FINALIZED root, still pinned.

Released nodes leave the tree. Their hashes are remembered (bounded, FIFO) so
a late announcement or a stale finalized event never revisits them.
"""

from __future__ import annotations

import logging
from collections import OrderedDict, defaultdict, deque
from dataclasses import dataclass, field

from tx_tracker.subspecs import metrics
from tx_tracker.subspecs.chain.provider import ChainProvider
from tx_tracker.types import UnknownAncestorError, UnknownBlockError

from .config import MAX_RETIRED_BLOCKS
from .queue import TxRecord
from .states import BlockStatus

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class BlockNode:
    """A block observed via a newBlock event."""

    hash: str
    """Hash of the block."""

    parent_hash: str
    """Hash of the parent block. The parent need not be tracked."""

    status: BlockStatus = BlockStatus.TRACKED
    """Finality status."""

    body: tuple[str, ...] | None = None
    """
    Transactions included in the block.

    Fetched from the provider on first use and cached for the node's lifetime.
    """

    settled_here: list[TxRecord] = field(default_factory=list)
    """
    Records settled by this block, in arrival order.

    Drained when the block is finalized.
    """


@dataclass(slots=True)
class BlockTree:
    """
    Tracked blocks from the frontier downward, across all known forks.

    Every provider body lookup goes through this tree, which guarantees at
    most one get_body call per block.
    """

    provider: ChainProvider
    """Source of block bodies."""

    frontier: str | None = None
    """
    Hash of the most recently finalized block.

    None until known. A tree without a frontier adopts the parent of the
    first inserted block.
    """

    _nodes: dict[str, BlockNode] = field(default_factory=dict)
    """Tracked blocks in insertion order."""

    _children: defaultdict[str, list[str]] = field(default_factory=lambda: defaultdict(list))
    """Parent-to-children index for descendant lookup."""

    _retired: OrderedDict[str, BlockStatus] = field(default_factory=OrderedDict)
    """Released hashes, oldest first, with the status they were released with."""

    def __len__(self) -> int:
        """Return the number of tracked blocks."""
        return len(self._nodes)

    def __contains__(self, block_hash: str) -> bool:
        """Check if a block is tracked."""
        return block_hash in self._nodes

    def get(self, block_hash: str) -> BlockNode | None:
        """
        Get a tracked block by hash.

        Returns:
            The BlockNode if tracked, None otherwise.
        """
        return self._nodes.get(block_hash)

    def is_retired(self, block_hash: str) -> bool:
        """Check if a block was already released to the provider."""
        return block_hash in self._retired

    def insert(self, block_hash: str, parent_hash: str) -> bool:
        """
        Add a newly observed block.

        Idempotent: a block that is already tracked, or was already released,
        is left untouched.

        Args:
            block_hash: Hash of the new block.
            parent_hash: Hash of its parent.

        Returns:
            True if the block was inserted, False if it was already known.
        """
        if block_hash in self._nodes or block_hash in self._retired:
            return False

        if block_hash == parent_hash:
            logger.warning("Ignoring block %s that names itself as parent", block_hash)
            return False

        if self.frontier is None:
            logger.info("Adopting %s as initial frontier", parent_hash)
            self.frontier = parent_hash

        node = BlockNode(hash=block_hash, parent_hash=parent_hash)

        # The frontier block can be announced after it was finalized.
        if block_hash == self.frontier:
            node.status = BlockStatus.FINALIZED

        self._nodes[block_hash] = node
        self._children[parent_hash].append(block_hash)

        metrics.blocks_observed.inc()
        metrics.tracked_blocks.set(len(self._nodes))
        return True

    def body(self, block_hash: str) -> tuple[str, ...]:
        """
        Get the transactions included in a tracked block.

        The first call fetches from the provider; later calls hit the cache.

        Raises:
            UnknownBlockError: If the block is not tracked.
        """
        node = self._nodes.get(block_hash)
        if node is None:
            raise UnknownBlockError(block_hash)

        if node.body is None:
            metrics.provider_calls.labels(method="get_body").inc()
            node.body = tuple(self.provider.get_body(block_hash))

        return node.body

    def path_from(self, old_frontier: str | None, new_finalized: str) -> list[str]:
        """
        Compute the chain segment finalized by moving the frontier.

        Walks parent links backward from `new_finalized` until `old_frontier`
        is reached.

        Args:
            old_frontier: The current frontier (excluded from the result).
            new_finalized: The newly finalized block (included in the result).

        Returns:
            Hashes from the frontier's child through `new_finalized`, oldest first.
            Empty when both hashes are equal.

        Raises:
            UnknownAncestorError: If the walk leaves the tracked set before
                reaching `old_frontier`. The error carries the tracked part of
                the walk as `known_path`.
        """
        path: list[str] = []
        visited: set[str] = set()
        current = new_finalized

        while current != old_frontier:
            node = self._nodes.get(current)
            if node is None or current in visited:
                path.reverse()
                raise UnknownAncestorError(
                    new_finalized,
                    frontier=old_frontier,
                    missing=current,
                    known_path=path,
                )
            path.append(current)
            visited.add(current)
            current = node.parent_hash

        path.reverse()
        return path

    def ancestors(self, block_hash: str) -> list[str]:
        """
        Tracked strict ancestors of a block, nearest first.

        Stops at the first parent that is not tracked.
        """
        result: list[str] = []
        seen = {block_hash}
        node = self._nodes.get(block_hash)

        while node is not None:
            parent = self._nodes.get(node.parent_hash)
            if parent is None or parent.hash in seen:
                break
            seen.add(parent.hash)
            result.append(parent.hash)
            node = parent

        return result

    def descendants(self, block_hash: str) -> list[str]:
        """
        Tracked strict descendants of a block, breadth first.

        The block itself need not be tracked: children that named it as parent
        are still found.
        """
        result: list[str] = []
        seen = {block_hash}
        queue = deque(self._children.get(block_hash, ()))

        while queue:
            child = queue.popleft()
            if child in seen:
                continue
            seen.add(child)
            result.append(child)
            queue.extend(self._children.get(child, ()))

        return result

    def prune_siblings(self, finalized_hash: str) -> list[BlockNode]:
        """
        Release every block that can no longer become canonical.

        A block survives if it is the finalized block, one of its descendants,
        or one of its tracked ancestors (those are released by
        advance_frontier instead). Everything else sits on a competing fork.

        Args:
            finalized_hash: The newly finalized block.

        Returns:
            Released nodes in insertion order, marked PRUNED.
        """
        keep = {
            finalized_hash,
            *self.descendants(finalized_hash),
            *self.ancestors(finalized_hash),
        }
        doomed = [block_hash for block_hash in self._nodes if block_hash not in keep]
        return [self._release(block_hash, BlockStatus.PRUNED) for block_hash in doomed]

    def advance_frontier(self, block_hash: str) -> list[BlockNode]:
        """
        Move the frontier to a newly finalized block.

        All tracked ancestors of the block are strictly older than the new
        frontier, so they are released. The block itself stays as the root.

        Args:
            block_hash: The newly finalized block.

        Returns:
            Released ancestor nodes, oldest first, marked FINALIZED.
        """
        older = list(reversed(self.ancestors(block_hash)))
        released = [self._release(ancestor, BlockStatus.FINALIZED) for ancestor in older]

        node = self._nodes.get(block_hash)
        if node is not None:
            node.status = BlockStatus.FINALIZED

        self.frontier = block_hash
        return released

    def _release(self, block_hash: str, status: BlockStatus) -> BlockNode:
        """Remove a node from the tree and remember its hash as retired."""
        node = self._nodes.pop(block_hash)
        if node.status is BlockStatus.TRACKED:
            node.status = status

        # Clean up parent index.
        #
        # If that leaves the parent with no children, remove the parent entry
        # entirely to avoid memory leaks from empty lists accumulating.
        siblings = self._children.get(node.parent_hash)
        if siblings is not None:
            siblings.remove(block_hash)
            if not siblings:
                del self._children[node.parent_hash]
        self._children.pop(block_hash, None)

        self._retired[block_hash] = node.status
        if len(self._retired) > MAX_RETIRED_BLOCKS:
            self._retired.popitem(last=False)

        metrics.tracked_blocks.set(len(self._nodes))
        return node
