"""
Transaction lifecycle tracking.

What Is Tracked?
----------------
A submitted transaction goes through two externally visible milestones:

1. **Settled**: some block included it (successfully or not), or made it
   invalid for good.
2. **Done**: the block it settled in became finalized.

The Challenge
-------------
- Blocks arrive on competing forks
- Finality is announced sparsely: one finalized event may cover many blocks
- Provider lookups are expensive and must not be repeated
- Block state stays pinned in the provider until explicitly released

How It Works
------------
- Submitted transactions wait in a FIFO queue
- Every new block is matched against the queue; settled ones leave it
- Blocks are kept in a tree rooted at the last finalized block
- A finalized event walks the tree, emits done signals, prunes dead forks,
  and unpins everything that is no longer needed
"""

from __future__ import annotations

__all__ = [
    # Main tracker
    "TransactionTracker",
    "ChainEvent",
    # Events
    "EVENT_ADAPTER",
    "FinalizedEvent",
    "IncomingEvent",
    "NewBlockEvent",
    "NewTransactionEvent",
    # Outcomes & sinks
    "InvalidOutcome",
    "LoggingSink",
    "OutputSink",
    "TxOutcome",
    "ValidOutcome",
    # Components
    "BlockNode",
    "BlockTree",
    "FinalizationManager",
    "FinalizationReport",
    "PendingQueue",
    "SettlementEngine",
    "TxRecord",
    # States
    "BlockStatus",
    "TxState",
    # Configuration constants
    "MAX_RETIRED_BLOCKS",
]

from .block_tree import BlockNode, BlockTree
from .config import MAX_RETIRED_BLOCKS
from .events import (
    EVENT_ADAPTER,
    FinalizedEvent,
    IncomingEvent,
    NewBlockEvent,
    NewTransactionEvent,
)
from .finalization import FinalizationManager, FinalizationReport
from .outcome import InvalidOutcome, TxOutcome, ValidOutcome
from .queue import PendingQueue, TxRecord
from .settlement import SettlementEngine
from .sink import LoggingSink, OutputSink
from .states import BlockStatus, TxState
from .tracker import ChainEvent, TransactionTracker
