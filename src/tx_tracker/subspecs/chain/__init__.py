"""
Chain data access for the tracker.

The tracker never talks to a node directly. It consumes a ChainProvider:
block bodies, per-transaction verdicts, and unpin requests.
"""

from .memory import ChainBlock, InMemoryChain
from .provider import ChainProvider

__all__ = [
    "ChainBlock",
    "ChainProvider",
    "InMemoryChain",
]
