"""Identifier types for blocks and transactions."""

from pydantic import Field
from typing_extensions import Annotated

BlockHash = Annotated[
    str,
    Field(
        min_length=1,
        description="An opaque block hash.",
    ),
]
"""
A type alias for a block hash.

Hashes are opaque to the tracker: it only compares them for equality and
follows parent links between them.
"""

TxId = Annotated[
    str,
    Field(
        min_length=1,
        description="An opaque transaction identifier.",
    ),
]
"""
A type alias for a transaction identifier.

The same value may reappear as a distinct logical transaction.
"""
