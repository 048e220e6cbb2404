"""
Chain Event Types.

This module defines the notifications that flow from the chain client into
the tracker. Events arrive one at a time, in order, and each is processed to
completion before the next.

Event Flow
----------
::

    Event Source (ordered stream)
           |
    TransactionTracker.handle (pattern matching dispatch)
           |
           +-- NewTransactionEvent  --> Pending queue
           +-- NewBlockEvent        --> Block tree + settlement engine
           +-- FinalizedEvent       --> Finalization manager

The models accept the camelCase JSON shape emitted by chain clients, with a
`type` discriminator::

    {"type": "newBlock", "blockHash": "0x02", "parent": "0x01"}
    {"type": "newTransaction", "value": "0xaa"}
    {"type": "finalized", "blockHash": "0x02"}
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import AliasChoices, Field, TypeAdapter

from tx_tracker.types import BlockHash, StrictBaseModel, TxId


class NewBlockEvent(StrictBaseModel):
    """
    A block was produced and announced.

    The block may be on any fork. Its parent is usually, but not necessarily,
    already known to the tracker.
    """

    type: Literal["newBlock"] = "newBlock"
    """Discriminator field for serialization."""

    block_hash: BlockHash
    """Hash of the new block."""

    parent_hash: BlockHash = Field(
        validation_alias=AliasChoices("parentHash", "parent", "parent_hash"),
    )
    """Hash of the block's parent."""


class NewTransactionEvent(StrictBaseModel):
    """A transaction was submitted and should be followed until it is done."""

    type: Literal["newTransaction"] = "newTransaction"
    """Discriminator field for serialization."""

    value: TxId
    """The transaction identifier."""


class FinalizedEvent(StrictBaseModel):
    """
    A block was finalized.

    Finality is not announced for every block: the block's unannounced
    ancestors are implicitly finalized as well.
    """

    type: Literal["finalized"] = "finalized"
    """Discriminator field for serialization."""

    block_hash: BlockHash
    """Hash of the newly finalized block."""


IncomingEvent = Annotated[
    NewBlockEvent | NewTransactionEvent | FinalizedEvent,
    Field(discriminator="type"),
]
"""Union of all incoming event types for pattern matching dispatch."""

EVENT_ADAPTER: TypeAdapter[NewBlockEvent | NewTransactionEvent | FinalizedEvent] = TypeAdapter(
    IncomingEvent
)
"""Validates a single raw event mapping into its model."""
