"""
Settlement outcomes reported to the output sink.

Serialized with camelCase aliases, so `model_dump(by_alias=True)` yields the
wire shape clients expect::

    {"type": "valid", "successful": true, "blockHash": "0xab..."}
    {"type": "invalid", "blockHash": "0xcd..."}
"""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

from tx_tracker.types import BlockHash, StrictBaseModel


class ValidOutcome(StrictBaseModel):
    """The transaction was included in the block."""

    type: Literal["valid"] = "valid"
    """Discriminator field for serialization."""

    block_hash: BlockHash
    """Block the transaction was included in."""

    successful: bool
    """Whether execution succeeded."""


class InvalidOutcome(StrictBaseModel):
    """The transaction became invalid as of the block and will never be included."""

    type: Literal["invalid"] = "invalid"
    """Discriminator field for serialization."""

    block_hash: BlockHash
    """Block against which the transaction was found invalid."""


TxOutcome = Annotated[ValidOutcome | InvalidOutcome, Field(discriminator="type")]
"""Union of settlement outcomes, discriminated by `type`."""


def outcome_label(outcome: ValidOutcome | InvalidOutcome) -> str:
    """Short label used for logs and metric labels."""
    match outcome:
        case ValidOutcome(successful=True):
            return "successful"
        case ValidOutcome():
            return "unsuccessful"
        case InvalidOutcome():
            return "invalid"
