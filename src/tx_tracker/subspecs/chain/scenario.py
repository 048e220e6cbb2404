"""Scenario loader.

A scenario bundles a chain description with the event stream a client
observed on it, so the stream can be replayed through a tracker.

The expected YAML format::

    finalized: "0x00"
    blocks:
      "0x01":
        parent: "0x00"
        body: ["tx-a", "tx-b"]
        failed: ["tx-b"]
      "0x02":
        parent: "0x01"
        invalid: ["tx-c"]
    events:
    - {type: newTransaction, value: tx-a}
    - {type: newTransaction, value: tx-b}
    - {type: newTransaction, value: tx-c}
    - {type: newBlock, blockHash: "0x01", parent: "0x00"}
    - {type: newBlock, blockHash: "0x02", parent: "0x01"}
    - {type: finalized, blockHash: "0x02"}

Hashes must be quoted: YAML reads an unquoted 0x00 as an integer.
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import Field, model_validator

from tx_tracker.subspecs.tracker.events import IncomingEvent, NewBlockEvent
from tx_tracker.types import BlockHash, StrictBaseModel

from .memory import ChainBlock, InMemoryChain


class Scenario(StrictBaseModel):
    """A chain description and the events observed on it."""

    finalized: BlockHash | None = None
    """
    Hash of the finalized block when the stream starts.

    When omitted, the parent of the first announced block is used.
    """

    blocks: dict[BlockHash, ChainBlock] = Field(default_factory=dict)
    """Every block the provider can answer for, keyed by hash."""

    events: list[IncomingEvent] = Field(default_factory=list)
    """Events in delivery order."""

    @model_validator(mode="after")
    def validate_announced_blocks(self) -> Scenario:
        """Verify every announced block is described with the same parent."""
        for event in self.events:
            if not isinstance(event, NewBlockEvent):
                continue
            block = self.blocks.get(event.block_hash)
            if block is None:
                raise ValueError(f"Block {event.block_hash} is announced but not described")
            if block.parent != event.parent_hash:
                raise ValueError(
                    f"Block {event.block_hash} is announced with parent {event.parent_hash} "
                    f"but described with parent {block.parent}"
                )
        return self

    def build_chain(self) -> InMemoryChain:
        """Create a provider serving this scenario's blocks."""
        return InMemoryChain(blocks=dict(self.blocks))

    @classmethod
    def from_yaml_file(cls, path: Path | str) -> Scenario:
        """
        Load a scenario from a YAML file.

        Raises:
            FileNotFoundError: If the file does not exist.
            yaml.YAMLError: If the file is not valid YAML.
            pydantic.ValidationError: If the data fails validation.
        """
        path = Path(path)
        with path.open(encoding="utf-8") as f:
            data = yaml.safe_load(f)
        return cls.model_validate(data)

    @classmethod
    def from_yaml(cls, content: str) -> Scenario:
        """
        Load a scenario from a YAML string.

        Useful for testing or programmatic scenario generation.
        """
        data = yaml.safe_load(content)
        return cls.model_validate(data)
