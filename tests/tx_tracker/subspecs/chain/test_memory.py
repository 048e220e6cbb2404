"""Tests for the in-memory chain provider."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from tx_tracker.subspecs.chain import ChainBlock, ChainProvider, InMemoryChain
from tx_tracker.types import UnknownBlockError, UnpinError


@pytest.fixture
def memory_chain() -> InMemoryChain:
    """Two-block chain with one success, one failure and one invalid transaction."""
    chain = InMemoryChain()
    chain.add_block("B1", "0x00", ["a", "b"], failed=["b"])
    chain.add_block("B2", "B1", invalid=["c"])
    return chain


class TestLookups:
    """Tests for body and verdict lookups."""

    def test_satisfies_provider_protocol(self, memory_chain: InMemoryChain) -> None:
        """The in-memory chain can stand in for any provider."""
        assert isinstance(memory_chain, ChainProvider)

    def test_get_body(self, memory_chain: InMemoryChain) -> None:
        """Bodies are served in block order."""
        assert memory_chain.get_body("B1") == ["a", "b"]
        assert memory_chain.get_body("B2") == []

    def test_success(self, memory_chain: InMemoryChain) -> None:
        """Included transactions succeed unless listed as failed."""
        assert memory_chain.is_tx_successful("B1", "a")
        assert not memory_chain.is_tx_successful("B1", "b")

    def test_validity(self, memory_chain: InMemoryChain) -> None:
        """Transactions are valid unless listed as invalid."""
        assert memory_chain.is_tx_valid("B2", "a")
        assert not memory_chain.is_tx_valid("B2", "c")

    def test_unknown_block(self, memory_chain: InMemoryChain) -> None:
        """Lookups on undescribed blocks fail."""
        with pytest.raises(UnknownBlockError):
            memory_chain.get_body("B9")
        with pytest.raises(UnknownBlockError):
            memory_chain.is_tx_valid("B9", "a")


class TestPinning:
    """Tests for pin bookkeeping."""

    def test_blocks_start_pinned(self, memory_chain: InMemoryChain) -> None:
        """Every described block is pinned until released."""
        assert memory_chain.pinned == ["B1", "B2"]

    def test_unpin(self, memory_chain: InMemoryChain) -> None:
        """Unpinned blocks are recorded in call order."""
        memory_chain.unpin("B2")
        memory_chain.unpin("B1")

        assert memory_chain.unpinned == ["B2", "B1"]
        assert memory_chain.pinned == []

    def test_double_unpin(self, memory_chain: InMemoryChain) -> None:
        """Releasing a block twice is an error."""
        memory_chain.unpin("B1")

        with pytest.raises(UnpinError) as exc_info:
            memory_chain.unpin("B1")

        assert exc_info.value.block_hash == "B1"

    def test_unpin_unknown(self, memory_chain: InMemoryChain) -> None:
        """Releasing an undescribed block is an error."""
        with pytest.raises(UnpinError, match="Block B9 is not pinned"):
            memory_chain.unpin("B9")


class TestChainBlock:
    """Tests for block description validation."""

    def test_defaults(self) -> None:
        """Only the parent is required."""
        block = ChainBlock(parent="0x00")

        assert block.body == []
        assert block.invalid == []
        assert block.failed == []

    def test_rejects_empty_parent(self) -> None:
        """Parent hashes cannot be empty."""
        with pytest.raises(ValidationError):
            ChainBlock(parent="")

    def test_rejects_unknown_fields(self) -> None:
        """Typos in block descriptions are reported."""
        with pytest.raises(ValidationError):
            ChainBlock.model_validate({"parent": "0x00", "bodies": []})
