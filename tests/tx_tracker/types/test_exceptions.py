"""Tests for the tracker exception hierarchy."""

from __future__ import annotations

import pytest

from tx_tracker.types import (
    TrackerError,
    UnknownAncestorError,
    UnknownBlockError,
    UnpinError,
)


@pytest.mark.parametrize(
    "error",
    [
        UnknownBlockError("B1"),
        UnknownAncestorError("B3", frontier="B0", missing="B2"),
        UnpinError("B1"),
    ],
)
def test_all_errors_are_tracker_errors(error: TrackerError) -> None:
    """Callers can catch every tracker failure with one handler."""
    assert isinstance(error, TrackerError)
    assert str(error) == error.message


def test_repr_includes_message() -> None:
    """The repr shows the class and message."""
    assert repr(UnpinError("B1")) == "UnpinError('Block B1 is not pinned')"


def test_unknown_ancestor_details() -> None:
    """The error keeps the observed part of the walk."""
    error = UnknownAncestorError("B4", frontier="B0", missing="B2", known_path=["B3", "B4"])

    assert error.known_path == ("B3", "B4")
    assert error.message == (
        "Block B4 does not descend from frontier B0: ancestor B2 was never observed"
    )
