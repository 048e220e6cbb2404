"""Reusable type definitions for the transaction tracker."""

from .base import CamelModel, StrictBaseModel
from .exceptions import (
    TrackerError,
    UnknownAncestorError,
    UnknownBlockError,
    UnpinError,
)
from .hash import BlockHash, TxId

__all__ = [
    # Core types
    "BlockHash",
    "TxId",
    "CamelModel",
    "StrictBaseModel",
    # Exceptions
    "TrackerError",
    "UnknownAncestorError",
    "UnknownBlockError",
    "UnpinError",
]
