"""
Global configuration for the transaction tracker.

This module contains environment-specific settings that apply across all subspecs.
"""

import os

_SUPPORTED_TX_TRACKER_ENVS: list[str] = ["prod", "test"]

TX_TRACKER_ENV = os.environ.get("TX_TRACKER_ENV", "prod").lower()
"""The environment flag ('prod' or 'test'). Defaults to 'prod'."""

if TX_TRACKER_ENV not in _SUPPORTED_TX_TRACKER_ENVS:
    raise ValueError(
        f"Invalid TX_TRACKER_ENV environment variable: '{TX_TRACKER_ENV}'. "
        f"Supported values: {_SUPPORTED_TX_TRACKER_ENVS}"
    )
