"""
Tracker configuration constants.

Operational limits for the block tree.
"""

from __future__ import annotations

from typing import Final

MAX_RETIRED_BLOCKS: Final[int] = 1024
"""Maximum released block hashes remembered to ignore late re-announcements."""
