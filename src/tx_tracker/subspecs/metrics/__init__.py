"""
Metrics module for observability.

Provides counters, gauges, and histograms for tracking tracker behavior.
Exposes metrics in Prometheus text format.
"""

from .registry import (
    REGISTRY,
    blocks_observed,
    blocks_unpinned,
    event_processing_time,
    generate_metrics,
    pending_txs,
    provider_calls,
    tracked_blocks,
    txs_done,
    txs_dropped,
    txs_observed,
    txs_settled,
    unknown_ancestors,
)

__all__ = [
    "REGISTRY",
    "blocks_observed",
    "blocks_unpinned",
    "event_processing_time",
    "generate_metrics",
    "pending_txs",
    "provider_calls",
    "tracked_blocks",
    "txs_done",
    "txs_dropped",
    "txs_observed",
    "txs_settled",
    "unknown_ancestors",
]
