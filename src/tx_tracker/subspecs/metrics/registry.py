"""
Metric registry using prometheus_client.

Provides pre-defined metrics for the transaction tracker.
Exposes metrics in Prometheus text format.
"""

from __future__ import annotations

from prometheus_client import (
    CollectorRegistry,
    Counter,
    Gauge,
    Histogram,
    generate_latest,
)

# Create a dedicated registry for tracker metrics.
#
# Using a dedicated registry avoids pollution from default Python process metrics.
REGISTRY = CollectorRegistry()

# -----------------------------------------------------------------------------
# Transactions
# -----------------------------------------------------------------------------

txs_observed = Counter(
    "tx_tracker_transactions_observed_total",
    "Transactions received via newTransaction events",
    registry=REGISTRY,
)

txs_settled = Counter(
    "tx_tracker_transactions_settled_total",
    "Transactions settled, by outcome",
    ["outcome"],
    registry=REGISTRY,
)

txs_done = Counter(
    "tx_tracker_transactions_done_total",
    "Transactions whose settling block was finalized",
    registry=REGISTRY,
)

txs_dropped = Counter(
    "tx_tracker_transactions_dropped_total",
    "Settled transactions discarded with a pruned block",
    registry=REGISTRY,
)

pending_txs = Gauge(
    "tx_tracker_pending_transactions",
    "Transactions observed but not yet settled",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Blocks
# -----------------------------------------------------------------------------

blocks_observed = Counter(
    "tx_tracker_blocks_observed_total",
    "Distinct blocks inserted into the block tree",
    registry=REGISTRY,
)

blocks_unpinned = Counter(
    "tx_tracker_blocks_unpinned_total",
    "Blocks released to the provider, by reason",
    ["reason"],
    registry=REGISTRY,
)

tracked_blocks = Gauge(
    "tx_tracker_tracked_blocks",
    "Blocks currently held in the block tree",
    registry=REGISTRY,
)

unknown_ancestors = Counter(
    "tx_tracker_unknown_ancestor_total",
    "Finalized events whose lineage was not fully observed",
    registry=REGISTRY,
)

# -----------------------------------------------------------------------------
# Provider & Event Processing
# -----------------------------------------------------------------------------

provider_calls = Counter(
    "tx_tracker_provider_calls_total",
    "Chain provider lookups, by method",
    ["method"],
    registry=REGISTRY,
)

event_processing_time = Histogram(
    "tx_tracker_event_processing_seconds",
    "Event processing duration, by event type",
    ["event"],
    buckets=(0.0005, 0.001, 0.005, 0.01, 0.025, 0.05, 0.1, 0.5),
    registry=REGISTRY,
)


def generate_metrics() -> bytes:
    """
    Generate Prometheus metrics output.

    Returns:
        Prometheus text format output as bytes.
    """
    return generate_latest(REGISTRY)
