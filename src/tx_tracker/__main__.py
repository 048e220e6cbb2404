"""
Transaction tracker CLI entry point.

Replay a recorded scenario (chain description plus event stream) through a
tracker and print every settled, done, and unpin signal it produces.

Usage::

    python -m tx_tracker scenario.yaml
    python -m tx_tracker scenario.yaml --verbose
    python -m tx_tracker scenario.yaml --metrics

Options:
    SCENARIO     Path to scenario YAML file (required)
    --metrics    Print Prometheus metrics after the replay
    --verbose    Enable debug logging
    --no-color   Disable colored logging output
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

import yaml
from pydantic import ValidationError

from tx_tracker.config import TX_TRACKER_ENV
from tx_tracker.subspecs.chain.scenario import Scenario
from tx_tracker.subspecs.metrics import generate_metrics
from tx_tracker.subspecs.tracker import LoggingSink, TransactionTracker
from tx_tracker.types import TrackerError

logger = logging.getLogger(__name__)


class ColoredFormatter(logging.Formatter):
    """Logging formatter with ANSI colors for better readability."""

    # ANSI color codes
    GREY = "\x1b[38;5;244m"
    BLUE = "\x1b[38;5;39m"
    GREEN = "\x1b[38;5;40m"
    YELLOW = "\x1b[38;5;220m"
    RED = "\x1b[38;5;196m"
    BOLD_RED = "\x1b[38;5;196;1m"
    CYAN = "\x1b[38;5;51m"
    RESET = "\x1b[0m"

    LEVEL_COLORS = {
        logging.DEBUG: GREY,
        logging.INFO: GREEN,
        logging.WARNING: YELLOW,
        logging.ERROR: RED,
        logging.CRITICAL: BOLD_RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with colors."""
        color = self.LEVEL_COLORS.get(record.levelno, self.RESET)

        timestamp = self.formatTime(record, self.datefmt)
        colored_time = f"{self.CYAN}{timestamp}{self.RESET}"
        levelname = f"{color}{record.levelname:8}{self.RESET}"
        name = f"{self.BLUE}{record.name}{self.RESET}"

        return f"{colored_time} {levelname} {name}: {record.getMessage()}"


def setup_logging(verbose: bool = False, no_color: bool = False) -> None:
    """Configure logging for the replay with optional colors."""
    level = logging.DEBUG if verbose else logging.INFO

    handler = logging.StreamHandler()
    handler.setLevel(level)

    # Test runs capture output, where escape codes are noise.
    if no_color or TX_TRACKER_ENV == "test":
        formatter = logging.Formatter(
            "%(asctime)s %(levelname)-8s %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    else:
        formatter = ColoredFormatter(datefmt="%Y-%m-%d %H:%M:%S")

    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


def run_scenario(scenario: Scenario) -> list[str]:
    """
    Replay a scenario through a fresh tracker.

    Args:
        scenario: The chain description and event stream.

    Returns:
        Transcript of signals: settled and done lines from the sink, followed
        by one unpin line per released block.
    """
    chain = scenario.build_chain()
    sink = LoggingSink()
    tracker = TransactionTracker(provider=chain, output=sink, finalized=scenario.finalized)

    handled = tracker.replay(scenario.events)

    logger.info(
        "Replayed %d events: frontier=%s pending=%d tracked=%d unpinned=%d finalizations=%d",
        handled,
        tracker.frontier,
        len(tracker.queue),
        len(tracker.tree),
        len(chain.unpinned),
        tracker.finalization.finalized_count,
    )

    return sink.lines + [f"unpin {block_hash}" for block_hash in chain.unpinned]


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    parser = argparse.ArgumentParser(
        prog="tx-tracker",
        description="Replay chain events through a transaction tracker",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__,
    )
    parser.add_argument(
        "scenario",
        type=Path,
        help="Path to scenario YAML file",
    )
    parser.add_argument(
        "--metrics",
        action="store_true",
        help="Print Prometheus metrics after the replay",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable colored logging output",
    )

    args = parser.parse_args(argv)

    setup_logging(args.verbose, args.no_color)

    logger.info("Loading scenario from %s", args.scenario)
    try:
        scenario = Scenario.from_yaml_file(args.scenario)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        logger.error("Failed to load scenario: %s", e)
        return 1

    try:
        transcript = run_scenario(scenario)
    except TrackerError as e:
        logger.error("Replay failed: %s", e)
        return 1

    for line in transcript:
        print(line)

    if args.metrics:
        sys.stdout.write(generate_metrics().decode("utf-8"))

    return 0


if __name__ == "__main__":
    sys.exit(main())
