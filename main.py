# main.py

"""Entry point for the price spotlight (TUI or headless console)."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging
from src.config.settings import Settings

logger = logging.getLogger("price_spotlight.main")


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        msg = f"must be a positive integer, got {value}"
        raise argparse.ArgumentTypeError(msg)
    return number


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_spotlight",
        description="Rotating price-history spotlight for an inventory.",
    )
    parser.add_argument(
        "-i",
        "--inventory",
        default=None,
        help=(
            "Grouped inventory JSON file "
            f"(default: {Settings.INVENTORY_PATH})."
        ),
    )
    parser.add_argument(
        "-p",
        "--period-ms",
        type=_positive_int,
        default=None,
        dest="period_ms",
        help=(
            "Rotation interval in milliseconds "
            f"(default: {Settings.ROTATION_PERIOD_MS})."
        ),
    )
    parser.add_argument(
        "--headless",
        action="store_true",
        default=False,
        help="Print each item's history to the console instead of the TUI.",
    )
    parser.add_argument(
        "-t",
        "--ticks",
        type=_positive_int,
        default=None,
        help="Headless only: stop after this many rotations.",
    )
    return parser


def _run_tui(args: argparse.Namespace) -> None:
    """Launch the interactive Textual TUI."""
    from src.storage.inventory_file import InventoryFile
    from src.ui.app import SpotlightApp

    inventory = (
        InventoryFile(Path(args.inventory)) if args.inventory else None
    )
    try:
        app = SpotlightApp(inventory=inventory, period_ms=args.period_ms)
        app.run()
    except Exception:
        logger.critical("Fatal error during TUI run", exc_info=True)
        raise
    finally:
        logger.info("price_spotlight TUI shutting down")


def _run_headless(args: argparse.Namespace) -> None:
    """Run the console spotlight and exit."""
    from src.cli.runner import run_headless

    try:
        exit_code = asyncio.run(
            run_headless(
                inventory_path=args.inventory,
                period_ms=args.period_ms,
                ticks=args.ticks,
            )
        )
    except KeyboardInterrupt:
        logger.info("Headless run interrupted")
        exit_code = 0
    sys.exit(exit_code)


def main() -> None:
    """Route to the TUI (default) or the headless console runner."""
    parser = _build_parser()
    args = parser.parse_args()

    log_file = setup_logging(console=args.headless)
    logger.info("price_spotlight starting, log file: %s", log_file)

    if args.headless:
        _run_headless(args)
    else:
        _run_tui(args)


if __name__ == "__main__":
    main()
