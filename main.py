# main.py

"""Entry point for the price_monitor service."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from src.config.logging_config import setup_logging

logger = logging.getLogger("price_monitor.main")


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="price_monitor",
        description=(
            "Track prices on arbitrary web pages and email "
            "subscribers when they change."
        ),
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument(
        "--once",
        action="store_true",
        help="Run one price-check pass, send alerts, and exit.",
    )
    mode.add_argument(
        "--daemon",
        action="store_true",
        help="Run a pass on a fixed schedule until interrupted.",
    )
    mode.add_argument(
        "--list",
        action="store_true",
        dest="list_items",
        help="List monitored items.",
    )
    mode.add_argument(
        "--import-items",
        default=None,
        dest="import_items",
        metavar="FILE",
        help="Register items from a JSON file.",
    )
    mode.add_argument(
        "--health",
        action="store_true",
        help="Run a connectivity health check on every item page.",
    )
    parser.add_argument(
        "--db",
        default=None,
        dest="db_path",
        help="Item database path (default: data/items.db).",
    )
    return parser


def main() -> None:
    """Route to the requested runner."""
    log_file = setup_logging()
    logger.info("price_monitor starting, log file: %s", log_file)

    args = _build_parser().parse_args()
    db_path = Path(args.db_path) if args.db_path else None

    from src.cli import runner

    if args.once:
        sys.exit(runner.run_once(db_path))
    elif args.daemon:
        try:
            runner.run_daemon(db_path)
        except KeyboardInterrupt:
            logger.info("price_monitor daemon interrupted")
    elif args.list_items:
        sys.exit(runner.run_list(db_path))
    elif args.import_items:
        sys.exit(runner.run_import_items(Path(args.import_items), db_path))
    else:
        sys.exit(asyncio.run(runner.run_health_check(db_path)))


if __name__ == "__main__":
    main()
