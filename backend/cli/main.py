"""
DocMirror Command Line Entry Point.

Usage:
    docmirror <source> <destination> <file_name_regex> [--once] [--interval SECONDS]
Requires Python 3.11+.
"""

import argparse
import sys
from pathlib import Path

from utils.config import get_settings
from utils.errors import DocMirrorError
from utils.logger import configure_logging, get_logger
from watcher.watch_loop import WatchLoop

logger = get_logger("docmirror")


def positive_float(value: str) -> float:
    """Argparse type for a strictly positive number of seconds."""
    try:
        number = float(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"not a number: {value}") from e
    if not number > 0:
        raise argparse.ArgumentTypeError(f"must be positive: {value}")
    return number


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="docmirror",
        description=(
            "Mirror a source tree into a destination directory, resolving "
            "<!-- include::name --> directives, and republish on change"
        ),
    )
    parser.add_argument("source", type=Path, nargs="?", help="Directory to watch")
    parser.add_argument("destination", type=Path, nargs="?", help="Directory to publish into")
    parser.add_argument(
        "pattern",
        nargs="?",
        help="Regular expression matched against file names, e.g. '.*\\.md'",
    )
    parser.add_argument(
        "--once",
        action="store_true",
        help="Publish once and exit instead of watching",
    )
    parser.add_argument(
        "--interval",
        type=positive_float,
        default=None,
        help="Seconds between polls (default from WATCHER_POLL_INTERVAL_SECONDS)",
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Main entry point.

    Returns:
        Process exit status
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.source is None or args.destination is None or args.pattern is None:
        parser.print_usage()
        return 0

    configure_logging()
    settings = get_settings()

    logger.info(
        "starting",
        app_name=settings.app_name,
        version=settings.app_version,
        source=str(args.source),
        destination=str(args.destination),
        pattern=args.pattern,
    )

    try:
        loop = WatchLoop(
            args.source,
            args.destination,
            args.pattern,
            poll_interval=args.interval,
        )
        if args.once:
            result = loop.publish()
            return 0 if result.ok else 1
        loop.run()
    except DocMirrorError as e:
        logger.error("setup_failed", error=str(e))
        return 1
    except OSError as e:
        logger.error("watch_failed", error=str(e))
        return 1
    except KeyboardInterrupt:
        logger.info("stopped")
        return 0

    return 0


def run() -> None:
    """Console script wrapper."""
    sys.exit(main())


if __name__ == "__main__":
    run()
