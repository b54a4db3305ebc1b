"""Command-line entry point."""

import argparse
import asyncio
import sys
from pathlib import Path

from sentence_breaker import __version__
from sentence_breaker.config import ConfigError, get_settings, logger, require_api_key, setup_logging
from sentence_breaker.tui import TranslatorApp


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="sentence-breaker",
        description=(
            "Translate sentences between a language you know and one you are "
            "learning, with a word-by-word grammatical breakdown."
        ),
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Logging level (default: LOG_LEVEL env var or WARNING)",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Write logs to this file instead of stderr",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(args.log_level, args.log_file)

    try:
        require_api_key(get_settings())
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    try:
        asyncio.run(TranslatorApp().run())
    except KeyboardInterrupt:
        return 130
    logger.debug("Session ended")
    return 0


def run() -> None:
    sys.exit(main())
