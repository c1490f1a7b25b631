#!/usr/bin/env python3
"""
Book Viewer - Live level-2 order book view for the Coinbase Exchange feed.

Usage:
    python -m book_viewer.main --identifier ETH-USD

    Or via the console script:
    book-viewer -i BTC-USD --log-file book.log --log-level DEBUG

Controls:
    q       - Quit
    j/Down  - Next row
    k/Up    - Previous row
"""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from .datafeed.coinbase_client import WS_FEED_URL, FeedError

DEFAULT_LOG_LEVEL = "INFO"


async def main(identifier: str, url: str = WS_FEED_URL) -> None:
    """Main entry point - subscribes, then runs the poll loop inside the UI."""

    # Import here to avoid slow startup for --help
    from .datafeed.coinbase_client import CoinbaseClient
    from .ui.book_view import run_ui

    print(f"Starting Book Viewer for {identifier}...")
    print(f"  Feed: {url}")
    print()

    client = CoinbaseClient(identifier, url=url)
    await client.subscribe()

    try:
        # Run UI (blocks until quit or feed failure)
        app = await run_ui(client)
    finally:
        await client.close()

    # Terminal is restored by now
    if app.feed_error is not None:
        raise app.feed_error


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Book Viewer - Live order book view for Coinbase Exchange",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    python -m book_viewer.main -i ETH-USD
    python -m book_viewer.main -i BTC-USD --log-file book.log --log-level DEBUG
        """
    )

    parser.add_argument(
        "-i", "--identifier",
        required=True,
        help='The crypto identifier to use (i.e. "ETH-USD")'
    )

    parser.add_argument(
        "--url",
        default=WS_FEED_URL,
        help=f"WebSocket feed URL (default: {WS_FEED_URL})"
    )

    parser.add_argument(
        "--log-file",
        default=None,
        help="Write logs to this file (default: no log file)"
    )

    parser.add_argument(
        "--log-level",
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help=f"Log level for --log-file (default: {DEFAULT_LOG_LEVEL})"
    )

    return parser


def configure_logging(log_file: str | None, log_level: str) -> None:
    """Log to a file only; the TUI owns the terminal."""
    if log_file is None:
        return
    logging.basicConfig(
        filename=log_file,
        level=log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def cli() -> None:
    """CLI entry point."""
    args = build_parser().parse_args()
    configure_logging(args.log_file, args.log_level)

    try:
        asyncio.run(main(args.identifier, args.url))
    except FeedError as e:
        print(f"Feed error: {e}", file=sys.stderr)
        sys.exit(1)
    except KeyboardInterrupt:
        print("\nShutdown requested.")
        sys.exit(0)


if __name__ == "__main__":
    cli()
