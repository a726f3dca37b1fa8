#!/usr/bin/env python3
"""
CLI for the IFSC live leaderboard.

Usage:
    ifsc-leaderboard --round-id 8123               # Follow a round live
    ifsc-leaderboard --file results.json           # Follow a local snapshot file
    ifsc-leaderboard --round-id 8123 --once        # Print the round once and exit
"""

import argparse
import asyncio
import logging
import sys
from typing import Optional

from ifsc_sdk import IFSCClient

from .config import get_settings
from .leaderboard import Leaderboard
from .pipeline import (
    FileSource,
    LeaderboardPoller,
    RemoteSource,
    ResultSource,
    Snapshot,
    poll_once,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def format_leaderboard(leaderboard: Leaderboard) -> str:
    """Render a leaderboard as plain text, best rank first."""
    lines = []
    if leaderboard.event:
        lines.append(leaderboard.event)
    lines.append(leaderboard.title)
    lines.append("-" * len(leaderboard.title))

    for row in leaderboard.by_rank():
        ascents = " ".join(a.display() for a in row.ascents)
        score = " ".join(row.score.display())
        marker = ">" if row.active else " "
        lines.append(
            f"{marker}{row.rank:>3}  {row.country:<3}  {row.display_name:<28} "
            f"{ascents:<24} {score}"
        )
    return "\n".join(lines)


def _print_snapshot(snapshot: Optional[Snapshot]) -> None:
    if snapshot is None:
        print("Nothing to show")
        return
    print(format_leaderboard(snapshot.leaderboard))
    print()


def _build_source(args: argparse.Namespace) -> ResultSource:
    settings = get_settings()
    if args.file:
        return FileSource(args.file, reread=not args.no_reread)
    client = IFSCClient(
        base_url=args.base_url or settings.BASE_URL,
        timeout=settings.REQUEST_TIMEOUT,
        authenticate=settings.AUTHENTICATE,
    )
    return RemoteSource(args.round_id, client)


async def run_leaderboard(args: argparse.Namespace) -> int:
    """Run the leaderboard based on CLI arguments."""
    source = _build_source(args)

    if args.once:
        outcome = await poll_once(source)
        if not outcome.ok:
            print(f"Error: {outcome.status.value}: {outcome.detail}")
            return 1
        _print_snapshot(outcome.snapshot)
        return 0

    interval_ms = args.interval_ms or get_settings().POLL_INTERVAL_MS
    async with LeaderboardPoller(source, interval=interval_ms / 1000) as poller:
        _print_snapshot(None)
        async for outcome in poller.updates():
            if outcome.ok:
                _print_snapshot(outcome.snapshot)
            elif poller.slot.latest is None:
                _print_snapshot(None)
    return 0


def main() -> int:
    """Main CLI entry point."""
    parser = argparse.ArgumentParser(
        description="IFSC live leaderboard",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  ifsc-leaderboard --round-id 8123                  # Follow a round live
  ifsc-leaderboard --round-id 8123 --interval-ms 5000
  ifsc-leaderboard --file results.json              # Read data from a local file
  ifsc-leaderboard --file results.json --once       # Print once and exit
        """,
    )

    source = parser.add_mutually_exclusive_group(required=True)
    source.add_argument(
        "--round-id",
        type=int,
        help="IFSC category round ID to follow (e.g., 8123)",
    )
    source.add_argument(
        "-f",
        "--file",
        help="Read data from a local file instead of from the API",
    )

    parser.add_argument(
        "--base-url",
        help="API base URL (default: IFSC_BASE_URL or the public proxy)",
    )

    parser.add_argument(
        "--interval-ms",
        type=int,
        help="Refresh interval in milliseconds (default: IFSC_POLL_INTERVAL_MS or 1000)",
    )

    parser.add_argument(
        "--no-reread",
        action="store_true",
        help="Read --file only once instead of on every refresh",
    )

    parser.add_argument(
        "--once",
        action="store_true",
        help="Fetch and print the leaderboard once, then exit",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )

    args = parser.parse_args()

    logging.getLogger().setLevel(get_settings().LOG_LEVEL.upper())
    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    try:
        return asyncio.run(run_leaderboard(args))
    except KeyboardInterrupt:
        print("\n\nInterrupted by user")
        return 1
    except Exception as e:
        logger.error(f"Leaderboard failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
