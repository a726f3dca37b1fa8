"""IFSC Leaderboard - Live ranked leaderboards for IFSC competition rounds."""

from .discipline import ConversionError, convert_ascents, get_adapter
from .leaderboard import Leaderboard, LeaderboardRow, build_leaderboard
from .pipeline import (
    FileSource,
    LeaderboardPoller,
    PollOutcome,
    PollStatus,
    RemoteSource,
    Snapshot,
    SnapshotSlot,
    poll_once,
)
from .ranking import compute_ranks, rank_items

__all__ = [
    "ConversionError",
    "convert_ascents",
    "get_adapter",
    "Leaderboard",
    "LeaderboardRow",
    "build_leaderboard",
    "FileSource",
    "LeaderboardPoller",
    "PollOutcome",
    "PollStatus",
    "RemoteSource",
    "Snapshot",
    "SnapshotSlot",
    "poll_once",
    "compute_ranks",
    "rank_items",
]
