"""
Live results pipeline.

Fetches a round from the API or a local file, repairs and decodes it, ranks
it, and republishes a fresh snapshot on a fixed interval until stopped.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import AsyncIterator, Optional, Union

from ifsc_sdk import (
    IFSCClient,
    IFSCDecodeError,
    IFSCTransportError,
    RoundResults,
    load_round_results,
)

from .discipline import ConversionError
from .leaderboard import Leaderboard, build_leaderboard

logger = logging.getLogger(__name__)

DEFAULT_POLL_INTERVAL = 1.0  # seconds


# ============================================================================
# Sources
# ============================================================================


class ResultSource(ABC):
    """Where round results come from."""

    @abstractmethod
    async def fetch(self) -> RoundResults:
        pass

    @abstractmethod
    def describe(self) -> str:
        pass


class RemoteSource(ResultSource):
    """Results of one category round, fetched from the API."""

    def __init__(self, category_round_id: int, client: Optional[IFSCClient] = None):
        self.category_round_id = category_round_id
        self.client = client or IFSCClient()

    async def fetch(self) -> RoundResults:
        return await self.client.get_round_results(self.category_round_id)

    def describe(self) -> str:
        return f"category round {self.category_round_id} at {self.client.base_url}"


class FileSource(ResultSource):
    """
    Results read from a local snapshot file.

    With `reread` the file is read again on every cycle, so it can be edited
    while the leaderboard is running. Otherwise the first successful read is
    served for the lifetime of the source.
    """

    def __init__(self, path: Union[str, Path], reread: bool = True):
        self.path = Path(path)
        self.reread = reread
        self._cached: Optional[RoundResults] = None

    async def fetch(self) -> RoundResults:
        if not self.reread and self._cached is not None:
            return self._cached
        results = await asyncio.to_thread(load_round_results, self.path)
        self._cached = results
        return results

    def describe(self) -> str:
        return f"file {self.path}"


# ============================================================================
# Poll cycle
# ============================================================================


class PollStatus(str, Enum):
    OK = "ok"
    TRANSPORT_FAILED = "transport_failed"
    DECODE_FAILED = "decode_failed"


@dataclass(frozen=True)
class Snapshot:
    """One fully decoded and ranked round."""

    results: RoundResults
    leaderboard: Leaderboard
    fetched_at: datetime


@dataclass(frozen=True)
class PollOutcome:
    status: PollStatus
    snapshot: Optional[Snapshot] = None
    detail: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status == PollStatus.OK


async def poll_once(source: ResultSource) -> PollOutcome:
    """
    Run one fetch -> repair -> decode -> rank cycle.

    Transport and decode failures, and ascents that do not match the round's
    discipline, are reported in the outcome instead of raised. A round is
    only ever published whole.

    Args:
        source: Where to get the round from

    Returns:
        The outcome of the cycle
    """
    try:
        results = await source.fetch()
    except IFSCTransportError as e:
        logger.warning(f"Could not fetch {source.describe()}: {e}")
        return PollOutcome(status=PollStatus.TRANSPORT_FAILED, detail=str(e))
    except IFSCDecodeError as e:
        logger.error(f"Could not decode {source.describe()}: {e}")
        return PollOutcome(status=PollStatus.DECODE_FAILED, detail=str(e))

    try:
        leaderboard = build_leaderboard(results)
    except ConversionError as e:
        logger.error(f"Inconsistent round data from {source.describe()}: {e}")
        return PollOutcome(status=PollStatus.DECODE_FAILED, detail=str(e))

    snapshot = Snapshot(
        results=results,
        leaderboard=leaderboard,
        fetched_at=datetime.now(timezone.utc),
    )
    return PollOutcome(status=PollStatus.OK, snapshot=snapshot)


# ============================================================================
# Snapshot slot
# ============================================================================


class SnapshotSlot:
    """
    Single-slot mailbox between the poll task and its readers.

    Only the poll task writes. `latest` keeps the last good snapshot, so a
    failed cycle never replaces live data with a partial round.
    """

    def __init__(self):
        self._latest: Optional[Snapshot] = None
        self._last_outcome: Optional[PollOutcome] = None
        self._version = 0
        self._closed = False
        self._changed = asyncio.Event()

    @property
    def latest(self) -> Optional[Snapshot]:
        return self._latest

    @property
    def last_outcome(self) -> Optional[PollOutcome]:
        return self._last_outcome

    @property
    def version(self) -> int:
        return self._version

    @property
    def closed(self) -> bool:
        return self._closed

    def _notify(self) -> None:
        changed, self._changed = self._changed, asyncio.Event()
        changed.set()

    def publish(self, outcome: PollOutcome) -> None:
        if self._closed:
            logger.debug("Dropping outcome published to a closed slot")
            return
        if outcome.snapshot is not None:
            self._latest = outcome.snapshot
        self._last_outcome = outcome
        self._version += 1
        self._notify()

    def close(self) -> None:
        self._closed = True
        self._notify()

    def reopen(self) -> None:
        self._closed = False

    async def wait_for_update(self, after_version: int) -> int:
        """
        Wait until something newer than `after_version` is published.

        Returns:
            The current version; unchanged if the slot was closed meanwhile
        """
        while self._version <= after_version and not self._closed:
            await self._changed.wait()
        return self._version


# ============================================================================
# Poller
# ============================================================================


class LeaderboardPoller:
    """
    Background task republishing a round on a fixed interval.

    Usage:
        async with LeaderboardPoller(RemoteSource(8123)) as poller:
            async for outcome in poller.updates():
                ...
    """

    def __init__(
        self,
        source: ResultSource,
        interval: float = DEFAULT_POLL_INTERVAL,
        slot: Optional[SnapshotSlot] = None,
    ):
        self.source = source
        self.interval = interval
        self.slot = slot or SnapshotSlot()
        self._task: Optional[asyncio.Task] = None
        self._stopped = False

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    def start(self) -> None:
        """Start polling. Must be called from a running event loop."""
        if self.running:
            return
        self._stopped = False
        self.slot.reopen()
        self._task = asyncio.create_task(self._run())
        logger.info(f"Polling {self.source.describe()} every {self.interval}s")

    async def stop(self) -> None:
        """Stop polling; nothing is published once this returns."""
        self._stopped = True
        self.slot.close()
        task, self._task = self._task, None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info(f"Stopped polling {self.source.describe()}")

    async def _run(self) -> None:
        while not self._stopped:
            try:
                outcome = await poll_once(self.source)
            except Exception as e:
                # Unexpected failures cost one cycle, not the poller
                logger.exception(f"Unexpected error polling {self.source.describe()}")
                outcome = PollOutcome(
                    status=PollStatus.TRANSPORT_FAILED,
                    detail=f"{type(e).__name__}: {e}",
                )
            if self._stopped:
                break
            self.slot.publish(outcome)
            await asyncio.sleep(self.interval)

    async def updates(self) -> AsyncIterator[PollOutcome]:
        """Yield the newest outcome after each publish, until the poller is stopped."""
        version = self.slot.version
        while True:
            version = await self.slot.wait_for_update(version)
            if self.slot.closed:
                return
            outcome = self.slot.last_outcome
            if outcome is not None:
                yield outcome

    async def __aenter__(self) -> "LeaderboardPoller":
        self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.stop()
