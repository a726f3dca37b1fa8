"""
Leaderboard assembly.

Turns one round of raw results into ranked rows for display.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Optional

from ifsc_sdk.models import DisciplineTag, RoundResults

from .discipline import convert_ascents, get_adapter
from .ranking import compute_ranks

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeaderboardRow:
    athlete_id: int
    first_name: str
    last_name: str
    country: str
    active: bool
    rank: int
    ascents: list[Any] = field(default_factory=list)
    score: Any = None

    @property
    def display_name(self) -> str:
        initials = " ".join(f"{part[0]}." for part in self.first_name.split() if part)
        return f"{initials} {self.last_name}".strip()


@dataclass(frozen=True)
class Leaderboard:
    """Ranked rows of one round, in upstream order."""

    discipline: DisciplineTag
    title: str
    event: Optional[str]
    rows: list[LeaderboardRow]

    def by_rank(self) -> list[LeaderboardRow]:
        return sorted(self.rows, key=lambda row: row.rank)


def build_leaderboard(results: RoundResults) -> Leaderboard:
    """
    Convert, score and rank every athlete of a round.

    The rank reported by upstream is ignored; it is unstable between
    refreshes. Rows keep the order of `results.ranking`.

    Args:
        results: One decoded round

    Returns:
        The ranked leaderboard

    Raises:
        ConversionError: If any ascent does not match the round's discipline
    """
    adapter = get_adapter(results.discipline)

    converted = []
    for athlete in results.ranking:
        ascents = convert_ascents(results.discipline, athlete)
        # Upstream does not always send the start order
        start_order = athlete.start_order or 0
        converted.append((athlete, ascents, adapter.score(start_order, ascents)))

    ranks = compute_ranks([score for _, _, score in converted])

    rows = [
        LeaderboardRow(
            athlete_id=athlete.athlete_id,
            first_name=athlete.firstname,
            last_name=athlete.lastname,
            country=athlete.country,
            active=athlete.active,
            rank=rank,
            ascents=ascents,
            score=score,
        )
        for (athlete, ascents, score), rank in zip(converted, ranks)
    ]
    logger.debug(f"Ranked {len(rows)} athletes for {results.title}")

    return Leaderboard(
        discipline=results.discipline,
        title=results.title,
        event=results.event,
        rows=rows,
    )
