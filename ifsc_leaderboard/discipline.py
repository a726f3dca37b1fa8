"""
Discipline adapters.

Each discipline turns raw ascents into typed ascents and aggregates them into
a score. Scores are totally ordered and "greater is better", so the ranking
engine can treat every discipline the same way.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from functools import total_ordering
from typing import Generic, Optional, Sequence, TypeVar

from ifsc_sdk.models import Ascent, AscentStatus, DisciplineTag, RankedAthlete

# Attempts that are still being climbed or judged
LIVE_STATUSES = (AscentStatus.ACTIVE, AscentStatus.PENDING)


class ConversionError(Exception):
    """An ascent does not match the discipline declared for its round."""

    pass


# ============================================================================
# Boulder
# ============================================================================


@dataclass(frozen=True)
class BoulderAscent:
    top: bool
    top_tries: int
    zone: bool
    zone_tries: int
    status: AscentStatus

    @property
    def is_flash(self) -> bool:
        return self.top and self.top_tries == 1

    def display(self) -> str:
        if self.is_flash:
            mark = "F"
        elif self.top:
            mark = "T"
        elif self.zone:
            mark = "Z"
        else:
            mark = "-"
        return mark + ("*" if self.status in LIVE_STATUSES else "")


@total_ordering
@dataclass(frozen=True)
class BoulderScore:
    """
    Boulder round score.

    More tops, then more zones, then fewer tries spent on the tops, then the
    earlier start order.
    """

    tops: int
    zones: int
    top_tries: int
    start_order: int

    def sort_key(self) -> tuple[int, int, int, int]:
        return (self.tops, self.zones, -self.top_tries, -self.start_order)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, BoulderScore):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def display(self) -> list[str]:
        return [str(self.tops), str(self.zones), str(self.top_tries)]


# ============================================================================
# Lead
# ============================================================================


@dataclass(frozen=True)
class LeadAscent:
    score: str
    status: AscentStatus

    def display(self) -> str:
        return self.score


@total_ordering
@dataclass(frozen=True)
class LeadScore:
    """
    Lead round score.

    Only the value is compared; there is no secondary tie-break.
    """

    value: int

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, LeadScore):
            return NotImplemented
        return self.value < other.value

    def display(self) -> list[str]:
        return [str(self.value)]


# ============================================================================
# Speed
# ============================================================================


@dataclass(frozen=True)
class SpeedAscent:
    time_ms: int
    status: AscentStatus

    def display(self) -> str:
        return format_time_ms(self.time_ms)


@total_ordering
@dataclass(frozen=True)
class SpeedScore:
    """
    Speed round score: the best time of the round.

    `time_ms` is None when no time was recorded; that ranks below any time.
    """

    time_ms: Optional[int]

    def sort_key(self) -> tuple[bool, int]:
        if self.time_ms is None:
            return (False, 0)
        return (True, -self.time_ms)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, SpeedScore):
            return NotImplemented
        return self.sort_key() < other.sort_key()

    def display(self) -> list[str]:
        if self.time_ms is None:
            return ["-"]
        return [format_time_ms(self.time_ms)]


def format_time_ms(time_ms: int) -> str:
    """Format milliseconds as seconds, e.g. 6123 -> '6.123'."""
    return f"{time_ms / 1000:.3f}"


# ============================================================================
# Adapters
# ============================================================================

A = TypeVar("A")
S = TypeVar("S")


class DisciplineAdapter(ABC, Generic[A, S]):
    """Conversion and scoring rules of one discipline."""

    tag: DisciplineTag

    @abstractmethod
    def convert(self, ascent: Ascent) -> A:
        """Turn one raw ascent into this discipline's typed ascent."""

    @abstractmethod
    def score(self, start_order: int, ascents: Sequence[A]) -> S:
        """Aggregate an athlete's typed ascents into a comparable score."""


class BoulderAdapter(DisciplineAdapter[BoulderAscent, BoulderScore]):
    tag = DisciplineTag.BOULDER

    def convert(self, ascent: Ascent) -> BoulderAscent:
        if ascent.boulder is None:
            raise ConversionError("Ascent has no boulder data")
        payload = ascent.boulder
        return BoulderAscent(
            top=payload.top,
            top_tries=payload.top_tries or 0,
            zone=payload.zone,
            zone_tries=payload.zone_tries or 0,
            status=ascent.status,
        )

    def score(self, start_order: int, ascents: Sequence[BoulderAscent]) -> BoulderScore:
        return BoulderScore(
            tops=sum(1 for a in ascents if a.top),
            zones=sum(1 for a in ascents if a.zone),
            top_tries=sum(a.top_tries for a in ascents if a.top),
            start_order=start_order,
        )


class LeadAdapter(DisciplineAdapter[LeadAscent, LeadScore]):
    tag = DisciplineTag.LEAD

    def convert(self, ascent: Ascent) -> LeadAscent:
        if ascent.lead is None:
            raise ConversionError("Ascent has no lead data")
        return LeadAscent(score=ascent.lead.score, status=ascent.status)

    def score(self, start_order: int, ascents: Sequence[LeadAscent]) -> LeadScore:
        # TODO: parse the per-route scores ('32+', 'TOP') into a comparable
        # value once the IFSC lead ranking formula is settled.
        return LeadScore(value=0)


class SpeedAdapter(DisciplineAdapter[SpeedAscent, SpeedScore]):
    tag = DisciplineTag.SPEED

    def convert(self, ascent: Ascent) -> SpeedAscent:
        if ascent.speed is None:
            raise ConversionError("Ascent has no speed data")
        return SpeedAscent(time_ms=ascent.speed.time_ms, status=ascent.status)

    def score(self, start_order: int, ascents: Sequence[SpeedAscent]) -> SpeedScore:
        return SpeedScore(time_ms=min((a.time_ms for a in ascents), default=None))


ADAPTERS: dict[DisciplineTag, DisciplineAdapter] = {
    adapter.tag: adapter for adapter in (BoulderAdapter(), LeadAdapter(), SpeedAdapter())
}

_missing = set(DisciplineTag) - set(ADAPTERS)
if _missing:
    raise RuntimeError(f"No adapter for disciplines: {sorted(t.value for t in _missing)}")


def get_adapter(discipline: DisciplineTag) -> DisciplineAdapter:
    """Get the adapter for a discipline."""
    return ADAPTERS[discipline]


def convert_ascents(discipline: DisciplineTag, athlete: RankedAthlete) -> list:
    """
    Convert all ascents of an athlete under the round's discipline.

    Args:
        discipline: The discipline declared by the round
        athlete: Ranking entry holding the raw ascents

    Returns:
        Typed ascents in upstream order

    Raises:
        ConversionError: If any ascent does not carry the discipline's data
    """
    adapter = get_adapter(discipline)
    converted = []
    for index, ascent in enumerate(athlete.ascents):
        try:
            converted.append(adapter.convert(ascent))
        except ConversionError as e:
            raise ConversionError(
                f"{discipline.value} round: ascent {index} of athlete "
                f"{athlete.athlete_id} ({athlete.firstname} {athlete.lastname}): {e}"
            ) from e
    return converted
