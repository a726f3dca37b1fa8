"""
IFSC SDK Response Models

Pydantic models for parsing round results from the IFSC API.
"""

from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator


class DisciplineTag(str, Enum):
    """Discipline of a scoring round."""

    LEAD = "Lead"
    BOULDER = "Boulder"
    SPEED = "Speed"

    @classmethod
    def _missing_(cls, value: object) -> Optional["DisciplineTag"]:
        # Upstream is not consistent about casing ('boulder' vs 'Boulder')
        if isinstance(value, str):
            for member in cls:
                if member.value.lower() == value.lower():
                    return member
        return None


class AscentStatus(str, Enum):
    """Whether an attempt is still running or has been finalized."""

    ACTIVE = "active"
    PENDING = "pending"
    LOCKED = "locked"
    CONFIRMED = "confirmed"


class BoulderAscentPayload(BaseModel):
    """Boulder specific fields of an ascent."""

    top: bool
    top_tries: Optional[int] = Field(default=None, ge=0)
    zone: bool
    zone_tries: Optional[int] = Field(default=None, ge=0)


class LeadAscentPayload(BaseModel):
    """Lead specific fields of an ascent."""

    score: str  # e.g. '32+', 'TOP'


class SpeedAscentPayload(BaseModel):
    """Speed specific fields of an ascent."""

    time_ms: int = Field(..., ge=0)


# Flat keys that mark which discipline payload an ascent carries
_BOULDER_KEYS = ("top", "top_tries", "zone", "zone_tries")
_LEAD_KEYS = ("score",)
_SPEED_KEYS = ("time_ms",)


class Ascent(BaseModel):
    """
    One recorded attempt on one route.

    The API sends discipline fields flat on the ascent object, so they are
    lifted into the matching payload before validation. At most one payload
    is expected; none at all is accepted here and rejected at conversion.
    """

    status: AscentStatus
    route_id: Optional[int] = None
    route_name: Optional[str] = None
    boulder: Optional[BoulderAscentPayload] = None
    lead: Optional[LeadAscentPayload] = None
    speed: Optional[SpeedAscentPayload] = None

    @model_validator(mode="before")
    @classmethod
    def _lift_payloads(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data

        data = dict(data)
        if "boulder" not in data and "top" in data and "zone" in data:
            data["boulder"] = {k: data.pop(k) for k in _BOULDER_KEYS if k in data}
        if "lead" not in data and "score" in data:
            data["lead"] = {k: data.pop(k) for k in _LEAD_KEYS}
        if "speed" not in data and data.get("time_ms") is not None:
            data["speed"] = {k: data.pop(k) for k in _SPEED_KEYS}
        return data


class Athlete(BaseModel):
    """Athlete identity as sent with every ranking entry."""

    athlete_id: int
    firstname: str
    lastname: str
    country: str
    flag_url: Optional[str] = None
    bib: Optional[str] = None


class RankedAthlete(Athlete):
    """
    Ranking entry of a round.

    `rank` and `score` are what upstream reports; they are unstable between
    refreshes and are never used for ordering.
    """

    active: bool = False
    ascents: list[Ascent] = []
    rank: Optional[int] = None
    score: Optional[str] = None
    start_order: Optional[int] = None

    @field_validator("ascents", mode="before")
    @classmethod
    def _null_ascents(cls, value: Any) -> Any:
        return [] if value is None else value


class RoundResults(BaseModel):
    """Response from /category_rounds/{id}/results/."""

    discipline: DisciplineTag
    event: Optional[str] = None
    category: str
    round: str
    ranking: list[RankedAthlete] = []
    id: Optional[int] = None
    event_id: Optional[int] = None
    dcat_id: Optional[int] = None
    status: Optional[str] = None
    format: Optional[str] = None

    @field_validator("ranking", mode="before")
    @classmethod
    def _null_ranking(cls, value: Any) -> Any:
        return [] if value is None else value

    @property
    def title(self) -> str:
        return f"{self.discipline.value} - {self.category} - {self.round}"
