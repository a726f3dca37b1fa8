"""IFSC SDK - Python client for the IFSC round results API."""

from .client import (
    IFSCClient,
    IFSCClientError,
    IFSCDecodeError,
    IFSCTransportError,
    clean_api_output,
    decode_round_results,
    load_round_results,
)
from .models import (
    Ascent,
    AscentStatus,
    Athlete,
    BoulderAscentPayload,
    DisciplineTag,
    LeadAscentPayload,
    RankedAthlete,
    RoundResults,
    SpeedAscentPayload,
)

__all__ = [
    "IFSCClient",
    "IFSCClientError",
    "IFSCDecodeError",
    "IFSCTransportError",
    "clean_api_output",
    "decode_round_results",
    "load_round_results",
    "Ascent",
    "AscentStatus",
    "Athlete",
    "BoulderAscentPayload",
    "DisciplineTag",
    "LeadAscentPayload",
    "RankedAthlete",
    "RoundResults",
    "SpeedAscentPayload",
]
