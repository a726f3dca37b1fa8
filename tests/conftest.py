from pathlib import Path

import pytest

DATA_DIR = Path(__file__).parent / "data"


@pytest.fixture
def boulder_round_path() -> Path:
    """Boulder semi-final with PHP warnings mixed into the JSON body."""
    return DATA_DIR / "boulder_semifinal.json"


@pytest.fixture
def boulder_round_text(boulder_round_path: Path) -> str:
    return boulder_round_path.read_text(encoding="utf-8")


@pytest.fixture
def speed_round() -> dict:
    return {
        "discipline": "Speed",
        "event": "IFSC World Cup Wujiang 2024",
        "category": "Women",
        "round": "Qualification",
        "ranking": [
            {
                "athlete_id": 2001,
                "firstname": "Aleksandra",
                "lastname": "MIROSLAW",
                "country": "POL",
                "active": False,
                "ascents": [
                    {"route_name": "A", "time_ms": 6240, "status": "confirmed"},
                    {"route_name": "B", "time_ms": 6060, "status": "confirmed"},
                ],
            },
            {
                "athlete_id": 2002,
                "firstname": "Emma",
                "lastname": "HUNT",
                "country": "USA",
                "active": True,
                "ascents": [],
            },
            {
                "athlete_id": 2003,
                "firstname": "Desak Made Rita",
                "lastname": "KUSUMA DEWI",
                "country": "INA",
                "active": False,
                "ascents": [
                    {"route_name": "A", "time_ms": 6490, "status": "confirmed"},
                ],
            },
        ],
    }
