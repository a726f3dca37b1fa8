import pytest

from ifsc_leaderboard.discipline import (
    ADAPTERS,
    BoulderAdapter,
    BoulderAscent,
    BoulderScore,
    ConversionError,
    DisciplineAdapter,
    LeadScore,
    SpeedAscent,
    SpeedScore,
    convert_ascents,
    get_adapter,
)
from ifsc_sdk.models import Ascent, AscentStatus, DisciplineTag, RankedAthlete


def _boulder(top=False, top_tries=None, zone=False, zone_tries=None, status="confirmed"):
    return Ascent.model_validate(
        {"top": top, "top_tries": top_tries, "zone": zone, "zone_tries": zone_tries, "status": status}
    )


def _speed(time_ms, status="confirmed"):
    return Ascent.model_validate({"time_ms": time_ms, "status": status})


def _lead(score, status="confirmed"):
    return Ascent.model_validate({"score": score, "status": status})


def _athlete(ascents, athlete_id=1):
    return RankedAthlete(
        athlete_id=athlete_id,
        firstname="Janja",
        lastname="GARNBRET",
        country="SLO",
        ascents=ascents,
    )


def test_every_discipline_has_an_adapter():
    assert set(ADAPTERS) == set(DisciplineTag)
    for tag in DisciplineTag:
        assert get_adapter(tag).tag == tag


# Boulder


def test_boulder_convert_defaults_missing_tries_to_zero():
    ascent = get_adapter(DisciplineTag.BOULDER).convert(_boulder(status="active"))
    assert ascent == BoulderAscent(
        top=False, top_tries=0, zone=False, zone_tries=0, status=AscentStatus.ACTIVE
    )


def test_boulder_score_counts_tops_zones_and_top_tries():
    adapter = get_adapter(DisciplineTag.BOULDER)
    ascents = [
        adapter.convert(_boulder(top=True, top_tries=1, zone=True, zone_tries=1)),
        adapter.convert(_boulder(top=True, top_tries=4, zone=True, zone_tries=2)),
        # Zone tries and failed top attempts do not count as top tries
        adapter.convert(_boulder(top=False, top_tries=6, zone=True, zone_tries=3)),
        adapter.convert(_boulder()),
    ]
    score = adapter.score(7, ascents)
    assert score == BoulderScore(tops=2, zones=3, top_tries=5, start_order=7)


def test_boulder_more_tops_beats_more_zones():
    assert BoulderScore(tops=2, zones=2, top_tries=9, start_order=5) > BoulderScore(
        tops=1, zones=4, top_tries=1, start_order=1
    )


def test_boulder_more_zones_wins_on_equal_tops():
    assert BoulderScore(tops=1, zones=3, top_tries=5, start_order=5) > BoulderScore(
        tops=1, zones=2, top_tries=1, start_order=1
    )


def test_boulder_fewer_top_tries_wins_on_equal_tops_and_zones():
    fewer = BoulderScore(tops=2, zones=2, top_tries=3, start_order=9)
    more = BoulderScore(tops=2, zones=2, top_tries=4, start_order=1)
    assert fewer > more


def test_boulder_lower_start_order_wins_full_tie():
    early = BoulderScore(tops=2, zones=2, top_tries=3, start_order=1)
    late = BoulderScore(tops=2, zones=2, top_tries=3, start_order=2)
    assert early > late
    assert max([late, early]) is early


def test_boulder_ascent_display():
    assert BoulderAscent(True, 1, True, 1, AscentStatus.CONFIRMED).display() == "F"
    assert BoulderAscent(True, 3, True, 1, AscentStatus.LOCKED).display() == "T"
    assert BoulderAscent(False, 0, True, 2, AscentStatus.CONFIRMED).display() == "Z"
    assert BoulderAscent(False, 0, False, 0, AscentStatus.ACTIVE).display() == "-*"


# Lead


def test_lead_score_is_placeholder_constant():
    adapter = get_adapter(DisciplineTag.LEAD)
    ascents = [adapter.convert(_lead("TOP")), adapter.convert(_lead("12+"))]

    assert adapter.score(1, ascents) == LeadScore(value=0)
    assert adapter.score(99, []) == LeadScore(value=0)


def test_lead_convert_keeps_raw_score():
    ascent = get_adapter(DisciplineTag.LEAD).convert(_lead("32+", status="pending"))
    assert ascent.score == "32+"
    assert ascent.display() == "32+"


# Speed


def test_speed_score_is_fastest_time():
    adapter = get_adapter(DisciplineTag.SPEED)
    ascents = [adapter.convert(_speed(1200)), adapter.convert(_speed(900))]
    assert adapter.score(0, ascents) == SpeedScore(time_ms=900)


def test_speed_without_time_ranks_last():
    no_time = get_adapter(DisciplineTag.SPEED).score(0, [])
    assert no_time == SpeedScore(time_ms=None)
    assert SpeedScore(time_ms=99999) > no_time
    assert SpeedScore(time_ms=0) > no_time


def test_speed_lower_time_is_better():
    assert SpeedScore(time_ms=5200) > SpeedScore(time_ms=5300)


def test_speed_display():
    assert SpeedAscent(time_ms=6123, status=AscentStatus.CONFIRMED).display() == "6.123"
    assert SpeedScore(time_ms=None).display() == ["-"]


# Conversion errors


@pytest.mark.parametrize(
    "discipline, ascent",
    [
        (DisciplineTag.BOULDER, _speed(5000)),
        (DisciplineTag.LEAD, _boulder(top=True, top_tries=1, zone=True)),
        (DisciplineTag.SPEED, _lead("TOP")),
        (DisciplineTag.SPEED, Ascent(status=AscentStatus.ACTIVE)),
    ],
)
def test_convert_rejects_payload_of_other_discipline(discipline, ascent):
    with pytest.raises(ConversionError):
        get_adapter(discipline).convert(ascent)


def test_convert_ascents_fails_on_any_bad_ascent():
    athlete = _athlete([_boulder(top=True, top_tries=1, zone=True), _speed(4800)], athlete_id=42)

    with pytest.raises(ConversionError, match="ascent 1 of athlete 42"):
        convert_ascents(DisciplineTag.BOULDER, athlete)


def test_convert_ascents_keeps_order():
    athlete = _athlete([_speed(7000), _speed(6500)])
    converted = convert_ascents(DisciplineTag.SPEED, athlete)
    assert [a.time_ms for a in converted] == [7000, 6500]


def test_adapter_without_scoring_cannot_be_created():
    class HalfAdapter(DisciplineAdapter):
        tag = DisciplineTag.BOULDER

        def convert(self, ascent):
            return ascent

    with pytest.raises(TypeError):
        HalfAdapter()

    assert isinstance(BoulderAdapter(), DisciplineAdapter)
