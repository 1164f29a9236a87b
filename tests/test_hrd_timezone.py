from datetime import date

from transitkit.hrd_timezone import (
    MINUTES_PER_DAY,
    Season,
    TzOffsets,
    is_local_time_in_season,
    local_mam_to_utc_mam,
)


def _day(d: date) -> int:
    return (d - date(1970, 1, 1)).days * MINUTES_PER_DAY


# +0100 +0200 29032020 0200 25102020 0300
SUMMER = Season(
    offset=120,
    begin=_day(date(2020, 3, 29)),
    end=_day(date(2020, 10, 25)),
    season_begin_mam=120,
    season_end_mam=180,
)
BERLIN = TzOffsets(offset=60, seasons=(SUMMER,))


def test_season_bounds():
    assert is_local_time_in_season(SUMMER, SUMMER.begin, SUMMER.season_begin_mam)
    assert not is_local_time_in_season(SUMMER, SUMMER.begin, SUMMER.season_begin_mam - 1)
    assert not is_local_time_in_season(SUMMER, SUMMER.end, SUMMER.season_end_mam)
    assert is_local_time_in_season(SUMMER, SUMMER.end, SUMMER.season_end_mam - 1)


def test_winter_uses_standard_offset():
    day = _day(date(2020, 1, 15))
    local = 600
    assert local_mam_to_utc_mam(BERLIN, day, local) == (local - BERLIN.offset, 0, True)


def test_summer_uses_season_offset():
    day = _day(date(2020, 7, 1))
    local = 600
    assert local_mam_to_utc_mam(BERLIN, day, local) == (local - SUMMER.offset, 0, True)


def test_negative_wraps_to_previous_day():
    day = _day(date(2020, 1, 15))
    local = 30
    utc, offset, valid = local_mam_to_utc_mam(BERLIN, day, local)
    assert offset == -MINUTES_PER_DAY
    assert utc == local - BERLIN.offset + MINUTES_PER_DAY
    assert valid


def test_first_overflow_moves_to_next_day():
    west = TzOffsets(offset=-120)
    local = 1400
    assert local_mam_to_utc_mam(west, 0, local, True) == (
        local + 120 - MINUTES_PER_DAY,
        MINUTES_PER_DAY,
        True,
    )


def test_not_first_keeps_overflow():
    west = TzOffsets(offset=-120)
    local = 1400
    assert local_mam_to_utc_mam(west, 0, local) == (local + 120, 0, True)


def test_time_in_switch_gap_is_invalid():
    local = 150
    utc, offset, valid = local_mam_to_utc_mam(BERLIN, SUMMER.begin, local)
    assert not valid
    assert offset == 0
    assert utc == local - SUMMER.offset + 60


def test_time_after_switch_gap_is_valid():
    local = 200
    assert local_mam_to_utc_mam(BERLIN, SUMMER.begin, local) == (
        local - SUMMER.offset,
        0,
        True,
    )