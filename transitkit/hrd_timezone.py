"""HRD timezone seasons and local to UTC conversion of service times.

Points in time are whole minutes since the Unix epoch; durations are minutes.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

MINUTES_PER_DAY = 1440
MINUTES_PER_HOUR = 60


@dataclass(frozen=True)
class Season:
    """A daylight saving period.

    ``begin`` and ``end`` are the first and last day (midnight, minutes since
    the epoch); the season starts at ``season_begin_mam`` on ``begin`` and ends
    at ``season_end_mam`` on ``end``. ``offset`` is the UTC offset inside it.
    """

    offset: int
    begin: int
    end: int
    season_begin_mam: int
    season_end_mam: int


@dataclass(frozen=True)
class TzOffsets:
    """Standard UTC ``offset`` in minutes plus its daylight saving seasons."""

    offset: int
    seasons: Sequence[Season] = field(default_factory=tuple)


def is_local_time_in_season(season: Season, day: int, local_mam: int) -> bool:
    """True if local time ``day + local_mam`` falls inside ``season``."""
    local_time = day + local_mam
    return (
        season.begin + season.season_begin_mam
        <= local_time
        < season.end + season.season_end_mam
    )


def local_mam_to_utc_mam(
    tz: TzOffsets, day: int, local_mam: int, first: bool = False
) -> tuple[int, int, bool]:
    """Convert local minutes after midnight of ``day`` to UTC.

    Returns ``(utc_mam, day_offset, valid)``: ``day_offset`` is a multiple of a
    day in minutes; ``valid`` is false for local times skipped by the switch to
    daylight saving time, which are then moved one hour on.
    """
    active = next(
        (s for s in tz.seasons if is_local_time_in_season(s, day, local_mam)), None
    )
    tz_offset = tz.offset if active is None else active.offset
    utc_mam = local_mam - tz_offset
    local_time = day + local_mam

    valid = True
    if active is not None:
        local_season_begin = (
            active.begin + active.season_begin_mam + (active.offset - tz.offset)
        )
        valid = local_time > local_season_begin
        if not valid:
            utc_mam += MINUTES_PER_HOUR

    if first and utc_mam >= MINUTES_PER_DAY:
        return (
            utc_mam % MINUTES_PER_DAY,
            (utc_mam // MINUTES_PER_DAY) * MINUTES_PER_DAY,
            valid,
        )
    if utc_mam < 0:
        return utc_mam + MINUTES_PER_DAY, -MINUTES_PER_DAY, valid
    return utc_mam, 0, valid