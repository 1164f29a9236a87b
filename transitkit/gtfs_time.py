"""GTFS time parsing and noon-based UTC offsets."""

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta
from zoneinfo import ZoneInfo

from .registry import Timetable

INTERPOLATE = None
_INT = re.compile(r"\s*([+-]?\d*)")


def _leading_int(s: str) -> tuple[int, str]:
    m = _INT.match(s)
    digits = m.group(1)
    value = int(digits) if digits.lstrip("+-") else 0
    return value, s[m.end():]


def hhmm_to_min(s: str) -> int | None:
    """Parse ``HH:MM[:SS]`` into minutes; ``None`` means interpolate."""
    if not s:
        return INTERPOLATE
    hours, rest = _leading_int(s)
    if not rest:
        return INTERPOLATE
    minutes, _ = _leading_int(rest[1:])
    return hours * 60 + minutes


def get_noon_offset(day: date, tz) -> int:
    """UTC offset in minutes at local noon of ``day``."""
    zone = ZoneInfo(tz) if isinstance(tz, str) else tz
    offset = datetime.combine(day, time(12), tzinfo=zone).utcoffset()
    return int(offset.total_seconds() // 60)


def precompute_noon_offsets(tt: Timetable, agencies: dict[str, int]) -> dict[int, list[int]]:
    """Noon offsets per timezone used by the agencies, one per internal day."""
    start, end = tt.internal_interval_days()
    n_days = (end - start).days
    result: dict[int, list[int]] = {}
    for provider_idx in agencies.values():
        tz_idx = tt.providers[provider_idx].tz
        if tz_idx in result:
            continue
        zone = tt.timezones[tz_idx][1]
        result[tz_idx] = [get_noon_offset(start + timedelta(days=i), zone) for i in range(n_days)]
    return result