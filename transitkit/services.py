"""GTFS calendars, calendar dates and their merge into traffic-day bitfields."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from datetime import date, timedelta

from .registry import iter_csv

_log = logging.getLogger(__name__)

MAX_DAYS = 512


def _parse_date(value: str) -> date:
    n = int(value.strip())
    return date(n // 10000, (n // 100) % 100, n % 100)


def _flag(value: str) -> bool:
    v = value.strip()
    return v.isdigit() and int(v) == 1


@dataclass(frozen=True)
class Calendar:
    """Weekdays (index 0 = Sunday) and a half-open date interval."""

    week_days: tuple[bool, ...]
    interval: tuple[date, date]


class ExceptionType(enum.Enum):
    ADD = 1
    REMOVE = 2


@dataclass(frozen=True)
class CalendarDate:
    type: ExceptionType
    day: date


_DAY_COLUMNS = ("sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday")


def read_calendar(file_content: str) -> dict[str, Calendar]:
    """Parse calendar.txt."""
    return {
        row["service_id"]: Calendar(
            tuple(_flag(row.get(c, "")) for c in _DAY_COLUMNS),
            (
                _parse_date(row["start_date"]),
                _parse_date(row["end_date"]) + timedelta(days=1),
            ),
        )
        for row in iter_csv(file_content)
    }


def read_calendar_date(file_content: str) -> dict[str, list[CalendarDate]]:
    """Parse calendar_dates.txt, grouped by service id."""
    services: dict[str, list[CalendarDate]] = {}
    for row in iter_csv(file_content):
        kind = ExceptionType.ADD if _flag(row.get("exception_type", "")) else ExceptionType.REMOVE
        services.setdefault(row["service_id"], []).append(
            CalendarDate(kind, _parse_date(row["date"]))
        )
    return services


def calendar_to_bitfield(tt_interval: tuple[date, date], service_name: str, calendar: Calendar) -> int:
    """Bit i is set if the service runs on day i of ``tt_interval``."""
    start = max(calendar.interval[0], tt_interval[0])
    end = min(calendar.interval[1], tt_interval[1])
    bits = 0
    day, bit = start, (start - tt_interval[0]).days
    while day < end:
        if bit >= MAX_DAYS:
            _log.error(
                "date %s for service %s out of range [tt_interval=%s, calendar=%s]",
                day, service_name, tt_interval, calendar.interval,
            )
            break
        if calendar.week_days[(day.weekday() + 1) % 7]:
            bits |= 1 << bit
        day += timedelta(days=1)
        bit += 1
    return bits


def add_exception(tt_interval: tuple[date, date], exception: CalendarDate, bits: int) -> int:
    """Return ``bits`` with the exception's day set or cleared."""
    idx = (exception.day - tt_interval[0]).days
    if idx < 0 or idx >= MAX_DAYS:
        return bits
    if exception.type is ExceptionType.ADD:
        return bits | (1 << idx)
    return bits & ~(1 << idx)


def merge_traffic_days(
    tt_interval: tuple[date, date],
    base: dict[str, Calendar],
    exceptions: dict[str, list[CalendarDate]],
) -> dict[str, int]:
    """Combine calendars and exceptions into one bitfield per service."""
    result = {
        name: calendar_to_bitfield(tt_interval, name, cal) for name, cal in base.items()
    }
    for name, days in exceptions.items():
        bits = result.get(name, 0)
        for day in days:
            bits = add_exception(tt_interval, day, bits)
        result[name] = bits
    return result