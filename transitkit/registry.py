"""Timetable registry of providers, timezones, locations and directions."""

from __future__ import annotations

import csv
import enum
import io
from collections.abc import Iterator
from dataclasses import dataclass, field
from datetime import date, timedelta
from zoneinfo import ZoneInfo

TIMETABLE_OFFSET = timedelta(days=1)


class LocationType(enum.Enum):
    GENERATED_TRACK = 0
    TRACK = 1
    STATION = 2


@dataclass(frozen=True)
class Provider:
    short_name: str
    long_name: str
    tz: int


@dataclass
class Location:
    id: str
    name: str
    pos: tuple[float, float]
    src: int = 0
    type: LocationType = LocationType.STATION
    parent: int | None = None
    timezone: int | None = None
    transfer_time: int = 2


@dataclass
class Timetable:
    """Mutable store that loaders fill."""

    date_range: tuple[date, date] = (date(1970, 1, 1), date(1970, 1, 2))
    providers: list[Provider] = field(default_factory=list)
    timezones: list[tuple[str, ZoneInfo]] = field(default_factory=list)
    locations: list[Location] = field(default_factory=list)
    trip_directions: list[str] = field(default_factory=list)

    def register_provider(self, provider: Provider) -> int:
        self.providers.append(provider)
        return len(self.providers) - 1

    def register_timezone(self, name: str) -> int:
        self.timezones.append((name, ZoneInfo(name)))
        return len(self.timezones) - 1

    def register_location(self, location: Location) -> int:
        self.locations.append(location)
        return len(self.locations) - 1

    def register_trip_direction(self, headsign: str) -> int:
        self.trip_directions.append(headsign)
        return len(self.trip_directions) - 1

    def trip_direction(self, idx: int) -> str:
        return self.trip_directions[idx]

    def internal_interval_days(self) -> tuple[date, date]:
        """Date range widened by the timetable offset before and a day after."""
        start, end = self.date_range
        return start - TIMETABLE_OFFSET, end + timedelta(days=1)


def iter_csv(file_content: str) -> Iterator[dict[str, str]]:
    """Yield rows of a CSV text as dicts with stripped header names."""
    text = file_content.lstrip("\ufeff")
    if not text.strip():
        return
    reader = csv.reader(io.StringIO(text))
    header = None
    for row in reader:
        if not row or all(not c.strip() for c in row):
            continue
        if header is None:
            header = [h.strip() for h in row]
            continue
        yield {h: (row[i] if i < len(row) else "") for i, h in enumerate(header)}


def get_tz_idx(tt: Timetable, timezones: dict[str, int], tz_name: str) -> int:
    """Return the index of ``tz_name``, registering it on first use."""
    if not tz_name:
        raise ValueError("timezone not set")
    if tz_name not in timezones:
        timezones[tz_name] = tt.register_timezone(tz_name)
    return timezones[tz_name]


def read_agencies(tt: Timetable, timezones: dict[str, int], file_content: str) -> dict[str, int]:
    """Register the agencies of an agency.txt and map their ids to providers."""
    return {
        row.get("agency_id", ""): tt.register_provider(
            Provider(
                row.get("agency_id", ""),
                row.get("agency_name", ""),
                get_tz_idx(tt, timezones, row.get("agency_timezone", "").strip()),
            )
        )
        for row in iter_csv(file_content)
    }