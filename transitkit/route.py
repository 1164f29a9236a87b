"""GTFS routes: vehicle classes, colours and routes.txt parsing."""

from __future__ import annotations

import enum
import logging
import re
import string
from dataclasses import dataclass

from .registry import Provider, Timetable, get_tz_idx, iter_csv

_log = logging.getLogger(__name__)


class Clasz(enum.Enum):
    """Vehicle class of a connection."""

    AIR = 0
    HIGH_SPEED = 1
    LONG_DISTANCE = 2
    COACH = 3
    NIGHT = 4
    REGIONAL_FAST = 5
    REGIONAL = 6
    METRO = 7
    SUBWAY = 8
    TRAM = 9
    BUS = 10
    SHIP = 11
    OTHER = 12


def _table() -> dict[int, Clasz]:
    table = {
        0: Clasz.TRAM,
        1: Clasz.SUBWAY,
        2: Clasz.REGIONAL_FAST,
        3: Clasz.BUS,
        4: Clasz.SHIP,
        5: Clasz.TRAM,
        11: Clasz.BUS,
        101: Clasz.HIGH_SPEED,
        102: Clasz.LONG_DISTANCE,
        104: Clasz.LONG_DISTANCE,
        105: Clasz.NIGHT,
        109: Clasz.METRO,
        114: Clasz.LONG_DISTANCE,
        400: Clasz.SUBWAY,
        401: Clasz.METRO,
        402: Clasz.SUBWAY,
        403: Clasz.METRO,
        404: Clasz.METRO,
        405: Clasz.METRO,
        800: Clasz.BUS,
        1000: Clasz.SHIP,
        1100: Clasz.AIR,
        1200: Clasz.SHIP,
    }
    for t in (100, 103, 106, 107, 108, 110, 111, 112, 113, 115, 116, 117):
        table[t] = Clasz.REGIONAL
    table.update(dict.fromkeys(range(200, 210), Clasz.COACH))
    table.update(dict.fromkeys(range(700, 717), Clasz.BUS))
    table.update(dict.fromkeys(range(900, 907), Clasz.TRAM))
    return table


_ROUTE_TYPES = _table()


def to_clasz(route_type: int) -> Clasz:
    """Map a GTFS (basic or extended) route type to a vehicle class."""
    if route_type in _ROUTE_TYPES:
        return _ROUTE_TYPES[route_type]
    if 1000 <= route_type < 1100:
        return Clasz.SHIP
    if 1100 <= route_type < 1200:
        return Clasz.AIR
    if 1200 <= route_type < 1300:
        return Clasz.SHIP
    return Clasz.OTHER


def to_color(color_str: str) -> int:
    """Turn a six digit hex colour into opaque ARGB; anything else gives 0."""
    if len(color_str) != 6 or not all(c in string.hexdigits for c in color_str):
        return 0
    return 0xFF000000 | int(color_str, 16)


_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(s: str) -> int:
    m = _INT.match(s)
    return int(m.group(1)) if m else 0


@dataclass(frozen=True)
class Route:
    agency: int
    id: str
    short_name: str
    long_name: str
    desc: str
    clasz: Clasz
    color: int
    text_color: int


def read_routes(
    tt: Timetable,
    timezones: dict[str, int],
    agencies: dict[str, int],
    file_content: str,
    default_tz: str,
) -> dict[str, Route]:
    """Parse routes.txt; unknown agencies are registered with ``default_tz``."""
    routes: dict[str, Route] = {}
    for row in iter_csv(file_content):
        agency_id = row.get("agency_id", "")
        if agency_id not in agencies:
            _log.error(
                "agency %s not found, using UNKNOWN with local timezone", agency_id
            )
            agencies[agency_id] = tt.register_provider(
                Provider(
                    agency_id or "UKN",
                    "UNKNOWN_AGENCY",
                    get_tz_idx(tt, timezones, default_tz),
                )
            )
        route_id = row.get("route_id", "")
        routes[route_id] = Route(
            agency=agencies[agency_id],
            id=route_id,
            short_name=row.get("route_short_name", ""),
            long_name=row.get("route_long_name", ""),
            desc=row.get("route_desc", ""),
            clasz=to_clasz(_parse_int(row.get("route_type", ""))),
            color=to_color(row.get("route_color", "")),
            text_color=to_color(row.get("route_text_color", "")),
        )
    return routes