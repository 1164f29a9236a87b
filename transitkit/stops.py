"""GTFS stops and transfers, and the footpaths between them."""

from __future__ import annotations

import enum
import logging
import math
from collections import defaultdict
from dataclasses import dataclass, field

from .footpath import Footpath
from .registry import Location, LocationType, Timetable, get_tz_idx, iter_csv

_log = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0
GENERATED_DURATION = 2


def _distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    """Great circle distance in metres between two (lat, lng) points."""
    lat1, lng1 = map(math.radians, a)
    lat2, lng2 = map(math.radians, b)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


class TransferType(enum.IntEnum):
    RECOMMENDED = 0
    TIMED = 1
    MINIMUM_CHANGE_TIME = 2
    NOT_POSSIBLE = 3
    STAY_SEATED = 4
    NO_STAY_SEATED = 5
    GENERATED = 255


@dataclass(eq=False)
class Stop:
    """A stop while loading; ``same_name`` and ``children`` are ordered sets."""

    id: str = ""
    name: str = ""
    platform_code: str = ""
    coord: tuple[float, float] = (0.0, 0.0)
    timezone: str = ""
    same_name: dict[Stop, None] = field(default_factory=dict)
    children: dict[Stop, None] = field(default_factory=dict)
    parent: Stop | None = None
    close: list[int] = field(default_factory=list)
    location: int | None = None
    footpaths: list[Footpath] = field(default_factory=list)

    def compute_close_stations(self, stops: list[Stop], link_stop_distance: float) -> None:
        """Remember the indices of ``stops`` within ``link_stop_distance`` metres."""
        lat, lng = self.coord
        if abs(lat) < 2.0 and abs(lng) < 2.0:
            return
        self.close = [
            i for i, other in enumerate(stops)
            if _distance(self.coord, other.coord) <= link_stop_distance
        ]

    def get_metas(self, stops: list[Stop]) -> list[Stop]:
        """Stops equivalent to this one: related by name, proximity or hierarchy."""
        todo: dict[Stop, None] = {self: None}
        todo.update(dict.fromkeys(self.same_name))
        for idx in self.close:
            todo[stops[idx]] = None

        done: dict[Stop, None] = {}
        while todo:
            nxt = next(iter(todo))
            del todo[nxt]
            done[nxt] = None
            if nxt.parent is not None and nxt.parent not in done:
                todo[nxt.parent] = None
            for child in nxt.children:
                if child not in done:
                    todo[child] = None

        def keep(meta: Stop) -> bool:
            d = _distance(meta.coord, self.coord)
            related = meta is self.parent or meta in self.children
            return not ((d > 500 and not related) or d > 2000)

        kept = {m: None for m in done if keep(m)}
        for meta in list(kept):
            for child in meta.children:
                kept[child] = None
        return list(kept)


class _StopLocations(dict):
    """Stop id to location index, with the stop graph built alongside."""

    def __init__(self) -> None:
        super().__init__()
        self.children: defaultdict[int, list[int]] = defaultdict(list)
        self.equivalences: defaultdict[int, list[int]] = defaultdict(list)
        self.footpaths_out: defaultdict[int, list[Footpath]] = defaultdict(list)
        self.footpaths_in: defaultdict[int, list[Footpath]] = defaultdict(list)


def _parse_int(s: str) -> int:
    try:
        return int(s.strip())
    except ValueError:
        return 0


def _parse_float(s: str) -> float:
    try:
        return float(s.strip())
    except ValueError:
        return 0.0


def read_transfers(stops: dict[str, Stop], file_content: str) -> None:
    """Attach the footpaths of transfers.txt to the stops they start from."""
    if not file_content:
        return
    for row in iter_csv(file_content):
        from_id = row.get("from_stop_id", "")
        to_id = row.get("to_stop_id", "")
        if from_id not in stops:
            _log.error("stop %s not found", from_id)
            continue
        if to_id not in stops:
            _log.error("stop %s not found", to_id)
            continue
        src, dst = stops[from_id], stops[to_id]
        if _parse_int(row.get("transfer_type", "")) == TransferType.NOT_POSSIBLE or src is dst:
            continue
        if any(fp.target == dst.location for fp in src.footpaths):
            continue
        duration = int(_parse_int(row.get("min_transfer_time", "")) / 60)
        src.footpaths.append(Footpath(dst.location, max(0, duration)))


def _add_if_not_exists(bucket: list[Footpath], fp: Footpath) -> None:
    if all(x.target != fp.target for x in bucket):
        bucket.append(fp)


def read_stops(
    src: int,
    tt: Timetable,
    timezones: dict[str, int],
    stops_file_content: str,
    transfers_file_content: str,
    link_stop_distance: float,
) -> _StopLocations:
    """Register the stops of stops.txt and build parents, equivalences and footpaths."""
    stops: dict[str, Stop] = {}
    equal_names: dict[str, list[Stop]] = {}
    for row in iter_csv(stops_file_content):
        stop_id = row.get("stop_id", "")
        stop = stops.setdefault(stop_id, Stop())
        stop.id = stop_id
        stop.name = row.get("stop_name", "")
        stop.coord = (_parse_float(row.get("stop_lat", "")), _parse_float(row.get("stop_lon", "")))
        stop.platform_code = row.get("platform_code", "")
        stop.timezone = row.get("stop_timezone", "").strip()

        parent_id = row.get("parent_station", "").strip()
        if parent_id:
            parent = stops.setdefault(parent_id, Stop())
            parent.id = parent_id
            parent.children[stop] = None
            stop.parent = parent

        equal_names.setdefault(stop.name, []).append(stop)

    stop_vec = list(stops.values())
    for stop in stop_vec:
        for equal in equal_names.get(stop.name, []):
            if equal is not stop:
                stop.same_name[equal] = None

    if link_stop_distance:
        for stop in stop_vec:
            stop.compute_close_stations(stop_vec, link_stop_distance)

    locations = _StopLocations()
    for stop_id, stop in stops.items():
        is_track = stop.parent is not None and bool(stop.platform_code)
        stop.location = tt.register_location(
            Location(
                id=stop_id,
                name=stop.platform_code if is_track else stop.name,
                pos=stop.coord,
                src=src,
                type=LocationType.TRACK if is_track else LocationType.STATION,
                parent=None,
                timezone=get_tz_idx(tt, timezones, stop.timezone) if stop.timezone else None,
                transfer_time=GENERATED_DURATION,
            )
        )
        locations[stop_id] = stop.location

    read_transfers(stops, transfers_file_content)

    for stop in stop_vec:
        if stop.parent is not None:
            tt.locations[stop.location].parent = stop.parent.location
        for child in stop.children:
            locations.children[stop.location].append(child.location)
        for fp in stop.footpaths:
            locations.footpaths_out[stop.location].append(fp)
            locations.footpaths_in[fp.target].append(Footpath(stop.location, fp.duration))

    for stop in stop_vec:
        for fp in stop.footpaths:
            _add_if_not_exists(locations.footpaths_out[fp.target], Footpath(stop.location, fp.duration))
            _add_if_not_exists(locations.footpaths_in[stop.location], Footpath(fp.target, fp.duration))

    for stop in stop_vec:
        for eq in stop.get_metas(stop_vec):
            locations.equivalences[stop.location].append(eq.location)
            _add_if_not_exists(locations.footpaths_out[stop.location], Footpath(eq.location, GENERATED_DURATION))
            _add_if_not_exists(locations.footpaths_in[eq.location], Footpath(stop.location, GENERATED_DURATION))
            _add_if_not_exists(locations.footpaths_out[eq.location], Footpath(stop.location, GENERATED_DURATION))
            _add_if_not_exists(locations.footpaths_in[stop.location], Footpath(eq.location, GENERATED_DURATION))

    return locations