"""GTFS trips, blocks, frequencies and stop times."""

from __future__ import annotations

import enum
import logging
import math
import re
from dataclasses import dataclass, field

from .gtfs_time import hhmm_to_min
from .registry import Timetable, iter_csv
from .route import Clasz, Route

_log = logging.getLogger(__name__)

EARTH_RADIUS_M = 6371000.0
COACH_MIN_EXTENT_KM = 100
_INT = re.compile(r"\s*([+-]?\d+)")


def _parse_int(s: str, default: int = 0) -> int:
    m = _INT.match(s)
    return int(m.group(1)) if m else default


def _distance(a: tuple[float, float], b: tuple[float, float]) -> float:
    lat1, lng1 = map(math.radians, a)
    lat2, lng2 = map(math.radians, b)
    h = (
        math.sin((lat2 - lat1) / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin((lng2 - lng1) / 2) ** 2
    )
    return 2 * EARTH_RADIUS_M * math.asin(min(1.0, math.sqrt(h)))


def _round_half_away(x: float) -> int:
    return int(math.copysign(math.floor(abs(x) + 0.5), x))


@dataclass(frozen=True)
class StopEntry:
    """A stop of a trip: its location and whether boarding/alighting is allowed."""

    location: int
    in_allowed: bool = True
    out_allowed: bool = True


@dataclass
class StopEvents:
    """Arrival and departure in minutes after midnight; ``None`` means interpolate."""

    arr: int | None
    dep: int | None


class ScheduleRelationship(enum.Enum):
    SCHEDULED = "scheduled"
    UNSCHEDULED = "unscheduled"


@dataclass(frozen=True)
class Frequency:
    start: int | None
    end: int | None
    headway: int
    schedule_relationship: ScheduleRelationship


@dataclass
class _RuleTrip:
    trip: int
    traffic_days: int


@dataclass
class Block:
    """Trips sharing a block id: passengers may stay seated between them."""

    trips: list[int] = field(default_factory=list)

    def rule_services(self, trips: TripData) -> list[tuple[list[int], int]]:
        """Split the block into chains of connecting trips with their traffic days."""
        if not self.trips:
            raise ValueError("empty block not allowed")

        kept = []
        for t in self.trips:
            if trips.data[t].stop_seq:
                kept.append(t)
            else:
                _log.error('trip "%s": no stop times', trips.data[t].id)
        self.trips = kept

        if len(self.trips) == 1:
            return [([self.trips[0]], trips.get(self.trips[0]).service)]

        self.trips.sort(key=lambda t: trips.get(t).event_times[0].dep)
        rule = [_RuleTrip(t, trips.get(t).service) for t in self.trips]

        combinations: list[tuple[list[int], int]] = []
        for start in range(len(rule)):
            stack: list[tuple[int, list[int], int]] = [(start, [], rule[start].traffic_days)]
            while stack:
                current, collected, days = stack.pop()
                collected = [*collected, current]
                last_location = trips.data[rule[current].trip].stop_seq[-1].location
                for succ in range(current + 1, len(rule)):
                    if trips.data[rule[succ].trip].stop_seq[0].location != last_location:
                        continue
                    intersection = days & rule[succ].traffic_days
                    days &= ~rule[succ].traffic_days
                    if intersection:
                        stack.append((succ, collected, intersection))
                if days:
                    for i in collected:
                        rule[i].traffic_days &= ~days
                    combinations.append(([rule[i].trip for i in collected], days))
        return combinations


@dataclass
class _Bound:
    min: int | None
    max: int | None
    min_idx: int = -1
    max_idx: int = -1

    def interpolate(self, idx: int) -> int:
        if self.max_idx == self.min_idx:
            return self.min
        p = (idx - self.min_idx) / (self.max_idx - self.min_idx)
        return self.min + _round_half_away((self.max - self.min) * p)


@dataclass(eq=False)
class Trip:
    route: Route
    service: int
    block: Block | None
    id: str
    headsign: int
    short_name: str = ""
    seq_numbers: list[int] = field(default_factory=list)
    stop_seq: list[StopEntry] = field(default_factory=list)
    event_times: list[StopEvents] = field(default_factory=list)
    stop_headsigns: list[int | None] = field(default_factory=list)
    frequency: list[Frequency] | None = None
    requires_interpolation: bool = False
    requires_sorting: bool = False
    from_line: int = 0
    to_line: int = 0

    def interpolate(self) -> None:
        """Fill missing event times linearly between the known neighbours."""
        if not self.requires_interpolation:
            return

        bounds: list[_Bound] = []
        for ev in self.event_times:
            bounds.append(_Bound(ev.arr, ev.arr))
            bounds.append(_Bound(ev.dep, ev.dep))

        latest, latest_idx = 0, 0
        for pos in range(len(bounds) - 1, -1, -1):
            b = bounds[pos]
            if b.max is None:
                b.max, b.max_idx = latest, latest_idx
            else:
                latest, latest_idx = b.max, pos // 2

        earliest, earliest_idx = 0, 0
        for pos, b in enumerate(bounds):
            if b.min is None:
                b.min, b.min_idx = earliest, earliest_idx
            else:
                earliest, earliest_idx = b.max, pos // 2

        for idx, ev in enumerate(self.event_times):
            if ev.arr is None:
                ev.arr = bounds[2 * idx].interpolate(idx)
            if ev.dep is None:
                ev.dep = bounds[2 * idx + 1].interpolate(idx)

    def display_name(self, tt: Timetable) -> str:
        """Human readable name of the trip."""
        route = self.route
        if route.clasz is Clasz.BUS:
            return "Bus " + (route.short_name or self.short_name)
        if route.clasz is Clasz.TRAM:
            return "Tram " + (route.short_name or self.short_name)

        name_is_number = bool(self.short_name) and all("0" <= c <= "9" for c in self.short_name)
        if (
            not route.short_name.startswith("IC")
            and route.agency is not None
            and 0 <= route.agency < len(tt.providers)
            and tt.providers[route.agency].long_name == "DB Fernverkehr AG"
        ):
            if route.clasz is Clasz.HIGH_SPEED:
                return f"ICE {self.short_name if name_is_number else route.short_name}"
            if route.clasz is Clasz.LONG_DISTANCE:
                return f"IC {self.short_name if name_is_number else route.short_name}"

        line = route.short_name
        if line and not line[0].isdigit() and "0" <= line[-1] <= "9" and not ("0" <= line[0] <= "9"):
            return line
        if name_is_number:
            return f"{line} {int(self.short_name)}"
        return f"{line} {self.short_name}"

    def get_clasz(self, tt: Timetable) -> Clasz:
        """The route's class; buses covering more than 100 km count as coaches."""
        if self.route.clasz is not Clasz.BUS:
            return self.route.clasz
        coords = [tt.locations[s.location].pos for s in self.stop_seq]
        if not coords:
            return Clasz.BUS
        lo = (min(c[0] for c in coords), min(c[1] for c in coords))
        hi = (max(c[0] for c in coords), max(c[1] for c in coords))
        return Clasz.COACH if _distance(lo, hi) / 1000 > COACH_MIN_EXTENT_KM else Clasz.BUS


@dataclass
class TripData:
    data: list[Trip] = field(default_factory=list)
    trips: dict[str, int] = field(default_factory=dict)
    blocks: dict[str, Block] = field(default_factory=dict)
    directions: dict[str, int] = field(default_factory=dict)

    def get(self, idx: int) -> Trip:
        return self.data[idx]

    def get_or_create_direction(self, tt: Timetable, headsign: str) -> int:
        """Index of the trip direction ``headsign``, registered on first use."""
        if headsign not in self.directions:
            self.directions[headsign] = tt.register_trip_direction(headsign)
        return self.directions[headsign]


def read_trips(
    tt: Timetable,
    routes: dict[str, Route],
    services: dict[str, int],
    file_content: str,
) -> TripData:
    """Parse trips.txt."""
    ret = TripData()
    for row in iter_csv(file_content):
        trip_id = row.get("trip_id", "")
        service_id = row.get("service_id", "")
        route_id = row.get("route_id", "")
        if service_id not in services:
            _log.error('trip "%s": service_id "%s" not found', trip_id, service_id)
            continue
        if route_id not in routes:
            _log.error('trip "%s": route_id "%s" not found', trip_id, route_id)
            continue

        block_id = row.get("block_id", "").strip()
        blk = ret.blocks.setdefault(block_id, Block()) if block_id else None
        idx = len(ret.data)
        ret.data.append(
            Trip(
                routes[route_id],
                services[service_id],
                blk,
                trip_id,
                ret.get_or_create_direction(tt, row.get("trip_headsign", "")),
                row.get("trip_short_name", ""),
            )
        )
        ret.trips[trip_id] = idx
        if blk is not None:
            blk.trips.append(idx)
    return ret


def read_frequencies(trips: TripData, file_content: str) -> None:
    """Attach the entries of frequencies.txt to their trips."""
    if not file_content:
        return
    for row in iter_csv(file_content):
        trip_id = row.get("trip_id", "").strip()
        if trip_id not in trips.trips:
            _log.error('frequencies.txt: skipping frequency (trip "%s" not found)', trip_id)
            continue
        headway_str = row.get("headway_secs", "")
        headway_secs = _parse_int(headway_str, -1)
        if headway_secs == -1:
            _log.error('frequencies.txt: skipping frequency (invalid headway secs "%s")', headway_str)
            continue
        relationship = (
            ScheduleRelationship.SCHEDULED
            if row.get("exact_times", "") == "1"
            else ScheduleRelationship.UNSCHEDULED
        )
        trip = trips.data[trips.trips[trip_id]]
        if trip.frequency is None:
            trip.frequency = []
        trip.frequency.append(
            Frequency(
                hhmm_to_min(row.get("start_time", "")),
                hhmm_to_min(row.get("end_time", "")),
                int(headway_secs / 60),
                relationship,
            )
        )


def read_stop_times(
    tt: Timetable,
    trips: TripData,
    stops: dict[str, int],
    file_content: str,
) -> None:
    """Parse stop_times.txt into the stop sequences and event times of the trips."""
    line = 1
    last_trip: Trip | None = None
    last_trip_id = ""
    for row in iter_csv(file_content):
        line += 1
        trip_id = row.get("trip_id", "")
        if last_trip is not None and trip_id == last_trip_id:
            trip = last_trip
        else:
            if last_trip is not None:
                last_trip.to_line = line - 1
            if trip_id not in trips.trips:
                _log.error('stop_times.txt:%s trip "%s" not found', line, trip_id)
                continue
            trip = trips.data[trips.trips[trip_id]]
            last_trip_id = trip_id
            last_trip = trip
            trip.from_line = line

        stop_id = row.get("stop_id", "")
        if stop_id not in stops:
            _log.error('stop_times.txt:%s: unknown stop "%s"', line, stop_id)
            continue

        arrival = hhmm_to_min(row.get("arrival_time", ""))
        departure = hhmm_to_min(row.get("departure_time", ""))
        seq = _parse_int(row.get("stop_sequence", ""))

        trip.requires_interpolation |= arrival is None or departure is None
        trip.requires_sorting |= bool(trip.seq_numbers) and trip.seq_numbers[-1] > seq

        trip.seq_numbers.append(seq)
        trip.stop_seq.append(
            StopEntry(
                stops[stop_id],
                _parse_int(row.get("pickup_type", "")) != 1,
                _parse_int(row.get("drop_off_type", "")) != 1,
            )
        )
        trip.event_times.append(StopEvents(arrival, departure))

        headsign = row.get("stop_headsign", "")
        if headsign:
            missing = len(trip.seq_numbers) - len(trip.stop_headsigns)
            trip.stop_headsigns.extend([None] * missing)
            trip.stop_headsigns[-1] = trips.get_or_create_direction(tt, headsign)

    if last_trip is not None:
        last_trip.to_line = line