"""HRD services, their store, and their expansion into uniform sub-services."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from dataclasses import dataclass, field, replace
from typing import Any

TIME_NOT_SET = -1


@dataclass(frozen=True)
class Event:
    """Arrival or departure: minutes after midnight and whether in/out is allowed."""

    time: int
    in_out_allowed: bool = True


@dataclass(frozen=True)
class ServiceStop:
    eva_num: int
    arr: Event
    dep: Event


@dataclass
class Section:
    """Information about the stretch between two consecutive stops."""

    train_num: int | None = None
    admin: int | None = None
    attributes: list[Any] | None = None
    category: Any | None = None
    line: str | None = None
    direction: int | None = None
    traffic_days: int | None = None


@dataclass
class Service:
    """A service as read from an HRD schedule file."""

    origin: Any = ""
    num_repetitions: int = 0
    interval: int = 0
    stops: list[ServiceStop] = field(default_factory=list)
    sections: list[Section] = field(default_factory=list)
    begin_to_end_info: Section = field(default_factory=Section)
    traffic_days: int = 0
    initial_admin: int | None = None
    initial_train_num: int = 0


class ServiceStore:
    """Services addressed by their insertion index."""

    def __init__(self) -> None:
        self._services: list[Service] = []

    def add(self, service: Service) -> int:
        self._services.append(service)
        return len(self._services) - 1

    def get(self, idx: int) -> Service:
        if not 0 <= idx < len(self._services):
            raise IndexError(f"service {idx} not found")
        return self._services[idx]

    def clear(self) -> None:
        self._services.clear()


@dataclass(frozen=True)
class SplitInfo:
    """Traffic days and the range of sections of a sub-service.

    Section i connects stop i to stop i+1, so sections [a, b) cover stops [a, b+1).
    """

    traffic_days: int
    sections: range

    def stop_range(self) -> range:
        return range(self.sections.start, self.sections.stop + 1)


def _pairwise(r: range):
    return zip(r, r[1:])


@dataclass(frozen=True)
class RefService:
    """A view on part of a stored service, optionally repeated and in UTC."""

    ref: int
    split_info: SplitInfo
    repetition: int = 0
    utc_traffic_days: int = 0
    utc_times: tuple[int, ...] = ()
    stop_seq: tuple[Any, ...] = ()

    def with_repetition(self, repetition: int) -> "RefService":
        return replace(self, repetition=repetition)

    def local_times(self, store: ServiceStore) -> list[int]:
        """Departure/arrival pairs of each section in local minutes."""
        ref = store.get(self.ref)
        shift = self.repetition * ref.interval
        times: list[int] = []
        for frm, to in _pairwise(self.split_info.stop_range()):
            times.append(ref.stops[frm].dep.time + shift)
            times.append(ref.stops[to].arr.time + shift)
        return times

    def get_stop_timezones(
        self, store: ServiceStore, get_tz: Callable[[int], tuple[Any, Any]]
    ) -> list[Any]:
        """Timezone offsets matching ``local_times``; ``get_tz`` maps an EVA
        number to a ``(timezone index, offsets)`` pair."""
        ref = store.get(self.ref)
        tzs: list[Any] = []
        for frm, to in _pairwise(self.split_info.stop_range()):
            tzs.append(get_tz(ref.stops[frm].eva_num)[1])
            tzs.append(get_tz(ref.stops[to].eva_num)[1])
        return tzs

    def sections(self, store: ServiceStore) -> list[Section]:
        r = self.split_info.sections
        return store.get(self.ref).sections[r.start:r.stop]

    def stops(self, store: ServiceStore) -> list[ServiceStop]:
        r = self.split_info.stop_range()
        return store.get(self.ref).stops[r.start:r.stop]

    def origin(self, store: ServiceStore) -> Any:
        return store.get(self.ref).origin

    def local_traffic_days(self) -> int:
        return self.split_info.traffic_days

    def line_info(self, store: ServiceStore) -> str:
        ref = store.get(self.ref)
        if ref.begin_to_end_info.line is not None:
            return ref.begin_to_end_info.line
        if ref.sections:
            line = ref.sections[self.split_info.sections.start].line
            if line is not None:
                return line
        return ""


def expand_traffic_days(
    store: ServiceStore, s_idx: int, resolve_bitfield: Callable[[int], int]
) -> Iterator[RefService]:
    """Split a service into sub-services whose sections share their traffic days."""
    s = store.get(s_idx)

    if s.begin_to_end_info.traffic_days is not None:
        days = resolve_bitfield(s.begin_to_end_info.traffic_days)
        bitfields = [days] * (len(s.stops) - 1)
    else:
        bitfields = []
        for section in s.sections:
            if section.traffic_days is None:
                raise ValueError(f"service {s.origin}: section without traffic days")
            bitfields.append(resolve_bitfield(section.traffic_days))

    consumed = 0

    def consume_and_remove(start: int, pos: int, current: int) -> Iterator[RefService]:
        nonlocal consumed
        if not current or start >= pos:
            return
        for i in range(start, pos):
            bitfields[i] &= ~current
        if current & consumed:
            raise ValueError(
                f"traffic days of service {s.origin} are not disjunctive:\n"
                f"    sub-sections: {current:b}\n"
                f"already consumed: {consumed:b}"
            )
        consumed |= current
        yield RefService(s_idx, SplitInfo(current, range(start, pos)))

    def split(start: int) -> Iterator[RefService]:
        b = bitfields[start]
        for i in range(start + 1, len(bitfields)):
            next_b = b & bitfields[i]
            if not next_b:
                yield from consume_and_remove(start, i, b)
                return
            b = next_b
        yield from consume_and_remove(start, len(bitfields), b)

    for i in range(len(bitfields)):
        if not bitfields[i]:
            return
        yield from split(i)


def expand_repetitions(store: ServiceStore, s: RefService) -> Iterator[RefService]:
    """Yield the service once per repetition, the original included."""
    for rep in range(store.get(s.ref).num_repetitions + 1):
        yield s.with_repetition(rep)