# transitkit

Building blocks for reading public transport timetables in the GTFS and
HRD formats. The GTFS readers parse a feed's text files into plain Python
objects and register providers, time zones, locations and trip directions
in an in-memory `Timetable`. The HRD modules hold the format's column
layouts, its time zone rules and the splitting of services into parts with
uniform traffic days.

Traffic days are kept as Python integers used as bitfields: bit *i* is set
when a service runs on day *i* of the interval in question.

## Installation

```
pip install .
```

To run the test suite, install the `test` extra and run `pytest`:

```
pip install ".[test]"
pytest
```

Time zones are looked up with the standard library's `zoneinfo`, so the
system needs time zone data (on systems without it, install `tzdata`).

## Modules

### GTFS

- `transitkit.directory`: read access to a feed stored as a folder
  (`FsDir`), a zip archive given as a path or as bytes (`ZipDir`), or in
  memory (`MemDir`). All offer `list_files`, `get_file`, `exists`,
  `file_size`, `type` and `hash`; `get_file` returns a `File` and raises
  `FileNotFoundError` for missing files. `MemDir.read` builds a directory
  from text in which each file begins with a `# name` line, and
  `MemDir.add` adds one file. `make_dir` opens a folder or a zip archive.
- `transitkit.registry`: the `Timetable` with `register_provider`,
  `register_timezone`, `register_location`, `register_trip_direction`,
  `trip_direction` and `internal_interval_days`, the `Provider`,
  `Location` and `LocationType` records, `get_tz_idx` (registers a time
  zone once, raises `ValueError` for an empty name) and `read_agencies`
  for `agency.txt`.
- `transitkit.services`: `read_calendar` (`calendar.txt` into `Calendar`),
  `read_calendar_date` (`calendar_dates.txt` into lists of
  `CalendarDate`), and `calendar_to_bitfield`, `add_exception` and
  `merge_traffic_days`, which combine both into one bitfield per service
  over an interval of up to 512 days.
- `transitkit.route`: `read_routes` for `routes.txt` into `Route` records;
  agencies that are not known are registered as `UNKNOWN_AGENCY` in the
  default time zone. `to_clasz` maps basic and extended GTFS route types
  to a `Clasz`; `to_color` turns a six digit hex colour into an opaque
  ARGB integer (0 for anything else).
- `transitkit.stops`: `read_stops` registers the stops of `stops.txt` as
  locations and returns a mapping from stop id to location index which also
  carries `children`, `equivalences`, `footpaths_out` and `footpaths_in`.
  Footpaths come from `transfers.txt` (via `read_transfers`, made
  symmetric) and are generated, at two minutes, between equivalent stops:
  stops of the same name, parent and child stops, and, when a link
  distance in metres is given, stops close to each other.
- `transitkit.trips`: `read_trips` (`trips.txt` into a `TripData` with
  `Trip` and `Block` objects), `read_frequencies` and `read_stop_times`.
  `Trip.interpolate` fills missing times linearly, `Trip.display_name`
  builds a readable name, `Trip.get_clasz` tells buses spanning more than
  100 km as coaches, and `Block.rule_services` splits a block into chains
  of connecting trips with their traffic days.
- `transitkit.gtfs_time`: `hhmm_to_min` parses `HH:MM[:SS]` into minutes
  (`None` for times to be interpolated), `get_noon_offset` gives the UTC
  offset at local noon, and `precompute_noon_offsets` computes it per day
  for the time zones of the agencies.
- `transitkit.seq_numbers`: `is_based` and `encode_seq_numbers`, a compact
  encoding of stop sequence numbers.
- `transitkit.footpath`: the `Footpath` value with a 22 bit target and a
  10 bit duration; `value` and `Footpath.from_value` pack and unpack it.
  Longer durations are capped and logged.

### HRD

- `transitkit.hrd_config`: `Field`, `RangeParseInformation`, `FilenameKey`
  and `Config`, and the configurations `HRD_5_00_8`, `HRD_5_20_26`,
  `HRD_5_20_39` and `HRD_5_20_AVV` (all in `CONFIGS`).
  `Config.files`, `Config.is_available` and `Config.prefix` tell which
  files a version uses and where they lie.
- `transitkit.hrd_util`: `hhmm_to_min` for HHMM integers,
  `iso_8859_1_to_utf8` and `parse_eva_number`.
- `transitkit.hrd_timezone`: `Season` and `TzOffsets`,
  `is_local_time_in_season` and `local_mam_to_utc_mam`, which converts
  local minutes after midnight to UTC and reports times skipped by the
  switch to daylight saving time. Points in time are minutes since the
  Unix epoch.
- `transitkit.hrd_services`: `Service`, `ServiceStop`, `Event`, `Section`,
  the `ServiceStore`, `SplitInfo` and `RefService`.
  `expand_traffic_days` splits a stored service into sub-services whose
  sections share their traffic days (given a function resolving bitfield
  numbers), and `expand_repetitions` yields a service once per repetition.

## Example

```python
from transitkit.directory import MemDir
from transitkit.registry import Timetable, read_agencies
from transitkit.route import read_routes

feed = MemDir({
    "agency.txt": "agency_id,agency_name,agency_timezone\n"
                  "A1,Example Transit,Europe/Berlin\n",
    "routes.txt": "route_id,agency_id,route_short_name,route_type\n"
                  "R1,A1,42,3\n",
})

tt = Timetable()
timezones = {}
agencies = read_agencies(tt, timezones, feed.get_file("agency.txt").data())
routes = read_routes(tt, timezones, agencies,
                     feed.get_file("routes.txt").data(), "Europe/Berlin")
print(routes["R1"].short_name, routes["R1"].clasz)  # 42 Clasz.BUS
```

## What it does not do

transitkit reads and prepares timetable data; it does not go further:

- It does not assemble a complete timetable from a GTFS feed in one call:
  the readers are called one by one, and trips are not expanded into
  routes and transports with UTC times.
- It does not parse HRD files (stations, bitfields, categories, providers,
  tracks or schedule files); it provides the layouts, time zone
  conversion and service expansion that such parsing builds on.
- It has no journey planner, no real-time updates, no storage format for
  timetables and no command line program.