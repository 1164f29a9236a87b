"""Readers and building blocks for GTFS and HRD public transport timetables."""

__version__ = "0.1.0"

__all__ = [
    "directory",
    "footpath",
    "gtfs_time",
    "hrd_config",
    "hrd_services",
    "hrd_timezone",
    "hrd_util",
    "registry",
    "route",
    "seq_numbers",
    "services",
    "stops",
    "trips",
]