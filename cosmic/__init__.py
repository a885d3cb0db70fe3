"""Solar and lunar state engine for the Cosmic Engine service."""

from .annual import AnnualSeriesCache, almanac, annual_series
from .daylight import TWILIGHT_ANGLES, day_length, sun_hours
from .engine import Snapshot, SnapshotCache, compute_snapshot
from .orbital import orbital_state
from .solar import solar_position
from .timeconv import format_time, julian_date, parse_time

__all__ = [
    "AnnualSeriesCache",
    "Snapshot",
    "SnapshotCache",
    "TWILIGHT_ANGLES",
    "almanac",
    "annual_series",
    "compute_snapshot",
    "day_length",
    "format_time",
    "julian_date",
    "orbital_state",
    "parse_time",
    "solar_position",
    "sun_hours",
]
