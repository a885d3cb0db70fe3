"""Year-long day-length series and twilight almanac."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from datetime import date
from threading import Lock
from typing import Dict, Tuple

from .daylight import OFFICIAL, TWILIGHT_ANGLES, day_length, sun_hours
from .solar import approximate_declination, solar_position
from .timeconv import julian_date

__all__ = [
    "AnnualPoint",
    "AlmanacDay",
    "annual_series",
    "almanac",
    "AnnualSeriesCache",
    "SERIES_LENGTH",
]

LOGGER = logging.getLogger(__name__)

SERIES_LENGTH = 366
ALMANAC_LENGTH = 365
REPRESENTATIVE_HOUR = 12.0


@dataclass(frozen=True)
class AnnualPoint:
    day: int
    length: float  # hours, rounded to 2 decimals


@dataclass(frozen=True)
class AlmanacDay:
    """Idealized-noon daylight windows for every twilight threshold on one day."""

    day: int
    declination: float
    windows: Dict[str, Tuple[float, float]]

    @property
    def day_length(self) -> float:
        start, end = self.windows["official"]
        return end - start


def annual_series(latitude: float, year: int) -> Tuple[AnnualPoint, ...]:
    """Day length at *latitude* for each of 366 consecutive days from 1 January.

    Each day is evaluated at 12:00 UTC. For common years the last entry is
    1 January of the following year.
    """

    # Offsets from 1 January stay valid past 9999-12-31.
    jd0 = julian_date(date(year, 1, 1), REPRESENTATIVE_HOUR)
    points = []
    for day in range(1, SERIES_LENGTH + 1):
        state = solar_position(jd0 + day - 1)
        length = day_length(latitude, state.declination, OFFICIAL)
        points.append(AnnualPoint(day=day, length=round(length, 2)))
    return tuple(points)


def almanac(latitude: float) -> Tuple[AlmanacDay, ...]:
    """Twilight bands over a 365-day year using the sinusoidal declination model."""

    rows = []
    for day in range(1, ALMANAC_LENGTH + 1):
        declination = approximate_declination(day)
        windows = {
            name: sun_hours(latitude, declination, angle)
            for name, angle in TWILIGHT_ANGLES.items()
        }
        rows.append(AlmanacDay(day=day, declination=declination, windows=windows))
    return tuple(rows)


class AnnualSeriesCache:
    """Memoizes :func:`annual_series` on ``(latitude, year)`` only.

    Callers scrubbing through dates or times within one year hit the cache;
    only a latitude or year change triggers the 366-day recomputation.
    """

    def __init__(self, max_entries: int = 32) -> None:
        self._max_entries = max_entries
        self._entries: Dict[Tuple[float, int], Tuple[AnnualPoint, ...]] = {}
        self._lock = Lock()
        self.misses = 0

    def get(self, latitude: float, year: int) -> Tuple[AnnualPoint, ...]:
        key = (float(latitude), int(year))
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                return cached

        series = annual_series(latitude, year)

        with self._lock:
            if key not in self._entries:
                self.misses += 1
                if len(self._entries) >= self._max_entries:
                    self._entries.pop(next(iter(self._entries)))
                self._entries[key] = series
                LOGGER.debug(
                    json.dumps(
                        {"event": "annual_series_computed", "latitude": key[0], "year": key[1]}
                    )
                )
            return self._entries[key]

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.misses = 0
