"""Assemble a full solar/lunar snapshot and memoize it at the caller boundary.

The functions in :mod:`cosmic.solar`, :mod:`cosmic.daylight` and
:mod:`cosmic.orbital` hold no state; caching lives here, in explicit keyed
caches owned by whoever drives the engine.
"""

from __future__ import annotations

import json
import logging
from collections import OrderedDict
from dataclasses import dataclass
from datetime import date
from threading import Lock
from typing import Dict, Tuple, Union

from .daylight import (
    TWILIGHT_ANGLES,
    DaylightWindow,
    daylight_window,
    noon_elevation,
    solar_noon,
    sun_elevation,
)
from .orbital import OrbitalState, orbital_state
from .solar import solar_position
from .timeconv import Clock, day_of_year, julian_date, resolve_date, utc_now

__all__ = ["Instant", "GeoLocation", "Snapshot", "compute_snapshot", "SnapshotCache"]

LOGGER = logging.getLogger(__name__)

SnapshotKey = Tuple[date, float, float, float, bool]


@dataclass(frozen=True)
class Instant:
    """Civil date plus decimal UTC hour."""

    day: date
    utc_hour: float

    @property
    def julian_date(self) -> float:
        return julian_date(self.day, self.utc_hour)


@dataclass(frozen=True)
class GeoLocation:
    """Observer position in degrees; latitude is clamped only inside the trig."""

    latitude: float
    longitude: float


@dataclass(frozen=True)
class Snapshot:
    """Solar, daylight and orbital state for one instant and location."""

    day: date
    utc_hour: float
    latitude: float
    longitude: float
    julian_date: float
    declination: float
    equation_of_time: float  # applied correction in minutes, 0 when disabled
    days_since_epoch: float
    solar_noon: float
    noon_elevation: float
    sun_elevation: float
    windows: Dict[str, DaylightWindow]
    orbital: OrbitalState

    @property
    def daylight(self) -> DaylightWindow:
        return self.windows["official"]

    @property
    def instant(self) -> Instant:
        return Instant(self.day, self.utc_hour)

    @property
    def day_of_year(self) -> int:
        return day_of_year(self.day)

    @property
    def location(self) -> GeoLocation:
        return GeoLocation(self.latitude, self.longitude)


def compute_snapshot(
    day: Union[date, str, None],
    utc_hour: float,
    latitude: float,
    longitude: float,
    use_eot: bool = True,
    clock: Clock = utc_now,
) -> Snapshot:
    """Compute the full state for *day* at *utc_hour* and the given location.

    Parameters
    ----------
    day:
        Calendar date. ``None`` or an unparseable value falls back to the
        date reported by *clock*.
    utc_hour:
        Decimal UTC hour; not clamped.
    latitude, longitude:
        Observer coordinates in degrees (east-positive longitude).
    use_eot:
        Apply the equation of time when placing solar noon.
    clock:
        Source of "now" for the date fallback.
    """

    resolved = resolve_date(day, clock)
    jd = julian_date(resolved, utc_hour)
    solar = solar_position(jd)

    eot = solar.equation_of_time if use_eot else 0.0
    noon = solar_noon(longitude, eot)
    windows = {
        name: daylight_window(latitude, solar.declination, noon, angle)
        for name, angle in TWILIGHT_ANGLES.items()
    }

    return Snapshot(
        day=resolved,
        utc_hour=utc_hour,
        latitude=latitude,
        longitude=longitude,
        julian_date=jd,
        declination=solar.declination,
        equation_of_time=eot,
        days_since_epoch=solar.days_since_epoch,
        solar_noon=noon,
        noon_elevation=noon_elevation(latitude, solar.declination),
        sun_elevation=sun_elevation(latitude, solar.declination, utc_hour, noon),
        windows=windows,
        orbital=orbital_state(solar.days_since_epoch, utc_hour, longitude),
    )


class SnapshotCache:
    """Bounded LRU cache of snapshots keyed on the full input tuple."""

    def __init__(self, max_entries: int = 256, clock: Clock = utc_now) -> None:
        if max_entries <= 0:
            raise ValueError("max_entries must be positive")
        self._max_entries = max_entries
        self._clock = clock
        self._entries: "OrderedDict[SnapshotKey, Snapshot]" = OrderedDict()
        self._lock = Lock()
        self.hits = 0
        self.misses = 0

    def get(
        self,
        day: Union[date, str, None],
        utc_hour: float,
        latitude: float,
        longitude: float,
        use_eot: bool = True,
    ) -> Snapshot:
        resolved = resolve_date(day, self._clock)
        key: SnapshotKey = (
            resolved,
            float(utc_hour),
            float(latitude),
            float(longitude),
            bool(use_eot),
        )
        with self._lock:
            cached = self._entries.get(key)
            if cached is not None:
                self._entries.move_to_end(key)
                self.hits += 1
                return cached

        snapshot = compute_snapshot(resolved, utc_hour, latitude, longitude, use_eot)

        with self._lock:
            self.misses += 1
            self._entries[key] = snapshot
            self._entries.move_to_end(key)
            while len(self._entries) > self._max_entries:
                evicted, _ = self._entries.popitem(last=False)
                LOGGER.debug(
                    json.dumps({"event": "snapshot_evicted", "date": evicted[0].isoformat()})
                )
        return snapshot

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
