"""Day length and sunrise/sunset windows from the sunrise equation.

Two query modes share the same physics but report polar conditions
differently, and both are kept as-is:

* :func:`day_length` returns a duration, ``24.0`` for perpetual day and
  ``0.0`` for perpetual night.
* :func:`sun_hours` returns a ``(start, end)`` window around an idealized
  12:00 UTC noon, ``(0, 24)`` for perpetual day and the zero-width
  ``(12, 12)`` for perpetual night.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Dict, Tuple

__all__ = [
    "TWILIGHT_ANGLES",
    "OFFICIAL",
    "DaylightWindow",
    "twilight_angle",
    "day_length",
    "sun_hours",
    "solar_noon",
    "daylight_window",
    "noon_elevation",
    "sun_elevation",
    "SeasonMarker",
    "SEASON_MARKERS",
    "LatitudePreset",
    "LATITUDE_PRESETS",
]

TWILIGHT_ANGLES: Dict[str, float] = {
    "official": -0.833,
    "civil": -6.0,
    "nautical": -12.0,
    "astronomical": -18.0,
}

OFFICIAL = TWILIGHT_ANGLES["official"]

MAX_SAFE_LATITUDE = 89.9  # keeps cos(latitude) away from zero


@dataclass(frozen=True)
class SeasonMarker:
    """Equinox or solstice position on a 1-based day-of-year axis."""

    day: int
    label: str
    short: str


SEASON_MARKERS: Tuple[SeasonMarker, ...] = (
    SeasonMarker(79, "Equinox (Mar)", "Mar Eq"),
    SeasonMarker(172, "Solstice (Jun)", "Jun Sol"),
    SeasonMarker(266, "Equinox (Sep)", "Sep Eq"),
    SeasonMarker(355, "Solstice (Dec)", "Dec Sol"),
)


@dataclass(frozen=True)
class LatitudePreset:
    latitude: float
    label: str


LATITUDE_PRESETS: Tuple[LatitudePreset, ...] = (
    LatitudePreset(90.0, "N. Pole"),
    LatitudePreset(66.5, "Arctic Circle"),
    LatitudePreset(23.5, "Tropic of Cancer"),
    LatitudePreset(0.0, "Equator"),
    LatitudePreset(-23.5, "Tropic of Capricorn"),
    LatitudePreset(-66.5, "Antarctic Circle"),
    LatitudePreset(-90.0, "S. Pole"),
)


@dataclass(frozen=True)
class DaylightWindow:
    """Duration and UTC bounds of the period the sun is above a threshold."""

    duration: float
    sunrise: float
    sunset: float

    @property
    def is_polar_night(self) -> bool:
        return self.duration <= 0

    @property
    def is_midnight_sun(self) -> bool:
        return self.duration >= 24


def twilight_angle(twilight: str) -> float:
    try:
        return TWILIGHT_ANGLES[twilight]
    except KeyError as exc:
        raise ValueError(f"Unsupported twilight selector: {twilight}") from exc


def _clamp_latitude(lat: float) -> float:
    return max(-MAX_SAFE_LATITUDE, min(MAX_SAFE_LATITUDE, lat))


def _cos_hour_angle(lat: float, declination: float, threshold: float) -> float:
    """Cosine of the hour angle at which the sun crosses *threshold*."""

    lat_rad = math.radians(_clamp_latitude(lat))
    dec_rad = math.radians(declination)
    alt_rad = math.radians(threshold)

    numerator = math.sin(alt_rad) - math.sin(lat_rad) * math.sin(dec_rad)
    denominator = math.cos(lat_rad) * math.cos(dec_rad)
    return numerator / denominator


def day_length(lat: float, declination: float, threshold: float = OFFICIAL) -> float:
    """Hours during which the sun stays above *threshold* degrees altitude.

    Parameters
    ----------
    lat:
        Observer latitude in degrees; clamped to +/-89.9 internally.
    declination:
        Solar declination in degrees.
    threshold:
        Sun altitude defining the day boundary, e.g. ``-0.833`` for the
        official sunrise or ``-6`` for civil twilight.

    Returns
    -------
    float
        ``24.0`` when the sun never sets, ``0.0`` when it never rises,
        otherwise the day length in hours.
    """

    cos_omega = _cos_hour_angle(lat, declination, threshold)

    if cos_omega <= -1:
        return 24.0
    if cos_omega >= 1:
        return 0.0

    omega = math.degrees(math.acos(cos_omega))
    return 2 * omega / 15


def sun_hours(
    lat: float, declination: float, threshold: float = OFFICIAL
) -> Tuple[float, float]:
    """UTC start and end of daylight assuming solar noon at exactly 12:00.

    Longitude-independent; meant for abstract charts rather than the real
    sunrise of a located observer.
    """

    cos_h = _cos_hour_angle(lat, declination, threshold)

    if cos_h < -1:
        return (0.0, 24.0)
    if cos_h > 1:
        return (12.0, 12.0)

    hour_offset = math.degrees(math.acos(cos_h)) / 15
    return (12 - hour_offset, 12 + hour_offset)


def solar_noon(longitude: float, equation_of_time: float, use_eot: bool = True) -> float:
    """UTC hour of local apparent noon; EoT is ignored when *use_eot* is false."""

    correction = equation_of_time if use_eot else 0.0
    return 12 - longitude / 15 - correction / 60


def daylight_window(
    lat: float, declination: float, noon: float, threshold: float = OFFICIAL
) -> DaylightWindow:
    duration = day_length(lat, declination, threshold)
    return DaylightWindow(
        duration=duration,
        sunrise=noon - duration / 2,
        sunset=noon + duration / 2,
    )


def noon_elevation(lat: float, declination: float) -> float:
    return 90 - abs(lat - declination)


def sun_elevation(lat: float, declination: float, utc_hour: float, noon: float) -> float:
    """Sun altitude in degrees at *utc_hour* given the local solar *noon*."""

    hour_angle = math.radians((utc_hour - noon) * 15)
    lat_rad = math.radians(lat)
    dec_rad = math.radians(declination)
    sin_alt = math.sin(lat_rad) * math.sin(dec_rad) + math.cos(lat_rad) * math.cos(
        dec_rad
    ) * math.cos(hour_angle)
    return math.degrees(math.asin(max(-1.0, min(1.0, sin_alt))))
