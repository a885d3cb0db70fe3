"""Low-precision solar ephemeris referenced to the J2000 epoch.

The formulas are the usual almanac approximations (accurate to roughly one
arcminute within a century of J2000), which is plenty for day/night maps and
daylight charts.
"""

from __future__ import annotations

import math
from dataclasses import dataclass

__all__ = [
    "J2000_EPOCH",
    "SolarState",
    "norm360",
    "wrap180",
    "solar_position",
    "approximate_declination",
]

J2000_EPOCH = 2451545.0
MAX_DECLINATION = 23.44


@dataclass(frozen=True)
class SolarState:
    """Apparent solar coordinates for one instant."""

    declination: float  # degrees
    equation_of_time: float  # minutes
    days_since_epoch: float  # JD - 2451545.0


def norm360(angle: float) -> float:
    """Normalize *angle* in degrees into ``[0, 360)``."""

    return angle % 360.0


def wrap180(angle: float) -> float:
    """Wrap *angle* in degrees into ``[-180, 180]``."""

    if angle > 180.0:
        angle -= 360.0
    if angle < -180.0:
        angle += 360.0
    return angle


def solar_position(jd: float) -> SolarState:
    """Compute declination and equation of time for Julian Date *jd*.

    Parameters
    ----------
    jd:
        Julian Date (UTC is used as a stand-in for TT at this precision).

    Returns
    -------
    SolarState
        Declination in degrees, equation of time in minutes and the number
        of days since J2000.
    """

    n = jd - J2000_EPOCH

    mean_longitude = norm360(280.460 + 0.9856474 * n)
    mean_anomaly = math.radians(norm360(357.528 + 0.9856003 * n))

    ecliptic_longitude = math.radians(
        mean_longitude
        + 1.915 * math.sin(mean_anomaly)
        + 0.020 * math.sin(2 * mean_anomaly)
    )
    obliquity = math.radians(23.439 - 0.0000004 * n)

    right_ascension = norm360(
        math.degrees(
            math.atan2(
                math.cos(obliquity) * math.sin(ecliptic_longitude),
                math.cos(ecliptic_longitude),
            )
        )
    )
    declination = math.degrees(
        math.asin(math.sin(obliquity) * math.sin(ecliptic_longitude))
    )

    # 1 degree of hour angle is 4 minutes of time.
    equation_of_time = 4.0 * wrap180(mean_longitude - right_ascension)

    return SolarState(
        declination=declination,
        equation_of_time=equation_of_time,
        days_since_epoch=n,
    )


def approximate_declination(day: int) -> float:
    """Sinusoidal declination model keyed on day of year (equinox at day 81)."""

    return MAX_DECLINATION * math.sin(math.radians((360.0 / 365.0) * (day - 81)))
