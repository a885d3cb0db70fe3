"""Simplified Sun/Earth/Moon layout, lunar phase and tidal alignment.

Both orbits are circles in a heliocentric plane. The Moon advances at the
mean elongation rate, so phase and tides follow the synodic month without any
perturbation terms. Radii are display units, not physical distances.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field

__all__ = [
    "OrbitGeometry",
    "Point",
    "OrbitalState",
    "orbital_state",
    "phase_name",
    "classify_tide",
    "is_high_tide",
    "illuminated_fraction",
]

TWO_PI = 2 * math.pi

SPRING_TIDE = "Spring Tide"
NEAP_TIDE = "Neap Tide"
TRANSITIONAL_TIDE = "Transitional"

HIGH_TIDE = "High Tide"
LOW_TIDE = "Low Tide"

_PHASE_BUCKETS = (
    (0.22, "Waxing Crescent"),
    (0.28, "First Quarter"),
    (0.47, "Waxing Gibbous"),
    (0.53, "Full Moon"),
    (0.72, "Waning Gibbous"),
    (0.78, "Last Quarter"),
)


@dataclass(frozen=True)
class OrbitGeometry:
    """Display-scale constants for the orbit diagram."""

    earth_orbit_radius: float = 200.0
    moon_orbit_radius: float = 60.0
    earth_radius: float = 12.0
    moon_radius: float = 6.0
    days_in_year: float = 365.25
    days_in_lunar_cycle: float = 29.53


@dataclass(frozen=True)
class Point:
    x: float
    y: float


@dataclass(frozen=True)
class OrbitalState:
    """Positions, phase and tide data for one instant and observer longitude."""

    earth: Point
    moon: Point
    angle_to_sun: float  # radians, from Earth towards the Sun
    angle_to_moon: float  # radians, from Earth towards the Moon
    phase: float  # [0, 1), 0 new moon, 0.5 full moon
    alignment: float  # cos(2 * sun-moon separation)
    tide_rx: float
    tide_ry: float
    user_rotation: float  # degrees
    is_high_tide: bool
    sun: Point = field(default_factory=lambda: Point(0.0, 0.0))

    @property
    def sun_degrees(self) -> float:
        return math.degrees(math.atan2(math.sin(self.angle_to_sun), math.cos(self.angle_to_sun)))

    @property
    def moon_degrees(self) -> float:
        return math.degrees(self.angle_to_moon)

    @property
    def phase_name(self) -> str:
        return phase_name(self.phase)

    @property
    def tide_type(self) -> str:
        return classify_tide(self.alignment)

    @property
    def local_tide_status(self) -> str:
        return HIGH_TIDE if self.is_high_tide else LOW_TIDE


def phase_name(phase: float) -> str:
    """Name one of the eight conventional lunar phases for *phase* in [0, 1)."""

    if phase < 0.03 or phase > 0.97:
        return "New Moon"
    for upper, name in _PHASE_BUCKETS:
        if phase < upper:
            return name
    return "Waning Crescent"


def classify_tide(alignment: float) -> str:
    if alignment > 0.8:
        return SPRING_TIDE
    if alignment < -0.8:
        return NEAP_TIDE
    return TRANSITIONAL_TIDE


def is_high_tide(utc_hour: float, longitude: float, phase: float) -> bool:
    """Whether the observer sits under one of the two tidal bulges.

    The bulges are modelled as +/-45 degree windows centred on the sub-lunar
    meridian and its antipode.
    """

    user_rotation = (utc_hour - 12) * 15 + longitude
    diff = (user_rotation - phase * 360) % 360
    return diff <= 45 or diff >= 315 or 135 <= diff <= 225


def illuminated_fraction(phase: float) -> float:
    return (1 - math.cos(TWO_PI * phase)) / 2


def orbital_state(
    n: float,
    utc_hour: float,
    longitude: float,
    geometry: OrbitGeometry = OrbitGeometry(),
) -> OrbitalState:
    """Lay out Earth and Moon for *n* days since J2000.

    Parameters
    ----------
    n:
        Days since the J2000 epoch.
    utc_hour:
        Decimal UTC hour, used only for the local tide status.
    longitude:
        Observer longitude in degrees (east positive).
    geometry:
        Display radii and period constants.
    """

    earth_theta = (n / geometry.days_in_year) * TWO_PI
    earth = Point(
        geometry.earth_orbit_radius * math.cos(earth_theta),
        geometry.earth_orbit_radius * math.sin(earth_theta),
    )

    mean_elongation = 297.85 + 12.19075 * n
    angle_to_sun = earth_theta + math.pi
    moon_theta = angle_to_sun + math.radians(mean_elongation)
    moon = Point(
        earth.x + geometry.moon_orbit_radius * math.cos(moon_theta),
        earth.y + geometry.moon_orbit_radius * math.sin(moon_theta),
    )

    angle_to_moon = math.atan2(moon.y - earth.y, moon.x - earth.x)
    phase = ((angle_to_moon - angle_to_sun) % TWO_PI) / TWO_PI
    # Float rounding can land exactly on 2*pi.
    if phase >= 1.0:
        phase = 0.0

    alignment = math.cos(2 * (angle_to_moon - angle_to_sun))
    user_rotation = (utc_hour - 12) * 15 + longitude

    return OrbitalState(
        earth=earth,
        moon=moon,
        angle_to_sun=angle_to_sun,
        angle_to_moon=angle_to_moon,
        phase=phase,
        alignment=alignment,
        tide_rx=geometry.earth_radius + 4 + 6 + 3 * alignment,
        tide_ry=geometry.earth_radius + 4,
        user_rotation=user_rotation,
        is_high_tide=is_high_tide(utc_hour, longitude, phase),
    )
