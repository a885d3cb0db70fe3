"""Subsolar point and day/night terminator for equirectangular maps."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np

__all__ = ["TerminatorCurve", "subsolar_longitude", "terminator_curve", "dark_pole"]

MIN_DECLINATION = 0.1  # tan(0) would put the terminator on the meridians


@dataclass(frozen=True)
class TerminatorCurve:
    """Terminator latitudes sampled across one map width."""

    longitudes: np.ndarray
    latitudes: np.ndarray
    dark_pole: str


def subsolar_longitude(utc_hour: float) -> float:
    """Longitude where the sun culminates at *utc_hour*, in ``[-180, 180)``."""

    return ((12.0 - utc_hour) * 15.0 + 180.0) % 360.0 - 180.0


def dark_pole(declination: float) -> str:
    """Pole lying in 24-hour darkness for the given declination."""

    return "south" if declination > 0 else "north"


def terminator_curve(
    declination: float,
    subsolar_lon: float,
    center_lon: float = 0.0,
    step: float = 2.0,
) -> TerminatorCurve:
    """Sample the terminator over 360 degrees of longitude centred on *center_lon*.

    Parameters
    ----------
    declination:
        Solar declination in degrees. Values within 0.1 degrees of zero are
        nudged away from zero, keeping the sign.
    subsolar_lon:
        Longitude of the subsolar point in degrees.
    center_lon:
        Longitude placed in the middle of the map.
    step:
        Sampling interval in degrees.

    Returns
    -------
    TerminatorCurve
        Longitudes from ``center_lon - 180`` to ``center_lon + 180`` and the
        matching terminator latitudes in degrees.
    """

    safe_dec = declination
    if abs(declination) < MIN_DECLINATION:
        safe_dec = MIN_DECLINATION if declination >= 0 else -MIN_DECLINATION

    offsets = np.arange(0.0, 360.0 + step / 2, step)
    longitudes = center_lon - 180.0 + offsets
    hour_angle = np.radians(longitudes - subsolar_lon)
    with np.errstate(invalid="ignore", divide="ignore"):
        latitudes = np.degrees(np.arctan(-np.cos(hour_angle) / np.tan(np.radians(safe_dec))))
    latitudes = np.nan_to_num(latitudes, nan=0.0)

    return TerminatorCurve(
        longitudes=longitudes,
        latitudes=latitudes,
        dark_pole=dark_pole(declination),
    )
