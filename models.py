"""Pydantic models for API requests and responses."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator


class Twilight(str, Enum):
    """Enumeration of supported twilight definitions."""

    official = "official"
    civil = "civil"
    nautical = "nautical"
    astronomical = "astronomical"


class SnapshotQueryParams(BaseModel):
    """Validated query parameters for the ``/snapshot`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    lon: float = Field(..., ge=-180.0, le=180.0, description="Longitude in degrees")
    date: Optional[str] = Field(
        None,
        description="UTC calendar date (YYYY-MM-DD); invalid or missing means today",
    )
    time: str = Field(
        "12:00",
        description="UTC time of day as HH:MM[:SS] or decimal hours",
    )
    eot: bool = Field(True, description="Apply the equation of time to solar noon")
    twilight: Twilight = Field(
        Twilight.official, description="Threshold reported as the selected window"
    )

    @field_validator("time")
    @classmethod
    def validate_time(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("time must not be empty")
        return value.strip()


class TerminatorQueryParams(BaseModel):
    """Validated query parameters for the ``/terminator`` endpoint."""

    lon: float = Field(
        0.0, ge=-180.0, le=180.0, description="Longitude at the centre of the map"
    )
    date: Optional[str] = Field(
        None, description="UTC calendar date (YYYY-MM-DD)"
    )
    time: str = Field("12:00", description="UTC time of day")


class AnnualQueryParams(BaseModel):
    """Validated query parameters for the ``/annual`` endpoint."""

    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")
    year: int = Field(..., ge=1, le=9999, description="Calendar year")


class AlmanacQueryParams(BaseModel):
    lat: float = Field(..., ge=-90.0, le=90.0, description="Latitude in degrees")


class DaylightWindowModel(BaseModel):
    duration_hours: float
    duration_label: str
    sunrise_utc: float
    sunset_utc: float
    sunrise: str
    sunset: str
    is_polar_night: bool
    is_midnight_sun: bool


class SolarModel(BaseModel):
    julian_date: float
    days_since_epoch: float
    declination: float
    equation_of_time: float = Field(..., description="Applied correction in minutes")
    solar_noon_utc: float
    solar_noon: str
    noon_elevation: float
    sun_elevation: float


class PointModel(BaseModel):
    x: float
    y: float


class OrbitalModel(BaseModel):
    sun: PointModel
    earth: PointModel
    moon: PointModel
    angle_to_sun: float
    angle_to_moon: float
    sun_degrees: float
    moon_degrees: float
    phase: float
    phase_name: str
    illuminated_fraction: float
    alignment: float
    tide_type: str
    tide_rx: float
    tide_ry: float
    user_rotation: float
    local_tide_status: str


class SnapshotResponse(BaseModel):
    """Successful snapshot payload."""

    ok: bool = True
    date_utc: date = Field(..., description="Resolved UTC date")
    time_utc: str
    day_of_year: int
    latitude: float
    longitude: float
    solar: SolarModel
    twilight: Twilight
    twilight_angle: float = Field(..., description="Sun altitude threshold in degrees")
    selected: DaylightWindowModel
    daylight: Dict[Twilight, DaylightWindowModel]
    orbital: OrbitalModel


class AnnualPointModel(BaseModel):
    day: int
    length: float


class SeasonMarkerModel(BaseModel):
    day: int
    label: str
    short: str
    date_utc: Optional[date] = None


class LatitudePresetModel(BaseModel):
    latitude: float
    label: str


class AnnualResponse(BaseModel):
    ok: bool = True
    latitude: float
    year: int
    points: List[AnnualPointModel]
    markers: List[SeasonMarkerModel]


class AlmanacDayModel(BaseModel):
    day: int
    declination: float
    day_length: float
    windows: Dict[Twilight, List[float]]


class AlmanacResponse(BaseModel):
    ok: bool = True
    latitude: float
    days: List[AlmanacDayModel]


class PresetsResponse(BaseModel):
    """Reference day and latitude markers for charts and pickers."""

    ok: bool = True
    markers: List[SeasonMarkerModel]
    latitudes: List[LatitudePresetModel]


class TerminatorResponse(BaseModel):
    ok: bool = True
    date_utc: date
    time_utc: str
    declination: float
    subsolar_longitude: float
    dark_pole: str
    longitudes: List[float]
    latitudes: List[float]


class HealthResponse(BaseModel):
    """Health-check response."""

    ok: bool = True
    version: str
    snapshot_cache_entries: int
    annual_cache_entries: int


class ErrorResponse(BaseModel):
    """Error payload."""

    ok: bool = False
    code: str
    error: str
