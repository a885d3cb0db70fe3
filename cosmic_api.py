"""FastAPI application exposing the solar/lunar state engine."""

from __future__ import annotations

import json
import logging
import math
import time
from datetime import date
from typing import Annotated, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cosmic.annual import AnnualSeriesCache, almanac
from cosmic.config import load_settings
from cosmic.daylight import (
    LATITUDE_PRESETS,
    SEASON_MARKERS,
    DaylightWindow,
    SeasonMarker,
    twilight_angle,
)
from cosmic.engine import Snapshot, SnapshotCache
from cosmic.orbital import illuminated_fraction
from cosmic.solar import solar_position
from cosmic.terminator import subsolar_longitude, terminator_curve
from cosmic.timeconv import (
    date_from_day_of_year,
    format_duration,
    format_time,
    julian_date,
    parse_time,
    resolve_date,
    utc_now,
)
from models import (
    AlmanacDayModel,
    AlmanacQueryParams,
    AlmanacResponse,
    AnnualPointModel,
    AnnualQueryParams,
    AnnualResponse,
    DaylightWindowModel,
    ErrorResponse,
    HealthResponse,
    LatitudePresetModel,
    OrbitalModel,
    PointModel,
    PresetsResponse,
    SeasonMarkerModel,
    SnapshotQueryParams,
    SnapshotResponse,
    SolarModel,
    TerminatorQueryParams,
    TerminatorResponse,
    Twilight,
)

SETTINGS = load_settings()

logging.basicConfig(level=SETTINGS.log_level, format="%(message)s")
LOGGER = logging.getLogger("cosmic-api")

APP_VERSION = "1.0.0"
APP_DESCRIPTION = (
    "Solar declination, daylight windows, lunar phase and tides for any date and place"
)

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    422: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}

app = FastAPI(
    title="Cosmic Engine API",
    description=APP_DESCRIPTION,
    version=APP_VERSION,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=list(SETTINGS.cors_origins),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.state.clock = utc_now
app.state.snapshot_cache = SnapshotCache(SETTINGS.snapshot_cache_size)
app.state.annual_cache = AnnualSeriesCache(SETTINGS.annual_cache_size)


def _parse_hour(value: str) -> float:
    """Accept either ``HH:MM[:SS]`` or a decimal hour such as ``13.5``."""

    if ":" in value:
        return parse_time(value)
    try:
        hour = float(value)
    except ValueError as exc:
        raise ValueError(f"Unsupported time format: {value!r}") from exc
    if not math.isfinite(hour):
        raise ValueError(f"Unsupported time format: {value!r}")
    return hour


def _error_response(status_code: int, code: str, message: str) -> JSONResponse:
    payload = ErrorResponse(code=code, error=message)
    LOGGER.error(json.dumps({"event": "error", "code": code, "message": message}))
    return JSONResponse(status_code=status_code, content=payload.model_dump())


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    messages = ", ".join(error["msg"] for error in exc.errors())
    return _error_response(422, "validation_error", messages)


@app.exception_handler(HTTPException)
async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    detail = exc.detail
    if isinstance(detail, dict):
        message = detail.get("error") or detail.get("message") or str(detail)
    elif isinstance(detail, list):
        message = ", ".join(str(item) for item in detail)
    else:
        message = str(detail)
    return _error_response(exc.status_code, f"http_{exc.status_code}", message)


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    LOGGER.exception("Unhandled exception", exc_info=exc)
    return _error_response(500, "internal_error", "Unhandled server error")


def _window_model(window: DaylightWindow) -> DaylightWindowModel:
    return DaylightWindowModel(
        duration_hours=window.duration,
        duration_label=format_duration(window.duration),
        sunrise_utc=window.sunrise,
        sunset_utc=window.sunset,
        sunrise=format_time(window.sunrise),
        sunset=format_time(window.sunset),
        is_polar_night=window.is_polar_night,
        is_midnight_sun=window.is_midnight_sun,
    )


def _marker_model(marker: SeasonMarker, day: Optional[date] = None) -> SeasonMarkerModel:
    return SeasonMarkerModel(
        day=marker.day, label=marker.label, short=marker.short, date_utc=day
    )


def _snapshot_response(snapshot: Snapshot, twilight: Twilight) -> SnapshotResponse:
    orbital = snapshot.orbital
    return SnapshotResponse(
        date_utc=snapshot.day,
        time_utc=format_time(snapshot.utc_hour),
        day_of_year=snapshot.day_of_year,
        latitude=snapshot.latitude,
        longitude=snapshot.longitude,
        solar=SolarModel(
            julian_date=snapshot.julian_date,
            days_since_epoch=snapshot.days_since_epoch,
            declination=snapshot.declination,
            equation_of_time=snapshot.equation_of_time,
            solar_noon_utc=snapshot.solar_noon,
            solar_noon=format_time(snapshot.solar_noon),
            noon_elevation=snapshot.noon_elevation,
            sun_elevation=snapshot.sun_elevation,
        ),
        twilight=twilight,
        twilight_angle=twilight_angle(twilight.value),
        selected=_window_model(snapshot.windows[twilight.value]),
        daylight={name: _window_model(window) for name, window in snapshot.windows.items()},
        orbital=OrbitalModel(
            sun=PointModel(x=orbital.sun.x, y=orbital.sun.y),
            earth=PointModel(x=orbital.earth.x, y=orbital.earth.y),
            moon=PointModel(x=orbital.moon.x, y=orbital.moon.y),
            angle_to_sun=orbital.angle_to_sun,
            angle_to_moon=orbital.angle_to_moon,
            sun_degrees=orbital.sun_degrees,
            moon_degrees=orbital.moon_degrees,
            phase=orbital.phase,
            phase_name=orbital.phase_name,
            illuminated_fraction=illuminated_fraction(orbital.phase),
            alignment=orbital.alignment,
            tide_type=orbital.tide_type,
            tide_rx=orbital.tide_rx,
            tide_ry=orbital.tide_ry,
            user_rotation=orbital.user_rotation,
            local_tide_status=orbital.local_tide_status,
        ),
    )


@app.get("/health", response_model=HealthResponse)
def health() -> HealthResponse:
    return HealthResponse(
        ok=True,
        version=APP_VERSION,
        snapshot_cache_entries=len(app.state.snapshot_cache),
        annual_cache_entries=len(app.state.annual_cache),
    )


@app.get("/snapshot", response_model=SnapshotResponse, responses=ERROR_RESPONSES)
def snapshot_endpoint(params: Annotated[SnapshotQueryParams, Query()]) -> SnapshotResponse:
    start_time = time.perf_counter()
    try:
        utc_hour = _parse_hour(params.time)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    day = resolve_date(params.date, app.state.clock)
    snapshot = app.state.snapshot_cache.get(day, utc_hour, params.lat, params.lon, params.eot)
    response = _snapshot_response(snapshot, params.twilight)

    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps(
            {
                "event": "snapshot",
                "lat": params.lat,
                "lon": params.lon,
                "date": snapshot.day.isoformat(),
                "time": response.time_utc,
                "twilight": params.twilight.value,
                "phase": round(snapshot.orbital.phase, 4),
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return response


@app.get("/annual", response_model=AnnualResponse, responses=ERROR_RESPONSES)
def annual_endpoint(params: Annotated[AnnualQueryParams, Query()]) -> AnnualResponse:
    start_time = time.perf_counter()
    series = app.state.annual_cache.get(params.lat, params.year)
    duration_ms = (time.perf_counter() - start_time) * 1000.0
    LOGGER.info(
        json.dumps(
            {
                "event": "annual",
                "lat": params.lat,
                "year": params.year,
                "duration_ms": round(duration_ms, 3),
            }
        )
    )
    return AnnualResponse(
        latitude=params.lat,
        year=params.year,
        points=[AnnualPointModel(day=point.day, length=point.length) for point in series],
        markers=[
            _marker_model(marker, date_from_day_of_year(params.year, marker.day))
            for marker in SEASON_MARKERS
        ],
    )


@app.get("/almanac", response_model=AlmanacResponse, responses=ERROR_RESPONSES)
def almanac_endpoint(params: Annotated[AlmanacQueryParams, Query()]) -> AlmanacResponse:
    rows = almanac(params.lat)
    LOGGER.info(json.dumps({"event": "almanac", "lat": params.lat}))
    return AlmanacResponse(
        latitude=params.lat,
        days=[
            AlmanacDayModel(
                day=row.day,
                declination=row.declination,
                day_length=row.day_length,
                windows={name: list(window) for name, window in row.windows.items()},
            )
            for row in rows
        ],
    )


@app.get("/terminator", response_model=TerminatorResponse, responses=ERROR_RESPONSES)
def terminator_endpoint(params: Annotated[TerminatorQueryParams, Query()]) -> TerminatorResponse:
    try:
        utc_hour = _parse_hour(params.time)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc))

    day = resolve_date(params.date, app.state.clock)
    declination = solar_position(julian_date(day, utc_hour)).declination
    subsolar = subsolar_longitude(utc_hour)
    curve = terminator_curve(declination, subsolar, center_lon=params.lon)
    LOGGER.info(
        json.dumps({"event": "terminator", "lon": params.lon, "date": day.isoformat()})
    )
    return TerminatorResponse(
        date_utc=day,
        time_utc=format_time(utc_hour),
        declination=declination,
        subsolar_longitude=subsolar,
        dark_pole=curve.dark_pole,
        longitudes=curve.longitudes.tolist(),
        latitudes=curve.latitudes.tolist(),
    )


@app.get("/presets", response_model=PresetsResponse)
def presets_endpoint() -> PresetsResponse:
    return PresetsResponse(
        markers=[_marker_model(marker) for marker in SEASON_MARKERS],
        latitudes=[
            LatitudePresetModel(latitude=preset.latitude, label=preset.label)
            for preset in LATITUDE_PRESETS
        ],
    )
