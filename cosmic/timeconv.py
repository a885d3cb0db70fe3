"""Calendar and clock conversions used by the ephemeris layer."""

from __future__ import annotations

import math
from datetime import UTC, date, datetime, timedelta
from typing import Callable, Optional, Union

__all__ = [
    "Clock",
    "TIME_PLACEHOLDER",
    "utc_now",
    "julian_date",
    "format_time",
    "parse_time",
    "format_duration",
    "day_of_year",
    "date_from_day_of_year",
    "resolve_date",
]

TIME_PLACEHOLDER = "--:--"

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Default clock: the current UTC instant."""

    return datetime.now(UTC)


def julian_date(day: date, utc_hour: float) -> float:
    """Return the Julian Date for a proleptic Gregorian *day* at *utc_hour*.

    January and February are treated as months 13 and 14 of the previous
    year. No range checking is done: far-off years still yield a number.
    """

    year, month = day.year, day.month
    if month <= 2:
        year -= 1
        month += 12

    a = math.floor(year / 100)
    b = 2 - a + math.floor(a / 4)

    return (
        math.floor(365.25 * (year + 4716))
        + math.floor(30.6001 * (month + 1))
        + day.day
        + b
        - 1524.5
        + utc_hour / 24.0
    )


def format_time(hours: Optional[float]) -> str:
    """Format decimal hours as ``HH:MM:SS`` on a 24-hour dial.

    Values outside ``[0, 24)`` wrap around. Rounding carries upwards, so
    23.99999 becomes ``00:00:00`` rather than ``24:00:00``.
    """

    if hours is None or not math.isfinite(hours):
        return TIME_PLACEHOLDER

    normalized = hours % 24.0
    whole_hours = math.floor(normalized)
    minutes_float = (normalized - whole_hours) * 60.0
    minutes = math.floor(minutes_float)
    # Half-up; round() would bank to even.
    seconds = math.floor((minutes_float - minutes) * 60.0 + 0.5)

    if seconds == 60:
        seconds = 0
        minutes += 1
    if minutes == 60:
        minutes = 0
        whole_hours += 1
    if whole_hours == 24:
        whole_hours = 0

    return f"{whole_hours:02d}:{minutes:02d}:{seconds:02d}"


def parse_time(text: str) -> float:
    """Parse ``HH:MM`` or ``HH:MM:SS`` into decimal hours."""

    parts = text.strip().split(":")
    if len(parts) not in (2, 3):
        raise ValueError(f"Unsupported time format: {text!r}")
    try:
        values = [int(part) for part in parts]
    except ValueError as exc:
        raise ValueError(f"Unsupported time format: {text!r}") from exc

    hours, minutes = values[0], values[1]
    seconds = values[2] if len(values) == 3 else 0
    if not (0 <= hours < 24 and 0 <= minutes < 60 and 0 <= seconds < 60):
        raise ValueError(f"Time out of range: {text!r}")
    return hours + minutes / 60.0 + seconds / 3600.0


def format_duration(hours: float) -> str:
    whole = math.floor(hours)
    minutes = math.floor((hours - whole) * 60.0 + 0.5)
    if minutes == 60:
        whole, minutes = whole + 1, 0
    return f"{whole}h {minutes}m"


def day_of_year(day: date) -> int:
    return day.timetuple().tm_yday


def date_from_day_of_year(year: int, ordinal: int) -> date:
    """Return the date for a 1-based *ordinal*; overflow rolls into later years."""

    return date(year, 1, 1) + timedelta(days=ordinal - 1)


def resolve_date(value: Union[date, str, None], clock: Clock = utc_now) -> date:
    """Return *value* as a date, falling back to ``clock()`` when unusable.

    Datetimes are reduced to their calendar date; ISO strings are parsed.
    Anything else, including malformed strings, silently becomes today.
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value.strip())
        except ValueError:
            pass
    return clock().date()
