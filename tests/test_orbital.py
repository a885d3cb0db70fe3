from __future__ import annotations

import math
import sys
from pathlib import Path

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

from cosmic.orbital import (
    NEAP_TIDE,
    SPRING_TIDE,
    TRANSITIONAL_TIDE,
    OrbitGeometry,
    classify_tide,
    illuminated_fraction,
    is_high_tide,
    orbital_state,
    phase_name,
)

ELONGATION_RATE = 12.19075  # degrees per day


def _days_to_elongation(target_deg: float) -> float:
    return ((target_deg - 297.85) % 360.0) / ELONGATION_RATE


def test_layout_at_epoch():
    state = orbital_state(0.0, 12.0, 0.0)
    assert state.sun.x == 0.0 and state.sun.y == 0.0
    assert state.earth.x == pytest.approx(200.0)
    assert state.earth.y == pytest.approx(0.0)
    assert state.angle_to_sun == pytest.approx(math.pi)
    distance = math.hypot(state.moon.x - state.earth.x, state.moon.y - state.earth.y)
    assert distance == pytest.approx(60.0)
    assert state.phase == pytest.approx(297.85 / 360.0)
    assert state.phase_name == "Waning Crescent"


def test_earth_completes_orbit_in_a_year():
    geometry = OrbitGeometry()
    quarter = orbital_state(geometry.days_in_year / 4, 12.0, 0.0)
    assert quarter.earth.x == pytest.approx(0.0, abs=1e-9)
    assert quarter.earth.y == pytest.approx(200.0)


def test_custom_geometry():
    geometry = OrbitGeometry(earth_orbit_radius=100.0, moon_orbit_radius=10.0, earth_radius=5.0)
    state = orbital_state(3.0, 12.0, 0.0, geometry)
    assert math.hypot(state.earth.x, state.earth.y) == pytest.approx(100.0)
    assert math.hypot(state.moon.x - state.earth.x, state.moon.y - state.earth.y) == pytest.approx(
        10.0
    )
    assert state.tide_ry == 9.0


def test_phase_is_continuous_and_increasing():
    step = 0.01
    previous = orbital_state(0.0, 12.0, 0.0).phase
    wraps = 0
    for index in range(1, 6000):
        current = orbital_state(index * step, 12.0, 0.0).phase
        assert 0.0 <= current < 1.0
        delta = (current - previous) % 1.0
        assert 0.0 < delta < 0.001
        if current < previous:
            wraps += 1
        previous = current
    assert wraps == 2


def test_full_moon_is_spring_tide():
    state = orbital_state(_days_to_elongation(180.0), 12.0, 0.0)
    assert state.phase == pytest.approx(0.5, abs=1e-6)
    assert state.phase_name == "Full Moon"
    assert state.alignment == pytest.approx(1.0)
    assert state.tide_type == SPRING_TIDE
    assert state.tide_rx == pytest.approx(25.0)
    assert state.tide_ry == 16.0


def test_quarter_moon_is_neap_tide():
    state = orbital_state(_days_to_elongation(90.0), 12.0, 0.0)
    assert state.phase_name == "First Quarter"
    assert state.alignment == pytest.approx(-1.0)
    assert state.tide_type == NEAP_TIDE
    assert state.tide_rx == pytest.approx(19.0)


def test_angle_properties():
    state = orbital_state(_days_to_elongation(180.0), 12.0, 0.0)
    assert -180.0 <= state.sun_degrees <= 180.0
    assert state.moon_degrees == pytest.approx(math.degrees(state.angle_to_moon))


@pytest.mark.parametrize(
    "alignment, expected",
    [
        (1.0, SPRING_TIDE),
        (0.81, SPRING_TIDE),
        (0.8, TRANSITIONAL_TIDE),
        (0.0, TRANSITIONAL_TIDE),
        (-0.8, TRANSITIONAL_TIDE),
        (-0.81, NEAP_TIDE),
        (-1.0, NEAP_TIDE),
    ],
)
def test_classify_tide(alignment: float, expected: str):
    assert classify_tide(alignment) == expected


@pytest.mark.parametrize(
    "phase, expected",
    [
        (0.0, "New Moon"),
        (0.02, "New Moon"),
        (0.1, "Waxing Crescent"),
        (0.25, "First Quarter"),
        (0.35, "Waxing Gibbous"),
        (0.5, "Full Moon"),
        (0.6, "Waning Gibbous"),
        (0.75, "Last Quarter"),
        (0.9, "Waning Crescent"),
        (0.98, "New Moon"),
    ],
)
def test_phase_name(phase: float, expected: str):
    assert phase_name(phase) == expected


@pytest.mark.parametrize(
    "utc_hour, longitude, phase, expected",
    [
        (12.0, 0.0, 0.0, True),
        (12.0, 45.0, 0.0, True),
        (12.0, 46.0, 0.0, False),
        (18.0, 0.0, 0.0, False),
        (0.0, 0.0, 0.0, True),
        (12.0, 0.0, 0.5, True),
        (12.0, 0.0, 0.25, False),
        (12.0, -44.0, 0.0, True),
    ],
)
def test_local_high_tide(utc_hour: float, longitude: float, phase: float, expected: bool):
    assert is_high_tide(utc_hour, longitude, phase) is expected


def test_local_tide_status_label():
    state = orbital_state(_days_to_elongation(0.0), 12.0, 0.0)
    assert state.user_rotation == 0.0
    assert state.local_tide_status in ("High Tide", "Low Tide")
    assert state.local_tide_status == ("High Tide" if state.is_high_tide else "Low Tide")


def test_illuminated_fraction():
    assert illuminated_fraction(0.0) == pytest.approx(0.0)
    assert illuminated_fraction(0.5) == pytest.approx(1.0)
    assert illuminated_fraction(0.25) == pytest.approx(0.5)
