from __future__ import annotations

import sys
from pathlib import Path
from threading import Thread

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest

import cosmic.annual as annual
from cosmic.annual import SERIES_LENGTH, AnnualSeriesCache, almanac, annual_series


def test_series_has_366_ascending_days():
    series = annual_series(45.0, 2023)
    assert len(series) == SERIES_LENGTH == 366
    assert [point.day for point in series] == list(range(1, 367))


def test_series_values_are_rounded_and_bounded():
    for point in annual_series(60.0, 2024):
        assert 0.0 <= point.length <= 24.0
        assert round(point.length, 2) == point.length


def test_equator_stays_near_twelve_hours():
    lengths = [point.length for point in annual_series(0.0, 2024)]
    assert min(lengths) >= 12.0
    assert max(lengths) <= 12.3


def test_mid_latitude_peaks_near_june_solstice():
    series = annual_series(45.0, 2024)
    longest = max(series, key=lambda point: point.length)
    shortest = min(series, key=lambda point: point.length)
    assert 165 <= longest.day <= 180
    assert shortest.day >= 340 or shortest.day <= 5
    assert longest.length == pytest.approx(15.6, abs=0.2)


def test_series_covers_the_last_calendar_year():
    series = annual_series(45.0, 9999)
    assert len(series) == SERIES_LENGTH
    # Day 366 of 9999 lands past the last representable date.
    assert series[-1].length == pytest.approx(series[0].length, abs=0.05)
    assert series[171].length > 15.0


def test_high_latitude_reaches_polar_sentinels():
    lengths = [point.length for point in annual_series(80.0, 2024)]
    assert max(lengths) == 24.0
    assert min(lengths) == 0.0


def test_southern_hemisphere_mirrors_northern():
    north = annual_series(40.0, 2024)
    south = annual_series(-40.0, 2024)
    assert north[171].length > 14.0
    assert south[171].length < 10.0


def test_cache_recomputes_only_on_latitude_or_year_change(monkeypatch: pytest.MonkeyPatch):
    calls = []
    original = annual.annual_series

    def counting(latitude: float, year: int):
        calls.append((latitude, year))
        return original(latitude, year)

    monkeypatch.setattr(annual, "annual_series", counting)
    cache = AnnualSeriesCache()

    first = cache.get(45.0, 2024)
    assert cache.get(45.0, 2024) is first
    assert cache.get(45, 2024) is first
    assert calls == [(45.0, 2024)]

    cache.get(46.0, 2024)
    cache.get(45.0, 2025)
    assert len(calls) == 3
    assert cache.misses == 3
    assert len(cache) == 3

    cache.clear()
    assert len(cache) == 0


def test_cache_evicts_oldest_entry():
    cache = AnnualSeriesCache(max_entries=2)
    cache.get(10.0, 2024)
    cache.get(20.0, 2024)
    cache.get(30.0, 2024)
    assert len(cache) == 2


def test_cache_is_safe_across_threads():
    cache = AnnualSeriesCache()
    results = []

    def worker() -> None:
        results.append(cache.get(52.0, 2024))

    threads = [Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(cache) == 1
    assert all(result is results[0] for result in results)


def test_almanac_rows_and_nesting():
    rows = almanac(60.0)
    assert len(rows) == 365
    assert rows[0].day == 1 and rows[-1].day == 365
    for row in rows:
        assert set(row.windows) == {"official", "civil", "nautical", "astronomical"}
        astro, naut, civil, official = (
            row.windows["astronomical"],
            row.windows["nautical"],
            row.windows["civil"],
            row.windows["official"],
        )
        assert astro[0] <= naut[0] <= civil[0] <= official[0]
        assert official[1] <= civil[1] <= naut[1] <= astro[1]
        assert row.day_length == pytest.approx(official[1] - official[0])


def test_almanac_polar_windows():
    rows = almanac(85.0)
    assert rows[171].windows["official"] == (0.0, 24.0)
    assert rows[354].windows["official"] == (12.0, 12.0)
    assert rows[354].day_length == 0.0
