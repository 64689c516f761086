"""Shared pytest fixtures for surfcast tests.

Test Tiers:
- unit: Fast tests with fixtures, no network (default)
- live: Real API tests, slow, requires network and credentials

Run live tests with: pytest -m live --run-live
"""

from datetime import date, datetime, time, timedelta, timezone
from zoneinfo import ZoneInfo

import pandas as pd
import pytest

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import TideExtreme, TideHeight
from surfcast.cache.tides import TideCacheStore
from surfcast.clients.marine import MarineForecast, MarineSnapshot
from surfcast.clients.tides import TideSeries
from surfcast.config import Settings

MANILA = ZoneInfo("Asia/Manila")


def pytest_addoption(parser):
    """Add command line options for test configuration."""
    parser.addoption(
        "--run-live",
        action="store_true",
        default=False,
        help="Run live API tests (slow, requires network)",
    )


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line("markers", "unit: fast unit tests using fixtures")
    config.addinivalue_line("markers", "live: real API tests (slow, requires network)")


def pytest_collection_modifyitems(config, items):
    """Skip live tests unless --run-live is specified."""
    if config.getoption("--run-live"):
        # --run-live given: don't skip live tests
        return

    skip_live = pytest.mark.skip(reason="need --run-live option to run")
    for item in items:
        if "live" in item.keywords:
            item.add_marker(skip_live)


# -----------------------------------------------------------------------------
# Fakes for upstream collaborators
# -----------------------------------------------------------------------------


class FakeTideClient:
    """Tide client returning hourly series built from local midnight."""

    def __init__(self, tz=MANILA, error=None, days_available=None, transform=None):
        self.tz = tz
        self.transform = transform
        self.error = error
        self.days_available = days_available
        self.calls = []

    def fetch(self, lat, lon, start, days=7):
        self.calls.append((start, days))
        if self.error is not None:
            raise self.error
        series = make_tide_series(start, self.days_available or days, self.tz)
        return self.transform(series) if self.transform else series


class FakeMarineClient:
    """Marine client returning a fixed snapshot (or raising)."""

    def __init__(self, snapshot=None, error=None):
        self.snapshot = snapshot or make_snapshot()
        self.error = error
        self.calls = []

    def fetch(self, lat, lon):
        self.calls.append((lat, lon))
        if self.error is not None:
            raise self.error
        return MarineForecast(
            lat=lat,
            lon=lon,
            current=self.snapshot,
            hourly=pd.DataFrame(),
            daily=pd.DataFrame(),
        )


class FakeGenerator:
    """Report generator returning canned text (or raising)."""

    def __init__(self, text=None, error=None):
        self.text = text or (
            '{"title": "Head high and clean", '
            '"summary": "Solid swell with light offshore wind.", "verdict": "GO"}'
        )
        self.error = error
        self.calls = []

    def generate(self, system, prompt):
        self.calls.append((system, prompt))
        if self.error is not None:
            raise self.error
        return self.text


# -----------------------------------------------------------------------------
# Builders
# -----------------------------------------------------------------------------


def tide_height_at(hour: int) -> float:
    """Deterministic semi-diurnal-ish curve, 0.2 to 1.8 m."""
    return round(1.0 + 0.8 * ((hour % 12) - 6) / 6, 3)


def make_tide_series(start: date, days: int, tz=MANILA) -> TideSeries:
    """Hourly heights plus two extremes per day, starting at local midnight."""
    origin = datetime.combine(start, time(0), tzinfo=tz)
    heights = []
    extremes = []
    for offset in range(days * 24):
        moment = origin + timedelta(hours=offset)
        heights.append({"dt": int(moment.timestamp()), "height": tide_height_at(moment.hour)})
    for day in range(days):
        base = origin + timedelta(days=day)
        extremes.append({
            "dt": int((base + timedelta(hours=5, minutes=42)).timestamp()),
            "height": 0.25,
            "type": "Low",
        })
        extremes.append({
            "dt": int((base + timedelta(hours=11, minutes=58)).timestamp()),
            "height": 1.75,
            "type": "High",
        })
    return TideSeries(
        heights=pd.DataFrame(heights, columns=["dt", "height"]),
        extremes=pd.DataFrame(extremes, columns=["dt", "height", "type"]),
    )


def with_unusable_rows(series: TideSeries) -> TideSeries:
    """Append a height and an extreme with no timestamp, as a bad upstream row."""
    heights = pd.concat(
        [series.heights, pd.DataFrame([{"dt": float("nan"), "height": 1.0}])],
        ignore_index=True,
    )
    extremes = pd.concat(
        [series.extremes, pd.DataFrame([{"dt": None, "height": 0.5, "type": "Low"}])],
        ignore_index=True,
    )
    return TideSeries(heights=heights, extremes=extremes)


def without_timestamps(series: TideSeries) -> TideSeries:
    """Series whose heights frame lost its dt column."""
    return TideSeries(heights=series.heights.drop(columns=["dt"]), extremes=series.extremes)


def complete_day(day: date, hours=range(24)):
    """Hourly samples and a low/high pair for one date."""
    heights = [TideHeight(date=day, hour=h, height=tide_height_at(h)) for h in hours]
    extremes = [
        TideExtreme(date=day, time=time(5, 42), height=0.25, type="Low"),
        TideExtreme(date=day, time=time(11, 58), height=1.75, type="High"),
    ]
    return heights, extremes


def make_snapshot(**overrides) -> MarineSnapshot:
    """Clean 2 m groundswell with light offshore wind for Cloud 9."""
    values = dict(
        time=datetime(2025, 1, 15, 8, 0),
        wave_height=2.1,
        wave_direction=70.0,
        wave_period=12.0,
        wind_wave_height=0.3,
        swell_height=1.8,
        swell_direction=75.0,
        swell_period=12.0,
        wind_speed_kmh=8.0,
        wind_direction=250.0,
        temperature_c=28.0,
        weather_code=1,
    )
    values.update(overrides)
    return MarineSnapshot(**values)


# -----------------------------------------------------------------------------
# Fixtures
# -----------------------------------------------------------------------------


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings pointing at a temporary database."""
    return Settings(
        db_path=tmp_path / "test.duckdb",
        worldtides_api_key="test-tides-key",
        openai_api_key="test-openai-key",
    )


@pytest.fixture
def db(settings):
    """Create a CacheDatabase with temp database."""
    database = CacheDatabase(settings.db_path)
    yield database
    database.close()


@pytest.fixture
def store(db) -> TideCacheStore:
    return TideCacheStore(db)


@pytest.fixture
def today() -> date:
    return date(2025, 1, 15)


@pytest.fixture
def morning() -> datetime:
    """08:00 Manila on 2025-01-15, as an aware UTC datetime."""
    return datetime(2025, 1, 15, 0, 0, tzinfo=timezone.utc)


@pytest.fixture
def tide_client() -> FakeTideClient:
    return FakeTideClient()


@pytest.fixture
def marine_client() -> FakeMarineClient:
    return FakeMarineClient()


@pytest.fixture
def generator() -> FakeGenerator:
    return FakeGenerator()
