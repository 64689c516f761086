"""Tests for the per-day tide cache."""

from datetime import date, time, timedelta

import pytest

from conftest import complete_day
from surfcast.cache.models import TideExtreme, TideHeight
from surfcast.errors import CacheIncomplete

DAY = date(2025, 1, 15)


class TestTideCacheStore:
    """Tests for TideCacheStore."""

    def test_complete_day_is_served(self, store):
        heights, extremes = complete_day(DAY)
        store.put(DAY, heights, extremes)

        cached = store.get(DAY)
        assert cached is not None
        assert cached.is_complete
        assert len(cached.heights) == 24
        assert len(cached.extremes) == 2
        assert cached.height_at(6) == pytest.approx(heights[6].height)

    def test_23_hours_is_a_miss(self, store):
        heights, extremes = complete_day(DAY, hours=range(23))
        store.put(DAY, heights, extremes)

        assert store.get(DAY) is None
        assert store.is_complete(DAY) is False

    def test_require_raises_with_count(self, store):
        heights, _ = complete_day(DAY, hours=range(20))
        store.put(DAY, heights)

        with pytest.raises(CacheIncomplete) as exc_info:
            store.require(DAY)
        assert exc_info.value.found == 20
        assert "20/24" in str(exc_info.value)

    def test_missing_day_is_a_miss(self, store):
        assert store.get(DAY) is None
        with pytest.raises(CacheIncomplete):
            store.require(DAY)

    def test_partial_writes_complete_over_time(self, store):
        first, _ = complete_day(DAY, hours=range(12))
        second, _ = complete_day(DAY, hours=range(12, 24))
        store.put(DAY, first)
        assert store.get(DAY) is None

        store.put(DAY, second)
        assert store.get(DAY) is not None

    def test_invalid_hour_rejected(self, store):
        with pytest.raises(ValueError):
            store.put(DAY, [TideHeight(DAY, 24, 1.0)])
        assert store.db.count_tide_hours(DAY) == 0

    def test_duplicate_extremes_are_collapsed(self, store):
        heights, _ = complete_day(DAY)
        low = TideExtreme(DAY, time(5, 42), 0.2, "Low")
        store.put(DAY, heights, [low, low, TideExtreme(DAY, time(5, 42), 0.25, "Low")])

        extremes = store.get(DAY).extremes
        assert len(extremes) == 1
        assert extremes[0].height == pytest.approx(0.25)

    def test_put_without_extremes_keeps_existing(self, store):
        heights, extremes = complete_day(DAY)
        store.put(DAY, heights, extremes)
        store.put(DAY, heights[:1])

        assert len(store.get(DAY).extremes) == 2

    def test_retention_sweep(self, store):
        old = DAY - timedelta(days=8)
        store.put(old, *complete_day(old))
        store.put(DAY, *complete_day(DAY))

        deleted = store.retention_sweep(DAY, keep_days=7)

        assert deleted == 24
        assert store.get(old) is None
        assert store.get(DAY) is not None
