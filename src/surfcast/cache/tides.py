"""Tide caching layer for surfcast.

A cached day is only served when all 24 hourly samples are present;
partial days read as misses.
"""

import logging
from datetime import date, timedelta
from typing import Optional, Sequence

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import HOURS_PER_DAY, CachedTideDay, TideExtreme, TideHeight
from surfcast.errors import CacheIncomplete

logger = logging.getLogger(__name__)

DEFAULT_RETENTION_DAYS = 7


class TideCacheStore:
    """Per-day tide table cache.

    Example:
        >>> store = TideCacheStore(CacheDatabase())
        >>> day = store.get(date(2025, 1, 15))
        >>> day.height_at(6) if day else None
        1.42
    """

    def __init__(self, db: CacheDatabase):
        """Initialize tide cache.

        Args:
            db: CacheDatabase instance for storage
        """
        self.db = db

    def get(self, day: date) -> Optional[CachedTideDay]:
        """Get a complete cached day.

        Returns:
            CachedTideDay if all 24 hours are cached, None otherwise
        """
        heights = self.db.get_tide_heights(day)
        hours = {h.hour for h in heights}
        if len(hours) != HOURS_PER_DAY:
            logger.debug(f"Tide cache miss for {day} ({len(hours)}/24 hours)")
            return None

        return CachedTideDay(
            date=day,
            heights=heights,
            extremes=self.db.get_tide_extremes(day),
        )

    def require(self, day: date) -> CachedTideDay:
        """Get a complete cached day or raise.

        Raises:
            CacheIncomplete: If fewer than 24 hourly samples are cached
        """
        cached = self.get(day)
        if cached is None:
            raise CacheIncomplete(day, self.db.count_tide_hours(day))
        return cached

    def is_complete(self, day: date) -> bool:
        """Check whether a date has all 24 hourly samples."""
        return self.db.count_tide_hours(day) == HOURS_PER_DAY

    def put(
        self,
        day: date,
        heights: Sequence[TideHeight],
        extremes: Sequence[TideExtreme] = (),
    ) -> None:
        """Store samples and extremes for one date.

        Hourly samples replace prior values for the same hour. Extremes
        replace the date's previous extremes only when new ones are given.

        Raises:
            ValueError: If a sample's hour is outside 0-23
            PersistenceWriteFailure: If the write fails (rolled back)
        """
        for sample in heights:
            if not 0 <= sample.hour < HOURS_PER_DAY:
                raise ValueError(f"Invalid tide hour {sample.hour} for {day}")

        unique_extremes = {(e.time, e.type): e for e in extremes}

        with self.db.transaction():
            self.db.upsert_tide_heights(day, heights)
            if unique_extremes:
                self.db.replace_tide_extremes(day, list(unique_extremes.values()))

        logger.debug(
            f"Stored tide day {day}: {len(heights)} hours, "
            f"{len(unique_extremes)} extremes"
        )

    def retention_sweep(self, today: date, keep_days: int = DEFAULT_RETENTION_DAYS) -> int:
        """Delete tide days older than keep_days before today.

        Returns:
            Number of hourly rows deleted
        """
        cutoff = today - timedelta(days=keep_days)
        return self.db.delete_tides_before(cutoff)
