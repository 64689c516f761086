"""AI report caching layer for surfcast.

A cached report for a (spot, locale) is served only while it is unexpired
and was generated for the same bucketed conditions. Reports expire at fixed
local checkpoints (04:00 and 23:00 by default) so none outlives ~19 hours.
"""

import hashlib
import json
import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from enum import Enum
from typing import Optional, Sequence
from zoneinfo import ZoneInfo

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import CachedReport
from surfcast.config import Settings
from surfcast.utils.angles import normalize_bearing, round_half_up

logger = logging.getLogger(__name__)

DEFAULT_CHECKPOINT_HOURS = (4, 23)


class ReportState(Enum):
    """Cache state of a report for given conditions."""

    FRESH = "fresh"
    EXPIRED = "expired"
    CHANGED = "changed"
    EMPTY = "empty"

    @property
    def needs_regeneration(self) -> bool:
        return self is not ReportState.FRESH


@dataclass
class ReportConditions:
    """Live numbers a report was written for. None means no reading."""

    effective_height: Optional[float] = None
    tide_height: Optional[float] = None
    wave_period: Optional[float] = None
    swell_height: Optional[float] = None
    swell_direction: Optional[float] = None
    wind_kmh: Optional[float] = None
    wind_direction: Optional[float] = None
    quality_score: Optional[float] = None


def _bucket(value: Optional[float], step: float) -> Optional[int]:
    if value is None:
        return None
    return int(round_half_up(value / step) * step)


def _bearing_bucket(value: Optional[float]) -> Optional[int]:
    if value is None:
        return None
    return int(normalize_bearing(round_half_up(value / 10) * 10))


def _tenth(value: Optional[float]) -> Optional[float]:
    if value is None:
        return None
    return round_half_up(value, 1)


def conditions_hash(conditions: ReportConditions, version: str) -> str:
    """Fingerprint of bucketed conditions plus the algorithm version.

    Heights round to 0.1 m, period to 1 s, directions to 10 degrees (wrapping
    360 to 0), wind to 5 km/h and score to 5 points, so sensor noise does not
    change it.

    Examples:
        >>> a = conditions_hash(ReportConditions(effective_height=1.52), "v1")
        >>> b = conditions_hash(ReportConditions(effective_height=1.48), "v1")
        >>> a == b
        True
    """
    canonical = {
        "effectiveHeight": _tenth(conditions.effective_height),
        "tideHeight": _tenth(conditions.tide_height),
        "wavePeriod": _bucket(conditions.wave_period, 1),
        "swellHeight": _tenth(conditions.swell_height),
        "swellDir": _bearing_bucket(conditions.swell_direction),
        "windKmh": _bucket(conditions.wind_kmh, 5),
        "windDir": _bearing_bucket(conditions.wind_direction),
        "qualityScore": _bucket(conditions.quality_score, 5),
        "aiVersion": version,
    }
    payload = json.dumps(canonical, sort_keys=True, separators=(",", ":"))
    return hashlib.md5(payload.encode("utf-8")).hexdigest()


def next_scheduled_expiry(
    now: datetime,
    tz: ZoneInfo,
    checkpoint_hours: Sequence[int] = DEFAULT_CHECKPOINT_HOURS,
) -> datetime:
    """Soonest local checkpoint strictly after now.

    Rolls over to the first checkpoint of the next day when none remain
    today.

    Args:
        now: Timezone-aware current time
        tz: Local service timezone
        checkpoint_hours: Local hours at which reports expire

    Returns:
        Timezone-aware expiry in the local timezone
    """
    hours = sorted(checkpoint_hours)
    local = now.astimezone(tz)
    for hour in hours:
        candidate = local.replace(hour=hour, minute=0, second=0, microsecond=0)
        if candidate > local:
            return candidate

    tomorrow = local.date() + timedelta(days=1)
    return datetime.combine(tomorrow, time(hour=hours[0]), tzinfo=tz)


class AIReportCache:
    """Report cache keyed by (spot, locale).

    Example:
        >>> cache = AIReportCache(db, settings)
        >>> h = cache.fingerprint(conditions)
        >>> state, cached = cache.evaluate("Cloud 9", "en", h, now)
        >>> state
        <ReportState.FRESH: 'fresh'>
    """

    def __init__(self, db: CacheDatabase, settings: Settings):
        """Initialize report cache.

        Args:
            db: CacheDatabase instance for storage
            settings: Supplies timezone, checkpoints and algorithm version
        """
        self.db = db
        self.settings = settings

    def fingerprint(self, conditions: ReportConditions) -> str:
        """Conditions hash tagged with the configured algorithm version."""
        return conditions_hash(conditions, self.settings.report_algorithm_version)

    def get(self, spot_name: str, locale: str) -> Optional[CachedReport]:
        """Most recent report for a spot and locale, regardless of state."""
        return self.db.get_report(spot_name, locale)

    def evaluate(
        self,
        spot_name: str,
        locale: str,
        current_hash: str,
        now: datetime,
    ) -> tuple[ReportState, Optional[CachedReport]]:
        """Classify the cached report against current conditions.

        Returns:
            (state, cached report or None)
        """
        cached = self.get(spot_name, locale)
        if cached is None:
            state = ReportState.EMPTY
        elif now >= cached.expires_at:
            state = ReportState.EXPIRED
        elif cached.conditions_hash != current_hash:
            state = ReportState.CHANGED
        else:
            state = ReportState.FRESH

        logger.debug(f"AI report cache for {spot_name}/{locale}: {state.value}")
        return state, cached

    def save(
        self,
        spot_name: str,
        locale: str,
        report,
        current_hash: str,
        now: datetime,
    ) -> CachedReport:
        """Store a freshly generated report with the next scheduled expiry.

        Args:
            report: Anything with title, summary and verdict (a parsed Report)
        """
        cached = CachedReport(
            spot_name=spot_name,
            locale=locale,
            title=report.title,
            summary=report.summary,
            verdict=report.verdict,
            conditions_hash=current_hash,
            updated_at=now,
            expires_at=next_scheduled_expiry(
                now, self.settings.tz, self.settings.report_checkpoint_hours
            ),
        )
        self.db.upsert_report(cached)
        logger.info(
            f"Saved AI report for {spot_name}/{locale} "
            f"(expires {cached.expires_at.isoformat()})"
        )
        return cached
