"""Data models for cache layer."""

from dataclasses import dataclass, field
from datetime import date, datetime, time
from enum import Enum
from typing import Optional

HOURS_PER_DAY = 24


class Verdict(Enum):
    """Go/no-go call attached to a surf report."""

    GO = "GO"
    CONDITIONAL = "CONDITIONAL"
    NO_GO = "NO-GO"


@dataclass
class TideHeight:
    """Hourly sea-level sample."""

    date: date
    hour: int
    height: float


@dataclass
class TideExtreme:
    """High or low water event."""

    date: date
    time: time
    height: float
    type: str  # 'High', 'Low'


@dataclass
class CachedTideDay:
    """A complete cached tide day (all 24 hourly samples)."""

    date: date
    heights: list[TideHeight]
    extremes: list[TideExtreme] = field(default_factory=list)

    @property
    def is_complete(self) -> bool:
        """True when every hour of the day has a sample."""
        return len({h.hour for h in self.heights}) == HOURS_PER_DAY

    def height_at(self, hour: int) -> Optional[float]:
        """Tide height for an hour of the day, if sampled."""
        for sample in self.heights:
            if sample.hour == hour:
                return sample.height
        return None


@dataclass
class FetchLogEntry:
    """Record of a successful bulk tide fetch."""

    fetch_date: date
    start_date: date
    end_date: date
    days_fetched: int
    fetched_at: Optional[datetime] = None


@dataclass
class CachedReport:
    """Cached narrative report for a spot and locale."""

    spot_name: str
    locale: str
    title: str
    summary: str
    verdict: Verdict
    conditions_hash: str
    updated_at: datetime
    expires_at: datetime
