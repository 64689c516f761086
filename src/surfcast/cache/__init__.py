"""Data caching layer for surfcast.

Provides persistent caching of tide tables and AI reports using DuckDB.

Tide refresh can be run via:
    python -m surfcast.cache.refresh

Or scheduled via cron:
    # Daily at 03:30 local time
    30 3 * * * python -m surfcast.cache.refresh
"""

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import (
    CachedReport,
    CachedTideDay,
    FetchLogEntry,
    TideExtreme,
    TideHeight,
    Verdict,
)
from surfcast.cache.refresh import (
    RefreshDecision,
    RefreshResult,
    TideRefreshScheduler,
    get_cache_status,
    group_by_local_date,
)
from surfcast.cache.reports import (
    AIReportCache,
    ReportConditions,
    ReportState,
    conditions_hash,
    next_scheduled_expiry,
)
from surfcast.cache.tides import TideCacheStore

__all__ = [
    "AIReportCache",
    "CacheDatabase",
    "CachedReport",
    "CachedTideDay",
    "FetchLogEntry",
    "RefreshDecision",
    "RefreshResult",
    "ReportConditions",
    "ReportState",
    "TideCacheStore",
    "TideExtreme",
    "TideHeight",
    "TideRefreshScheduler",
    "Verdict",
    "conditions_hash",
    "get_cache_status",
    "group_by_local_date",
    "next_scheduled_expiry",
]
