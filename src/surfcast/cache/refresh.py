"""Tide cache refresh scheduling.

Tide data is fetched in bulk (7 days per upstream call) and only when the
cache cannot serve today plus a short lookahead, or the last bulk fetch is
too old. Each successful bulk fetch is logged once per local day.

Usage:
    python -m surfcast.cache.refresh                      # Refresh if needed
    python -m surfcast.cache.refresh --force              # Always refetch
    python -m surfcast.cache.refresh --date 2025-01-15    # Simulate "today"
    python -m surfcast.cache.refresh --sweep              # Drop old tide days
    python -m surfcast.cache.refresh --status             # Show cache status
"""

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from pathlib import Path
from typing import Optional
from zoneinfo import ZoneInfo

import pandas as pd

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import FetchLogEntry, TideExtreme, TideHeight
from surfcast.cache.tides import TideCacheStore
from surfcast.clients.tides import TideSeries, WorldTidesClient, drop_unusable_rows
from surfcast.config import Settings, get_settings
from surfcast.errors import PersistenceWriteFailure, UpstreamMalformed

logger = logging.getLogger(__name__)


@dataclass
class RefreshDecision:
    """Whether a bulk fetch is needed, and for which date range."""

    should_fetch: bool
    start_date: Optional[date]
    end_date: Optional[date]
    reason: str


@dataclass
class RefreshResult:
    """Result of a refresh operation."""

    fetched: bool
    reason: str
    days_fetched: int
    duration_ms: int
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    def __str__(self) -> str:
        if not self.fetched:
            return f"Tide refresh skipped: {self.reason}"
        return (
            f"Tide refresh complete: {self.days_fetched} days "
            f"({self.start_date} to {self.end_date}) - {self.reason} "
            f"({self.duration_ms}ms)"
        )


def group_by_local_date(
    series: TideSeries,
    tz: ZoneInfo,
) -> dict[date, tuple[list[TideHeight], list[TideExtreme]]]:
    """Split an upstream tide series into per-day samples and extremes.

    Timestamps are converted to the local timezone before grouping, so a
    "day" is a local calendar day. Rows without a usable timestamp or
    height are skipped.

    Raises:
        KeyError: If a frame lacks the dt or height column
    """
    days: dict[date, tuple[list[TideHeight], list[TideExtreme]]] = {}

    heights = drop_unusable_rows(series.heights, ["dt", "height"])
    if not heights.empty:
        local = pd.to_datetime(heights["dt"], unit="s", utc=True).dt.tz_convert(tz)
        heights["day"] = local.dt.date
        heights["hour"] = local.dt.hour
        heights = heights.drop_duplicates(subset=["day", "hour"], keep="last")
        for row in heights.itertuples(index=False):
            days.setdefault(row.day, ([], []))[0].append(
                TideHeight(date=row.day, hour=int(row.hour), height=float(row.height))
            )

    extremes = drop_unusable_rows(series.extremes, ["dt", "height"]).dropna(subset=["type"])
    if not extremes.empty:
        local = pd.to_datetime(extremes["dt"], unit="s", utc=True).dt.tz_convert(tz)
        extremes["day"] = local.dt.date
        extremes["time"] = local.dt.floor("min").dt.time
        for row in extremes.itertuples(index=False):
            days.setdefault(row.day, ([], []))[1].append(
                TideExtreme(
                    date=row.day,
                    time=row.time,
                    height=float(row.height),
                    type=str(row.type).capitalize(),
                )
            )

    return days


class TideRefreshScheduler:
    """Decide when to bulk-fetch tides and apply the fetched range.

    Example:
        >>> scheduler = TideRefreshScheduler(store, client, settings)
        >>> scheduler.decide(date(2025, 1, 15))
        RefreshDecision(should_fetch=False, ..., reason='cache is sufficient')
    """

    def __init__(
        self,
        store: TideCacheStore,
        client: WorldTidesClient,
        settings: Settings,
    ):
        self.store = store
        self.client = client
        self.settings = settings

    @property
    def db(self) -> CacheDatabase:
        return self.store.db

    def _fetch_range(self, today: date, reason: str) -> RefreshDecision:
        end = today + timedelta(days=self.settings.tide_fetch_days - 1)
        return RefreshDecision(True, today, end, reason)

    def decide(self, today: date) -> RefreshDecision:
        """Decide whether tides must be refetched as of a local date."""
        if not self.store.is_complete(today):
            return self._fetch_range(today, "no data for today")

        last = self.db.get_latest_fetch()
        if last is None:
            return self._fetch_range(today, "no previous fetch")

        elapsed = (today - last.fetch_date).days
        if elapsed >= self.settings.tide_refetch_after_days:
            return self._fetch_range(
                today,
                f"{elapsed} days since last fetch "
                f"(>= {self.settings.tide_refetch_after_days})",
            )

        lookahead = today + timedelta(days=self.settings.tide_lookahead_days)
        if not self.store.is_complete(lookahead):
            return self._fetch_range(today, f"missing future data for {lookahead}")

        return RefreshDecision(False, None, None, "cache is sufficient")

    def refresh(self, today: date, force: bool = False) -> RefreshResult:
        """Run the refresh decision and bulk-fetch when needed.

        Raises:
            UpstreamError: If the tide API call fails
            PersistenceWriteFailure: If storing the range fails (nothing logged)
        """
        decision = self.decide(today)
        if force and not decision.should_fetch:
            decision = self._fetch_range(today, "forced refresh")

        if not decision.should_fetch:
            logger.debug(f"Tide refresh not needed for {today}: {decision.reason}")
            return RefreshResult(fetched=False, reason=decision.reason, days_fetched=0, duration_ms=0)

        return self.bulk_fetch(today, decision)

    def bulk_fetch(self, today: date, decision: RefreshDecision) -> RefreshResult:
        """Fetch the decision's range and store it atomically with its log entry."""
        logger.info(
            f"Bulk tide fetch {decision.start_date} to {decision.end_date}: "
            f"{decision.reason}"
        )
        start_time = time.time()

        days = (decision.end_date - decision.start_date).days + 1
        series = self.client.fetch(
            self.settings.tide_lat,
            self.settings.tide_lon,
            decision.start_date,
            days=days,
        )
        try:
            grouped = group_by_local_date(series, self.settings.tz)
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamMalformed("tides", f"unusable tide series: {e}") from e
        in_range = {
            day: data
            for day, data in sorted(grouped.items())
            if decision.start_date <= day <= decision.end_date
        }
        if not in_range:
            raise UpstreamMalformed("tides", "no tide samples inside the requested range")

        try:
            with self.db.transaction():
                for day, (heights, extremes) in in_range.items():
                    self.store.put(day, heights, extremes)
                self.db.log_tide_fetch(
                    FetchLogEntry(
                        fetch_date=today,
                        start_date=decision.start_date,
                        end_date=decision.end_date,
                        days_fetched=len(in_range),
                    )
                )
        except PersistenceWriteFailure as e:
            logger.error(f"Tide range write aborted, no fetch logged: {e}")
            raise

        duration_ms = int((time.time() - start_time) * 1000)
        result = RefreshResult(
            fetched=True,
            reason=decision.reason,
            days_fetched=len(in_range),
            duration_ms=duration_ms,
            start_date=decision.start_date,
            end_date=decision.end_date,
        )
        logger.info(str(result))
        return result


def local_today(settings: Settings) -> date:
    """Current calendar date in the service timezone."""
    return datetime.now(settings.tz).date()


def get_cache_status(settings: Settings, today: Optional[date] = None) -> dict:
    """Get current tide/report cache status.

    Returns:
        Dict with cache statistics, the refresh decision and per-day coverage
    """
    today = today or local_today(settings)
    db = CacheDatabase(settings.db_path)

    try:
        stats = db.get_stats()
        store = TideCacheStore(db)
        client = WorldTidesClient(settings.worldtides_api_key, settings.tide_timeout_s)
        decision = TideRefreshScheduler(store, client, settings).decide(today)
        latest = db.get_latest_fetch()

        return {
            **stats,
            "today": today,
            "should_fetch": decision.should_fetch,
            "reason": decision.reason,
            "latest_fetch": latest,
            "coverage": [
                {"date": day, "hours": hours, "complete": hours == 24}
                for day, hours in db.get_tide_coverage()
            ],
        }

    finally:
        db.close()


def print_status(status: dict) -> None:
    """Print cache status in human-readable format."""
    print()
    print("=" * 60)
    print("Surfcast Cache Status")
    print("=" * 60)
    print(f"Database: {status['db_path']}")
    print(f"Today: {status['today']}")
    print()
    print(f"Tide days cached: {status['complete_tide_days']}/{status['tide_days']} complete")
    print(f"Tide extremes: {status['extreme_count']}")
    print(f"AI reports: {status['report_count']}")

    latest = status["latest_fetch"]
    if latest:
        print(
            f"Last bulk fetch: {latest.fetch_date} "
            f"({latest.start_date} to {latest.end_date}, {latest.days_fetched} days)"
        )
    print(f"Refresh needed: {'yes' if status['should_fetch'] else 'no'} ({status['reason']})")

    print()
    print("Tide Coverage:")
    print("-" * 60)

    for day in status["coverage"]:
        state = "OK" if day["complete"] else "PARTIAL"
        print(f"  {day['date']}  {day['hours']:>2}/24  {state}")

    print("=" * 60)


def main():
    """CLI entry point for tide cache refresh."""
    parser = argparse.ArgumentParser(
        description="Refresh the surfcast tide cache",
        epilog="""
Examples:
  python -m surfcast.cache.refresh                    # Refresh if needed
  python -m surfcast.cache.refresh --status           # Show status
  python -m surfcast.cache.refresh --date 2025-01-15  # Simulate a date

Cron setup (check daily at 03:30 local, before the 04:00 report checkpoint):
  30 3 * * * cd /path/to/surfcast && python -m surfcast.cache.refresh >> /var/log/surfcast-refresh.log 2>&1
        """,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "--force",
        action="store_true",
        help="Refetch even if the cache is sufficient",
    )
    parser.add_argument(
        "--status",
        action="store_true",
        help="Show current cache status",
    )
    parser.add_argument(
        "--date",
        type=date.fromisoformat,
        default=None,
        help="Treat this date (YYYY-MM-DD) as today",
    )
    parser.add_argument(
        "--sweep",
        action="store_true",
        help="Delete tide days older than the retention window",
    )
    parser.add_argument(
        "--db",
        type=Path,
        default=None,
        help="Database path (default: SURFCAST_DB_PATH or data/cache/surfcast.duckdb)",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Enable verbose logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Suppress output except errors",
    )

    args = parser.parse_args()

    if args.quiet:
        level = logging.ERROR
    elif args.verbose:
        level = logging.DEBUG
    else:
        level = logging.INFO

    logging.basicConfig(
        level=level,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    settings = get_settings()
    if args.db:
        settings = settings.model_copy(update={"db_path": args.db})
    today = args.date or local_today(settings)

    if args.status:
        print_status(get_cache_status(settings, today))
        return 0

    db = CacheDatabase(settings.db_path)

    try:
        store = TideCacheStore(db)
        client = WorldTidesClient(settings.worldtides_api_key, settings.tide_timeout_s)
        scheduler = TideRefreshScheduler(store, client, settings)

        result = scheduler.refresh(today, force=args.force)
        print(result)

        if args.sweep:
            store.retention_sweep(today, settings.tide_retention_days)

        return 0

    except Exception as e:
        logger.error(f"Refresh failed: {e}")
        return 1

    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
