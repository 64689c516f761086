"""DuckDB cache database for surfcast."""

import logging
import threading
import time
from contextlib import contextmanager
from datetime import date, datetime, timezone
from pathlib import Path
from typing import Iterator, Optional, Sequence

import duckdb

from surfcast.cache.models import (
    CachedReport,
    FetchLogEntry,
    TideExtreme,
    TideHeight,
    Verdict,
)
from surfcast.config import DEFAULT_DB_PATH
from surfcast.errors import PersistenceWriteFailure

logger = logging.getLogger(__name__)

# Natural keys: tide_heights (tide_date, hour), tide_fetch_log (fetch_date),
# ai_reports (spot_name, locale). Extremes for a date are replaced wholesale,
# so (tide_date, event_time, event_type) is indexed but not constrained.
SCHEMA_SQL = """
CREATE TABLE IF NOT EXISTS tide_heights (
    tide_date DATE NOT NULL,
    hour INTEGER NOT NULL,
    height DOUBLE NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    PRIMARY KEY (tide_date, hour)
);

CREATE TABLE IF NOT EXISTS tide_extremes (
    tide_date DATE NOT NULL,
    event_time TIME NOT NULL,
    height DOUBLE NOT NULL,
    event_type VARCHAR NOT NULL,
    updated_at TIMESTAMP NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_tide_extremes_key
    ON tide_extremes(tide_date, event_time, event_type);

CREATE TABLE IF NOT EXISTS tide_fetch_log (
    fetch_date DATE PRIMARY KEY,
    start_date DATE NOT NULL,
    end_date DATE NOT NULL,
    days_fetched INTEGER NOT NULL,
    fetched_at TIMESTAMP NOT NULL
);

CREATE TABLE IF NOT EXISTS ai_reports (
    spot_name VARCHAR NOT NULL,
    locale VARCHAR NOT NULL,
    title VARCHAR NOT NULL,
    summary VARCHAR NOT NULL,
    verdict VARCHAR NOT NULL,
    conditions_hash VARCHAR NOT NULL,
    updated_at TIMESTAMP NOT NULL,
    expires_at TIMESTAMP NOT NULL,
    PRIMARY KEY (spot_name, locale)
);
"""


def _to_db(value: datetime) -> datetime:
    """Aware datetime -> naive UTC for TIMESTAMP columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def _from_db(value: datetime) -> datetime:
    """Naive UTC TIMESTAMP value -> aware UTC datetime."""
    return value.replace(tzinfo=timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CacheDatabase:
    """DuckDB cache database manager.

    Stores tide tables, the tide fetch log and AI reports. Every write is an
    upsert keyed by the table's natural key, so concurrent writers converge.

    Example:
        >>> db = CacheDatabase(Path("/tmp/surfcast.duckdb"))
        >>> db.get_tide_heights(date(2025, 1, 15))
        [TideHeight(...), ...]
    """

    def __init__(self, db_path: Optional[Path] = None):
        """Initialize database connection.

        Args:
            db_path: Path to DuckDB file. Creates if doesn't exist.
        """
        self.db_path = Path(db_path or DEFAULT_DB_PATH)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

        self._conn = None
        self._lock = threading.Lock()
        self._local = threading.local()
        self._init_schema()

    @property
    def conn(self) -> duckdb.DuckDBPyConnection:
        """Get this thread's cursor on the shared connection.

        The connection is created lazily with retry. DuckDB connections are
        not safe to share between threads, so each thread gets its own
        cursor (and its own transaction state).
        """
        with self._lock:
            if self._conn is None:
                self._conn = self._connect_with_retry()
            base = self._conn

        if getattr(self._local, "owner", None) is not base:
            self._local.cursor = base.cursor()
            self._local.owner = base
            self._local.in_transaction = False
        return self._local.cursor

    def _connect_with_retry(self, max_retries: int = 3) -> duckdb.DuckDBPyConnection:
        """Connect to database with retry logic for lock handling."""
        last_error = None
        for attempt in range(max_retries):
            try:
                return duckdb.connect(str(self.db_path))
            except duckdb.IOException as e:
                last_error = e
                if "lock" in str(e).lower() and attempt < max_retries - 1:
                    wait_time = 0.5 * (2 ** attempt)
                    logger.warning(f"Database locked, retrying in {wait_time}s...")
                    time.sleep(wait_time)
                else:
                    raise
        raise last_error

    def _init_schema(self) -> None:
        """Initialize database schema."""
        for statement in SCHEMA_SQL.split(";"):
            statement = statement.strip()
            if statement:
                self.conn.execute(statement)
        logger.info(f"Cache database initialized at {self.db_path}")

    def close(self) -> None:
        """Close database connection (and every thread's cursor)."""
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None

    @contextmanager
    def transaction(self) -> Iterator["CacheDatabase"]:
        """Run a block of writes atomically.

        Any failure rolls back every write in the block. DuckDB errors are
        re-raised as PersistenceWriteFailure. Nested blocks join the
        outer transaction.
        """
        conn = self.conn
        if self._local.in_transaction:
            yield self
            return

        conn.execute("BEGIN TRANSACTION")
        self._local.in_transaction = True
        try:
            yield self
        except duckdb.Error as e:
            self._rollback()
            raise PersistenceWriteFailure(f"Transaction rolled back: {e}") from e
        except BaseException:
            self._rollback()
            raise
        else:
            try:
                conn.execute("COMMIT")
            except duckdb.Error as e:
                self._rollback()
                raise PersistenceWriteFailure(f"Commit failed: {e}") from e
        finally:
            self._local.in_transaction = False

    def _rollback(self) -> None:
        try:
            self.conn.execute("ROLLBACK")
        except duckdb.Error as e:
            logger.error(f"Rollback failed: {e}")

    def _write(self, sql: str, params: list) -> None:
        try:
            self.conn.execute(sql, params)
        except duckdb.Error as e:
            raise PersistenceWriteFailure(str(e)) from e

    def _write_many(self, sql: str, rows: list[list]) -> None:
        if not rows:
            return
        try:
            self.conn.executemany(sql, rows)
        except duckdb.Error as e:
            raise PersistenceWriteFailure(str(e)) from e

    # -------------------------------------------------------------------------
    # Tide Operations
    # -------------------------------------------------------------------------

    def get_tide_heights(self, day: date) -> list[TideHeight]:
        """Get hourly tide samples for a date, ordered by hour."""
        rows = self.conn.execute(
            """
            SELECT tide_date, hour, height
            FROM tide_heights
            WHERE tide_date = ?
            ORDER BY hour
            """,
            [day],
        ).fetchall()

        return [TideHeight(date=row[0], hour=row[1], height=row[2]) for row in rows]

    def count_tide_hours(self, day: date) -> int:
        """Number of distinct hours stored for a date."""
        result = self.conn.execute(
            "SELECT COUNT(DISTINCT hour) FROM tide_heights WHERE tide_date = ?",
            [day],
        ).fetchone()
        return result[0] if result else 0

    def get_tide_extremes(self, day: date) -> list[TideExtreme]:
        """Get high/low events for a date, ordered by time."""
        rows = self.conn.execute(
            """
            SELECT tide_date, event_time, height, event_type
            FROM tide_extremes
            WHERE tide_date = ?
            ORDER BY event_time
            """,
            [day],
        ).fetchall()

        return [
            TideExtreme(date=row[0], time=row[1], height=row[2], type=row[3])
            for row in rows
        ]

    def upsert_tide_heights(self, day: date, samples: Sequence[TideHeight]) -> None:
        """Store hourly samples, replacing any prior value for the same hour."""
        now = _utcnow()
        self._write_many(
            """
            INSERT INTO tide_heights (tide_date, hour, height, updated_at)
            VALUES (?, ?, ?, ?)
            ON CONFLICT (tide_date, hour)
            DO UPDATE SET
                height = EXCLUDED.height,
                updated_at = EXCLUDED.updated_at
            """,
            [[day, s.hour, s.height, now] for s in samples],
        )

    def replace_tide_extremes(self, day: date, extremes: Sequence[TideExtreme]) -> None:
        """Replace all high/low events for a date."""
        now = _utcnow()
        self._write("DELETE FROM tide_extremes WHERE tide_date = ?", [day])
        self._write_many(
            """
            INSERT INTO tide_extremes (tide_date, event_time, height, event_type, updated_at)
            VALUES (?, ?, ?, ?, ?)
            """,
            [[day, e.time, e.height, e.type, now] for e in extremes],
        )

    def delete_tides_before(self, cutoff: date) -> int:
        """Remove tide samples and extremes for dates before cutoff.

        Returns:
            Number of hourly rows deleted
        """
        with self.transaction():
            result = self.conn.execute(
                "DELETE FROM tide_heights WHERE tide_date < ?", [cutoff]
            )
            deleted = result.fetchone()[0] if result else 0
            self.conn.execute("DELETE FROM tide_extremes WHERE tide_date < ?", [cutoff])
        logger.info(f"Cleaned up {deleted} old tide records (before {cutoff})")
        return deleted

    def get_tide_coverage(self) -> list[tuple[date, int]]:
        """(date, distinct hour count) for every cached tide date."""
        return self.conn.execute(
            """
            SELECT tide_date, COUNT(DISTINCT hour)
            FROM tide_heights
            GROUP BY tide_date
            ORDER BY tide_date
            """
        ).fetchall()

    # -------------------------------------------------------------------------
    # Fetch Log Operations
    # -------------------------------------------------------------------------

    def log_tide_fetch(self, entry: FetchLogEntry) -> None:
        """Record a successful bulk fetch (one row per fetch date)."""
        self._write(
            """
            INSERT INTO tide_fetch_log
            (fetch_date, start_date, end_date, days_fetched, fetched_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT (fetch_date)
            DO UPDATE SET
                start_date = EXCLUDED.start_date,
                end_date = EXCLUDED.end_date,
                days_fetched = EXCLUDED.days_fetched,
                fetched_at = EXCLUDED.fetched_at
            """,
            [
                entry.fetch_date,
                entry.start_date,
                entry.end_date,
                entry.days_fetched,
                _to_db(entry.fetched_at) if entry.fetched_at else _utcnow(),
            ],
        )

    def get_latest_fetch(self) -> Optional[FetchLogEntry]:
        """Most recent successful bulk fetch, if any."""
        row = self.conn.execute(
            """
            SELECT fetch_date, start_date, end_date, days_fetched, fetched_at
            FROM tide_fetch_log
            ORDER BY fetch_date DESC
            LIMIT 1
            """
        ).fetchone()

        if row is None:
            return None

        return FetchLogEntry(
            fetch_date=row[0],
            start_date=row[1],
            end_date=row[2],
            days_fetched=row[3],
            fetched_at=_from_db(row[4]),
        )

    # -------------------------------------------------------------------------
    # AI Report Operations
    # -------------------------------------------------------------------------

    def get_report(self, spot_name: str, locale: str) -> Optional[CachedReport]:
        """Get the cached report for a spot and locale."""
        row = self.conn.execute(
            """
            SELECT spot_name, locale, title, summary, verdict,
                   conditions_hash, updated_at, expires_at
            FROM ai_reports
            WHERE spot_name = ? AND locale = ?
            """,
            [spot_name, locale],
        ).fetchone()

        if row is None:
            return None

        return CachedReport(
            spot_name=row[0],
            locale=row[1],
            title=row[2],
            summary=row[3],
            verdict=Verdict(row[4]),
            conditions_hash=row[5],
            updated_at=_from_db(row[6]),
            expires_at=_from_db(row[7]),
        )

    def upsert_report(self, report: CachedReport) -> None:
        """Store a report, replacing any prior report for the spot and locale."""
        self._write(
            """
            INSERT INTO ai_reports
            (spot_name, locale, title, summary, verdict,
             conditions_hash, updated_at, expires_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?)
            ON CONFLICT (spot_name, locale)
            DO UPDATE SET
                title = EXCLUDED.title,
                summary = EXCLUDED.summary,
                verdict = EXCLUDED.verdict,
                conditions_hash = EXCLUDED.conditions_hash,
                updated_at = EXCLUDED.updated_at,
                expires_at = EXCLUDED.expires_at
            """,
            [
                report.spot_name,
                report.locale,
                report.title,
                report.summary,
                report.verdict.value,
                report.conditions_hash,
                _to_db(report.updated_at),
                _to_db(report.expires_at),
            ],
        )

    # -------------------------------------------------------------------------
    # Statistics
    # -------------------------------------------------------------------------

    def get_stats(self) -> dict:
        """Get cache statistics."""
        coverage = self.get_tide_coverage()
        extreme_count = self.conn.execute(
            "SELECT COUNT(*) FROM tide_extremes"
        ).fetchone()[0]
        report_count = self.conn.execute(
            "SELECT COUNT(*) FROM ai_reports"
        ).fetchone()[0]

        latest = self.get_latest_fetch()

        return {
            "tide_days": len(coverage),
            "complete_tide_days": sum(1 for _, hours in coverage if hours == 24),
            "extreme_count": extreme_count,
            "report_count": report_count,
            "latest_fetch_date": latest.fetch_date if latest else None,
            "db_path": str(self.db_path),
        }
