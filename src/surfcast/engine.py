"""Surf report engine: the request-path orchestration.

For a spot report the engine scores live conditions, checks the AI report
cache against a fingerprint of those conditions, and only calls the
language model when the cached report is missing, expired or written for
different conditions. Tide tables are refreshed lazily on the same path.

Every collaborator is injected; nothing here is a module-level singleton.
"""

import logging
from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Optional

from surfcast.cache.database import CacheDatabase
from surfcast.cache.models import CachedReport, CachedTideDay
from surfcast.cache.refresh import RefreshResult, TideRefreshScheduler
from surfcast.cache.reports import AIReportCache, ReportConditions, ReportState
from surfcast.cache.tides import TideCacheStore
from surfcast.clients.llm import ReportGenerator
from surfcast.clients.marine import MarineSnapshot, MarineWeatherClient
from surfcast.clients.tides import WorldTidesClient
from surfcast.config import Settings
from surfcast.errors import PersistenceWriteFailure, ReportParseError, UpstreamError
from surfcast.reports.parsing import ParseErr, Report, default_report, parse_report
from surfcast.reports.prompt import (
    SUPPORTED_LOCALES,
    SYSTEM_MESSAGE,
    PromptInputs,
    build_spot_report_prompt,
)
from surfcast.scoring.correction import WaveConditions, effective_wave_height
from surfcast.scoring.quality import (
    UNKNOWN,
    ScoreResult,
    SurfConditions,
    WindReading,
    score_wave_quality,
)
from surfcast.scoring.spots import SpotProfile, get_spot_profile
from surfcast.scoring.tides import TideStage, classify_tide_stage

logger = logging.getLogger(__name__)

KMH_PER_MS = 3.6


class ReportSource(Enum):
    """Where a served report came from."""

    FRESH = "fresh"
    CACHED = "cached"
    FALLBACK = "fallback"


@dataclass
class LiveConditions:
    """Scored live conditions at a spot."""

    spot: SpotProfile
    observed_at: datetime
    marine: MarineSnapshot
    effective_height: float
    quality: ScoreResult
    tide_height: Optional[float] = None
    tide_stage: Optional[TideStage] = None
    tide_day: Optional[CachedTideDay] = None

    def report_conditions(self) -> ReportConditions:
        """Numbers fingerprinted for the AI report cache."""
        return ReportConditions(
            effective_height=self.effective_height,
            tide_height=self.tide_height,
            wave_period=self.marine.wave_period,
            swell_height=self.marine.swell_height,
            swell_direction=self.marine.swell_direction,
            wind_kmh=self.marine.wind_speed_kmh,
            wind_direction=self.marine.wind_direction,
            quality_score=self.quality.score,
        )


@dataclass
class SpotReport:
    """Report served for a spot, with its provenance."""

    spot_name: str
    locale: str
    report: Report
    source: ReportSource
    updated_at: Optional[datetime] = None
    conditions: Optional[LiveConditions] = None

    @classmethod
    def from_cached(
        cls,
        cached: CachedReport,
        source: ReportSource,
        conditions: Optional[LiveConditions] = None,
    ) -> "SpotReport":
        return cls(
            spot_name=cached.spot_name,
            locale=cached.locale,
            report=Report(title=cached.title, summary=cached.summary, verdict=cached.verdict),
            source=source,
            updated_at=cached.updated_at,
            conditions=conditions,
        )


def normalize_locale(locale: Optional[str]) -> str:
    """Supported locale for a request, defaulting to English."""
    return locale if locale in SUPPORTED_LOCALES else "en"


class SurfReportEngine:
    """Score spots and serve cached or freshly generated reports.

    Example:
        >>> engine = SurfReportEngine.from_settings(get_settings())
        >>> result = engine.spot_report("Cloud 9", "en", datetime.now(timezone.utc))
        >>> result.source
        <ReportSource.CACHED: 'cached'>
    """

    def __init__(
        self,
        settings: Settings,
        db: CacheDatabase,
        marine_client: MarineWeatherClient,
        tide_client: WorldTidesClient,
        generator: ReportGenerator,
    ):
        self.settings = settings
        self.db = db
        self.marine_client = marine_client
        self.generator = generator
        self.tide_store = TideCacheStore(db)
        self.scheduler = TideRefreshScheduler(self.tide_store, tide_client, settings)
        self.report_cache = AIReportCache(db, settings)

    @classmethod
    def from_settings(cls, settings: Settings) -> "SurfReportEngine":
        """Build an engine with real upstream clients."""
        return cls(
            settings=settings,
            db=CacheDatabase(settings.db_path),
            marine_client=MarineWeatherClient(settings.marine_timeout_s, settings.timezone),
            tide_client=WorldTidesClient(settings.worldtides_api_key, settings.tide_timeout_s),
            generator=ReportGenerator(
                settings.openai_api_key,
                model=settings.openai_model,
                timeout=settings.llm_timeout_s,
                max_tokens=settings.llm_max_tokens,
            ),
        )

    def close(self) -> None:
        self.db.close()

    # -------------------------------------------------------------------------
    # Tides
    # -------------------------------------------------------------------------

    def refresh_tides(self, today: date, force: bool = False) -> RefreshResult:
        """Run the tide refresh decision, propagating upstream/write failures."""
        return self.scheduler.refresh(today, force=force)

    def tide_day(self, today: date) -> Optional[CachedTideDay]:
        """Today's complete tide day, refreshing the cache first if needed.

        Refresh failures are logged; whatever complete day is cached is
        still returned.
        """
        try:
            self.scheduler.refresh(today)
        except (UpstreamError, PersistenceWriteFailure) as e:
            logger.warning(f"Tide refresh failed for {today}: {e}")
        return self.tide_store.get(today)

    # -------------------------------------------------------------------------
    # Conditions
    # -------------------------------------------------------------------------

    def current_conditions(self, spot_name: str, now: datetime) -> Optional[LiveConditions]:
        """Fetch and score live conditions at a spot.

        Returns:
            LiveConditions, or None when marine data is unavailable

        Raises:
            SpotNotFound: If the spot has no profile
        """
        spot = get_spot_profile(spot_name)
        lat = spot.lat if spot.lat is not None else self.settings.tide_lat
        lon = spot.lon if spot.lon is not None else self.settings.tide_lon

        try:
            forecast = self.marine_client.fetch(lat, lon)
        except UpstreamError as e:
            logger.warning(f"Marine data unavailable for {spot_name}: {e}")
            return None

        local = now.astimezone(self.settings.tz)
        day = self.tide_day(local.date())
        tide_height = day.height_at(local.hour) if day else None
        tide_stage = None
        if tide_height is not None:
            tide_stage = classify_tide_stage(tide_height, day.extremes)

        current = forecast.current
        effective = effective_wave_height(
            WaveConditions(
                wave_period=current.wave_period,
                wave_direction=current.wave_direction,
                wave_height=current.wave_height,
                swell_height=current.swell_height,
                wind_wave_height=current.wind_wave_height,
                swell_period=current.swell_period,
                swell_direction=current.swell_direction,
                tide_height=tide_height,
            ),
            spot,
        )

        wind = UNKNOWN
        if current.wind_speed_kmh is not None and current.wind_direction is not None:
            wind = WindReading(
                speed_ms=current.wind_speed_kmh / KMH_PER_MS,
                direction_deg=current.wind_direction,
            )

        quality = score_wave_quality(
            SurfConditions(
                height=effective,
                period=current.wave_period,
                direction=current.wave_direction,
                wind=wind,
                tide=tide_stage if tide_stage is not None else UNKNOWN,
            ),
            spot,
        )
        logger.debug(
            f"{spot_name}: effective={effective:.2f}m score={quality.score} "
            f"({quality.rating})"
        )

        return LiveConditions(
            spot=spot,
            observed_at=now,
            marine=current,
            effective_height=effective,
            quality=quality,
            tide_height=tide_height,
            tide_stage=tide_stage,
            tide_day=day,
        )

    # -------------------------------------------------------------------------
    # Reports
    # -------------------------------------------------------------------------

    def spot_report(self, spot_name: str, locale: Optional[str], now: datetime) -> SpotReport:
        """Serve a report for a spot: cached, freshly generated, or fallback.

        Never raises for upstream or parse failures; the result's source
        says which path produced it.

        Raises:
            SpotNotFound: If the spot has no profile
        """
        locale = normalize_locale(locale)
        get_spot_profile(spot_name)

        live = self.current_conditions(spot_name, now)
        if live is None:
            return self._fallback(spot_name, locale, self.report_cache.get(spot_name, locale), None)

        current_hash = self.report_cache.fingerprint(live.report_conditions())
        state, cached = self.report_cache.evaluate(spot_name, locale, current_hash, now)
        if state is ReportState.FRESH:
            logger.info(f"Serving cached report for {spot_name}/{locale}")
            return SpotReport.from_cached(cached, ReportSource.CACHED, live)

        logger.info(f"Regenerating report for {spot_name}/{locale} ({state.value})")
        try:
            report = self._generate(live, locale)
        except (UpstreamError, ReportParseError) as e:
            logger.warning(f"Report generation failed for {spot_name}/{locale}: {e}")
            return self._fallback(spot_name, locale, cached, live)

        updated_at = now
        try:
            saved = self.report_cache.save(spot_name, locale, report, current_hash, now)
            updated_at = saved.updated_at
        except PersistenceWriteFailure as e:
            logger.error(f"Could not cache report for {spot_name}/{locale}: {e}")

        return SpotReport(
            spot_name=spot_name,
            locale=locale,
            report=report,
            source=ReportSource.FRESH,
            updated_at=updated_at,
            conditions=live,
        )

    def _generate(self, live: LiveConditions, locale: str) -> Report:
        local = live.observed_at.astimezone(self.settings.tz)
        prompt = build_spot_report_prompt(
            PromptInputs(
                spot=live.spot,
                effective_height=live.effective_height,
                wave_period=live.marine.wave_period,
                swell_height=live.marine.swell_height,
                swell_direction=live.marine.swell_direction,
                wind_kmh=live.marine.wind_speed_kmh,
                wind_direction=live.marine.wind_direction,
                tide_height=live.tide_height,
                tide_extremes=live.tide_day.extremes if live.tide_day else [],
                local_time=local.time(),
                quality=live.quality,
                locale=locale,
            )
        )
        result = parse_report(self.generator.generate(SYSTEM_MESSAGE, prompt))
        if isinstance(result, ParseErr):
            raise result.error
        return result.report

    def _fallback(
        self,
        spot_name: str,
        locale: str,
        cached: Optional[CachedReport],
        live: Optional[LiveConditions],
    ) -> SpotReport:
        if cached is not None:
            logger.warning(f"Serving stale cached report for {spot_name}/{locale}")
            return SpotReport.from_cached(cached, ReportSource.FALLBACK, live)

        logger.warning(f"No cached report for {spot_name}/{locale}, serving default")
        return SpotReport(
            spot_name=spot_name,
            locale=locale,
            report=default_report(live.quality if live else None, locale),
            source=ReportSource.FALLBACK,
            conditions=live,
        )
