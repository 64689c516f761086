"""FastAPI application for surf reports.

Provides REST API endpoints for:
- Spot catalogue and scored live conditions
- AI spot reports (cached, fresh or fallback)
- Tide days, tide cache status and manual tide refresh
- Health checks

Example:
    >>> from surfcast.api import create_app
    >>> app = create_app()
    >>> # Run with: uvicorn surfcast.api.app:app --reload
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from surfcast import __version__
from surfcast.api.schemas import (
    ConditionsResponse,
    ErrorResponse,
    HealthResponse,
    ReportBody,
    ScoreBreakdownSchema,
    SpotInfo,
    SpotReportRequest,
    SpotReportResponse,
    TideCoverageSchema,
    TideDayResponse,
    TideExtremeSchema,
    TideHeightSchema,
    TideRefreshRequest,
    TideRefreshResponse,
    TideStatusResponse,
)
from surfcast.config import Settings, get_settings
from surfcast.engine import LiveConditions, ReportSource, SurfReportEngine
from surfcast.errors import PersistenceWriteFailure, SpotNotFound, UpstreamError
from surfcast.scoring.spots import SPOT_PROFILES
from surfcast.utils.angles import degrees_to_cardinal

logger = logging.getLogger(__name__)

API_VERSION = __version__


def _conditions_response(live: LiveConditions) -> ConditionsResponse:
    marine = live.marine
    return ConditionsResponse(
        spot_name=live.spot.name,
        observed_at=live.observed_at,
        effective_height_m=round(live.effective_height, 2),
        wave_period_s=marine.wave_period,
        wave_direction_deg=marine.wave_direction,
        swell_height_m=marine.swell_height,
        swell_direction_deg=marine.swell_direction,
        swell_cardinal=(
            degrees_to_cardinal(marine.swell_direction)
            if marine.swell_direction is not None else None
        ),
        wind_kmh=marine.wind_speed_kmh,
        wind_direction_deg=marine.wind_direction,
        wind_cardinal=(
            degrees_to_cardinal(marine.wind_direction)
            if marine.wind_direction is not None else None
        ),
        tide_height_m=live.tide_height,
        tide_stage=live.tide_stage.value if live.tide_stage else None,
        score=live.quality.score,
        rating=live.quality.rating,
        breakdown=ScoreBreakdownSchema(**live.quality.breakdown.to_dict()),
        warnings=live.quality.warnings,
    )


def create_app(
    engine: Optional[SurfReportEngine] = None,
    settings: Optional[Settings] = None,
) -> FastAPI:
    """Create FastAPI application.

    Args:
        engine: Engine to serve from. Built from settings on first use if omitted.
        settings: Settings (defaults to get_settings())

    Returns:
        Configured FastAPI application
    """
    settings = settings or (engine.settings if engine else get_settings())

    app = FastAPI(
        title=settings.api_title,
        description="Surf conditions, tides and AI spot reports for Siargao",
        version=API_VERSION,
        docs_url="/docs",
        redoc_url="/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    state = {"engine": engine}

    def get_engine() -> SurfReportEngine:
        if state["engine"] is None:
            state["engine"] = SurfReportEngine.from_settings(settings)
            logger.info(f"Engine initialized with cache at {settings.db_path}")
        return state["engine"]

    def now() -> datetime:
        return datetime.now(timezone.utc)

    @app.on_event("shutdown")
    async def shutdown_event():
        """Close the cache database."""
        if state["engine"] is not None:
            state["engine"].close()

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException):
        """Handle HTTP exceptions with custom response."""
        return JSONResponse(
            status_code=exc.status_code,
            content=ErrorResponse(
                error=f"HTTP_{exc.status_code}",
                message=str(exc.detail),
            ).model_dump(),
        )

    @app.exception_handler(SpotNotFound)
    async def spot_not_found_handler(request: Request, exc: SpotNotFound):
        """Unknown spots are 404s."""
        return JSONResponse(
            status_code=404,
            content=ErrorResponse(
                error="SPOT_NOT_FOUND",
                message=str(exc),
            ).model_dump(),
        )

    @app.get("/", tags=["info"])
    def root():
        """Root endpoint with API info."""
        return {
            "name": settings.api_title,
            "version": API_VERSION,
            "docs": "/docs",
        }

    @app.get("/health", response_model=HealthResponse, tags=["info"])
    def health_check():
        """Health check endpoint."""
        try:
            get_engine().db.get_stats()
            database = True
        except Exception as e:
            logger.error(f"Health check database error: {e}")
            database = False
        return HealthResponse(
            status="healthy" if database else "unhealthy",
            database=database,
            version=API_VERSION,
        )

    @app.get("/spots", response_model=list[SpotInfo], tags=["spots"])
    def list_spots():
        """List all spots with their static profile."""
        return [
            SpotInfo(
                name=spot.name,
                label=spot.label,
                type=spot.type.value,
                skill=spot.skill.value,
                lat=spot.lat,
                lon=spot.lon,
                optimal_height=spot.optimal_height,
                swell_window=spot.swell_window,
                orientation=spot.orientation,
                tidal_range=spot.tidal_range.value,
            )
            for spot in SPOT_PROFILES.values()
        ]

    @app.get(
        "/spots/{spot_name}/conditions",
        response_model=ConditionsResponse,
        responses={
            404: {"model": ErrorResponse, "description": "Unknown spot"},
            503: {"model": ErrorResponse, "description": "Marine data unavailable"},
        },
        tags=["spots"],
    )
    def spot_conditions(spot_name: str):
        """Scored live conditions at a spot."""
        live = get_engine().current_conditions(spot_name, now())
        if live is None:
            raise HTTPException(
                status_code=503,
                detail="Marine data unavailable. Please try again later.",
            )
        return _conditions_response(live)

    @app.post(
        "/spot-report",
        response_model=SpotReportResponse,
        responses={404: {"model": ErrorResponse, "description": "Unknown spot"}},
        tags=["reports"],
    )
    def spot_report(request: SpotReportRequest):
        """AI report for a spot.

        Served from cache while conditions and schedule allow, regenerated
        otherwise, and degraded to the last cached (or a default) report
        when generation fails.
        """
        result = get_engine().spot_report(request.spot_name, request.locale, now())
        return SpotReportResponse(
            spot_name=result.spot_name,
            locale=result.locale,
            report=ReportBody(**result.report.to_dict()),
            source=result.source.value,
            cached=result.source is not ReportSource.FRESH and result.updated_at is not None,
            fallback=result.source is ReportSource.FALLBACK,
            updated_at=result.updated_at,
        )

    @app.get("/tides/status", response_model=TideStatusResponse, tags=["tides"])
    def tide_status():
        """Tide cache coverage and the current refresh decision."""
        eng = get_engine()
        today = now().astimezone(settings.tz).date()
        stats = eng.db.get_stats()
        decision = eng.scheduler.decide(today)
        return TideStatusResponse(
            today=today,
            should_fetch=decision.should_fetch,
            reason=decision.reason,
            latest_fetch_date=stats["latest_fetch_date"],
            tide_days=stats["tide_days"],
            complete_tide_days=stats["complete_tide_days"],
            report_count=stats["report_count"],
            coverage=[
                TideCoverageSchema(date=day, hours=hours, complete=hours == 24)
                for day, hours in eng.db.get_tide_coverage()
            ],
        )

    @app.post(
        "/tides/refresh",
        response_model=TideRefreshResponse,
        responses={
            500: {"model": ErrorResponse, "description": "Cache write failed"},
            502: {"model": ErrorResponse, "description": "Tide provider failed"},
        },
        tags=["tides"],
    )
    def tide_refresh(request: Optional[TideRefreshRequest] = None):
        """Run the tide refresh decision now (optionally for a simulated date)."""
        request = request or TideRefreshRequest()
        today = request.date or now().astimezone(settings.tz).date()
        try:
            result = get_engine().refresh_tides(today, force=request.force)
        except UpstreamError as e:
            logger.error(f"Manual tide refresh failed: {e}")
            raise HTTPException(status_code=502, detail=f"Tide refresh failed: {e}")
        except PersistenceWriteFailure as e:
            logger.error(f"Manual tide refresh could not be stored: {e}")
            raise HTTPException(status_code=500, detail=f"Tide refresh failed: {e}")
        return TideRefreshResponse(
            fetched=result.fetched,
            reason=result.reason,
            days_fetched=result.days_fetched,
            start_date=result.start_date,
            end_date=result.end_date,
            duration_ms=result.duration_ms,
        )

    @app.get(
        "/tides/{day}",
        response_model=TideDayResponse,
        responses={404: {"model": ErrorResponse, "description": "Day not cached"}},
        tags=["tides"],
    )
    def tide_day(day: str):
        """Complete tide day ("today" or YYYY-MM-DD)."""
        eng = get_engine()
        local_now = now().astimezone(settings.tz)
        if day == "today":
            target = local_now.date()
        else:
            try:
                target = datetime.strptime(day, "%Y-%m-%d").date()
            except ValueError:
                raise HTTPException(status_code=400, detail=f"Invalid date: {day}")

        if target == local_now.date():
            cached = eng.tide_day(target)
        else:
            cached = eng.tide_store.get(target)
        if cached is None:
            raise HTTPException(status_code=404, detail=f"No complete tide data for {target}")

        return TideDayResponse(
            date=target,
            current_height=(
                cached.height_at(local_now.hour) if target == local_now.date() else None
            ),
            heights=[TideHeightSchema(hour=h.hour, height=h.height) for h in cached.heights],
            extremes=[
                TideExtremeSchema(time=e.time.strftime("%H:%M"), height=e.height, type=e.type)
                for e in cached.extremes
            ],
        )

    return app


# Default app instance for uvicorn
app = create_app()
