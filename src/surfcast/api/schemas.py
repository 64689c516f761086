"""Pydantic schemas for API request/response validation."""

from datetime import date as date_type
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field


class SpotReportRequest(BaseModel):
    """Request schema for a spot report.

    Attributes:
        spot_name: Spot name as listed by GET /spots
        locale: "en" or "fr" (anything else falls back to "en")
    """

    spot_name: str = Field(
        ...,
        min_length=1,
        description="Spot name",
        alias="spotName",
    )
    locale: str = Field(
        default="en",
        description="Report language (en or fr)",
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [{"spotName": "Cloud 9", "locale": "en"}]
        },
    }


class ReportBody(BaseModel):
    """Narrative report."""

    title: str
    summary: str
    verdict: str = Field(..., description="GO, CONDITIONAL or NO-GO")


class SpotReportResponse(BaseModel):
    """Spot report with provenance.

    Attributes:
        source: "fresh", "cached" or "fallback"
        cached: True when served from the cache (including stale fallbacks)
        fallback: True when served on a degraded path
    """

    spot_name: str
    locale: str
    report: ReportBody
    source: str
    cached: bool
    fallback: bool
    updated_at: Optional[datetime] = None


class SpotInfo(BaseModel):
    """Spot catalogue entry."""

    name: str
    label: str
    type: str
    skill: str
    lat: Optional[float] = None
    lon: Optional[float] = None
    optimal_height: tuple[float, float]
    swell_window: tuple[float, float]
    orientation: float
    tidal_range: str


class ScoreBreakdownSchema(BaseModel):
    """Points per scoring factor."""

    height: float
    direction: float
    period: float
    wind: float
    tide: float
    spot_bonus: float


class ConditionsResponse(BaseModel):
    """Scored live conditions at a spot."""

    spot_name: str
    observed_at: datetime
    effective_height_m: float
    wave_period_s: float
    wave_direction_deg: float
    swell_height_m: Optional[float] = None
    swell_direction_deg: Optional[float] = None
    swell_cardinal: Optional[str] = None
    wind_kmh: Optional[float] = None
    wind_direction_deg: Optional[float] = None
    wind_cardinal: Optional[str] = None
    tide_height_m: Optional[float] = None
    tide_stage: Optional[str] = None
    score: float = Field(..., ge=0, le=100)
    rating: str
    breakdown: ScoreBreakdownSchema
    warnings: list[str] = Field(default_factory=list)


class TideHeightSchema(BaseModel):
    hour: int = Field(..., ge=0, le=23)
    height: float


class TideExtremeSchema(BaseModel):
    time: str = Field(..., description="Local time HH:MM")
    height: float
    type: str = Field(..., description="High or Low")


class TideDayResponse(BaseModel):
    """A complete cached tide day."""

    date: date_type
    current_height: Optional[float] = Field(
        default=None,
        description="Height at the current local hour (today only)",
    )
    heights: list[TideHeightSchema]
    extremes: list[TideExtremeSchema]


class TideCoverageSchema(BaseModel):
    date: date_type
    hours: int
    complete: bool


class TideStatusResponse(BaseModel):
    """Tide cache status and refresh decision."""

    today: date_type
    should_fetch: bool
    reason: str
    latest_fetch_date: Optional[date_type] = None
    tide_days: int
    complete_tide_days: int
    report_count: int
    coverage: list[TideCoverageSchema]


class TideRefreshRequest(BaseModel):
    """Manual tide refresh, optionally simulating another date."""

    date: Optional[date_type] = Field(
        default=None,
        description="Treat this date as today",
    )
    force: bool = False


class TideRefreshResponse(BaseModel):
    fetched: bool
    reason: str
    days_fetched: int
    start_date: Optional[date_type] = None
    end_date: Optional[date_type] = None
    duration_ms: int


class HealthResponse(BaseModel):
    """Health check response.

    Attributes:
        status: Service status ('healthy' or 'unhealthy')
        database: Whether the cache database answers queries
        version: API version
    """

    status: str = Field(
        default="healthy",
        description="Service status",
    )
    database: bool = Field(
        default=False,
        description="Whether the cache database is reachable",
    )
    version: str = Field(
        default="1.0.0",
        description="API version",
    )


class ErrorResponse(BaseModel):
    """Error response schema.

    Attributes:
        error: Error type/code
        message: Human-readable error message
        detail: Additional error details
    """

    error: str = Field(
        ...,
        description="Error type",
    )
    message: str = Field(
        ...,
        description="Error message",
    )
    detail: Optional[str] = Field(
        default=None,
        description="Additional details",
    )
