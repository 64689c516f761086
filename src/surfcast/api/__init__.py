"""Surf report API for surfcast.

This module provides:

- create_app: Factory function to create FastAPI application
- SpotReportRequest: Request schema for AI spot reports
- SpotReportResponse: Response schema with report and provenance
- ConditionsResponse, TideDayResponse: scored conditions and tide days

Note: create_app is lazy-loaded to allow importing schemas without
FastAPI installed.
"""

# Schemas can be imported directly (only depend on pydantic)
from surfcast.api.schemas import (
    ConditionsResponse,
    ErrorResponse,
    HealthResponse,
    ReportBody,
    SpotInfo,
    SpotReportRequest,
    SpotReportResponse,
    TideDayResponse,
    TideRefreshRequest,
    TideRefreshResponse,
    TideStatusResponse,
)


# Lazy imports for FastAPI-dependent components
def __getattr__(name):
    """Lazy load FastAPI-dependent components."""
    if name == "create_app":
        from surfcast.api.app import create_app
        return create_app
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "create_app",
    "ConditionsResponse",
    "ErrorResponse",
    "HealthResponse",
    "ReportBody",
    "SpotInfo",
    "SpotReportRequest",
    "SpotReportResponse",
    "TideDayResponse",
    "TideRefreshRequest",
    "TideRefreshResponse",
    "TideStatusResponse",
]
