"""Exception taxonomy for surfcast.

Upstream failures are recovered by the engine (cached data or a degraded
report); persistence failures abort the write they occurred in.
"""

from typing import Optional


class SurfcastError(Exception):
    """Base class for all surfcast errors."""


class UpstreamError(SurfcastError):
    """A collaborator (marine, tide or language model) call failed."""

    def __init__(self, source: str, message: str):
        super().__init__(f"{source}: {message}")
        self.source = source


class UpstreamTimeout(UpstreamError):
    """A collaborator call exceeded its timeout."""


class UpstreamMalformed(UpstreamError):
    """A collaborator returned an unexpected status or response shape."""


class CacheIncomplete(SurfcastError):
    """A cached tide day has fewer than 24 hourly samples."""

    def __init__(self, day, found: int):
        super().__init__(f"Tide cache for {day} is incomplete ({found}/24 hours)")
        self.day = day
        self.found = found


class PersistenceWriteFailure(SurfcastError):
    """A cache write failed and was rolled back."""


class ReportParseError(SurfcastError):
    """Language-model output could not be turned into a report."""

    def __init__(self, message: str, attempts: Optional[list[str]] = None):
        super().__init__(message)
        self.attempts = attempts or []


class SpotNotFound(SurfcastError, KeyError):
    """No profile exists for the requested spot."""

    def __init__(self, spot_name: str):
        super().__init__(spot_name)
        self.spot_name = spot_name

    def __str__(self) -> str:
        return f"Unknown spot: {self.spot_name}"
