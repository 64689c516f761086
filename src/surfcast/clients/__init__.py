"""Upstream collaborators: marine weather, tides and the language model.

Every client carries an explicit timeout and raises surfcast.errors
UpstreamError subclasses on failure.
"""

from surfcast.clients.llm import ReportGenerator
from surfcast.clients.marine import MarineForecast, MarineSnapshot, MarineWeatherClient
from surfcast.clients.tides import TideSeries, WorldTidesClient

__all__ = [
    "MarineForecast",
    "MarineSnapshot",
    "MarineWeatherClient",
    "ReportGenerator",
    "TideSeries",
    "WorldTidesClient",
]
