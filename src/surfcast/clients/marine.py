"""Open-Meteo marine and weather client.

Two requests per forecast: the marine API for waves and the forecast API
for wind and temperature. Wind speeds are km/h as returned by Open-Meteo.
"""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

import pandas as pd
import requests

from surfcast.errors import UpstreamError, UpstreamMalformed, UpstreamTimeout

logger = logging.getLogger(__name__)

MARINE_URL = "https://marine-api.open-meteo.com/v1/marine"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"
MARINE_MODEL = "ncep_gfswave016"
REQUEST_TIMEOUT = 10

MARINE_CURRENT = [
    "wave_height", "wave_direction", "wave_period",
    "wind_wave_height", "wind_wave_direction", "wind_wave_period",
    "swell_wave_height", "swell_wave_direction", "swell_wave_period",
]
MARINE_HOURLY = [
    "wave_height", "wave_direction", "wave_period", "wind_wave_height",
    "swell_wave_height", "swell_wave_direction", "swell_wave_period",
]
MARINE_DAILY = [
    "wave_height_max", "wave_period_max", "wind_wave_height_max", "swell_wave_height_max",
]
WEATHER_CURRENT = ["temperature_2m", "windspeed_10m", "winddirection_10m", "weathercode"]
WEATHER_HOURLY = ["windspeed_10m", "winddirection_10m"]
WEATHER_DAILY = ["temperature_2m_max", "temperature_2m_min", "windspeed_10m_max", "weathercode"]

SOURCE = "marine"


@dataclass
class MarineSnapshot:
    """Current marine and atmospheric readings at a location."""

    time: datetime
    wave_height: Optional[float]
    wave_direction: float
    wave_period: float
    wind_wave_height: Optional[float] = None
    swell_height: Optional[float] = None
    swell_direction: Optional[float] = None
    swell_period: Optional[float] = None
    wind_speed_kmh: Optional[float] = None
    wind_direction: Optional[float] = None
    temperature_c: Optional[float] = None
    weather_code: Optional[int] = None


@dataclass
class MarineForecast:
    """Current snapshot plus hourly and daily forecast tables."""

    lat: float
    lon: float
    current: MarineSnapshot
    hourly: pd.DataFrame
    daily: pd.DataFrame


class MarineWeatherClient:
    """Fetch wave and wind forecasts from Open-Meteo.

    Example:
        >>> client = MarineWeatherClient(timeout=10)
        >>> forecast = client.fetch(9.8133, 126.1668)
        >>> forecast.current.swell_height
        1.6
    """

    def __init__(self, timeout: float = REQUEST_TIMEOUT, timezone: str = "Asia/Manila"):
        self.timeout = timeout
        self.timezone = timezone

    def _get_json(self, url: str, params: dict) -> dict:
        try:
            response = requests.get(url, params=params, timeout=self.timeout)
            response.raise_for_status()
            return response.json()
        except requests.Timeout as e:
            raise UpstreamTimeout(SOURCE, f"{url} timed out after {self.timeout}s") from e
        except ValueError as e:
            raise UpstreamMalformed(SOURCE, f"{url} returned invalid JSON") from e
        except requests.RequestException as e:
            raise UpstreamError(SOURCE, f"{url} failed: {e}") from e

    def fetch(self, lat: float, lon: float) -> MarineForecast:
        """Fetch current, hourly and daily conditions for a location.

        Raises:
            UpstreamTimeout: If either request exceeds the timeout
            UpstreamMalformed: If a response lacks the expected fields
            UpstreamError: On any other transport or HTTP error
        """
        common = {"latitude": lat, "longitude": lon, "timezone": self.timezone}
        waves = self._get_json(MARINE_URL, {
            **common,
            "current": ",".join(MARINE_CURRENT),
            "hourly": ",".join(MARINE_HOURLY),
            "daily": ",".join(MARINE_DAILY),
            "models": MARINE_MODEL,
        })
        weather = self._get_json(FORECAST_URL, {
            **common,
            "current": ",".join(WEATHER_CURRENT),
            "hourly": ",".join(WEATHER_HOURLY),
            "daily": ",".join(WEATHER_DAILY),
        })

        try:
            current = self._parse_current(waves["current"], weather["current"])
            hourly = self._merge_tables(waves["hourly"], weather["hourly"])
            daily = self._merge_tables(waves["daily"], weather["daily"])
        except (KeyError, TypeError, ValueError) as e:
            raise UpstreamMalformed(SOURCE, f"unexpected response shape: {e}") from e

        logger.debug(
            f"Marine forecast for ({lat}, {lon}): swell={current.swell_height}m "
            f"@ {current.swell_period}s, wind={current.wind_speed_kmh}km/h"
        )
        return MarineForecast(lat=lat, lon=lon, current=current, hourly=hourly, daily=daily)

    @staticmethod
    def _parse_current(waves: dict, weather: dict) -> MarineSnapshot:
        if waves.get("wave_period") is None or waves.get("wave_direction") is None:
            raise ValueError("current wave period/direction missing")

        code = weather.get("weathercode")
        return MarineSnapshot(
            time=pd.Timestamp(waves["time"]).to_pydatetime(),
            wave_height=waves.get("wave_height"),
            wave_direction=float(waves["wave_direction"]),
            wave_period=float(waves["wave_period"]),
            wind_wave_height=waves.get("wind_wave_height"),
            swell_height=waves.get("swell_wave_height"),
            swell_direction=waves.get("swell_wave_direction"),
            swell_period=waves.get("swell_wave_period"),
            wind_speed_kmh=weather.get("windspeed_10m"),
            wind_direction=weather.get("winddirection_10m"),
            temperature_c=weather.get("temperature_2m"),
            weather_code=int(code) if code is not None else None,
        )

    @staticmethod
    def _merge_tables(waves: dict, weather: dict) -> pd.DataFrame:
        """Join marine and weather series on their shared time column."""
        wave_df = pd.DataFrame(waves)
        weather_df = pd.DataFrame(weather)
        wave_df["time"] = pd.to_datetime(wave_df["time"])
        weather_df["time"] = pd.to_datetime(weather_df["time"])
        return wave_df.merge(weather_df, on="time", how="left")
