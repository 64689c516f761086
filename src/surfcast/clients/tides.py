"""WorldTides v3 client.

Returns hourly heights and high/low extremes with Unix timestamps (UTC),
starting at local midnight of the station on the requested date,
relative to chart datum.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Optional

import pandas as pd
import requests

from surfcast.errors import UpstreamError, UpstreamMalformed, UpstreamTimeout

logger = logging.getLogger(__name__)

WORLDTIDES_URL = "https://www.worldtides.info/api/v3"
REQUEST_TIMEOUT = 15
HOURLY_STEP_S = 3600
DATUM = "CD"

SOURCE = "tides"


def drop_unusable_rows(frame: pd.DataFrame, numeric: list[str]) -> pd.DataFrame:
    """Coerce numeric columns and drop rows where any of them is missing.

    Raises:
        KeyError: If a numeric column is absent
    """
    frame = frame.copy()
    for column in numeric:
        frame[column] = pd.to_numeric(frame[column], errors="coerce")
    return frame.dropna(subset=numeric).reset_index(drop=True)


@dataclass
class TideSeries:
    """Raw tide series as returned upstream.

    Attributes:
        heights: DataFrame with columns dt (Unix seconds) and height (m)
        extremes: DataFrame with columns dt, height and type ("High"/"Low")
    """

    heights: pd.DataFrame
    extremes: pd.DataFrame


class WorldTidesClient:
    """Fetch multi-day tide predictions from WorldTides.

    Example:
        >>> client = WorldTidesClient(api_key="...", timeout=15)
        >>> series = client.fetch(9.7836, 126.1578, date(2025, 1, 15), days=7)
        >>> len(series.heights)
        168
    """

    def __init__(self, api_key: Optional[str], timeout: float = REQUEST_TIMEOUT):
        self.api_key = api_key
        self.timeout = timeout

    def fetch(self, lat: float, lon: float, start: date, days: int = 7) -> TideSeries:
        """Fetch hourly heights and extremes starting at a date.

        Raises:
            UpstreamTimeout: If the request exceeds the timeout
            UpstreamMalformed: On a non-200 API status or unexpected shape
            UpstreamError: Missing API key or any other transport error
        """
        if not self.api_key:
            raise UpstreamError(SOURCE, "no WorldTides API key configured")

        params = {
            "lat": lat,
            "lon": lon,
            "date": start.isoformat(),
            "days": days,
            "step": HOURLY_STEP_S,
            "datum": DATUM,
            "localtime": "",
            "timezone": "",
            "heights": "",
            "extremes": "",
            "key": self.api_key,
        }

        logger.info(f"Fetching {days} days of tides from {start} for ({lat}, {lon})")
        try:
            response = requests.get(WORLDTIDES_URL, params=params, timeout=self.timeout)
            response.raise_for_status()
            data = response.json()
        except requests.Timeout as e:
            raise UpstreamTimeout(SOURCE, f"WorldTides timed out after {self.timeout}s") from e
        except ValueError as e:
            raise UpstreamMalformed(SOURCE, "WorldTides returned invalid JSON") from e
        except requests.RequestException as e:
            raise UpstreamError(SOURCE, f"WorldTides request failed: {e}") from e

        if data.get("status") != 200:
            raise UpstreamMalformed(
                SOURCE, f"WorldTides status {data.get('status')}: {data.get('error', '')}"
            )

        try:
            heights = pd.DataFrame(data.get("heights") or [], columns=["dt", "height"])
            extremes = pd.DataFrame(
                data.get("extremes") or [], columns=["dt", "height", "type"]
            )
            heights = drop_unusable_rows(heights, ["dt", "height"])
            extremes = drop_unusable_rows(extremes, ["dt", "height"]).dropna(subset=["type"])
        except (TypeError, ValueError) as e:
            raise UpstreamMalformed(SOURCE, f"unexpected response shape: {e}") from e

        if heights.empty:
            raise UpstreamMalformed(SOURCE, "WorldTides returned no usable heights")

        logger.info(
            f"WorldTides returned {len(heights)} heights, {len(extremes)} extremes "
            f"(callCount={data.get('callCount')})"
        )
        return TideSeries(heights=heights, extremes=extremes)
