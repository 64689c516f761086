"""Tests for the WorldTides client."""

import os
from datetime import date
from unittest.mock import MagicMock, patch

import pytest
import requests

from surfcast.clients.tides import WORLDTIDES_URL, WorldTidesClient
from surfcast.errors import UpstreamError, UpstreamMalformed, UpstreamTimeout

PAYLOAD = {
    "status": 200,
    "callCount": 2,
    "heights": [
        {"dt": 1736870400, "date": "2025-01-15T00:00+0800", "height": 1.02},
        {"dt": 1736874000, "date": "2025-01-15T01:00+0800", "height": 1.21},
    ],
    "extremes": [
        {"dt": 1736891100, "date": "2025-01-15T05:45+0800", "height": 0.21, "type": "Low"},
    ],
}


def response(payload):
    mock = MagicMock()
    mock.json.return_value = payload
    return mock


class TestWorldTidesClient:
    """Tests for WorldTidesClient."""

    @patch("surfcast.clients.tides.requests.get")
    def test_fetch(self, mock_get):
        mock_get.return_value = response(PAYLOAD)

        series = WorldTidesClient("key", timeout=7).fetch(9.78, 126.16, date(2025, 1, 15), days=7)

        assert list(series.heights.columns) == ["dt", "height"]
        assert list(series.heights["height"]) == [1.02, 1.21]
        assert series.extremes["type"].iloc[0] == "Low"

        args, kwargs = mock_get.call_args
        assert args[0] == WORLDTIDES_URL
        assert kwargs["timeout"] == 7
        assert kwargs["params"]["date"] == "2025-01-15"
        assert kwargs["params"]["days"] == 7
        assert kwargs["params"]["step"] == 3600
        assert kwargs["params"]["datum"] == "CD"
        assert "localtime" in kwargs["params"]

    def test_missing_key(self):
        with pytest.raises(UpstreamError):
            WorldTidesClient(None).fetch(9.78, 126.16, date(2025, 1, 15))

    @patch("surfcast.clients.tides.requests.get")
    def test_api_status_error(self, mock_get):
        mock_get.return_value = response({"status": 400, "error": "No location found"})

        with pytest.raises(UpstreamMalformed) as exc_info:
            WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))
        assert "No location found" in str(exc_info.value)

    @patch("surfcast.clients.tides.requests.get")
    def test_no_heights(self, mock_get):
        mock_get.return_value = response({"status": 200, "heights": [], "extremes": []})

        with pytest.raises(UpstreamMalformed):
            WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))

    @patch("surfcast.clients.tides.requests.get")
    def test_rows_without_timestamps_are_dropped(self, mock_get):
        payload = dict(PAYLOAD)
        payload["heights"] = PAYLOAD["heights"] + [{"dt": None, "height": 1.4}, {"height": 1.5}]
        payload["extremes"] = PAYLOAD["extremes"] + [{"dt": "soon", "height": 1.9, "type": "High"}]
        mock_get.return_value = response(payload)

        series = WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))

        assert list(series.heights["height"]) == [1.02, 1.21]
        assert len(series.extremes) == 1

    @patch("surfcast.clients.tides.requests.get")
    def test_no_usable_heights(self, mock_get):
        mock_get.return_value = response(
            {"status": 200, "heights": [{"dt": None, "height": 1.0}], "extremes": []}
        )

        with pytest.raises(UpstreamMalformed):
            WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))

    @patch("surfcast.clients.tides.requests.get")
    def test_timeout(self, mock_get):
        mock_get.side_effect = requests.Timeout("slow")

        with pytest.raises(UpstreamTimeout):
            WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))

    @patch("surfcast.clients.tides.requests.get")
    def test_connection_error(self, mock_get):
        mock_get.side_effect = requests.ConnectionError("refused")

        with pytest.raises(UpstreamError) as exc_info:
            WorldTidesClient("key").fetch(9.78, 126.16, date(2025, 1, 15))
        assert exc_info.value.source == "tides"


@pytest.mark.live
class TestWorldTidesLive:
    """Real WorldTides call (uses API credits)."""

    def test_fetch_general_luna(self):
        key = os.environ.get("SURFCAST_WORLDTIDES_API_KEY")
        if not key:
            pytest.skip("SURFCAST_WORLDTIDES_API_KEY not set")
        series = WorldTidesClient(key).fetch(9.7836, 126.1578, date.today(), days=1)
        assert len(series.heights) >= 24
