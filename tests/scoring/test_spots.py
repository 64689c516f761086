"""Tests for static spot profiles."""

import dataclasses

import pytest

from surfcast.errors import SpotNotFound
from surfcast.scoring.spots import (
    DEFAULT_SPOT_PROFILE,
    SPOT_PROFILES,
    SkillLevel,
    SpotType,
    TidalRange,
    get_spot_profile,
    list_spot_names,
)


class TestSpotCatalogue:
    """Tests for the spot catalogue."""

    def test_known_spots_present(self):
        names = list_spot_names()
        assert "Cloud 9" in names
        assert "Jacking Horse" in names
        assert len(names) == len(SPOT_PROFILES)

    def test_cloud9_profile(self):
        spot = get_spot_profile("Cloud 9")
        assert spot.optimal_height == (1.2, 3.5)
        assert spot.swell_window == (30, 110)
        assert spot.orientation == 70
        assert spot.tidal_range == TidalRange.HIGH
        assert spot.type == SpotType.REEF
        assert spot.skill == SkillLevel.EXPERT

    def test_every_profile_is_consistent(self):
        """Optimal ranges are ordered and sensitivity is a fraction."""
        for spot in SPOT_PROFILES.values():
            low, high = spot.optimal_height
            assert 0 < low < high
            assert 0 <= spot.wind_sensitivity <= 1
            if spot.tide_window:
                assert spot.tide_window[0] < spot.tide_window[1]

    def test_unknown_spot_raises(self):
        with pytest.raises(SpotNotFound) as exc_info:
            get_spot_profile("Nowhere Point")
        assert "Nowhere Point" in str(exc_info.value)

    def test_lookup_is_exact(self):
        with pytest.raises(SpotNotFound):
            get_spot_profile("cloud 9")

    def test_profiles_are_immutable(self):
        spot = get_spot_profile("Cloud 9")
        with pytest.raises(dataclasses.FrozenInstanceError):
            spot.orientation = 10
        with pytest.raises(TypeError):
            SPOT_PROFILES["Cloud 9"] = DEFAULT_SPOT_PROFILE
