"""Tests for surf quality scoring."""

import pytest

from surfcast.scoring.quality import (
    UNKNOWN,
    ScoreBreakdown,
    SurfConditions,
    WindReading,
    classify_wind,
    rate,
    score_height,
    score_period,
    score_tide,
    score_wave_quality,
    score_wind,
    swell_window_score,
)
from surfcast.scoring.spots import (
    SkillLevel,
    SpotType,
    TidalRange,
    get_spot_profile,
)
from surfcast.scoring.tides import TideStage


def kmh(speed: float) -> float:
    """km/h -> m/s for WindReading."""
    return speed / 3.6


@pytest.fixture
def cloud9():
    return get_spot_profile("Cloud 9")


class TestSwellWindow:
    """Tests for direction vs swell window."""

    def test_inside_window(self):
        assert swell_window_score(70, (30, 110)) == 1.0

    def test_linear_falloff_outside(self):
        assert swell_window_score(130, (30, 110)) == pytest.approx(1 - 20 / 45)
        assert swell_window_score(10, (30, 110)) == pytest.approx(1 - 20 / 45)

    def test_zero_beyond_falloff(self):
        assert swell_window_score(200, (30, 110)) == 0.0

    def test_wrapping_window(self):
        assert swell_window_score(0, (320, 40)) == 1.0
        assert swell_window_score(350, (320, 40)) == 1.0
        assert swell_window_score(60, (320, 40)) == pytest.approx(1 - 20 / 45)


class TestHeight:
    """Tests for height sub-score."""

    def test_inside_optimal_range(self):
        warnings = []
        assert score_height(2.0, (1.2, 3.5), warnings) == 25
        assert warnings == []

    def test_too_small(self):
        warnings = []
        assert score_height(0.2, (1.2, 3.5), warnings) == 0
        assert warnings == ["Too small for this spot"]

    def test_too_big(self):
        warnings = []
        assert score_height(5.5, (1.2, 3.5), warnings) == 5
        assert warnings == ["Too big / heavy for this spot"]

    def test_falloff_below_range(self):
        warnings = []
        # 0.4 m below a 2.3 m span
        points = score_height(0.8, (1.2, 3.5), warnings)
        assert points == pytest.approx(25 - 18 * (0.4 / 2.3))
        assert warnings == []

    def test_falloff_is_bounded(self):
        # narrow span uses the 0.5 m minimum; just outside the range caps at 23
        assert score_height(1.1, (1.0, 1.05), []) == 23
        assert score_height(0.51, (1.0, 1.05), []) == pytest.approx(25 - 18 * (0.49 / 0.5))


class TestPeriod:
    """Tests for the energy sub-score."""

    def test_weak_energy_scores_zero(self):
        assert score_period(1.0, 8, SpotType.POINT) == 0

    def test_powerful_energy_scores_max(self):
        assert score_period(3.0, 14, SpotType.POINT) == 12

    def test_reef_rounding(self):
        # 2.0^2 * 12 = 48 -> 0.6 -> 7.2 -> 7, reef x1.05 -> 7.35 -> 7
        assert score_period(2.0, 12, SpotType.REEF) == 7

    def test_beach_penalty(self):
        # 48 energy -> 7 points, beach x0.85 -> 5.95 -> 6
        assert score_period(2.0, 12, SpotType.BEACH) == 6

    def test_never_exceeds_max_on_reef(self):
        assert score_period(4.0, 16, SpotType.REEF) == 12


class TestWind:
    """Tests for the wind sub-score."""

    def test_classify_relative_to_orientation(self):
        # orientation 70 -> offshore wind blows from 250
        assert classify_wind(250, 70) == "offshore"
        assert classify_wind(210, 70) == "offshore"
        assert classify_wind(160, 70) == "cross-shore"
        assert classify_wind(70, 70) == "onshore"

    def test_unknown_wind_scores_full(self, cloud9):
        warnings = []
        assert score_wind(UNKNOWN, cloud9, warnings) == 18
        assert warnings == []

    def test_light_offshore_scaled_by_sensitivity(self, cloud9):
        # 18 * (1 - 0.4 * (1 - 0.8)) = 16.56 -> 17
        assert score_wind(WindReading(kmh(8), 250), cloud9, []) == 17

    def test_strong_offshore_warns(self, cloud9):
        warnings = []
        score_wind(WindReading(kmh(25), 250), cloud9, warnings)
        assert "Strong offshore (gusty)" in warnings

    def test_cross_shore_warns(self, cloud9):
        warnings = []
        points = score_wind(WindReading(kmh(5), 160), cloud9, warnings)
        assert points == round(8 * 0.92)
        assert warnings == ["Cross-shore wind"]

    def test_onshore(self, cloud9):
        warnings = []
        assert score_wind(WindReading(kmh(30), 70), cloud9, warnings) == 0
        assert warnings == ["Onshore wind (choppy surface)"]

    def test_light_onshore_does_not_warn(self, cloud9):
        warnings = []
        assert score_wind(WindReading(kmh(5), 70), cloud9, warnings) == 4
        assert warnings == []

    def test_speed_kmh(self):
        assert WindReading(5.0, 0).speed_kmh == pytest.approx(18.0)


class TestTide:
    """Tests for the tide sub-score."""

    def test_all_tides_is_neutral(self):
        assert score_tide(TideStage.LOW, TidalRange.ALL, []) == 2

    def test_unknown_is_neutral(self):
        assert score_tide(UNKNOWN, TidalRange.HIGH, []) == 2

    def test_match(self):
        warnings = []
        assert score_tide(TideStage.HIGH, TidalRange.HIGH, warnings) == 4
        assert warnings == []

    def test_near_mid(self):
        warnings = []
        assert score_tide(TideStage.HIGH, TidalRange.MID, warnings) == 1.5
        assert warnings == ["Tide mismatch (current: high)"]

    def test_mismatch(self):
        warnings = []
        assert score_tide(TideStage.LOW, TidalRange.HIGH, warnings) == 0.5
        assert warnings == ["Tide mismatch (current: low)"]


class TestRating:
    """Tests for rating buckets."""

    @pytest.mark.parametrize("score,expected", [
        (10, "Flat/Poor"),
        (30, "Poor-Fair"),
        (50, "Fair"),
        (70, "Good"),
        (78, "Very Good"),
        (92, "Epic"),
        (97, "All-time"),
    ])
    def test_standard_scale(self, score, expected):
        assert rate(score, SkillLevel.EXPERT) == expected

    @pytest.mark.parametrize("score,expected", [
        (30, "Not surfable"),
        (55, "Challenging for beginners"),
        (70, "OK to practice"),
        (85, "Great for learning"),
    ])
    def test_beginner_scale(self, score, expected):
        assert rate(score, SkillLevel.BEGINNER) == expected


class TestScoreWaveQuality:
    """End-to-end scoring."""

    def test_clean_overhead_day_at_cloud9(self, cloud9):
        """2 m @ 12 s from 70, light offshore, high tide."""
        result = score_wave_quality(
            SurfConditions(
                height=2.0,
                period=12,
                direction=70,
                wind=WindReading(kmh(8), 250),
                tide=TideStage.HIGH,
            ),
            cloud9,
        )

        assert result.breakdown.height == 25
        assert result.breakdown.direction == 25
        assert result.breakdown.period == 7
        assert result.breakdown.wind == 17
        assert result.breakdown.tide == 4
        assert result.breakdown.spot_bonus == 0
        assert result.score == 78
        assert result.rating == "Very Good"
        assert result.warnings == []

    def test_tiny_swell_is_flagged(self, cloud9):
        result = score_wave_quality(
            SurfConditions(height=0.2, period=8, direction=70),
            cloud9,
        )
        assert result.breakdown.height == 0
        assert "Too small for this spot" in result.warnings

    def test_poor_window_warns(self, cloud9):
        result = score_wave_quality(
            SurfConditions(height=2.0, period=12, direction=200),
            cloud9,
        )
        assert result.breakdown.direction == 0
        assert "Poor swell window for this spot" in result.warnings

    def test_reef_bonus_with_energy(self, cloud9):
        result = score_wave_quality(
            SurfConditions(height=3.0, period=14, direction=70),
            cloud9,
        )
        assert result.breakdown.period >= 10
        assert result.breakdown.spot_bonus == 1.5

    def test_unknown_dimensions_are_explicit(self, cloud9):
        result = score_wave_quality(
            SurfConditions(height=2.0, period=12, direction=70),
            cloud9,
        )
        assert result.breakdown.wind == 18
        assert result.breakdown.tide == 2

    def test_score_is_bounded(self, cloud9):
        result = score_wave_quality(
            SurfConditions(height=3.4, period=18, direction=70, tide=TideStage.HIGH),
            cloud9,
        )
        assert 0 <= result.score <= 100
        assert result.score == result.breakdown.total

    def test_breakdown_to_dict(self):
        breakdown = ScoreBreakdown(25, 25, 7, 17, 4, 0)
        assert breakdown.to_dict() == {
            "height": 25, "direction": 25, "period": 7,
            "wind": 17, "tide": 4, "spot_bonus": 0,
        }
        assert breakdown.total == 78
