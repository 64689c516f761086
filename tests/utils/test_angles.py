"""Tests for angle and numeric helpers."""

import pytest

from surfcast.utils.angles import (
    angular_distance,
    clamp,
    degrees_to_cardinal,
    in_arc,
    round_half_up,
)


class TestAngularDistance:
    """Tests for circular distance between bearings."""

    def test_simple_difference(self):
        assert angular_distance(30, 70) == 40

    def test_wraps_across_north(self):
        """350 and 10 are 20 degrees apart, not 340."""
        assert angular_distance(350, 10) == 20
        assert angular_distance(10, 350) == 20

    def test_opposite_bearings(self):
        assert angular_distance(0, 180) == 180
        assert angular_distance(90, 270) == 180

    def test_negative_and_large_inputs(self):
        assert angular_distance(-10, 10) == 20
        assert angular_distance(720, 5) == 5


class TestInArc:
    """Tests for arc membership."""

    def test_inside_plain_arc(self):
        assert in_arc(70, 30, 110) is True

    def test_edges_are_inclusive(self):
        assert in_arc(30, 30, 110) is True
        assert in_arc(110, 30, 110) is True

    def test_outside_plain_arc(self):
        assert in_arc(120, 30, 110) is False

    def test_wrapping_arc(self):
        """[320, 40] covers NW through NE."""
        assert in_arc(0, 320, 40) is True
        assert in_arc(350, 320, 40) is True
        assert in_arc(30, 320, 40) is True
        assert in_arc(180, 320, 40) is False


class TestCardinals:
    """Tests for 16-point compass conversion."""

    @pytest.mark.parametrize("deg,expected", [
        (0, "N"),
        (22.5, "NNE"),
        (45, "NE"),
        (90, "E"),
        (180, "S"),
        (250, "WSW"),
        (348.75, "N"),
        (359, "N"),
        (-90, "W"),
    ])
    def test_degrees_to_cardinal(self, deg, expected):
        assert degrees_to_cardinal(deg) == expected


class TestNumeric:
    """Tests for clamp and rounding."""

    def test_clamp(self):
        assert clamp(5, 0, 10) == 5
        assert clamp(-1, 0, 10) == 0
        assert clamp(11, 0, 10) == 10

    def test_round_half_up_goes_up_on_halves(self):
        """Unlike round(), 2.5 rounds to 3 and 0.5 to 1."""
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1
        assert round(2.5) == 2

    def test_round_half_up_digits(self):
        assert round_half_up(1.25, 1) == pytest.approx(1.3)
        assert round_half_up(1.24, 1) == pytest.approx(1.2)
