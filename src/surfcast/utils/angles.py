"""Angle and numeric helpers.

All bearings are FROM-bearings in degrees (0 = N, 90 = E).
"""

import math

CARDINALS_16 = [
    "N", "NNE", "NE", "ENE", "E", "ESE", "SE", "SSE",
    "S", "SSW", "SW", "WSW", "W", "WNW", "NW", "NNW",
]


def clamp(value: float, low: float, high: float) -> float:
    """Limit value to the closed interval [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float, ndigits: int = 0) -> float:
    """Round with halves going up, unlike Python's banker's rounding.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(1.25, 1)
        1.3
    """
    factor = 10 ** ndigits
    return math.floor(value * factor + 0.5) / factor


def normalize_bearing(deg: float) -> float:
    """Map any bearing onto [0, 360)."""
    return deg % 360


def angular_distance(a: float, b: float) -> float:
    """Smallest circular distance between two bearings, in [0, 180]."""
    d = abs(a - b) % 360
    return 360 - d if d > 180 else d


def in_arc(deg: float, start: float, end: float) -> bool:
    """Check whether a bearing lies inside the arc [start, end].

    The arc runs clockwise from start to end and may wrap past 360
    (e.g. [320, 40] covers NW through NE).
    """
    x = normalize_bearing(deg)
    s = normalize_bearing(start)
    e = normalize_bearing(end)
    if s <= e:
        return s <= x <= e
    return x >= s or x <= e


def degrees_to_cardinal(deg: float) -> str:
    """Convert a bearing into one of the 16 compass points.

    Examples:
        >>> degrees_to_cardinal(0)
        'N'
        >>> degrees_to_cardinal(250)
        'WSW'
    """
    index = int(round_half_up(normalize_bearing(deg) / 22.5)) % 16
    return CARDINALS_16[index]
