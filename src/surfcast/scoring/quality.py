"""Surf quality scoring (0-100) for a spot.

Scoring components (max points):
- Height: 25 - effective height vs the spot's optimal range
- Direction: 25 - swell direction vs the spot's swell window
- Period/Energy: 12 - energy proxy height^2 x period
- Wind: 18 - offshore/cross/onshore speed tiers, scaled by wind sensitivity
- Tide: 4 - tide stage vs the spot's preferred stage
- Spot bonus: 3 - point breaks on a clean angle, reefs with energy

The constants below are empirically tuned and kept as-is.

Optional readings are explicit: wind and tide are either a reading or
UNKNOWN, never a silently missing attribute.
"""

from dataclasses import asdict, dataclass, field
from typing import Union

from surfcast.scoring.spots import SkillLevel, SpotProfile, SpotType, TidalRange
from surfcast.scoring.tides import TideStage
from surfcast.utils.angles import angular_distance, clamp, in_arc, round_half_up

# Direction: linear falloff to 0 this many degrees outside the window edge
WINDOW_FALLOFF_DEG = 45.0
POOR_WINDOW_SCORE = 0.3

# Height
HEIGHT_MAX_POINTS = 25.0
TOO_SMALL_RATIO = 0.5
TOO_BIG_RATIO = 1.5
TOO_BIG_POINTS = 5.0
HEIGHT_FALLOFF = 18.0
MIN_HEIGHT_SPAN = 0.5

# Period / energy proxy
ENERGY_WEAK = 15.0
ENERGY_POWERFUL = 70.0
PERIOD_MAX_POINTS = 12
REEF_PERIOD_BONUS = 1.05
BEACH_PERIOD_PENALTY = 0.85

# Wind (km/h tiers); classes relative to offshore = orientation + 180
WIND_MAX_POINTS = 18
OFFSHORE_MAX_DEG = 45.0
CROSS_SHORE_MAX_DEG = 90.0
OFFSHORE_TIERS = [(12, 18), (20, 14), (30, 8)]
OFFSHORE_FLOOR = 3
CROSS_SHORE_TIERS = [(10, 8), (20, 5)]
CROSS_SHORE_FLOOR = 2
ONSHORE_TIERS = [(8, 4), (15, 2)]
ONSHORE_FLOOR = 0
GUSTY_OFFSHORE_KMH = 20
CHOPPY_ONSHORE_KMH = 8
WIND_TOLERANCE = 0.4

# Tide
TIDE_NEUTRAL = 2.0
TIDE_MATCH = 4.0
TIDE_NEAR_MID = 1.5
TIDE_MISMATCH = 0.5

# Spot bonus
POINT_DIRECTION_THRESHOLD = 20
REEF_PERIOD_THRESHOLD = 10
SPOT_BONUS = 1.5

BEGINNER_RATINGS = [
    (40, "Not surfable"),
    (60, "Challenging for beginners"),
    (80, "OK to practice"),
]
BEGINNER_TOP_RATING = "Great for learning"

RATINGS = [
    (25, "Flat/Poor"),
    (45, "Poor-Fair"),
    (60, "Fair"),
    (75, "Good"),
    (90, "Very Good"),
    (96, "Epic"),
]
TOP_RATING = "All-time"


@dataclass(frozen=True)
class Unknown:
    """A dimension with no reading."""


UNKNOWN = Unknown()


@dataclass(frozen=True)
class WindReading:
    """Wind observation.

    Attributes:
        speed_ms: Wind speed in m/s
        direction_deg: Wind FROM-bearing in degrees
    """

    speed_ms: float
    direction_deg: float

    @property
    def speed_kmh(self) -> float:
        """Wind speed in km/h."""
        return self.speed_ms * 3.6


WindInput = Union[WindReading, Unknown]
TideInput = Union[TideStage, Unknown]


@dataclass
class SurfConditions:
    """Scoring inputs for one spot at one moment.

    Attributes:
        height: Effective wave height in meters
        period: Wave period in seconds
        direction: Swell FROM-bearing in degrees
        wind: WindReading or UNKNOWN
        tide: TideStage or UNKNOWN
    """

    height: float
    period: float
    direction: float
    wind: WindInput = UNKNOWN
    tide: TideInput = UNKNOWN


@dataclass
class ScoreBreakdown:
    """Per-factor points that make up a score."""

    height: float
    direction: float
    period: float
    wind: float
    tide: float
    spot_bonus: float

    @property
    def total(self) -> float:
        return (
            self.height + self.direction + self.period
            + self.wind + self.tide + self.spot_bonus
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass
class ScoreResult:
    """Complete scoring result for a spot."""

    score: float
    rating: str
    breakdown: ScoreBreakdown
    warnings: list[str] = field(default_factory=list)


def swell_window_score(direction: float, window: tuple[float, float]) -> float:
    """Score a direction against a swell window arc.

    Full score inside the arc (which may wrap past 360), then a linear
    falloff reaching 0 at 45 degrees beyond the nearest edge.

    Returns:
        Score in [0, 1]

    Examples:
        >>> swell_window_score(0, (320, 40))
        1.0
        >>> swell_window_score(130, (30, 110))
        0.5555555555555556
    """
    start, end = window
    if in_arc(direction, start, end):
        return 1.0
    d = min(angular_distance(direction, start), angular_distance(direction, end))
    return clamp(1 - d / WINDOW_FALLOFF_DEG, 0.0, 1.0)


def score_height(height: float, optimal: tuple[float, float], warnings: list[str]) -> float:
    """Height points (0-25), appending too-small/too-big warnings."""
    h_min, h_max = optimal
    if height < TOO_SMALL_RATIO * h_min:
        warnings.append("Too small for this spot")
        return 0.0
    if height > TOO_BIG_RATIO * h_max:
        warnings.append("Too big / heavy for this spot")
        return TOO_BIG_POINTS
    if h_min <= height <= h_max:
        return HEIGHT_MAX_POINTS

    d = min(abs(height - h_min), abs(height - h_max))
    span = max(h_max - h_min, MIN_HEIGHT_SPAN)
    return clamp(HEIGHT_MAX_POINTS - HEIGHT_FALLOFF * (d / span), 2.0, 23.0)


def score_period(height: float, period: float, spot_type: SpotType) -> float:
    """Energy points (0-12) from the height^2 x period proxy."""
    energy = height * height * period
    e01 = clamp((energy - ENERGY_WEAK) / (ENERGY_POWERFUL - ENERGY_WEAK), 0.0, 1.0)
    points = round_half_up(PERIOD_MAX_POINTS * e01)
    if spot_type == SpotType.REEF:
        points = round_half_up(points * REEF_PERIOD_BONUS)
    elif spot_type == SpotType.BEACH:
        points = round_half_up(points * BEACH_PERIOD_PENALTY)
    return clamp(points, 0, PERIOD_MAX_POINTS)


def _tier(speed_kmh: float, tiers: list[tuple[float, int]], floor: int) -> int:
    for limit, points in tiers:
        if speed_kmh < limit:
            return points
    return floor


def classify_wind(direction: float, orientation: float) -> str:
    """Classify wind as "offshore", "cross-shore" or "onshore" for a spot."""
    offshore = (orientation + 180) % 360
    a = angular_distance(direction, offshore)
    if a <= OFFSHORE_MAX_DEG:
        return "offshore"
    if a <= CROSS_SHORE_MAX_DEG:
        return "cross-shore"
    return "onshore"


def score_wind(wind: WindInput, spot: SpotProfile, warnings: list[str]) -> float:
    """Wind points (0-18); full points when wind is unknown."""
    if not isinstance(wind, WindReading):
        return float(WIND_MAX_POINTS)

    kmh = wind.speed_kmh
    kind = classify_wind(wind.direction_deg, spot.orientation)
    if kind == "offshore":
        points = _tier(kmh, OFFSHORE_TIERS, OFFSHORE_FLOOR)
        if kmh >= GUSTY_OFFSHORE_KMH:
            warnings.append("Strong offshore (gusty)")
    elif kind == "cross-shore":
        points = _tier(kmh, CROSS_SHORE_TIERS, CROSS_SHORE_FLOOR)
        warnings.append("Cross-shore wind")
    else:
        points = _tier(kmh, ONSHORE_TIERS, ONSHORE_FLOOR)
        if kmh >= CHOPPY_ONSHORE_KMH:
            warnings.append("Onshore wind (choppy surface)")

    sensitivity = clamp(spot.wind_sensitivity, 0.0, 1.0)
    scaled = round_half_up(points * (1 - WIND_TOLERANCE * (1 - sensitivity)))
    return clamp(scaled, 0, WIND_MAX_POINTS)


def score_tide(tide: TideInput, tidal_range: TidalRange, warnings: list[str]) -> float:
    """Tide points (0-4); neutral when the spot works on all tides or stage is unknown."""
    if tidal_range == TidalRange.ALL or not isinstance(tide, TideStage):
        return TIDE_NEUTRAL

    if tide.value == tidal_range.value:
        points = TIDE_MATCH
    elif tidal_range == TidalRange.MID:
        points = TIDE_NEAR_MID
    else:
        points = TIDE_MISMATCH
    if points < TIDE_NEUTRAL:
        warnings.append(f"Tide mismatch (current: {tide.value})")
    return points


def rate(score: float, skill: SkillLevel) -> str:
    """Human rating bucket for a score; beginner spots use a gentler scale."""
    if skill == SkillLevel.BEGINNER:
        buckets, top = BEGINNER_RATINGS, BEGINNER_TOP_RATING
    else:
        buckets, top = RATINGS, TOP_RATING
    for limit, label in buckets:
        if score < limit:
            return label
    return top


def score_wave_quality(conditions: SurfConditions, spot: SpotProfile) -> ScoreResult:
    """Score surf quality for a spot.

    Args:
        conditions: Effective height, period, direction, wind and tide
        spot: Profile of the spot being scored

    Returns:
        ScoreResult with total, rating, every sub-score and all warnings
    """
    warnings: list[str] = []

    height = score_height(conditions.height, spot.optimal_height, warnings)

    dir01 = swell_window_score(conditions.direction, spot.swell_window)
    direction = round_half_up(HEIGHT_MAX_POINTS * dir01)
    if dir01 < POOR_WINDOW_SCORE:
        warnings.append("Poor swell window for this spot")

    period = score_period(conditions.height, conditions.period, spot.type)
    wind = score_wind(conditions.wind, spot, warnings)
    tide = score_tide(conditions.tide, spot.tidal_range, warnings)

    spot_bonus = 0.0
    if spot.type == SpotType.POINT and direction >= POINT_DIRECTION_THRESHOLD:
        spot_bonus += SPOT_BONUS
    if spot.type == SpotType.REEF and period >= REEF_PERIOD_THRESHOLD:
        spot_bonus += SPOT_BONUS

    breakdown = ScoreBreakdown(
        height=height,
        direction=direction,
        period=period,
        wind=wind,
        tide=tide,
        spot_bonus=spot_bonus,
    )
    total = clamp(breakdown.total, 0.0, 100.0)

    return ScoreResult(
        score=total,
        rating=rate(total, spot.skill),
        breakdown=breakdown,
        warnings=warnings,
    )
