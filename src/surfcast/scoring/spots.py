"""Static surf spot profiles for Siargao.

Angles are FROM-bearings (0=N, 90=E). Heights are meters, tide windows are
meters above chart datum. Profiles are loaded once at import and never
mutated; look them up with get_spot_profile().
"""

from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType
from typing import Optional

from surfcast.errors import SpotNotFound


class SpotType(Enum):
    """Break type of a surf spot."""

    BEACH = "beach"
    REEF = "reef"
    POINT = "point"
    RIVERMOUTH = "rivermouth"


class SkillLevel(Enum):
    """Skill level a spot is rated for."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    EXPERT = "expert"


class TidalRange(Enum):
    """Tide stage a spot prefers."""

    ALL = "all"
    LOW = "low"
    MID = "mid"
    HIGH = "high"


@dataclass(frozen=True)
class SizeResponse:
    """Tuning for the multiplicative wave-size correction of a spot.

    Attributes:
        base: Base multiplier (1.10 amplifies, 0.80 attenuates)
        dir_boost: Max gain/loss from swell angle vs the swell window
        period_ref: Period (s) above which waves get bigger
        period_slope: Gain per second above period_ref (0.03 => +3%/s)
        tide_boost: Bonus when tide is inside the tide window
        tide_penalty: Penalty outside the window (default 0.6 * tide_boost)
        min: Lower bound of the factor
        max: Upper bound of the factor
    """

    base: float = 1.0
    dir_boost: float = 0.0
    period_ref: Optional[float] = None
    period_slope: float = 0.0
    tide_boost: float = 0.0
    tide_penalty: Optional[float] = None
    min: Optional[float] = None
    max: Optional[float] = None


@dataclass(frozen=True)
class SpotProfile:
    """Physical metadata for a named surf spot."""

    name: str
    optimal_height: tuple[float, float]
    swell_window: tuple[float, float]
    orientation: float
    tidal_range: TidalRange
    wind_sensitivity: float
    type: SpotType
    skill: SkillLevel
    label: str = ""
    tide_window: Optional[tuple[float, float]] = None
    size_response: Optional[SizeResponse] = None
    swell_period: Optional[tuple[float, float]] = None
    best_wind: Optional[tuple[float, float]] = None
    lat: Optional[float] = None
    lon: Optional[float] = None


def _reef(name, label, height, window, orientation, tidal, tide_window,
          sensitivity, skill, period, best_wind, lat, lon, size):
    return SpotProfile(
        name=name,
        label=label,
        optimal_height=height,
        swell_window=window,
        orientation=orientation,
        tidal_range=TidalRange(tidal),
        tide_window=tide_window,
        wind_sensitivity=sensitivity,
        type=SpotType.REEF,
        skill=SkillLevel(skill),
        swell_period=period,
        best_wind=best_wind,
        lat=lat,
        lon=lon,
        size_response=size,
    )


_PROFILES = [
    _reef("Cloud 9", "Cloud 9 - World-class right/left barrels",
          (1.2, 3.5), (30, 110), 70, "high", (1.00, 1.80), 0.8, "expert",
          (10, 16), (220, 260), 9.81332899, 126.16679507,
          SizeResponse(base=1.05, dir_boost=0.15, period_ref=10, period_slope=0.03,
                       tide_boost=0.12, max=1.5)),
    _reef("Quicksilver", "Quicksilver - Fast right, smaller than C9",
          (1.0, 3.0), (60, 110), 80, "mid", (0.80, 1.60), 0.7, "expert",
          (8, 14), (220, 250), 9.81456245, 126.16547762,
          SizeResponse(base=0.95, dir_boost=0.10, period_ref=9, period_slope=0.02,
                       tide_boost=0.08, max=1.3)),
    _reef("Stimpys", "Stimpy's - Quality left barrel (boat)",
          (0.6, 3.0), (30, 100), 85, "low", (0.40, 1.10), 0.6, "expert",
          (10, 16), (290, 320), 9.84489241, 126.15735699,
          SizeResponse(base=0.90, dir_boost=0.10, period_ref=10, period_slope=0.04,
                       tide_boost=0.06, max=1.6)),
    _reef("Rock Island", "Rock Island - Fast right, long rides (boat)",
          (1.2, 3.5), (40, 120), 100, "mid", (0.70, 1.40), 0.7, "expert",
          (10, 16), (160, 200), 9.83928889, 126.16059981,
          SizeResponse(base=0.95, dir_boost=0.10, period_ref=10, period_slope=0.03,
                       tide_boost=0.06, max=1.5)),
    _reef("Cemetery", "Cemetery/Pesangan - Versatile left/right peaks",
          (0.6, 2.5), (45, 150), 95, "mid", (0.40, 1.00), 0.9, "intermediate",
          (6, 12), (230, 280), 9.78483924, 126.17306053,
          SizeResponse(base=0.85, dir_boost=0.08, period_ref=8, period_slope=0.015,
                       tide_boost=0.05, max=1.2)),
    _reef("Jacking Horse", "Jacking Horse - Beginner-friendly right",
          (0.5, 1.5), (60, 110), 80, "mid", (0.60, 1.80), 0.6, "beginner",
          (6, 12), (200, 260), 9.81570173, 126.16473882,
          SizeResponse(base=0.75, dir_boost=0.05, period_ref=8, period_slope=0.01,
                       tide_boost=0.05, max=1.1)),
    _reef("Tuason", "Tuason Point - Heavy left barrel",
          (1.0, 3.0), (30, 80), 70, "high", (1.00, 1.70), 0.8, "expert",
          (10, 16), (220, 260), 9.80928935, 126.16974122,
          SizeResponse(base=1.10, dir_boost=0.15, period_ref=10, period_slope=0.035,
                       tide_boost=0.10, max=1.6)),
    _reef("Daku Reef", "Daku Reef - Long right, longboard heaven (boat)",
          (0.8, 2.5), (90, 150), 110, "mid", (0.90, 1.80), 0.6, "beginner",
          (6, 12), (220, 260), 9.74766912, 126.1611359,
          SizeResponse(base=0.80, dir_boost=0.06, period_ref=8, period_slope=0.015,
                       tide_boost=0.08, max=1.2)),
    _reef("Pacifico", "Pacifico - Long, powerful left (north coast)",
          (1.0, 4.0), (10, 80), 60, "mid", (0.90, 1.70), 0.7, "expert",
          (10, 16), (220, 250), 9.97423477, 126.09414024,
          SizeResponse(base=1.20, dir_boost=0.15, period_ref=10, period_slope=0.04,
                       tide_boost=0.10, max=1.8)),
    _reef("Salvacion", "Salvacion - Winter left/right peaks (boat)",
          (1.0, 2.5), (30, 90), 70, "all", (0.60, 1.30), 0.5, "intermediate",
          (8, 14), (200, 260), 9.85565424, 126.11296353,
          SizeResponse(base=0.90, dir_boost=0.10, period_ref=9, period_slope=0.025,
                       tide_boost=0.06, max=1.4)),
    _reef("Philippine Deep", "Philippine Deep - Outer-reef long right",
          (1.0, 5.0), (30, 110), 95, "mid", (0.70, 1.50), 0.6, "expert",
          (10, 16), (200, 260), 9.8789, 126.13296605,
          SizeResponse(base=1.25, dir_boost=0.15, period_ref=10, period_slope=0.04,
                       tide_boost=0.08, max=2.0)),
    _reef("Ocean 9", "Ocean 9 (Mahaybo Beach) - Beach/reef left/right",
          (0.6, 1.8), (45, 120), 95, "mid", (0.60, 1.60), 0.7, "intermediate",
          (7, 13), (200, 260), 9.84396164, 126.13140471,
          SizeResponse(base=0.85, dir_boost=0.08, period_ref=9, period_slope=0.02,
                       tide_boost=0.08, max=1.3)),
]

SPOT_PROFILES = MappingProxyType({p.name: p for p in _PROFILES})

# Used to score spots that have no tuned profile
DEFAULT_SPOT_PROFILE = SpotProfile(
    name="default",
    optimal_height=(0.8, 2.0),
    swell_window=(60, 120),
    orientation=90,
    tidal_range=TidalRange.ALL,
    wind_sensitivity=0.7,
    type=SpotType.REEF,
    skill=SkillLevel.INTERMEDIATE,
)


def get_spot_profile(name: str) -> SpotProfile:
    """Get a spot profile by exact name.

    Raises:
        SpotNotFound: If no profile exists for the name
    """
    try:
        return SPOT_PROFILES[name]
    except KeyError:
        raise SpotNotFound(name) from None


def list_spot_names() -> list[str]:
    """Names of all known spots, in catalogue order."""
    return list(SPOT_PROFILES)
