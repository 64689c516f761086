"""Spot-corrected effective wave height.

Combines swell and wind-sea heights into a single face-height estimate and
applies the spot's size response (swell angle, period, tide). The swell
height itself is never modified; only the derived effective height is.
"""

import math
from dataclasses import dataclass
from typing import Optional

from surfcast.scoring.quality import swell_window_score
from surfcast.scoring.spots import SizeResponse, SpotProfile, SpotType
from surfcast.scoring.tides import TideStage

# Wind-sea weight by break type (reefs discount wind chop the most)
WIND_SEA_WEIGHT = {
    SpotType.REEF: 0.35,
    SpotType.POINT: 0.40,
    SpotType.BEACH: 0.55,
}
DEFAULT_WIND_SEA_WEIGHT = 0.50

DEFAULT_PERIOD_REF = 8.0
TIDE_PENALTY_RATIO = 0.6

TIDE_STAGE_HEIGHTS = {
    TideStage.LOW: 0.3,
    TideStage.MID: 1.0,
    TideStage.HIGH: 1.7,
}


@dataclass
class WaveConditions:
    """Raw marine readings for one scoring call.

    Attributes:
        wave_period: Dominant wave period in seconds
        wave_direction: Dominant wave FROM-bearing in degrees
        wave_height: Combined wave height, used only if components are missing
        swell_height: Groundswell height in meters
        wind_wave_height: Wind-sea height in meters
        swell_period: Groundswell period in seconds
        swell_direction: Groundswell FROM-bearing in degrees
        tide_height: Tide height in meters above chart datum
    """

    wave_period: float
    wave_direction: float
    wave_height: Optional[float] = None
    swell_height: Optional[float] = None
    wind_wave_height: Optional[float] = None
    swell_period: Optional[float] = None
    swell_direction: Optional[float] = None
    tide_height: Optional[float] = None


def combined_height(conditions: WaveConditions, spot: SpotProfile) -> float:
    """Root-sum-square of swell and weighted wind-sea heights."""
    hs = conditions.swell_height or 0.0
    hw = conditions.wind_wave_height or 0.0
    if hs <= 0 and hw <= 0:
        return conditions.wave_height or 0.0

    gamma = WIND_SEA_WEIGHT.get(spot.type, DEFAULT_WIND_SEA_WEIGHT)
    return math.sqrt(hs * hs + (gamma * hw) ** 2)


def size_factor(conditions: WaveConditions, spot: SpotProfile) -> float:
    """Multiplicative size correction for a spot, clamped to its bounds."""
    sr = spot.size_response or SizeResponse()

    # Prefer swell direction/period over the dominant wave
    direction = conditions.swell_direction
    if direction is None:
        direction = conditions.wave_direction
    dir01 = swell_window_score(direction, spot.swell_window)
    f_dir = 1 + sr.dir_boost * (dir01 - 0.5) * 2

    period = conditions.swell_period
    if period is None:
        period = conditions.wave_period
    period_ref = sr.period_ref
    if period_ref is None:
        period_ref = spot.swell_period[0] if spot.swell_period else DEFAULT_PERIOD_REF
    f_per = 1 + sr.period_slope * max(0.0, period - period_ref)

    f_tide = 1.0
    if spot.tide_window is not None and conditions.tide_height is not None:
        t_min, t_max = spot.tide_window
        penalty = sr.tide_penalty
        if penalty is None:
            penalty = sr.tide_boost * TIDE_PENALTY_RATIO
        if t_min <= conditions.tide_height <= t_max:
            f_tide = 1 + sr.tide_boost
        else:
            f_tide = 1 - penalty

    factor = sr.base * f_dir * f_per * f_tide
    if sr.min is not None:
        factor = max(sr.min, factor)
    if sr.max is not None:
        factor = min(sr.max, factor)
    return factor


def effective_wave_height(conditions: WaveConditions, spot: SpotProfile) -> float:
    """Effective (spot-corrected) wave height in meters.

    Args:
        conditions: Raw marine readings
        spot: Profile of the spot being scored

    Returns:
        Combined face height multiplied by the spot's size factor
    """
    return combined_height(conditions, spot) * size_factor(conditions, spot)


def estimate_tide_height(stage: TideStage = TideStage.MID) -> float:
    """Rough tide height for a stage when no tide table is available."""
    return TIDE_STAGE_HEIGHTS.get(stage, 1.0)
