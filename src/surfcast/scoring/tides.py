"""Tide stage classification from a tide height and the day's extremes.

Extremes are any objects exposing ``time`` (datetime.time), ``height``
(meters) and ``type`` ("High" or "Low"), such as cache.models.TideExtreme.
"""

from datetime import time
from enum import Enum
from typing import Optional, Sequence

# Fractions of the day's low->high range separating low/mid/high
LOW_STAGE_FRACTION = 0.3
HIGH_STAGE_FRACTION = 0.7

# Position between two extremes (0 = previous, 1 = next)
NEAR_EXTREME = 0.25
AT_EXTREME = 0.05


class TideStage(Enum):
    """Coarse tide stage."""

    LOW = "low"
    MID = "mid"
    HIGH = "high"


def classify_tide_stage(height: float, extremes: Sequence) -> TideStage:
    """Classify a tide height as low, mid or high for the day.

    The day's range runs from the lowest Low to the highest High; the
    bottom 30% is low, the top 30% is high. Without both a High and a Low
    the stage is mid.
    """
    highs = [e.height for e in extremes if e.type == "High"]
    lows = [e.height for e in extremes if e.type == "Low"]
    if not highs or not lows:
        return TideStage.MID

    min_low = min(lows)
    day_range = max(highs) - min_low
    if height <= min_low + day_range * LOW_STAGE_FRACTION:
        return TideStage.LOW
    if height >= min_low + day_range * HIGH_STAGE_FRACTION:
        return TideStage.HIGH
    return TideStage.MID


def describe_tide_stage(
    height: Optional[float],
    extremes: Sequence,
    at: time,
) -> Optional[str]:
    """Detailed tide stage with direction, e.g. "mid incoming" or "high".

    Locates the extremes surrounding ``at`` (wrapping around the day) and
    the relative position of ``height`` between them. Direction is omitted
    when the height sits right at an extreme.

    Returns:
        Stage label, or None when height or extremes are missing
    """
    if height is None or not extremes:
        return None

    ordered = sorted(extremes, key=lambda e: e.time)
    previous = None
    following = None
    for extreme in ordered:
        if extreme.time <= at:
            previous = extreme
        elif following is None:
            following = extreme
            break

    if following is None:
        following = ordered[0]
    if previous is None:
        previous = ordered[-1]

    direction = "incoming" if previous.type == "Low" else "outgoing"

    span = abs(following.height - previous.height)
    if span == 0:
        return classify_tide_stage(height, extremes).value
    position = abs(height - previous.height) / span

    if position < NEAR_EXTREME:
        stage = "low" if previous.type == "Low" else "high"
        with_direction = position >= AT_EXTREME
    elif position > 1 - NEAR_EXTREME:
        stage = "high" if following.type == "High" else "low"
        with_direction = position <= 1 - AT_EXTREME
    else:
        stage = "mid"
        with_direction = True

    return f"{stage} {direction}" if with_direction else stage
