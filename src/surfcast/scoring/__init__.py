"""Deterministic surf scoring: spot profiles, height correction, quality score."""

from surfcast.scoring.correction import (
    WaveConditions,
    effective_wave_height,
    estimate_tide_height,
)
from surfcast.scoring.quality import (
    UNKNOWN,
    ScoreBreakdown,
    ScoreResult,
    SurfConditions,
    Unknown,
    WindReading,
    score_wave_quality,
    swell_window_score,
)
from surfcast.scoring.spots import (
    DEFAULT_SPOT_PROFILE,
    SPOT_PROFILES,
    SizeResponse,
    SkillLevel,
    SpotProfile,
    SpotType,
    TidalRange,
    get_spot_profile,
    list_spot_names,
)
from surfcast.scoring.tides import TideStage, classify_tide_stage, describe_tide_stage

__all__ = [
    "DEFAULT_SPOT_PROFILE",
    "SPOT_PROFILES",
    "UNKNOWN",
    "ScoreBreakdown",
    "ScoreResult",
    "SizeResponse",
    "SkillLevel",
    "SpotProfile",
    "SpotType",
    "SurfConditions",
    "TidalRange",
    "TideStage",
    "Unknown",
    "WaveConditions",
    "WindReading",
    "classify_tide_stage",
    "describe_tide_stage",
    "effective_wave_height",
    "estimate_tide_height",
    "get_spot_profile",
    "list_spot_names",
    "score_wave_quality",
    "swell_window_score",
]
