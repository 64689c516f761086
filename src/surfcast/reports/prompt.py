"""Prompt construction for narrative surf reports."""

import json
from dataclasses import dataclass, field
from datetime import time
from typing import Optional, Sequence

from surfcast.scoring.quality import ScoreResult
from surfcast.scoring.spots import SpotProfile
from surfcast.scoring.tides import describe_tide_stage
from surfcast.utils.angles import angular_distance, in_arc, round_half_up

# Shoulder around the swell window: 12 deg, widened 0.8 deg per second of
# period above 10 s, capped at 24 deg
BASE_SHOULDER_DEG = 12.0
SHOULDER_PER_SECOND = 0.8
SHOULDER_PERIOD_REF = 10.0
MAX_SHOULDER_DEG = 24.0

SYSTEM_MESSAGE = (
    "You are a surf reporter for Siargao. Reply with strict JSON only: "
    '{"title": string, "summary": string, "verdict": "GO" | "CONDITIONAL" | "NO-GO"}.'
)

SUPPORTED_LOCALES = ("en", "fr")


def direction_label(direction: float, window: tuple[float, float], period: float) -> str:
    """Label a swell direction as "prime window", "workable angle" or "outside window".

    Long-period swell wraps into a spot better, so the workable shoulder
    around the window widens with period.

    Examples:
        >>> direction_label(70, (30, 110), 12)
        'prime window'
        >>> direction_label(120, (30, 110), 12)
        'workable angle'
        >>> direction_label(150, (30, 110), 8)
        'outside window'
    """
    start, end = window
    if in_arc(direction, start, end):
        return "prime window"
    to_edge = min(angular_distance(direction, start), angular_distance(direction, end))
    extra = max(0.0, period - SHOULDER_PERIOD_REF) * SHOULDER_PER_SECOND
    shoulder = min(MAX_SHOULDER_DEG, BASE_SHOULDER_DEG + extra)
    return "workable angle" if to_edge <= shoulder else "outside window"


@dataclass
class PromptInputs:
    """Everything the report prompt is built from. None means no reading."""

    spot: SpotProfile
    effective_height: Optional[float] = None
    wave_period: Optional[float] = None
    swell_height: Optional[float] = None
    swell_direction: Optional[float] = None
    wind_kmh: Optional[float] = None
    wind_direction: Optional[float] = None
    tide_height: Optional[float] = None
    tide_extremes: Sequence = field(default_factory=list)
    local_time: Optional[time] = None
    quality: Optional[ScoreResult] = None
    locale: str = "en"


def _rounded(value: Optional[float], ndigits: int = 1) -> Optional[float]:
    return None if value is None else round_half_up(value, ndigits)


def build_data_block(p: PromptInputs) -> dict:
    """Structured data the model must base its report on."""
    spot = p.spot

    swell_label = None
    if p.swell_direction is not None and p.wave_period is not None:
        swell_label = direction_label(p.swell_direction, spot.swell_window, p.wave_period)

    tide_stage = None
    if p.local_time is not None:
        tide_stage = describe_tide_stage(p.tide_height, p.tide_extremes, p.local_time)

    quality = None
    if p.quality is not None:
        quality = {"rating": p.quality.rating, "score": round(p.quality.score)}

    return {
        "spot": spot.name,
        "type": spot.type.value,
        "optimalHeight_m": list(spot.optimal_height),
        "swellWindow_deg": list(spot.swell_window),
        "orientation_deg": spot.orientation,
        "bestWind_deg": list(spot.best_wind) if spot.best_wind else None,
        "tidalRange": spot.tidal_range.value,
        "live": {
            "height_m": _rounded(p.effective_height),
            "period_s": _rounded(p.wave_period, 0),
            "swell_m": _rounded(p.swell_height),
            "swell_dir_deg": _rounded(p.swell_direction, 0),
            "swell_dir_label": swell_label,
            "wind_kmh": _rounded(p.wind_kmh, 0),
            "wind_dir_deg": _rounded(p.wind_direction, 0),
            "tide_m": _rounded(p.tide_height),
            "tide_stage": tide_stage or "n/a",
        },
        "quality": quality,
    }


def build_spot_report_prompt(p: PromptInputs) -> str:
    """Build the user prompt for a spot report.

    Args:
        p: Spot profile, live conditions and quality result

    Returns:
        Prompt text asking for a strict-JSON report in the requested locale
    """
    language = "French" if p.locale == "fr" else "English"
    data = json.dumps(build_data_block(p), indent=2, ensure_ascii=False)

    sections = [
        "Rules:\n"
        "- Do NOT invent or forecast. Use ONLY the provided data.\n"
        "- Convert every direction to 16-point compass cardinals (N, NNE, NE, ... NNW). "
        "Never print degrees.\n"
        "- If a value is missing (null or n/a), do not mention it.",
        f"Data:\n{data}",
        f"Task:\n"
        f"Write in {language} for casual surfers: 2 short sentences, 35-55 words. "
        "Punchy field-report tone. Don't repeat every number; cite size and period only "
        "when size >= 0.5 m, otherwise describe it (tiny/small).\n"
        "- Use swell_dir_label as given: prime window, workable angle or outside window.\n"
        "- Wind effect: offshore / cross / onshore relative to orientation_deg.\n"
        "- Use tide_stage as given (e.g. low incoming, mid outgoing, high).\n"
        "- No emojis, no code blocks.",
        "Verdict (first that applies):\n"
        '- "GO": height within optimalHeight_m, prime window, wind offshore or light '
        "(<= 12 km/h), tide suits tidalRange.\n"
        '- "CONDITIONAL": workable angle, or something borderline/missing but surfable.\n'
        '- "NO-GO": well below optimal height, strong onshore (> 25 km/h) or outside window.',
        "Title: 3-7 words, at most 55 characters, summing up the conditions "
        '(e.g. "1.8 m @ 12 s - offshore, mid incoming"). '
        "No spot name, no dates, no generic titles.",
        "Output:\n"
        'Strict JSON only: {"title": "...", "summary": "...", "verdict": "GO|CONDITIONAL|NO-GO"}',
    ]
    return "\n\n".join(sections)
