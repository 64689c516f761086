"""Narrative report prompt construction and model output parsing."""

from surfcast.reports.parsing import (
    ParseErr,
    ParseOk,
    Report,
    default_report,
    normalize_verdict,
    parse_report,
)
from surfcast.reports.prompt import (
    SYSTEM_MESSAGE,
    PromptInputs,
    build_spot_report_prompt,
    direction_label,
)

__all__ = [
    "ParseErr",
    "ParseOk",
    "PromptInputs",
    "Report",
    "SYSTEM_MESSAGE",
    "build_spot_report_prompt",
    "default_report",
    "direction_label",
    "normalize_verdict",
    "parse_report",
]
