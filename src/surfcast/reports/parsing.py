"""Typed parsing of language-model report output.

The model is asked for strict JSON ``{title, summary, verdict}`` but does
not always comply. parse_report() tries, in order:

1. the whole text as JSON, after stripping markdown code fences
2. the first balanced top-level ``{...}`` object found in the text
3. a plain-text layout: title line, summary lines, verdict line

and returns ParseOk with the first report that validates, or ParseErr
listing why every attempt failed.
"""

import json
import logging
import re
from dataclasses import dataclass
from typing import Optional, Union

from surfcast.cache.models import Verdict
from surfcast.errors import ReportParseError
from surfcast.scoring.quality import ScoreResult

logger = logging.getLogger(__name__)

VERDICT_PATTERN = re.compile(r"\b(NO[\s_-]?GO|CONDITIONN?[AE]L|GO)\b", re.IGNORECASE)
FENCE_PATTERN = re.compile(r"^```[a-zA-Z]*\s*|\s*```$")
TITLE_PREFIX = re.compile(r"^(#+\s*|\*+|title\s*:\s*|titre\s*:\s*)", re.IGNORECASE)

# Verdict thresholds for reports synthesized from the quality score alone
GO_SCORE = 60
CONDITIONAL_SCORE = 40


@dataclass
class Report:
    """Narrative surf report."""

    title: str
    summary: str
    verdict: Verdict

    def to_dict(self) -> dict:
        return {"title": self.title, "summary": self.summary, "verdict": self.verdict.value}


@dataclass
class ParseOk:
    report: Report


@dataclass
class ParseErr:
    error: ReportParseError


ParseResult = Union[ParseOk, ParseErr]


def normalize_verdict(raw: object) -> Optional[Verdict]:
    """Map a loosely formatted verdict onto GO, CONDITIONAL or NO-GO.

    Examples:
        >>> normalize_verdict(" go ")
        <Verdict.GO: 'GO'>
        >>> normalize_verdict("No Go - onshore")
        <Verdict.NO_GO: 'NO-GO'>
        >>> normalize_verdict("maybe") is None
        True
    """
    if not isinstance(raw, str):
        return None
    match = VERDICT_PATTERN.search(raw)
    if match is None:
        return None

    token = re.sub(r"[\s_-]", "", match.group(1)).upper()
    if token == "NOGO":
        return Verdict.NO_GO
    if token == "GO":
        return Verdict.GO
    return Verdict.CONDITIONAL


def strip_code_fences(text: str) -> str:
    """Remove a surrounding ```json ... ``` fence, if any."""
    return FENCE_PATTERN.sub("", text.strip()).strip()


def extract_first_object(text: str) -> Optional[str]:
    """Return the first balanced top-level {...} block in text.

    Braces inside JSON strings are ignored.
    """
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
            elif ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start:i + 1]
        start = text.find("{", start + 1)
    return None


def _report_from_mapping(data: object) -> Report:
    if not isinstance(data, dict):
        raise ValueError(f"expected a JSON object, got {type(data).__name__}")

    title = data.get("title")
    summary = data.get("summary")
    if not isinstance(title, str) or not title.strip():
        raise ValueError("missing title")
    if not isinstance(summary, str) or not summary.strip():
        raise ValueError("missing summary")

    verdict = normalize_verdict(data.get("verdict"))
    if verdict is None:
        raise ValueError(f"unknown verdict {data.get('verdict')!r}")

    return Report(title=title.strip(), summary=summary.strip(), verdict=verdict)


def _parse_json(text: str) -> Report:
    try:
        data = json.loads(strip_code_fences(text))
    except json.JSONDecodeError as e:
        raise ValueError(f"not JSON: {e.msg}") from e
    return _report_from_mapping(data)


def _parse_embedded_json(text: str) -> Report:
    block = extract_first_object(text)
    if block is None:
        raise ValueError("no JSON object found")
    try:
        data = json.loads(block)
    except json.JSONDecodeError as e:
        raise ValueError(f"embedded object is not JSON: {e.msg}") from e
    return _report_from_mapping(data)


def _parse_plain_text(text: str) -> Report:
    lines = [line.strip() for line in strip_code_fences(text).splitlines() if line.strip()]
    if len(lines) < 2:
        raise ValueError("too few lines for a plain-text report")

    verdict_index = None
    verdict = None
    for i in range(len(lines) - 1, 0, -1):
        verdict = normalize_verdict(lines[i])
        if verdict is not None:
            verdict_index = i
            break
    if verdict_index is None:
        raise ValueError("no verdict line")

    title = TITLE_PREFIX.sub("", lines[0]).strip("* ").strip()
    summary = " ".join(lines[1:verdict_index]).strip()
    if not summary:
        # Verdict line doubles as the summary ("Verdict: GO - clean and pumping")
        summary = lines[verdict_index]
    if not title:
        raise ValueError("missing title")

    return Report(title=title, summary=summary, verdict=verdict)


_ATTEMPTS = [
    ("json", _parse_json),
    ("embedded-json", _parse_embedded_json),
    ("plain-text", _parse_plain_text),
]


def parse_report(text: Optional[str]) -> ParseResult:
    """Parse model output into a Report.

    Args:
        text: Raw completion text

    Returns:
        ParseOk(report) from the first attempt that validates, else
        ParseErr(ReportParseError) carrying every attempt's failure
    """
    if not text or not text.strip():
        return ParseErr(ReportParseError("empty model output", ["empty"]))

    failures = []
    for name, attempt in _ATTEMPTS:
        try:
            report = attempt(text)
        except ValueError as e:
            failures.append(f"{name}: {e}")
            continue
        if name != "json":
            logger.info(f"Report parsed via {name} fallback")
        return ParseOk(report)

    logger.warning(f"Unparseable model output ({'; '.join(failures)})")
    return ParseErr(ReportParseError("could not parse model output", failures))


def verdict_for_score(score: float) -> Verdict:
    """Coarse verdict from a quality score alone."""
    if score >= GO_SCORE:
        return Verdict.GO
    if score >= CONDITIONAL_SCORE:
        return Verdict.CONDITIONAL
    return Verdict.NO_GO


def default_report(quality: Optional[ScoreResult], locale: str = "en") -> Report:
    """Minimal report used when no narrative can be generated or served."""
    french = locale == "fr"
    if quality is None:
        return Report(
            title="Conditions en direct indisponibles" if french else "Live conditions unavailable",
            summary=(
                "Les données marines sont momentanément indisponibles. Réessayez plus tard."
                if french
                else "Marine data is temporarily unavailable. Check back shortly."
            ),
            verdict=Verdict.CONDITIONAL,
        )

    score = round(quality.score)
    return Report(
        title=f"{quality.rating} ({score}/100)",
        summary=(
            f"Rapport automatique : score de qualité {score}/100 ({quality.rating})."
            if french
            else f"Automatic summary: quality score {score}/100 ({quality.rating})."
        ),
        verdict=verdict_for_score(quality.score),
    )
