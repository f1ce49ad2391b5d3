"""
Code Review Normalizer
======================
Turns a repaired review completion into a CodeReviewResult.

Policy: NEVER raises. A partially-correct review is more useful to a
learner than a failed one, so every field falls back to a default.

Rules:
    - comments        → array (empty if absent / not an array); non-object
                        entries are dropped
    - lineRange       → (min, max) of two non-negative integers, else (1, 1);
                        bounds too large for a float also give (1, 1)
    - type            → suggestion | issue | praise ("error" → issue,
                        anything else → suggestion)
    - severity        → low | medium | high, default high for issues,
                        medium otherwise
    - comments order  → stable sort by lineRange start
    - summary         → three strings, named defaults for missing ones
    - score           → rounded integer clamped to [0, 100] (huge values
                        clamp by sign), 70 if missing, NaN or not a number

Normalising an already-normalised review (dumped by alias) is a no-op.
"""
from typing import Any, Optional, Tuple

from app.core.constants import (
    DEFAULT_LINE_RANGE,
    DEFAULT_REVIEW_SCORE,
    DEFAULT_SUMMARY_ASSESSMENT,
    DEFAULT_SUMMARY_IMPROVEMENTS,
    DEFAULT_SUMMARY_STRENGTHS,
    MAX_REVIEW_SCORE,
    MIN_REVIEW_SCORE,
)
from app.models.code_review import (
    CodeReviewResult,
    CommentKind,
    ReviewComment,
    ReviewSummary,
    Severity,
)
from app.postprocess.values import (
    as_clamped_int,
    as_list,
    as_mapping,
    as_number,
    as_text,
    is_blank,
    round_half_up,
)

# Accepted spellings → canonical kind. "error" is the legacy name of "issue".
KIND_ALIASES = {
    "suggestion": CommentKind.SUGGESTION,
    "issue": CommentKind.ISSUE,
    "error": CommentKind.ISSUE,
    "praise": CommentKind.PRAISE,
}

_SEVERITIES = {s.value: s for s in Severity}


def normalize_review(value: Any) -> CodeReviewResult:
    data = as_mapping(value)

    comments = []
    for raw in as_list(data.get("comments")):
        if not isinstance(raw, dict):
            continue
        comments.append(_normalize_comment(raw))
    # sorted() is stable: equal starts keep model order
    comments = sorted(comments, key=lambda c: c.line_range[0])

    return CodeReviewResult(
        comments=comments,
        summary=_normalize_summary(data.get("summary")),
        score=normalize_score(data.get("score")),
    )


def _normalize_comment(raw: dict) -> ReviewComment:
    kind = coerce_kind(_first_present(raw, "type", "kind"))
    text = _first_present(raw, "comment", "text")
    if text is None:
        text = ""
    elif not isinstance(text, str):
        text = str(text)
    return ReviewComment(
        line_range=normalize_line_range(raw.get("lineRange")),
        kind=kind,
        comment=text,
        severity=coerce_severity(raw.get("severity"), kind),
    )


def _first_present(raw: dict, *keys: str) -> Any:
    """First non-null value among ``keys``; the model may null one spelling."""
    for key in keys:
        if raw.get(key) is not None:
            return raw[key]
    return None


def normalize_line_range(value: Any) -> Tuple[int, int]:
    if isinstance(value, dict):
        value = [value.get("start"), value.get("end")]
    bounds = as_list(value)
    if len(bounds) != 2:
        return DEFAULT_LINE_RANGE
    first, second = as_number(bounds[0]), as_number(bounds[1])
    if first is None or second is None:
        return DEFAULT_LINE_RANGE
    a = max(0, round_half_up(first))
    b = max(0, round_half_up(second))
    return (min(a, b), max(a, b))


def coerce_kind(value: Any) -> CommentKind:
    text = as_text(value)
    if text is None:
        return CommentKind.SUGGESTION
    return KIND_ALIASES.get(text.strip().lower(), CommentKind.SUGGESTION)


def coerce_severity(value: Any, kind: CommentKind) -> Severity:
    text = as_text(value)
    if text is not None and text.strip().lower() in _SEVERITIES:
        return _SEVERITIES[text.strip().lower()]
    return Severity.HIGH if kind == CommentKind.ISSUE else Severity.MEDIUM


def normalize_score(value: Any) -> int:
    score: Optional[int] = as_clamped_int(value, MIN_REVIEW_SCORE, MAX_REVIEW_SCORE)
    return DEFAULT_REVIEW_SCORE if score is None else score


def _normalize_summary(value: Any) -> ReviewSummary:
    data = as_mapping(value)

    def pick(key: str, default: str) -> str:
        field = data.get(key)
        return default if is_blank(field) else field

    return ReviewSummary(
        strengths=pick("strengths", DEFAULT_SUMMARY_STRENGTHS),
        improvements=pick("improvements", DEFAULT_SUMMARY_IMPROVEMENTS),
        overall_assessment=pick("overallAssessment", DEFAULT_SUMMARY_ASSESSMENT),
    )
