"""
Code Review Model
=================
Pydantic models for a normalised code review.

Fields (ReviewComment):
    line_range  — (start, end), non-negative, start <= end   (wire: lineRange)
    kind        — suggestion | issue | praise                (wire: type)
    comment     — feedback text
    severity    — low | medium | high

The legacy "error" kind is only ever a coercion INPUT; it maps to "issue"
and is never emitted.
"""
from enum import Enum
from typing import List, Tuple

from pydantic import BaseModel, ConfigDict, Field


class CommentKind(str, Enum):
    SUGGESTION = "suggestion"
    ISSUE = "issue"
    PRAISE = "praise"


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ReviewComment(BaseModel):
    model_config = ConfigDict(populate_by_name=True, use_enum_values=True)

    line_range: Tuple[int, int] = Field(alias="lineRange")
    kind: CommentKind = Field(alias="type")
    comment: str = ""
    severity: Severity


class ReviewSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    strengths: str
    improvements: str
    overall_assessment: str = Field(alias="overallAssessment")


class CodeReviewResult(BaseModel):
    comments: List[ReviewComment] = []
    summary: ReviewSummary
    score: int = Field(ge=0, le=100)
