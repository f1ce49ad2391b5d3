"""
Learning Material Cleaner
=========================
Coerces a repaired learning-material completion into LearningMaterial.

Policy: never raises; reading material degrades gracefully.
    - title                → falls back to the checkpoint title
    - overview             → DEFAULT_MATERIAL_OVERVIEW
    - sections             → only entries with heading AND body; when none
                             survive, one "Understanding <title>" section
                             carrying the overview
    - estimatedTimeMinutes → default 8 (also for 0), clamped to [3, 20]
    - codeExamples         → only entries with language AND code
"""
from typing import Any, List

from app.core.constants import (
    DEFAULT_ESTIMATED_MINUTES,
    DEFAULT_MATERIAL_OVERVIEW,
    MAX_ESTIMATED_MINUTES,
    MIN_ESTIMATED_MINUTES,
)
from app.models.learning_material import CodeExample, LearningMaterial, LearningSection
from app.postprocess.values import as_list, as_mapping, as_number, as_text, is_blank, round_half_up


def normalize_learning_material(value: Any, fallback_title: str) -> LearningMaterial:
    data = as_mapping(value)

    title = data.get("title")
    title = fallback_title if is_blank(title) else title
    overview = data.get("overview")
    overview = DEFAULT_MATERIAL_OVERVIEW if is_blank(overview) else overview

    sections = _sections(data.get("sections"))
    if not sections:
        sections = [LearningSection(heading=f"Understanding {fallback_title}", body=overview)]

    return LearningMaterial(
        title=title,
        overview=overview,
        sections=sections,
        estimated_time_minutes=_minutes(data.get("estimatedTimeMinutes")),
        code_examples=_code_examples(data.get("codeExamples")),
    )


def _sections(value: Any) -> List[LearningSection]:
    sections = []
    for raw in as_list(value):
        item = as_mapping(raw)
        heading, body = item.get("heading"), item.get("body")
        if is_blank(heading) or is_blank(body):
            continue
        sections.append(LearningSection(heading=heading, body=body))
    return sections


def _code_examples(value: Any) -> List[CodeExample]:
    examples = []
    for raw in as_list(value):
        item = as_mapping(raw)
        language, code = item.get("language"), item.get("code")
        if is_blank(language) or is_blank(code):
            continue
        examples.append(CodeExample(
            language=language,
            code=code,
            explanation=as_text(item.get("explanation")) or "",
        ))
    return examples


def _minutes(value: Any) -> int:
    number = as_number(value)
    minutes = DEFAULT_ESTIMATED_MINUTES if not number else round_half_up(number)
    return max(MIN_ESTIMATED_MINUTES, min(MAX_ESTIMATED_MINUTES, minutes))
