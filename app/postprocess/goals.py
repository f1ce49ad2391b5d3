"""
Goal Post-Processors
====================
Small normalisers for the goal-setup call sites.

normalize_questions   — customization questionnaire (never raises; falls
                        back to FALLBACK_QUESTIONS)
normalize_language    — maps a detected language onto SUPPORTED_LANGUAGES
                        (never raises; DEFAULT_LANGUAGE)
normalize_description — enhanced goal description (raises ValidationError)
"""
from typing import Any, List

from app.core.constants import DEFAULT_LANGUAGE, QUESTION_TYPES, SUPPORTED_LANGUAGES
from app.core.errors import ValidationError
from app.models.roadmap import CustomizationQuestion
from app.postprocess.values import as_list, as_mapping, as_text, is_blank

FALLBACK_QUESTIONS: List[CustomizationQuestion] = [
    CustomizationQuestion(
        id="q1",
        question="How comprehensive do you want your learning to be?",
        type="select",
        options=["Foundational basics", "Intermediate depth", "In-depth mastery"],
    ),
    CustomizationQuestion(
        id="q2",
        question="How much time can you dedicate weekly to practice?",
        type="select",
        options=["2-3 hours", "4-6 hours", "7-10 hours", "10+ hours"],
    ),
    CustomizationQuestion(
        id="q3",
        question="What's your current programming experience?",
        type="select",
        options=["None", "Some", "Experienced"],
    ),
    CustomizationQuestion(
        id="q4",
        question="Which languages are you comfortable with? (if any)",
        type="multiselect",
        options=[
            "JavaScript", "Python", "Java", "C#", "C++", "Go", "TypeScript",
            "Other (specify)",
        ],
    ),
    CustomizationQuestion(
        id="q5",
        question="What would you like to focus on first?",
        type="multiselect",
        options=[
            "Core fundamentals",
            "Problem solving/algorithms",
            "Building small projects",
            "Debugging and testing",
        ],
    ),
]

# Shorter set used when the completion call itself fails
MINIMAL_FALLBACK_QUESTIONS = FALLBACK_QUESTIONS[:3]

LANGUAGE_ALIASES = {
    **{name.lower(): name for name in SUPPORTED_LANGUAGES},
    "js": "JavaScript",
    "ts": "TypeScript",
    "csharp": "C#",
    "golang": "Go",
    "html": "HTML/CSS",
    "css": "HTML/CSS",
}


def normalize_questions(value: Any) -> List[CustomizationQuestion]:
    """Accepts a bare array, {"questions": [...]} or {"data": {"questions": [...]}}."""
    if isinstance(value, list):
        raw_questions = value
    else:
        data = as_mapping(value)
        raw_questions = as_list(data.get("questions")) or as_list(
            as_mapping(data.get("data")).get("questions")
        )

    questions = []
    for raw in raw_questions:
        item = as_mapping(raw)
        question, kind = item.get("question"), as_text(item.get("type"))
        if is_blank(question) or kind not in QUESTION_TYPES:
            continue
        options = None
        if kind in ("select", "multiselect") and isinstance(item.get("options"), list):
            options = [str(option) for option in item["options"]]
        question_id = item.get("id")
        questions.append(CustomizationQuestion(
            id=question_id if not is_blank(question_id) else f"q{len(questions) + 1}",
            question=question,
            type=kind,
            options=options,
        ))

    if not questions:
        return [q.model_copy(deep=True) for q in FALLBACK_QUESTIONS]
    return questions


def normalize_language(value: Any) -> str:
    raw = value if isinstance(value, str) else as_mapping(value).get("language")
    text = as_text(raw)
    if text is None or not text.strip():
        return DEFAULT_LANGUAGE
    return LANGUAGE_ALIASES.get(text.strip().lower(), DEFAULT_LANGUAGE)


def normalize_description(value: Any) -> str:
    description = as_mapping(value).get("description")
    if is_blank(description):
        raise ValidationError("description", "must be a non-empty string")
    return description.strip()
