"""
Exercise Builder
================
Validates a repaired exercise completion into a GeneratedExercise.

Policy: STRICT. An exercise missing its solution or test cases cannot be
used, so any missing/unconvertible required field raises ValidationError
naming the field. Nothing is silently defaulted.

Required:
    title, description, initialCode, solution  — strings (may be empty)
    hints                                      — array of strings
    testCases                                  — array of {input, expectedOutput}
"""
from typing import Any, List

from app.core.errors import ValidationError
from app.models.exercise import ExerciseTestCase, GeneratedExercise
from app.postprocess.values import as_text

REQUIRED_TEXT_FIELDS = ("title", "description", "initialCode", "solution")


def normalize_exercise(value: Any) -> GeneratedExercise:
    if not isinstance(value, dict):
        raise ValidationError("exercise", "expected a JSON object")

    fields = {}
    for name in REQUIRED_TEXT_FIELDS:
        if name not in value:
            raise ValidationError(name, "is required")
        text = as_text(value[name])
        if text is None:
            raise ValidationError(name, "must be a string")
        fields[name] = text

    return GeneratedExercise(
        title=fields["title"],
        description=fields["description"],
        initial_code=fields["initialCode"],
        solution=fields["solution"],
        hints=_hints(value),
        test_cases=_test_cases(value),
    )


def _require_array(value: dict, name: str) -> List[Any]:
    if name not in value:
        raise ValidationError(name, "is required")
    items = value[name]
    if not isinstance(items, list):
        raise ValidationError(name, "must be an array")
    return items


def _hints(value: dict) -> List[str]:
    hints = []
    for index, hint in enumerate(_require_array(value, "hints")):
        if isinstance(hint, str):
            hints.append(hint)
        elif isinstance(hint, (int, float)) and not isinstance(hint, bool):
            hints.append(str(hint))
        else:
            raise ValidationError(f"hints[{index}]", "must be a string")
    return hints


def _test_cases(value: dict) -> List[ExerciseTestCase]:
    cases = []
    for index, case in enumerate(_require_array(value, "testCases")):
        if not isinstance(case, dict):
            raise ValidationError(f"testCases[{index}]", "must be an object")
        for key in ("input", "expectedOutput"):
            if key not in case:
                raise ValidationError(f"testCases[{index}].{key}", "is required")
        cases.append(ExerciseTestCase(input=case["input"], expected_output=case["expectedOutput"]))
    return cases
