"""
Generated Exercise Model
Pydantic model for an LLM-generated coding exercise. Every field is
required: an exercise without a solution or test cases is unusable.
"""
from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field


class ExerciseTestCase(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    input: Any = None
    expected_output: Any = Field(default=None, alias="expectedOutput")


class GeneratedExercise(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    description: str
    initial_code: str = Field(alias="initialCode")
    solution: str
    hints: List[str]
    test_cases: List[ExerciseTestCase] = Field(alias="testCases")
