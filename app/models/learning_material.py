"""
Learning Material Model
Pydantic models for the bite-sized reading material shown before a
checkpoint's exercises.
"""
from typing import List

from pydantic import BaseModel, ConfigDict, Field


class LearningSection(BaseModel):
    heading: str
    body: str


class CodeExample(BaseModel):
    language: str
    code: str
    explanation: str = ""


class LearningMaterial(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str
    overview: str
    sections: List[LearningSection]
    estimated_time_minutes: int = Field(alias="estimatedTimeMinutes")
    code_examples: List[CodeExample] = Field(default_factory=list, alias="codeExamples")
