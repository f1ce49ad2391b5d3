"""
Roadmap Models
==============
Pydantic models for goal roadmaps and the customization questionnaire
that precedes roadmap generation.

Fields (Checkpoint):
    title        — milestone name
    description  — what to learn and why
    order        — 1-based position; re-sequenced when missing or colliding
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class Checkpoint(BaseModel):
    title: str
    description: str
    order: int


class RoadmapPlan(BaseModel):
    checkpoints: List[Checkpoint]


class CustomizationQuestion(BaseModel):
    id: str
    question: str
    type: str  # text | select | multiselect
    options: Optional[List[str]] = None


class CustomizationAnswer(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    question_id: str = Field(alias="questionId")
    answer: str
