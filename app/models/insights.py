"""
Dashboard Insights Models
Pydantic models for the learner dashboard insight lists and the activity
records they are inferred from.
"""
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class DashboardInsights(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    strong_points: List[str] = Field(default_factory=list, alias="strongPoints")
    skills_to_strengthen: List[str] = Field(default_factory=list, alias="skillsToStrengthen")


class ActivityRecord(BaseModel):
    """One exercise progress row, as supplied by the persistence layer."""
    model_config = ConfigDict(populate_by_name=True)

    status: str = "NOT_STARTED"
    grade: Optional[float] = None
    language: str = "Unknown"
    difficulty: str = "UNKNOWN"
    title: str = ""
    review_summary: Optional[str] = Field(default=None, alias="reviewSummary")
