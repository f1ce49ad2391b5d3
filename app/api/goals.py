"""
Goal Endpoints
==============
POST /goals/questions          — customization questionnaire
POST /goals/roadmap            — checkpoint roadmap
POST /goals/language           — detected programming language
POST /goals/description        — enhanced goal description
POST /goals/learning-material  — reading material for one checkpoint
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_goal_service, get_learning_material_service
from app.models.learning_material import LearningMaterial
from app.models.roadmap import CustomizationAnswer, CustomizationQuestion, RoadmapPlan
from app.services.goal_service import GoalService
from app.services.learning_material_service import LearningMaterialService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/goals", tags=["Goals"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------
class GoalRequest(BaseModel):
    title: str
    description: Optional[str] = None


class RoadmapRequest(GoalRequest):
    answers: List[CustomizationAnswer] = Field(default_factory=list)


class QuestionsResponse(BaseModel):
    questions: List[CustomizationQuestion]


class LanguageResponse(BaseModel):
    language: str


class DescriptionResponse(BaseModel):
    description: str


class LearningMaterialRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goal_title: str = Field(alias="goalTitle")
    goal_description: str = Field(default="", alias="goalDescription")
    checkpoint_title: str = Field(alias="checkpointTitle")
    checkpoint_description: str = Field(default="", alias="checkpointDescription")
    language: str = "JavaScript"


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/questions", response_model=QuestionsResponse)
async def generate_questions(
    request: GoalRequest,
    service: GoalService = Depends(get_goal_service),
) -> QuestionsResponse:
    questions = await service.generate_customization_questions(request.title, request.description)
    return QuestionsResponse(questions=questions)


@router.post("/roadmap", response_model=RoadmapPlan)
async def generate_roadmap(
    request: RoadmapRequest,
    service: GoalService = Depends(get_goal_service),
) -> RoadmapPlan:
    return await service.generate_roadmap(request.title, request.description, request.answers)


@router.post("/language", response_model=LanguageResponse)
async def detect_language(
    request: GoalRequest,
    service: GoalService = Depends(get_goal_service),
) -> LanguageResponse:
    language = await service.detect_language(request.title, request.description)
    return LanguageResponse(language=language)


@router.post("/description", response_model=DescriptionResponse)
async def enhance_description(
    request: GoalRequest,
    service: GoalService = Depends(get_goal_service),
) -> DescriptionResponse:
    description = await service.enhance_description(request.title, request.description)
    return DescriptionResponse(description=description)


@router.post("/learning-material", response_model=LearningMaterial)
async def generate_learning_material(
    request: LearningMaterialRequest,
    service: LearningMaterialService = Depends(get_learning_material_service),
) -> LearningMaterial:
    return await service.generate_learning_material(
        request.goal_title,
        request.goal_description,
        request.checkpoint_title,
        request.checkpoint_description,
        request.language,
    )
