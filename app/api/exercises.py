"""
Exercise Endpoints
==================
POST /exercises/generate     — exercise for a roadmap checkpoint
POST /exercises/review       — two-step code review
POST /exercises/review/chat  — follow-up question about a review

Core errors are not caught here; the handlers registered in main.py map
them to HTTP status codes.
"""
import logging
from typing import List

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_exercise_service
from app.models.code_review import CodeReviewResult, ReviewComment
from app.models.exercise import GeneratedExercise
from app.services.exercise_service import ExerciseService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/exercises", tags=["Exercises"])


# ---------------------------------------------------------------------------
# Request / Response schemas
# ---------------------------------------------------------------------------
class GenerateExerciseRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    goal_title: str = Field(alias="goalTitle")
    checkpoint_title: str = Field(alias="checkpointTitle")
    checkpoint_description: str = Field(default="", alias="checkpointDescription")
    language: str = "JavaScript"


class ReviewRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_title: str = Field(alias="exerciseTitle")
    exercise_description: str = Field(default="", alias="exerciseDescription")
    language: str = ""
    code: str


class ReviewChatRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    exercise_title: str = Field(alias="exerciseTitle")
    language: str = ""
    code: str
    comments: List[ReviewComment] = Field(default_factory=list)
    message: str


class ReviewChatResponse(BaseModel):
    reply: str


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------
@router.post("/generate", response_model=GeneratedExercise)
async def generate_exercise(
    request: GenerateExerciseRequest,
    service: ExerciseService = Depends(get_exercise_service),
) -> GeneratedExercise:
    return await service.generate_exercise(
        request.goal_title,
        request.checkpoint_title,
        request.checkpoint_description,
        request.language,
    )


@router.post("/review", response_model=CodeReviewResult)
async def review_code(
    request: ReviewRequest,
    service: ExerciseService = Depends(get_exercise_service),
) -> CodeReviewResult:
    logger.info("Reviewing %d-line %s submission", len(request.code.splitlines()), request.language or "code")
    return await service.review_code(
        request.exercise_title,
        request.exercise_description,
        request.language,
        request.code,
    )


@router.post("/review/chat", response_model=ReviewChatResponse)
async def chat_about_review(
    request: ReviewChatRequest,
    service: ExerciseService = Depends(get_exercise_service),
) -> ReviewChatResponse:
    reply = await service.chat_about_review(
        request.exercise_title,
        request.language,
        request.code,
        request.comments,
        request.message,
    )
    return ReviewChatResponse(reply=reply)
