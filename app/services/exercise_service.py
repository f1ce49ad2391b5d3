"""
Exercise Service
================
Call sites for exercise generation, code review and review chat.

Review flow (two LLM calls):
    1. Draft   — free-text feedback points via generate_text
    2. Mapping — the draft is mapped onto line ranges and scored via
                 generate_structured, then normalize_review

Only exercise generation is strict; a review always yields a usable
CodeReviewResult once the mapping completion parses.
"""
import logging
from typing import Sequence

from app.llm.gateway import StructuredGenerationGateway
from app.llm.prompts import (
    EXERCISE_SCHEMA,
    REVIEW_SCHEMA,
    build_exercise_prompt,
    build_review_chat_prompt,
    build_review_draft_prompt,
    build_review_mapping_prompt,
)
from app.models.code_review import CodeReviewResult, ReviewComment
from app.models.exercise import GeneratedExercise
from app.postprocess.chat import clean_chat_reply
from app.postprocess.exercise import normalize_exercise
from app.postprocess.review import normalize_review

logger = logging.getLogger(__name__)


class ExerciseService:
    """
    Usage:
        service = ExerciseService(gateway)
        exercise = await service.generate_exercise("Learn Python", "Loops", "...", "Python")
        review = await service.review_code(exercise.title, exercise.description, "Python", code)
    """

    def __init__(self, gateway: StructuredGenerationGateway) -> None:
        self.gateway = gateway

    async def generate_exercise(
        self,
        goal_title: str,
        checkpoint_title: str,
        checkpoint_description: str,
        language: str,
    ) -> GeneratedExercise:
        """
        Generate one exercise for a roadmap checkpoint.

        Raises
        ------
        ValidationError
            A required exercise field is missing or has the wrong type.
        """
        prompt = build_exercise_prompt(goal_title, checkpoint_title, checkpoint_description, language)
        exercise = await self.gateway.generate(prompt, EXERCISE_SCHEMA, normalize_exercise)
        logger.info(
            "Generated exercise '%s' with %d test cases",
            exercise.title, len(exercise.test_cases),
        )
        return exercise

    async def review_code(
        self,
        exercise_title: str,
        exercise_description: str,
        language: str,
        code: str,
    ) -> CodeReviewResult:
        """
        Review a submission against its exercise.

        Parameters
        ----------
        exercise_title : str
            Title of the exercise the code was written for.
        exercise_description : str
            Problem statement shown to the learner.
        language : str
            Language of the submission (used for fences in prompts).
        code : str
            The submitted source code.

        Returns
        -------
        CodeReviewResult
            Comments sorted by start line, a complete summary and a score
            in [0, 100].
        """
        draft = await self.gateway.generate_text(
            build_review_draft_prompt(exercise_title, exercise_description, language, code)
        )
        logger.debug("Review draft received (%d chars)", len(draft))

        result = await self.gateway.generate(
            build_review_mapping_prompt(language, code, draft),
            REVIEW_SCHEMA,
            normalize_review,
        )
        logger.info("Review complete: %d comments, score %d", len(result.comments), result.score)
        return result

    async def chat_about_review(
        self,
        exercise_title: str,
        language: str,
        code: str,
        comments: Sequence[ReviewComment],
        message: str,
    ) -> str:
        prompt = build_review_chat_prompt(exercise_title, language, code, comments, message)
        reply = await self.gateway.generate_text(prompt)
        return clean_chat_reply(reply)
