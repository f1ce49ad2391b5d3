"""
Goal Service
============
Call sites used while a learner sets up a goal.

Operations:
    generate_customization_questions — questionnaire before the roadmap
    generate_roadmap                 — ordered checkpoints (strict)
    detect_language                  — best-fit language for the goal
    enhance_description              — professional goal description

Failure policy:
    Only the questionnaire degrades on failure: a backend error or an
    unrepairable completion yields MINIMAL_FALLBACK_QUESTIONS so goal setup
    can continue. Every other operation propagates the core errors.
"""
import logging
from typing import List, Optional, Sequence

from app.core.errors import CompletionBackendError, UnrepairableResponseError
from app.llm.gateway import StructuredGenerationGateway
from app.llm.prompts import (
    DESCRIPTION_SCHEMA,
    LANGUAGE_SCHEMA,
    QUESTIONS_SCHEMA,
    ROADMAP_SCHEMA,
    build_description_prompt,
    build_language_prompt,
    build_questions_prompt,
    build_roadmap_prompt,
)
from app.models.roadmap import CustomizationAnswer, CustomizationQuestion, RoadmapPlan
from app.postprocess.goals import (
    MINIMAL_FALLBACK_QUESTIONS,
    normalize_description,
    normalize_language,
    normalize_questions,
)
from app.postprocess.roadmap import normalize_roadmap

logger = logging.getLogger(__name__)


class GoalService:

    def __init__(self, gateway: StructuredGenerationGateway) -> None:
        self.gateway = gateway

    async def generate_roadmap(
        self,
        title: str,
        description: Optional[str] = None,
        answers: Optional[Sequence[CustomizationAnswer]] = None,
    ) -> RoadmapPlan:
        """
        Generate the checkpoint roadmap for a goal.

        Raises
        ------
        ValidationError
            The completion has no usable checkpoint list.
        """
        prompt = build_roadmap_prompt(title, description, answers)
        plan = await self.gateway.generate(prompt, ROADMAP_SCHEMA, normalize_roadmap)
        logger.info("Generated roadmap with %d checkpoints", len(plan.checkpoints))
        return plan

    async def generate_customization_questions(
        self,
        title: str,
        description: Optional[str] = None,
    ) -> List[CustomizationQuestion]:
        prompt = build_questions_prompt(title, description)
        try:
            return await self.gateway.generate(prompt, QUESTIONS_SCHEMA, normalize_questions)
        except (CompletionBackendError, UnrepairableResponseError) as e:
            logger.warning("Question generation failed, using fallback questions: %s", e)
            return [q.model_copy(deep=True) for q in MINIMAL_FALLBACK_QUESTIONS]

    async def detect_language(self, title: str, description: Optional[str] = None) -> str:
        prompt = build_language_prompt(title, description)
        language = await self.gateway.generate(prompt, LANGUAGE_SCHEMA, normalize_language)
        logger.info("Detected language: %s", language)
        return language

    async def enhance_description(self, title: str, description: Optional[str] = None) -> str:
        prompt = build_description_prompt(title, description)
        return await self.gateway.generate(prompt, DESCRIPTION_SCHEMA, normalize_description)
