"""
Learning Material Service
Generates bite-sized reading material for a roadmap checkpoint. The
cleaner never raises, so only backend and repair errors propagate.
"""
import logging
from functools import partial

from app.llm.gateway import StructuredGenerationGateway
from app.llm.prompts import LEARNING_MATERIAL_SCHEMA, build_learning_material_prompt
from app.models.learning_material import LearningMaterial
from app.postprocess.learning_material import normalize_learning_material

logger = logging.getLogger(__name__)


class LearningMaterialService:

    def __init__(self, gateway: StructuredGenerationGateway) -> None:
        self.gateway = gateway

    async def generate_learning_material(
        self,
        goal_title: str,
        goal_description: str,
        checkpoint_title: str,
        checkpoint_description: str,
        language: str,
    ) -> LearningMaterial:
        prompt = build_learning_material_prompt(
            goal_title, goal_description, checkpoint_title, checkpoint_description, language,
        )
        material = await self.gateway.generate(
            prompt,
            LEARNING_MATERIAL_SCHEMA,
            partial(normalize_learning_material, fallback_title=checkpoint_title),
        )
        logger.info(
            "Generated learning material '%s' (%d sections, ~%d min)",
            material.title, len(material.sections), material.estimated_time_minutes,
        )
        return material
