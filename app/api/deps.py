"""
API Dependencies
================
FastAPI dependency providers shared by the routers.

The gateway and the insights store are process-wide singletons created on
first use. Tests replace them through ``app.dependency_overrides``.
"""
import logging
from typing import Optional

from fastapi import Depends

from app.llm.client import LLMClient
from app.llm.gateway import StructuredGenerationGateway
from app.services.exercise_service import ExerciseService
from app.services.goal_service import GoalService
from app.services.insights_service import InMemoryInsightsStore, InsightsService, InsightsStore
from app.services.learning_material_service import LearningMaterialService

logger = logging.getLogger(__name__)

_gateway: Optional[StructuredGenerationGateway] = None
_insights_store: Optional[InsightsStore] = None


def get_gateway() -> StructuredGenerationGateway:
    global _gateway
    if _gateway is None:
        client = LLMClient()
        logger.info("Structured generation gateway using provider '%s'", client.name)
        _gateway = StructuredGenerationGateway(client)
    return _gateway


def get_insights_store() -> InsightsStore:
    global _insights_store
    if _insights_store is None:
        _insights_store = InMemoryInsightsStore()
    return _insights_store


async def close_gateway() -> None:
    """Release the backend's HTTP client on shutdown."""
    global _gateway
    if _gateway is not None and isinstance(_gateway.backend, LLMClient):
        await _gateway.backend.close()
    _gateway = None


def get_exercise_service(
    gateway: StructuredGenerationGateway = Depends(get_gateway),
) -> ExerciseService:
    return ExerciseService(gateway)


def get_goal_service(
    gateway: StructuredGenerationGateway = Depends(get_gateway),
) -> GoalService:
    return GoalService(gateway)


def get_learning_material_service(
    gateway: StructuredGenerationGateway = Depends(get_gateway),
) -> LearningMaterialService:
    return LearningMaterialService(gateway)


def get_insights_service(
    gateway: StructuredGenerationGateway = Depends(get_gateway),
    store: InsightsStore = Depends(get_insights_store),
) -> InsightsService:
    return InsightsService(gateway, store)
