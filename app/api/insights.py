"""
POST /insights
==============
Dashboard insights for a learner. The caller supplies the recent activity
rows; stored insights younger than the TTL are returned without an LLM
call. ``insights`` is null when there is no activity.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel, ConfigDict, Field

from app.api.deps import get_insights_service
from app.models.insights import ActivityRecord, DashboardInsights
from app.services.insights_service import InsightsService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Insights"])


class InsightsRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(alias="userId")
    activity: List[ActivityRecord] = Field(default_factory=list)
    force: bool = False


class InsightsResponse(BaseModel):
    insights: Optional[DashboardInsights] = None


@router.post("/insights", response_model=InsightsResponse)
async def get_insights(
    request: InsightsRequest,
    service: InsightsService = Depends(get_insights_service),
) -> InsightsResponse:
    insights = await service.get_insights(request.user_id, request.activity, force=request.force)
    return InsightsResponse(insights=insights)
