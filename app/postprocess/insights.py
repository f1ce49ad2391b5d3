"""
Insights Clamp
Coerces a repaired insights completion into DashboardInsights. Never
raises: non-arrays become empty lists, non-string and blank entries are
dropped, and each list is cut to MAX_INSIGHT_ITEMS.
"""
from typing import Any, List

from app.core.constants import MAX_INSIGHT_ITEMS
from app.models.insights import DashboardInsights
from app.postprocess.values import as_list, as_mapping


def normalize_insights(value: Any) -> DashboardInsights:
    data = as_mapping(value)
    return DashboardInsights(
        strong_points=_clamp(data.get("strongPoints")),
        skills_to_strengthen=_clamp(data.get("skillsToStrengthen")),
    )


def _clamp(value: Any) -> List[str]:
    items = [item.strip() for item in as_list(value) if isinstance(item, str) and item.strip()]
    return items[:MAX_INSIGHT_ITEMS]
