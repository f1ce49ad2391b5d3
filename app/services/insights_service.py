"""
Insights Service
================
Dashboard insights (strong points / skills to strengthen) inferred from a
learner's recent exercise activity.

Staleness policy:
    - Stored insights younger than the TTL (INSIGHTS_TTL_HOURS) are served
      as-is without an LLM call
    - Otherwise insights are regenerated from the most recent
      INSIGHTS_ACTIVITY_LIMIT activity records and saved back
    - No activity → None (nothing to infer from)

Storage:
    InsightsStore is a protocol; InMemoryInsightsStore is the process-local
    implementation. Durable persistence belongs to the caller's database
    layer and plugs in through the same two methods.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Optional, Protocol, Sequence

from app.core.config import INSIGHTS_TTL_HOURS
from app.core.constants import INSIGHTS_ACTIVITY_LIMIT, INSIGHTS_PROMPT_CHAR_LIMIT
from app.llm.gateway import StructuredGenerationGateway
from app.llm.prompts import INSIGHTS_SCHEMA, build_insights_prompt
from app.models.insights import ActivityRecord, DashboardInsights
from app.postprocess.insights import normalize_insights

logger = logging.getLogger(__name__)


def needs_regeneration(
    last_generated_at: Optional[datetime],
    now: datetime,
    ttl: timedelta,
) -> bool:
    """
    Decide whether stored insights are stale.

    Parameters
    ----------
    last_generated_at : datetime or None
        When the stored insights were produced; None if there are none.
    now : datetime
        Current time (same timezone awareness as ``last_generated_at``).
    ttl : timedelta
        Maximum age of insights that may still be served.

    Returns
    -------
    bool
        True when there is nothing stored or the stored copy is at least
        ``ttl`` old.
    """
    if last_generated_at is None:
        return True
    return now - last_generated_at >= ttl


@dataclass
class StoredInsights:
    insights: DashboardInsights
    generated_at: datetime


class InsightsStore(Protocol):
    def get(self, user_id: str) -> Optional[StoredInsights]: ...

    def save(self, user_id: str, insights: DashboardInsights, generated_at: datetime) -> None: ...


class InMemoryInsightsStore:
    """
    Process-local insights store keyed by user id.

    Usage:
        store = InMemoryInsightsStore()
        store.save("u1", insights, datetime.now(timezone.utc))
        stored = store.get("u1")
    """

    def __init__(self) -> None:
        self._entries: dict[str, StoredInsights] = {}

    def get(self, user_id: str) -> Optional[StoredInsights]:
        return self._entries.get(user_id)

    def save(self, user_id: str, insights: DashboardInsights, generated_at: datetime) -> None:
        self._entries[user_id] = StoredInsights(insights=insights, generated_at=generated_at)

    def clear(self) -> None:
        self._entries.clear()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class InsightsService:

    def __init__(
        self,
        gateway: StructuredGenerationGateway,
        store: Optional[InsightsStore] = None,
        ttl: timedelta = timedelta(hours=INSIGHTS_TTL_HOURS),
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self.gateway = gateway
        self.store = store if store is not None else InMemoryInsightsStore()
        self.ttl = ttl
        self.clock = clock

    async def get_insights(
        self,
        user_id: str,
        activity: Sequence[Any],
        force: bool = False,
    ) -> Optional[DashboardInsights]:
        """
        Return fresh-enough insights for ``user_id``, regenerating if stale.

        Parameters
        ----------
        user_id : str
            Key into the insights store.
        activity : sequence of ActivityRecord or dict
            Recent activity, most recent first.
        force : bool
            Regenerate even when the stored copy is fresh.
        """
        now = self.clock()
        stored = self.store.get(user_id)
        if stored is not None and not force and not needs_regeneration(stored.generated_at, now, self.ttl):
            logger.debug("Serving stored insights for user (age %s)", now - stored.generated_at)
            return stored.insights

        records = [_activity_row(item) for item in list(activity)[:INSIGHTS_ACTIVITY_LIMIT]]
        if not records:
            logger.info("No activity to infer insights from")
            return None

        prompt = build_insights_prompt(records, INSIGHTS_PROMPT_CHAR_LIMIT)
        insights = await self.gateway.generate(prompt, INSIGHTS_SCHEMA, normalize_insights)
        self.store.save(user_id, insights, now)
        logger.info(
            "Regenerated insights from %d activity records (%d strong, %d to strengthen)",
            len(records), len(insights.strong_points), len(insights.skills_to_strengthen),
        )
        return insights


def _activity_row(item: Any) -> dict:
    record = item if isinstance(item, ActivityRecord) else ActivityRecord.model_validate(item)
    return record.model_dump(by_alias=True)
