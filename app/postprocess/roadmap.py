"""
Roadmap Shaper
==============
Validates a repaired roadmap completion into a RoadmapPlan.

Policy: STRICT on structure, lenient on ordering.
    - checkpoints must be a non-empty array of objects with string
      title and description, else ValidationError
    - order is coerced to an integer ("1" → 1, 2.0 → 2)
    - if any order is missing/unparseable or two orders collide, ALL
      checkpoints are re-sequenced 1..n by array position
    - array order is always preserved; valid orders are never re-sorted
"""
from typing import Any, List, Optional

from app.core.errors import ValidationError
from app.models.roadmap import Checkpoint, RoadmapPlan
from app.postprocess.values import as_int, as_text


def normalize_roadmap(value: Any) -> RoadmapPlan:
    if not isinstance(value, dict):
        raise ValidationError("roadmap", "expected a JSON object")
    if "checkpoints" not in value:
        raise ValidationError("checkpoints", "is required")
    items = value["checkpoints"]
    if not isinstance(items, list):
        raise ValidationError("checkpoints", "must be an array")
    if not items:
        raise ValidationError("checkpoints", "must contain at least one checkpoint")

    titles: List[str] = []
    descriptions: List[str] = []
    orders: List[Optional[int]] = []
    for index, item in enumerate(items):
        if not isinstance(item, dict):
            raise ValidationError(f"checkpoints[{index}]", "must be an object")
        titles.append(_required_text(item, "title", index))
        descriptions.append(_required_text(item, "description", index))
        orders.append(as_int(item.get("order")))

    final_orders = resequence_orders(orders)
    return RoadmapPlan(checkpoints=[
        Checkpoint(title=title, description=description, order=order)
        for title, description, order in zip(titles, descriptions, final_orders)
    ])


def resequence_orders(orders: List[Optional[int]]) -> List[int]:
    """Keep orders if all present and distinct, else number by position from 1."""
    present = [o for o in orders if o is not None]
    if len(present) == len(orders) and len(set(present)) == len(present):
        return present
    return list(range(1, len(orders) + 1))


def _required_text(item: dict, key: str, index: int) -> str:
    text = as_text(item.get(key))
    if text is None or not text.strip():
        raise ValidationError(f"checkpoints[{index}].{key}", "must be a non-empty string")
    return text
