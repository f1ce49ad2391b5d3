"""
Roadmap Shaper Tests
====================
Strict on structure, lenient on ordering.
"""
import pytest

from app.core.errors import ValidationError
from app.llm.repair import repair
from app.postprocess.roadmap import normalize_roadmap, resequence_orders


def _checkpoint(title="A", description="d", order=1) -> dict:
    return {"title": title, "description": description, "order": order}


# ---------------------------------------------------------------------------
# 1. Order Coercion
# ---------------------------------------------------------------------------
class TestOrderCoercion:

    def test_orders_coerced_and_preserved(self):
        raw = ('{"checkpoints": [{"title":"A","description":"d","order":2},'
               '{"title":"B","description":"d","order":"1"}]}')
        plan = normalize_roadmap(repair(raw))

        assert [c.title for c in plan.checkpoints] == ["A", "B"]
        assert [c.order for c in plan.checkpoints] == [2, 1]

    def test_float_order(self):
        plan = normalize_roadmap({"checkpoints": [_checkpoint(order=3.0)]})
        assert plan.checkpoints[0].order == 3

    def test_duplicate_orders_resequenced(self):
        plan = normalize_roadmap({"checkpoints": [
            _checkpoint("A", order=1), _checkpoint("B", order=1), _checkpoint("C", order=2),
        ]})
        assert [c.order for c in plan.checkpoints] == [1, 2, 3]
        assert [c.title for c in plan.checkpoints] == ["A", "B", "C"]

    def test_missing_order_resequenced(self):
        plan = normalize_roadmap({"checkpoints": [
            _checkpoint("A", order=5), {"title": "B", "description": "d"}, _checkpoint("C", order="x"),
        ]})
        assert [c.order for c in plan.checkpoints] == [1, 2, 3]

    @pytest.mark.parametrize("order", [10 ** 400, -10 ** 400, float("inf"), "1e400"])
    def test_unrepresentable_order_resequenced(self, order):
        plan = normalize_roadmap({"checkpoints": [_checkpoint("A", order=order), _checkpoint("B", order=2)]})
        assert [c.order for c in plan.checkpoints] == [1, 2]

    def test_oversized_order_literal_in_completion(self):
        raw = '{"checkpoints": [{"title": "A", "description": "d", "order": ' + "9" * 400 + '}]}'
        assert normalize_roadmap(repair(raw)).checkpoints[0].order == 1

    @pytest.mark.parametrize("orders,expected", [
        ([3, 1, 2], [3, 1, 2]),
        ([1, 1], [1, 2]),
        ([None, 2], [1, 2]),
        ([], []),
    ])
    def test_resequence_orders(self, orders, expected):
        assert resequence_orders(orders) == expected


# ---------------------------------------------------------------------------
# 2. Structure Validation
# ---------------------------------------------------------------------------
class TestRoadmapValidation:

    @pytest.mark.parametrize("value,field", [
        (None, "roadmap"),
        ([], "roadmap"),
        ({}, "checkpoints"),
        ({"checkpoints": {"title": "A"}}, "checkpoints"),
        ({"checkpoints": []}, "checkpoints"),
        ({"checkpoints": ["A"]}, "checkpoints[0]"),
        ({"checkpoints": [{"description": "d", "order": 1}]}, "checkpoints[0].title"),
        ({"checkpoints": [_checkpoint(), {"title": "B", "description": " "}]}, "checkpoints[1].description"),
    ])
    def test_invalid_roadmaps(self, value, field):
        with pytest.raises(ValidationError) as exc_info:
            normalize_roadmap(value)
        assert exc_info.value.field == field
