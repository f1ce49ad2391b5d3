"""
HTTP Endpoint Tests
===================
FastAPI routes with the gateway dependency overridden — no real API calls.

Covers:
    - Happy paths for every router (wire names in responses)
    - Core error → HTTP status mapping (502 / 502 / 422)
    - Insights reuse across requests through the injected store
    - Health endpoint never exposes API keys
"""
import pytest
from unittest.mock import AsyncMock, MagicMock
from fastapi.testclient import TestClient

from app.api.deps import get_gateway, get_insights_store
from app.core.errors import CompletionBackendError
from app.llm.client import RawCompletion
from app.llm.gateway import StructuredGenerationGateway
from app.services.insights_service import InMemoryInsightsStore
from main import app


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------
def _scripted_backend(*replies):
    backend = MagicMock()
    backend.name = "scripted"
    backend.complete = AsyncMock(side_effect=[
        reply if isinstance(reply, Exception) else RawCompletion(text=reply, provider="scripted")
        for reply in replies
    ])
    return backend


@pytest.fixture
def api():
    """Yields (client, script) where script(*replies) installs a scripted backend."""
    state = {"backend": _scripted_backend()}
    store = InMemoryInsightsStore()

    def script(*replies):
        state["backend"] = _scripted_backend(*replies)
        return state["backend"]

    app.dependency_overrides[get_gateway] = lambda: StructuredGenerationGateway(state["backend"])
    app.dependency_overrides[get_insights_store] = lambda: store
    with TestClient(app) as client:
        yield client, script
    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 1. Exercises
# ---------------------------------------------------------------------------
class TestExerciseEndpoints:

    def test_generate(self, api):
        client, script = api
        script('{"title": "T", "description": "D", "initialCode": "x = 0", "solution": "x = 1",'
               ' "hints": ["h"], "testCases": [{"input": 1, "expectedOutput": 2}]}')

        resp = client.post("/exercises/generate", json={
            "goalTitle": "Learn Python", "checkpointTitle": "Variables", "language": "Python",
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["initialCode"] == "x = 0"
        assert body["testCases"] == [{"input": 1, "expectedOutput": 2}]

    def test_generate_validation_error_is_422(self, api):
        client, script = api
        script('{"title": "T"}')

        resp = client.post("/exercises/generate", json={"goalTitle": "g", "checkpointTitle": "c"})

        assert resp.status_code == 422
        assert resp.json()["error"] == "VALIDATION_ERROR"
        assert "description" in resp.json()["detail"]

    def test_review(self, api):
        client, script = api
        script("draft feedback", '{"comments": [{"lineRange": [1, 1], "type": "praise", "comment": "neat"}], "score": 150}')

        resp = client.post("/exercises/review", json={
            "exerciseTitle": "T", "exerciseDescription": "D", "language": "Python", "code": "print(1)",
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["score"] == 100
        assert body["comments"] == [{"lineRange": [1, 1], "type": "praise", "comment": "neat", "severity": "medium"}]
        assert set(body["summary"]) == {"strengths", "improvements", "overallAssessment"}

    def test_review_unrepairable_is_502(self, api):
        client, script = api
        script("draft", "I refuse to output JSON.")

        resp = client.post("/exercises/review", json={"exerciseTitle": "T", "code": "x"})

        assert resp.status_code == 502
        assert resp.json()["error"] == "UNREPAIRABLE_RESPONSE"
        assert "I refuse" not in resp.json()["detail"]

    def test_review_backend_error_is_502(self, api):
        client, script = api
        script(CompletionBackendError("scripted", "HTTP 401", status_code=401))

        resp = client.post("/exercises/review", json={"exerciseTitle": "T", "code": "x"})

        assert resp.status_code == 502
        assert resp.json()["error"] == "COMPLETION_BACKEND_ERROR"

    def test_review_chat(self, api):
        client, script = api
        script("<think>internal</think>Add a base case.")

        resp = client.post("/exercises/review/chat", json={
            "exerciseTitle": "Recursion",
            "code": "def f(n): return f(n - 1)",
            "comments": [{"lineRange": [1, 1], "type": "issue", "comment": "no base case", "severity": "high"}],
            "message": "How do I fix it?",
        })

        assert resp.status_code == 200
        assert resp.json() == {"reply": "Add a base case."}

    def test_request_body_validated(self, api):
        client, _ = api
        resp = client.post("/exercises/review", json={"exerciseTitle": "T"})
        assert resp.status_code == 422


# ---------------------------------------------------------------------------
# 2. Goals
# ---------------------------------------------------------------------------
class TestGoalEndpoints:

    def test_roadmap(self, api):
        client, script = api
        script('{"checkpoints": [{"title": "A", "description": "d", "order": 2},'
               ' {"title": "B", "description": "d", "order": "1"}]}')

        resp = client.post("/goals/roadmap", json={
            "title": "Learn Go", "answers": [{"questionId": "q1", "answer": "Foundational basics"}],
        })

        assert resp.status_code == 200
        assert [c["order"] for c in resp.json()["checkpoints"]] == [2, 1]

    def test_roadmap_empty_is_422(self, api):
        client, script = api
        script('{"checkpoints": []}')
        resp = client.post("/goals/roadmap", json={"title": "Learn Go"})
        assert resp.status_code == 422

    def test_questions_fallback(self, api):
        client, script = api
        script(CompletionBackendError("scripted", "timeout"))

        resp = client.post("/goals/questions", json={"title": "Learn Go"})

        assert resp.status_code == 200
        assert [q["id"] for q in resp.json()["questions"]] == ["q1", "q2", "q3"]

    def test_language(self, api):
        client, script = api
        script('{"language": "ts"}')
        resp = client.post("/goals/language", json={"title": "Typed frontends"})
        assert resp.json() == {"language": "TypeScript"}

    def test_description(self, api):
        client, script = api
        script('{"description": "Learn typed frontends."}')
        resp = client.post("/goals/description", json={"title": "Typed frontends", "description": "ts"})
        assert resp.json() == {"description": "Learn typed frontends."}

    def test_learning_material(self, api):
        client, script = api
        script('{"title": "Pointers", "overview": "Addresses", "sections": [{"heading": "H", "body": "B"}],'
               ' "estimatedTimeMinutes": 9}')

        resp = client.post("/goals/learning-material", json={
            "goalTitle": "Learn C++", "checkpointTitle": "Pointers", "language": "C++",
        })

        assert resp.status_code == 200
        body = resp.json()
        assert body["estimatedTimeMinutes"] == 9
        assert body["codeExamples"] == []


# ---------------------------------------------------------------------------
# 3. Insights
# ---------------------------------------------------------------------------
class TestInsightsEndpoint:

    ACTIVITY = [{"status": "COMPLETED", "grade": 90, "language": "Python", "title": "Loops"}]

    def test_generated_then_reused(self, api):
        client, script = api
        backend = script('{"strongPoints": ["Loops", "Tests", "Naming", "Extra"], "skillsToStrengthen": []}')

        first = client.post("/insights", json={"userId": "u1", "activity": self.ACTIVITY})
        second = client.post("/insights", json={"userId": "u1", "activity": self.ACTIVITY})

        assert first.status_code == 200
        assert first.json()["insights"]["strongPoints"] == ["Loops", "Tests", "Naming"]
        assert second.json() == first.json()
        assert backend.complete.await_count == 1

    def test_no_activity(self, api):
        client, script = api
        script()
        resp = client.post("/insights", json={"userId": "u2"})
        assert resp.json() == {"insights": None}


# ---------------------------------------------------------------------------
# 4. Health
# ---------------------------------------------------------------------------
class TestHealth:

    def test_health(self, api):
        client, _ = api
        resp = client.get("/health")
        assert resp.status_code == 200
        body = resp.json()
        assert body["status"] == "ok"
        assert set(body["providers"]) == {"groq", "openai", "gemini"}
        for state in body["providers"].values():
            assert set(state) == {"model", "configured", "default"}
