"""
Structured Generation Gateway Tests
===================================
The completion backend is a mock — no real API calls.

Covers:
    - System instruction carries the schema description
    - Repair pipeline runs on the completion
    - Post-processor hook via generate()
    - Free-text completions skip repair
    - Error propagation and wrapping
"""
import asyncio
import logging
from unittest.mock import AsyncMock, MagicMock

import pytest

from app.core.errors import CompletionBackendError, UnrepairableResponseError, ValidationError
from app.llm.client import RawCompletion
from app.llm.gateway import STRUCTURED_SYSTEM_PROMPT, Prompt, StructuredGenerationGateway
from app.postprocess.roadmap import normalize_roadmap


def _run(coro):
    return asyncio.run(coro)


def _backend(text: str = "{}", side_effect=None):
    backend = MagicMock()
    backend.name = "fake"
    backend.complete = AsyncMock(
        return_value=RawCompletion(text=text, provider="fake", model="fake-1"),
        side_effect=side_effect,
    )
    return backend


# ---------------------------------------------------------------------------
# 1. Prompt Assembly
# ---------------------------------------------------------------------------
class TestPrompt:

    def test_system_text_embeds_schema(self):
        prompt = Prompt(instructions="Make a roadmap", schema_description='  {"checkpoints": []}\n')
        system = prompt.system_text()
        assert '{"checkpoints": []}' in system
        assert "ONLY a single JSON value" in system
        assert "{schema}" not in system

    def test_backend_receives_system_and_user_prompt(self):
        backend = _backend('{"a": 1}')
        gateway = StructuredGenerationGateway(backend)

        _run(gateway.generate_structured("Make a roadmap", "SCHEMA-DESC"))

        system, user = backend.complete.await_args.args
        assert system == STRUCTURED_SYSTEM_PROMPT.format(schema="SCHEMA-DESC")
        assert user == "Make a roadmap"


# ---------------------------------------------------------------------------
# 2. Structured Generation
# ---------------------------------------------------------------------------
class TestGenerateStructured:

    def test_repairs_completion(self):
        gateway = StructuredGenerationGateway(_backend("```json\n{'score': 90,}\n```"))
        assert _run(gateway.generate_structured("p", "s")) == {"score": 90}

    def test_logs_stage_not_prompt(self, caplog):
        gateway = StructuredGenerationGateway(_backend('{"a": 1}'))
        with caplog.at_level(logging.INFO, logger="app.llm.gateway"):
            _run(gateway.generate_structured("SECRET PROMPT TEXT", "s"))
        assert "stage 'strict'" in caplog.text
        assert "SECRET PROMPT TEXT" not in caplog.text

    def test_unrepairable_propagates_with_raw_text(self, caplog):
        gateway = StructuredGenerationGateway(_backend("I cannot help with that."))
        with caplog.at_level(logging.WARNING, logger="app.llm.gateway"):
            with pytest.raises(UnrepairableResponseError) as exc_info:
                _run(gateway.generate_structured("p", "s"))
        assert exc_info.value.raw_text == "I cannot help with that."
        assert "Unrepairable completion" in caplog.text

    def test_generate_applies_normalizer(self):
        backend = _backend('{"checkpoints": [{"title": "A", "description": "d", "order": "1"}]}')
        plan = _run(StructuredGenerationGateway(backend).generate("p", "s", normalize_roadmap))
        assert plan.checkpoints[0].order == 1

    def test_generate_propagates_validation_error(self):
        backend = _backend('{"checkpoints": []}')
        with pytest.raises(ValidationError):
            _run(StructuredGenerationGateway(backend).generate("p", "s", normalize_roadmap))

    def test_calls_are_independent(self):
        backend = _backend('{"a": 1}')
        gateway = StructuredGenerationGateway(backend)

        async def both():
            return await asyncio.gather(
                gateway.generate_structured("one", "s"),
                gateway.generate_structured("two", "s"),
            )

        assert _run(both()) == [{"a": 1}, {"a": 1}]
        assert backend.complete.await_count == 2


# ---------------------------------------------------------------------------
# 3. Free Text
# ---------------------------------------------------------------------------
class TestGenerateText:

    def test_returns_stripped_text_without_system_prompt(self):
        backend = _backend("  Not JSON, and that is fine.\n")
        text = _run(StructuredGenerationGateway(backend).generate_text("Review this"))
        assert text == "Not JSON, and that is fine."
        assert backend.complete.await_args.args == ("", "Review this")


# ---------------------------------------------------------------------------
# 4. Backend Errors
# ---------------------------------------------------------------------------
class TestBackendErrors:

    def test_backend_error_propagates_unchanged(self):
        error = CompletionBackendError("fake", "HTTP 401", status_code=401)
        gateway = StructuredGenerationGateway(_backend(side_effect=error))
        with pytest.raises(CompletionBackendError) as exc_info:
            _run(gateway.generate_structured("p", "s"))
        assert exc_info.value is error

    def test_foreign_exception_wrapped(self):
        gateway = StructuredGenerationGateway(_backend(side_effect=RuntimeError("socket closed")))
        with pytest.raises(CompletionBackendError) as exc_info:
            _run(gateway.generate_text("p"))
        assert exc_info.value.provider == "fake"
        assert "socket closed" in str(exc_info.value)

    def test_foreign_exception_type_logged(self, caplog):
        gateway = StructuredGenerationGateway(_backend(side_effect=RuntimeError("socket closed")))
        with caplog.at_level(logging.WARNING, logger="app.llm.gateway"):
            with pytest.raises(CompletionBackendError) as exc_info:
                _run(gateway.generate_text("p"))
        assert "RuntimeError" in caplog.text
        assert "RuntimeError" in str(exc_info.value)

    @pytest.mark.parametrize("error", [TypeError("bad arg"), AttributeError("no attr")])
    def test_programming_errors_not_wrapped(self, error):
        gateway = StructuredGenerationGateway(_backend(side_effect=error))
        with pytest.raises(type(error)) as exc_info:
            _run(gateway.generate_structured("p", "s"))
        assert exc_info.value is error
