"""
Structured Generation Gateway
=============================
Single entry point every call site uses to get structured data from an LLM.

Flow:
    caller prompt + schema description
        → completion backend (system instruction + prompt)
        → repair pipeline (strip → strict → syntactic → salvage)
        → caller's post-processor (optional, via ``generate``)

Contract:
    - Stateless: no cache, no session, no retry. Each call is independent
    - Backend failures surface as CompletionBackendError; programming
      errors inside a backend (TypeError, AttributeError, ...) propagate
    - Unparseable completions surface as UnrepairableResponseError
    - Prompt content is never logged
"""
import logging
from dataclasses import dataclass
from typing import Any, Callable, TypeVar

from app.core.errors import CompletionBackendError, UnrepairableResponseError
from app.llm.client import CompletionBackend, RawCompletion
from app.llm.repair import repair_with_stage

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Bugs in a backend surface as themselves, not as a failed completion
PROGRAMMING_ERRORS = (TypeError, AttributeError, NameError, AssertionError)


STRUCTURED_SYSTEM_PROMPT = (
    "You are a JSON generator. Your task is to generate valid JSON that strictly "
    "follows this schema:\n"
    "\n"
    "{schema}\n"
    "\n"
    "Important rules:\n"
    "1. Respond with ONLY a single JSON value conforming to the schema above\n"
    "2. Do not include any explanations, prose or markdown code fences\n"
    "3. Ensure all required fields are present\n"
    "4. Follow the exact types specified in the schema\n"
    "5. Do not add any fields not defined in the schema"
)


@dataclass(frozen=True)
class Prompt:
    """Instructions plus the advisory description of the expected JSON shape."""
    instructions: str
    schema_description: str

    def system_text(self) -> str:
        return STRUCTURED_SYSTEM_PROMPT.format(schema=self.schema_description.strip())


class StructuredGenerationGateway:
    """
    Backend-agnostic gateway for structured and free-text generation.

    Usage:
        gateway = StructuredGenerationGateway(LLMClient())
        value = await gateway.generate_structured(prompt, schema)
        plan = await gateway.generate(prompt, schema, normalize_roadmap)
    """

    def __init__(self, backend: CompletionBackend) -> None:
        self.backend = backend

    async def generate_structured(self, prompt: str, schema_description: str) -> Any:
        """
        Request a JSON value and return it repaired and parsed.

        Raises
        ------
        CompletionBackendError
            The completion call failed.
        UnrepairableResponseError
            Every repair pass failed; ``raw_text`` holds the completion.
        """
        request = Prompt(instructions=prompt, schema_description=schema_description)
        completion = await self._complete(request.system_text(), request.instructions)
        try:
            outcome = repair_with_stage(completion.text)
        except UnrepairableResponseError as e:
            logger.warning(
                "Unrepairable completion from %s (%d chars): %.120r",
                completion.provider or self._backend_name, len(e.raw_text), e.raw_text,
            )
            raise
        logger.info(
            "Structured completion from %s/%s parsed at stage '%s' (%d chars)",
            completion.provider or self._backend_name, completion.model or "-",
            outcome.stage, len(completion.text),
        )
        return outcome.value

    async def generate(
        self,
        prompt: str,
        schema_description: str,
        normalizer: Callable[[Any], T],
    ) -> T:
        """Generate structured data and run it through a domain post-processor."""
        value = await self.generate_structured(prompt, schema_description)
        return normalizer(value)

    async def generate_text(self, prompt: str) -> str:
        """Plain completion for free-form call sites (no repair pass)."""
        completion = await self._complete("", prompt)
        return completion.text.strip()

    async def _complete(self, system_prompt: str, user_prompt: str) -> RawCompletion:
        try:
            return await self.backend.complete(system_prompt, user_prompt)
        except CompletionBackendError:
            raise
        except PROGRAMMING_ERRORS:
            raise
        except Exception as e:
            # backends outside LLMClient may raise their own exception types
            logger.warning(
                "Completion backend %s raised %s; reporting as backend error",
                self._backend_name, type(e).__name__,
            )
            raise CompletionBackendError(self._backend_name, f"{type(e).__name__}: {e}") from e

    @property
    def _backend_name(self) -> str:
        return getattr(self.backend, "name", "unknown")
