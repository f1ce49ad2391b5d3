"""
LLM Client
==========
Asynchronous completion backend speaking to hosted LLM providers over HTTPS.

Supported Wire Formats:
    - OpenAI-compatible chat completions (Groq, OpenAI)
    - Google Gemini generateContent REST API

Backend Contract:
    - One request per call. NO retries and NO provider fallback here
    - Any transport error, non-2xx status, malformed envelope or empty
      completion is raised as CompletionBackendError
    - The client returns the opaque completion text; it never parses JSON
      (that is the repair pipeline's job)

Swapping Backends:
    The gateway depends only on the CompletionBackend protocol. LLMClient is
    the production implementation; tests plug in fakes or an
    httpx.MockTransport.
"""
import logging
from dataclasses import dataclass, field
from typing import Any, Optional, Protocol

import httpx

from app.core.errors import CompletionBackendError
from app.llm.router import GEMINI_REST, LLMRouter, ProviderConfig

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Completion Types
# ---------------------------------------------------------------------------
@dataclass
class TokenUsage:
    prompt_tokens: int = 0
    completion_tokens: int = 0
    total_tokens: int = 0


@dataclass
class RawCompletion:
    """Opaque text returned by a completion backend."""
    text: str
    provider: str = ""
    model: str = ""
    usage: TokenUsage = field(default_factory=TokenUsage)


class CompletionBackend(Protocol):
    """Anything that can turn a system + user prompt into completion text."""

    name: str

    async def complete(self, system_prompt: str, user_prompt: str) -> RawCompletion:
        ...


# ---------------------------------------------------------------------------
# LLM Client
# ---------------------------------------------------------------------------
class LLMClient:
    """
    Async HTTP completion backend for the configured provider.

    Usage:
        client = LLMClient()                       # LLM_PROVIDER from config
        completion = await client.complete(system_prompt, user_prompt)
        await client.close()

    Parameters
    ----------
    router : LLMRouter or None
        Provider registry (auto-created if not provided).
    provider_name : str or None
        Provider to use; defaults to the router's configured default.
    transport : httpx.AsyncBaseTransport or None
        Optional transport override (used by tests).
    """

    def __init__(
        self,
        router: Optional[LLMRouter] = None,
        provider_name: Optional[str] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self.router = router or LLMRouter()
        self.provider_name = (provider_name or self.router.default_name).lower()
        self._transport = transport
        self._http: Optional[httpx.AsyncClient] = None

    @property
    def name(self) -> str:
        return self.provider_name

    async def _get_http(self, provider: ProviderConfig) -> httpx.AsyncClient:
        """Lazy-initialise the HTTP client."""
        if self._http is None or self._http.is_closed:
            self._http = httpx.AsyncClient(
                timeout=httpx.Timeout(float(provider.timeout_seconds)),
                transport=self._transport,
            )
        return self._http

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._http and not self._http.is_closed:
            await self._http.aclose()
            self._http = None

    async def complete(self, system_prompt: str, user_prompt: str) -> RawCompletion:
        """
        Send a single completion request to the configured provider.

        Parameters
        ----------
        system_prompt : str
            Instruction placed in the system slot (may be empty).
        user_prompt : str
            Caller prompt.

        Returns
        -------
        RawCompletion
            The completion text with provider/model/usage metadata.

        Raises
        ------
        CompletionBackendError
            On any failure of the outbound call.
        """
        provider = self.router.get_provider(self.provider_name)
        try:
            if provider.wire_format == GEMINI_REST:
                completion = await self._call_gemini(user_prompt, system_prompt, provider)
            else:
                completion = await self._call_openai_compatible(user_prompt, system_prompt, provider)
        except httpx.TimeoutException as e:
            logger.warning("Provider %s: timeout", provider.name)
            raise CompletionBackendError(provider.name, "request timed out") from e
        except httpx.HTTPStatusError as e:
            status = e.response.status_code
            logger.warning("Provider %s: HTTP %d", provider.name, status)
            raise CompletionBackendError(
                provider.name, f"HTTP {status} from completion API", status_code=status,
            ) from e
        except httpx.RequestError as e:
            logger.warning("Provider %s: %s", provider.name, e)
            raise CompletionBackendError(provider.name, f"failed to connect: {e}") from e

        if not completion.text.strip():
            raise CompletionBackendError(provider.name, "empty completion")
        logger.debug(
            "Provider %s returned %d chars (%d tokens)",
            provider.name, len(completion.text), completion.usage.total_tokens,
        )
        return completion

    async def _call_gemini(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> RawCompletion:
        """Call Gemini REST API."""
        http = await self._get_http(provider)
        url = f"{provider.base_url}/models/{provider.model}:generateContent"
        payload: dict[str, Any] = {
            "contents": [
                {"parts": [{"text": user_prompt}]}
            ],
            "generationConfig": {
                "temperature": provider.temperature,
                "maxOutputTokens": provider.max_tokens,
            },
        }
        if system_prompt:
            payload["system_instruction"] = {"parts": [{"text": system_prompt}]}
        resp = await http.post(url, json=payload, headers={"x-goog-api-key": provider.api_key})
        resp.raise_for_status()
        data = _json_body(resp, provider.name)

        try:
            parts = data["candidates"][0]["content"]["parts"]
            text = "".join(part.get("text", "") for part in parts)
        except (IndexError, KeyError, TypeError, AttributeError) as e:
            raise CompletionBackendError(provider.name, "unexpected response envelope") from e

        meta = data.get("usageMetadata") or {}
        usage = TokenUsage(
            prompt_tokens=meta.get("promptTokenCount", 0) or 0,
            completion_tokens=meta.get("candidatesTokenCount", 0) or 0,
            total_tokens=meta.get("totalTokenCount", 0) or 0,
        )
        return RawCompletion(text=text, provider=provider.name, model=provider.model, usage=usage)

    async def _call_openai_compatible(
        self,
        user_prompt: str,
        system_prompt: str,
        provider: ProviderConfig,
    ) -> RawCompletion:
        """Call OpenAI-compatible API (Groq, OpenAI)."""
        http = await self._get_http(provider)
        url = f"{provider.base_url}/chat/completions"
        headers = {
            "Authorization": f"Bearer {provider.api_key}",
            "Content-Type": "application/json",
        }
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        messages.append({"role": "user", "content": user_prompt})
        payload = {
            "model": provider.model,
            "messages": messages,
            "temperature": provider.temperature,
            "max_tokens": provider.max_tokens,
        }
        resp = await http.post(url, json=payload, headers=headers)
        resp.raise_for_status()
        data = _json_body(resp, provider.name)

        try:
            text = data["choices"][0]["message"]["content"] or ""
        except (IndexError, KeyError, TypeError) as e:
            raise CompletionBackendError(provider.name, "unexpected response envelope") from e

        meta = data.get("usage") or {}
        usage = TokenUsage(
            prompt_tokens=meta.get("prompt_tokens", 0) or 0,
            completion_tokens=meta.get("completion_tokens", 0) or 0,
            total_tokens=meta.get("total_tokens", 0) or 0,
        )
        return RawCompletion(text=text, provider=provider.name, model=provider.model, usage=usage)


def _json_body(resp: httpx.Response, provider_name: str) -> dict[str, Any]:
    """Decode a provider envelope, which must be a JSON object."""
    try:
        data = resp.json()
    except ValueError as e:
        raise CompletionBackendError(provider_name, "response body is not JSON") from e
    if not isinstance(data, dict):
        raise CompletionBackendError(provider_name, "response body is not a JSON object")
    return data
