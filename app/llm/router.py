"""
LLM Router
==========
Resolves which completion provider a gateway talks to.

Routing Strategy:
    1. The provider is selected by configuration (LLM_PROVIDER, default groq)
    2. Call sites never name a vendor; swapping providers is a config change
    3. There is NO automatic fallback between providers; a failed call
       surfaces as CompletionBackendError and the caller decides what to do

Provider Wire Formats:
    - groq / openai → OpenAI-compatible /chat/completions
    - gemini        → Google Generative Language generateContent
"""
import logging
from dataclasses import dataclass
from typing import Optional

from app.core.config import (
    LLM_PROVIDER, LLM_TIMEOUT_SECONDS,
    GROQ_API_KEY, GROQ_MODEL, GROQ_TEMPERATURE, GROQ_MAX_TOKENS,
    OPENAI_API_KEY, OPENAI_MODEL, OPENAI_TEMPERATURE, OPENAI_MAX_TOKENS,
    GEMINI_API_KEY, GEMINI_MODEL,
)
from app.core.errors import CompletionBackendError

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Provider Configuration
# ---------------------------------------------------------------------------
OPENAI_COMPATIBLE = "openai_compatible"
GEMINI_REST = "gemini"


@dataclass(frozen=True)
class ProviderConfig:
    """Configuration for a single completion provider."""
    name: str
    api_key: str
    base_url: str
    model: str
    temperature: float = 0.7
    max_tokens: int = 2000
    timeout_seconds: int = 60
    wire_format: str = OPENAI_COMPATIBLE

    @property
    def is_configured(self) -> bool:
        return bool(self.api_key and self.api_key.strip())


# Default provider configs
GROQ_CONFIG = ProviderConfig(
    name="groq",
    api_key=GROQ_API_KEY or "",
    base_url="https://api.groq.com/openai/v1",
    model=GROQ_MODEL,
    temperature=GROQ_TEMPERATURE,
    max_tokens=GROQ_MAX_TOKENS,
    timeout_seconds=LLM_TIMEOUT_SECONDS,
)

OPENAI_CONFIG = ProviderConfig(
    name="openai",
    api_key=OPENAI_API_KEY or "",
    base_url="https://api.openai.com/v1",
    model=OPENAI_MODEL,
    temperature=OPENAI_TEMPERATURE,
    max_tokens=OPENAI_MAX_TOKENS,
    timeout_seconds=LLM_TIMEOUT_SECONDS,
)

GEMINI_CONFIG = ProviderConfig(
    name="gemini",
    api_key=GEMINI_API_KEY or "",
    base_url="https://generativelanguage.googleapis.com/v1beta",
    model=GEMINI_MODEL,
    temperature=0.2,
    max_tokens=2000,
    timeout_seconds=LLM_TIMEOUT_SECONDS,
    wire_format=GEMINI_REST,
)


# ---------------------------------------------------------------------------
# Router
# ---------------------------------------------------------------------------
class LLMRouter:
    """
    Registry of completion providers keyed by name.

    Usage:
        router = LLMRouter()
        config = router.get_provider()          # configured default
        config = router.get_provider("openai")  # explicit override
    """

    def __init__(
        self,
        providers: Optional[list[ProviderConfig]] = None,
        default: Optional[str] = None,
    ) -> None:
        configs = providers if providers is not None else [GROQ_CONFIG, OPENAI_CONFIG, GEMINI_CONFIG]
        self._providers: dict[str, ProviderConfig] = {p.name: p for p in configs}
        self._default = (default or LLM_PROVIDER).lower()

    @property
    def default_name(self) -> str:
        return self._default

    def names(self) -> list[str]:
        return list(self._providers)

    def register(self, config: ProviderConfig) -> None:
        """Add or replace a provider configuration."""
        self._providers[config.name] = config

    def get_provider(self, name: Optional[str] = None) -> ProviderConfig:
        """
        Resolve a provider configuration.

        Raises
        ------
        CompletionBackendError
            If the provider is unknown or has no API key configured.
        """
        provider_name = (name or self._default).lower()
        config = self._providers.get(provider_name)
        if config is None:
            raise CompletionBackendError(provider_name, f"LLM provider '{provider_name}' not found")
        if not config.is_configured:
            raise CompletionBackendError(provider_name, "API key is not configured")
        logger.debug("Selected provider: %s (%s)", config.name, config.model)
        return config

    @property
    def provider_state(self) -> dict[str, dict[str, object]]:
        """Expose configured providers for the health endpoint (never the keys)."""
        return {
            name: {
                "model": cfg.model,
                "configured": cfg.is_configured,
                "default": name == self._default,
            }
            for name, cfg in self._providers.items()
        }
