"""
Configuration
=============
Loads environment variables from .env file using python-dotenv.

Environment Variables:
    LLM_PROVIDER         — Completion backend used by every call site (groq / openai / gemini)
    GROQ_API_KEY         — Groq API key (default provider)
    GROQ_MODEL           — Groq model name
    GROQ_TEMPERATURE     — Sampling temperature for Groq (0–1)
    GROQ_MAX_TOKENS      — Max completion tokens for Groq
    OPENAI_API_KEY       — OpenAI API key
    OPENAI_MODEL         — OpenAI model name
    OPENAI_TEMPERATURE   — Sampling temperature for OpenAI (0–1)
    OPENAI_MAX_TOKENS    — Max completion tokens for OpenAI
    GEMINI_API_KEY       — Google Gemini API key
    GEMINI_MODEL         — Gemini model name
    LLM_TIMEOUT_SECONDS  — Transport timeout for a single completion request
    INSIGHTS_TTL_HOURS   — Age after which dashboard insights are regenerated
    CORS_ORIGINS         — Comma separated list of allowed browser origins

Timeout Philosophy:
    The structured generation core never imposes a deadline of its own.
    LLM_TIMEOUT_SECONDS only bounds the HTTP transport so a hung socket
    surfaces as a CompletionBackendError instead of leaking a connection.
    Callers that need a tighter deadline wrap the call themselves.
"""
import math
import os
from dotenv import load_dotenv

load_dotenv()


def ensure_integer(value, default: int) -> int:
    """Parse an integer setting, flooring floats. Unparsable values yield ``default``."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number) or math.isinf(number):
        return default
    return int(math.floor(number))


def ensure_temperature(value, default: float = 0.7) -> float:
    """Parse a temperature setting and clamp it into [0, 1]."""
    if value is None or value == "":
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(number):
        return default
    return max(0.0, min(1.0, number))


LLM_PROVIDER = os.getenv("LLM_PROVIDER", "groq").strip().lower()

GROQ_API_KEY = os.getenv("GROQ_API_KEY")
GROQ_MODEL = os.getenv("GROQ_MODEL", "openai/gpt-oss-120b")
GROQ_TEMPERATURE = ensure_temperature(os.getenv("GROQ_TEMPERATURE"), 0.0)
GROQ_MAX_TOKENS = ensure_integer(os.getenv("GROQ_MAX_TOKENS"), 2000)

OPENAI_API_KEY = os.getenv("OPENAI_API_KEY")
OPENAI_MODEL = os.getenv("OPENAI_MODEL", "gpt-3.5-turbo")
OPENAI_TEMPERATURE = ensure_temperature(os.getenv("OPENAI_TEMPERATURE"), 0.7)
OPENAI_MAX_TOKENS = ensure_integer(os.getenv("OPENAI_MAX_TOKENS"), 2000)

GEMINI_API_KEY = os.getenv("GEMINI_API_KEY")
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")

LLM_TIMEOUT_SECONDS = ensure_integer(os.getenv("LLM_TIMEOUT_SECONDS"), 60)

# Dashboard insights staleness window (caller policy, not part of the core)
INSIGHTS_TTL_HOURS = ensure_integer(os.getenv("INSIGHTS_TTL_HOURS"), 24)

CORS_ORIGINS: list[str] = [
    origin.strip()
    for origin in os.getenv(
        "CORS_ORIGINS", "http://localhost:4200,http://127.0.0.1:4200"
    ).split(",")
    if origin.strip()
]
