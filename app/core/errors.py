"""
Core Errors
===========
Typed failures raised by the structured generation core.

Callers map each class onto a distinct HTTP response:
    CompletionBackendError     → 502 (upstream completion call failed)
    UnrepairableResponseError  → 502 (upstream returned unusable text)
    ValidationError            → 422 (required domain field missing/invalid)

None of these are retried inside the core.
"""
from typing import Optional


class CoreError(Exception):
    """Base class for all structured generation failures."""

    code = "CORE_ERROR"


class CompletionBackendError(CoreError):
    """The text-completion backend call failed (network, auth, quota, bad envelope)."""

    code = "COMPLETION_BACKEND_ERROR"

    def __init__(self, provider: str, message: str, status_code: Optional[int] = None) -> None:
        self.provider = provider
        self.status_code = status_code
        super().__init__(f"{provider}: {message}")


class UnrepairableResponseError(CoreError):
    """Every repair pass failed. ``raw_text`` keeps the original completion."""

    code = "UNREPAIRABLE_RESPONSE"

    def __init__(self, raw_text: str, reason: str = "") -> None:
        self.raw_text = raw_text
        self.reason = reason
        detail = f" ({reason})" if reason else ""
        super().__init__(f"Could not repair completion into JSON{detail}")


class ValidationError(CoreError):
    """A post-processor found a required field missing or unconvertible."""

    code = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str) -> None:
        self.field = field
        super().__init__(f"{field}: {message}")
