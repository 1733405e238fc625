"""Domain-specific exception hierarchy.

All exceptions inherit from ``FallbackAIError`` so callers can catch the entire
family in one clause while still discriminating on subclass.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from fallback_ai.domain.enums import AIProvider

if TYPE_CHECKING:
    from fallback_ai.shared.providers.types import ProviderFailure


class FallbackAIError(Exception):
    """Base class for all fallback client errors."""

    def __init__(self, message: str, *, code: str = "FALLBACK_AI_ERROR") -> None:
        self.message = message
        self.code = code
        super().__init__(message)


# ── Setup / input ────────────────────────────────────────────
class ConfigurationError(FallbackAIError):
    """The client was configured with an unusable provider set."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="CONFIGURATION_ERROR")


class ValidationError(FallbackAIError):
    """Input failed validation before any provider was contacted."""

    def __init__(self, message: str) -> None:
        super().__init__(message, code="VALIDATION_ERROR")


# ── Provider calls ───────────────────────────────────────────
class ProviderCallError(FallbackAIError):
    """A provider answered with an error status or an unusable payload.

    ``status_code`` and ``error_body`` are read by the gateway to classify
    the failure.
    """

    def __init__(
        self,
        message: str,
        *,
        provider: AIProvider,
        status_code: int | None = None,
        error_body: Any = None,
    ) -> None:
        self.provider = AIProvider(provider)
        self.status_code = status_code
        self.error_body = error_body
        super().__init__(message, code="PROVIDER_CALL_ERROR")


class AllProvidersFailedError(FallbackAIError):
    """Raised when every configured provider failed for a single call."""

    def __init__(self, failures: list[ProviderFailure]) -> None:
        self.failures = failures
        summary = ", ".join(f"{f.provider.value}: {f.message}" for f in failures)
        super().__init__(
            f"All providers failed. Errors: {summary}",
            code="ALL_PROVIDERS_FAILED",
        )
