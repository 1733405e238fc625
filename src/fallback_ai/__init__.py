"""Fallback AI — call multiple AI completion providers with automatic fallback."""

from fallback_ai.adapters.outbound.llm import PROVIDER_MAP, FallbackAI, build_providers
from fallback_ai.domain.enums import AIProvider, FailureKind
from fallback_ai.domain.exceptions import (
    AllProvidersFailedError,
    ConfigurationError,
    FallbackAIError,
    ProviderCallError,
    ValidationError,
)
from fallback_ai.shared.providers.types import (
    FallbackOptions,
    Provider,
    ProviderFailure,
    ProviderState,
)

__all__ = [
    "AIProvider",
    "AllProvidersFailedError",
    "ConfigurationError",
    "FailureKind",
    "FallbackAI",
    "FallbackAIError",
    "FallbackOptions",
    "PROVIDER_MAP",
    "Provider",
    "ProviderCallError",
    "ProviderFailure",
    "ProviderState",
    "ValidationError",
    "build_providers",
]
