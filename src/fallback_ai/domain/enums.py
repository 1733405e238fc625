"""Domain enumerations for the fallback client."""

from __future__ import annotations

import enum


class AIProvider(str, enum.Enum):
    """Supported OpenAI-compatible completion backends."""

    GEMINI = "gemini"
    GROQ = "groq"
    MISTRAL = "mistral"
    CEREBRAS = "cerebras"


class FailureKind(str, enum.Enum):
    """How the last failure of a provider was classified."""

    RETRYABLE = "retryable"
    NON_RETRYABLE = "non_retryable"
