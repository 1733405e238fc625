"""Core types for the provider fallback framework."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from fallback_ai.domain.enums import AIProvider, FailureKind

DEFAULT_RETRYABLE_CODES: frozenset[int] = frozenset({429, 500})


@dataclass(frozen=True)
class FallbackOptions:
    """Per-client behaviour switches.

    Attributes:
        enable_priority_updates:      Demote providers after non-retryable failures.
        timeout_s:                    Per-attempt deadline in seconds.
        retryable_codes:              HTTP status codes classified as retryable.
        retryable_error_timeout_s:    Seconds before a retryable failure is forgiven.
        non_retryable_error_timeout_s: Seconds before a non-retryable failure is forgiven.
    """

    enable_priority_updates: bool = True
    timeout_s: float = 30.0
    retryable_codes: frozenset[int] = DEFAULT_RETRYABLE_CODES
    retryable_error_timeout_s: float = 300.0
    non_retryable_error_timeout_s: float = 1800.0

    def __post_init__(self) -> None:
        # accept any iterable of codes, store it frozen
        object.__setattr__(self, "retryable_codes", frozenset(self.retryable_codes))

    def is_retryable(self, status_code: int | None) -> bool:
        return status_code is not None and status_code in self.retryable_codes

    def recovery_timeout(self, kind: FailureKind) -> float:
        if kind is FailureKind.RETRYABLE:
            return self.retryable_error_timeout_s
        return self.non_retryable_error_timeout_s


@dataclass(eq=False)
class Provider:
    """A configured backend and its mutable scheduling state.

    Compared by identity: two providers with identical fields are still
    distinct registry entries.
    """

    name: AIProvider
    api_key: str = field(repr=False)
    model: str
    priority: int
    original_priority: int | None = None
    last_failure_at: float | None = None
    last_failure_kind: FailureKind | None = None
    parameters: dict[str, Any] | None = None

    def __post_init__(self) -> None:
        self.name = AIProvider(self.name)

    @property
    def has_failure(self) -> bool:
        return self.last_failure_at is not None

    @property
    def is_demoted(self) -> bool:
        return self.original_priority is not None and self.priority != self.original_priority

    def pin_original_priority(self) -> None:
        """Snapshot the configured priority; later calls keep the first value."""
        if self.original_priority is None:
            self.original_priority = self.priority

    def record_failure(self, kind: FailureKind, at: float) -> None:
        self.last_failure_at = at
        self.last_failure_kind = kind

    def clear_failure(self) -> None:
        self.last_failure_at = None
        self.last_failure_kind = None


@dataclass(frozen=True)
class ProviderFailure:
    """One failed attempt collected during a call."""

    provider: AIProvider
    message: str
    status_code: int | None = None
    retryable: bool = False
    error_body: Any = None


@dataclass(frozen=True)
class ProviderState:
    """Read-only snapshot of a provider's scheduling state (no credential)."""

    name: AIProvider
    model: str
    priority: int
    original_priority: int | None
    last_failure_kind: FailureKind | None = None
    seconds_since_failure: float | None = None
