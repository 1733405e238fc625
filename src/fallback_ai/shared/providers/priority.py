"""Priority scheduling — sorting, demotion, and lazy recovery of providers.

These functions hold no state of their own; they mutate the ``Provider``
records they are given.  Recovery is pull-based: callers run
``check_and_recover`` right before using a provider instead of relying on a
background timer.
"""

from __future__ import annotations

import time
from typing import Sequence

import structlog

from fallback_ai.shared.observability.metrics import (
    PROVIDER_DEMOTIONS,
    PROVIDER_RECOVERIES,
)
from fallback_ai.shared.providers.types import FallbackOptions, Provider

logger = structlog.get_logger(__name__)


def sort_providers(providers: list[Provider]) -> None:
    """Sort in place by ascending priority; ties keep their relative order."""
    providers.sort(key=lambda p: p.priority)


def demote_providers(providers: list[Provider], to_demote: Sequence[Provider]) -> None:
    """Push each provider in ``to_demote`` behind every non-demoted one.

    The penalty is the total provider count, added to the current priority.
    """
    penalty = len(providers)
    for provider in to_demote:
        previous = provider.priority
        provider.priority += penalty
        PROVIDER_DEMOTIONS.labels(provider=provider.name.value).inc()
        logger.info(
            "provider_demoted",
            provider=provider.name.value,
            model=provider.model,
            previous_priority=previous,
            priority=provider.priority,
        )
    sort_providers(providers)


def check_and_recover(
    provider: Provider,
    options: FallbackOptions,
    *,
    now: float | None = None,
) -> bool:
    """Restore ``original_priority`` once the failure's recovery delay has passed.

    Returns True if the provider was recovered.
    """
    if provider.last_failure_at is None or provider.last_failure_kind is None:
        return False

    now = time.monotonic() if now is None else now
    elapsed = now - provider.last_failure_at
    if elapsed <= options.recovery_timeout(provider.last_failure_kind):
        return False

    _restore(provider)
    PROVIDER_RECOVERIES.labels(provider=provider.name.value, reason="timeout").inc()
    logger.info(
        "provider_recovered",
        provider=provider.name.value,
        reason="timeout",
        elapsed_s=round(elapsed, 1),
        priority=provider.priority,
    )
    return True


def recover_on_success(provider: Provider) -> bool:
    """Forgive any recorded failure after a successful call."""
    if not provider.has_failure:
        return False

    _restore(provider)
    PROVIDER_RECOVERIES.labels(provider=provider.name.value, reason="success").inc()
    logger.info(
        "provider_recovered",
        provider=provider.name.value,
        reason="success",
        priority=provider.priority,
    )
    return True


def _restore(provider: Provider) -> None:
    if provider.original_priority is not None:
        provider.priority = provider.original_priority
    provider.clear_failure()
