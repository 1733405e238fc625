"""Fallback gateway — the sequential call loop over the provider registry.

Callers hand in a request function; the gateway walks the registry in
priority order, tries each provider once, classifies failures, and keeps the
scheduling state (demotion, recovery) up to date.
"""

from __future__ import annotations

import asyncio
import time
from typing import Any, Awaitable, Callable, Mapping

import structlog

from fallback_ai.domain.enums import FailureKind
from fallback_ai.domain.exceptions import (
    AllProvidersFailedError,
    ProviderCallError,
    ValidationError,
)
from fallback_ai.shared.observability.metrics import (
    CALLS_EXHAUSTED,
    PROVIDER_ATTEMPTS,
    PROVIDER_LATENCY,
)
from fallback_ai.shared.providers.priority import (
    check_and_recover,
    demote_providers,
    recover_on_success,
)
from fallback_ai.shared.providers.registry import ProviderRegistry
from fallback_ai.shared.providers.types import FallbackOptions, Provider, ProviderFailure

logger = structlog.get_logger(__name__)

RequestFn = Callable[[Provider, str], Awaitable[dict[str, Any]]]


class FallbackGateway:
    """Runs one prompt against the registry with automatic failover.

    Usage::

        gateway = FallbackGateway(registry, FallbackOptions())
        result = await gateway.execute(prompt, request_fn)

    ``request_fn`` receives the ``Provider`` and the prompt and must return
    the decoded JSON object or raise.  An exception with a ``status_code``
    attribute is classified against ``options.retryable_codes``; anything
    without one (network errors, timeouts) is non-retryable.
    """

    def __init__(self, registry: ProviderRegistry, options: FallbackOptions) -> None:
        self._registry = registry
        self._options = options

    @property
    def options(self) -> FallbackOptions:
        return self._options

    # ── Main entry-point ─────────────────────────────────────
    async def execute(self, prompt: str, request_fn: RequestFn) -> dict[str, Any]:
        """Return the first successful response, annotated with its provider.

        Raises:
            ValidationError: If ``prompt`` is not a non-empty string.
            AllProvidersFailedError: If every provider failed.
        """
        if not isinstance(prompt, str) or not prompt:
            raise ValidationError("Prompt must be a non-empty string")

        pending_demotion: list[Provider] = []
        failures: list[ProviderFailure] = []

        # order is fixed for the whole call; demotions land afterwards
        for provider in self._registry.snapshot():
            if check_and_recover(provider, self._options):
                self._registry.resort()

            log = logger.bind(provider=provider.name.value, model=provider.model)
            deadline = asyncio.timeout(self._options.timeout_s)
            start = time.monotonic()
            try:
                async with deadline:
                    response = await request_fn(provider, prompt)
                if not isinstance(response, Mapping):
                    raise ProviderCallError(
                        f'Unexpected response payload from "{provider.name.value}": '
                        f"expected a JSON object, got {type(response).__name__}",
                        provider=provider.name,
                        error_body=response,
                    )
            except Exception as exc:
                # a TimeoutError raised by request_fn itself is an ordinary failure
                if isinstance(exc, TimeoutError) and deadline.expired():
                    failure = ProviderFailure(
                        provider=provider.name,
                        message=f"Timeout after {self._options.timeout_s}s",
                    )
                    log.warning("provider_timeout", timeout_s=self._options.timeout_s)
                else:
                    failure = self._classify(provider, exc)
                    log.warning(
                        "provider_request_failed",
                        error=failure.message,
                        status_code=failure.status_code,
                        retryable=failure.retryable,
                    )
            else:
                latency = time.monotonic() - start
                PROVIDER_LATENCY.labels(provider=provider.name.value).observe(latency)
                PROVIDER_ATTEMPTS.labels(
                    provider=provider.name.value, outcome="success"
                ).inc()
                self._settle_success(provider, pending_demotion)

                if failures:
                    log.info(
                        "provider_failover_success",
                        attempts=len(failures) + 1,
                        failed_providers=[f.provider.value for f in failures],
                    )
                else:
                    log.debug("provider_request_success", latency_ms=round(latency * 1000, 1))

                result: dict[str, Any] = {**response, "provider": provider.name}
                if failures:
                    result["errors"] = failures
                return result

            failures.append(failure)
            self._record_failure(provider, failure, pending_demotion)

        if pending_demotion:
            demote_providers(self._registry.providers, pending_demotion)
        CALLS_EXHAUSTED.inc()
        logger.error(
            "all_providers_failed",
            failed_providers=[f.provider.value for f in failures],
        )
        raise AllProvidersFailedError(failures)

    # ── Outcome handling ─────────────────────────────────────
    def _settle_success(self, provider: Provider, pending_demotion: list[Provider]) -> None:
        if provider.is_demoted:
            recover_on_success(provider)
        if pending_demotion:
            demote_providers(self._registry.providers, pending_demotion)
        else:
            self._registry.resort()

    def _record_failure(
        self,
        provider: Provider,
        failure: ProviderFailure,
        pending_demotion: list[Provider],
    ) -> None:
        kind = FailureKind.RETRYABLE if failure.retryable else FailureKind.NON_RETRYABLE
        PROVIDER_ATTEMPTS.labels(provider=provider.name.value, outcome=kind.value).inc()

        if not failure.retryable and self._options.enable_priority_updates:
            pending_demotion.append(provider)
        provider.record_failure(kind, time.monotonic())

    def _classify(self, provider: Provider, exc: Exception) -> ProviderFailure:
        status_code = getattr(exc, "status_code", None)
        if not isinstance(status_code, int):
            status_code = None
        return ProviderFailure(
            provider=provider.name,
            message=str(exc) or type(exc).__name__,
            status_code=status_code,
            retryable=self._options.is_retryable(status_code),
            error_body=getattr(exc, "error_body", None),
        )
