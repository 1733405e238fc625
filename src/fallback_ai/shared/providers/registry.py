"""Provider registry — the ordered, mutable pool of configured providers."""

from __future__ import annotations

import dataclasses
from typing import Iterable

import structlog

from fallback_ai.domain.exceptions import ConfigurationError
from fallback_ai.shared.providers.priority import sort_providers
from fallback_ai.shared.providers.types import Provider

logger = structlog.get_logger(__name__)


class ProviderRegistry:
    """Owns the provider list and keeps it sorted by priority.

    Providers passed to the constructor are copied; providers passed to
    ``add`` are stored as given, so the caller can later ``remove`` them by
    reference.
    """

    def __init__(self, providers: Iterable[Provider]) -> None:
        copies = [dataclasses.replace(p) for p in providers]
        if not copies:
            raise ConfigurationError("At least one provider must be specified")

        for provider in copies:
            provider.pin_original_priority()

        self._providers: list[Provider] = copies
        sort_providers(self._providers)

    def __len__(self) -> int:
        return len(self._providers)

    @property
    def providers(self) -> list[Provider]:
        """The live list; only the scheduler should mutate it."""
        return self._providers

    def snapshot(self) -> list[Provider]:
        return list(self._providers)

    def add(self, provider: Provider) -> None:
        if any(p is provider for p in self._providers):
            logger.warning("provider_already_registered", provider=provider.name.value)
            return
        provider.pin_original_priority()
        self._providers.append(provider)
        sort_providers(self._providers)
        logger.info(
            "provider_added",
            provider=provider.name.value,
            model=provider.model,
            priority=provider.priority,
        )

    def remove(self, provider: Provider) -> None:
        for index, candidate in enumerate(self._providers):
            if candidate is provider:
                del self._providers[index]
                logger.info("provider_removed", provider=provider.name.value)
                return

    def resort(self) -> None:
        sort_providers(self._providers)
