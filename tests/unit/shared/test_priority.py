"""Tests for priority sorting, demotion, and recovery."""

from __future__ import annotations

import time

import pytest

from fallback_ai.domain.enums import AIProvider, FailureKind
from fallback_ai.shared.providers.priority import (
    check_and_recover,
    demote_providers,
    recover_on_success,
    sort_providers,
)
from fallback_ai.shared.providers.types import FallbackOptions, Provider


def _provider(name: AIProvider, priority: int) -> Provider:
    p = Provider(name=name, api_key="k", model="m", priority=priority)
    p.pin_original_priority()
    return p


# ═══════════════════════════════════════════════════════════════
#  sort_providers
# ═══════════════════════════════════════════════════════════════
class TestSortProviders:
    def test_sorts_ascending(self) -> None:
        providers = [_provider(AIProvider.GROQ, 2), _provider(AIProvider.GEMINI, 1)]
        sort_providers(providers)
        assert [p.priority for p in providers] == [1, 2]

    def test_ties_keep_input_order(self) -> None:
        first = _provider(AIProvider.GROQ, 1)
        second = _provider(AIProvider.MISTRAL, 1)
        third = _provider(AIProvider.GEMINI, 0)
        providers = [first, second, third]
        sort_providers(providers)
        assert providers == [third, first, second]


# ═══════════════════════════════════════════════════════════════
#  demote_providers
# ═══════════════════════════════════════════════════════════════
class TestDemoteProviders:
    def test_adds_provider_count_and_resorts(self) -> None:
        a = _provider(AIProvider.GROQ, 1)
        b = _provider(AIProvider.GEMINI, 2)
        providers = [a, b]
        demote_providers(providers, [a])
        assert a.priority == 3
        assert b.priority == 2
        assert providers == [b, a]

    def test_multiple_demotions_keep_relative_order(self) -> None:
        a = _provider(AIProvider.GROQ, 1)
        b = _provider(AIProvider.GEMINI, 2)
        c = _provider(AIProvider.MISTRAL, 3)
        providers = [a, b, c]
        demote_providers(providers, [a, b])
        assert (a.priority, b.priority, c.priority) == (4, 5, 3)
        assert providers == [c, a, b]

    def test_demoting_twice_accumulates(self) -> None:
        a = _provider(AIProvider.GROQ, 1)
        b = _provider(AIProvider.GEMINI, 2)
        providers = [a, b]
        demote_providers(providers, [a])
        demote_providers(providers, [a])
        assert a.priority == 5
        assert a.original_priority == 1

    def test_empty_batch_only_sorts(self) -> None:
        a = _provider(AIProvider.GROQ, 5)
        b = _provider(AIProvider.GEMINI, 2)
        providers = [a, b]
        demote_providers(providers, [])
        assert providers == [b, a]
        assert a.priority == 5


# ═══════════════════════════════════════════════════════════════
#  check_and_recover
# ═══════════════════════════════════════════════════════════════
class TestCheckAndRecover:
    @pytest.fixture
    def demoted(self) -> Provider:
        p = _provider(AIProvider.GROQ, 2)
        p.priority = 10
        return p

    def test_no_failure_is_noop(self, options: FallbackOptions) -> None:
        p = _provider(AIProvider.GROQ, 2)
        p.priority = 7
        assert check_and_recover(p, options) is False
        assert p.priority == 7

    def test_retryable_recovers_after_timeout(
        self, demoted: Provider, options: FallbackOptions
    ) -> None:
        demoted.record_failure(FailureKind.RETRYABLE, 1000.0)
        now = 1000.0 + options.retryable_error_timeout_s + 1
        assert check_and_recover(demoted, options, now=now) is True
        assert demoted.priority == 2
        assert demoted.last_failure_at is None
        assert demoted.last_failure_kind is None

    def test_retryable_not_recovered_before_timeout(
        self, demoted: Provider, options: FallbackOptions
    ) -> None:
        demoted.record_failure(FailureKind.RETRYABLE, 1000.0)
        now = 1000.0 + options.retryable_error_timeout_s
        assert check_and_recover(demoted, options, now=now) is False
        assert demoted.priority == 10
        assert demoted.last_failure_kind is FailureKind.RETRYABLE

    def test_non_retryable_uses_its_own_timeout(
        self, demoted: Provider, options: FallbackOptions
    ) -> None:
        demoted.record_failure(FailureKind.NON_RETRYABLE, 1000.0)
        # past the retryable window, still inside the non-retryable one
        now = 1000.0 + options.retryable_error_timeout_s + 1
        assert check_and_recover(demoted, options, now=now) is False
        assert demoted.priority == 10

        now = 1000.0 + options.non_retryable_error_timeout_s + 1
        assert check_and_recover(demoted, options, now=now) is True
        assert demoted.priority == 2

    def test_uses_monotonic_clock_by_default(self, demoted: Provider) -> None:
        options = FallbackOptions(non_retryable_error_timeout_s=60.0)
        demoted.record_failure(FailureKind.NON_RETRYABLE, time.monotonic() - 120.0)
        assert check_and_recover(demoted, options) is True
        assert demoted.priority == 2


# ═══════════════════════════════════════════════════════════════
#  recover_on_success
# ═══════════════════════════════════════════════════════════════
class TestRecoverOnSuccess:
    def test_resets_priority_and_clears_failure(self) -> None:
        p = _provider(AIProvider.GROQ, 2)
        p.priority = 10
        p.record_failure(FailureKind.NON_RETRYABLE, time.monotonic())
        assert recover_on_success(p) is True
        assert p.priority == 2
        assert p.last_failure_at is None
        assert p.last_failure_kind is None

    def test_without_failure_is_noop(self) -> None:
        p = _provider(AIProvider.GROQ, 2)
        p.priority = 10
        assert recover_on_success(p) is False
        assert p.priority == 10
