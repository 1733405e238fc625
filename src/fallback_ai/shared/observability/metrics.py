"""Prometheus metrics for provider fallback."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


# ── Provider attempts ────────────────────────────────────────
PROVIDER_ATTEMPTS = Counter(
    "fallback_ai_provider_attempts_total",
    "Provider call attempts by outcome",
    ["provider", "outcome"],  # success / retryable / non_retryable
)

PROVIDER_LATENCY = Histogram(
    "fallback_ai_provider_latency_seconds",
    "Latency of a single provider attempt",
    ["provider"],
    buckets=(0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0),
)

# ── Scheduling ───────────────────────────────────────────────
PROVIDER_DEMOTIONS = Counter(
    "fallback_ai_provider_demotions_total",
    "Providers pushed back after non-retryable failures",
    ["provider"],
)

PROVIDER_RECOVERIES = Counter(
    "fallback_ai_provider_recoveries_total",
    "Providers restored to their configured priority",
    ["provider", "reason"],  # timeout / success
)

CALLS_EXHAUSTED = Counter(
    "fallback_ai_calls_exhausted_total",
    "Calls where every provider failed",
)
