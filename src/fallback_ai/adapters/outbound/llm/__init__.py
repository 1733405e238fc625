"""LLM adapter — the public fallback client, backed by the FallbackGateway.

Each provider speaks the OpenAI-compatible chat completions protocol, so the
HTTP call is one function for all of them.  The gateway handles ordering,
failover, demotion, and recovery.
"""

from __future__ import annotations

import time
from types import TracebackType
from typing import Any, Iterable

import httpx
import structlog

from fallback_ai.config import Settings, get_settings
from fallback_ai.domain.enums import AIProvider
from fallback_ai.domain.exceptions import ProviderCallError
from fallback_ai.shared.providers.gateway import FallbackGateway
from fallback_ai.shared.providers.registry import ProviderRegistry
from fallback_ai.shared.providers.types import FallbackOptions, Provider, ProviderState

logger = structlog.get_logger(__name__)

PROVIDER_MAP: dict[AIProvider, str] = {
    AIProvider.GROQ: "https://api.groq.com/openai/v1",
    AIProvider.GEMINI: "https://generativelanguage.googleapis.com/v1beta/openai",
    AIProvider.MISTRAL: "https://api.mistral.ai/v1",
    AIProvider.CEREBRAS: "https://api.cerebras.ai/v1",
}


def build_providers(settings: Settings) -> list[Provider]:
    """Build a Provider for every backend that has an API key configured."""
    priority_map = settings.priority_map
    providers: list[Provider] = []
    for name in AIProvider:
        api_key = settings.api_key_for(name).strip()
        if not api_key:
            continue
        providers.append(
            Provider(
                name=name,
                api_key=api_key,
                model=settings.model_for(name),
                priority=priority_map.get(name, len(priority_map) + 1),
            )
        )
    return providers


def build_request_body(provider: Provider, prompt: str) -> dict[str, Any]:
    """Chat completion body; provider parameters are merged in last."""
    body: dict[str, Any] = {
        "model": provider.model,
        "messages": [{"role": "user", "content": prompt}],
    }
    if provider.parameters:
        body.update(provider.parameters)
    return body


class FallbackAI:
    """Prompt client with automatic provider fallback and priority management.

    Usage::

        async with FallbackAI(providers) as ai:
            result = await ai.call("Hello")
            print(result["provider"], result["choices"][0]["message"]["content"])

    An ``httpx.AsyncClient`` may be injected; the client is only closed by
    ``aclose`` when it was created here.
    """

    def __init__(
        self,
        providers: Iterable[Provider],
        options: FallbackOptions | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        self._options = options or FallbackOptions()
        self._registry = ProviderRegistry(providers)
        self._gateway = FallbackGateway(self._registry, self._options)
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=self._options.timeout_s)

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> FallbackAI:
        settings = settings or get_settings()
        return cls(build_providers(settings), settings.to_options(), client=client)

    @property
    def options(self) -> FallbackOptions:
        return self._options

    # ── Calls ────────────────────────────────────────────────
    async def call(self, prompt: str) -> dict[str, Any]:
        """Send ``prompt`` to the providers in priority order.

        Returns the raw response body of the first provider that succeeds,
        with ``provider`` set and ``errors`` listing earlier failures (only
        when there were any).

        Raises:
            ValidationError: If ``prompt`` is not a non-empty string.
            AllProvidersFailedError: If every provider failed.
        """
        return await self._gateway.execute(prompt, self._post_completion)

    async def _post_completion(self, provider: Provider, prompt: str) -> dict[str, Any]:
        response = await self._client.post(
            f"{PROVIDER_MAP[provider.name]}/chat/completions",
            headers={
                "Authorization": f"Bearer {provider.api_key}",
                "Content-Type": "application/json",
            },
            json=build_request_body(provider, prompt),
        )
        if not response.is_success:
            raise self._error_from_response(provider, response)
        return response.json()

    def _error_from_response(
        self, provider: Provider, response: httpx.Response
    ) -> ProviderCallError:
        try:
            body = response.json()
        except ValueError:
            body = {}
        if isinstance(body, list):
            body = body[0] if body else {}

        remote_message = None
        if isinstance(body, dict) and isinstance(body.get("error"), dict):
            remote_message = body["error"].get("message")

        label = "Retryable" if self._options.is_retryable(response.status_code) else "Non-retryable"
        return ProviderCallError(
            f'{label} error for "{provider.name.value}": {remote_message or "Unknown error"}',
            provider=provider.name,
            status_code=response.status_code,
            error_body=body,
        )

    # ── Registry access ──────────────────────────────────────
    def get_providers(self) -> list[Provider]:
        return self._registry.snapshot()

    def add_provider(self, provider: Provider) -> None:
        """Add a provider at runtime; the list is re-sorted by priority."""
        self._registry.add(provider)

    def remove_provider(self, provider: Provider) -> None:
        self._registry.remove(provider)

    def get_provider_states(self) -> list[ProviderState]:
        now = time.monotonic()
        return [
            ProviderState(
                name=p.name,
                model=p.model,
                priority=p.priority,
                original_priority=p.original_priority,
                last_failure_kind=p.last_failure_kind,
                seconds_since_failure=(
                    None if p.last_failure_at is None else now - p.last_failure_at
                ),
            )
            for p in self._registry.snapshot()
        ]

    # ── Lifecycle ────────────────────────────────────────────
    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> FallbackAI:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()
