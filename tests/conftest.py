"""Shared test fixtures."""

from __future__ import annotations

import os
import sys
from typing import Callable

import httpx
import pytest

# Add src to path so imports work without an editable install
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "../src")))

from fallback_ai.domain.enums import AIProvider
from fallback_ai.shared.providers.types import FallbackOptions, Provider


@pytest.fixture
def providers() -> list[Provider]:
    return [
        Provider(
            name=AIProvider.GROQ,
            api_key="test-groq-key",
            model="llama3-8b-8192",
            priority=1,
            parameters={"temperature": 0.7},
        ),
        Provider(
            name=AIProvider.GEMINI,
            api_key="test-gemini-key",
            model="gemini-2.0-flash",
            priority=2,
            parameters={"temperature": 0.8},
        ),
    ]


@pytest.fixture
def three_providers() -> list[Provider]:
    return [
        Provider(name=AIProvider.GROQ, api_key="k1", model="m1", priority=1),
        Provider(name=AIProvider.GEMINI, api_key="k2", model="m2", priority=2),
        Provider(name=AIProvider.MISTRAL, api_key="k3", model="m3", priority=3),
    ]


@pytest.fixture
def options() -> FallbackOptions:
    return FallbackOptions()


@pytest.fixture
def mock_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], httpx.AsyncClient]:
    """Factory for an AsyncClient whose requests are answered by ``handler``."""

    def _make(handler: Callable[[httpx.Request], httpx.Response]) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(handler))

    return _make


