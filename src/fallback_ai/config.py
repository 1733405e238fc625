"""Fallback AI — configuration loaded from the environment."""

from __future__ import annotations

from functools import lru_cache

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from fallback_ai.domain.enums import AIProvider
from fallback_ai.shared.providers.types import FallbackOptions


class Settings(BaseSettings):
    """Centralised, validated configuration loaded from environment / .env file."""

    model_config = SettingsConfigDict(
        env_prefix="FALLBACK_AI_",
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # ── Logging ──────────────────────────────────────────────
    log_level: str = "INFO"
    json_logs: bool = False

    # ── Fallback behaviour ───────────────────────────────────
    enable_priority_updates: bool = True
    timeout_s: float = 30.0
    retryable_codes: str = "429,500"  # comma-separated
    retryable_error_timeout_s: float = 300.0
    non_retryable_error_timeout_s: float = 1800.0

    # ── Providers ────────────────────────────────────────────
    # position in the list is the priority (first = 1)
    provider_priority: str = "groq,gemini,mistral,cerebras"

    groq_api_key: str = ""
    gemini_api_key: str = ""
    mistral_api_key: str = ""
    cerebras_api_key: str = ""

    groq_model: str = "llama3-8b-8192"
    gemini_model: str = "gemini-2.0-flash"
    mistral_model: str = "mistral-small-latest"
    cerebras_model: str = "llama3.1-8b"

    @field_validator("log_level")
    @classmethod
    def _upper_log_level(cls, v: str) -> str:
        return v.upper()

    @field_validator("retryable_codes")
    @classmethod
    def _validate_codes(cls, v: str) -> str:
        for code in v.split(","):
            if code.strip() and not code.strip().isdigit():
                raise ValueError(f"retryable_codes must be integers, got {code.strip()!r}")
        return v

    @field_validator("provider_priority")
    @classmethod
    def _validate_priority(cls, v: str) -> str:
        known = {p.value for p in AIProvider}
        for name in v.split(","):
            if name.strip() and name.strip().lower() not in known:
                raise ValueError(f"unknown provider in provider_priority: {name.strip()!r}")
        return v

    # ── Derived helpers ──────────────────────────────────────
    @property
    def retryable_code_set(self) -> frozenset[int]:
        return frozenset(int(c) for c in self.retryable_codes.split(",") if c.strip())

    @property
    def priority_map(self) -> dict[AIProvider, int]:
        names = [n.strip().lower() for n in self.provider_priority.split(",") if n.strip()]
        return {AIProvider(name): idx + 1 for idx, name in enumerate(names)}

    def api_key_for(self, provider: AIProvider) -> str:
        return getattr(self, f"{provider.value}_api_key")

    def model_for(self, provider: AIProvider) -> str:
        return getattr(self, f"{provider.value}_model")

    def to_options(self) -> FallbackOptions:
        return FallbackOptions(
            enable_priority_updates=self.enable_priority_updates,
            timeout_s=self.timeout_s,
            retryable_codes=self.retryable_code_set,
            retryable_error_timeout_s=self.retryable_error_timeout_s,
            non_retryable_error_timeout_s=self.non_retryable_error_timeout_s,
        )


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
