from __future__ import annotations

import os
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from todo_ai.errors import BackendConfigError


class Provider(str, Enum):
    OLLAMA = "ollama"  # local model server
    OPENAI = "openai"
    ANTHROPIC = "anthropic"
    CUSTOM = "custom"  # any OpenAI-compatible endpoint


class SamplingOptions(BaseModel):
    model_config = ConfigDict(frozen=True)

    temperature: float = Field(0.3, ge=0.0, le=2.0)
    top_k: int = Field(10, ge=1)
    top_p: float = Field(0.8, gt=0.0, le=1.0)
    max_tokens: int = Field(1024, gt=0)
    stop: List[str] = Field(default_factory=lambda: ["```"])


class AIBackendConfig(BaseModel):
    """Backend selection for one extraction call; immutable once built."""

    model_config = ConfigDict(frozen=True)

    provider: Provider = Provider.OLLAMA
    model: str = "gemma3:4b"
    api_key: Optional[str] = None
    base_url: Optional[str] = None
    sampling: SamplingOptions = Field(default_factory=SamplingOptions)


def _env(name: str, default: str = "") -> str:
    return os.getenv(name, default).strip()


def _api_key_for(provider: Provider) -> Optional[str]:
    key = _env("AI_API_KEY")
    if not key and provider == Provider.OPENAI:
        key = _env("OPENAI_API_KEY")
    elif not key and provider == Provider.ANTHROPIC:
        key = _env("ANTHROPIC_API_KEY")
    return key or None


def load_backend_config() -> AIBackendConfig:
    """Read the backend configuration from the environment.

    Called once per facade call so a changed environment takes effect on the
    next extraction without restarting the app.
    """
    raw_provider = _env("AI_PROVIDER", "ollama").lower()
    try:
        provider = Provider(raw_provider)
    except ValueError:
        raise BackendConfigError(f"unsupported AI provider: {raw_provider!r}") from None

    stop = [s for s in _env("AI_STOP", "```").split(",") if s]

    try:
        sampling = SamplingOptions(
            temperature=float(_env("AI_TEMPERATURE", "0.3")),
            top_k=int(_env("AI_TOP_K", "10")),
            top_p=float(_env("AI_TOP_P", "0.8")),
            max_tokens=int(_env("AI_MAX_TOKENS", "1024")),
            stop=stop,
        )
    except ValueError as e:
        raise BackendConfigError(f"invalid sampling options: {e}") from e

    return AIBackendConfig(
        provider=provider,
        model=_env("AI_MODEL", "gemma3:4b"),
        api_key=_api_key_for(provider),
        base_url=_env("AI_BASE_URL") or None,
        sampling=sampling,
    )


def timeout_from_env(name: str, default: float) -> float:
    try:
        return float(_env(name, str(default)))
    except ValueError:
        return default
