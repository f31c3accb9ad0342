from __future__ import annotations
from typing import Optional

import httpx

from llm.config import AIBackendConfig
from todo_ai.errors import BackendConfigError
from .openai_provider import OpenAIProvider


class CustomProvider(OpenAIProvider):
    """Self-hosted OpenAI-compatible endpoint; the key is optional, the URL is not."""

    key_required = False

    def __init__(self, config: AIBackendConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config, transport)
        if not config.base_url:
            raise BackendConfigError("custom provider needs AI_BASE_URL")
