from __future__ import annotations
from typing import Optional

import httpx

from llm.config import AIBackendConfig
from todo_ai.errors import BackendConfigError
from .base import LLMProvider

DEFAULT_BASE_URL = "https://api.anthropic.com/v1"
API_VERSION = "2023-06-01"


class AnthropicProvider(LLMProvider):
    def __init__(self, config: AIBackendConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config, transport)
        if not config.api_key:
            raise BackendConfigError("Anthropic API key is missing (AI_API_KEY / ANTHROPIC_API_KEY)")

    async def generate(self, *, system: str, user: str) -> str:
        base_url = (self.config.base_url or DEFAULT_BASE_URL).rstrip("/")
        url = f"{base_url}/messages"
        headers = {
            "Content-Type": "application/json",
            "x-api-key": self.config.api_key,
            "anthropic-version": API_VERSION,
        }
        sampling = self.config.sampling
        payload = {
            "model": self.config.model,
            "system": system,
            "messages": [{"role": "user", "content": user}],
            "temperature": sampling.temperature,
            "top_k": sampling.top_k,
            "top_p": sampling.top_p,
            "max_tokens": sampling.max_tokens,
        }
        async with self._client() as client:
            r = await client.post(url, headers=headers, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["content"][0]["text"]
