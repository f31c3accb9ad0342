from __future__ import annotations
from typing import Optional

import httpx

from llm.config import AIBackendConfig
from todo_ai.errors import BackendConfigError
from .base import LLMProvider

DEFAULT_BASE_URL = "https://api.openai.com/v1"


class OpenAIProvider(LLMProvider):
    key_required = True

    def __init__(self, config: AIBackendConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__(config, transport)
        if self.key_required and not config.api_key:
            raise BackendConfigError("OpenAI API key is missing (AI_API_KEY / OPENAI_API_KEY)")

    def _url(self) -> str:
        base_url = (self.config.base_url or DEFAULT_BASE_URL).rstrip("/")
        return f"{base_url}/chat/completions"

    def _headers(self) -> dict:
        headers = {"Content-Type": "application/json"}
        if self.config.api_key:
            headers["Authorization"] = f"Bearer {self.config.api_key}"
        return headers

    async def generate(self, *, system: str, user: str) -> str:
        sampling = self.config.sampling
        payload = {
            "model": self.config.model,
            "messages": [
                {"role": "system", "content": system},
                {"role": "user", "content": user},
            ],
            "temperature": sampling.temperature,
            "top_p": sampling.top_p,
            "max_tokens": sampling.max_tokens,
        }
        async with self._client() as client:
            r = await client.post(self._url(), headers=self._headers(), json=payload)
            r.raise_for_status()
            data = r.json()

        return data["choices"][0]["message"]["content"]
