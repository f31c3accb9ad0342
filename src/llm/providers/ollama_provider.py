from __future__ import annotations
from .base import LLMProvider

DEFAULT_BASE_URL = "http://localhost:11434"


class OllamaProvider(LLMProvider):
    async def generate(self, *, system: str, user: str) -> str:
        base_url = (self.config.base_url or DEFAULT_BASE_URL).rstrip("/")
        url = f"{base_url}/api/generate"
        sampling = self.config.sampling
        payload = {
            "model": self.config.model,
            "prompt": user,
            "system": system,
            "stream": False,
            "options": {
                "temperature": sampling.temperature,
                "top_k": sampling.top_k,
                "top_p": sampling.top_p,
                "num_predict": sampling.max_tokens,
                "stop": list(sampling.stop),
            },
        }

        async with self._client() as client:
            r = await client.post(url, json=payload)
            r.raise_for_status()
            data = r.json()

        return data["response"]
