from __future__ import annotations
from abc import ABC, abstractmethod
from typing import Optional

import httpx

from llm.config import AIBackendConfig


class LLMProvider(ABC):
    """One backend handler per ``Provider`` member."""

    # requests are also bounded by the extractor's own deadline
    request_timeout_s: float = 30.0

    def __init__(self, config: AIBackendConfig, transport: Optional[httpx.AsyncBaseTransport] = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.request_timeout_s, transport=self._transport)

    @abstractmethod
    async def generate(self, *, system: str, user: str) -> str:
        """
        Must return the model output as TEXT (JSON is located/validated in LLMClient).
        """
        raise NotImplementedError
