import asyncio

import pytest

from extraction.ai_extractor import AIExtractor
from llm.config import AIBackendConfig
from llm.llm_client import LLMClient

KNOWN_TAGS = ["工作", "学习", "生活", "重要"]


class FakeProvider:
    def __init__(self, response_text: str = "", *, delay_s: float = 0.0, error: Exception = None):
        self._response_text = response_text
        self._delay_s = delay_s
        self._error = error
        self.prompts = []

    async def generate(self, *, system: str, user: str) -> str:
        self.prompts.append(user)
        if self._delay_s:
            await asyncio.sleep(self._delay_s)
        if self._error is not None:
            raise self._error
        return self._response_text


@pytest.fixture
def fake_provider_factory():
    def _make(response_text: str = "", **kwargs):
        return FakeProvider(response_text, **kwargs)
    return _make


@pytest.fixture
def backend_config():
    return AIBackendConfig()


@pytest.fixture
def extractor_for():
    def _make(provider):
        return AIExtractor(client_factory=lambda config: LLMClient(provider=provider))
    return _make
