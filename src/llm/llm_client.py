from __future__ import annotations

import asyncio
import json
import logging
import re
from typing import Any, Dict, Optional, Type

import httpx

from llm.config import AIBackendConfig, Provider
from llm.providers.anthropic_provider import AnthropicProvider
from llm.providers.base import LLMProvider
from llm.providers.custom_provider import CustomProvider
from llm.providers.ollama_provider import OllamaProvider
from llm.providers.openai_provider import OpenAIProvider
from todo_ai.errors import (
    BackendConfigError,
    BackendHTTPError,
    ExtractionTimeout,
    ResponseParseError,
)

logger = logging.getLogger(__name__)

# one handler per provider; adding a backend means a new enum member and a new entry here
PROVIDERS: Dict[Provider, Type[LLMProvider]] = {
    Provider.OLLAMA: OllamaProvider,
    Provider.OPENAI: OpenAIProvider,
    Provider.ANTHROPIC: AnthropicProvider,
    Provider.CUSTOM: CustomProvider,
}

_FENCE_RE = re.compile(r"```(?:json)?\s*|\s*```", re.IGNORECASE)


def strip_code_fences(text: str) -> str:
    return _FENCE_RE.sub("", text).strip()


def find_json_object(text: str) -> Optional[str]:
    """Return the first top-level ``{...}`` span, honoring JSON strings and escapes."""
    start = text.find("{")
    while start != -1:
        depth = 0
        in_string = False
        escaped = False
        for i in range(start, len(text)):
            ch = text[i]
            if in_string:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_string = False
                continue
            if ch == '"':
                in_string = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return text[start : i + 1]
        # unbalanced from this brace; try the next one
        start = text.find("{", start + 1)
    return None


def parse_json_object(text: str) -> Dict[str, Any]:
    """Locate and decode the JSON object embedded in a model reply."""
    if not isinstance(text, str):
        raise ResponseParseError(f"model reply is {type(text).__name__}, expected text")
    if not text.strip():
        raise ResponseParseError("empty model reply")

    cleaned = strip_code_fences(text)
    span = find_json_object(cleaned)
    if span is None:
        raise ResponseParseError("no JSON object in model reply", response_body=text[:500])

    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise ResponseParseError(f"invalid JSON in model reply: {e}", response_body=span[:500]) from e

    if not isinstance(data, dict):
        raise ResponseParseError("model reply is not a JSON object", response_body=span[:500])
    return data


class LLMClient:
    """Thin async wrapper that calls one backend and returns its decoded JSON reply.

    Transport failures, non-2xx replies, deadlines and malformed replies all come
    out as ``ExtractionError`` subclasses so callers can handle one error family.
    """

    def __init__(self, provider: LLMProvider):
        self.provider = provider

    @classmethod
    def from_config(
        cls,
        config: AIBackendConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "LLMClient":
        provider_cls = PROVIDERS.get(config.provider)
        if provider_cls is None:
            raise BackendConfigError(f"unsupported AI provider: {config.provider!r}")
        return cls(provider_cls(config, transport=transport))

    async def complete(self, *, system: str, user: str, timeout_s: Optional[float] = None) -> str:
        try:
            if timeout_s is None:
                reply = await self.provider.generate(system=system, user=user)
            else:
                reply = await asyncio.wait_for(
                    self.provider.generate(system=system, user=user),
                    timeout=timeout_s,
                )
        except asyncio.TimeoutError as e:
            raise ExtractionTimeout(f"AI backend did not answer within {timeout_s}s") from e
        except httpx.TimeoutException as e:
            raise ExtractionTimeout(f"AI backend request timed out: {e}") from e
        except httpx.HTTPStatusError as e:
            raise BackendHTTPError(
                f"AI backend returned {e.response.status_code}",
                status_code=e.response.status_code,
                response_body=e.response.text[:500],
            ) from e
        except httpx.HTTPError as e:
            raise BackendHTTPError(f"AI backend unreachable: {e}") from e
        except (KeyError, IndexError, TypeError, ValueError) as e:
            # the provider could not unwrap the reply envelope
            raise ResponseParseError(f"unexpected AI backend reply shape: {e!r}") from e

        if not isinstance(reply, str):
            raise ResponseParseError(
                f"AI backend reply is {type(reply).__name__}, expected text",
                response_body=repr(reply)[:500],
            )
        return reply

    async def complete_json(
        self, *, system: str, user: str, timeout_s: Optional[float] = None
    ) -> Dict[str, Any]:
        text = await self.complete(system=system, user=user, timeout_s=timeout_s)
        return parse_json_object(text)
