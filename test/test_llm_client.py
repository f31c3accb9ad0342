import asyncio

import pytest

from llm.llm_client import LLMClient, find_json_object, parse_json_object
from todo_ai.errors import ResponseParseError

REPLY = '{"title":"图书馆 小明 讨论","notes":"项目方案"}'


def test_complete_json_plain(fake_provider_factory):
    client = LLMClient(provider=fake_provider_factory(REPLY))
    out = asyncio.run(client.complete_json(system="s", user="u"))
    assert out["title"] == "图书馆 小明 讨论"


def test_complete_passes_prompt(fake_provider_factory):
    provider = fake_provider_factory(REPLY)
    client = LLMClient(provider=provider)
    asyncio.run(client.complete(system="s", user="hello"))
    assert provider.prompts == ["hello"]


@pytest.mark.parametrize(
    "wrapped",
    [
        f"```json\n{REPLY}\n```",
        f"```\n{REPLY}\n```",
        f"好的，这是结果：{REPLY} 希望有帮助。",
        f"Sure!\n```json\n{REPLY}\n```\nThanks.",
    ],
)
def test_wrapped_reply_matches_unwrapped(wrapped):
    assert parse_json_object(wrapped) == parse_json_object(REPLY)


def test_brace_matching_stops_at_first_object():
    text = '{"a": 1} and later {"b": 2}'
    assert find_json_object(text) == '{"a": 1}'


def test_braces_inside_strings_are_ignored():
    text = 'x {"notes": "use } and { freely", "n": {"k": "\\"}"}} y'
    assert parse_json_object(text) == {"notes": "use } and { freely", "n": {"k": '"}'}}


def test_unbalanced_leading_brace_is_skipped():
    assert parse_json_object('{ oops {"a": 1}') == {"a": 1}
