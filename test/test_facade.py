import asyncio
import json

from extraction.ai_extractor import AIExtractor
from extraction.facade import ExtractionFacade, tag_names
from llm.config import AIBackendConfig
from llm.llm_client import LLMClient
from todo_ai.errors import BackendConfigError, ErrorKind
from todo_ai.models import KnownTag, TagColor


def _reply(title):
    return json.dumps({"title": title, "suggestedTags": ["工作"]}, ensure_ascii=False)


class SequencedProvider:
    """Answers each call with its own delay so completions can arrive out of order."""

    def __init__(self, script):
        self.script = list(script)
        self.calls = 0

    async def generate(self, *, system: str, user: str) -> str:
        delay, title = self.script[self.calls]
        self.calls += 1
        await asyncio.sleep(delay)
        return _reply(title)


def _facade(provider, **kwargs):
    extractor = AIExtractor(client_factory=lambda config: LLMClient(provider=provider))
    return ExtractionFacade(extractor=extractor, config_loader=AIBackendConfig, **kwargs)


def test_tag_names_accepts_models_and_strings():
    tags = [KnownTag(name="工作", color=TagColor.RED), "学习"]
    assert tag_names(tags) == ("工作", "学习")


def test_analyze_sets_latest(fake_provider_factory):
    facade = _facade(fake_provider_factory(_reply("A")))
    outcome = asyncio.run(facade.analyze("写报告", [KnownTag(name="工作")]))
    assert outcome.ok
    assert facade.latest.title == "A"
    assert facade.latest.suggested_tags == ["工作"]


def test_empty_input_fails_without_backend(fake_provider_factory):
    provider = fake_provider_factory(_reply("A"))
    facade = _facade(provider)
    outcome = asyncio.run(facade.analyze("", ["工作"]))
    assert outcome.error.kind == ErrorKind.EMPTY_INPUT
    assert provider.prompts == []
    assert facade.latest is None


def test_config_error_is_reported(fake_provider_factory):
    def broken():
        raise BackendConfigError("unsupported AI provider: 'gemini'")

    facade = ExtractionFacade(extractor=AIExtractor(), config_loader=broken)
    outcome = asyncio.run(facade.analyze("写报告", []))
    assert outcome.error.kind == ErrorKind.BACKEND_CONFIG


def test_superseded_call_is_discarded():
    # A is slow, B is fast; A's late answer must not overwrite B's
    provider = SequencedProvider([(0.2, "A"), (0.01, "B")])
    facade = _facade(provider)

    async def scenario():
        first = asyncio.ensure_future(facade.analyze("第一次输入", ["工作"]))
        await asyncio.sleep(0.05)
        second = await facade.analyze("第二次输入", ["工作"])
        return await first, second

    a, b = asyncio.run(scenario())

    assert a.stale and not a.ok
    assert b.ok and b.result.title == "B"
    assert facade.latest.title == "B"


def test_superseded_request_is_cancelled():
    seen = {"cancelled": False}

    class HangingProvider:
        async def generate(self, *, system: str, user: str) -> str:
            if "第一次" not in user:
                return _reply("B")
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                seen["cancelled"] = True
                raise
            return _reply("A")

    facade = _facade(HangingProvider())

    async def scenario():
        first = asyncio.ensure_future(facade.analyze("第一次输入", []))
        await asyncio.sleep(0.01)
        second = await facade.analyze("第二次输入", [])
        return await first, second

    first, second = asyncio.run(scenario())
    assert seen["cancelled"]
    assert first.stale
    assert second.result.title == "B"


def test_cancelled_caller_cancels_its_request():
    seen = {"cancelled": False}

    class HangingProvider:
        async def generate(self, *, system: str, user: str) -> str:
            try:
                await asyncio.sleep(10)
            except asyncio.CancelledError:
                seen["cancelled"] = True
                raise
            return _reply("A")

    facade = _facade(HangingProvider())

    async def scenario():
        caller = asyncio.ensure_future(facade.analyze("写报告", []))
        await asyncio.sleep(0.01)
        inner = facade._inflight
        caller.cancel()
        await asyncio.wait({caller})
        await asyncio.sleep(0.01)
        return caller, inner

    caller, inner = asyncio.run(scenario())
    assert caller.cancelled()
    assert inner.cancelled()
    assert seen["cancelled"]
    assert facade._inflight is None
    assert facade.latest is None


def test_analyze_timeout_falls_back(fake_provider_factory):
    facade = _facade(fake_provider_factory(_reply("A"), delay_s=1.0), analyze_timeout_s=0.01)
    outcome = asyncio.run(facade.analyze("周四下午2点在图书馆和小明讨论项目方案", ["工作"]))
    assert outcome.ok
    assert outcome.source == "rules"
    assert facade.latest.title == "图书馆 小明 讨论 (周四 下午2点)"


def test_import_is_not_superseded(fake_provider_factory):
    reply = json.dumps({"text": "导入", "people": ["小明"]}, ensure_ascii=False)
    facade = _facade(fake_provider_factory(reply))

    async def scenario():
        return await asyncio.gather(facade.import_task("一", []), facade.import_task("二", []))

    first, second = asyncio.run(scenario())
    assert first.ok and second.ok
    assert first.result.notes == "相关人员: 小明"
    assert facade.latest is None


def test_resolve_delegates():
    facade = ExtractionFacade(extractor=AIExtractor(), config_loader=AIBackendConfig)
    assert facade.resolve("没有日期").empty
    assert not facade.resolve("下周一截止").empty
