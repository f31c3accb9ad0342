from __future__ import annotations

import asyncio
import logging
from datetime import datetime
from typing import Callable, Iterable, Optional, Tuple, Union

from extraction import datetime_resolver
from extraction.ai_extractor import ANALYZE_TIMEOUT_S, IMPORT_TIMEOUT_S, AIExtractor
from llm.config import AIBackendConfig, load_backend_config, timeout_from_env
from todo_ai.errors import BackendConfigError, EmptyInputError
from todo_ai.models import ExtractionResult, KnownTag, TimeResolution
from todo_ai.outcome import ExtractionOutcome

logger = logging.getLogger(__name__)

TagLike = Union[KnownTag, str]


def tag_names(known_tags: Iterable[TagLike]) -> Tuple[str, ...]:
    """Snapshot the caller's tags as an immutable tuple of names."""
    return tuple(t.name if isinstance(t, KnownTag) else str(t) for t in known_tags)


class ExtractionFacade:
    """Single entry point the UI talks to.

    ``analyze`` is last-call-wins: every call takes a fresh request token and
    cancels the analyze still in flight. A call whose token is no longer
    current returns a superseded outcome and never touches ``latest``.
    """

    def __init__(
        self,
        extractor: Optional[AIExtractor] = None,
        config_loader: Callable[[], AIBackendConfig] = load_backend_config,
        analyze_timeout_s: Optional[float] = None,
        import_timeout_s: Optional[float] = None,
    ):
        self.extractor = extractor or AIExtractor()
        self.config_loader = config_loader
        self.analyze_timeout_s = (
            analyze_timeout_s
            if analyze_timeout_s is not None
            else timeout_from_env("AI_ANALYZE_TIMEOUT_S", ANALYZE_TIMEOUT_S)
        )
        self.import_timeout_s = (
            import_timeout_s
            if import_timeout_s is not None
            else timeout_from_env("AI_IMPORT_TIMEOUT_S", IMPORT_TIMEOUT_S)
        )

        self.latest: Optional[ExtractionResult] = None
        self._token = 0
        self._inflight: Optional[asyncio.Task] = None

    def _load_config(self) -> Union[AIBackendConfig, ExtractionOutcome]:
        try:
            return self.config_loader()
        except BackendConfigError as e:
            logger.error(f"AI backend configuration rejected: {e}")
            return ExtractionOutcome.failure(e)

    async def analyze(self, text: str, known_tags: Iterable[TagLike] = ()) -> ExtractionOutcome:
        self._token += 1
        token = self._token
        if self._inflight is not None and not self._inflight.done():
            self._inflight.cancel()
            self._inflight = None

        if not text or not text.strip():
            self.latest = None
            return ExtractionOutcome.failure(EmptyInputError("文本不能为空"))

        config = self._load_config()
        if isinstance(config, ExtractionOutcome):
            return config

        task = asyncio.ensure_future(
            self.extractor.analyze(text, tag_names(known_tags), config, timeout_s=self.analyze_timeout_s)
        )
        self._inflight = task

        # wait() instead of awaiting the task keeps our own cancellation distinct
        # from the cancellation of a superseded task
        try:
            await asyncio.wait({task})
        except asyncio.CancelledError:
            # nobody is left to read the answer
            task.cancel()
            if self._inflight is task:
                self._inflight = None
            raise

        if task.cancelled() or token != self._token:
            logger.info(f"Discarding superseded analysis #{token}")
            return ExtractionOutcome.superseded()

        if self._inflight is task:
            self._inflight = None
        outcome = task.result()
        if outcome.ok:
            self.latest = outcome.result
        return outcome

    async def import_task(self, text: str, known_tags: Iterable[TagLike] = ()) -> ExtractionOutcome:
        if not text or not text.strip():
            return ExtractionOutcome.failure(EmptyInputError("文本不能为空"))

        config = self._load_config()
        if isinstance(config, ExtractionOutcome):
            return config

        return await self.extractor.import_task(
            text, tag_names(known_tags), config, timeout_s=self.import_timeout_s
        )

    def resolve(self, text: str, now: Optional[datetime] = None) -> TimeResolution:
        return datetime_resolver.resolve(text, now)
