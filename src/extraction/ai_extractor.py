from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from pydantic import ValidationError

from extraction.rule_engine import RuleBasedExtractor
from llm.config import AIBackendConfig
from llm.llm_client import LLMClient
from llm.prompts import SYSTEM_PROMPT, build_analyzer_prompt, build_import_prompt
from llm.schemas import AnalyzerReply, ImportReply
from todo_ai.errors import EmptyInputError, ErrorKind, ExtractionError, ResponseParseError
from todo_ai.models import ExtractionResult, Priority
from todo_ai.outcome import ExtractionOutcome

logger = logging.getLogger(__name__)

ANALYZE_TIMEOUT_S = 5.0
IMPORT_TIMEOUT_S = 10.0

ANALYZE_TAG_LIMIT = 3
IMPORT_TAG_LIMIT = 5

PEOPLE_PREFIX = "相关人员: "


def select_tags(raw: Sequence[str], known_tags: Sequence[str], limit: int) -> List[str]:
    """Keep only known tag names, first occurrence wins, at most ``limit``."""
    known = set(known_tags)
    out: List[str] = []
    for tag in raw:
        if tag in known and tag not in out:
            out.append(tag)
        if len(out) >= limit:
            break
    return out


def fold_people_into_notes(notes: Optional[str], people: Sequence[str]) -> Optional[str]:
    if not people:
        return notes
    line = PEOPLE_PREFIX + ", ".join(people)
    return f"{notes}\n\n{line}" if notes else line


class AIExtractor:
    """Model-backed extractor with a transparent rule-engine fallback.

    Two entry points share the pipeline but keep the output shapes their
    callers expect: ``analyze`` keeps participants as a list, ``import_task``
    folds them into the notes and also accepts start/due dates.
    """

    def __init__(
        self,
        client_factory: Callable[[AIBackendConfig], LLMClient] = LLMClient.from_config,
        rules: Optional[RuleBasedExtractor] = None,
    ):
        self.client_factory = client_factory
        self.rules = rules or RuleBasedExtractor()

    async def analyze(
        self,
        text: str,
        known_tags: Sequence[str],
        config: AIBackendConfig,
        timeout_s: float = ANALYZE_TIMEOUT_S,
    ) -> ExtractionOutcome:
        outcome = await self._attempt(
            text, known_tags, config, timeout_s,
            prompt=build_analyzer_prompt(text, known_tags),
            coerce=self._coerce_analyzer,
        )
        return self._recover(text, known_tags, outcome)

    async def import_task(
        self,
        text: str,
        known_tags: Sequence[str],
        config: AIBackendConfig,
        timeout_s: float = IMPORT_TIMEOUT_S,
    ) -> ExtractionOutcome:
        outcome = await self._attempt(
            text, known_tags, config, timeout_s,
            prompt=build_import_prompt(text, known_tags),
            coerce=self._coerce_import,
        )
        return self._recover(text, known_tags, outcome)

    async def _attempt(self, text, known_tags, config, timeout_s, *, prompt, coerce) -> ExtractionOutcome:
        if not text or not text.strip():
            return ExtractionOutcome.failure(EmptyInputError("文本不能为空"))

        try:
            client = self.client_factory(config)
            data = await client.complete_json(system=SYSTEM_PROMPT, user=prompt, timeout_s=timeout_s)
            result = coerce(text, known_tags, data)
        except ExtractionError as e:
            return ExtractionOutcome.failure(e)

        return ExtractionOutcome.success(result, source="ai")

    def _recover(self, text: str, known_tags: Sequence[str], outcome: ExtractionOutcome) -> ExtractionOutcome:
        if outcome.ok:
            return outcome

        error = outcome.error
        if error is None or not error.kind.recoverable:
            if error is not None and error.kind != ErrorKind.EMPTY_INPUT:
                logger.error(f"AI extraction misconfigured: {error}")
            return outcome

        logger.warning(f"AI extraction failed ({error.kind.value}): {error}; using rule engine")
        result = self.rules.extract(text, known_tags)
        return ExtractionOutcome.success(result, source="rules", fallback_reason=error.kind)

    @staticmethod
    def _coerce_analyzer(text: str, known_tags: Sequence[str], data: dict) -> ExtractionResult:
        try:
            reply = AnalyzerReply.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(f"analyzer reply does not match schema: {e}") from e

        return ExtractionResult(
            title=reply.title or text,
            notes=reply.notes,
            suggested_tags=select_tags(reply.suggestedTags, known_tags, ANALYZE_TAG_LIMIT),
            priority=reply.priority or Priority.MEDIUM,
            estimated_time=reply.estimatedTime,
            location=reply.location,
            participants=reply.participants,
        )

    @staticmethod
    def _coerce_import(text: str, known_tags: Sequence[str], data: dict) -> ExtractionResult:
        try:
            reply = ImportReply.model_validate(data)
        except ValidationError as e:
            raise ResponseParseError(f"import reply does not match schema: {e}") from e

        return ExtractionResult(
            title=reply.text or reply.title or text,
            notes=fold_people_into_notes(reply.notes, reply.people),
            suggested_tags=select_tags(reply.tags, known_tags, IMPORT_TAG_LIMIT),
            priority=reply.priority or Priority.MEDIUM,
            location=reply.location,
            start_date=reply.startDate,
            due_date=reply.dueDate,
        )
