from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from todo_ai.errors import ErrorKind, ExtractionError
from todo_ai.models import ExtractionResult


@dataclass(frozen=True)
class ExtractionOutcome:
    """Explicit success/failure value handed across the AI and rule-engine stages.

    A successful outcome always carries a result; ``source`` says which engine
    produced it and ``fallback_reason`` records why the AI result was replaced.
    A superseded outcome belongs to a call that lost the last-call-wins race and
    must not be applied by the caller.
    """

    result: Optional[ExtractionResult] = None
    error: Optional[ExtractionError] = None
    source: Optional[str] = None
    fallback_reason: Optional[ErrorKind] = None
    stale: bool = False

    @property
    def ok(self) -> bool:
        return self.result is not None and not self.stale

    @classmethod
    def success(
        cls,
        result: ExtractionResult,
        source: str = "ai",
        fallback_reason: Optional[ErrorKind] = None,
    ) -> "ExtractionOutcome":
        return cls(result=result, source=source, fallback_reason=fallback_reason)

    @classmethod
    def failure(cls, error: ExtractionError) -> "ExtractionOutcome":
        return cls(error=error)

    @classmethod
    def superseded(cls) -> "ExtractionOutcome":
        return cls(stale=True)
