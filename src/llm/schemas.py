from __future__ import annotations
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, field_validator

from todo_ai.models import Priority, is_calendar_date

# Models answer in camelCase and are sloppy about types; these schemas coerce
# what can be coerced and blank out the rest instead of rejecting the reply.


def _as_text(v: Any) -> Optional[str]:
    if isinstance(v, str):
        v = v.strip()
        return v or None
    return None


def _as_text_list(v: Any) -> List[str]:
    if not isinstance(v, list):
        return []
    return [s.strip() for s in v if isinstance(s, str) and s.strip()]


def _as_priority(v: Any) -> Optional[Priority]:
    if isinstance(v, str) and v in {p.value for p in Priority}:
        return Priority(v)
    return None


class _Reply(BaseModel):
    model_config = ConfigDict(extra="ignore")

    priority: Optional[Priority] = None
    location: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("location", "notes", mode="before")
    @classmethod
    def text_or_none(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("priority", mode="before")
    @classmethod
    def known_priority(cls, v: Any) -> Optional[Priority]:
        return _as_priority(v)


class AnalyzerReply(_Reply):
    """Reply to the analyzer prompt (participants kept as a list)."""

    title: Optional[str] = None
    suggestedTags: List[str] = []
    estimatedTime: Optional[str] = None
    participants: List[str] = []

    @field_validator("title", "estimatedTime", mode="before")
    @classmethod
    def analyzer_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("suggestedTags", "participants", mode="before")
    @classmethod
    def analyzer_lists(cls, v: Any) -> List[str]:
        return _as_text_list(v)


class ImportReply(_Reply):
    """Reply to the task-import prompt (people later folded into notes)."""

    text: Optional[str] = None
    title: Optional[str] = None
    tags: List[str] = []
    startDate: Optional[str] = None
    dueDate: Optional[str] = None
    people: List[str] = []

    @field_validator("text", "title", mode="before")
    @classmethod
    def import_text(cls, v: Any) -> Optional[str]:
        return _as_text(v)

    @field_validator("tags", "people", mode="before")
    @classmethod
    def import_lists(cls, v: Any) -> List[str]:
        return _as_text_list(v)

    @field_validator("startDate", "dueDate", mode="before")
    @classmethod
    def plain_date(cls, v: Any) -> Optional[str]:
        if isinstance(v, str) and is_calendar_date(v.strip()):
            return v.strip()
        return None
