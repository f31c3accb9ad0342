from __future__ import annotations

import re
import uuid
from datetime import date, datetime
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")


def is_calendar_date(v: str) -> bool:
    """YYYY-MM-DD that also names a real day (no 2026-02-30)."""
    if not DATE_RE.match(v):
        return False
    try:
        date.fromisoformat(v)
    except ValueError:
        return False
    return True


class Priority(str, Enum):
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class TagColor(str, Enum):
    BLUE = "blue"
    GREEN = "green"
    RED = "red"
    YELLOW = "yellow"
    PURPLE = "purple"
    GRAY = "gray"


class KnownTag(BaseModel):
    name: str = Field(..., min_length=1)
    color: TagColor = TagColor.BLUE

    @field_validator("name")
    @classmethod
    def name_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("tag name must not be blank")
        return v2


class ExtractionResult(BaseModel):
    title: str
    notes: Optional[str] = None
    suggested_tags: List[str] = Field(default_factory=list)
    priority: Priority = Priority.MEDIUM
    estimated_time: Optional[str] = None
    location: Optional[str] = None
    participants: List[str] = Field(default_factory=list)

    # only the task-import entry point fills these
    start_date: Optional[str] = None
    due_date: Optional[str] = None

    @field_validator("suggested_tags")
    @classmethod
    def dedupe_tags(cls, v: List[str]) -> List[str]:
        seen = set()
        out = []
        for tag in v:
            if tag not in seen:
                seen.add(tag)
                out.append(tag)
        return out

    @field_validator("start_date", "due_date")
    @classmethod
    def plain_date(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not is_calendar_date(v):
            raise ValueError("dates must be YYYY-MM-DD")
        return v


class TimeResolution(BaseModel):
    """Outcome of resolving a weekday phrase; at most one side is set."""

    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None

    @model_validator(mode="after")
    def single_interpretation(self) -> "TimeResolution":
        if self.start_date is not None and self.due_date is not None:
            raise ValueError("a resolution is either a start or a due date, not both")
        return self

    @property
    def empty(self) -> bool:
        return self.start_date is None and self.due_date is None


class Todo(BaseModel):
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:12])
    text: str = Field(..., min_length=1)
    completed: bool = False
    created_at: datetime = Field(default_factory=datetime.now)

    start_date: Optional[datetime] = None
    due_date: Optional[datetime] = None

    tags: List[str] = Field(default_factory=list)
    priority: Optional[Priority] = None
    notes: Optional[str] = None
    location: Optional[str] = None
    people: List[str] = Field(default_factory=list)

    @field_validator("text")
    @classmethod
    def text_not_blank(cls, v: str) -> str:
        v2 = v.strip()
        if not v2:
            raise ValueError("text must not be blank")
        return v2
