from datetime import datetime

import pytest

from llm.schemas import ImportReply
from todo_ai.errors import ErrorKind
from todo_ai.models import ExtractionResult, KnownTag, Priority, TimeResolution, Todo


def test_extraction_defaults():
    r = ExtractionResult(title="T")
    assert r.priority == Priority.MEDIUM
    assert r.suggested_tags == []
    assert r.participants == []


def test_suggested_tags_deduplicated_in_order():
    r = ExtractionResult(title="T", suggested_tags=["学习", "工作", "学习"])
    assert r.suggested_tags == ["学习", "工作"]


def test_dates_must_be_plain():
    with pytest.raises(Exception):
        ExtractionResult(title="T", due_date="2026/10/22")


def test_resolution_is_one_sided():
    with pytest.raises(Exception):
        TimeResolution(start_date=datetime(2026, 1, 1), due_date=datetime(2026, 1, 2))
    assert TimeResolution().empty


def test_blank_tag_name_rejected():
    with pytest.raises(Exception):
        KnownTag(name="  ")


def test_todo_blank_text_rejected():
    with pytest.raises(Exception):
        Todo(text=" ")


def test_recoverable_kinds():
    assert {k for k in ErrorKind if k.recoverable} == {
        ErrorKind.BACKEND_HTTP,
        ErrorKind.TIMEOUT,
        ErrorKind.RESPONSE_PARSE,
    }


def test_impossible_calendar_dates_rejected():
    with pytest.raises(ValueError):
        ExtractionResult(title="T", due_date="2026-02-30")
    assert ImportReply(startDate="2026-13-01", dueDate="2026-10-22").startDate is None
