from datetime import date, datetime, time
from typing import Optional

from extraction.facade import ExtractionFacade
from todo_ai.models import ExtractionResult, Todo


def _day_start(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    return datetime.combine(date.fromisoformat(value), time())


class BackendAPI:
    """Turns an analysis the UI accepted into a task record."""

    def __init__(self, facade: ExtractionFacade):
        self.facade = facade

    def create_task(self, analysis: ExtractionResult, now: Optional[datetime] = None) -> Todo:
        # Imported tasks carry explicit YYYY-MM-DD dates; those win over any phrase.
        start_date = _day_start(analysis.start_date)
        due_date = _day_start(analysis.due_date)

        # Otherwise only an estimated-time phrase triggers date resolution, and the
        # resolver reads the title, which carries the time in parentheses.
        if start_date is None and due_date is None and analysis.estimated_time:
            resolution = self.facade.resolve(analysis.title, now)
            start_date = resolution.start_date
            due_date = resolution.due_date

        return Todo(
            text=analysis.title,
            start_date=start_date,
            due_date=due_date,
            tags=list(analysis.suggested_tags),
            priority=analysis.priority,
            notes=analysis.notes,
            location=analysis.location,
            people=list(analysis.participants),
        )
