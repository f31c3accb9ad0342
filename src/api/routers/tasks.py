import logging

from fastapi import APIRouter, Depends
from pydantic import field_validator

from api import state
from api.backend import BackendAPI
from api.dependencies import get_backend
from api.metrics import REQUESTS_TOTAL, TASKS_CREATED_TOTAL
from todo_ai.models import ExtractionResult

router = APIRouter()
logger = logging.getLogger(__name__)


class TaskIn(ExtractionResult):
    """An accepted analysis; unlike a raw extraction it must carry a title."""

    @field_validator("title")
    @classmethod
    def title_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("title must not be blank")
        return v


@router.post("/tasks")
async def create_task(analysis: TaskIn, backend: BackendAPI = Depends(get_backend)) -> dict:
    """Create a task record from an analysis the user accepted."""
    todo = backend.create_task(analysis)
    state.recent_tasks.appendleft(todo)
    logger.info(f"Created task {todo.id}: {todo.text[:50]}")

    try:
        REQUESTS_TOTAL.labels(endpoint="/tasks", status="created").inc()
        TASKS_CREATED_TOTAL.inc()
    except Exception:
        pass

    return {"task": todo.model_dump(mode="json")}


@router.get("/tasks")
async def get_tasks(limit: int = 20) -> dict:
    """Get recently created tasks."""
    tasks_list = list(state.recent_tasks)[:limit]
    return {
        "tasks": [t.model_dump(mode="json") for t in tasks_list],
        "total": len(state.recent_tasks),
    }


@router.delete("/tasks")
async def clear_tasks() -> dict:
    state.recent_tasks.clear()
    return {"status": "cleared"}
