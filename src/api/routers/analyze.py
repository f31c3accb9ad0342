import logging
import time
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field

from api.dependencies import get_facade
from api.metrics import (
    AI_FALLBACKS_TOTAL,
    EXTRACTIONS_TOTAL,
    REQUEST_LATENCY_SECONDS,
    REQUESTS_TOTAL,
)
from extraction.facade import ExtractionFacade
from todo_ai.errors import ErrorKind
from todo_ai.models import KnownTag
from todo_ai.outcome import ExtractionOutcome

router = APIRouter()
logger = logging.getLogger(__name__)

# EmptyInput is the caller's fault; a misconfigured backend is ours
_FAILURE_STATUS = {
    ErrorKind.EMPTY_INPUT: 400,
    ErrorKind.BACKEND_CONFIG: 503,
}


class AnalyzeIn(BaseModel):
    text: str
    tags: List[KnownTag] = Field(default_factory=list)


class ResolveIn(BaseModel):
    text: str


def _record(endpoint: str, entry: str, status: str, outcome: ExtractionOutcome, start: float) -> None:
    # Prometheus counters (best-effort)
    try:
        REQUESTS_TOTAL.labels(endpoint=endpoint, status=status).inc()
        REQUEST_LATENCY_SECONDS.labels(endpoint=endpoint).observe(time.time() - start)
        if outcome.ok:
            EXTRACTIONS_TOTAL.labels(entry=entry, source=outcome.source).inc()
        if outcome.fallback_reason is not None:
            AI_FALLBACKS_TOTAL.labels(reason=outcome.fallback_reason.value).inc()
    except Exception:
        pass


def _respond(endpoint: str, entry: str, outcome: ExtractionOutcome, start: float) -> dict:
    if outcome.stale:
        _record(endpoint, entry, "superseded", outcome, start)
        return {"status": "superseded", "source": None, "fallback_reason": None, "result": None}

    if not outcome.ok:
        error = outcome.error
        _record(endpoint, entry, "failed", outcome, start)
        raise HTTPException(
            status_code=_FAILURE_STATUS.get(error.kind, 500),
            detail={"error": error.kind.value, "message": error.message},
        )

    _record(endpoint, entry, "ok", outcome, start)
    return {
        "status": "ok",
        "source": outcome.source,
        "fallback_reason": outcome.fallback_reason.value if outcome.fallback_reason else None,
        "result": outcome.result.model_dump(mode="json"),
    }


@router.post("/analyze")
async def analyze(payload: AnalyzeIn, facade: ExtractionFacade = Depends(get_facade)) -> dict:
    start = time.time()
    logger.info(f"Received text for analysis: {payload.text[:50]}...")
    outcome = await facade.analyze(payload.text, payload.tags)
    return _respond("/analyze", "analyze", outcome, start)


@router.post("/import")
async def import_task(payload: AnalyzeIn, facade: ExtractionFacade = Depends(get_facade)) -> dict:
    start = time.time()
    logger.info(f"Received text for task import: {payload.text[:50]}...")
    outcome = await facade.import_task(payload.text, payload.tags)
    return _respond("/import", "import", outcome, start)


@router.post("/resolve")
async def resolve(payload: ResolveIn, facade: ExtractionFacade = Depends(get_facade)) -> dict:
    resolution = facade.resolve(payload.text)
    try:
        REQUESTS_TOTAL.labels(endpoint="/resolve", status="ok" if not resolution.empty else "empty").inc()
    except Exception:
        pass
    return resolution.model_dump(mode="json")
