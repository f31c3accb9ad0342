import logging

from fastapi import APIRouter, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from llm.config import load_backend_config
from todo_ai.errors import BackendConfigError

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health")
async def health_check() -> dict:
    """Health check endpoint for container orchestration."""
    health = {"status": "healthy"}
    try:
        config = load_backend_config()
        health["provider"] = config.provider.value
        health["model"] = config.model
    except BackendConfigError as e:
        # extraction calls will fail until the environment is fixed
        health["status"] = "degraded"
        health["error"] = str(e)
    return health


@router.get("/metrics")
async def metrics() -> Response:
    """
    Prometheus scrape endpoint.
    """
    data = generate_latest()
    return Response(content=data, media_type=CONTENT_TYPE_LATEST)
