import logging
import os

from fastapi import FastAPI

from api import state
from api.routers import analyze, ops, tasks
from extraction.facade import ExtractionFacade

# Logging configuration
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").strip().upper(),
    format="%(asctime)s [%(levelname)s] %(message)s"
)
logger = logging.getLogger(__name__)

app = FastAPI(title="todo-ai")

app.include_router(analyze.router)
app.include_router(tasks.router)
app.include_router(ops.router)


@app.on_event("startup")
async def startup() -> None:
    state.facade = ExtractionFacade()
    logger.info(
        f"Extraction facade ready (analyze timeout {state.facade.analyze_timeout_s}s, "
        f"import timeout {state.facade.import_timeout_s}s)"
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=os.getenv("API_HOST", "0.0.0.0"), port=int(os.getenv("API_PORT", "8000")))
