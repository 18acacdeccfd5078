"""FastAPI application entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import Depends, FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse

from task_api.api.v1 import tasks
from task_api.config import settings
from task_api.core.exceptions import InvalidIdentifier, StoreUnavailable, ValidationFailed
from task_api.core.logging import setup_logging
from task_api.dependencies import get_task_store
from task_api.middleware.audit import AuditMiddleware
from task_api.middleware.metrics import MetricsMiddleware, setup_metrics
from task_api.services.bootstrap_service import seed_sample_tasks
from task_api.store import open_task_store
from task_api.store.base import TaskStore

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the shared task store on startup and close it on shutdown."""
    setup_logging(settings.LOG_LEVEL, settings.LOG_FORMAT)

    # Any failure here aborts startup.
    try:
        store = await open_task_store(settings)
    except Exception:
        logger.exception(f"Failed to open {settings.STORE_BACKEND} task store")
        raise

    try:
        await seed_sample_tasks(store, count=settings.SEED_SAMPLE_TASKS)
    except Exception:
        logger.exception("Failed to seed sample tasks")
        await store.close()
        raise

    app.state.task_store = store
    logger.info(f"{settings.APP_NAME} started with {settings.STORE_BACKEND} store")
    yield
    await store.close()
    logger.info("Task store closed")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.APP_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
    lifespan=lifespan,
)

app.add_middleware(AuditMiddleware)
app.add_middleware(MetricsMiddleware)
setup_metrics(app)


@app.exception_handler(ValidationFailed)
async def validation_failed_handler(request: Request, exc: ValidationFailed):
    # Field violations get the structured body; other input errors are plain text.
    if exc.violations:
        return JSONResponse(
            status_code=exc.status_code,
            content={"success": False, "message": exc.detail},
        )
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.exception_handler(InvalidIdentifier)
@app.exception_handler(StoreUnavailable)
async def plain_error_handler(request: Request, exc):
    return PlainTextResponse(exc.detail, status_code=exc.status_code)


@app.get("/", response_class=PlainTextResponse)
async def root():
    return "Hello, World!"


app.include_router(tasks.router, tags=["tasks"])


@app.get("/health")
async def health_check(store: TaskStore = Depends(get_task_store)):
    """Health check endpoint."""
    health_status = {
        "status": "ok",
        "checks": {
            "store": "unknown",
        },
    }

    try:
        await store.ping()
        health_status["checks"]["store"] = "ok"
    except Exception as e:
        health_status["checks"]["store"] = f"error: {str(e)}"
        health_status["status"] = "degraded"

    return health_status
