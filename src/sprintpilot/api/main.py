"""
SprintPilot API Main Application

Entry point for the FastAPI application.
"""

from contextlib import asynccontextmanager
from typing import Annotated, AsyncIterator

from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from sprintpilot.platform.config import settings
from sprintpilot.platform.logging import bind_request_context, configure_logging, get_logger
from sprintpilot.api.routers import ai, history, holidays, sprints, tasks, team
from sprintpilot.api.dependencies import init_resources, close_resources, get_store
from sprintpilot.storage.base import KeyValueStore

# Configure logging on import
configure_logging()
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Application lifespan handler for startup/shutdown."""
    logger.info("Starting SprintPilot API...")
    try:
        await init_resources()
        logger.info("Resources initialized successfully.")
    except Exception as e:
        logger.error("Failed to initialize resources", error=str(e))
        raise

    yield

    logger.info("Shutting down SprintPilot API...")
    await close_resources()
    logger.info("Resources closed.")


app = FastAPI(
    title=settings.APP_NAME,
    version=settings.VERSION,
    description="Sprint capacity planning and delivery-risk dashboard",
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS.split(",") if settings.CORS_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# =============================================================================
# OBSERVABILITY
# =============================================================================

if settings.METRICS_ENABLED:
    metrics_app = make_asgi_app()
    app.mount("/metrics", metrics_app)


@app.middleware("http")
async def log_context(request: Request, call_next):
    """Bind a request id, method and path to every log event of the request."""
    request_id = bind_request_context(
        request.headers.get("X-Request-ID"),
        method=request.method,
        path=request.url.path,
    )
    response = await call_next(request)
    response.headers["X-Request-ID"] = request_id
    return response


@app.exception_handler(Exception)
async def unhandled_error(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error", method=request.method, path=request.url.path)
    return JSONResponse(status_code=500, content={"detail": "Internal server error"})


# =============================================================================
# HEALTH ENDPOINTS
# =============================================================================


@app.get("/health/live", tags=["Health"])
async def liveness() -> dict:
    """Liveness check - is the service running?"""
    return {"status": "alive"}


@app.get("/health/ready", tags=["Health"])
async def readiness(store: Annotated[KeyValueStore, Depends(get_store)]) -> dict:
    """
    Readiness check - is the service ready to accept traffic?
    Checks the document store.
    """
    store_healthy = store.health_check()

    return {
        "status": "ready" if store_healthy else "not_ready",
        "version": settings.VERSION,
        "checks": {
            "store": "healthy" if store_healthy else "unhealthy",
        },
    }


# =============================================================================
# API ROUTERS
# =============================================================================

app.include_router(sprints.router, prefix="/api/v1/sprint", tags=["Sprint"])
app.include_router(team.router, prefix="/api/v1/sprint/team", tags=["Team"])
app.include_router(tasks.router, prefix="/api/v1/sprint/tasks", tags=["Tasks"])
app.include_router(holidays.router, prefix="/api/v1/holidays", tags=["Holidays"])
app.include_router(history.router, prefix="/api/v1/history", tags=["History"])
app.include_router(ai.router, prefix="/api/v1/ai", tags=["AI"])


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "sprintpilot.api.main:app",
        host=settings.API_HOST,
        port=settings.API_PORT,
        reload=settings.DEBUG,
    )
