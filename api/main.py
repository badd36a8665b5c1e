"""
Durable Functions Monitor - Main FastAPI Application.

This is the REST API layer of the detail/action engine:
instance details, paged history, custom tabs and management actions.
"""
from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, PlainTextResponse
import time

from api.dependencies import reset_dependencies
from api.routes import health, orchestrations
from core.domain.errors import (
    ForbiddenError,
    InvalidRequestError,
    MonitorError,
    NotFoundError,
    UnauthorizedError,
)
from core.infrastructure.database.config import close_database, init_database
from core.infrastructure.logging import configure_logging, get_logger
from core.settings import get_app_settings


# Setup logging
configure_logging(get_app_settings().monitor.log_level)
logger = get_logger(__name__)


# =============================================================================
# CREATE FASTAPI APP
# =============================================================================

app = FastAPI(
    title="Durable Functions Monitor - Instance API",
    description="""
    Detail and management API for durable orchestrations and entities.

    Features:
    - Instance details with sub-orchestration links and event durations
    - Paged execution history
    - Custom HTML tabs rendered from templates
    - Purge, rewind, terminate, raise-event, set-custom-status, restart
    - ReadOnly mode
    """,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json",
)


# =============================================================================
# CORS MIDDLEWARE
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
    expose_headers=["*"],
)


# =============================================================================
# REQUEST LOGGING MIDDLEWARE
# =============================================================================

@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing."""
    start_time = time.time()

    logger.info(f"→ {request.method} {request.url.path}")

    response = await call_next(request)

    duration = time.time() - start_time

    logger.info(
        f"← {request.method} {request.url.path} "
        f"[{response.status_code}] ({duration:.3f}s)"
    )

    return response


# =============================================================================
# EXCEPTION HANDLERS
# =============================================================================

def _status_code_for(exc: MonitorError) -> int:
    if isinstance(exc, UnauthorizedError):
        return status.HTTP_401_UNAUTHORIZED
    if isinstance(exc, ForbiddenError):
        return status.HTTP_403_FORBIDDEN
    if isinstance(exc, NotFoundError):
        return status.HTTP_404_NOT_FOUND
    if isinstance(exc, InvalidRequestError):
        return status.HTTP_400_BAD_REQUEST
    return status.HTTP_500_INTERNAL_SERVER_ERROR


@app.exception_handler(MonitorError)
async def monitor_exception_handler(request: Request, exc: MonitorError):
    """Map domain errors to HTTP status codes."""
    status_code = _status_code_for(exc)

    if status_code >= 500:
        logger.error(f"Request failed: {exc}", exc_info=exc)
    else:
        logger.warning(f"Request rejected [{status_code}]: {exc}")

    # Auth failures carry no detail
    if status_code == status.HTTP_401_UNAUTHORIZED:
        return PlainTextResponse("", status_code=status_code)

    return JSONResponse(
        status_code=status_code,
        content={"detail": str(exc), "path": request.url.path},
    )


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle all uncaught exceptions."""
    logger.error(f"Unhandled exception: {exc}", exc_info=True)

    return JSONResponse(
        status_code=500,
        content={
            "error": "Internal server error",
            "detail": str(exc),
            "path": request.url.path
        }
    )


# =============================================================================
# STARTUP/SHUTDOWN EVENTS
# =============================================================================

@app.on_event("startup")
async def startup_event():
    """Run on application startup."""
    logger.info("🚀 Durable Functions Monitor API starting up...")
    logger.info(f"Mode: {get_app_settings().monitor.mode.value}")
    await init_database()
    logger.info("📚 Swagger UI available at: /docs")


@app.on_event("shutdown")
async def shutdown_event():
    """Run on application shutdown."""
    logger.info("👋 Durable Functions Monitor API shutting down...")
    await close_database()
    reset_dependencies()


# =============================================================================
# INCLUDE ROUTERS
# =============================================================================

app.include_router(
    health.router,
    tags=["Health"]
)

app.include_router(
    orchestrations.router,
    prefix="/api/v1",
    tags=["Orchestrations"]
)


# =============================================================================
# ROOT ENDPOINT
# =============================================================================

@app.get("/", tags=["Root"])
async def root():
    """API root endpoint."""
    return {
        "message": "Durable Functions Monitor - Instance API",
        "version": "1.0.0",
        "docs": "/docs",
        "health": "/health"
    }
