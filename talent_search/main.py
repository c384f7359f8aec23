"""
Talent Search Engine - Main FastAPI Application
"""

import logging
import sys
from contextlib import asynccontextmanager
from datetime import datetime

import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from talent_search.api import create_api_router
from talent_search.core.config import Settings, get_settings
from talent_search.database import get_sqlmodel_db_manager, init_sqlmodel_database, shutdown_sqlmodel_database
from talent_search.domain.entities import EmbeddingRefreshOptions, RefreshMode
from talent_search.infrastructure.providers import (
    get_embedding_refresh_service,
    get_task_manager,
    get_talent_search_service,
    reset_ai_services,
    reset_repositories,
    reset_search_services,
    reset_task_manager,
)

EMBEDDING_REFRESH_JOB = "embedding_refresh"


def configure_logging(settings: Settings) -> None:
    """Configure structlog from LOG_LEVEL and LOG_FORMAT."""
    if settings.LOG_FORMAT == "json":
        renderer = structlog.processors.JSONRenderer()
    elif settings.LOG_FORMAT == "console":
        renderer = structlog.dev.ConsoleRenderer() if sys.stdout.isatty() else structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
        ),
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging(get_settings())

logger = structlog.get_logger(__name__)


async def _schedule_embedding_refresh(settings: Settings) -> None:
    interval = settings.EMBEDDING_REFRESH_INTERVAL_SECONDS
    if interval <= 0:
        return

    refresh_service = await get_embedding_refresh_service()
    if not refresh_service.is_configured:
        logger.info("Periodic embedding refresh skipped, embedding provider not configured")
        return

    options = EmbeddingRefreshOptions(
        mode=RefreshMode.ONLY_MISSING,
        batch_size=settings.EMBEDDING_REFRESH_BATCH_SIZE,
        batch_delay_ms=settings.EMBEDDING_REFRESH_BATCH_DELAY_MS,
    )

    async def run_refresh() -> None:
        await refresh_service.refresh(options)

    task_manager = await get_task_manager()
    task_manager.schedule_periodic(EMBEDDING_REFRESH_JOB, run_refresh, interval)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan management"""
    settings = get_settings()
    logger.info("Starting Talent Search Engine", version=app.version, environment=settings.ENVIRONMENT)

    try:
        db_manager = await init_sqlmodel_database(settings)
        db_health = await db_manager.health_check()
        logger.info("Database initialized", status=db_health["status"])
    except Exception as e:
        logger.error("Failed to initialize database", error=str(e))
        if settings.is_production():
            sys.exit(1)

    try:
        search_service = await get_talent_search_service()
        await _schedule_embedding_refresh(settings)
        logger.info(
            "Services initialized",
            semantic_search=search_service.deps.semantic_available,
            refresh_interval_seconds=settings.EMBEDDING_REFRESH_INTERVAL_SECONDS,
        )
    except Exception as e:
        logger.error("Failed to initialize services", error=str(e))
        if settings.is_production():
            sys.exit(1)

    yield

    logger.info("Shutting down Talent Search Engine")
    try:
        await reset_task_manager()
        await shutdown_sqlmodel_database()
        await reset_search_services()
        await reset_ai_services()
        await reset_repositories()
        logger.info("Service cleanup completed")
    except Exception as e:
        logger.error("Cleanup error", error=str(e))


async def request_validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Return request validation errors as 400."""
    logger.info("Request validation failed", path=request.url.path, errors=len(exc.errors()))
    return JSONResponse(
        status_code=400,
        content={"detail": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list:
    return [
        {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
        for error in exc.errors()
    ]


def create_app() -> FastAPI:
    """Create and configure FastAPI application"""
    settings = get_settings()

    app = FastAPI(
        title=settings.APP_NAME,
        description="Semantic talent search, ranking and analysis for esports recruiting",
        version=settings.APP_VERSION,
        docs_url="/docs" if not settings.is_production() else None,
        redoc_url="/redoc" if not settings.is_production() else None,
        openapi_url="/openapi.json" if not settings.is_production() else None,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.get_cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.include_router(create_api_router())

    @app.get("/health")
    async def health_check():
        """Basic health check endpoint"""
        return {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
        }

    @app.get("/health/detailed")
    async def detailed_health_check():
        """Health of the database and background jobs"""
        health_status = {
            "status": "healthy",
            "version": app.version,
            "environment": settings.ENVIRONMENT,
            "timestamp": datetime.utcnow().isoformat() + "Z",
            "services": {},
        }

        db_health = await get_sqlmodel_db_manager().health_check()
        health_status["services"]["database"] = db_health
        if db_health["status"] != "healthy":
            health_status["status"] = "unhealthy"

        task_manager = await get_task_manager()
        health_status["services"]["tasks"] = task_manager.get_task_stats()
        health_status["services"]["semantic_search"] = {"configured": settings.is_semantic_search_enabled()}
        return health_status

    @app.get("/")
    async def root():
        """API root endpoint"""
        return {
            "message": settings.APP_NAME,
            "version": app.version,
            "docs_url": "/docs" if not settings.is_production() else None,
        }

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "talent_search.main:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.ENVIRONMENT == "development",
        log_config=None,
    )
