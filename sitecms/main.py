"""FastAPI application entry point."""

from contextlib import asynccontextmanager
from typing import AsyncGenerator

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sitecms.config import settings
from sitecms.core.database import check_db_connection, close_db
from sitecms.core.exceptions import AppException, ValidationError
from sitecms.core.logging import get_logger, setup_logging
from sitecms.core.redis import close_redis, init_redis
from sitecms.middleware.request_logging import RequestLoggingMiddleware

setup_logging()
logger = get_logger(__name__)

PROBLEM_HEADERS = {"Content-Type": "application/problem+json"}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager.

    Handles startup and shutdown events.
    """
    logger.info(
        "application_starting",
        app_name=settings.app_name,
        version=settings.app_version,
        environment=settings.environment,
        commit=settings.commit_sha,
    )

    if await check_db_connection():
        logger.info("database_connected")
    else:
        logger.error("database_connection_failed")

    # Without Redis, sign-out cannot revoke tokens but everything else works
    try:
        await init_redis()
    except Exception as e:
        logger.warning("redis_init_failed", error=str(e))

    yield

    logger.info("application_shutting_down")
    await close_redis()
    await close_db()
    logger.info("application_stopped")


def create_app() -> FastAPI:
    """Create and configure FastAPI application."""
    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Admin and public content API for the practice website",
        docs_url="/docs" if not settings.is_production else None,
        redoc_url="/redoc" if not settings.is_production else None,
        openapi_url="/openapi.json" if not settings.is_production else None,
        lifespan=lifespan,
    )

    _setup_middleware(app)
    _setup_exception_handlers(app)
    _setup_routers(app)

    return app


def _setup_middleware(app: FastAPI) -> None:
    """Configure application middleware."""
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Added last so it wraps everything else
    app.add_middleware(RequestLoggingMiddleware)


def _problem_response(request: Request, exc: AppException) -> JSONResponse:
    error_detail = exc.detail
    if isinstance(error_detail, dict):
        error_detail["instance"] = str(request.url.path)

    return JSONResponse(
        status_code=exc.status_code,
        content=error_detail,
        headers=PROBLEM_HEADERS,
    )


def _setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers."""

    @app.exception_handler(AppException)
    async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
        """Handle AppException with RFC 7807 format."""
        if exc.status_code >= 500:
            logger.error("request_error", error_code=exc.error_code, detail=exc.message)
        return _problem_response(request, exc)

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        """Malformed request bodies and parameters are 400s like any other validation error."""
        errors = [
            {
                "field": ".".join(str(part) for part in error["loc"][1:]) or str(error["loc"][0]),
                "message": error["msg"],
            }
            for error in exc.errors()
        ]
        return _problem_response(request, ValidationError("Invalid request", errors=errors))

    @app.exception_handler(Exception)
    async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Handle unexpected exceptions."""
        logger.exception("unhandled_exception", error=str(exc), path=request.url.path)

        return JSONResponse(
            status_code=500,
            content={
                "type": "https://api.sitecms.local/errors/internal_error",
                "title": "Internal Server Error",
                "status": 500,
                "detail": "An unexpected error occurred" if settings.is_production else str(exc),
                "instance": str(request.url.path),
            },
            headers=PROBLEM_HEADERS,
        )


def _setup_routers(app: FastAPI) -> None:
    """Register API routers."""
    from sitecms.modules.assistant.router import router as assistant_router
    from sitecms.modules.auth.router import router as auth_router
    from sitecms.modules.case_studies.router import router as case_studies_router
    from sitecms.modules.health.router import router as health_router
    from sitecms.modules.logos.router import router as logos_router
    from sitecms.modules.media.router import router as media_router
    from sitecms.modules.posts.router import router as posts_router

    # Health checks (no prefix)
    app.include_router(health_router)

    app.include_router(auth_router, prefix=settings.api_prefix)
    app.include_router(logos_router, prefix=settings.api_prefix)
    app.include_router(case_studies_router, prefix=settings.api_prefix)
    app.include_router(posts_router, prefix=settings.api_prefix)
    app.include_router(media_router, prefix=settings.api_prefix)
    app.include_router(assistant_router, prefix=settings.api_prefix)


app = create_app()
