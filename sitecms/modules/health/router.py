"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Response, status
from pydantic import BaseModel

from sitecms.config import settings
from sitecms.core.database import check_db_connection
from sitecms.core.redis import check_redis_connection

router = APIRouter(tags=["Health"])

NO_CACHE_HEADERS = {
    "Cache-Control": "no-store, no-cache, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool
    service: str
    version: str
    commit: str
    timestamp: datetime
    env: str


class ReadinessResponse(BaseModel):
    """Readiness check response with dependency status."""

    status: str
    checks: dict[str, bool]


def _health(response: Response) -> HealthResponse:
    response.headers.update(NO_CACHE_HEADERS)
    return HealthResponse(
        ok=True,
        service=settings.service_name,
        version=settings.app_version,
        commit=settings.commit_sha,
        timestamp=datetime.now(UTC),
        env=settings.environment,
    )


@router.get(
    "/health",
    response_model=HealthResponse,
    summary="Basic health check",
    description="Returns OK whenever the process is serving requests. Never touches the database.",
)
async def health(response: Response) -> HealthResponse:
    return _health(response)


@router.head("/health", summary="Basic health check (headers only)")
async def health_head() -> Response:
    return Response(status_code=status.HTTP_200_OK, headers=NO_CACHE_HEADERS)


@router.get(
    "/health/live",
    response_model=HealthResponse,
    summary="Liveness probe",
)
async def liveness(response: Response) -> HealthResponse:
    return _health(response)


@router.get(
    "/health/ready",
    response_model=ReadinessResponse,
    summary="Readiness probe",
    description="Checks the database and Redis.",
)
async def readiness() -> ReadinessResponse:
    """Readiness probe; ``degraded`` when a dependency is down."""
    db_ok = await check_db_connection()
    redis_ok = await check_redis_connection()

    return ReadinessResponse(
        status="ok" if db_ok and redis_ok else "degraded",
        checks={
            "database": db_ok,
            "redis": redis_ok,
        },
    )
