"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator, Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import pytest
import pytest_asyncio
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from jose import jwt
from sqlalchemy.ext.asyncio import AsyncSession

from sitecms.config import settings
from sitecms.core.base_model import Base
from sitecms.core.database import build_engine, build_session_factory, get_db
from sitecms.core.security import get_admin_gate
from sitecms.main import create_app

# Register every table on Base.metadata
from sitecms.modules.assistant.models import AIGeneration  # noqa: F401
from sitecms.modules.case_studies.models import CaseStudy  # noqa: F401
from sitecms.modules.logos.models import SiteLogo  # noqa: F401
from sitecms.modules.media.models import MediaAsset  # noqa: F401
from sitecms.modules.posts.models import Post  # noqa: F401
from tests.fixtures.gates import AllowGate, DenyGate


# ============================================================================
# Database Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def db_engine() -> AsyncGenerator[Any, None]:
    """In-memory SQLite database with all tables, fresh per test."""
    engine = build_engine("sqlite+aiosqlite://")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def db_session(db_engine: Any) -> AsyncGenerator[AsyncSession, None]:
    session_factory = build_session_factory(db_engine)

    async with session_factory() as session:
        yield session


# ============================================================================
# Application Fixtures
# ============================================================================


@pytest_asyncio.fixture(scope="function")
async def app(db_session: AsyncSession) -> FastAPI:
    """Application wired to the test database. The real JWT gate stays in place."""
    application = create_app()

    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db_session

    application.dependency_overrides[get_db] = override_get_db

    return application


@pytest_asyncio.fixture(scope="function")
async def client(app: FastAPI) -> AsyncGenerator[AsyncClient, None]:
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac


@pytest.fixture
def allow_gate(app: FastAPI) -> AllowGate:
    gate = AllowGate()
    app.dependency_overrides[get_admin_gate] = lambda: gate
    return gate


@pytest.fixture
def deny_gate(app: FastAPI) -> DenyGate:
    gate = DenyGate()
    app.dependency_overrides[get_admin_gate] = lambda: gate
    return gate


@pytest_asyncio.fixture(scope="function")
async def admin_client(client: AsyncClient, allow_gate: AllowGate) -> AsyncClient:
    """Client whose every request passes the admin gate."""
    return client


# ============================================================================
# Session tokens
# ============================================================================


@pytest.fixture
def make_token() -> Callable[..., str]:
    """Build identity-provider style session tokens signed with the app secret."""

    def _make(
        role: str | None = "ADMIN",
        *,
        expires_in: timedelta = timedelta(hours=1),
        secret: str | None = None,
        jti: str | None = None,
        **claims: Any,
    ) -> str:
        now = datetime.now(UTC)
        payload: dict[str, Any] = {
            "sub": str(uuid4()),
            "email": "owner@example.com",
            "aud": settings.auth_jwt_audience,
            "iat": int(now.timestamp()),
            "exp": int((now + expires_in).timestamp()),
            "jti": jti or str(uuid4()),
            **claims,
        }
        if role is not None:
            payload["app_metadata"] = {"role": role}
        return jwt.encode(
            payload,
            secret or settings.auth_jwt_secret,
            algorithm=settings.auth_jwt_algorithm,
        )

    return _make
