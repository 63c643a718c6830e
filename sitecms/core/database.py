"""Database engine, sessions and connectivity checks."""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy import event, text
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from sitecms.config import Settings, settings
from sitecms.core.logging import get_logger

logger = get_logger(__name__)


def _enable_sqlite_foreign_keys(dbapi_connection: Any, connection_record: Any) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


def build_engine(url: str, config: Settings = settings) -> AsyncEngine:
    """Create the async engine for ``url``.

    PostgreSQL gets the configured connection pool. SQLite (used by the test
    suite) gets foreign key enforcement, and an in-memory database is pinned
    to a single connection so every session sees the same tables.
    """
    if make_url(url).get_backend_name() != "sqlite":
        return create_async_engine(
            url,
            pool_size=config.database_pool_size,
            max_overflow=config.database_max_overflow,
            echo=config.database_echo,
            pool_pre_ping=True,
        )

    options: dict[str, Any] = {"connect_args": {"check_same_thread": False}}
    if make_url(url).database in (None, "", ":memory:"):
        options["poolclass"] = StaticPool

    sqlite_engine = create_async_engine(url, echo=config.database_echo, **options)
    event.listen(sqlite_engine.sync_engine, "connect", _enable_sqlite_foreign_keys)
    return sqlite_engine


def build_session_factory(bind: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return async_sessionmaker(
        bind,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


engine = build_engine(settings.database_url)
async_session_factory = build_session_factory(engine)


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request, closed afterwards."""
    async with async_session_factory() as session:
        yield session


async def check_db_connection() -> bool:
    """Check database connectivity for readiness checks."""
    try:
        async with async_session_factory() as session:
            await session.execute(text("SELECT 1"))
    except (SQLAlchemyError, OSError) as exc:
        logger.warning("database_check_failed", error=str(exc))
        return False
    return True


async def close_db() -> None:
    """Close database connections."""
    await engine.dispose()
