"""Redis client wrapper for the session token blacklist."""

import redis.asyncio as redis
from redis.asyncio import Redis

from sitecms.config import settings
from sitecms.core.logging import get_logger

logger = get_logger(__name__)

_redis_pool: redis.ConnectionPool | None = None
_redis_client: Redis | None = None


async def init_redis() -> Redis:
    """Initialize Redis connection pool.

    Call this during application startup.
    """
    global _redis_pool, _redis_client

    if _redis_client is not None:
        return _redis_client

    _redis_pool = redis.ConnectionPool.from_url(
        str(settings.redis_url),
        encoding="utf-8",
        decode_responses=True,
        max_connections=20,
    )
    client = Redis(connection_pool=_redis_pool)

    try:
        await client.ping()
    except Exception as e:
        logger.error("redis_connection_failed", error=str(e))
        await _redis_pool.disconnect()
        _redis_pool = None
        raise

    _redis_client = client
    logger.info("redis_connected", url=str(settings.redis_url).split("@")[-1])
    return _redis_client


async def close_redis() -> None:
    """Close Redis connections.

    Call this during application shutdown.
    """
    global _redis_pool, _redis_client

    if _redis_client is not None:
        await _redis_client.aclose()
        _redis_client = None

    if _redis_pool is not None:
        await _redis_pool.disconnect()
        _redis_pool = None

    logger.info("redis_disconnected")


async def check_redis_connection() -> bool:
    """Check Redis connectivity for readiness checks."""
    if _redis_client is None:
        return False

    try:
        await _redis_client.ping()
        return True
    except Exception:
        return False


class TokenBlacklist:
    """Revoked session token ids (jti), kept until the token would expire.

    Usage:
        blacklist = TokenBlacklist(redis_client)
        await blacklist.add(jti="token-uuid", expires_in=1800)
        if await blacklist.is_blacklisted(jti="token-uuid"):
            ...
    """

    PREFIX = "bl:"

    def __init__(self, redis_client: Redis):
        self.redis = redis_client

    async def add(self, jti: str, expires_in: int) -> None:
        """Revoke a token id for ``expires_in`` seconds (at least one)."""
        await self.redis.setex(f"{self.PREFIX}{jti}", max(1, expires_in), "1")

    async def is_blacklisted(self, jti: str) -> bool:
        return await self.redis.exists(f"{self.PREFIX}{jti}") > 0


async def get_token_blacklist() -> TokenBlacklist | None:
    """Get token blacklist instance.

    Returns None if Redis is not initialized.
    """
    if _redis_client is None:
        return None
    return TokenBlacklist(_redis_client)
