"""Request logging middleware."""

import time
import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from sitecms.core.logging import bind_context, clear_context, get_logger

logger = get_logger(__name__)

# Probes hit these every few seconds
QUIET_PATHS = frozenset({"/health", "/health/live", "/health/ready"})


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Bind request context for every log line and time each request.

    An incoming ``X-Request-ID`` is reused so traces line up with the proxy;
    otherwise a new one is generated.
    """

    async def dispatch(
        self, request: Request, call_next: Callable[[Request], Response]
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())

        bind_context(
            request_id=request_id,
            method=request.method,
            path=request.url.path,
            client_ip=client_ip(request),
        )

        log = logger.debug if request.url.path in QUIET_PATHS else logger.info
        start_time = time.perf_counter()

        log("request_started", user_agent=request.headers.get("user-agent", ""))

        try:
            response = await call_next(request)

            process_time = time.perf_counter() - start_time
            log(
                "request_completed",
                status_code=response.status_code,
                process_time_ms=round(process_time * 1000, 2),
            )

            response.headers["X-Request-ID"] = request_id
            response.headers["X-Process-Time"] = f"{process_time:.4f}"
            return response

        except Exception as exc:
            process_time = time.perf_counter() - start_time
            logger.exception(
                "request_failed",
                error=str(exc),
                process_time_ms=round(process_time * 1000, 2),
            )
            raise

        finally:
            clear_context()


def client_ip(request: Request) -> str:
    """Client address, preferring proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"
