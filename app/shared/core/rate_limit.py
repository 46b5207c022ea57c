"""
Rate Limiting for AutomateROI

Provides API rate limiting using slowapi (built on the limits library).
Configurable via environment variables.
"""

from typing import Any, Callable, cast
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
import structlog

from app.shared.core.config import get_settings

__all__ = [
    "get_limiter",
    "setup_rate_limiting",
    "set_rate_limited_body",
    "rate_limit",
    "RateLimitExceeded",
]

logger = structlog.get_logger()

_limiter: Limiter | None = None
_limited_bodies: dict[str, dict[str, Any]] = {}


def get_limiter() -> Limiter:
    """Lazy initialization of the Limiter instance.

    Multi-replica deployments must set REDIS_URL so limits are shared across
    processes; ``memory://`` is only suitable for a single instance.
    """
    global _limiter
    if _limiter is None:
        settings = get_settings()
        storage_uri = settings.REDIS_URL or "memory://"
        if settings.is_production_like and not settings.REDIS_URL:
            logger.warning(
                "rate_limiting_in_memory",
                msg="REDIS_URL is not set; limits are per-process.",
            )
        _limiter = Limiter(
            key_func=get_remote_address,
            storage_uri=storage_uri,
            strategy="fixed-window",
            enabled=settings.RATELIMIT_ENABLED and not settings.TESTING,
        )
    return _limiter


def set_rate_limited_body(path: str, body: dict[str, Any]) -> None:
    """Answer throttled requests to ``path`` with ``body`` instead of slowapi's error."""
    _limited_bodies[path] = body


def setup_rate_limiting(app: FastAPI) -> None:
    """Configure rate limiting for the FastAPI application."""
    limiter = get_limiter()
    app.state.limiter = limiter

    def _rate_limit_handler(request: Request, exc: Exception) -> Any:
        response = _rate_limit_exceeded_handler(request, cast(RateLimitExceeded, exc))
        body = _limited_bodies.get(request.url.path)
        if body is None:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key.lower() not in {"content-length", "content-type"}
        }
        return JSONResponse(status_code=429, content=body, headers=headers)

    app.add_exception_handler(RateLimitExceeded, _rate_limit_handler)
    logger.info("rate_limiting_configured", enabled=limiter.enabled)


def rate_limit(
    limit: str | Callable[..., str] = "100/minute",
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Decorator to apply rate limiting to an endpoint."""
    return cast(
        Callable[[Callable[..., Any]], Callable[..., Any]], get_limiter().limit(limit)
    )
