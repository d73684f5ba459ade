"""Rate limiting for the public auth endpoints.

Uses slowapi; state lives in memory by default or in Redis when
``RATE_LIMIT_STORAGE_URI`` points at one.
"""

from functools import lru_cache
from typing import Callable

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings


def _get_client_ip(request: Request) -> str:
    """
    Get client IP from request, preferring the first X-Forwarded-For hop.
    """
    forwarded = request.headers.get("X-Forwarded-For")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=_get_client_ip,
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.RATE_LIMIT_ENABLED,
    )


limiter = get_limiter()


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    """
    Render a 429 in the same shape as the other API errors.
    """
    return JSONResponse(
        status_code=429,
        content={
            "detail": f"Rate limit exceeded: {exc.detail}",
            "kind": "rate_limited",
        },
        headers={"Retry-After": "60"},
    )


def auth_limit(func: Callable) -> Callable:
    """Apply the login/signup limit (``AUTH_RATE_LIMIT``, default 5/minute)."""
    return limiter.limit(get_settings().AUTH_RATE_LIMIT)(func)
