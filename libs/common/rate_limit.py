"""slowapi limiter shared by the public and auth endpoints.

Limits are kept in RATE_LIMIT_STORAGE_URI (in memory by default, redis:// to
share them between instances). The limiter is switched off under
ENVIRONMENT=test.
"""

from functools import lru_cache

from fastapi import Request, Response
from slowapi import Limiter
from slowapi.errors import RateLimitExceeded
from slowapi.util import get_remote_address
from starlette.responses import JSONResponse

from libs.common.config import get_settings
from libs.common.error_handler import build_error_body
from libs.common.errors import ErrorCode

DEFAULT_RETRY_AFTER_SECONDS = 60


def client_ip(request: Request) -> str:
    """First address in X-Forwarded-For when behind a proxy, else the peer."""
    forwarded = request.headers.get("X-Forwarded-For", "")
    first = forwarded.split(",")[0].strip()
    return first or get_remote_address(request)


@lru_cache
def get_limiter() -> Limiter:
    settings = get_settings()
    return Limiter(
        key_func=client_ip,
        default_limits=[settings.RATE_LIMIT_DEFAULT],
        storage_uri=settings.RATE_LIMIT_STORAGE_URI,
        strategy="fixed-window",
        enabled=settings.ENVIRONMENT != "test",
    )


limiter = get_limiter()


def auth_rate() -> str:
    """Limit for login, parent sign-up and the public free-session form."""
    return get_settings().RATE_LIMIT_AUTH


def rate_limit_exceeded_handler(request: Request, exc: RateLimitExceeded) -> Response:
    limit = exc.detail or "too many requests"
    return JSONResponse(
        status_code=429,
        content=build_error_body(
            request, 429, ErrorCode.RATE_LIMITED, f"Rate limit exceeded: {limit}"
        ),
        headers={"Retry-After": str(DEFAULT_RETRY_AFTER_SECONDS)},
    )
