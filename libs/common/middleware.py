"""Request tracing for the Grow Fitness API.

Each request gets an id (taken from X-Request-ID when the caller sends one),
which is bound to every log line written while the request is handled and
echoed back on the response together with the handling time.
"""
import time
from typing import Callable, FrozenSet

from fastapi import FastAPI, Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from libs.common.config import get_settings
from libs.common.logging import (
    clear_request_context,
    configure_logging,
    get_logger,
    set_request_context,
)

logger = get_logger(__name__)

QUIET_PATHS: FrozenSet[str] = frozenset({"/health", "/docs", "/openapi.json"})


def _elapsed_ms(started: float) -> float:
    return round((time.perf_counter() - started) * 1000, 2)


class RequestContextMiddleware(BaseHTTPMiddleware):
    def __init__(self, app, slow_request_ms: int):
        super().__init__(app)
        self.slow_request_ms = slow_request_ms

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = set_request_context(
            request_id=request.headers.get("X-Request-ID"),
            path=request.url.path,
            method=request.method,
        )
        quiet = request.url.path in QUIET_PATHS
        started = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.exception(
                f"{request.method} {request.url.path} raised {type(exc).__name__}",
                extra={"extra_fields": {"duration_ms": _elapsed_ms(started)}},
            )
            clear_request_context()
            raise

        duration_ms = _elapsed_ms(started)
        if not quiet:
            fields = {
                "status_code": response.status_code,
                "duration_ms": duration_ms,
                "client": request.client.host if request.client else None,
            }
            if response.status_code >= 500:
                logger.error("Request failed", extra={"extra_fields": fields})
            elif response.status_code >= 400 or duration_ms > self.slow_request_ms:
                logger.warning("Request completed", extra={"extra_fields": fields})
            else:
                logger.info("Request completed", extra={"extra_fields": fields})

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Response-Time"] = f"{duration_ms}ms"
        clear_request_context()
        return response


def add_observability_middleware(app: FastAPI) -> None:
    """Configure logging and install the request tracing middleware."""
    settings = get_settings()
    configure_logging()
    app.add_middleware(
        RequestContextMiddleware, slow_request_ms=settings.SLOW_REQUEST_MS
    )
