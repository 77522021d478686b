"""Global exception handlers producing one error envelope for every failure.

Body shape:
    {"status_code", "error_code", "message", "timestamp", "path"}
Validation failures add an "errors" list with field-level messages.
"""

from typing import Any, Dict, List, Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError
from starlette.exceptions import HTTPException as StarletteHTTPException

from libs.common.datetime_utils import utc_now
from libs.common.errors import AppError, ErrorCode, error_code_for_status
from libs.common.logging import get_logger

logger = get_logger(__name__)


def build_error_body(
    request: Request,
    status_code: int,
    error_code: ErrorCode,
    message: str,
    errors: Optional[List[Dict[str, str]]] = None,
) -> Dict[str, Any]:
    body: Dict[str, Any] = {
        "status_code": status_code,
        "error_code": error_code.value,
        "message": message,
        "timestamp": utc_now().isoformat(),
        "path": request.url.path,
    }
    if errors is not None:
        body["errors"] = errors
    return body


def _field_path(loc) -> str:
    return ".".join(str(part) for part in loc)


async def http_exception_handler(
    request: Request, exc: StarletteHTTPException
) -> JSONResponse:
    if isinstance(exc, AppError):
        error_code = exc.error_code
        message = exc.message
    else:
        error_code = error_code_for_status(exc.status_code)
        message = exc.detail if isinstance(exc.detail, str) else str(exc.detail)

    return JSONResponse(
        status_code=exc.status_code,
        content=build_error_body(request, exc.status_code, error_code, message),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    errors = [
        {"field": _field_path(err.get("loc", ())), "message": err.get("msg", "")}
        for err in exc.errors()
    ]
    message = "; ".join(f"{e['field']}: {e['message']}" for e in errors) or (
        "Validation failed"
    )
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=build_error_body(
            request,
            status.HTTP_400_BAD_REQUEST,
            ErrorCode.VALIDATION_ERROR,
            message,
            errors=errors,
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    logger.warning("Integrity error on %s: %s", request.url.path, exc.orig)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=build_error_body(
            request,
            status.HTTP_409_CONFLICT,
            ErrorCode.CONFLICT,
            "Request conflicts with existing data",
        ),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=build_error_body(
            request,
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            ErrorCode.INTERNAL_SERVER_ERROR,
            "Internal server error",
        ),
    )


def add_exception_handlers(app: FastAPI) -> None:
    """Register the global exception handlers on an app."""
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
