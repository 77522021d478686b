"""Application error types carrying a machine-readable error code."""

import enum
from typing import Any, Dict, Optional

from fastapi import HTTPException, status


class ErrorCode(str, enum.Enum):
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_INPUT = "INVALID_INPUT"
    UNAUTHORIZED = "UNAUTHORIZED"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    RATE_LIMITED = "RATE_LIMITED"
    INTERNAL_SERVER_ERROR = "INTERNAL_SERVER_ERROR"

    USER_NOT_FOUND = "USER_NOT_FOUND"
    KID_NOT_FOUND = "KID_NOT_FOUND"
    LOCATION_NOT_FOUND = "LOCATION_NOT_FOUND"
    SESSION_NOT_FOUND = "SESSION_NOT_FOUND"
    INVOICE_NOT_FOUND = "INVOICE_NOT_FOUND"
    BANNER_NOT_FOUND = "BANNER_NOT_FOUND"
    QUIZ_NOT_FOUND = "QUIZ_NOT_FOUND"
    REPORT_NOT_FOUND = "REPORT_NOT_FOUND"
    REQUEST_NOT_FOUND = "REQUEST_NOT_FOUND"
    CODE_NOT_FOUND = "CODE_NOT_FOUND"
    CRM_CONTACT_NOT_FOUND = "CRM_CONTACT_NOT_FOUND"
    RESOURCE_NOT_FOUND = "RESOURCE_NOT_FOUND"

    EMAIL_ALREADY_EXISTS = "EMAIL_ALREADY_EXISTS"
    CODE_ALREADY_EXISTS = "CODE_ALREADY_EXISTS"
    INVALID_CREDENTIALS = "INVALID_CREDENTIALS"
    ACCOUNT_INACTIVE = "ACCOUNT_INACTIVE"
    ACCOUNT_NOT_APPROVED = "ACCOUNT_NOT_APPROVED"
    INVALID_SESSION_CAPACITY = "INVALID_SESSION_CAPACITY"
    INVALID_STATUS_TRANSITION = "INVALID_STATUS_TRANSITION"
    INVALID_QUESTION = "INVALID_QUESTION"


STATUS_ERROR_CODES: Dict[int, ErrorCode] = {
    status.HTTP_400_BAD_REQUEST: ErrorCode.VALIDATION_ERROR,
    status.HTTP_401_UNAUTHORIZED: ErrorCode.UNAUTHORIZED,
    status.HTTP_403_FORBIDDEN: ErrorCode.FORBIDDEN,
    status.HTTP_404_NOT_FOUND: ErrorCode.NOT_FOUND,
    status.HTTP_405_METHOD_NOT_ALLOWED: ErrorCode.INVALID_INPUT,
    status.HTTP_409_CONFLICT: ErrorCode.CONFLICT,
    422: ErrorCode.VALIDATION_ERROR,
    status.HTTP_429_TOO_MANY_REQUESTS: ErrorCode.RATE_LIMITED,
}


def error_code_for_status(status_code: int) -> ErrorCode:
    return STATUS_ERROR_CODES.get(status_code, ErrorCode.INTERNAL_SERVER_ERROR)


class AppError(HTTPException):
    """HTTPException with an attached ErrorCode."""

    status_code_default = status.HTTP_400_BAD_REQUEST
    error_code_default = ErrorCode.INVALID_INPUT

    def __init__(
        self,
        message: str,
        error_code: Optional[ErrorCode] = None,
        headers: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            status_code=self.status_code_default, detail=message, headers=headers
        )
        self.error_code = error_code or self.error_code_default
        self.message = message


class BadRequestError(AppError):
    status_code_default = status.HTTP_400_BAD_REQUEST
    error_code_default = ErrorCode.INVALID_INPUT


class UnauthorizedError(AppError):
    status_code_default = status.HTTP_401_UNAUTHORIZED
    error_code_default = ErrorCode.UNAUTHORIZED

    def __init__(self, message: str = "Could not validate credentials", error_code=None):
        super().__init__(
            message, error_code, headers={"WWW-Authenticate": "Bearer"}
        )


class ForbiddenError(AppError):
    status_code_default = status.HTTP_403_FORBIDDEN
    error_code_default = ErrorCode.FORBIDDEN


class NotFoundError(AppError):
    status_code_default = status.HTTP_404_NOT_FOUND
    error_code_default = ErrorCode.NOT_FOUND


class ConflictError(AppError):
    status_code_default = status.HTTP_409_CONFLICT
    error_code_default = ErrorCode.CONFLICT
