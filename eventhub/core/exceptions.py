import logging
from datetime import datetime
from http import HTTPStatus
from typing import Optional

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import IntegrityError

from eventhub.core.config import DATETIME_FORMAT

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base class for errors raised by the service layer."""

    reason = "Internal Server Error"

    def __init__(self, message: str, errors: Optional[list[str]] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)

    @property
    def status_code(self) -> int:
        return status.HTTP_500_INTERNAL_SERVER_ERROR


class NotFoundError(AppException):
    """Referenced entity is absent (404)."""

    reason = "The required object was not found."

    @property
    def status_code(self) -> int:
        return status.HTTP_404_NOT_FOUND


class ConflictError(AppException):
    """Business rule violation (409)."""

    reason = "Integrity constraint has been violated."

    @property
    def status_code(self) -> int:
        return status.HTTP_409_CONFLICT


class ValidationError(AppException):
    """Malformed input (400)."""

    reason = "Incorrectly made request."

    @property
    def status_code(self) -> int:
        return status.HTTP_400_BAD_REQUEST


class LockUnavailableError(ConflictError):
    """The per-event lock could not be acquired in time."""

    reason = "Concurrent modification in progress."


def error_body(status_code: int, reason: str, message: str, errors: Optional[list[str]] = None) -> dict:
    return {
        "status": HTTPStatus(status_code).name,
        "reason": reason,
        "message": message,
        "errors": errors or [],
        "timestamp": datetime.now().strftime(DATETIME_FORMAT),
    }


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    logger.warning("%s %s -> %s: %s", request.method, request.url.path, exc.status_code, exc.message)
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.status_code, exc.reason, exc.message, exc.errors),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    errors = [
        f"Field: {'.'.join(str(part) for part in err['loc'])}. Error: {err['msg']}"
        for err in exc.errors()
    ]
    logger.warning("%s %s -> 400: %s", request.method, request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=error_body(
            status.HTTP_400_BAD_REQUEST,
            ValidationError.reason,
            "Validation failed for request arguments.",
            errors,
        ),
    )


async def integrity_error_handler(request: Request, exc: IntegrityError) -> JSONResponse:
    """Unique / foreign key violations that slipped past the service checks."""
    message = str(exc.orig) if exc.orig is not None else str(exc)
    logger.warning("%s %s -> 409: %s", request.method, request.url.path, message)
    return JSONResponse(
        status_code=status.HTTP_409_CONFLICT,
        content=error_body(status.HTTP_409_CONFLICT, ConflictError.reason, message),
    )


async def general_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("%s %s -> 500", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(status.HTTP_500_INTERNAL_SERVER_ERROR, AppException.reason, str(exc)),
    )


def register_error_handlers(app: FastAPI) -> None:
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(IntegrityError, integrity_error_handler)
    app.add_exception_handler(Exception, general_exception_handler)
