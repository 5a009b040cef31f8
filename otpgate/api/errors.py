"""
Exception handlers - Domain errors to JSON responses.

Every failure that reaches the request boundary becomes a
``{"success": false, "message": ...}`` body. Token failures share one
message so clients cannot tell which integrity check failed.
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from otpgate.api.models import ErrorResponse
from otpgate.domain.exceptions import (
    DependencyFailure,
    OtpMismatch,
    RegistrationError,
    TokenError,
    ValidationError,
)

logger = logging.getLogger(__name__)

# Checked in order; first match wins
STATUS_BY_ERROR: list[tuple[type[RegistrationError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (TokenError, status.HTTP_400_BAD_REQUEST),
    (OtpMismatch, status.HTTP_400_BAD_REQUEST),
    (DependencyFailure, status.HTTP_500_INTERNAL_SERVER_ERROR),
]


def error_response(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorResponse(message=message).model_dump(),
    )


def status_for(exc: RegistrationError) -> int:
    for error_type, status_code in STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return status_code
    return status.HTTP_500_INTERNAL_SERVER_ERROR


async def registration_error_handler(request: Request, exc: RegistrationError) -> JSONResponse:
    status_code = status_for(exc)
    if isinstance(exc, TokenError):
        # Sub-case is logged, never returned
        logger.info("%s %s rejected: %s %s", request.method, request.url.path, type(exc).__name__, exc)
    elif status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, type(exc).__name__)
    else:
        logger.info("%s %s rejected: %s", request.method, request.url.path, type(exc).__name__)
    return error_response(status_code, exc.detail)


async def request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    logger.info("%s %s rejected: %d validation error(s)", request.method, request.url.path, len(exc.errors()))
    return error_response(status.HTTP_400_BAD_REQUEST, ValidationError.detail)


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path, exc_info=exc)
    return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Internal server error.")


def register_exception_handlers(app: FastAPI) -> None:
    """Attach the registration error handlers to an application."""
    app.add_exception_handler(RegistrationError, registration_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)
