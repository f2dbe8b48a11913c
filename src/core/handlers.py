"""
Global exception handlers for the FastAPI application.

This module contains centralized handlers for custom application exceptions,
translating them into `{"error": ...}` JSON responses.
"""

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from slowapi.errors import RateLimitExceeded
from starlette import status
from structlog import get_logger

from src.core.exceptions import (
    AuthenticationError,
    CacheError,
    EmailServiceError,
    IdentityProviderError,
    OtpGateError,
    ValidationError,
)

__all__ = [
    "authentication_error_handler",
    "validation_error_handler",
    "request_validation_error_handler",
    "dependency_error_handler",
    "rate_limit_exception_handler",
    "otpgate_error_handler",
    "register_exception_handlers",
]

logger = get_logger(__name__)


def _client_ip(request: Request) -> str:
    return request.client.host if request.client else "unknown"


async def authentication_error_handler(request: Request, exc: AuthenticationError) -> JSONResponse:
    """Handles `AuthenticationError`, returning a `401 Unauthorized`.

    Args:
        request: The incoming `Request` object.
        exc: The `AuthenticationError` instance.

    Returns:
        A `JSONResponse` with a 401 status code and the error message.
    """
    logger.warning(
        "authentication_failure",
        error=exc.code,
        client_ip=_client_ip(request),
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_401_UNAUTHORIZED,
        content={"error": exc.message},
    )


async def validation_error_handler(request: Request, exc: ValidationError) -> JSONResponse:
    """Handles `ValidationError`, returning a `400 Bad Request`."""
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": exc.message},
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Answers malformed request bodies with `400` and the first problem found.

    FastAPI's default is a 422 with the full pydantic error list; clients of
    this service expect a single `error` string.
    """
    errors = exc.errors()
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else str(first.get("msg"))
    else:
        message = "Invalid request"
    logger.info("request_validation_failed", path=request.url.path, error=message)
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": message},
    )


async def dependency_error_handler(request: Request, exc: OtpGateError) -> JSONResponse:
    """Handles identity provider, cache and email failures that escape the
    domain services, returning a `503 Service Unavailable`."""
    logger.error(
        "dependency_unavailable",
        error=exc.code,
        detail=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
        content={"error": "Service temporarily unavailable"},
    )


async def rate_limit_exception_handler(request: Request, exc: RateLimitExceeded) -> JSONResponse:
    """Handles exceptions raised by slowapi when a rate limit is exceeded.

    Args:
        request: The incoming FastAPI request.
        exc: The RateLimitExceeded exception instance.

    Returns:
        A JSONResponse with status code 429.
    """
    logger.warning(
        "rate_limit_exceeded",
        client_ip=_client_ip(request),
        path=request.url.path,
        limit=str(exc.detail),
    )
    return JSONResponse(
        status_code=status.HTTP_429_TOO_MANY_REQUESTS,
        content={"error": "Too many requests"},
    )


async def otpgate_error_handler(request: Request, exc: OtpGateError) -> JSONResponse:
    """Handles the base `OtpGateError`, returning a `500 Internal Server Error`.

    This serves as a fallback for any custom application errors that do not
    have a more specific handler.
    """
    logger.error(
        "unhandled_application_error",
        error=exc.code,
        detail=exc.message,
        path=request.url.path,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    """Registers all custom exception handlers with the FastAPI application.

    Args:
        app: The `FastAPI` application instance.
    """
    app.add_exception_handler(RateLimitExceeded, rate_limit_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(AuthenticationError, authentication_error_handler)
    app.add_exception_handler(ValidationError, validation_error_handler)
    app.add_exception_handler(IdentityProviderError, dependency_error_handler)
    app.add_exception_handler(CacheError, dependency_error_handler)
    app.add_exception_handler(EmailServiceError, dependency_error_handler)
    app.add_exception_handler(OtpGateError, otpgate_error_handler)
