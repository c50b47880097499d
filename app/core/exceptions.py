"""Custom exception classes and exception handlers."""

from typing import Any

from fastapi import Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException

from app.core.logging import get_logger

logger = get_logger(__name__)

# Shown to end users for every 5xx; upstream details stay in the logs.
GENERIC_ERROR_MESSAGE = "We're under works. Please try again in a bit."


def _get_cors_headers(request: Request) -> dict[str, str]:
    """Get CORS headers for error responses."""
    origin = request.headers.get("origin", "")
    # Import here to avoid circular imports
    from app.core.config import get_settings
    settings = get_settings()

    if origin and origin in settings.cors_origins:
        return {
            "Access-Control-Allow-Origin": origin,
            "Access-Control-Allow-Credentials": "true",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }
    if origin and "*" in settings.cors_origins:
        # Wildcard origins never carry credentials, matching CORSMiddleware
        return {
            "Access-Control-Allow-Origin": "*",
            "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
            "Access-Control-Allow-Headers": "Content-Type",
        }
    return {}


def _public_message(status_code: int, message: str) -> str:
    return GENERIC_ERROR_MESSAGE if status_code >= 500 else message


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


class InvalidInput(AppException):
    """Client-caused validation failure; raised before any outbound call."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message, status.HTTP_400_BAD_REQUEST, details)


class FetchFailure(AppException):
    """A single external data fetch failed."""

    def __init__(self, source: str, message: str):
        super().__init__(
            f"Fetch failed ({source}): {message}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"source": source},
        )
        self.source = source


class SynthesisFailure(AppException):
    """The completion service returned a non-success response."""

    def __init__(self, provider: str, message: str):
        super().__init__(
            f"Completion provider error ({provider}): {message}",
            status.HTTP_500_INTERNAL_SERVER_ERROR,
            {"provider": provider},
        )
        self.provider = provider


class ParseFailure(AppException):
    """Completion output was not a JSON object after cleanup."""

    def __init__(self, message: str = "Could not parse completion output"):
        super().__init__(message, status.HTTP_500_INTERNAL_SERVER_ERROR)


class CacheFailure(AppException):
    """Cache operation error (non-fatal, logged only)."""

    def __init__(self, message: str = "Cache operation failed"):
        super().__init__(message, status.HTTP_503_SERVICE_UNAVAILABLE)


class RateLimitError(AppException):
    """Rate limit exceeded."""

    def __init__(self, retry_after: int = 60):
        super().__init__(
            "Too many requests. Please slow down and try again shortly.",
            status.HTTP_429_TOO_MANY_REQUESTS,
            {"retry_after": retry_after},
        )


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """Handle application exceptions."""
    log = logger.error if exc.status_code >= 500 else logger.warning
    log(
        "Application exception",
        error_type=type(exc).__name__,
        status_code=exc.status_code,
        message=exc.message,
        details=exc.details,
        path=str(request.url),
    )

    headers = _get_cors_headers(request)
    if isinstance(exc, RateLimitError):
        headers["Retry-After"] = str(exc.details.get("retry_after", 60))

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _public_message(exc.status_code, exc.message)},
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """Handle HTTP exceptions."""
    logger.warning(
        "HTTP exception",
        status_code=exc.status_code,
        detail=exc.detail,
        path=str(request.url),
    )

    return JSONResponse(
        status_code=exc.status_code,
        content={"error": _public_message(exc.status_code, str(exc.detail))},
        headers=_get_cors_headers(request),
    )


async def validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Handle malformed request bodies as a plain 400."""
    logger.warning(
        "Request validation failed",
        fields=[".".join(str(p) for p in err.get("loc", ())) for err in exc.errors()],
        path=str(request.url),
    )

    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request body"},
        headers=_get_cors_headers(request),
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Handle unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        exc_info=exc,
        path=str(request.url),
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": GENERIC_ERROR_MESSAGE},
        headers=_get_cors_headers(request),
    )
