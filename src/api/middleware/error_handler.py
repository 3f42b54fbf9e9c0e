"""Error handling middleware and exception handlers."""

from typing import Any

from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import RequestResponseEndpoint
from starlette.responses import Response

from src.commons.telemetry.logger import get_logger
from src.domain.exceptions import (
    AuthenticationException,
    DomainException,
    InvalidUploadException,
    MetadataException,
    ObjectNotFoundException,
    ProcessingException,
    StorageException,
    UploadTooLargeException,
    VideoNotFoundException,
)

logger = get_logger(__name__)

# Transcoder output can be long; clients get the tail only.
_MAX_DIAGNOSTICS_CHARS = 2000


class APIError(Exception):
    """Base API error with code and details."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = status.HTTP_400_BAD_REQUEST,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize API error.

        Args:
            code: Error code for clients.
            message: Human-readable error message.
            status_code: HTTP status code.
            details: Additional error details.
        """
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


def _build_error_response(
    request: Request,
    code: str,
    message: str,
    status_code: int,
    details: dict[str, Any] | None = None,
    headers: dict[str, str] | None = None,
) -> JSONResponse:
    """Build standardized error response.

    Args:
        request: HTTP request.
        code: Error code.
        message: Error message.
        status_code: HTTP status code.
        details: Additional details.
        headers: Extra response headers.

    Returns:
        JSON error response.
    """
    request_id = getattr(request.state, "request_id", "unknown")

    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
                "details": details or {},
                "request_id": request_id,
            }
        },
        headers=headers,
    )


def _handle_exception(  # noqa: PLR0911
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Handle exception and return appropriate error response.

    Args:
        request: HTTP request.
        exc: Exception to handle.

    Returns:
        JSON error response.
    """
    if isinstance(exc, APIError):
        logger.warning(
            f"API error: {exc.code}",
            extra={
                "error_code": exc.code,
                "error_message": exc.message,
                "details": exc.details,
            },
        )
        return _build_error_response(
            request=request,
            code=exc.code,
            message=exc.message,
            status_code=exc.status_code,
            details=exc.details,
        )

    if isinstance(exc, UploadTooLargeException):
        logger.warning(f"Upload too large: {exc}")
        return _build_error_response(
            request=request,
            code="UPLOAD_TOO_LARGE",
            message=str(exc),
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            details={"max_bytes": exc.max_bytes},
        )

    if isinstance(exc, InvalidUploadException):
        logger.warning(f"Invalid upload: {exc}")
        return _build_error_response(
            request=request,
            code="INVALID_UPLOAD",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
            details={"reason": exc.reason},
        )

    if isinstance(exc, AuthenticationException):
        logger.warning(f"Authentication failed: {exc}")
        return _build_error_response(
            request=request,
            code="UNAUTHORIZED",
            message=str(exc),
            status_code=status.HTTP_401_UNAUTHORIZED,
            headers={"WWW-Authenticate": "Bearer"},
        )

    if isinstance(exc, VideoNotFoundException):
        logger.warning(f"Video not found: {exc}")
        return _build_error_response(
            request=request,
            code="VIDEO_NOT_FOUND",
            message=str(exc),
            status_code=status.HTTP_404_NOT_FOUND,
            details={"video_id": exc.video_id},
        )

    if isinstance(exc, ObjectNotFoundException):
        logger.warning(f"Object not found: {exc}")
        return _build_error_response(
            request=request,
            code="OBJECT_NOT_FOUND",
            message=str(exc),
            status_code=status.HTTP_404_NOT_FOUND,
            details={"key": exc.key},
        )

    if isinstance(exc, ProcessingException):
        logger.error(
            f"Processing failed: {exc}",
            extra={"diagnostics": exc.diagnostics},
        )
        return _build_error_response(
            request=request,
            code="PROCESSING_ERROR",
            message=str(exc),
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            details={"diagnostics": exc.diagnostics[-_MAX_DIAGNOSTICS_CHARS:]},
        )

    if isinstance(exc, StorageException):
        logger.error(f"Storage error: {exc}")
        return _build_error_response(
            request=request,
            code="STORAGE_ERROR",
            message=f"Storage {exc.operation} failed",
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"operation": exc.operation, "key": exc.key},
        )

    if isinstance(exc, MetadataException):
        logger.error(f"Metadata error: {exc}")
        return _build_error_response(
            request=request,
            code="METADATA_ERROR",
            message=f"Metadata {exc.operation} failed",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            details={"operation": exc.operation},
        )

    if isinstance(exc, DomainException):
        logger.warning(f"Domain error: {exc}")
        return _build_error_response(
            request=request,
            code="DOMAIN_ERROR",
            message=str(exc),
            status_code=status.HTTP_400_BAD_REQUEST,
        )

    # Catch-all for unexpected errors
    logger.exception(f"Unexpected error: {exc}")
    return _build_error_response(
        request=request,
        code="INTERNAL_ERROR",
        message="An unexpected error occurred",
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
    )


async def error_handler_middleware(
    request: Request,
    call_next: RequestResponseEndpoint,
) -> Response:
    """Middleware to catch and format all exceptions.

    Args:
        request: HTTP request.
        call_next: Next handler in chain.

    Returns:
        HTTP response.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return _handle_exception(request, exc)
