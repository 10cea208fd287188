"""
Application Exception Handling

AppException hierarchy for catalog errors with FastAPI integration.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


# Module logger
logger = logging.getLogger(__name__)


class AppException(Exception):
    """
    Unified application exception for all error scenarios.

    Provides consistent error response format across the entire API.

    Usage:
        raise AppException("Product not found", "PRODUCT_NOT_FOUND", 404)
        raise NotFound("Product not found", details={"product_id": "42"})

    Error Codes:
        Catalog:
            - INVALID_RECORD (422)
            - PRODUCT_NOT_FOUND (404)
            - NO_DOWNLOADS (404)

        Upstream:
            - UPSTREAM_UNAVAILABLE (502)
            - LINK_UNAUTHORIZED (403)

        Sync:
            - SYNC_IN_PROGRESS (409)

        General:
            - VALIDATION_ERROR (422)
            - INTERNAL_ERROR (500)
    """

    default_code = "APP_ERROR"
    default_status = 400

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize application exception.

        Args:
            message: Human-readable error message
            code: Machine-readable error code (e.g., "PRODUCT_NOT_FOUND")
            status_code: HTTP status code
            details: Additional error context (optional)
        """
        self.message = message
        self.code = code or self.default_code
        self.status_code = status_code or self.default_status
        self.details = details or {}
        self.timestamp = datetime.now(timezone.utc).isoformat()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for JSON response."""
        error_dict: Dict[str, Any] = {
            "error": self.message,
            "code": self.code,
        }

        if self.details:
            error_dict["details"] = self.details

        return error_dict


class ValidationError(AppException):
    """Malformed upstream record; the record is skipped, the cycle continues."""

    default_code = "INVALID_RECORD"
    default_status = 422


class UpstreamUnavailable(AppException):
    """Upstream request failed or timed out."""

    default_code = "UPSTREAM_UNAVAILABLE"
    default_status = 502


class NotFound(AppException):
    """Lookup miss."""

    default_code = "PRODUCT_NOT_FOUND"
    default_status = 404


class InternalError(AppException):
    """Unexpected fault while handling a request."""

    default_code = "INTERNAL_ERROR"
    default_status = 500


class LinkUnauthorized(AppException):
    """The link endpoint rejected the supplied API key."""

    default_code = "LINK_UNAUTHORIZED"
    default_status = 403


class SyncInProgress(AppException):
    """A sync cycle is already running."""

    default_code = "SYNC_IN_PROGRESS"
    default_status = 409


async def app_exception_handler(request: Request, exc: AppException) -> JSONResponse:
    """
    FastAPI exception handler for AppException.

    Converts AppException to consistent JSON error response.
    """
    if exc.status_code >= 500:
        logger.error(f"{exc.code} on {request.method} {request.url.path}: {exc.message}")

    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """Render request validation failures in the common error shape."""
    errors = exc.errors()
    message = "Invalid request"
    if errors:
        location = ".".join(str(part) for part in errors[0].get("loc", ()))
        message = f"Invalid request: {location} {errors[0].get('msg', '')}".strip()

    return JSONResponse(
        status_code=422,
        content={"error": message, "code": "VALIDATION_ERROR"}
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """Log unexpected failures and answer with a generic 500."""
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(
        status_code=500,
        content=internal_error().to_dict()
    )


def register_exception_handlers(app: FastAPI) -> None:
    """
    Register all exception handlers with FastAPI app.

    Args:
        app: FastAPI application instance
    """
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)


# ============================================
# CONVENIENCE FACTORY FUNCTIONS
# ============================================

def invalid_record(reason: str, product_id: Optional[Any] = None) -> ValidationError:
    """Create invalid upstream record exception."""
    details = {"product_id": product_id} if product_id is not None else {}
    return ValidationError(f"Invalid upstream record: {reason}", details=details)


def product_not_found(product_id: str) -> NotFound:
    """Create product not found exception."""
    return NotFound("Product not found", details={"product_id": product_id})


def no_downloads(product_id: str) -> NotFound:
    """Create missing download file exception."""
    return NotFound(
        "Product has no downloadable file",
        "NO_DOWNLOADS",
        details={"product_id": product_id}
    )


def upstream_unavailable(message: str, url: Optional[str] = None) -> UpstreamUnavailable:
    """Create upstream failure exception."""
    details = {"url": url} if url else {}
    return UpstreamUnavailable(message, details=details)


def link_unauthorized() -> LinkUnauthorized:
    """Create link authorization failure exception."""
    return LinkUnauthorized("Link authorization failed")


def sync_in_progress() -> SyncInProgress:
    """Create sync already running exception."""
    return SyncInProgress("A catalog sync is already running")


def internal_error(message: str = "Internal server error") -> InternalError:
    """Create internal server error exception."""
    return InternalError(message)
