"""
==============================================================================
Core Package
==============================================================================

Core utilities and infrastructure for the application.

Modules:
--------
- exceptions: AppException hierarchy and error factory functions
- dependencies: FastAPI dependency providers for the catalog services

Usage:
------
    from wpcatalog.core import exceptions
    raise exceptions.product_not_found("42")

==============================================================================
"""

from .exceptions import (
    AppException,
    InternalError,
    NotFound,
    UpstreamUnavailable,
    ValidationError,
    register_exception_handlers,
)

__all__ = [
    "AppException",
    "InternalError",
    "NotFound",
    "UpstreamUnavailable",
    "ValidationError",
    "register_exception_handlers",
]
