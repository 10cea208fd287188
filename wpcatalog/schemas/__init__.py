"""
==============================================================================
Schemas Package - Pydantic Models
==============================================================================

Request and response schemas using Pydantic for validation.

Catalog item models (Product, SearchRecord) live in ``wpcatalog.catalog``.

==============================================================================
"""

from .common import ErrorResponse, MessageResponse
from .link import LinkRequest, LinkResponse

__all__ = [
    "ErrorResponse",
    "MessageResponse",
    "LinkRequest",
    "LinkResponse",
]
