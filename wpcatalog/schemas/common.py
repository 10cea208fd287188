"""
==============================================================================
Common Schemas Module
==============================================================================

Shared response schemas used across all API endpoints.

==============================================================================
"""

from typing import Any, Dict, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Error body returned by every failing endpoint."""
    error: str
    code: str
    details: Optional[Dict[str, Any]] = Field(default=None)


class MessageResponse(BaseModel):
    """Simple message response."""
    success: bool = Field(default=True)
    message: str
