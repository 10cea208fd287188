"""
==============================================================================
Link Schemas Module
==============================================================================

Request and response schemas for download link resolution.

==============================================================================
"""

from pydantic import BaseModel, Field, field_validator


class LinkRequest(BaseModel):
    """Download link request body."""
    api_key: str = Field(..., min_length=1, max_length=512)

    @field_validator("api_key")
    @classmethod
    def validate_api_key(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("api_key must not be blank")
        return v


class LinkResponse(BaseModel):
    """Resolved download link."""
    url: str
