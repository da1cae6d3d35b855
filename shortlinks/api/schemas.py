"""API request and response schemas.

This module contains Pydantic models for API request validation
and response serialization. Field names are camelCase on the wire.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from shortlinks.models.link import ShortLink


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ShortenRequest(CamelModel):
    """Request schema for creating a short link."""
    url: str
    custom_code: Optional[str] = None
    
    @field_validator("url")
    def strip_url(cls, v: str) -> str:
        return v.strip()
    
    # Blank custom codes mean "generate one for me"
    @field_validator("custom_code")
    def blank_code_to_none(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return None
        v = v.strip()
        return v or None


class LinkResponse(CamelModel):
    """Response schema for a stored link."""
    id: int
    code: str
    original_url: str
    short_url: str  # Full URL including base domain
    created_at: datetime
    
    @classmethod
    def from_link(cls, link: ShortLink) -> "LinkResponse":
        return cls(
            id=link.id,
            code=link.code,
            original_url=link.original_url,
            short_url=link.short_url,
            created_at=link.created_at,
        )


class ErrorResponse(BaseModel):
    """Response schema for errors."""
    error: str
    reason: Optional[str] = Field(None, description="Validation sub-reason for invalid codes")


class HealthResponse(BaseModel):
    status: str
    version: str
    storage: str
