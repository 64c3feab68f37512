"""Pydantic schemas for API key management.

Only ApiKeyCreated carries the raw key, and only the create route
returns it.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from eventdesk.schemas.common import CamelModel


class ApiKeyCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=100)
    expiry_days: Optional[int] = Field(
        None, ge=1, le=3650, description="Expire in N days (None = never)"
    )


class ApiKeyToggle(CamelModel):
    is_active: bool


class ApiKeyCreated(CamelModel):
    """Response for API key creation — key is only shown ONCE."""

    id: int
    name: str
    key: str
    created_at: datetime
    is_active: bool
    expires_at: Optional[datetime] = None


class ApiKeyRead(CamelModel):
    """API key info (without the actual key)."""

    id: int
    name: str
    created_at: datetime
    last_used_at: Optional[datetime] = None
    is_active: bool
    expires_at: Optional[datetime] = None


class ApiKeyCreatedResponse(CamelModel):
    api_key: ApiKeyCreated
    message: str


class ApiKeyResponse(CamelModel):
    api_key: ApiKeyRead
    message: str


class ApiKeyList(CamelModel):
    api_keys: list[ApiKeyRead]


class MessageResponse(BaseModel):
    message: str
