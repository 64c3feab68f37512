"""Pydantic schemas for media metadata.

Upload handling lives outside this service; clients register the stored
file's URL and details here.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from eventdesk.schemas.common import CamelModel, reject_null

MEDIA_TYPE_PATTERN = r"^(image|video|document|audio)$"


class MediaCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    media_type: str = Field(..., pattern=MEDIA_TYPE_PATTERN)
    file_url: str = Field(..., min_length=1, max_length=500)
    file_name: Optional[str] = None
    file_size: Optional[int] = Field(None, ge=0)
    mime_type: Optional[str] = None


class MediaUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None

    @field_validator("title")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class MediaRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    media_type: str
    file_url: str
    file_name: Optional[str] = None
    file_size: Optional[int] = None
    mime_type: Optional[str] = None
    uploaded_by: Optional[int] = None
    created_at: datetime


class MediaEnvelope(BaseModel):
    media: MediaRead


class MediaList(BaseModel):
    media: list[MediaRead]
