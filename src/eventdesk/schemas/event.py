"""Pydantic schemas for events and event participants.

Separate "Create"/"Update" schemas (input) from "Read" schemas (output).
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from eventdesk.db.models import as_utc
from eventdesk.schemas.common import CamelModel, reject_null


# ─── Events ─────────────────────────────────────────────

class EventCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime

    @model_validator(mode="after")
    def end_after_start(self):
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("End date must be after start date")
        return self


class EventUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None

    @field_validator("title", "start_date", "end_date")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class EventShare(CamelModel):
    is_shared: bool


class EventRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    location: Optional[str] = None
    start_date: datetime
    end_date: datetime
    creator_id: Optional[int] = None
    is_shared: bool = False
    share_token: Optional[str] = None
    share_url: Optional[str] = None


class EventEnvelope(BaseModel):
    event: EventRead


class EventList(BaseModel):
    events: list[EventRead]


# ─── Participants ───────────────────────────────────────

class ParticipantCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    phone: Optional[str] = None
    notes: Optional[str] = None


class AttendanceUpdate(CamelModel):
    attended: bool


class ParticipantRead(CamelModel):
    id: int
    event_id: int
    name: str
    email: str
    phone: Optional[str] = None
    notes: Optional[str] = None
    attended: bool = False
    registered_at: datetime


class ParticipantEnvelope(BaseModel):
    participant: ParticipantRead


class ParticipantList(BaseModel):
    participants: list[ParticipantRead]


class SuccessResponse(BaseModel):
    success: bool = True
