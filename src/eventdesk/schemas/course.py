"""Pydantic schemas for courses, course participants and course media."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from eventdesk.schemas.common import CamelModel, reject_null
from eventdesk.schemas.media import MediaRead

LEVEL_PATTERN = r"^(beginner|intermediate|advanced)$"


# ─── Courses ────────────────────────────────────────────

class CourseCreate(CamelModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    instructor: str = Field(..., min_length=1, max_length=200)
    level: str = Field(..., pattern=LEVEL_PATTERN)
    duration: Optional[str] = None
    start_date: Optional[datetime] = None


class CourseUpdate(CamelModel):
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    instructor: Optional[str] = Field(None, min_length=1, max_length=200)
    level: Optional[str] = Field(None, pattern=LEVEL_PATTERN)
    duration: Optional[str] = None
    start_date: Optional[datetime] = None

    @field_validator("title", "instructor")
    @classmethod
    def not_null(cls, v):
        return reject_null(v)


class CourseShare(CamelModel):
    is_shared: bool


class CourseRead(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    instructor: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[str] = None
    start_date: Optional[datetime] = None
    creator_id: Optional[int] = None
    is_shared: bool = False
    share_token: Optional[str] = None
    share_url: Optional[str] = None


class CourseEnvelope(BaseModel):
    course: CourseRead


class CourseList(BaseModel):
    courses: list[CourseRead]


# ─── Participants ───────────────────────────────────────

class CourseParticipantCreate(CamelModel):
    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")


class CourseParticipantRead(CamelModel):
    id: int
    course_id: int
    name: str
    email: str
    attended: bool = False
    registered_at: datetime


class CourseParticipantEnvelope(BaseModel):
    participant: CourseParticipantRead


class CourseParticipantList(BaseModel):
    participants: list[CourseParticipantRead]


# ─── Course media ───────────────────────────────────────

class CourseMediaLink(CamelModel):
    order: int = Field(0, ge=0)


class CourseMediaRead(MediaRead):
    order: int


class CourseMediaList(BaseModel):
    media: list[CourseMediaRead]


class CourseMediaLinkRead(CamelModel):
    id: int
    course_id: int
    media_id: int
    order: int


class CourseMediaLinkEnvelope(CamelModel):
    course_media: CourseMediaLinkRead
