"""Pydantic schemas for training sessions."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from eventdesk.db.models import as_utc
from eventdesk.schemas.common import CamelModel


class TrainingSessionCreate(CamelModel):
    course_id: int
    title: str = Field(..., min_length=1, max_length=255)
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None

    @model_validator(mode="after")
    def end_after_start(self):
        if as_utc(self.end_time) < as_utc(self.start_time):
            raise ValueError("End time must be after start time")
        return self


class TrainingSessionRead(CamelModel):
    id: int
    course_id: int
    title: str
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    creator_id: Optional[int] = None


class TrainingSessionEnvelope(BaseModel):
    session: TrainingSessionRead


class TrainingSessionList(BaseModel):
    sessions: list[TrainingSessionRead]
