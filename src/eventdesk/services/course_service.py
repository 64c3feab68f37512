"""Course service — courses, registrations, linked media, training sessions.

Training sessions belong to a course, so they live here rather than in a
service of their own; the calendar view reads them by month.
"""

from datetime import datetime, timezone
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.models import (
    Course,
    CourseMedia,
    CourseParticipant,
    Media,
    TrainingSession,
)
from eventdesk.errors import Conflict, NotFound
from eventdesk.services.event_service import generate_share_token, share_url

logger = structlog.get_logger()


def month_bounds(year: int, month: int) -> tuple[datetime, datetime]:
    """[start, end) of a calendar month in UTC."""
    start = datetime(year, month, 1, tzinfo=timezone.utc)
    if month == 12:
        end = datetime(year + 1, 1, 1, tzinfo=timezone.utc)
    else:
        end = datetime(year, month + 1, 1, tzinfo=timezone.utc)
    return start, end


class CourseService:
    """Business logic for courses and everything hanging off them."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Courses ────────────────────────────────────────

    async def list_courses(self) -> list[Course]:
        result = await self.db.execute(select(Course).order_by(Course.title))
        return list(result.scalars().all())

    async def get_course(self, course_id: int) -> Optional[Course]:
        return await self.db.get(Course, course_id)

    async def get_course_by_token(self, token: str) -> Optional[Course]:
        result = await self.db.execute(select(Course).where(Course.share_token == token))
        return result.scalars().first()

    async def create_course(self, creator_id: int, **fields) -> Course:
        course = Course(creator_id=creator_id, **fields)
        self.db.add(course)
        await self.db.commit()
        await self.db.refresh(course)
        logger.info("course.created", course_id=course.id, creator_id=creator_id)
        return course

    async def update_course(self, course_id: int, **fields) -> Optional[Course]:
        course = await self.get_course(course_id)
        if not course:
            return None
        for key, value in fields.items():
            setattr(course, key, value)
        await self.db.commit()
        await self.db.refresh(course)
        return course

    async def set_sharing(self, course_id: int, is_shared: bool) -> Optional[Course]:
        course = await self.get_course(course_id)
        if not course:
            return None
        if is_shared and not course.share_token:
            course.share_token = generate_share_token()
            course.share_url = share_url(course.share_token, "courses")
        course.is_shared = is_shared
        await self.db.commit()
        await self.db.refresh(course)
        return course

    async def delete_course(self, course_id: int) -> bool:
        course = await self.get_course(course_id)
        if not course:
            return False
        for model in (CourseParticipant, CourseMedia, TrainingSession):
            result = await self.db.execute(select(model).where(model.course_id == course_id))
            for row in result.scalars().all():
                await self.db.delete(row)
        await self.db.delete(course)
        await self.db.commit()
        logger.info("course.deleted", course_id=course_id)
        return True

    # ─── Participants ───────────────────────────────────

    async def list_participants(self, course_id: int) -> list[CourseParticipant]:
        result = await self.db.execute(
            select(CourseParticipant)
            .where(CourseParticipant.course_id == course_id)
            .order_by(CourseParticipant.registered_at, CourseParticipant.id)
        )
        return list(result.scalars().all())

    async def register_participant(self, course_id: int, name: str, email: str) -> CourseParticipant:
        if not await self.get_course(course_id):
            raise NotFound("Course not found")
        existing = await self.db.execute(
            select(CourseParticipant).where(
                CourseParticipant.course_id == course_id,
                CourseParticipant.email == email,
            )
        )
        if existing.scalars().first():
            raise Conflict("This email is already registered for this course")

        participant = CourseParticipant(course_id=course_id, name=name, email=email)
        self.db.add(participant)
        await self.db.commit()
        await self.db.refresh(participant)
        return participant

    async def set_attendance(
        self, course_id: int, participant_id: int, attended: bool
    ) -> Optional[CourseParticipant]:
        participant = await self.db.get(CourseParticipant, participant_id)
        if not participant or participant.course_id != course_id:
            return None
        participant.attended = attended
        await self.db.commit()
        await self.db.refresh(participant)
        return participant

    # ─── Course media ───────────────────────────────────

    async def list_media(self, course_id: int) -> list[tuple[Media, int]]:
        """Media linked to a course with their position, in order."""
        result = await self.db.execute(
            select(Media, CourseMedia.order)
            .join(CourseMedia, CourseMedia.media_id == Media.id)
            .where(CourseMedia.course_id == course_id)
            .order_by(CourseMedia.order, Media.id)
        )
        return [(media, order) for media, order in result.all()]

    async def _get_link(self, course_id: int, media_id: int) -> Optional[CourseMedia]:
        result = await self.db.execute(
            select(CourseMedia).where(
                CourseMedia.course_id == course_id,
                CourseMedia.media_id == media_id,
            )
        )
        return result.scalars().first()

    async def link_media(self, course_id: int, media_id: int, order: int = 0) -> CourseMedia:
        if not await self.get_course(course_id):
            raise NotFound("Course not found")
        if not await self.db.get(Media, media_id):
            raise NotFound("Media not found")
        if await self._get_link(course_id, media_id):
            raise Conflict("Media is already linked to this course")

        link = CourseMedia(course_id=course_id, media_id=media_id, order=order)
        self.db.add(link)
        await self.db.commit()
        await self.db.refresh(link)
        return link

    async def unlink_media(self, course_id: int, media_id: int) -> bool:
        link = await self._get_link(course_id, media_id)
        if not link:
            return False
        await self.db.delete(link)
        await self.db.commit()
        return True

    async def update_media_order(self, course_id: int, media_id: int, order: int) -> Optional[CourseMedia]:
        link = await self._get_link(course_id, media_id)
        if not link:
            return None
        link.order = order
        await self.db.commit()
        await self.db.refresh(link)
        return link

    # ─── Training sessions ──────────────────────────────

    async def list_training_sessions(self) -> list[TrainingSession]:
        result = await self.db.execute(
            select(TrainingSession).order_by(TrainingSession.start_time)
        )
        return list(result.scalars().all())

    async def list_training_sessions_in_month(self, year: int, month: int) -> list[TrainingSession]:
        start, end = month_bounds(year, month)
        result = await self.db.execute(
            select(TrainingSession)
            .where(TrainingSession.start_time >= start, TrainingSession.start_time < end)
            .order_by(TrainingSession.start_time)
        )
        return list(result.scalars().all())

    async def get_training_session(self, session_id: int) -> Optional[TrainingSession]:
        return await self.db.get(TrainingSession, session_id)

    async def create_training_session(self, creator_id: int, course_id: int, **fields) -> TrainingSession:
        if not await self.get_course(course_id):
            raise NotFound("Course not found")
        session = TrainingSession(creator_id=creator_id, course_id=course_id, **fields)
        self.db.add(session)
        await self.db.commit()
        await self.db.refresh(session)
        logger.info("training_session.created", session_id=session.id, course_id=course_id)
        return session

    async def delete_training_session(self, session_id: int) -> bool:
        session = await self.get_training_session(session_id)
        if not session:
            return False
        await self.db.delete(session)
        await self.db.commit()
        return True
