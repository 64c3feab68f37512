"""Course, course participant and course media API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import AuthContext, require_user
from eventdesk.db.engine import get_db
from eventdesk.errors import NotFound
from eventdesk.schemas.course import (
    CourseCreate,
    CourseEnvelope,
    CourseList,
    CourseMediaLink,
    CourseMediaLinkEnvelope,
    CourseMediaList,
    CourseParticipantCreate,
    CourseParticipantEnvelope,
    CourseParticipantList,
    CourseShare,
    CourseUpdate,
)
from eventdesk.schemas.event import AttendanceUpdate, SuccessResponse
from eventdesk.schemas.media import MediaRead
from eventdesk.services.course_service import CourseService

router = APIRouter(prefix="/courses")


def _svc(db: AsyncSession = Depends(get_db)) -> CourseService:
    return CourseService(db)


# ─── Courses ────────────────────────────────────────────

@router.get("", response_model=CourseList)
async def list_courses(
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    return {"courses": await svc.list_courses()}


@router.get("/shared/{token}", response_model=CourseEnvelope)
async def get_shared_course(token: str, svc: CourseService = Depends(_svc)):
    """Public view of a shared course — no authentication required."""
    course = await svc.get_course_by_token(token)
    if not course or not course.is_shared:
        raise NotFound("Shared course not found")
    return {"course": course}


@router.get("/{course_id}", response_model=CourseEnvelope)
async def get_course(
    course_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.get_course(course_id)
    if not course:
        raise NotFound("Course not found")
    return {"course": course}


@router.post("", response_model=CourseEnvelope, status_code=201)
async def create_course(
    body: CourseCreate,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.create_course(creator_id=ctx.user_id, **body.model_dump())
    return {"course": course}


@router.put("/{course_id}", response_model=CourseEnvelope)
async def update_course(
    course_id: int,
    body: CourseUpdate,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.update_course(course_id, **body.model_dump(exclude_unset=True))
    if not course:
        raise NotFound("Course not found")
    return {"course": course}


@router.delete("/{course_id}", response_model=SuccessResponse)
async def delete_course(
    course_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    if not await svc.delete_course(course_id):
        raise NotFound("Course not found")
    return {"success": True}


@router.put("/{course_id}/share", response_model=CourseEnvelope)
async def share_course(
    course_id: int,
    body: CourseShare,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    course = await svc.set_sharing(course_id, body.is_shared)
    if not course:
        raise NotFound("Course not found")
    return {"course": course}


# ─── Participants ───────────────────────────────────────

@router.get("/{course_id}/participants", response_model=CourseParticipantList)
async def list_participants(
    course_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    return {"participants": await svc.list_participants(course_id)}


@router.post(
    "/{course_id}/participants",
    response_model=CourseParticipantEnvelope,
    status_code=201,
)
async def register_participant(
    course_id: int,
    body: CourseParticipantCreate,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    participant = await svc.register_participant(course_id, body.name, body.email)
    return {"participant": participant}


@router.put(
    "/{course_id}/participants/{participant_id}",
    response_model=CourseParticipantEnvelope,
)
async def update_attendance(
    course_id: int,
    participant_id: int,
    body: AttendanceUpdate,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    participant = await svc.set_attendance(course_id, participant_id, body.attended)
    if not participant:
        raise NotFound("Participant not found")
    return {"participant": participant}


# ─── Course media ───────────────────────────────────────

@router.get("/{course_id}/media", response_model=CourseMediaList)
async def list_course_media(
    course_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    items = await svc.list_media(course_id)
    return {
        "media": [
            {**MediaRead.model_validate(media).model_dump(), "order": order}
            for media, order in items
        ]
    }


@router.post(
    "/{course_id}/media/{media_id}",
    response_model=CourseMediaLinkEnvelope,
    status_code=201,
)
async def link_media(
    course_id: int,
    media_id: int,
    body: CourseMediaLink = CourseMediaLink(),
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    link = await svc.link_media(course_id, media_id, body.order)
    return {"course_media": link}


@router.delete("/{course_id}/media/{media_id}", response_model=SuccessResponse)
async def unlink_media(
    course_id: int,
    media_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    if not await svc.unlink_media(course_id, media_id):
        raise NotFound("Media is not linked to this course")
    return {"success": True}


@router.put(
    "/{course_id}/media/{media_id}/order",
    response_model=CourseMediaLinkEnvelope,
)
async def update_media_order(
    course_id: int,
    media_id: int,
    body: CourseMediaLink,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    link = await svc.update_media_order(course_id, media_id, body.order)
    if not link:
        raise NotFound("Media is not linked to this course")
    return {"course_media": link}
