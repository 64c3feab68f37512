"""Training session API routes (the training calendar)."""

from fastapi import APIRouter, Depends, Path
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import AuthContext, require_user
from eventdesk.db.engine import get_db
from eventdesk.errors import NotFound
from eventdesk.schemas.event import SuccessResponse
from eventdesk.schemas.training_session import (
    TrainingSessionCreate,
    TrainingSessionEnvelope,
    TrainingSessionList,
)
from eventdesk.services.course_service import CourseService

router = APIRouter(prefix="/training-sessions")


def _svc(db: AsyncSession = Depends(get_db)) -> CourseService:
    return CourseService(db)


@router.get("", response_model=TrainingSessionList)
async def list_training_sessions(
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    return {"sessions": await svc.list_training_sessions()}


@router.get("/month/{year}/{month}", response_model=TrainingSessionList)
async def list_training_sessions_in_month(
    year: int = Path(..., ge=1970, le=9999),
    month: int = Path(..., ge=1, le=12),
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    return {"sessions": await svc.list_training_sessions_in_month(year, month)}


@router.get("/{session_id}", response_model=TrainingSessionEnvelope)
async def get_training_session(
    session_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    session = await svc.get_training_session(session_id)
    if not session:
        raise NotFound("Training session not found")
    return {"session": session}


@router.post("", response_model=TrainingSessionEnvelope, status_code=201)
async def create_training_session(
    body: TrainingSessionCreate,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    session = await svc.create_training_session(creator_id=ctx.user_id, **body.model_dump())
    return {"session": session}


@router.delete("/{session_id}", response_model=SuccessResponse)
async def delete_training_session(
    session_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: CourseService = Depends(_svc),
):
    if not await svc.delete_training_session(session_id):
        raise NotFound("Training session not found")
    return {"success": True}
