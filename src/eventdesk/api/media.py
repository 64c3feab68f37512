"""Media metadata API routes."""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import AuthContext, require_user
from eventdesk.db.engine import get_db
from eventdesk.errors import NotFound
from eventdesk.schemas.event import SuccessResponse
from eventdesk.schemas.media import MediaCreate, MediaEnvelope, MediaList, MediaUpdate
from eventdesk.services.media_service import MediaService

router = APIRouter(prefix="/media")


def _svc(db: AsyncSession = Depends(get_db)) -> MediaService:
    return MediaService(db)


@router.get("", response_model=MediaList)
async def list_media(
    ctx: AuthContext = Depends(require_user),
    svc: MediaService = Depends(_svc),
):
    return {"media": await svc.list_media()}


@router.get("/{media_id}", response_model=MediaEnvelope)
async def get_media(
    media_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: MediaService = Depends(_svc),
):
    media = await svc.get_media(media_id)
    if not media:
        raise NotFound("Media not found")
    return {"media": media}


@router.post("", response_model=MediaEnvelope, status_code=201)
async def create_media(
    body: MediaCreate,
    ctx: AuthContext = Depends(require_user),
    svc: MediaService = Depends(_svc),
):
    media = await svc.create_media(uploaded_by=ctx.user_id, **body.model_dump())
    return {"media": media}


@router.put("/{media_id}", response_model=MediaEnvelope)
async def update_media(
    media_id: int,
    body: MediaUpdate,
    ctx: AuthContext = Depends(require_user),
    svc: MediaService = Depends(_svc),
):
    media = await svc.update_media(media_id, **body.model_dump(exclude_unset=True))
    if not media:
        raise NotFound("Media not found")
    return {"media": media}


@router.delete("/{media_id}", response_model=SuccessResponse)
async def delete_media(
    media_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: MediaService = Depends(_svc),
):
    if not await svc.delete_media(media_id):
        raise NotFound("Media not found")
    return {"success": True}
