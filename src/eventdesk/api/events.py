"""Event and event participant API routes.

Routes handle HTTP concerns (status codes, 404s), EventService handles
the rest. Everything requires an authenticated user except the public
shared-event lookup. API keys reach the GET routes and participant
registration; the allow-list stops them before any other route runs.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.dependencies import AuthContext, require_user
from eventdesk.db.engine import get_db
from eventdesk.errors import NotFound
from eventdesk.schemas.event import (
    AttendanceUpdate,
    EventCreate,
    EventEnvelope,
    EventList,
    EventShare,
    EventUpdate,
    ParticipantCreate,
    ParticipantEnvelope,
    ParticipantList,
    SuccessResponse,
)
from eventdesk.services.event_service import EventService

router = APIRouter(prefix="/events")


def _svc(db: AsyncSession = Depends(get_db)) -> EventService:
    return EventService(db)


# ─── Events ─────────────────────────────────────────────

@router.get("", response_model=EventList)
async def list_events(
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    return {"events": await svc.list_events()}


@router.get("/shared/{token}", response_model=EventEnvelope)
async def get_shared_event(token: str, svc: EventService = Depends(_svc)):
    """Public view of a shared event — no authentication required."""
    event = await svc.get_event_by_token(token)
    if not event or not event.is_shared:
        raise NotFound("Shared event not found")
    return {"event": event}


@router.get("/{event_id}", response_model=EventEnvelope)
async def get_event(
    event_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    event = await svc.get_event(event_id)
    if not event:
        raise NotFound("Event not found")
    return {"event": event}


@router.post("", response_model=EventEnvelope, status_code=201)
async def create_event(
    body: EventCreate,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    event = await svc.create_event(creator_id=ctx.user_id, **body.model_dump())
    return {"event": event}


@router.put("/{event_id}", response_model=EventEnvelope)
async def update_event(
    event_id: int,
    body: EventUpdate,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    event = await svc.update_event(event_id, **body.model_dump(exclude_unset=True))
    if not event:
        raise NotFound("Event not found")
    return {"event": event}


@router.delete("/{event_id}", response_model=SuccessResponse)
async def delete_event(
    event_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    if not await svc.delete_event(event_id):
        raise NotFound("Event not found")
    return {"success": True}


@router.put("/{event_id}/share", response_model=EventEnvelope)
async def share_event(
    event_id: int,
    body: EventShare,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    """Enable or disable the public share link."""
    event = await svc.set_sharing(event_id, body.is_shared)
    if not event:
        raise NotFound("Event not found")
    return {"event": event}


# ─── Participants ───────────────────────────────────────

@router.get("/{event_id}/participants", response_model=ParticipantList)
async def list_participants(
    event_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    return {"participants": await svc.list_participants(event_id)}


@router.post("/{event_id}/participants", response_model=ParticipantEnvelope, status_code=201)
async def register_participant(
    event_id: int,
    body: ParticipantCreate,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    """Register someone for an event. The one write an API key may make."""
    if not await svc.get_event(event_id):
        raise NotFound("Event not found")
    participant = await svc.register_participant(event_id=event_id, **body.model_dump())
    return {"participant": participant}


@router.put("/participants/{participant_id}/attendance", response_model=ParticipantEnvelope)
async def update_attendance(
    participant_id: int,
    body: AttendanceUpdate,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    participant = await svc.set_attendance(participant_id, body.attended)
    if not participant:
        raise NotFound("Participant not found")
    return {"participant": participant}


@router.delete("/participants/{participant_id}", response_model=SuccessResponse)
async def delete_participant(
    participant_id: int,
    ctx: AuthContext = Depends(require_user),
    svc: EventService = Depends(_svc),
):
    if not await svc.delete_participant(participant_id):
        raise NotFound("Participant not found")
    return {"success": True}
