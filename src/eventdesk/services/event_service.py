"""Event service — events, public sharing, and participant registrations.

API routes call this, this calls the database. Lookups return None when
a row is missing and the route turns that into a 404; rule violations
(duplicate registration, end before start) raise from eventdesk.errors.
"""

import secrets
from datetime import datetime
from typing import Optional

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.models import Event, EventParticipant, as_utc
from eventdesk.errors import BadRequest

logger = structlog.get_logger()


def generate_share_token() -> str:
    return secrets.token_hex(32)


def share_url(token: str, kind: str = "events") -> str:
    """Client-side route that renders a shared resource."""
    return f"/{kind}/shared/{token}"


class EventService:
    """Business logic for events and their participants."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Events ─────────────────────────────────────────

    async def list_events(self) -> list[Event]:
        result = await self.db.execute(select(Event).order_by(Event.start_date))
        return list(result.scalars().all())

    async def get_event(self, event_id: int) -> Optional[Event]:
        return await self.db.get(Event, event_id)

    async def get_event_by_token(self, token: str) -> Optional[Event]:
        result = await self.db.execute(select(Event).where(Event.share_token == token))
        return result.scalars().first()

    async def create_event(
        self,
        title: str,
        start_date: datetime,
        end_date: datetime,
        creator_id: int,
        description: Optional[str] = None,
        location: Optional[str] = None,
    ) -> Event:
        event = Event(
            title=title,
            description=description,
            location=location,
            start_date=start_date,
            end_date=end_date,
            creator_id=creator_id,
        )
        self.db.add(event)
        await self.db.commit()
        await self.db.refresh(event)
        logger.info("event.created", event_id=event.id, creator_id=creator_id)
        return event

    async def update_event(self, event_id: int, **fields) -> Optional[Event]:
        event = await self.get_event(event_id)
        if not event:
            return None
        start = fields.get("start_date") or event.start_date
        end = fields.get("end_date") or event.end_date
        if as_utc(end) < as_utc(start):
            raise BadRequest("End date must be after start date")
        for key, value in fields.items():
            setattr(event, key, value)
        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def set_sharing(self, event_id: int, is_shared: bool) -> Optional[Event]:
        """Turn public sharing on or off.

        The token is generated the first time sharing is enabled and kept
        afterwards, so re-enabling restores the same link.
        """
        event = await self.get_event(event_id)
        if not event:
            return None
        if is_shared and not event.share_token:
            event.share_token = generate_share_token()
            event.share_url = share_url(event.share_token, "events")
        event.is_shared = is_shared
        await self.db.commit()
        await self.db.refresh(event)
        return event

    async def delete_event(self, event_id: int) -> bool:
        event = await self.get_event(event_id)
        if not event:
            return False
        participants = await self.list_participants(event_id)
        for participant in participants:
            await self.db.delete(participant)
        await self.db.delete(event)
        await self.db.commit()
        logger.info("event.deleted", event_id=event_id)
        return True

    # ─── Participants ───────────────────────────────────

    async def list_participants(self, event_id: int) -> list[EventParticipant]:
        result = await self.db.execute(
            select(EventParticipant)
            .where(EventParticipant.event_id == event_id)
            .order_by(EventParticipant.registered_at, EventParticipant.id)
        )
        return list(result.scalars().all())

    async def register_participant(
        self,
        event_id: int,
        name: str,
        email: str,
        phone: Optional[str] = None,
        notes: Optional[str] = None,
    ) -> EventParticipant:
        existing = await self.db.execute(
            select(EventParticipant).where(
                EventParticipant.event_id == event_id,
                EventParticipant.email == email,
            )
        )
        if existing.scalars().first():
            raise BadRequest("This email is already registered for this event")

        participant = EventParticipant(
            event_id=event_id,
            name=name,
            email=email,
            phone=phone,
            notes=notes,
        )
        self.db.add(participant)
        await self.db.commit()
        await self.db.refresh(participant)
        logger.info("event.participant_registered", event_id=event_id, participant_id=participant.id)
        return participant

    async def set_attendance(self, participant_id: int, attended: bool) -> Optional[EventParticipant]:
        participant = await self.db.get(EventParticipant, participant_id)
        if not participant:
            return None
        participant.attended = attended
        await self.db.commit()
        await self.db.refresh(participant)
        return participant

    async def delete_participant(self, participant_id: int) -> bool:
        participant = await self.db.get(EventParticipant, participant_id)
        if not participant:
            return False
        await self.db.delete(participant)
        await self.db.commit()
        return True
