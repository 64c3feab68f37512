"""Media service — metadata for uploaded media assets."""

from typing import Optional

import structlog
from sqlalchemy import delete, select
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.db.models import CourseMedia, Media

logger = structlog.get_logger()


class MediaService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_media(self) -> list[Media]:
        result = await self.db.execute(
            select(Media).order_by(Media.created_at.desc(), Media.id.desc())
        )
        return list(result.scalars().all())

    async def get_media(self, media_id: int) -> Optional[Media]:
        return await self.db.get(Media, media_id)

    async def create_media(self, uploaded_by: int, **fields) -> Media:
        media = Media(uploaded_by=uploaded_by, **fields)
        self.db.add(media)
        await self.db.commit()
        await self.db.refresh(media)
        logger.info("media.created", media_id=media.id, media_type=media.media_type)
        return media

    async def update_media(self, media_id: int, **fields) -> Optional[Media]:
        media = await self.get_media(media_id)
        if not media:
            return None
        for key, value in fields.items():
            setattr(media, key, value)
        await self.db.commit()
        await self.db.refresh(media)
        return media

    async def delete_media(self, media_id: int) -> bool:
        """Delete the metadata row and its course links.

        Removing the stored file is the upload pipeline's job.
        """
        media = await self.get_media(media_id)
        if not media:
            return False
        await self.db.execute(delete(CourseMedia).where(CourseMedia.media_id == media_id))
        await self.db.delete(media)
        await self.db.commit()
        logger.info("media.deleted", media_id=media_id)
        return True
