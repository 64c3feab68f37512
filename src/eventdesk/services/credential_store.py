"""Credential store — persistence for users and API keys.

The auth core depends on the CredentialStore protocol, not on SQLAlchemy:
authenticators and routes receive a store per request (see
auth/dependencies.py), so tests can hand them anything with the same
methods. SqlCredentialStore is the implementation backed by the request's
AsyncSession. Ids come from the database; nothing here keeps counters.
"""

import hashlib
import secrets
from datetime import datetime, timedelta
from typing import Optional, Protocol

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.config import settings
from eventdesk.db.models import ApiKey, User, utcnow

# Settings a user may change about themselves.
USER_SETTINGS_FIELDS = (
    "first_name",
    "last_name",
    "email",
    "email_notifications",
    "browser_notifications",
    "api_change_notifications",
)


def generate_api_key() -> str:
    """Create a new raw API key: configured prefix + random bytes."""
    return f"{settings.api_key_prefix}{secrets.token_urlsafe(32)}"


def hash_api_key(raw_key: str) -> str:
    return hashlib.sha256(raw_key.encode("utf-8")).hexdigest()


class CredentialStore(Protocol):
    """Capabilities the auth core needs from persistence."""

    async def get_user(self, user_id: int) -> Optional[User]: ...

    async def get_user_by_username(self, username: str) -> Optional[User]: ...

    async def update_user_password(self, user_id: int, password_hash: str) -> Optional[User]: ...

    async def get_api_key(self, key_id: int) -> Optional[ApiKey]: ...

    async def get_api_key_by_key(self, raw_key: str) -> Optional[ApiKey]: ...

    async def update_api_key_last_used(self, key_id: int, when: datetime) -> None: ...

    async def toggle_api_key_status(self, key_id: int, is_active: bool) -> Optional[ApiKey]: ...

    async def delete_api_key(self, key_id: int) -> bool: ...


class SqlCredentialStore:
    """CredentialStore backed by an AsyncSession."""

    def __init__(self, db: AsyncSession):
        self.db = db

    # ─── Users ──────────────────────────────────────────

    async def get_user(self, user_id: int) -> Optional[User]:
        return await self.db.get(User, user_id)

    async def get_user_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(select(User).where(User.username == username))
        return result.scalars().first()

    async def list_users(self) -> list[User]:
        result = await self.db.execute(select(User).order_by(User.id))
        return list(result.scalars().all())

    async def create_user(
        self,
        username: str,
        password_hash: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        email: Optional[str] = None,
        email_notifications: bool = False,
        browser_notifications: bool = False,
        api_change_notifications: bool = False,
    ) -> User:
        user = User(
            username=username,
            password_hash=password_hash,
            first_name=first_name,
            last_name=last_name,
            email=email,
            email_notifications=email_notifications,
            browser_notifications=browser_notifications,
            api_change_notifications=api_change_notifications,
        )
        self.db.add(user)
        await self.db.commit()
        await self.db.refresh(user)
        return user

    async def update_user_settings(self, user_id: int, **fields) -> Optional[User]:
        user = await self.get_user(user_id)
        if not user:
            return None
        for key, value in fields.items():
            if key in USER_SETTINGS_FIELDS:
                setattr(user, key, value)
        await self.db.commit()
        return user

    async def update_user_password(self, user_id: int, password_hash: str) -> Optional[User]:
        user = await self.get_user(user_id)
        if not user:
            return None
        user.password_hash = password_hash
        await self.db.commit()
        return user

    # ─── API keys ───────────────────────────────────────

    async def get_api_key(self, key_id: int) -> Optional[ApiKey]:
        return await self.db.get(ApiKey, key_id)

    async def get_api_key_by_key(self, raw_key: str) -> Optional[ApiKey]:
        """Find a key by exact token match, whatever its state.

        Activity and expiry are judged by the authenticator so it can
        report which one failed.
        """
        result = await self.db.execute(
            select(ApiKey).where(ApiKey.key_hash == hash_api_key(raw_key))
        )
        return result.scalars().first()

    async def list_user_api_keys(self, user_id: int) -> list[ApiKey]:
        result = await self.db.execute(
            select(ApiKey)
            .where(ApiKey.user_id == user_id)
            .order_by(ApiKey.created_at.desc(), ApiKey.id.desc())
        )
        return list(result.scalars().all())

    async def create_api_key(
        self,
        user_id: int,
        name: str,
        expiry_days: Optional[int] = None,
        now: Optional[datetime] = None,
    ) -> tuple[ApiKey, str]:
        """Create a key and return it with the raw token.

        The raw token is not stored; this return value is the only place
        it exists. No expiry_days means the key never expires.
        """
        now = now or utcnow()
        raw_key = generate_api_key()
        expires_at = None
        if expiry_days:
            expires_at = now + timedelta(days=expiry_days)

        api_key = ApiKey(
            user_id=user_id,
            name=name,
            key_hash=hash_api_key(raw_key),
            prefix=raw_key[:10],
            is_active=True,
            created_at=now,
            expires_at=expires_at,
        )
        self.db.add(api_key)
        await self.db.commit()
        await self.db.refresh(api_key)
        return api_key, raw_key

    async def update_api_key_last_used(self, key_id: int, when: datetime) -> None:
        # Plain overwrite: concurrent uses of one key resolve last-writer-wins.
        try:
            await self.db.execute(
                update(ApiKey).where(ApiKey.id == key_id).values(last_used_at=when)
            )
            await self.db.commit()
        except SQLAlchemyError:
            await self.db.rollback()
            raise

    async def toggle_api_key_status(self, key_id: int, is_active: bool) -> Optional[ApiKey]:
        api_key = await self.get_api_key(key_id)
        if not api_key:
            return None
        api_key.is_active = is_active
        await self.db.commit()
        await self.db.refresh(api_key)
        return api_key

    async def delete_api_key(self, key_id: int) -> bool:
        result = await self.db.execute(delete(ApiKey).where(ApiKey.id == key_id))
        await self.db.commit()
        return result.rowcount > 0
