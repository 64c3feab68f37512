"""Session (username/password) authentication.

The session itself is a signed cookie managed by Starlette's
SessionMiddleware; all we keep in it is the user id. Logging in clears
whatever was in the session first, so a pre-login session cannot carry
over into the authenticated one.
"""

from typing import Optional

import structlog
from starlette.requests import Request

from eventdesk.auth.password import (
    hash_password,
    needs_upgrade,
    verify_dummy,
    verify_password,
)
from eventdesk.db.models import User
from eventdesk.errors import InvalidCredential
from eventdesk.services.credential_store import CredentialStore

logger = structlog.get_logger()

SESSION_USER_KEY = "user_id"

# Same message for unknown user and wrong password.
LOGIN_FAILED_MESSAGE = "Incorrect username or password"


class SessionAuthenticator:
    """Checks passwords and binds/unbinds the session identity."""

    def __init__(self, store: CredentialStore):
        self.store = store

    async def authenticate(self, username: str, password: str) -> User:
        """Return the user for valid credentials, else raise InvalidCredential."""
        user = await self.store.get_user_by_username(username)
        if not user:
            verify_dummy(password)
            logger.info("auth.login_failed", reason="unknown_user")
            raise InvalidCredential(LOGIN_FAILED_MESSAGE)

        if not verify_password(password, user.password_hash):
            logger.info("auth.login_failed", reason="bad_password", user_id=user.id)
            raise InvalidCredential(LOGIN_FAILED_MESSAGE)

        # Auto-upgrade legacy scrypt hashes to bcrypt on successful login
        if needs_upgrade(user.password_hash):
            await self.store.update_user_password(user.id, hash_password(password))
            logger.info("auth.password_hash_upgraded", user_id=user.id)

        return user

    def login(self, request: Request, user: User) -> None:
        request.session.clear()
        request.session[SESSION_USER_KEY] = user.id
        logger.info("auth.login", user_id=user.id)

    def logout(self, request: Request) -> None:
        user_id = session_user_id(request)
        request.session.clear()
        if user_id is not None:
            logger.info("auth.logout", user_id=user_id)


def session_user_id(request: Request) -> Optional[int]:
    """The user id bound to this request's session, if any."""
    value = request.session.get(SESSION_USER_KEY)
    if isinstance(value, int):
        return value
    return None
