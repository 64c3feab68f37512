"""FastAPI auth dependencies — the auth resolver.

These are used as Depends() in route handlers to resolve who is making
the request. Two mechanisms, checked in this order:

1. Session cookie (browsers, after POST /api/login)
2. API key in the X-API-Key header (integrations)

When a session identifies a user, the API key is never looked at. Both
paths produce the same AuthContext, so handlers only ever ask "is this
request authenticated?" and "who is it?". FastAPI caches dependencies
per request, so the resolution runs once even when several dependencies
ask for it.
"""

from datetime import datetime
from typing import Callable, Optional

from fastapi import Depends, Header, Request
from sqlalchemy.ext.asyncio import AsyncSession

from eventdesk.auth.api_key import ApiKeyAuthenticator
from eventdesk.auth.session import SessionAuthenticator, session_user_id
from eventdesk.db.engine import get_db
from eventdesk.db.models import utcnow
from eventdesk.errors import NotAuthenticated
from eventdesk.services.credential_store import SqlCredentialStore

SESSION = "session"
API_KEY = "api_key"


class AuthContext:
    """The resolved identity for one request.

    user_id is None for anonymous requests. auth_method says which
    mechanism produced it; only GET /api/user reports it, everything
    else treats both the same.
    """

    def __init__(
        self,
        user_id: Optional[int] = None,
        auth_method: Optional[str] = None,
        api_key_id: Optional[int] = None,
    ):
        self.user_id = user_id
        self.auth_method = auth_method
        self.api_key_id = api_key_id

    @property
    def is_authenticated(self) -> bool:
        return self.user_id is not None


def get_clock() -> Callable[[], datetime]:
    """Time source for expiry checks and last-used stamps."""
    return utcnow


def get_credential_store(db: AsyncSession = Depends(get_db)) -> SqlCredentialStore:
    return SqlCredentialStore(db)


def get_session_authenticator(
    store: SqlCredentialStore = Depends(get_credential_store),
) -> SessionAuthenticator:
    return SessionAuthenticator(store)


async def get_auth_context(
    request: Request,
    x_api_key: Optional[str] = Header(None),
    store: SqlCredentialStore = Depends(get_credential_store),
    clock: Callable[[], datetime] = Depends(get_clock),
) -> AuthContext:
    """Resolve the request's identity (anonymous if neither method applies).

    An API key that is present but invalid, expired or used outside its
    allow-list terminates the request here with 401/403.
    """
    user_id = session_user_id(request)
    if user_id is not None:
        if await store.get_user(user_id):
            return AuthContext(user_id=user_id, auth_method=SESSION)
        # The user behind this session no longer exists.
        request.session.clear()

    if x_api_key:
        authenticator = ApiKeyAuthenticator(store, clock)
        grant = await authenticator.authenticate(
            x_api_key, request.method, request.url.path
        )
        return AuthContext(
            user_id=grant.user_id, auth_method=API_KEY, api_key_id=grant.key_id
        )

    return AuthContext()


def require_user(ctx: AuthContext = Depends(get_auth_context)) -> AuthContext:
    """Resolved identity (required — 401 if the request is anonymous)."""
    if not ctx.is_authenticated:
        raise NotAuthenticated()
    return ctx
