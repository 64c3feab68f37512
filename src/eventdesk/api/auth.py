"""Auth API — login/logout, current user, user management and settings.

Routes:
- POST /login → username/password → session cookie
- POST /logout → clear the session
- GET /user → current user + which auth method resolved it
- GET /users, POST /users → list/create users (authenticated)
- PUT /user/settings, PUT /user/password → the caller's own account
"""

import structlog
from fastapi import APIRouter, Depends, Request

from eventdesk.auth.dependencies import (
    AuthContext,
    get_credential_store,
    get_session_authenticator,
    require_user,
)
from eventdesk.auth.password import hash_password, verify_password
from eventdesk.auth.session import SessionAuthenticator
from eventdesk.errors import BadRequest, NotAuthenticated, NotFound
from eventdesk.schemas.auth import (
    CurrentUserResponse,
    LoginRequest,
    PasswordUpdate,
    UserCreate,
    UserEnvelope,
    UserList,
    UserSettingsUpdate,
)
from eventdesk.schemas.event import SuccessResponse
from eventdesk.services.credential_store import SqlCredentialStore

logger = structlog.get_logger()

router = APIRouter()


# ─── Session ────────────────────────────────────────────


@router.post("/login", response_model=UserEnvelope)
async def login(
    body: LoginRequest,
    request: Request,
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
):
    """Login with username and password → session cookie."""
    user = await authenticator.authenticate(body.username, body.password)
    authenticator.login(request, user)
    return {"user": user}


@router.post("/logout", response_model=SuccessResponse)
async def logout(
    request: Request,
    authenticator: SessionAuthenticator = Depends(get_session_authenticator),
):
    authenticator.logout(request)
    return {"success": True}


@router.get("/user", response_model=CurrentUserResponse)
async def get_current_user(
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    """The authenticated user, and whether a session or an API key resolved it."""
    user = await store.get_user(ctx.user_id)
    if not user:
        raise NotAuthenticated("Not authenticated")
    return {"user": user, "auth_method": ctx.auth_method}


# ─── Users ──────────────────────────────────────────────


@router.get("/users", response_model=UserList)
async def list_users(
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    return {"users": await store.list_users()}


@router.post("/users", response_model=UserEnvelope, status_code=201)
async def create_user(
    body: UserCreate,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    """Create another user account. Only existing users can add users."""
    if await store.get_user_by_username(body.username):
        raise BadRequest("Username already exists")

    user = await store.create_user(
        username=body.username,
        password_hash=hash_password(body.password),
        first_name=body.first_name,
        last_name=body.last_name,
        email=body.email,
    )
    logger.info("user.created", user_id=user.id, created_by=ctx.user_id)
    return {"user": user}


# ─── Own account ────────────────────────────────────────


@router.put("/user/settings", response_model=UserEnvelope)
async def update_settings(
    body: UserSettingsUpdate,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    user = await store.update_user_settings(ctx.user_id, **body.model_dump())
    if not user:
        raise NotFound("User not found")
    return {"user": user}


@router.put("/user/password", response_model=SuccessResponse)
async def update_password(
    body: PasswordUpdate,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    """Change the caller's password.

    The current password is checked against the stored hash exactly like
    login does.
    """
    user = await store.get_user(ctx.user_id)
    if not user:
        raise NotFound("User not found")

    if not verify_password(body.current_password, user.password_hash):
        raise BadRequest("Current password is incorrect")

    await store.update_user_password(user.id, hash_password(body.new_password))
    logger.info("user.password_changed", user_id=user.id)
    return {"success": True}
