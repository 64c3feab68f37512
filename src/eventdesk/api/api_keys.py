"""API key management — create, list, toggle, delete the caller's keys.

Routes:
- POST /keys → create a key (the full key is returned ONCE)
- GET /keys → list the caller's keys (no key values)
- PUT /keys/{id}/toggle → activate/deactivate (owner only)
- DELETE /keys/{id} → delete (owner only)

Owner checks compare the resolved user id with the key's user_id, so a
user can never see or touch another user's keys.
"""

from datetime import datetime
from typing import Callable

import structlog
from fastapi import APIRouter, Depends

from eventdesk.auth.dependencies import (
    AuthContext,
    get_clock,
    get_credential_store,
    require_user,
)
from eventdesk.db.models import ApiKey
from eventdesk.errors import NotAuthorized, NotFound
from eventdesk.schemas.api_key import (
    ApiKeyCreate,
    ApiKeyCreatedResponse,
    ApiKeyList,
    ApiKeyResponse,
    ApiKeyToggle,
    MessageResponse,
)
from eventdesk.services.credential_store import SqlCredentialStore

logger = structlog.get_logger()

router = APIRouter(prefix="/keys")


async def _owned_key(
    key_id: int, ctx: AuthContext, store: SqlCredentialStore, action: str
) -> ApiKey:
    api_key = await store.get_api_key(key_id)
    if not api_key:
        raise NotFound("API key not found")
    if api_key.user_id != ctx.user_id:
        logger.warning(
            "api_key.ownership_denied",
            key_id=key_id,
            owner_id=api_key.user_id,
            user_id=ctx.user_id,
        )
        raise NotAuthorized(f"Not authorized to {action} this API key")
    return api_key


@router.get("", response_model=ApiKeyList)
async def list_api_keys(
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    """List the caller's API keys (without the actual key values)."""
    return {"api_keys": await store.list_user_api_keys(ctx.user_id)}


@router.post("", response_model=ApiKeyCreatedResponse, status_code=201)
async def create_api_key(
    body: ApiKeyCreate,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
    clock: Callable[[], datetime] = Depends(get_clock),
):
    """Create a new API key. The full key is only returned ONCE."""
    api_key, raw_key = await store.create_api_key(
        user_id=ctx.user_id,
        name=body.name,
        expiry_days=body.expiry_days,
        now=clock(),
    )
    logger.info(
        "api_key.created",
        key_id=api_key.id,
        prefix=api_key.prefix,
        user_id=ctx.user_id,
        expires_at=api_key.expires_at,
    )
    return {
        "api_key": {
            "id": api_key.id,
            "name": api_key.name,
            "key": raw_key,  # Only time the full key is returned!
            "created_at": api_key.created_at,
            "is_active": api_key.is_active,
            "expires_at": api_key.expires_at,
        },
        "message": "API key created successfully. Save this key as it will not be shown again.",
    }


@router.put("/{key_id}/toggle", response_model=ApiKeyResponse)
async def toggle_api_key(
    key_id: int,
    body: ApiKeyToggle,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    """Set a key's active flag. Setting it to its current value is a no-op."""
    await _owned_key(key_id, ctx, store, "manage")
    api_key = await store.toggle_api_key_status(key_id, body.is_active)
    if not api_key:
        raise NotFound("API key not found")

    logger.info("api_key.toggled", key_id=key_id, is_active=body.is_active)
    state = "activated" if body.is_active else "deactivated"
    return {"api_key": api_key, "message": f"API key {state} successfully"}


@router.delete("/{key_id}", response_model=MessageResponse)
async def delete_api_key(
    key_id: int,
    ctx: AuthContext = Depends(require_user),
    store: SqlCredentialStore = Depends(get_credential_store),
):
    await _owned_key(key_id, ctx, store, "delete")
    if not await store.delete_api_key(key_id):
        raise NotFound("API key not found")

    logger.info("api_key.deleted", key_id=key_id, user_id=ctx.user_id)
    return {"message": "API key deleted successfully"}
