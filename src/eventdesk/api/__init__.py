"""API route aggregation.

All routers registered here get mounted in main.py under /api.

Learn: Auth resolution is applied at the router level using FastAPI's
dependencies parameter, so every /api request has its session or API key
checked (and an API key held to its allow-list) before the handler runs.
Handlers that need an identity additionally depend on require_user; the
resolution itself is cached per request and runs once.
"""

from fastapi import APIRouter, Depends

from eventdesk.api.api_keys import router as api_keys_router
from eventdesk.api.auth import router as auth_router
from eventdesk.api.courses import router as courses_router
from eventdesk.api.events import router as events_router
from eventdesk.api.media import router as media_router
from eventdesk.api.training_sessions import router as training_sessions_router
from eventdesk.auth.dependencies import get_auth_context

api_router = APIRouter(prefix="/api", dependencies=[Depends(get_auth_context)])

api_router.include_router(auth_router, tags=["auth", "users"])
api_router.include_router(api_keys_router, tags=["api-keys"])
api_router.include_router(events_router, tags=["events", "participants"])
api_router.include_router(courses_router, tags=["courses"])
api_router.include_router(media_router, tags=["media"])
api_router.include_router(training_sessions_router, tags=["training-sessions"])
