"""FastAPI application factory.

App factory pattern — create_app() returns a configured FastAPI
instance. Lifespan manages startup/shutdown (table creation, admin
bootstrap, database engine). Middleware, CORS, error handlers and routers
all registered here.
"""

from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from eventdesk import __version__
from eventdesk.api import api_router
from eventdesk.api.health import router as health_router
from eventdesk.config import settings
from eventdesk.errors import EventdeskError

logger = structlog.get_logger()


async def bootstrap_admin() -> None:
    """Create the configured admin account if it does not exist yet.

    Lets a fresh deployment get its first login without a seed script.
    Does nothing unless both EVENTDESK_BOOTSTRAP_ADMIN_* vars are set.
    """
    username = settings.bootstrap_admin_username
    password = settings.bootstrap_admin_password
    if not username or not password:
        return

    from eventdesk.auth.password import hash_password
    from eventdesk.db.engine import async_session_factory
    from eventdesk.services.credential_store import SqlCredentialStore

    async with async_session_factory() as db:
        store = SqlCredentialStore(db)
        if await store.get_user_by_username(username):
            return
        user = await store.create_user(
            username=username,
            password_hash=hash_password(password),
            email_notifications=True,
            api_change_notifications=True,
        )
        logger.info("eventdesk.admin_bootstrapped", user_id=user.id, username=username)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle.

    Learn: FastAPI lifespan replaces on_event("startup") / on_event("shutdown").
    Anything before `yield` runs at startup, after `yield` runs at shutdown.
    """
    logger.info(
        "eventdesk.starting",
        version=__version__,
        environment=settings.environment,
        port=settings.port,
    )

    from eventdesk.db.engine import init_db

    try:
        await init_db()
        await bootstrap_admin()
    except SQLAlchemyError as e:
        logger.error("eventdesk.database_init_failed", error=str(e))

    yield

    logger.info("eventdesk.shutdown")

    from eventdesk.db.engine import engine
    await engine.dispose()


# ─── Error rendering ─────────────────────────────────────


async def eventdesk_error_handler(request: Request, exc: EventdeskError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


async def database_error_handler(request: Request, exc: SQLAlchemyError) -> JSONResponse:
    """Persistence failures: log the detail, tell the client nothing."""
    logger.error(
        "eventdesk.database_error",
        method=request.method,
        path=request.url.path,
        error=str(exc),
    )
    return JSONResponse(status_code=500, content={"error": "Internal server error"})


def create_app() -> FastAPI:
    """Build and return the FastAPI application."""
    app = FastAPI(
        title="eventdesk",
        description="Events, courses and media management API",
        version=__version__,
        lifespan=lifespan,
    )

    # ── Middleware stack ──────────────────────────────────────
    # Note: Starlette middleware executes in reverse order of registration.
    # Request flow: CORS → Session → RequestId → Security → handler

    from eventdesk.middleware.request_id import RequestIdMiddleware
    from eventdesk.middleware.security import SecurityHeadersMiddleware

    app.add_middleware(SecurityHeadersMiddleware)
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        SessionMiddleware,
        secret_key=settings.session_secret,
        session_cookie=settings.session_cookie,
        max_age=settings.session_max_age_seconds,
        same_site="lax",
        https_only=settings.session_https_only,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(EventdeskError, eventdesk_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(SQLAlchemyError, database_error_handler)

    app.include_router(health_router, tags=["health"])
    app.include_router(api_router)

    return app


# Default app instance (used by uvicorn: eventdesk.main:app)
app = create_app()
