"""FastAPI application factory."""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from eventdesk.config.logging import setup_logging
from eventdesk.config.settings import Settings, get_settings
from eventdesk.exceptions import AccessDeniedError, EventDeskError, TenantNotFoundError
from eventdesk.storage.database import get_engine, init_db
from eventdesk.storage.repositories.sessions import (
    DatabaseSessionStore,
    InMemorySessionStore,
    SessionStore,
)
from eventdesk.web.auth.session import SessionAuth, require_auth
from eventdesk.web.dependencies import build_repositories
from eventdesk.web.health import VERSION, check_health
from eventdesk.web.middleware import RateLimitMiddleware, RequestIDMiddleware
from eventdesk.web.routes.accommodations import router as accommodations_router
from eventdesk.web.routes.auth import router as auth_router
from eventdesk.web.routes.ceremonies import router as ceremonies_router
from eventdesk.web.routes.current_event import router as current_event_router
from eventdesk.web.routes.events import router as events_router
from eventdesk.web.routes.guests import router as guests_router
from eventdesk.web.routes.meals import router as meals_router
from eventdesk.web.routes.rsvp import router as rsvp_router
from eventdesk.web.routes.templates import router as templates_router

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


def create_app(settings: Settings | None = None, engine: AsyncEngine | None = None) -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = settings or get_settings()
    engine = engine or get_engine()
    setup_logging(log_level=settings.log_level, json_output=not settings.debug)

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        if settings.auto_create_tables:
            await init_db(engine)
            logger.info("tables_created")
        yield
        await engine.dispose()

    app = FastAPI(
        title="EventDesk",
        description="Multi-tenant wedding event management API",
        version=VERSION,
        lifespan=lifespan,
    )

    store: SessionStore = (
        DatabaseSessionStore(engine, ttl=settings.session_max_age)
        if settings.use_database
        else InMemorySessionStore(ttl=settings.session_max_age)
    )
    app.state.settings = settings
    app.state.engine = engine
    app.state.repos = build_repositories(engine)
    app.state.session_auth = SessionAuth(
        settings.secret_key, store, max_age=settings.session_max_age
    )

    @app.exception_handler(EventDeskError)
    async def eventdesk_error_handler(request: Request, exc: EventDeskError) -> JSONResponse:
        # Denied events look exactly like missing ones unless configured otherwise
        if isinstance(exc, AccessDeniedError) and settings.conceal_denied_events:
            exc = TenantNotFoundError()
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, error=type(exc).__name__)
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})

    # Middleware (order matters: last added runs first)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE"],
        allow_headers=["Content-Type", "X-Request-ID"],
    )
    app.add_middleware(RateLimitMiddleware, max_requests=settings.rate_limit_per_minute)
    app.add_middleware(RequestIDMiddleware)

    # Public routes (no auth required)
    app.include_router(auth_router)
    app.include_router(rsvp_router)

    @app.get("/api/health")
    async def health_check() -> dict[str, object]:
        return await check_health(engine)

    # Protected routes (require session auth)
    protected = [
        current_event_router,
        events_router,
        guests_router,
        ceremonies_router,
        meals_router,
        accommodations_router,
        templates_router,
    ]
    for router in protected:
        app.include_router(router, dependencies=[Depends(require_auth)])

    logger.info("app_created", session_store=type(store).__name__)
    return app
