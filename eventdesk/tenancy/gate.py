"""Resolve, authorize and cache the event a request acts on."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from eventdesk.exceptions import (
    AccessDeniedError,
    NoEventsFoundError,
    TenantContextMissingError,
    TenantNotFoundError,
)
from eventdesk.tenancy.guard import authorize, visible_events
from eventdesk.tenancy.resolver import parse_event_id, resolve_event_id
from eventdesk.tenancy.snapshot import clear_snapshot, refresh_snapshot
from eventdesk.types import ContextSource
from eventdesk.web.tenant_context import TenantContext

if TYPE_CHECKING:
    from eventdesk.storage.repositories.events import EventRepository
    from eventdesk.web.auth.session import CurrentSession, SessionAuth
    from eventdesk.web.tenant_context import Principal

logger = structlog.get_logger(__name__)


class TenantGate:
    """Runs resolver → guard → snapshot refresh for one request.

    The session snapshot is written only when the session itself was the
    source, when an event is selected explicitly, or on fallback. A query
    parameter never overwrites it, so two tabs on different events do not
    fight over the session.
    """

    def __init__(self, events: EventRepository, auth: SessionAuth) -> None:
        self._events = events
        self._auth = auth

    async def enter(
        self,
        principal: Principal,
        session: CurrentSession,
        *,
        resource_event_id: int | None = None,
        query_value: str | None = None,
        source: ContextSource = ContextSource.RESOURCE,
        fallback: bool = False,
    ) -> TenantContext:
        """Resolve the event for a request and authorize ``principal`` on it.

        With ``fallback`` set, a missing or stale session context falls back to
        the principal's newest visible event instead of failing.
        """
        try:
            resolved = resolve_event_id(
                resource_event_id=resource_event_id,
                query_value=query_value,
                session_event_id=session.data.current_event_id,
                resource_source=source,
            )
        except TenantContextMissingError:
            if fallback:
                return await self._fallback(principal, session)
            raise

        record = await self._events.get(resolved.event_id)
        try:
            event = authorize(record, principal, event_id=resolved.event_id)
        except (TenantNotFoundError, AccessDeniedError):
            if resolved.source is ContextSource.SESSION:
                await clear_snapshot(self._auth, session)
                if fallback:
                    return await self._fallback(principal, session)
                # The snapshot named an event this principal can no longer use
                raise TenantNotFoundError from None
            raise

        if resolved.source is ContextSource.SESSION:
            await refresh_snapshot(self._auth, session, event)

        logger.debug(
            "tenant_resolved",
            event_id=resolved.event_id,
            source=resolved.source.value,
            user_id=principal.user_id,
        )
        return TenantContext(
            event_id=resolved.event_id,
            event=event,
            principal=principal,
            source=resolved.source,
        )

    async def select(
        self, principal: Principal, session: CurrentSession, raw_event_id: object
    ) -> TenantContext:
        """Make ``raw_event_id`` the session's current event."""
        event_id = parse_event_id(raw_event_id)
        context = await self.enter(
            principal, session, resource_event_id=event_id, source=ContextSource.EXPLICIT
        )
        await refresh_snapshot(self._auth, session, context.event)
        logger.info("current_event_selected", event_id=event_id, user_id=principal.user_id)
        return context

    async def forget(self, session: CurrentSession) -> None:
        await clear_snapshot(self._auth, session)

    async def _fallback(self, principal: Principal, session: CurrentSession) -> TenantContext:
        events = await visible_events(self._events, principal)
        if not events:
            logger.info("no_events_visible", user_id=principal.user_id)
            raise NoEventsFoundError
        event = events[0]
        if event.id is None:
            raise NoEventsFoundError
        await refresh_snapshot(self._auth, session, event)
        logger.info("tenant_fallback", event_id=event.id, user_id=principal.user_id)
        return TenantContext(
            event_id=event.id,
            event=event,
            principal=principal,
            source=ContextSource.FALLBACK,
        )
