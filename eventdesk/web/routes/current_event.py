"""Current event selection kept in the session."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response

from eventdesk.models.api import CurrentEventRequest, EventResponse
from eventdesk.models.database import WeddingEvent
from eventdesk.web.auth.rbac import RequestScope, get_scope

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/current-event", tags=["current-event"])


@router.get("", response_model=EventResponse)
async def get_current_event(scope: RequestScope = Depends(get_scope)) -> WeddingEvent:
    """Return the event in context, falling back to the newest visible one."""
    context = await scope.from_context(fallback=True)
    return context.event


@router.post("", response_model=EventResponse)
async def set_current_event(
    body: CurrentEventRequest,
    scope: RequestScope = Depends(get_scope),
) -> WeddingEvent:
    context = await scope.gate.select(scope.principal, scope.session, body.event_id)
    return context.event


@router.delete("", status_code=204)
async def clear_current_event(scope: RequestScope = Depends(get_scope)) -> Response:
    await scope.gate.forget(scope.session)
    logger.info("current_event_cleared", user_id=scope.principal.user_id)
    return Response(status_code=204)
