"""Event CRUD and the collections scoped to one event."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response

from eventdesk.models.api import (
    AccommodationCreate,
    AccommodationResponse,
    CeremonyCreate,
    CeremonyResponse,
    CoupleMessageCreate,
    CoupleMessageResponse,
    EventCreate,
    EventResponse,
    EventUpdate,
    GuestCreate,
    GuestResponse,
    RsvpStatsResponse,
    TemplateCreate,
    TemplateResponse,
    template_columns,
)
from eventdesk.models.database import (
    Accommodation,
    Ceremony,
    CoupleMessage,
    Guest,
    WeddingEvent,
    WhatsappTemplate,
)
from eventdesk.tenancy.guard import visible_events
from eventdesk.tenancy.scoping import ensure_in_tenant
from eventdesk.types import TemplateCategory
from eventdesk.utils.rsvp import rsvp_statistics
from eventdesk.web.auth.rbac import RequestScope, get_scope

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/events", tags=["events"])


@router.get("", response_model=list[EventResponse])
async def list_events(scope: RequestScope = Depends(get_scope)) -> list[WeddingEvent]:
    return await visible_events(scope.repos.events, scope.principal)


@router.post("", status_code=201, response_model=EventResponse)
async def create_event(
    body: EventCreate,
    scope: RequestScope = Depends(get_scope),
) -> WeddingEvent:
    event = await scope.repos.events.add(
        WeddingEvent(created_by=scope.principal.user_id, **body.model_dump())
    )
    logger.info("event_created", event_id=event.id, user_id=scope.principal.user_id)
    return event


@router.get("/{event_id}", response_model=EventResponse)
async def get_event(event_id: str, scope: RequestScope = Depends(get_scope)) -> WeddingEvent:
    context = await scope.for_event(event_id)
    return context.event


@router.put("/{event_id}", response_model=EventResponse)
async def update_event(
    event_id: str,
    body: EventUpdate,
    scope: RequestScope = Depends(get_scope),
) -> WeddingEvent | None:
    context = await scope.for_event(event_id)
    event = await scope.repos.events.update(context.event_id, body.model_dump(exclude_unset=True))
    if event and scope.session.data.current_event_id == context.event_id:
        await scope.gate.select(scope.principal, scope.session, context.event_id)
    return event


@router.delete("/{event_id}", status_code=204)
async def delete_event(event_id: str, scope: RequestScope = Depends(get_scope)) -> Response:
    context = await scope.for_event(event_id)
    await scope.repos.events.delete(context.event_id)
    if scope.session.data.current_event_id == context.event_id:
        await scope.gate.forget(scope.session)
    return Response(status_code=204)


# ---------------------------------------------------------------------------
# Event-scoped collections
# ---------------------------------------------------------------------------


@router.get("/{event_id}/guests", response_model=list[GuestResponse])
async def list_event_guests(event_id: str, scope: RequestScope = Depends(get_scope)) -> list[Guest]:
    context = await scope.for_event(event_id)
    return await scope.repos.guests.list_by_event(context.event_id)


@router.post("/{event_id}/guests", status_code=201, response_model=GuestResponse)
async def create_guest(
    event_id: str,
    body: GuestCreate,
    scope: RequestScope = Depends(get_scope),
) -> Guest:
    context = await scope.for_event(event_id)
    return await scope.repos.guests.add(Guest(event_id=context.event_id, **body.model_dump()))


@router.get("/{event_id}/statistics", response_model=RsvpStatsResponse)
async def event_statistics(
    event_id: str, scope: RequestScope = Depends(get_scope)
) -> dict[str, int | float]:
    context = await scope.for_event(event_id)
    guests = await scope.repos.guests.list_by_event(context.event_id)
    return rsvp_statistics(guests)


@router.get("/{event_id}/ceremonies", response_model=list[CeremonyResponse])
async def list_ceremonies(
    event_id: str, scope: RequestScope = Depends(get_scope)
) -> list[Ceremony]:
    context = await scope.for_event(event_id)
    return await scope.repos.ceremonies.list_by_event(context.event_id)


@router.post("/{event_id}/ceremonies", status_code=201, response_model=CeremonyResponse)
async def create_ceremony(
    event_id: str,
    body: CeremonyCreate,
    scope: RequestScope = Depends(get_scope),
) -> Ceremony:
    context = await scope.for_event(event_id)
    return await scope.repos.ceremonies.add(
        Ceremony(event_id=context.event_id, **body.model_dump())
    )


@router.get("/{event_id}/accommodations", response_model=list[AccommodationResponse])
async def list_accommodations(
    event_id: str, scope: RequestScope = Depends(get_scope)
) -> list[Accommodation]:
    context = await scope.for_event(event_id)
    return await scope.repos.accommodations.list_by_event(context.event_id)


@router.post("/{event_id}/accommodations", status_code=201, response_model=AccommodationResponse)
async def create_accommodation(
    event_id: str,
    body: AccommodationCreate,
    scope: RequestScope = Depends(get_scope),
) -> Accommodation:
    context = await scope.for_event(event_id)
    return await scope.repos.accommodations.add(
        Accommodation(event_id=context.event_id, **body.model_dump())
    )


@router.get("/{event_id}/messages", response_model=list[CoupleMessageResponse])
async def list_messages(
    event_id: str, scope: RequestScope = Depends(get_scope)
) -> list[CoupleMessage]:
    context = await scope.for_event(event_id)
    return await scope.repos.messages.list_by_event(context.event_id)


@router.post("/{event_id}/messages", status_code=201, response_model=CoupleMessageResponse)
async def create_message(
    event_id: str,
    body: CoupleMessageCreate,
    scope: RequestScope = Depends(get_scope),
) -> CoupleMessage:
    context = await scope.for_event(event_id)
    guest = await scope.repos.guests.get(body.guest_id)
    await ensure_in_tenant(guest, context.event_id, label="Guest")
    return await scope.repos.messages.add(
        CoupleMessage(event_id=context.event_id, guest_id=body.guest_id, message=body.message)
    )


@router.get("/{event_id}/whatsapp-templates", response_model=list[TemplateResponse])
async def list_templates(
    event_id: str,
    category: TemplateCategory | None = None,
    scope: RequestScope = Depends(get_scope),
) -> list[TemplateResponse]:
    context = await scope.for_event(event_id)
    templates = await scope.repos.templates.list_by_event(context.event_id, category)
    return [TemplateResponse.from_record(t) for t in templates]


@router.post("/{event_id}/whatsapp-templates", status_code=201, response_model=TemplateResponse)
async def create_template(
    event_id: str,
    body: TemplateCreate,
    scope: RequestScope = Depends(get_scope),
) -> TemplateResponse:
    context = await scope.for_event(event_id)
    template = await scope.repos.templates.add(
        WhatsappTemplate(event_id=context.event_id, **template_columns(body.model_dump()))
    )
    return TemplateResponse.from_record(template)
