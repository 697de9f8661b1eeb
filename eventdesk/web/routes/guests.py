"""Guest routes and the records hanging off a guest."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import (
    AllocationResponse,
    AttendanceRequest,
    AttendanceResponse,
    ContactResponse,
    ContactStatsResponse,
    GuestResponse,
    GuestUpdate,
    MealSelectionCreate,
    MealSelectionResponse,
    TravelRequest,
    TravelResponse,
)
from eventdesk.models.database import (
    Guest,
    GuestCeremony,
    GuestMealSelection,
    RoomAllocation,
    TravelInfo,
)
from eventdesk.tenancy.scoping import Participant, ensure_meal_option_at, ensure_same_tenant
from eventdesk.types import ContactChannel
from eventdesk.utils.contact import contact_statistics, effective_contact, filter_by_channel
from eventdesk.web.auth.rbac import RequestScope, get_scope
from eventdesk.web.tenant_context import TenantContext

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/api/guests", tags=["guests"])


async def _guest_in_scope(guest_id: int, scope: RequestScope) -> tuple[Guest, TenantContext]:
    guest = await scope.repos.guests.get(guest_id)
    if guest is None:
        raise ResourceNotInTenantError("Guest")
    context = await scope.for_resource(guest, label="Guest")
    return guest, context


@router.get("", response_model=list[GuestResponse])
async def list_guests(
    channel: ContactChannel | None = None,
    scope: RequestScope = Depends(get_scope),
) -> list[Guest]:
    """Guests of the event in context, optionally only those reachable on ``channel``."""
    context = await scope.from_context()
    guests = await scope.repos.guests.list_by_event(context.event_id)
    if channel is not None:
        return filter_by_channel(guests, channel)
    return guests


@router.get("/contact-stats", response_model=ContactStatsResponse)
async def guest_contact_stats(scope: RequestScope = Depends(get_scope)) -> dict[str, int]:
    context = await scope.from_context()
    guests = await scope.repos.guests.list_by_event(context.event_id)
    return contact_statistics(guests)


@router.get("/{guest_id}", response_model=GuestResponse)
async def get_guest(guest_id: int, scope: RequestScope = Depends(get_scope)) -> Guest:
    guest, _ = await _guest_in_scope(guest_id, scope)
    return guest


@router.put("/{guest_id}", response_model=GuestResponse)
async def update_guest(
    guest_id: int,
    body: GuestUpdate,
    scope: RequestScope = Depends(get_scope),
) -> Guest | None:
    await _guest_in_scope(guest_id, scope)
    return await scope.repos.guests.update(guest_id, body.model_dump(exclude_unset=True))


@router.delete("/{guest_id}", status_code=204)
async def delete_guest(guest_id: int, scope: RequestScope = Depends(get_scope)) -> Response:
    await _guest_in_scope(guest_id, scope)
    await scope.repos.guests.delete(guest_id)
    return Response(status_code=204)


@router.get("/{guest_id}/contact", response_model=ContactResponse)
async def get_guest_contact(
    guest_id: int, scope: RequestScope = Depends(get_scope)
) -> ContactResponse:
    guest, _ = await _guest_in_scope(guest_id, scope)
    return ContactResponse.from_contact(effective_contact(guest))


# ---------------------------------------------------------------------------
# Attendance
# ---------------------------------------------------------------------------


@router.get("/{guest_id}/attendance", response_model=list[AttendanceResponse])
async def list_attendance(
    guest_id: int, scope: RequestScope = Depends(get_scope)
) -> list[GuestCeremony]:
    await _guest_in_scope(guest_id, scope)
    return await scope.repos.attendance.list_by_guest(guest_id)


@router.post("/{guest_id}/attendance", response_model=AttendanceResponse)
async def record_attendance(
    guest_id: int,
    body: AttendanceRequest,
    scope: RequestScope = Depends(get_scope),
) -> GuestCeremony:
    guest, context = await _guest_in_scope(guest_id, scope)
    ceremony = await scope.repos.ceremonies.get(body.ceremony_id)
    await ensure_same_tenant(
        context.event_id,
        Participant("Guest", guest),
        Participant("Ceremony", ceremony),
    )
    return await scope.repos.attendance.upsert(guest_id, body.ceremony_id, body.attending)


# ---------------------------------------------------------------------------
# Travel
# ---------------------------------------------------------------------------


@router.get("/{guest_id}/travel", response_model=TravelResponse | None)
async def get_travel(guest_id: int, scope: RequestScope = Depends(get_scope)) -> TravelInfo | None:
    await _guest_in_scope(guest_id, scope)
    return await scope.repos.travel.get_by_guest(guest_id)


@router.put("/{guest_id}/travel", response_model=TravelResponse)
async def upsert_travel(
    guest_id: int,
    body: TravelRequest,
    response: Response,
    scope: RequestScope = Depends(get_scope),
) -> TravelInfo:
    _, context = await _guest_in_scope(guest_id, scope)
    record, created = await scope.repos.travel.upsert(
        guest_id, body.model_dump(exclude_unset=True)
    )
    if created:
        logger.info("travel_info_created", guest_id=guest_id, event_id=context.event_id)
        response.status_code = 201
    return record


# ---------------------------------------------------------------------------
# Meal selections
# ---------------------------------------------------------------------------


@router.get("/{guest_id}/meal-selections", response_model=list[MealSelectionResponse])
async def list_meal_selections(
    guest_id: int, scope: RequestScope = Depends(get_scope)
) -> list[GuestMealSelection]:
    await _guest_in_scope(guest_id, scope)
    return await scope.repos.meal_selections.list_by_guest(guest_id)


@router.post("/{guest_id}/meal-selections", status_code=201, response_model=MealSelectionResponse)
async def create_meal_selection(
    guest_id: int,
    body: MealSelectionCreate,
    scope: RequestScope = Depends(get_scope),
) -> GuestMealSelection:
    guest, context = await _guest_in_scope(guest_id, scope)
    ceremony = await scope.repos.ceremonies.get(body.ceremony_id)
    option = await scope.repos.meal_options.get(body.meal_option_id)
    await ensure_same_tenant(
        context.event_id,
        Participant("Guest", guest),
        Participant("Ceremony", ceremony),
        Participant("Meal option", option),
    )
    ensure_meal_option_at(option, body.ceremony_id)
    return await scope.repos.meal_selections.add(
        GuestMealSelection(guest_id=guest_id, **body.model_dump())
    )


@router.get("/{guest_id}/allocations", response_model=list[AllocationResponse])
async def list_guest_allocations(
    guest_id: int, scope: RequestScope = Depends(get_scope)
) -> list[RoomAllocation]:
    await _guest_in_scope(guest_id, scope)
    return await scope.repos.allocations.list_by_guest(guest_id)
