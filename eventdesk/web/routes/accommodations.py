"""Accommodation and room allocation routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import (
    AccommodationResponse,
    AccommodationUpdate,
    AllocationCreate,
    AllocationResponse,
    AllocationUpdate,
)
from eventdesk.models.database import Accommodation, RoomAllocation
from eventdesk.tenancy.scoping import Participant, ensure_same_tenant, via_guest
from eventdesk.web.auth.rbac import RequestScope, get_scope
from eventdesk.web.tenant_context import TenantContext


router = APIRouter(tags=["accommodations"])


async def _accommodation_in_scope(accommodation_id: int, scope: RequestScope) -> Accommodation:
    accommodation = await scope.repos.accommodations.get(accommodation_id)
    if accommodation is None:
        raise ResourceNotInTenantError("Accommodation")
    await scope.for_resource(accommodation, label="Accommodation")
    return accommodation


async def _allocation_in_scope(
    allocation_id: int, scope: RequestScope
) -> tuple[RoomAllocation, TenantContext]:
    allocation = await scope.repos.allocations.get(allocation_id)
    if allocation is None:
        raise ResourceNotInTenantError("Allocation")
    context = await scope.for_resource(
        allocation, via_guest(scope.repos.guests), label="Allocation"
    )
    return allocation, context


@router.put("/api/accommodations/{accommodation_id}", response_model=AccommodationResponse)
async def update_accommodation(
    accommodation_id: int,
    body: AccommodationUpdate,
    scope: RequestScope = Depends(get_scope),
) -> Accommodation | None:
    await _accommodation_in_scope(accommodation_id, scope)
    return await scope.repos.accommodations.update(
        accommodation_id, body.model_dump(exclude_unset=True)
    )


@router.delete("/api/accommodations/{accommodation_id}", status_code=204)
async def delete_accommodation(
    accommodation_id: int, scope: RequestScope = Depends(get_scope)
) -> Response:
    await _accommodation_in_scope(accommodation_id, scope)
    await scope.repos.accommodations.delete(accommodation_id)
    return Response(status_code=204)


@router.get(
    "/api/accommodations/{accommodation_id}/allocations",
    response_model=list[AllocationResponse],
)
async def list_allocations(
    accommodation_id: int, scope: RequestScope = Depends(get_scope)
) -> list[RoomAllocation]:
    await _accommodation_in_scope(accommodation_id, scope)
    return await scope.repos.allocations.list_by_accommodation(accommodation_id)


@router.post("/api/allocations", status_code=201, response_model=AllocationResponse)
async def create_allocation(
    body: AllocationCreate,
    scope: RequestScope = Depends(get_scope),
) -> RoomAllocation:
    """Allocate a room. Guest and accommodation must belong to the same event."""
    accommodation = await _accommodation_in_scope(body.accommodation_id, scope)
    guest = await scope.repos.guests.get(body.guest_id)
    await ensure_same_tenant(
        accommodation.event_id,
        Participant("Accommodation", accommodation),
        Participant("Guest", guest),
    )
    return await scope.repos.allocations.add(RoomAllocation(**body.model_dump()))


@router.put("/api/allocations/{allocation_id}", response_model=AllocationResponse)
async def update_allocation(
    allocation_id: int,
    body: AllocationUpdate,
    scope: RequestScope = Depends(get_scope),
) -> RoomAllocation | None:
    """Update an allocation. A new guest or accommodation must stay in the same event."""
    allocation, context = await _allocation_in_scope(allocation_id, scope)
    changes = body.model_dump(exclude_unset=True)

    participants: list[Participant] = []
    new_guest_id = changes.get("guest_id") or allocation.guest_id
    if new_guest_id != allocation.guest_id:
        guest = await scope.repos.guests.get(new_guest_id)
        participants.append(Participant("Guest", guest))
    new_accommodation_id = changes.get("accommodation_id") or allocation.accommodation_id
    if new_accommodation_id != allocation.accommodation_id:
        accommodation = await scope.repos.accommodations.get(new_accommodation_id)
        participants.append(Participant("Accommodation", accommodation))
    await ensure_same_tenant(context.event_id, *participants)

    return await scope.repos.allocations.update(allocation_id, changes)


@router.delete("/api/allocations/{allocation_id}", status_code=204)
async def delete_allocation(
    allocation_id: int, scope: RequestScope = Depends(get_scope)
) -> Response:
    await _allocation_in_scope(allocation_id, scope)
    await scope.repos.allocations.delete(allocation_id)
    return Response(status_code=204)
