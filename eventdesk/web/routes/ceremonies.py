"""Ceremony routes, including the meal options served at a ceremony."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Response

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import (
    AttendanceResponse,
    CeremonyResponse,
    CeremonyUpdate,
    MealOptionCreate,
    MealOptionResponse,
)
from eventdesk.models.database import Ceremony, GuestCeremony, MealOption
from eventdesk.web.auth.rbac import RequestScope, get_scope
from eventdesk.web.tenant_context import TenantContext

router = APIRouter(prefix="/api/ceremonies", tags=["ceremonies"])


async def _ceremony_in_scope(
    ceremony_id: int, scope: RequestScope
) -> tuple[Ceremony, TenantContext]:
    ceremony = await scope.repos.ceremonies.get(ceremony_id)
    if ceremony is None:
        raise ResourceNotInTenantError("Ceremony")
    context = await scope.for_resource(ceremony, label="Ceremony")
    return ceremony, context


@router.get("/{ceremony_id}", response_model=CeremonyResponse)
async def get_ceremony(ceremony_id: int, scope: RequestScope = Depends(get_scope)) -> Ceremony:
    ceremony, _ = await _ceremony_in_scope(ceremony_id, scope)
    return ceremony


@router.put("/{ceremony_id}", response_model=CeremonyResponse)
async def update_ceremony(
    ceremony_id: int,
    body: CeremonyUpdate,
    scope: RequestScope = Depends(get_scope),
) -> Ceremony | None:
    await _ceremony_in_scope(ceremony_id, scope)
    return await scope.repos.ceremonies.update(ceremony_id, body.model_dump(exclude_unset=True))


@router.delete("/{ceremony_id}", status_code=204)
async def delete_ceremony(ceremony_id: int, scope: RequestScope = Depends(get_scope)) -> Response:
    await _ceremony_in_scope(ceremony_id, scope)
    await scope.repos.ceremonies.delete(ceremony_id)
    return Response(status_code=204)


@router.get("/{ceremony_id}/meals", response_model=list[MealOptionResponse])
async def list_meal_options(
    ceremony_id: int, scope: RequestScope = Depends(get_scope)
) -> list[MealOption]:
    await _ceremony_in_scope(ceremony_id, scope)
    return await scope.repos.meal_options.list_by_ceremony(ceremony_id)


@router.post("/{ceremony_id}/meals", status_code=201, response_model=MealOptionResponse)
async def create_meal_option(
    ceremony_id: int,
    body: MealOptionCreate,
    scope: RequestScope = Depends(get_scope),
) -> MealOption:
    """Add a meal option. Its event is the ceremony's, never the client's."""
    _, context = await _ceremony_in_scope(ceremony_id, scope)
    return await scope.repos.meal_options.add(
        MealOption(event_id=context.event_id, ceremony_id=ceremony_id, **body.model_dump())
    )


@router.get("/{ceremony_id}/attendance", response_model=list[AttendanceResponse])
async def list_ceremony_attendance(
    ceremony_id: int, scope: RequestScope = Depends(get_scope)
) -> list[GuestCeremony]:
    await _ceremony_in_scope(ceremony_id, scope)
    return await scope.repos.attendance.list_by_ceremony(ceremony_id)
