"""Meal option and guest meal selection routes."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Response

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import (
    MealOptionResponse,
    MealOptionUpdate,
    MealSelectionResponse,
    MealSelectionUpdate,
)
from eventdesk.models.database import GuestMealSelection, MealOption
from eventdesk.tenancy.scoping import (
    Participant,
    ensure_meal_option_at,
    ensure_same_tenant,
    via_guest,
)
from eventdesk.web.auth.rbac import RequestScope, get_scope
from eventdesk.web.tenant_context import TenantContext

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["meals"])


async def _option_in_scope(option_id: int, scope: RequestScope) -> MealOption:
    option = await scope.repos.meal_options.get(option_id)
    if option is None:
        raise ResourceNotInTenantError("Meal option")
    await scope.for_resource(option, label="Meal option")
    return option


async def _selection_in_scope(
    selection_id: int, scope: RequestScope
) -> tuple[GuestMealSelection, TenantContext]:
    selection = await scope.repos.meal_selections.get(selection_id)
    if selection is None:
        raise ResourceNotInTenantError("Meal selection")
    context = await scope.for_resource(
        selection, via_guest(scope.repos.guests), label="Meal selection"
    )
    return selection, context


@router.put("/api/meals/{option_id}", response_model=MealOptionResponse)
async def update_meal_option(
    option_id: int,
    body: MealOptionUpdate,
    scope: RequestScope = Depends(get_scope),
) -> MealOption | None:
    await _option_in_scope(option_id, scope)
    return await scope.repos.meal_options.update(option_id, body.model_dump(exclude_unset=True))


@router.delete("/api/meals/{option_id}", status_code=204)
async def delete_meal_option(option_id: int, scope: RequestScope = Depends(get_scope)) -> Response:
    await _option_in_scope(option_id, scope)
    await scope.repos.meal_options.delete(option_id)
    return Response(status_code=204)


@router.put("/api/meal-selections/{selection_id}", response_model=MealSelectionResponse)
async def update_meal_selection(
    selection_id: int,
    body: MealSelectionUpdate,
    scope: RequestScope = Depends(get_scope),
) -> GuestMealSelection | None:
    """Update a selection. A new ceremony or meal option must stay in the same event."""
    selection, context = await _selection_in_scope(selection_id, scope)
    changes = body.model_dump(exclude_unset=True)

    ceremony_id = changes.get("ceremony_id") or selection.ceremony_id
    option_id = changes.get("meal_option_id") or selection.meal_option_id
    if ceremony_id != selection.ceremony_id or option_id != selection.meal_option_id:
        ceremony = await scope.repos.ceremonies.get(ceremony_id)
        option = await scope.repos.meal_options.get(option_id)
        await ensure_same_tenant(
            context.event_id,
            Participant("Ceremony", ceremony),
            Participant("Meal option", option),
        )
        ensure_meal_option_at(option, ceremony_id)
        logger.info(
            "meal_selection_retargeted",
            selection_id=selection_id,
            ceremony_id=ceremony_id,
            meal_option_id=option_id,
        )

    changes["ceremony_id"] = ceremony_id
    changes["meal_option_id"] = option_id
    return await scope.repos.meal_selections.update(selection_id, changes)


@router.delete("/api/meal-selections/{selection_id}", status_code=204)
async def delete_meal_selection(
    selection_id: int, scope: RequestScope = Depends(get_scope)
) -> Response:
    await _selection_in_scope(selection_id, scope)
    await scope.repos.meal_selections.delete(selection_id)
    return Response(status_code=204)
