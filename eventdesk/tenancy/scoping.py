"""Checks that scoped resources belong to the resolved event.

Every resource reaches its event either directly (an ``event_id`` column) or
through the guest it hangs off. A ``TenantOf`` extractor hides that difference
so one check covers every resource type.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, TypeVar

import structlog

from eventdesk.exceptions import MalformedInputError, ResourceNotInTenantError

if TYPE_CHECKING:
    from eventdesk.models.database import MealOption
    from eventdesk.storage.repositories.guests import GuestRepository

logger = structlog.get_logger(__name__)

TenantOf = Callable[[Any], Awaitable[int | None]]
T = TypeVar("T")


async def direct_tenant(resource: Any) -> int | None:
    """Tenant of a resource carrying its own ``event_id``."""
    event_id: int | None = getattr(resource, "event_id", None)
    return event_id


def via_guest(guests: GuestRepository) -> TenantOf:
    """Tenant of a resource that reaches its event through ``guest_id``."""

    async def tenant_of(resource: Any) -> int | None:
        guest = await guests.get(resource.guest_id)
        return guest.event_id if guest else None

    return tenant_of


async def ensure_in_tenant(
    resource: T | None,
    event_id: int,
    tenant_of: TenantOf = direct_tenant,
    *,
    label: str = "Resource",
) -> T:
    """Return ``resource`` if it exists and belongs to ``event_id``.

    A missing resource and a resource under another event are reported the
    same way, so callers cannot probe for ids in other events.
    """
    if resource is None:
        raise ResourceNotInTenantError(label)
    owner = await tenant_of(resource)
    if owner != event_id:
        logger.warning(
            "resource_outside_tenant",
            resource=label,
            event_id=event_id,
            owner_event_id=owner,
        )
        raise ResourceNotInTenantError(label)
    return resource


@dataclass(frozen=True, slots=True)
class Participant:
    """One side of a relation being written, with how to find its event."""

    label: str
    resource: Any
    tenant_of: TenantOf = direct_tenant


async def ensure_same_tenant(event_id: int, *participants: Participant) -> None:
    """Refuse a relation unless every participant lives under ``event_id``."""
    for participant in participants:
        await ensure_in_tenant(
            participant.resource,
            event_id,
            participant.tenant_of,
            label=participant.label,
        )


def ensure_meal_option_at(option: MealOption | None, ceremony_id: int) -> None:
    """A selected meal option must be served at the selection's ceremony."""
    if option is not None and option.ceremony_id != ceremony_id:
        raise MalformedInputError("Meal option does not belong to this ceremony")
