"""Role-based access guard for events."""

from __future__ import annotations

from typing import TYPE_CHECKING, assert_never

import structlog

from eventdesk.exceptions import AccessDeniedError, TenantNotFoundError
from eventdesk.types import Role

if TYPE_CHECKING:
    from eventdesk.models.database import WeddingEvent
    from eventdesk.storage.repositories.events import EventRepository
    from eventdesk.web.tenant_context import Principal

logger = structlog.get_logger(__name__)


def is_privileged(role: Role) -> bool:
    """Whether ``role`` may act on events it did not create."""
    match role:
        case Role.ADMIN | Role.STAFF | Role.PLANNER:
            return True
        case Role.COUPLE:
            return False
        case _:
            assert_never(role)


def authorize(
    event: WeddingEvent | None, principal: Principal, *, event_id: int | None = None
) -> WeddingEvent:
    """Return ``event`` if ``principal`` may act on it.

    Raises :class:`TenantNotFoundError` when the event is absent and
    :class:`AccessDeniedError` when a couple is not its creator.
    """
    if event is None:
        logger.info("tenant_not_found", event_id=event_id, user_id=principal.user_id)
        raise TenantNotFoundError

    if is_privileged(principal.role) or event.created_by == principal.user_id:
        return event

    logger.warning(
        "tenant_access_denied",
        event_id=event.id,
        user_id=principal.user_id,
        role=principal.role.value,
    )
    raise AccessDeniedError


async def visible_events(events: EventRepository, principal: Principal) -> list[WeddingEvent]:
    """Events ``principal`` may see, newest first."""
    if is_privileged(principal.role):
        return await events.list_all()
    return await events.list_created_by(principal.user_id)
