"""Keep the session's cached current-event copy in step with storage."""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from eventdesk.models.session import EventSnapshot

if TYPE_CHECKING:
    from eventdesk.models.database import WeddingEvent
    from eventdesk.web.auth.session import CurrentSession, SessionAuth

logger = structlog.get_logger(__name__)


async def refresh_snapshot(auth: SessionAuth, current: CurrentSession, event: WeddingEvent) -> None:
    """Write the full ``event`` record into the session and wait for the store.

    ``current.data`` is replaced only after the store acknowledged the write;
    a failed write raises :class:`SessionPersistenceError` and leaves it as is.
    A session destroyed concurrently is not revived: :class:`SessionExpiredError`.
    """
    data = current.data.model_copy(update={"current_event": EventSnapshot.from_event(event)})
    await auth.update(current.token, data)
    current.data = data
    logger.debug("session_snapshot_refreshed", event_id=event.id, user_id=data.user_id)


async def clear_snapshot(auth: SessionAuth, current: CurrentSession) -> None:
    """Drop the cached event, if any."""
    if current.data.current_event is None:
        return
    stale_id = current.data.current_event_id
    data = current.data.model_copy(update={"current_event": None})
    await auth.update(current.token, data)
    current.data = data
    logger.info("session_snapshot_cleared", event_id=stale_id, user_id=data.user_id)
