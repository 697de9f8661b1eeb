"""Pick the event id a request acts on.

Priority, highest first:

1. the event owning a fetched resource, or an explicit path segment
2. the ``eventId`` query parameter
3. the event cached in the session snapshot

A resource's own event always wins; conflicting query or session values are
ignored rather than rejected. A query value that is present but malformed is
an error, never silently skipped.
"""

from __future__ import annotations

from dataclasses import dataclass

import structlog

from eventdesk.exceptions import MalformedInputError, TenantContextMissingError
from eventdesk.types import ContextSource

logger = structlog.get_logger(__name__)


@dataclass(frozen=True, slots=True)
class ResolvedEventId:
    event_id: int
    source: ContextSource


def parse_event_id(raw: object) -> int:
    """Parse a client-supplied event id.

    Accepts an ``int`` or a string of ASCII digits. Anything else, including
    booleans, floats, other scripts' digits and values below 1, raises
    :class:`MalformedInputError`.
    """
    if isinstance(raw, bool):
        raise MalformedInputError("Invalid event ID")
    if isinstance(raw, int):
        value = raw
    elif isinstance(raw, str) and raw.strip().isascii() and raw.strip().isdigit():
        value = int(raw.strip())
    else:
        raise MalformedInputError("Invalid event ID")
    if value <= 0:
        raise MalformedInputError("Invalid event ID")
    return value


def resolve_event_id(
    *,
    resource_event_id: int | None = None,
    query_value: str | None = None,
    session_event_id: int | None = None,
    resource_source: ContextSource = ContextSource.RESOURCE,
) -> ResolvedEventId:
    """Apply the resolution priority. Pure; performs no I/O."""
    if resource_event_id is not None:
        return ResolvedEventId(resource_event_id, resource_source)

    # An empty query parameter counts as absent
    if query_value is not None and query_value != "":
        return ResolvedEventId(parse_event_id(query_value), ContextSource.QUERY)

    if session_event_id is not None:
        return ResolvedEventId(session_event_id, ContextSource.SESSION)

    logger.info("tenant_context_missing")
    raise TenantContextMissingError
