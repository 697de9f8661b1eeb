"""Public RSVP submission: guests answer by email, without an account."""

from __future__ import annotations

from datetime import date
from typing import Any

import structlog
from fastapi import APIRouter, Depends

from eventdesk.exceptions import ResourceNotInTenantError
from eventdesk.models.api import RsvpConfirmation, RsvpRequest
from eventdesk.models.database import CoupleMessage
from eventdesk.tenancy.resolver import parse_event_id
from eventdesk.web.dependencies import Repositories, get_repos

logger = structlog.get_logger(__name__)

router = APIRouter(tags=["rsvp"])


@router.post("/api/rsvp", response_model=RsvpConfirmation)
async def submit_rsvp(
    body: RsvpRequest, repos: Repositories = Depends(get_repos)
) -> dict[str, Any]:
    """Record a guest's answer for an event.

    The guest is matched by email within the event. An unknown event and an
    unknown email look the same, so the endpoint does not reveal
    which events exist. Optional fields only overwrite when given.
    """
    event_id = parse_event_id(body.event_id)
    guest = await repos.guests.get_by_email(event_id, body.email)
    if guest is None or guest.id is None:
        logger.info("rsvp_guest_unknown", event_id=event_id)
        raise ResourceNotInTenantError("Guest")

    changes: dict[str, Any] = {"rsvp_status": body.rsvp_status.value, "rsvp_date": date.today()}
    if body.plus_one_name:
        changes["plus_one_name"] = body.plus_one_name
    if body.dietary_restrictions:
        changes["dietary_restrictions"] = body.dietary_restrictions
    await repos.guests.update(guest.id, changes)

    if body.message:
        await repos.messages.add(
            CoupleMessage(event_id=event_id, guest_id=guest.id, message=body.message)
        )
    logger.info(
        "rsvp_submitted",
        event_id=event_id,
        guest_id=guest.id,
        rsvp_status=body.rsvp_status.value,
        with_message=bool(body.message),
    )
    return {
        "message": "RSVP submitted successfully",
        "guest_id": guest.id,
        "rsvp_status": body.rsvp_status,
    }
