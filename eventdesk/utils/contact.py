"""Pick who to contact about a guest's RSVP."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from eventdesk.types import ContactChannel, ContactType

if TYPE_CHECKING:
    from eventdesk.models.database import Guest


@dataclass(frozen=True, slots=True)
class EffectiveContact:
    name: str
    email: str | None
    phone: str | None
    whatsapp_number: str | None
    contact_type: ContactType

    @property
    def is_valid(self) -> bool:
        return bool(self.email or self.phone)

    def reachable_by(self, channel: ContactChannel) -> bool:
        match channel:
            case ContactChannel.EMAIL:
                value = self.email
            case ContactChannel.PHONE:
                value = self.phone
            case ContactChannel.WHATSAPP:
                value = self.whatsapp_number
        return bool(value and value.strip())


def effective_contact(guest: Guest) -> EffectiveContact:
    """Return the guest's contact, or the plus-one's when they handle the RSVP.

    The plus-one is used only when flagged as RSVP contact and confirmed with a
    name. A plus-one has no WhatsApp number of its own; its phone stands in.
    """
    if guest.plus_one_rsvp_contact and guest.plus_one_confirmed and guest.plus_one_name:
        return EffectiveContact(
            name=guest.plus_one_name,
            email=guest.plus_one_email or None,
            phone=guest.plus_one_phone or None,
            whatsapp_number=guest.plus_one_phone or None,
            contact_type=ContactType.PLUS_ONE,
        )

    full_name = f"{guest.first_name or ''} {guest.last_name or ''}".strip()
    return EffectiveContact(
        name=full_name or "Guest",
        email=guest.email or None,
        phone=guest.phone or None,
        whatsapp_number=guest.whatsapp_number or guest.phone or None,
        contact_type=ContactType.GUEST,
    )


def filter_by_channel(guests: Iterable[Guest], channel: ContactChannel) -> list[Guest]:
    """Guests whose effective contact can be reached on ``channel``."""
    return [g for g in guests if effective_contact(g).reachable_by(channel)]


def contact_statistics(guests: Iterable[Guest]) -> dict[str, int]:
    """Counts of reachable channels and contact types across ``guests``."""
    stats = {
        "total": 0,
        "with_email": 0,
        "with_phone": 0,
        "with_whatsapp": 0,
        "using_plus_one_contact": 0,
        "using_guest_contact": 0,
        "no_valid_contact": 0,
    }
    for guest in guests:
        contact = effective_contact(guest)
        stats["total"] += 1
        stats["with_email"] += bool(contact.email)
        stats["with_phone"] += bool(contact.phone)
        stats["with_whatsapp"] += bool(contact.whatsapp_number)
        if contact.contact_type is ContactType.PLUS_ONE:
            stats["using_plus_one_contact"] += 1
        else:
            stats["using_guest_contact"] += 1
        stats["no_valid_contact"] += not contact.is_valid
    return stats
