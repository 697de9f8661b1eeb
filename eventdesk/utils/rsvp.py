"""RSVP tallies for an event's guest list."""

from __future__ import annotations

from collections import Counter
from typing import TYPE_CHECKING

from eventdesk.types import RsvpStatus

if TYPE_CHECKING:
    from collections.abc import Sequence

    from eventdesk.models.database import Guest


def rsvp_statistics(guests: Sequence[Guest]) -> dict[str, int | float]:
    """Response counts for ``guests``.

    ``rsvp_rate`` is the percentage of guests who answered either way; it is
    0 for an empty guest list.
    """
    statuses = Counter(guest.rsvp_status for guest in guests)
    total = len(guests)
    pending = statuses[RsvpStatus.PENDING.value]
    return {
        "total": total,
        "confirmed": statuses[RsvpStatus.CONFIRMED.value],
        "declined": statuses[RsvpStatus.DECLINED.value],
        "pending": pending,
        "plus_ones": sum(1 for guest in guests if guest.plus_one_name),
        "rsvp_rate": (total - pending) / total * 100 if total else 0.0,
    }
