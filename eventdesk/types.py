"""Enums and type aliases for EventDesk."""

from enum import StrEnum


class Role(StrEnum):
    """Closed set of principal roles.

    ``ADMIN``, ``STAFF`` and ``PLANNER`` may act on any event. ``COUPLE`` is
    limited to the events it created.
    """

    ADMIN = "admin"
    STAFF = "staff"
    PLANNER = "planner"
    COUPLE = "couple"


class ContextSource(StrEnum):
    """Where the event id of a request came from."""

    RESOURCE = "resource"
    EXPLICIT = "explicit"
    QUERY = "query"
    SESSION = "session"
    FALLBACK = "fallback"


class RsvpStatus(StrEnum):
    PENDING = "pending"
    CONFIRMED = "confirmed"
    DECLINED = "declined"


class GuestSide(StrEnum):
    BRIDE = "bride"
    GROOM = "groom"


class TemplateCategory(StrEnum):
    INVITATION = "invitation"
    RSVP = "rsvp"
    REMINDER = "reminder"
    CEREMONY = "ceremony"
    TRAVEL = "travel"
    ACCOMMODATION = "accommodation"


class ContactType(StrEnum):
    GUEST = "guest"
    PLUS_ONE = "plus_one"


class ContactChannel(StrEnum):
    EMAIL = "email"
    PHONE = "phone"
    WHATSAPP = "whatsapp"
