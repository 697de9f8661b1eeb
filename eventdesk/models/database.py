"""SQLModel database table models."""

from __future__ import annotations

from datetime import UTC, date, datetime

from sqlmodel import Field, SQLModel

from eventdesk.types import Role, RsvpStatus


def _utc_now() -> datetime:
    """Return current UTC time as naive datetime for TIMESTAMP WITHOUT TIME ZONE columns."""
    return datetime.now(UTC).replace(tzinfo=None)


# ---------------------------------------------------------------------------
# Principals and sessions
# ---------------------------------------------------------------------------


class User(SQLModel, table=True):
    __tablename__ = "users"

    id: int | None = Field(default=None, primary_key=True)
    username: str = Field(unique=True, index=True)
    password_hash: str
    name: str = ""
    email: str = ""
    role: str = Field(default=Role.COUPLE.value)  # admin | staff | planner | couple
    created_at: datetime = Field(default_factory=_utc_now)


class SessionRecord(SQLModel, table=True):
    __tablename__ = "sessions"

    token: str = Field(primary_key=True)
    data_json: str
    created_at: datetime = Field(default_factory=_utc_now)
    updated_at: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Tenant
# ---------------------------------------------------------------------------


class WeddingEvent(SQLModel, table=True):
    __tablename__ = "wedding_events"

    id: int | None = Field(default=None, primary_key=True)
    title: str
    couple_names: str
    bride_name: str
    groom_name: str
    start_date: date
    end_date: date
    location: str
    description: str | None = None
    rsvp_deadline: date | None = None
    allow_plus_ones: bool = Field(default=True)
    allow_children_details: bool = Field(default=True)
    created_by: int = Field(foreign_key="users.id", index=True)
    created_at: datetime = Field(default_factory=_utc_now)


# ---------------------------------------------------------------------------
# Scoped resources carrying event_id directly
# ---------------------------------------------------------------------------


class Guest(SQLModel, table=True):
    __tablename__ = "guests"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    first_name: str
    last_name: str
    email: str | None = None
    phone: str | None = None
    whatsapp_number: str | None = None
    side: str  # bride | groom
    relationship: str | None = None
    is_family: bool = Field(default=False)
    rsvp_status: str = Field(default=RsvpStatus.PENDING.value)
    rsvp_date: date | None = None
    plus_one_allowed: bool = Field(default=False)
    plus_one_confirmed: bool = Field(default=False)
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_rsvp_contact: bool = Field(default=False)
    dietary_restrictions: str | None = None
    needs_accommodation: bool = Field(default=False)
    notes: str | None = None
    created_at: datetime = Field(default_factory=_utc_now)


class Ceremony(SQLModel, table=True):
    __tablename__ = "ceremonies"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    name: str
    ceremony_date: date
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None


class Accommodation(SQLModel, table=True):
    __tablename__ = "accommodations"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    name: str
    room_type: str
    capacity: int
    total_rooms: int
    allocated_rooms: int = Field(default=0)
    price_per_night: str | None = None
    special_features: str | None = None


class MealOption(SQLModel, table=True):
    __tablename__ = "meal_options"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    ceremony_id: int = Field(foreign_key="ceremonies.id", index=True)
    name: str
    description: str | None = None
    is_vegetarian: bool = Field(default=False)
    is_vegan: bool = Field(default=False)
    is_gluten_free: bool = Field(default=False)
    is_nut_free: bool = Field(default=False)


class CoupleMessage(SQLModel, table=True):
    __tablename__ = "couple_messages"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    guest_id: int = Field(foreign_key="guests.id", index=True)
    message: str
    created_at: datetime = Field(default_factory=_utc_now)


class WhatsappTemplate(SQLModel, table=True):
    __tablename__ = "whatsapp_templates"

    id: int | None = Field(default=None, primary_key=True)
    event_id: int = Field(foreign_key="wedding_events.id", index=True)
    name: str
    category: str  # invitation | rsvp | reminder | ceremony | travel | accommodation
    template_id: str | None = None
    content: str
    parameters_json: str = Field(default="[]")
    language: str = Field(default="en_US")
    created_at: datetime = Field(default_factory=_utc_now)
    last_used: datetime | None = None


# ---------------------------------------------------------------------------
# Scoped resources reaching their event through a guest
# ---------------------------------------------------------------------------


class GuestCeremony(SQLModel, table=True):
    __tablename__ = "guest_ceremonies"

    id: int | None = Field(default=None, primary_key=True)
    guest_id: int = Field(foreign_key="guests.id", index=True)
    ceremony_id: int = Field(foreign_key="ceremonies.id", index=True)
    attending: bool = Field(default=False)


class TravelInfo(SQLModel, table=True):
    __tablename__ = "travel_info"

    id: int | None = Field(default=None, primary_key=True)
    guest_id: int = Field(foreign_key="guests.id", unique=True, index=True)
    travel_mode: str | None = None  # air | road | train
    arrival_date: date | None = None
    arrival_time: str | None = None
    arrival_location: str | None = None
    departure_date: date | None = None
    departure_time: str | None = None
    departure_location: str | None = None
    flight_number: str | None = None
    needs_transportation: bool = Field(default=False)
    transportation_type: str | None = None  # pickup | drop | both


class RoomAllocation(SQLModel, table=True):
    __tablename__ = "room_allocations"

    id: int | None = Field(default=None, primary_key=True)
    accommodation_id: int = Field(foreign_key="accommodations.id", index=True)
    guest_id: int = Field(foreign_key="guests.id", index=True)
    room_number: str | None = None
    check_in_date: date | None = None
    check_in_status: str = Field(default="pending")  # pending | confirmed | checked-in | no-show
    check_out_date: date | None = None
    check_out_status: str = Field(default="pending")  # pending | checked-out
    special_requests: str | None = None
    includes_plus_one: bool = Field(default=False)
    includes_children: bool = Field(default=False)
    children_count: int = Field(default=0)


class GuestMealSelection(SQLModel, table=True):
    __tablename__ = "guest_meal_selections"

    id: int | None = Field(default=None, primary_key=True)
    guest_id: int = Field(foreign_key="guests.id", index=True)
    meal_option_id: int = Field(foreign_key="meal_options.id", index=True)
    ceremony_id: int = Field(foreign_key="ceremonies.id", index=True)
    notes: str | None = None
