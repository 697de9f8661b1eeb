"""Request and response schemas for the HTTP API.

JSON keys are camelCase. Create schemas for scoped resources never declare
``eventId``: the tenant comes from the resolved context. Update schemas omit
every tenant reference and ignore unknown keys, so a payload carrying
``eventId`` cannot move a record to another event.
"""

from __future__ import annotations

import json
from datetime import date, datetime
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from eventdesk.types import ContactType, GuestSide, Role, RsvpStatus, TemplateCategory
from eventdesk.web.auth.passwords import MAX_PASSWORD_BYTES

if TYPE_CHECKING:
    from eventdesk.models.database import WhatsappTemplate
    from eventdesk.utils.contact import EffectiveContact


class CamelModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
        extra="ignore",
    )


# ---------------------------------------------------------------------------
# Auth and users
# ---------------------------------------------------------------------------


class RegisterRequest(CamelModel):
    username: str = Field(min_length=3, max_length=100)
    password: str = Field(min_length=8, max_length=MAX_PASSWORD_BYTES)
    name: str = ""
    email: str = ""

    @field_validator("password")
    @classmethod
    def password_fits_bcrypt(cls, value: str) -> str:
        if len(value.encode()) > MAX_PASSWORD_BYTES:
            msg = f"Password must be at most {MAX_PASSWORD_BYTES} bytes"
            raise ValueError(msg)
        return value


class LoginRequest(CamelModel):
    username: str
    password: str


class CreateUserRequest(RegisterRequest):
    role: Role = Role.COUPLE


class UserResponse(CamelModel):
    id: int
    username: str
    name: str
    email: str
    role: Role


# ---------------------------------------------------------------------------
# Events
# ---------------------------------------------------------------------------


class CurrentEventRequest(CamelModel):
    # Left untyped so a malformed id reaches the resolver and maps to 400
    event_id: Any = None


class EventCreate(CamelModel):
    title: str = Field(min_length=1, max_length=200)
    couple_names: str
    bride_name: str
    groom_name: str
    start_date: date
    end_date: date
    location: str
    description: str | None = None
    rsvp_deadline: date | None = None
    allow_plus_ones: bool = True
    allow_children_details: bool = True


class EventUpdate(CamelModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    couple_names: str | None = None
    bride_name: str | None = None
    groom_name: str | None = None
    start_date: date | None = None
    end_date: date | None = None
    location: str | None = None
    description: str | None = None
    rsvp_deadline: date | None = None
    allow_plus_ones: bool | None = None
    allow_children_details: bool | None = None


class EventResponse(EventCreate):
    id: int
    created_by: int
    created_at: datetime


# ---------------------------------------------------------------------------
# Guests
# ---------------------------------------------------------------------------


class GuestCreate(CamelModel):
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    email: str | None = None
    phone: str | None = None
    whatsapp_number: str | None = None
    side: GuestSide
    relationship: str | None = None
    is_family: bool = False
    rsvp_status: RsvpStatus = RsvpStatus.PENDING
    rsvp_date: date | None = None
    plus_one_allowed: bool = False
    plus_one_confirmed: bool = False
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_rsvp_contact: bool = False
    dietary_restrictions: str | None = None
    needs_accommodation: bool = False
    notes: str | None = None


class GuestUpdate(CamelModel):
    first_name: str | None = Field(default=None, min_length=1)
    last_name: str | None = Field(default=None, min_length=1)
    email: str | None = None
    phone: str | None = None
    whatsapp_number: str | None = None
    side: GuestSide | None = None
    relationship: str | None = None
    is_family: bool | None = None
    rsvp_status: RsvpStatus | None = None
    rsvp_date: date | None = None
    plus_one_allowed: bool | None = None
    plus_one_confirmed: bool | None = None
    plus_one_name: str | None = None
    plus_one_email: str | None = None
    plus_one_phone: str | None = None
    plus_one_rsvp_contact: bool | None = None
    dietary_restrictions: str | None = None
    needs_accommodation: bool | None = None
    notes: str | None = None


class GuestResponse(GuestCreate):
    id: int
    event_id: int
    created_at: datetime


class ContactResponse(CamelModel):
    name: str
    email: str | None
    phone: str | None
    whatsapp_number: str | None
    contact_type: ContactType
    is_valid: bool

    @classmethod
    def from_contact(cls, contact: EffectiveContact) -> ContactResponse:
        return cls(
            name=contact.name,
            email=contact.email,
            phone=contact.phone,
            whatsapp_number=contact.whatsapp_number,
            contact_type=contact.contact_type,
            is_valid=contact.is_valid,
        )


class ContactStatsResponse(CamelModel):
    total: int
    with_email: int
    with_phone: int
    with_whatsapp: int
    using_plus_one_contact: int
    using_guest_contact: int
    no_valid_contact: int


class RsvpStatsResponse(CamelModel):
    total: int
    confirmed: int
    declined: int
    pending: int
    plus_ones: int
    rsvp_rate: float


class RsvpRequest(CamelModel):
    """A guest's own answer, submitted without an account."""

    # Left untyped so a malformed id reaches the resolver and maps to 400
    event_id: Any = None
    email: str = Field(min_length=3, max_length=254)
    first_name: str = Field(min_length=1)
    last_name: str = Field(min_length=1)
    rsvp_status: RsvpStatus
    plus_one_name: str | None = None
    dietary_restrictions: str | None = None
    message: str | None = Field(default=None, max_length=2000)


class RsvpConfirmation(CamelModel):
    message: str
    guest_id: int
    rsvp_status: RsvpStatus


class AttendanceRequest(CamelModel):
    ceremony_id: int
    attending: bool


class AttendanceResponse(AttendanceRequest):
    id: int
    guest_id: int


class TravelRequest(CamelModel):
    travel_mode: str | None = None
    arrival_date: date | None = None
    arrival_time: str | None = None
    arrival_location: str | None = None
    departure_date: date | None = None
    departure_time: str | None = None
    departure_location: str | None = None
    flight_number: str | None = None
    needs_transportation: bool | None = None
    transportation_type: str | None = None


class TravelResponse(TravelRequest):
    id: int
    guest_id: int
    needs_transportation: bool = False


# ---------------------------------------------------------------------------
# Ceremonies and meals
# ---------------------------------------------------------------------------


class CeremonyCreate(CamelModel):
    name: str = Field(min_length=1)
    ceremony_date: date = Field(alias="date")
    start_time: str
    end_time: str
    location: str
    description: str | None = None
    attire_code: str | None = None


class CeremonyUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    ceremony_date: date | None = Field(default=None, alias="date")
    start_time: str | None = None
    end_time: str | None = None
    location: str | None = None
    description: str | None = None
    attire_code: str | None = None


class CeremonyResponse(CeremonyCreate):
    id: int
    event_id: int


class MealOptionCreate(CamelModel):
    name: str = Field(min_length=1)
    description: str | None = None
    is_vegetarian: bool = False
    is_vegan: bool = False
    is_gluten_free: bool = False
    is_nut_free: bool = False


class MealOptionUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    description: str | None = None
    is_vegetarian: bool | None = None
    is_vegan: bool | None = None
    is_gluten_free: bool | None = None
    is_nut_free: bool | None = None


class MealOptionResponse(MealOptionCreate):
    id: int
    event_id: int
    ceremony_id: int


class MealSelectionCreate(CamelModel):
    ceremony_id: int
    meal_option_id: int
    notes: str | None = None


class MealSelectionUpdate(CamelModel):
    ceremony_id: int | None = None
    meal_option_id: int | None = None
    notes: str | None = None


class MealSelectionResponse(MealSelectionCreate):
    id: int
    guest_id: int


# ---------------------------------------------------------------------------
# Accommodations and allocations
# ---------------------------------------------------------------------------


class AccommodationCreate(CamelModel):
    name: str = Field(min_length=1)
    room_type: str
    capacity: int = Field(ge=1)
    total_rooms: int = Field(ge=0)
    price_per_night: str | None = None
    special_features: str | None = None


class AccommodationUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    room_type: str | None = None
    capacity: int | None = Field(default=None, ge=1)
    total_rooms: int | None = Field(default=None, ge=0)
    price_per_night: str | None = None
    special_features: str | None = None


class AccommodationResponse(AccommodationCreate):
    id: int
    event_id: int
    allocated_rooms: int


class AllocationCreate(CamelModel):
    accommodation_id: int
    guest_id: int
    room_number: str | None = None
    check_in_date: date | None = None
    check_in_status: str = "pending"
    check_out_date: date | None = None
    check_out_status: str = "pending"
    special_requests: str | None = None
    includes_plus_one: bool = False
    includes_children: bool = False
    children_count: int = Field(default=0, ge=0)


class AllocationUpdate(CamelModel):
    accommodation_id: int | None = None
    guest_id: int | None = None
    room_number: str | None = None
    check_in_date: date | None = None
    check_in_status: str | None = None
    check_out_date: date | None = None
    check_out_status: str | None = None
    special_requests: str | None = None
    includes_plus_one: bool | None = None
    includes_children: bool | None = None
    children_count: int | None = Field(default=None, ge=0)


class AllocationResponse(AllocationCreate):
    id: int


# ---------------------------------------------------------------------------
# Messaging
# ---------------------------------------------------------------------------


class CoupleMessageCreate(CamelModel):
    guest_id: int
    message: str = Field(min_length=1)


class CoupleMessageResponse(CoupleMessageCreate):
    id: int
    event_id: int
    created_at: datetime


class TemplateCreate(CamelModel):
    name: str = Field(min_length=1)
    category: TemplateCategory
    template_id: str | None = None
    content: str = Field(min_length=1)
    parameters: list[str] = Field(default_factory=list)
    language: str = "en_US"


class TemplateUpdate(CamelModel):
    name: str | None = Field(default=None, min_length=1)
    category: TemplateCategory | None = None
    template_id: str | None = None
    content: str | None = Field(default=None, min_length=1)
    parameters: list[str] | None = None
    language: str | None = None


class TemplateResponse(TemplateCreate):
    id: int
    event_id: int
    created_at: datetime
    last_used: datetime | None = None

    @classmethod
    def from_record(cls, template: WhatsappTemplate) -> TemplateResponse:
        data = template.model_dump(exclude={"parameters_json"})
        return cls(parameters=json.loads(template.parameters_json or "[]"), **data)


def template_columns(fields: dict[str, Any]) -> dict[str, Any]:
    """Map template API fields onto table columns."""
    columns = dict(fields)
    if "parameters" in columns:
        columns["parameters_json"] = json.dumps(columns.pop("parameters") or [])
    return columns
