"""FastAPI dependency injection and shared state."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from fastapi import Depends, Request

from eventdesk.config.settings import Settings
from eventdesk.storage.repositories.accommodations import (
    AccommodationRepository,
    RoomAllocationRepository,
)
from eventdesk.storage.repositories.ceremonies import (
    CeremonyRepository,
    MealOptionRepository,
    MealSelectionRepository,
)
from eventdesk.storage.repositories.events import EventRepository
from eventdesk.storage.repositories.guests import (
    AttendanceRepository,
    GuestRepository,
    TravelRepository,
)
from eventdesk.storage.repositories.messaging import (
    CoupleMessageRepository,
    WhatsappTemplateRepository,
)
from eventdesk.storage.repositories.users import UserRepository
from eventdesk.tenancy.gate import TenantGate
from eventdesk.web.auth.session import SessionAuth, get_session_auth

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


@dataclass(frozen=True, slots=True)
class Repositories:
    users: UserRepository
    events: EventRepository
    guests: GuestRepository
    attendance: AttendanceRepository
    travel: TravelRepository
    ceremonies: CeremonyRepository
    meal_options: MealOptionRepository
    meal_selections: MealSelectionRepository
    accommodations: AccommodationRepository
    allocations: RoomAllocationRepository
    messages: CoupleMessageRepository
    templates: WhatsappTemplateRepository


def build_repositories(engine: AsyncEngine) -> Repositories:
    """Create every repository over one shared engine."""
    return Repositories(
        users=UserRepository(engine),
        events=EventRepository(engine),
        guests=GuestRepository(engine),
        attendance=AttendanceRepository(engine),
        travel=TravelRepository(engine),
        ceremonies=CeremonyRepository(engine),
        meal_options=MealOptionRepository(engine),
        meal_selections=MealSelectionRepository(engine),
        accommodations=AccommodationRepository(engine),
        allocations=RoomAllocationRepository(engine),
        messages=CoupleMessageRepository(engine),
        templates=WhatsappTemplateRepository(engine),
    )


def get_repos(request: Request) -> Repositories:
    repos: Repositories = request.app.state.repos
    return repos


def get_gate(
    repos: Repositories = Depends(get_repos),
    auth: SessionAuth = Depends(get_session_auth),
) -> TenantGate:
    return TenantGate(repos.events, auth)


def get_app_settings(request: Request) -> Settings:
    settings: Settings = request.app.state.settings
    return settings
