"""Serialized session payloads."""

from __future__ import annotations

from datetime import date, datetime
from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from eventdesk.types import Role

if TYPE_CHECKING:
    from eventdesk.models.database import WeddingEvent


class EventSnapshot(BaseModel):
    """Cached copy of the last resolved event. Never authoritative."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
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
    created_by: int
    created_at: datetime

    @classmethod
    def from_event(cls, event: WeddingEvent) -> EventSnapshot:
        return cls.model_validate(event)


class SessionData(BaseModel):
    user_id: int
    username: str
    role: Role
    created_at: float
    current_event: EventSnapshot | None = None

    @property
    def current_event_id(self) -> int | None:
        return self.current_event.id if self.current_event else None
