"""Guest repositories: guests plus the records hanging off a guest."""

from __future__ import annotations

from typing import Any, ClassVar

import structlog
from sqlalchemy import func
from sqlmodel import col, delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import (
    Accommodation,
    CoupleMessage,
    Guest,
    GuestCeremony,
    GuestMealSelection,
    RoomAllocation,
    TravelInfo,
)
from eventdesk.storage.repositories.base import SQLModelRepository

logger = structlog.get_logger(__name__)


class GuestRepository(SQLModelRepository[Guest]):
    model = Guest
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "event_id", "created_at"})

    async def list_by_event(self, event_id: int) -> list[Guest]:
        return await self._list(
            col(Guest.event_id) == event_id,
            order_by=(col(Guest.last_name), col(Guest.first_name), col(Guest.id)),
        )

    async def get_by_email(self, event_id: int, email: str) -> Guest | None:
        """Case-insensitive lookup of a guest by email within one event."""
        stmt = (
            select(Guest)
            .where(col(Guest.event_id) == event_id)
            .where(func.lower(col(Guest.email)) == email.strip().lower())
            .order_by(col(Guest.id))
        )
        async with AsyncSession(self._engine) as session:
            result = await session.execute(stmt)
            return result.scalars().first()

    async def delete(self, record_id: int) -> bool:
        """Delete a guest, its relations, and release any allocated rooms."""
        async with AsyncSession(self._engine) as session:
            guest = await session.get(Guest, record_id)
            if not guest:
                return False

            allocations = await session.execute(
                select(RoomAllocation).where(col(RoomAllocation.guest_id) == record_id)
            )
            for allocation in allocations.scalars().all():
                accommodation = await session.get(Accommodation, allocation.accommodation_id)
                if accommodation and accommodation.allocated_rooms > 0:
                    accommodation.allocated_rooms -= 1
                    session.add(accommodation)
                await session.delete(allocation)

            for child in (GuestCeremony, TravelInfo, GuestMealSelection, CoupleMessage):
                await session.execute(
                    delete(child).where(col(child.guest_id) == record_id)  # type: ignore[attr-defined]
                )
            event_id = guest.event_id
            await session.delete(guest)
            await session.commit()
            logger.info("guest_deleted", guest_id=record_id, event_id=event_id)
            return True


class AttendanceRepository(SQLModelRepository[GuestCeremony]):
    model = GuestCeremony
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "guest_id"})

    async def list_by_guest(self, guest_id: int) -> list[GuestCeremony]:
        return await self._list(col(GuestCeremony.guest_id) == guest_id)

    async def list_by_ceremony(self, ceremony_id: int) -> list[GuestCeremony]:
        return await self._list(col(GuestCeremony.ceremony_id) == ceremony_id)

    async def get_for(self, guest_id: int, ceremony_id: int) -> GuestCeremony | None:
        rows = await self._list(
            col(GuestCeremony.guest_id) == guest_id,
            col(GuestCeremony.ceremony_id) == ceremony_id,
        )
        return rows[0] if rows else None

    async def upsert(self, guest_id: int, ceremony_id: int, attending: bool) -> GuestCeremony:
        """Record attendance, updating the existing row for the pair if any."""
        existing = await self.get_for(guest_id, ceremony_id)
        if existing and existing.id is not None:
            updated = await self.update(existing.id, {"attending": attending})
            if updated:
                return updated
        return await self.add(
            GuestCeremony(guest_id=guest_id, ceremony_id=ceremony_id, attending=attending)
        )


class TravelRepository(SQLModelRepository[TravelInfo]):
    model = TravelInfo
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "guest_id"})

    async def get_by_guest(self, guest_id: int) -> TravelInfo | None:
        rows = await self._list(col(TravelInfo.guest_id) == guest_id)
        return rows[0] if rows else None

    async def upsert(self, guest_id: int, fields: dict[str, Any]) -> tuple[TravelInfo, bool]:
        """Create or update the travel record of a guest. Returns ``(record, created)``."""
        existing = await self.get_by_guest(guest_id)
        if existing and existing.id is not None:
            updated = await self.update(existing.id, fields)
            if updated:
                return updated, False
        return await self.add(TravelInfo(guest_id=guest_id, **fields)), True
