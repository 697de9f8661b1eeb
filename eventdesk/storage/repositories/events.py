"""Wedding event (tenant) repository."""

from __future__ import annotations

from typing import ClassVar

import structlog
from sqlmodel import col, delete, select
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import (
    Accommodation,
    Ceremony,
    CoupleMessage,
    Guest,
    GuestCeremony,
    GuestMealSelection,
    MealOption,
    RoomAllocation,
    TravelInfo,
    WeddingEvent,
    WhatsappTemplate,
)
from eventdesk.storage.repositories.base import SQLModelRepository

logger = structlog.get_logger(__name__)


class EventRepository(SQLModelRepository[WeddingEvent]):
    """Source of truth for tenants. ``created_by`` is fixed at creation."""

    model = WeddingEvent
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "created_by", "created_at"})

    async def list_all(self) -> list[WeddingEvent]:
        """All events, newest first."""
        return await self._list(order_by=_newest_first())

    async def list_created_by(self, user_id: int) -> list[WeddingEvent]:
        """Events created by ``user_id``, newest first."""
        return await self._list(
            col(WeddingEvent.created_by) == user_id, order_by=_newest_first()
        )

    async def delete(self, record_id: int) -> bool:
        """Delete an event together with every resource scoped to it."""
        async with AsyncSession(self._engine) as session:
            event = await session.get(WeddingEvent, record_id)
            if not event:
                return False

            # No DB cascade: children reaching the event through a guest go first
            guest_ids_result = await session.execute(
                select(Guest.id).where(col(Guest.event_id) == record_id)
            )
            guest_ids = [g for (g,) in guest_ids_result.all()]
            if guest_ids:
                for child in (GuestCeremony, TravelInfo, RoomAllocation, GuestMealSelection):
                    await session.execute(
                        delete(child).where(col(child.guest_id).in_(guest_ids))  # type: ignore[attr-defined]
                    )

            accommodation_ids_result = await session.execute(
                select(Accommodation.id).where(col(Accommodation.event_id) == record_id)
            )
            accommodation_ids = [a for (a,) in accommodation_ids_result.all()]
            if accommodation_ids:
                await session.execute(
                    delete(RoomAllocation).where(
                        col(RoomAllocation.accommodation_id).in_(accommodation_ids)
                    )
                )

            for scoped in (
                CoupleMessage,
                WhatsappTemplate,
                MealOption,
                Ceremony,
                Accommodation,
                Guest,
            ):
                await session.execute(
                    delete(scoped).where(col(scoped.event_id) == record_id)  # type: ignore[attr-defined]
                )

            await session.delete(event)
            await session.commit()
            logger.info("event_deleted", event_id=record_id, guests=len(guest_ids))
            return True


def _newest_first() -> tuple[object, ...]:
    return (col(WeddingEvent.created_at).desc(), col(WeddingEvent.id).desc())
