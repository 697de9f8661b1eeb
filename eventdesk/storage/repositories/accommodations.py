"""Accommodation and room allocation repositories."""

from __future__ import annotations

from typing import Any, ClassVar

import structlog
from sqlmodel import col, delete
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import Accommodation, RoomAllocation
from eventdesk.storage.repositories.base import SQLModelRepository

logger = structlog.get_logger(__name__)


class AccommodationRepository(SQLModelRepository[Accommodation]):
    model = Accommodation
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "event_id", "allocated_rooms"})

    async def list_by_event(self, event_id: int) -> list[Accommodation]:
        return await self._list(
            col(Accommodation.event_id) == event_id, order_by=(col(Accommodation.id),)
        )

    async def delete(self, record_id: int) -> bool:
        async with AsyncSession(self._engine) as session:
            accommodation = await session.get(Accommodation, record_id)
            if not accommodation:
                return False
            await session.execute(
                delete(RoomAllocation).where(col(RoomAllocation.accommodation_id) == record_id)
            )
            await session.delete(accommodation)
            await session.commit()
            logger.info("accommodation_deleted", accommodation_id=record_id)
            return True


class RoomAllocationRepository(SQLModelRepository[RoomAllocation]):
    """Allocations keep the accommodation's ``allocated_rooms`` counter in step."""

    model = RoomAllocation

    async def list_by_accommodation(self, accommodation_id: int) -> list[RoomAllocation]:
        return await self._list(
            col(RoomAllocation.accommodation_id) == accommodation_id,
            order_by=(col(RoomAllocation.id),),
        )

    async def list_by_guest(self, guest_id: int) -> list[RoomAllocation]:
        return await self._list(
            col(RoomAllocation.guest_id) == guest_id, order_by=(col(RoomAllocation.id),)
        )

    async def add(self, record: RoomAllocation) -> RoomAllocation:
        async with AsyncSession(self._engine) as session:
            accommodation = await session.get(Accommodation, record.accommodation_id)
            if accommodation:
                accommodation.allocated_rooms += 1
                session.add(accommodation)
            session.add(record)
            await session.commit()
            await session.refresh(record)
            logger.info(
                "room_allocated",
                allocation_id=record.id,
                accommodation_id=record.accommodation_id,
                guest_id=record.guest_id,
            )
            return record

    async def update(self, record_id: int, changes: dict[str, Any]) -> RoomAllocation | None:
        """Update an allocation, shifting the room counter in the same transaction."""
        async with AsyncSession(self._engine) as session:
            allocation = await session.get(RoomAllocation, record_id)
            if allocation is None:
                return None
            previous = allocation.accommodation_id
            self._apply_changes(allocation, record_id, changes)
            if allocation.accommodation_id != previous:
                old = await session.get(Accommodation, previous)
                new = await session.get(Accommodation, allocation.accommodation_id)
                if old and old.allocated_rooms > 0:
                    old.allocated_rooms -= 1
                    session.add(old)
                if new:
                    new.allocated_rooms += 1
                    session.add(new)
            session.add(allocation)
            await self._commit(session)
            await session.refresh(allocation)
            if allocation.accommodation_id != previous:
                logger.info(
                    "allocation_moved",
                    allocation_id=record_id,
                    from_accommodation=previous,
                    to_accommodation=allocation.accommodation_id,
                )
            return allocation

    async def delete(self, record_id: int) -> bool:
        async with AsyncSession(self._engine) as session:
            allocation = await session.get(RoomAllocation, record_id)
            if not allocation:
                return False
            accommodation = await session.get(Accommodation, allocation.accommodation_id)
            if accommodation and accommodation.allocated_rooms > 0:
                accommodation.allocated_rooms -= 1
                session.add(accommodation)
            await session.delete(allocation)
            await session.commit()
            logger.info("room_released", allocation_id=record_id)
            return True
