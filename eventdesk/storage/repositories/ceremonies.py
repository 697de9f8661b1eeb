"""Ceremony, meal option and meal selection repositories."""

from __future__ import annotations

from typing import ClassVar

import structlog
from sqlmodel import col, delete
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import Ceremony, GuestCeremony, GuestMealSelection, MealOption
from eventdesk.storage.repositories.base import SQLModelRepository

logger = structlog.get_logger(__name__)


class CeremonyRepository(SQLModelRepository[Ceremony]):
    model = Ceremony
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "event_id"})

    async def list_by_event(self, event_id: int) -> list[Ceremony]:
        return await self._list(
            col(Ceremony.event_id) == event_id,
            order_by=(col(Ceremony.ceremony_date), col(Ceremony.start_time), col(Ceremony.id)),
        )

    async def delete(self, record_id: int) -> bool:
        """Delete a ceremony with its meal options, selections and attendance."""
        async with AsyncSession(self._engine) as session:
            ceremony = await session.get(Ceremony, record_id)
            if not ceremony:
                return False
            for child in (GuestMealSelection, MealOption, GuestCeremony):
                await session.execute(
                    delete(child).where(col(child.ceremony_id) == record_id)  # type: ignore[attr-defined]
                )
            event_id = ceremony.event_id
            await session.delete(ceremony)
            await session.commit()
            logger.info("ceremony_deleted", ceremony_id=record_id, event_id=event_id)
            return True


class MealOptionRepository(SQLModelRepository[MealOption]):
    """Meal options inherit ``event_id`` from their ceremony; both are fixed."""

    model = MealOption
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "event_id", "ceremony_id"})

    async def list_by_ceremony(self, ceremony_id: int) -> list[MealOption]:
        return await self._list(
            col(MealOption.ceremony_id) == ceremony_id, order_by=(col(MealOption.id),)
        )

    async def delete(self, record_id: int) -> bool:
        async with AsyncSession(self._engine) as session:
            option = await session.get(MealOption, record_id)
            if not option:
                return False
            await session.execute(
                delete(GuestMealSelection).where(
                    col(GuestMealSelection.meal_option_id) == record_id
                )
            )
            await session.delete(option)
            await session.commit()
            logger.info("meal_option_deleted", meal_option_id=record_id)
            return True


class MealSelectionRepository(SQLModelRepository[GuestMealSelection]):
    model = GuestMealSelection
    immutable_fields: ClassVar[frozenset[str]] = frozenset({"id", "guest_id"})

    async def list_by_guest(self, guest_id: int) -> list[GuestMealSelection]:
        return await self._list(
            col(GuestMealSelection.guest_id) == guest_id,
            order_by=(col(GuestMealSelection.id),),
        )
