"""Couple message and WhatsApp template repositories."""

from __future__ import annotations

from typing import ClassVar

from sqlmodel import col
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import CoupleMessage, WhatsappTemplate, _utc_now
from eventdesk.storage.repositories.base import SQLModelRepository


class CoupleMessageRepository(SQLModelRepository[CoupleMessage]):
    model = CoupleMessage
    immutable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "event_id", "guest_id", "created_at"}
    )

    async def list_by_event(self, event_id: int) -> list[CoupleMessage]:
        return await self._list(
            col(CoupleMessage.event_id) == event_id,
            order_by=(col(CoupleMessage.created_at).desc(), col(CoupleMessage.id).desc()),
        )


class WhatsappTemplateRepository(SQLModelRepository[WhatsappTemplate]):
    model = WhatsappTemplate
    immutable_fields: ClassVar[frozenset[str]] = frozenset(
        {"id", "event_id", "created_at", "last_used"}
    )

    async def list_by_event(
        self, event_id: int, category: str | None = None
    ) -> list[WhatsappTemplate]:
        conditions = [col(WhatsappTemplate.event_id) == event_id]
        if category:
            conditions.append(col(WhatsappTemplate.category) == category)
        return await self._list(*conditions, order_by=(col(WhatsappTemplate.id),))

    async def mark_used(self, template_id: int) -> WhatsappTemplate | None:
        async with AsyncSession(self._engine) as session:
            template = await session.get(WhatsappTemplate, template_id)
            if template is None:
                return None
            template.last_used = _utc_now()
            session.add(template)
            await session.commit()
            await session.refresh(template)
            return template
