"""User repository."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import structlog
from sqlalchemy import text
from sqlalchemy.exc import IntegrityError
from sqlmodel import col, select
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.exceptions import ConflictError
from eventdesk.models.database import User
from eventdesk.types import Role

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


class UserRepository:
    """Database-backed principal store."""

    def __init__(self, engine: AsyncEngine) -> None:
        self._engine = engine
        self._register_lock = asyncio.Lock()

    async def create(
        self,
        username: str,
        password_hash: str,
        role: Role = Role.COUPLE,
        name: str = "",
        email: str = "",
    ) -> User:
        async with AsyncSession(self._engine) as session:
            user = User(
                username=username,
                password_hash=password_hash,
                role=role.value,
                name=name or username,
                email=email,
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError("Username already taken") from exc
            await session.refresh(user)
            logger.info("user_created", user_id=user.id, username=username, role=role.value)
            return user

    async def register(
        self, username: str, password_hash: str, name: str = "", email: str = ""
    ) -> User:
        """Self-registration: the first account becomes admin, later ones couples.

        The emptiness check and the insert share one transaction, serialized
        in-process by a lock and, on PostgreSQL, by a table lock across workers.
        """
        async with self._register_lock, AsyncSession(self._engine) as session:
            if self._engine.dialect.name == "postgresql":
                await session.execute(text("LOCK TABLE users IN SHARE ROW EXCLUSIVE MODE"))
            existing = await session.execute(select(User.id).limit(1))
            role = Role.COUPLE if existing.first() is not None else Role.ADMIN
            user = User(
                username=username,
                password_hash=password_hash,
                role=role.value,
                name=name or username,
                email=email,
            )
            session.add(user)
            try:
                await session.commit()
            except IntegrityError as exc:
                await session.rollback()
                raise ConflictError("Username already taken") from exc
            await session.refresh(user)
            logger.info("user_created", user_id=user.id, username=username, role=role.value)
            return user

    async def get_by_id(self, user_id: int) -> User | None:
        async with AsyncSession(self._engine) as session:
            return await session.get(User, user_id)

    async def get_by_username(self, username: str) -> User | None:
        async with AsyncSession(self._engine) as session:
            stmt = select(User).where(col(User.username) == username)
            result = await session.execute(stmt)
            return result.scalars().first()
