"""Session stores: in-memory for dev/testing, SQL table for production."""

from __future__ import annotations

import time
from datetime import timedelta
from typing import TYPE_CHECKING, Protocol

import structlog
from sqlmodel import col, delete
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.models.database import SessionRecord, _utc_now

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine

logger = structlog.get_logger(__name__)


class SessionStore(Protocol):
    """Persists serialized session payloads keyed by session token.

    ``write`` and ``update`` return only once the payload is durable; failures
    propagate. ``update`` never creates a session: it returns ``False`` when
    the token is no longer stored.
    """

    async def read(self, token: str) -> str | None: ...

    async def write(self, token: str, payload: str) -> None: ...

    async def update(self, token: str, payload: str) -> bool: ...

    async def delete(self, token: str) -> None: ...


class InMemorySessionStore:
    """Process-local store. Sessions are lost on restart.

    With a ``ttl`` (seconds), entries older than it are dropped on read and
    swept whenever a new session is written.
    """

    def __init__(self, ttl: float | None = None) -> None:
        self._ttl = ttl
        self._sessions: dict[str, tuple[str, float]] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    async def read(self, token: str) -> str | None:
        entry = self._sessions.get(token)
        if entry is None:
            return None
        payload, created = entry
        if self._expired(created, time.monotonic()):
            del self._sessions[token]
            return None
        return payload

    async def write(self, token: str, payload: str) -> None:
        now = time.monotonic()
        existing = self._sessions.get(token)
        if existing is None:
            self._prune(now)
        created = existing[1] if existing else now
        self._sessions[token] = (payload, created)

    async def update(self, token: str, payload: str) -> bool:
        entry = self._sessions.get(token)
        if entry is None:
            return False
        self._sessions[token] = (payload, entry[1])
        return True

    async def delete(self, token: str) -> None:
        self._sessions.pop(token, None)

    def _expired(self, created: float, now: float) -> bool:
        return self._ttl is not None and now - created > self._ttl

    def _prune(self, now: float) -> None:
        stale = [t for t, (_, created) in self._sessions.items() if self._expired(created, now)]
        for token in stale:
            del self._sessions[token]
        if stale:
            logger.debug("sessions_pruned", store="memory", count=len(stale))


class DatabaseSessionStore:
    """Sessions kept in the ``sessions`` table.

    With a ``ttl`` (seconds), rows created longer ago are deleted whenever a
    new session is written.
    """

    def __init__(self, engine: AsyncEngine, ttl: float | None = None) -> None:
        self._engine = engine
        self._ttl = ttl

    async def read(self, token: str) -> str | None:
        async with AsyncSession(self._engine) as session:
            record = await session.get(SessionRecord, token)
            return record.data_json if record else None

    async def write(self, token: str, payload: str) -> None:
        async with AsyncSession(self._engine) as session:
            record = await session.get(SessionRecord, token)
            if record:
                record.data_json = payload
                record.updated_at = _utc_now()
            else:
                if self._ttl is not None:
                    cutoff = _utc_now() - timedelta(seconds=self._ttl)
                    await session.execute(
                        delete(SessionRecord).where(col(SessionRecord.created_at) < cutoff)
                    )
                record = SessionRecord(token=token, data_json=payload)
            session.add(record)
            await session.commit()
            logger.debug("session_written", store="database")

    async def update(self, token: str, payload: str) -> bool:
        async with AsyncSession(self._engine) as session:
            record = await session.get(SessionRecord, token)
            if record is None:
                return False
            record.data_json = payload
            record.updated_at = _utc_now()
            session.add(record)
            await session.commit()
            return True

    async def delete(self, token: str) -> None:
        async with AsyncSession(self._engine) as session:
            record = await session.get(SessionRecord, token)
            if record:
                await session.delete(record)
                await session.commit()
