"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import AsyncExitStack
from datetime import date
from typing import Any

import pytest
from fastapi import FastAPI
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.pool import StaticPool
from sqlmodel import SQLModel

from eventdesk.config.settings import Settings
from eventdesk.models.database import (
    Accommodation,
    Ceremony,
    Guest,
    MealOption,
    User,
    WeddingEvent,
)
from eventdesk.types import Role
from eventdesk.web.app import create_app
from eventdesk.web.auth.passwords import hash_password
from eventdesk.web.dependencies import Repositories, build_repositories

PASSWORD = "correct-horse-battery"

LoginAs = Callable[..., Awaitable[AsyncClient]]


@pytest.fixture()
async def async_engine() -> AsyncIterator[AsyncEngine]:
    """In-memory SQLite engine with all tables created."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture()
def settings() -> Settings:
    return Settings(
        database_url="sqlite+aiosqlite:///:memory:",
        secret_key="test-secret",
        use_database=True,
        rate_limit_per_minute=0,
    )


@pytest.fixture()
def app(settings: Settings, async_engine: AsyncEngine) -> FastAPI:
    """Create a fresh app instance wired to the test engine."""
    return create_app(settings=settings, engine=async_engine)


@pytest.fixture()
def repos(async_engine: AsyncEngine) -> Repositories:
    return build_repositories(async_engine)


@pytest.fixture()
async def client(app: FastAPI) -> AsyncIterator[AsyncClient]:
    """An anonymous client. Cookies are secure, so the base URL is https."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="https://test") as ac:
        yield ac


@pytest.fixture()
async def login_as(app: FastAPI, repos: Repositories) -> AsyncIterator[LoginAs]:
    """Return a coroutine that creates (if needed) and logs in a user.

    Each call gets its own client, so every principal has its own cookie jar.
    """
    async with AsyncExitStack() as stack:

        async def _login(username: str, role: Role = Role.COUPLE) -> AsyncClient:
            if await repos.users.get_by_username(username) is None:
                await repos.users.create(username, hash_password(PASSWORD), role=role)
            ac = await stack.enter_async_context(
                AsyncClient(transport=ASGITransport(app=app), base_url="https://test")
            )
            resp = await ac.post(
                "/api/auth/login", json={"username": username, "password": PASSWORD}
            )
            assert resp.status_code == 200, resp.text
            return ac

        yield _login


class Factory:
    """Inserts domain records straight through the repositories."""

    def __init__(self, repos: Repositories) -> None:
        self.repos = repos

    async def user(self, username: str, role: Role = Role.COUPLE) -> User:
        existing = await self.repos.users.get_by_username(username)
        if existing:
            return existing
        return await self.repos.users.create(username, hash_password(PASSWORD), role=role)

    async def event(self, owner: User, **overrides: Any) -> WeddingEvent:
        assert owner.id is not None
        fields: dict[str, Any] = {
            "title": "Summer Wedding",
            "couple_names": "Asha & Ravi",
            "bride_name": "Asha",
            "groom_name": "Ravi",
            "start_date": date(2026, 6, 12),
            "end_date": date(2026, 6, 14),
            "location": "Udaipur",
            "created_by": owner.id,
        }
        fields.update(overrides)
        return await self.repos.events.add(WeddingEvent(**fields))

    async def guest(self, event: WeddingEvent, **overrides: Any) -> Guest:
        assert event.id is not None
        fields: dict[str, Any] = {
            "event_id": event.id,
            "first_name": "Meera",
            "last_name": "Shah",
            "side": "bride",
            "email": "meera@example.com",
        }
        fields.update(overrides)
        return await self.repos.guests.add(Guest(**fields))

    async def ceremony(self, event: WeddingEvent, **overrides: Any) -> Ceremony:
        assert event.id is not None
        fields: dict[str, Any] = {
            "event_id": event.id,
            "name": "Sangeet",
            "ceremony_date": date(2026, 6, 12),
            "start_time": "18:00",
            "end_time": "23:00",
            "location": "Lake Palace",
        }
        fields.update(overrides)
        return await self.repos.ceremonies.add(Ceremony(**fields))

    async def meal_option(self, ceremony: Ceremony, **overrides: Any) -> MealOption:
        assert ceremony.id is not None
        fields: dict[str, Any] = {
            "event_id": ceremony.event_id,
            "ceremony_id": ceremony.id,
            "name": "Thali",
            "is_vegetarian": True,
        }
        fields.update(overrides)
        return await self.repos.meal_options.add(MealOption(**fields))

    async def accommodation(self, event: WeddingEvent, **overrides: Any) -> Accommodation:
        assert event.id is not None
        fields: dict[str, Any] = {
            "event_id": event.id,
            "name": "Lake View Hotel",
            "room_type": "deluxe",
            "capacity": 2,
            "total_rooms": 10,
        }
        fields.update(overrides)
        return await self.repos.accommodations.add(Accommodation(**fields))


@pytest.fixture()
def factory(repos: Repositories) -> Factory:
    return Factory(repos)
