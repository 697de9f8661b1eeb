"""Unit tests for session tokens, session stores and password hashing."""

from __future__ import annotations

from datetime import datetime
from typing import TYPE_CHECKING
from unittest.mock import patch

import pytest
from sqlmodel.ext.asyncio.session import AsyncSession

from eventdesk.exceptions import SessionExpiredError
from eventdesk.models.database import SessionRecord, User
from eventdesk.storage.repositories.sessions import DatabaseSessionStore, InMemorySessionStore
from eventdesk.types import Role
from eventdesk.web.auth.passwords import hash_password, verify_password
from eventdesk.web.auth.session import SessionAuth

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncEngine


def _user(user_id: int = 1, role: Role = Role.COUPLE) -> User:
    return User(id=user_id, username="asha", password_hash="x", role=role.value)


@pytest.mark.unit
class TestSessionAuth:
    async def test_create_and_validate(self) -> None:
        auth = SessionAuth("test-secret", InMemorySessionStore())
        session = await auth.create_session(_user(role=Role.PLANNER))

        data = await auth.validate_session(session.token)

        assert data is not None
        assert data.user_id == 1
        assert data.username == "asha"
        assert data.role is Role.PLANNER
        assert data.current_event is None

    async def test_invalid_token(self) -> None:
        auth = SessionAuth("test-secret", InMemorySessionStore())
        assert await auth.validate_session("invalid-token") is None
        assert await auth.validate_session("") is None

    async def test_tampered_signature(self) -> None:
        auth = SessionAuth("test-secret", InMemorySessionStore())
        session = await auth.create_session(_user())
        raw, _ = session.token.rsplit(".", 1)
        assert await auth.validate_session(f"{raw}.{'0' * 32}") is None

    async def test_different_secrets(self) -> None:
        store = InMemorySessionStore()
        session = await SessionAuth("secret-1", store).create_session(_user())
        assert await SessionAuth("secret-2", store).validate_session(session.token) is None

    async def test_destroy_session(self) -> None:
        auth = SessionAuth("test-secret", InMemorySessionStore())
        session = await auth.create_session(_user())
        await auth.destroy_session(session.token)
        assert await auth.validate_session(session.token) is None

    async def test_expired_session_is_destroyed(self) -> None:
        store = InMemorySessionStore()
        auth = SessionAuth("test-secret", store, max_age=60)
        session = await auth.create_session(_user())
        await auth.save(
            session.token, session.data.model_copy(update={"created_at": 0.0})
        )

        assert await auth.validate_session(session.token) is None
        assert await store.read(session.token) is None

    async def test_unsaved_user_is_rejected(self) -> None:
        auth = SessionAuth("test-secret", InMemorySessionStore())
        with pytest.raises(ValueError, match="unsaved user"):
            await auth.create_session(User(username="ghost", password_hash="x"))

    async def test_corrupt_payload_is_discarded(self) -> None:
        store = InMemorySessionStore()
        auth = SessionAuth("test-secret", store)
        session = await auth.create_session(_user())
        await store.write(session.token, "{not json")

        assert await auth.validate_session(session.token) is None
        assert await store.read(session.token) is None

    async def test_update_does_not_recreate_destroyed_session(self) -> None:
        store = InMemorySessionStore()
        auth = SessionAuth("test-secret", store)
        session = await auth.create_session(_user())
        await auth.destroy_session(session.token)

        with pytest.raises(SessionExpiredError):
            await auth.update(session.token, session.data)

        assert await store.read(session.token) is None


@pytest.mark.unit
class TestInMemorySessionStore:
    async def test_update_only_touches_existing_tokens(self) -> None:
        store = InMemorySessionStore()
        assert await store.update("tok", "{}") is False
        assert await store.read("tok") is None

        await store.write("tok", '{"a": 1}')
        assert await store.update("tok", '{"a": 2}') is True
        assert await store.read("tok") == '{"a": 2}'

    async def test_expired_entries_are_swept_on_new_writes(self) -> None:
        store = InMemorySessionStore(ttl=60)
        with patch("eventdesk.storage.repositories.sessions.time") as mock_time:
            mock_time.monotonic.return_value = 0.0
            for n in range(20):
                await store.write(f"old-{n}", "{}")
            mock_time.monotonic.return_value = 30.0
            await store.write("recent", "{}")
            assert len(store) == 21

            mock_time.monotonic.return_value = 100.0
            await store.write("new", "{}")

            assert len(store) == 2
            assert await store.read("recent") == "{}"
            assert await store.read("old-0") is None

    async def test_expired_entry_is_dropped_on_read(self) -> None:
        store = InMemorySessionStore(ttl=60)
        with patch("eventdesk.storage.repositories.sessions.time") as mock_time:
            mock_time.monotonic.return_value = 0.0
            await store.write("tok", "{}")
            mock_time.monotonic.return_value = 61.0

            assert await store.read("tok") is None
        assert len(store) == 0

    async def test_rewrite_keeps_original_age(self) -> None:
        store = InMemorySessionStore(ttl=60)
        with patch("eventdesk.storage.repositories.sessions.time") as mock_time:
            mock_time.monotonic.return_value = 0.0
            await store.write("tok", "{}")
            mock_time.monotonic.return_value = 50.0
            await store.write("tok", '{"a": 1}')
            mock_time.monotonic.return_value = 70.0

            assert await store.read("tok") is None


@pytest.mark.unit
class TestDatabaseSessionStore:
    async def test_write_read_delete(self, async_engine: AsyncEngine) -> None:
        store = DatabaseSessionStore(async_engine)
        await store.write("tok", '{"a": 1}')
        assert await store.read("tok") == '{"a": 1}'

        await store.write("tok", '{"a": 2}')
        assert await store.read("tok") == '{"a": 2}'

        await store.delete("tok")
        assert await store.read("tok") is None

    async def test_update_missing_token_is_refused(self, async_engine: AsyncEngine) -> None:
        store = DatabaseSessionStore(async_engine)
        assert await store.update("gone", "{}") is False
        assert await store.read("gone") is None

        await store.write("tok", "{}")
        assert await store.update("tok", '{"a": 1}') is True
        assert await store.read("tok") == '{"a": 1}'

    async def test_new_session_purges_expired_rows(self, async_engine: AsyncEngine) -> None:
        async with AsyncSession(async_engine) as session:
            session.add(
                SessionRecord(
                    token="stale",
                    data_json="{}",
                    created_at=datetime(2020, 1, 1),
                    updated_at=datetime(2020, 1, 1),
                )
            )
            await session.commit()
        store = DatabaseSessionStore(async_engine, ttl=3600)

        await store.write("fresh", "{}")

        assert await store.read("stale") is None
        assert await store.read("fresh") == "{}"

    async def test_delete_missing_token_is_a_no_op(self, async_engine: AsyncEngine) -> None:
        await DatabaseSessionStore(async_engine).delete("missing")

    async def test_session_survives_new_auth_instance(self, async_engine: AsyncEngine) -> None:
        session = await SessionAuth(
            "test-secret", DatabaseSessionStore(async_engine)
        ).create_session(_user())

        fresh = SessionAuth("test-secret", DatabaseSessionStore(async_engine))
        data = await fresh.validate_session(session.token)

        assert data is not None
        assert data.username == "asha"


@pytest.mark.unit
class TestPasswords:
    def test_hash_and_verify(self) -> None:
        hashed = hash_password("s3cret-pass")
        assert hashed != "s3cret-pass"
        assert verify_password("s3cret-pass", hashed) is True
        assert verify_password("wrong", hashed) is False

    def test_malformed_hash_never_verifies(self) -> None:
        assert verify_password("anything", "not-a-bcrypt-hash") is False

    def test_hash_refuses_passwords_bcrypt_would_truncate(self) -> None:
        with pytest.raises(ValueError, match="72 bytes"):
            hash_password("ü" * 37)

    def test_overlong_password_never_verifies(self) -> None:
        assert verify_password("x" * 100, hash_password("s3cret-pass")) is False
