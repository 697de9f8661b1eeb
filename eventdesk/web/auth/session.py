"""Cookie-based session authentication."""

from __future__ import annotations

import hashlib
import hmac
import secrets
import time
from dataclasses import dataclass
from typing import TYPE_CHECKING

import structlog
from fastapi import HTTPException, Request
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError

from eventdesk.exceptions import SessionExpiredError, SessionPersistenceError
from eventdesk.models.session import SessionData

if TYPE_CHECKING:
    from eventdesk.models.database import User
    from eventdesk.storage.repositories.sessions import SessionStore

logger = structlog.get_logger(__name__)


@dataclass(slots=True)
class CurrentSession:
    """The signed token of a request and the payload last read or written for it."""

    token: str
    data: SessionData


class SessionAuth:
    """Signed-token sessions persisted through a ``SessionStore``."""

    def __init__(self, secret_key: str, store: SessionStore, max_age: int = 86400) -> None:
        self._secret = secret_key.encode()
        self._store = store
        self._max_age = max_age

    @property
    def max_age(self) -> int:
        return self._max_age

    async def create_session(self, user: User) -> CurrentSession:
        """Create a new session for ``user`` and return it with its signed token."""
        if user.id is None:
            msg = "Cannot open a session for an unsaved user"
            raise ValueError(msg)
        token = secrets.token_urlsafe(32)
        signed_token = f"{token}.{self._sign(token)}"
        data = SessionData(
            user_id=user.id,
            username=user.username,
            role=user.role,
            created_at=time.time(),
        )
        await self.save(signed_token, data)
        logger.info("session_created", user_id=user.id, username=user.username)
        return CurrentSession(token=signed_token, data=data)

    async def validate_session(self, token: str) -> SessionData | None:
        """Validate a session token and return its payload."""
        if not token or "." not in token:
            return None

        raw_token, signature = token.rsplit(".", 1)
        if not hmac.compare_digest(signature, self._sign(raw_token)):
            return None

        payload = await self._store.read(token)
        if payload is None:
            return None
        try:
            data = SessionData.model_validate_json(payload)
        except ValidationError:
            logger.warning("session_payload_invalid")
            await self.destroy_session(token)
            return None

        if time.time() - data.created_at > self._max_age:
            await self.destroy_session(token)
            return None

        return data

    async def save(self, token: str, data: SessionData) -> None:
        """Persist ``data`` and wait for the store to acknowledge it."""
        try:
            await self._store.write(token, data.model_dump_json())
        except (OSError, SQLAlchemyError) as exc:
            logger.error("session_persist_failed", user_id=data.user_id, error=str(exc))
            raise SessionPersistenceError from exc

    async def update(self, token: str, data: SessionData) -> None:
        """Overwrite an existing session's payload.

        Unlike :meth:`save` this never recreates a session that was destroyed
        in the meantime; that case raises :class:`SessionExpiredError`.
        """
        try:
            stored = await self._store.update(token, data.model_dump_json())
        except (OSError, SQLAlchemyError) as exc:
            logger.error("session_persist_failed", user_id=data.user_id, error=str(exc))
            raise SessionPersistenceError from exc
        if not stored:
            logger.info("session_update_after_destroy", user_id=data.user_id)
            raise SessionExpiredError

    async def destroy_session(self, token: str) -> None:
        """Remove a session."""
        await self._store.delete(token)
        logger.info("session_destroyed")

    def _sign(self, data: str) -> str:
        """Create HMAC signature for a token."""
        return hmac.new(self._secret, data.encode(), hashlib.sha256).hexdigest()[:32]


def get_session_auth(request: Request) -> SessionAuth:
    """Return the application's session manager."""
    auth: SessionAuth = request.app.state.session_auth
    return auth


async def require_auth(request: Request) -> CurrentSession:
    """Dependency: reject requests without a valid session cookie."""
    cookie_name: str = request.app.state.settings.session_cookie_name
    token = request.cookies.get(cookie_name, "")
    data = await get_session_auth(request).validate_session(token)
    if data is None:
        raise HTTPException(status_code=401, detail="Not authenticated")
    return CurrentSession(token=token, data=data)
