"""Principal and tenant context carried explicitly through each request."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from eventdesk.types import ContextSource, Role

if TYPE_CHECKING:
    from eventdesk.models.database import WeddingEvent
    from eventdesk.models.session import SessionData


@dataclass(frozen=True, slots=True)
class Principal:
    """The authenticated user acting on a request."""

    user_id: int
    username: str
    role: Role

    @classmethod
    def from_session(cls, data: SessionData) -> Principal:
        return cls(user_id=data.user_id, username=data.username, role=data.role)


@dataclass(frozen=True, slots=True)
class TenantContext:
    """Immutable tenant context: the authorized event and how it was chosen."""

    event_id: int
    event: WeddingEvent
    principal: Principal
    source: ContextSource
