"""Unit tests for the event access guard."""

from __future__ import annotations

from datetime import date
from typing import TYPE_CHECKING

import pytest

from eventdesk.exceptions import AccessDeniedError, TenantNotFoundError
from eventdesk.models.database import WeddingEvent
from eventdesk.tenancy.guard import authorize, is_privileged, visible_events
from eventdesk.types import Role
from eventdesk.web.tenant_context import Principal

if TYPE_CHECKING:
    from eventdesk.web.dependencies import Repositories
    from tests.conftest import Factory


def _event(created_by: int, event_id: int = 4) -> WeddingEvent:
    return WeddingEvent(
        id=event_id,
        title="Winter Wedding",
        couple_names="A & B",
        bride_name="A",
        groom_name="B",
        start_date=date(2026, 12, 1),
        end_date=date(2026, 12, 2),
        location="Goa",
        created_by=created_by,
    )


@pytest.mark.unit
class TestIsPrivileged:
    @pytest.mark.parametrize("role", [Role.ADMIN, Role.STAFF, Role.PLANNER])
    def test_staff_roles_bypass_ownership(self, role: Role) -> None:
        assert is_privileged(role) is True

    def test_couple_is_not_privileged(self) -> None:
        assert is_privileged(Role.COUPLE) is False


@pytest.mark.unit
class TestAuthorize:
    def test_missing_event_is_not_found(self) -> None:
        principal = Principal(user_id=1, username="owner", role=Role.ADMIN)
        with pytest.raises(TenantNotFoundError):
            authorize(None, principal, event_id=4)

    def test_couple_owning_event_is_authorized(self) -> None:
        event = _event(created_by=1)
        principal = Principal(user_id=1, username="owner", role=Role.COUPLE)
        assert authorize(event, principal) is event

    def test_couple_not_owning_event_is_denied(self) -> None:
        principal = Principal(user_id=2, username="other", role=Role.COUPLE)
        with pytest.raises(AccessDeniedError):
            authorize(_event(created_by=1), principal)

    @pytest.mark.parametrize("role", [Role.ADMIN, Role.STAFF, Role.PLANNER])
    def test_privileged_roles_reach_any_event(self, role: Role) -> None:
        event = _event(created_by=1)
        principal = Principal(user_id=99, username="staff", role=role)
        assert authorize(event, principal) is event


@pytest.mark.unit
class TestVisibleEvents:
    async def test_couple_sees_only_own_events_newest_first(
        self, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("owner")
        other = await factory.user("other")
        first = await factory.event(owner, title="First")
        second = await factory.event(owner, title="Second")
        await factory.event(other, title="Someone else's")
        assert owner.id is not None

        principal = Principal(user_id=owner.id, username="owner", role=Role.COUPLE)
        events = await visible_events(repos.events, principal)

        assert [e.id for e in events] == [second.id, first.id]

    async def test_admin_sees_all_events(self, factory: Factory, repos: Repositories) -> None:
        owner = await factory.user("owner")
        other = await factory.user("other")
        await factory.event(owner)
        await factory.event(other)

        principal = Principal(user_id=999, username="root", role=Role.ADMIN)
        events = await visible_events(repos.events, principal)

        assert len(events) == 2

    async def test_no_events(self, repos: Repositories) -> None:
        principal = Principal(user_id=1, username="nobody", role=Role.COUPLE)
        assert await visible_events(repos.events, principal) == []
