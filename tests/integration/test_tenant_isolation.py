"""Integration tests for cross-event isolation of scoped resources."""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from eventdesk.models.database import GuestMealSelection, RoomAllocation
from eventdesk.types import Role

if TYPE_CHECKING:
    from eventdesk.web.dependencies import Repositories
    from tests.conftest import Factory, LoginAs


@pytest.mark.integration
class TestResourceEventWins:
    async def test_update_cannot_move_guest_to_another_event(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner, title="Home")
        elsewhere = await factory.event(owner, title="Elsewhere")
        guest = await factory.guest(home)
        ac = await login_as("asha")

        resp = await ac.put(
            f"/api/guests/{guest.id}",
            params={"eventId": elsewhere.id},
            json={"eventId": elsewhere.id, "firstName": "Kiran"},
        )

        assert resp.status_code == 200
        assert resp.json()["eventId"] == home.id
        assert resp.json()["firstName"] == "Kiran"
        stored = await repos.guests.get(guest.id)  # type: ignore[arg-type]
        assert stored is not None and stored.event_id == home.id

    async def test_conflicting_query_does_not_block_resource_access(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        foreign = await factory.event(await factory.user("other"))
        guest = await factory.guest(home)
        ac = await login_as("asha")

        resp = await ac.get(f"/api/guests/{guest.id}", params={"eventId": foreign.id})

        assert resp.status_code == 200
        assert resp.json()["eventId"] == home.id

    async def test_meal_option_inherits_ceremony_event(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        ceremony = await factory.ceremony(home)
        ac = await login_as("asha")

        resp = await ac.post(
            f"/api/ceremonies/{ceremony.id}/meals",
            json={"name": "Paneer", "eventId": elsewhere.id, "ceremonyId": 999},
        )

        assert resp.status_code == 201
        assert resp.json()["eventId"] == home.id
        assert resp.json()["ceremonyId"] == ceremony.id


@pytest.mark.integration
class TestForeignResourcesLookMissing:
    async def test_couple_cannot_read_or_change_foreign_guest(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        foreign = await factory.event(await factory.user("other"))
        guest = await factory.guest(foreign, first_name="Original")
        await factory.event(await factory.user("asha"))
        ac = await login_as("asha")

        read = await ac.get(f"/api/guests/{guest.id}")
        write = await ac.put(f"/api/guests/{guest.id}", json={"firstName": "Hacked"})
        delete = await ac.delete(f"/api/guests/{guest.id}")

        for resp in (read, write, delete):
            assert resp.status_code == 404
            assert resp.json()["detail"] == "Guest not found"
        stored = await repos.guests.get(guest.id)  # type: ignore[arg-type]
        assert stored is not None and stored.first_name == "Original"

    async def test_missing_and_foreign_are_indistinguishable(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        foreign = await factory.event(await factory.user("other"))
        ceremony = await factory.ceremony(foreign)
        ac = await login_as("asha")

        foreign_resp = await ac.get(f"/api/ceremonies/{ceremony.id}")
        missing_resp = await ac.get("/api/ceremonies/9999")

        assert foreign_resp.status_code == missing_resp.status_code == 404
        assert foreign_resp.json() == missing_resp.json() == {"detail": "Ceremony not found"}

    async def test_foreign_event_collections(self, login_as: LoginAs, factory: Factory) -> None:
        foreign = await factory.event(await factory.user("other"))
        ac = await login_as("asha")

        listing = await ac.get(f"/api/events/{foreign.id}/guests")
        creating = await ac.post(
            f"/api/events/{foreign.id}/guests",
            json={"firstName": "Sneaky", "lastName": "Guest", "side": "groom"},
        )

        assert listing.status_code == 404
        assert creating.status_code == 404

    async def test_foreign_allocation(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        foreign = await factory.event(await factory.user("other"))
        guest = await factory.guest(foreign)
        accommodation = await factory.accommodation(foreign)
        assert guest.id is not None and accommodation.id is not None
        allocation = await repos.allocations.add(
            RoomAllocation(accommodation_id=accommodation.id, guest_id=guest.id)
        )
        ac = await login_as("asha")

        resp = await ac.delete(f"/api/allocations/{allocation.id}")

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Allocation not found"
        assert len(await repos.allocations.list_by_accommodation(accommodation.id)) == 1


@pytest.mark.integration
class TestCrossEventRelationsRefused:
    """A planner sees every event, yet may not link records across events."""

    async def test_allocation_across_events(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        first = await factory.event(owner)
        second = await factory.event(owner)
        guest = await factory.guest(first)
        accommodation = await factory.accommodation(second)
        assert accommodation.id is not None and guest.id is not None
        ac = await login_as("planner", Role.PLANNER)

        resp = await ac.post(
            "/api/allocations",
            json={"accommodationId": accommodation.id, "guestId": guest.id},
        )

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Guest not found"
        assert await repos.allocations.list_by_accommodation(accommodation.id) == []
        refreshed = await repos.accommodations.get(accommodation.id)
        assert refreshed is not None and refreshed.allocated_rooms == 0

    async def test_allocation_cannot_move_to_foreign_accommodation(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        guest = await factory.guest(home)
        room = await factory.accommodation(home)
        foreign_room = await factory.accommodation(elsewhere)
        assert guest.id is not None and room.id is not None and foreign_room.id is not None
        allocation = await repos.allocations.add(
            RoomAllocation(accommodation_id=room.id, guest_id=guest.id)
        )
        ac = await login_as("asha")

        resp = await ac.put(
            f"/api/allocations/{allocation.id}", json={"accommodationId": foreign_room.id}
        )

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Accommodation not found"
        stored = await repos.allocations.get(allocation.id)  # type: ignore[arg-type]
        assert stored is not None and stored.accommodation_id == room.id
        assert (await repos.accommodations.get(room.id)).allocated_rooms == 1  # type: ignore[union-attr]
        assert (await repos.accommodations.get(foreign_room.id)).allocated_rooms == 0  # type: ignore[union-attr]

    async def test_meal_selection_across_events(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        guest = await factory.guest(home)
        foreign_ceremony = await factory.ceremony(elsewhere)
        foreign_option = await factory.meal_option(foreign_ceremony)
        assert guest.id is not None
        ac = await login_as("asha")

        resp = await ac.post(
            f"/api/guests/{guest.id}/meal-selections",
            json={"ceremonyId": foreign_ceremony.id, "mealOptionId": foreign_option.id},
        )

        assert resp.status_code == 404
        assert resp.json()["detail"] == "Ceremony not found"
        assert await repos.meal_selections.list_by_guest(guest.id) == []

    async def test_meal_option_from_another_ceremony(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        event = await factory.event(await factory.user("asha"))
        guest = await factory.guest(event)
        sangeet = await factory.ceremony(event)
        reception = await factory.ceremony(event, name="Reception")
        reception_meal = await factory.meal_option(reception)
        assert guest.id is not None
        ac = await login_as("asha")

        resp = await ac.post(
            f"/api/guests/{guest.id}/meal-selections",
            json={"ceremonyId": sangeet.id, "mealOptionId": reception_meal.id},
        )

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Meal option does not belong to this ceremony"
        assert await repos.meal_selections.list_by_guest(guest.id) == []

    async def test_meal_selection_update_cannot_switch_to_foreign_option(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        guest = await factory.guest(home)
        ceremony = await factory.ceremony(home)
        option = await factory.meal_option(ceremony)
        foreign_option = await factory.meal_option(await factory.ceremony(elsewhere))
        assert guest.id is not None and ceremony.id is not None and option.id is not None
        selection = await repos.meal_selections.add(
            GuestMealSelection(guest_id=guest.id, meal_option_id=option.id, ceremony_id=ceremony.id)
        )
        ac = await login_as("asha")

        resp = await ac.put(
            f"/api/meal-selections/{selection.id}", json={"mealOptionId": foreign_option.id}
        )

        assert resp.status_code == 404
        stored = await repos.meal_selections.get(selection.id)  # type: ignore[arg-type]
        assert stored is not None and stored.meal_option_id == option.id

    async def test_attendance_across_events(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        guest = await factory.guest(home)
        foreign_ceremony = await factory.ceremony(elsewhere)
        assert guest.id is not None
        ac = await login_as("asha")

        resp = await ac.post(
            f"/api/guests/{guest.id}/attendance",
            json={"ceremonyId": foreign_ceremony.id, "attending": True},
        )

        assert resp.status_code == 404
        assert await repos.attendance.list_by_guest(guest.id) == []

    async def test_message_about_foreign_guest(
        self, login_as: LoginAs, factory: Factory, repos: Repositories
    ) -> None:
        owner = await factory.user("asha")
        home = await factory.event(owner)
        elsewhere = await factory.event(owner)
        stranger = await factory.guest(elsewhere)
        assert home.id is not None
        ac = await login_as("asha")

        resp = await ac.post(
            f"/api/events/{home.id}/messages",
            json={"guestId": stranger.id, "message": "Hello"},
        )

        assert resp.status_code == 404
        assert await repos.messages.list_by_event(home.id) == []


@pytest.mark.integration
class TestContextSources:
    async def test_query_wins_without_overwriting_session(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        owner = await factory.user("asha")
        selected = await factory.event(owner, title="Selected")
        other = await factory.event(owner, title="Other")
        await factory.guest(selected, first_name="InSelected")
        await factory.guest(other, first_name="InOther")
        ac = await login_as("asha")
        await ac.post("/api/current-event", json={"eventId": selected.id})

        by_query = await ac.get("/api/guests", params={"eventId": other.id})
        by_session = await ac.get("/api/guests")

        assert [g["firstName"] for g in by_query.json()] == ["InOther"]
        assert [g["firstName"] for g in by_session.json()] == ["InSelected"]
        assert (await ac.get("/api/auth/user")).json()["currentEventId"] == selected.id

    async def test_malformed_query_event_id(self, login_as: LoginAs, factory: Factory) -> None:
        event = await factory.event(await factory.user("asha"))
        ac = await login_as("asha")
        await ac.post("/api/current-event", json={"eventId": event.id})

        resp = await ac.get("/api/guests", params={"eventId": "4; DROP TABLE guests"})

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Invalid event ID"

    async def test_empty_query_falls_through_to_session(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        event = await factory.event(await factory.user("asha"))
        await factory.guest(event)
        ac = await login_as("asha")
        await ac.post("/api/current-event", json={"eventId": event.id})

        resp = await ac.get("/api/guests", params={"eventId": ""})

        assert resp.status_code == 200
        assert len(resp.json()) == 1

    async def test_no_context(self, login_as: LoginAs, factory: Factory) -> None:
        await factory.event(await factory.user("asha"))
        ac = await login_as("asha")

        resp = await ac.get("/api/guests")

        assert resp.status_code == 400
        assert resp.json()["detail"] == "Event context required"

    async def test_malformed_path_event_id(self, login_as: LoginAs) -> None:
        ac = await login_as("asha")
        resp = await ac.get("/api/events/not-a-number")
        assert resp.status_code == 400

    async def test_couple_lists_only_own_events(
        self, login_as: LoginAs, factory: Factory
    ) -> None:
        mine = await factory.event(await factory.user("asha"))
        await factory.event(await factory.user("other"))
        ac = await login_as("asha")

        resp = await ac.get("/api/events")

        assert [e["id"] for e in resp.json()] == [mine.id]
