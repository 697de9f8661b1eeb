"""create event tables

Revision ID: 0a1b2c3d4e5f
Revises:
Create Date: 2026-10-18 09:00:00.000000

"""

from collections.abc import Sequence

import sqlalchemy as sa
import sqlmodel.sql.sqltypes
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "0a1b2c3d4e5f"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

_str = sqlmodel.sql.sqltypes.AutoString


def upgrade() -> None:
    """Create principals, sessions, events and every event-scoped table."""
    # --- 1. Principals and sessions ---
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("username", _str(), nullable=False),
        sa.Column("password_hash", _str(), nullable=False),
        sa.Column("name", _str(), nullable=False, server_default=""),
        sa.Column("email", _str(), nullable=False, server_default=""),
        sa.Column("role", _str(), nullable=False, server_default="couple"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_users_username"), "users", ["username"], unique=True)

    op.create_table(
        "sessions",
        sa.Column("token", _str(), nullable=False),
        sa.Column("data_json", _str(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("updated_at", sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint("token"),
    )

    # --- 2. Tenants ---
    op.create_table(
        "wedding_events",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("title", _str(), nullable=False),
        sa.Column("couple_names", _str(), nullable=False),
        sa.Column("bride_name", _str(), nullable=False),
        sa.Column("groom_name", _str(), nullable=False),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("location", _str(), nullable=False),
        sa.Column("description", _str(), nullable=True),
        sa.Column("rsvp_deadline", sa.Date(), nullable=True),
        sa.Column("allow_plus_ones", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("allow_children_details", sa.Boolean(), nullable=False, server_default="true"),
        sa.Column("created_by", sa.Integer(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["created_by"], ["users.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_wedding_events_created_by"), "wedding_events", ["created_by"])

    # --- 3. Resources carrying event_id ---
    op.create_table(
        "guests",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("first_name", _str(), nullable=False),
        sa.Column("last_name", _str(), nullable=False),
        sa.Column("email", _str(), nullable=True),
        sa.Column("phone", _str(), nullable=True),
        sa.Column("whatsapp_number", _str(), nullable=True),
        sa.Column("side", _str(), nullable=False),
        sa.Column("relationship", _str(), nullable=True),
        sa.Column("is_family", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("rsvp_status", _str(), nullable=False, server_default="pending"),
        sa.Column("rsvp_date", sa.Date(), nullable=True),
        sa.Column("plus_one_allowed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("plus_one_confirmed", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("plus_one_name", _str(), nullable=True),
        sa.Column("plus_one_email", _str(), nullable=True),
        sa.Column("plus_one_phone", _str(), nullable=True),
        sa.Column("plus_one_rsvp_contact", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("dietary_restrictions", _str(), nullable=True),
        sa.Column("needs_accommodation", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("notes", _str(), nullable=True),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_guests_event_id"), "guests", ["event_id"])

    op.create_table(
        "ceremonies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("name", _str(), nullable=False),
        sa.Column("ceremony_date", sa.Date(), nullable=False),
        sa.Column("start_time", _str(), nullable=False),
        sa.Column("end_time", _str(), nullable=False),
        sa.Column("location", _str(), nullable=False),
        sa.Column("description", _str(), nullable=True),
        sa.Column("attire_code", _str(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_ceremonies_event_id"), "ceremonies", ["event_id"])

    op.create_table(
        "accommodations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("name", _str(), nullable=False),
        sa.Column("room_type", _str(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        sa.Column("total_rooms", sa.Integer(), nullable=False),
        sa.Column("allocated_rooms", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("price_per_night", _str(), nullable=True),
        sa.Column("special_features", _str(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_accommodations_event_id"), "accommodations", ["event_id"])

    op.create_table(
        "meal_options",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("ceremony_id", sa.Integer(), nullable=False),
        sa.Column("name", _str(), nullable=False),
        sa.Column("description", _str(), nullable=True),
        sa.Column("is_vegetarian", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_vegan", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_gluten_free", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("is_nut_free", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.ForeignKeyConstraint(["ceremony_id"], ["ceremonies.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_meal_options_event_id"), "meal_options", ["event_id"])
    op.create_index(op.f("ix_meal_options_ceremony_id"), "meal_options", ["ceremony_id"])

    op.create_table(
        "couple_messages",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("message", _str(), nullable=False),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_couple_messages_event_id"), "couple_messages", ["event_id"])
    op.create_index(op.f("ix_couple_messages_guest_id"), "couple_messages", ["guest_id"])

    op.create_table(
        "whatsapp_templates",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("event_id", sa.Integer(), nullable=False),
        sa.Column("name", _str(), nullable=False),
        sa.Column("category", _str(), nullable=False),
        sa.Column("template_id", _str(), nullable=True),
        sa.Column("content", _str(), nullable=False),
        sa.Column("parameters_json", _str(), nullable=False, server_default="[]"),
        sa.Column("language", _str(), nullable=False, server_default="en_US"),
        sa.Column("created_at", sa.DateTime(), nullable=False),
        sa.Column("last_used", sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(["event_id"], ["wedding_events.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_whatsapp_templates_event_id"), "whatsapp_templates", ["event_id"])

    # --- 4. Resources reaching their event through a guest ---
    op.create_table(
        "guest_ceremonies",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("ceremony_id", sa.Integer(), nullable=False),
        sa.Column("attending", sa.Boolean(), nullable=False, server_default="false"),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"]),
        sa.ForeignKeyConstraint(["ceremony_id"], ["ceremonies.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_guest_ceremonies_guest_id"), "guest_ceremonies", ["guest_id"])
    op.create_index(op.f("ix_guest_ceremonies_ceremony_id"), "guest_ceremonies", ["ceremony_id"])

    op.create_table(
        "travel_info",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("travel_mode", _str(), nullable=True),
        sa.Column("arrival_date", sa.Date(), nullable=True),
        sa.Column("arrival_time", _str(), nullable=True),
        sa.Column("arrival_location", _str(), nullable=True),
        sa.Column("departure_date", sa.Date(), nullable=True),
        sa.Column("departure_time", _str(), nullable=True),
        sa.Column("departure_location", _str(), nullable=True),
        sa.Column("flight_number", _str(), nullable=True),
        sa.Column("needs_transportation", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("transportation_type", _str(), nullable=True),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(op.f("ix_travel_info_guest_id"), "travel_info", ["guest_id"], unique=True)

    op.create_table(
        "room_allocations",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("accommodation_id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("room_number", _str(), nullable=True),
        sa.Column("check_in_date", sa.Date(), nullable=True),
        sa.Column("check_in_status", _str(), nullable=False, server_default="pending"),
        sa.Column("check_out_date", sa.Date(), nullable=True),
        sa.Column("check_out_status", _str(), nullable=False, server_default="pending"),
        sa.Column("special_requests", _str(), nullable=True),
        sa.Column("includes_plus_one", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("includes_children", sa.Boolean(), nullable=False, server_default="false"),
        sa.Column("children_count", sa.Integer(), nullable=False, server_default="0"),
        sa.ForeignKeyConstraint(["accommodation_id"], ["accommodations.id"]),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_room_allocations_accommodation_id"), "room_allocations", ["accommodation_id"]
    )
    op.create_index(op.f("ix_room_allocations_guest_id"), "room_allocations", ["guest_id"])

    op.create_table(
        "guest_meal_selections",
        sa.Column("id", sa.Integer(), nullable=False),
        sa.Column("guest_id", sa.Integer(), nullable=False),
        sa.Column("meal_option_id", sa.Integer(), nullable=False),
        sa.Column("ceremony_id", sa.Integer(), nullable=False),
        sa.Column("notes", _str(), nullable=True),
        sa.ForeignKeyConstraint(["guest_id"], ["guests.id"]),
        sa.ForeignKeyConstraint(["meal_option_id"], ["meal_options.id"]),
        sa.ForeignKeyConstraint(["ceremony_id"], ["ceremonies.id"]),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index(
        op.f("ix_guest_meal_selections_guest_id"), "guest_meal_selections", ["guest_id"]
    )
    op.create_index(
        op.f("ix_guest_meal_selections_meal_option_id"),
        "guest_meal_selections",
        ["meal_option_id"],
    )
    op.create_index(
        op.f("ix_guest_meal_selections_ceremony_id"), "guest_meal_selections", ["ceremony_id"]
    )


def downgrade() -> None:
    """Drop every table, children first."""
    for table in (
        "guest_meal_selections",
        "room_allocations",
        "travel_info",
        "guest_ceremonies",
        "whatsapp_templates",
        "couple_messages",
        "meal_options",
        "accommodations",
        "ceremonies",
        "guests",
        "wedding_events",
        "sessions",
        "users",
    ):
        op.drop_table(table)
