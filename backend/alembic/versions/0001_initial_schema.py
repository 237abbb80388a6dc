"""Initial intranet schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    user_role_enum = sa.Enum("ADMIN", "MEMBER", name="userrole")
    user_status_enum = sa.Enum("ACTIVE", "SUSPENDED", name="userstatus")
    booking_status_enum = sa.Enum(
        "PENDING", "CONFIRMED", "REJECTED", name="bookingstatus"
    )
    season_type_enum = sa.Enum("LOW", "HIGH", "TENNIS", name="seasontype")

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("full_name", sa.String(length=255)),
        sa.Column("apartment", sa.String(length=64)),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "apartments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("price_per_night", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("max_guests", sa.Integer(), nullable=False, server_default="1"),
        *_timestamps(),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "apartment_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("apartments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("start_date", sa.Date(), nullable=False),
        sa.Column("end_date", sa.Date(), nullable=False),
        sa.Column("status", booking_status_enum, nullable=False),
        sa.Column("guest_name", sa.String(length=255), nullable=False),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("notes", sa.String(length=1024)),
        *_timestamps(),
        sa.CheckConstraint("start_date <= end_date", name="ck_bookings_date_order"),
    )
    op.create_index(
        "ix_bookings_apartment_start", "bookings", ["apartment_id", "start_date"]
    )

    bind = op.get_bind()
    if bind.dialect.name == "postgresql":
        # Half-open ranges so a checkout day may be the next check-in day.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            """
            ALTER TABLE bookings
            ADD CONSTRAINT ex_bookings_no_overlap
            EXCLUDE USING gist (
                apartment_id WITH =,
                daterange(start_date, end_date, '[)') WITH &&
            )
            WHERE (status <> 'REJECTED')
            """
        )

    op.create_table(
        "season_settings",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("year", sa.Integer(), nullable=False, unique=True),
        sa.Column("low_season_price", sa.Integer(), nullable=False),
        sa.Column("high_season_price", sa.Integer(), nullable=False),
        sa.Column("tennis_season_price", sa.Integer(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "season_weeks",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "season_setting_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("season_settings.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("week_number", sa.Integer(), nullable=False),
        sa.Column("season_type", season_type_enum, nullable=False),
        sa.UniqueConstraint(
            "season_setting_id", "week_number", name="uq_season_weeks_setting_week"
        ),
    )

    op.create_table(
        "pages",
        sa.Column("id", sa.String(length=120), primary_key=True),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("content", sa.Text(), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "user_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("users.id", ondelete="SET NULL"),
        ),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("booking_id", sa.Uuid(as_uuid=True)),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("payload", sa.JSON()),
        sa.Column("ip_address", sa.String(length=64)),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index("ix_audit_events_booking_id", "audit_events", ["booking_id"])


def downgrade() -> None:
    op.drop_index("ix_audit_events_booking_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_table("pages")
    op.drop_table("season_weeks")
    sa.Enum(name="seasontype").drop(op.get_bind(), checkfirst=False)
    op.drop_table("season_settings")
    op.drop_index("ix_bookings_apartment_start", table_name="bookings")
    op.drop_table("bookings")
    sa.Enum(name="bookingstatus").drop(op.get_bind(), checkfirst=False)
    op.drop_table("apartments")
    op.drop_table("users")
    sa.Enum(name="userstatus").drop(op.get_bind(), checkfirst=False)
    sa.Enum(name="userrole").drop(op.get_bind(), checkfirst=False)
