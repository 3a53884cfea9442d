"""Create catalogue, booking and venue settings tables.

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "packages",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column("duration_min", sa.Integer(), nullable=False),
        sa.Column("included_balls", sa.Integer(), nullable=True),
        sa.Column("is_promo", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("is_public", sa.Boolean(), server_default=sa.text("true"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    op.create_table(
        "addons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("price_cents", sa.Integer(), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    op.create_table(
        "resources",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("capacity", sa.Integer(), server_default=sa.text("1"), nullable=False),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("package_id", sa.Integer(), nullable=False),
        sa.Column("resource_id", sa.Integer(), nullable=True),
        sa.Column("group_size", sa.Integer(), nullable=False),
        sa.Column("customer_name", sa.String(length=255), nullable=False),
        sa.Column("customer_email", sa.String(length=255), nullable=True),
        sa.Column("customer_phone", sa.String(length=32), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=False),
        sa.Column("nocturne", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("status", sa.String(length=32), nullable=False),
        sa.Column("total_cents", sa.Integer(), nullable=True),
        sa.Column("deposit_cents", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.ForeignKeyConstraint(["package_id"], ["packages.id"], ondelete="RESTRICT"),
        sa.ForeignKeyConstraint(["resource_id"], ["resources.id"], ondelete="SET NULL"),
    )
    op.create_index("ix_bookings_package_id", "bookings", ["package_id"], unique=False)
    op.create_index("ix_bookings_resource_id", "bookings", ["resource_id"], unique=False)
    op.create_index("ix_bookings_status", "bookings", ["status"], unique=False)
    op.create_index(
        "ix_bookings_resource_id_start_time",
        "bookings",
        ["resource_id", "start_time"],
        unique=False,
    )

    op.create_table(
        "booking_addons",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("booking_id", sa.Integer(), nullable=False),
        sa.Column("addon_id", sa.Integer(), nullable=False),
        sa.Column("quantity", sa.Integer(), nullable=False),
        sa.ForeignKeyConstraint(["booking_id"], ["bookings.id"], ondelete="CASCADE"),
        sa.ForeignKeyConstraint(["addon_id"], ["addons.id"], ondelete="RESTRICT"),
    )
    op.create_index("ix_booking_addons_booking_id", "booking_addons", ["booking_id"], unique=False)
    op.create_index("ix_booking_addons_addon_id", "booking_addons", ["addon_id"], unique=False)

    op.create_table(
        "venue_settings",
        sa.Column("id", sa.String(length=32), primary_key=True),
        sa.Column("nocturne_threshold", sa.Integer(), server_default=sa.text("20"), nullable=False),
        sa.Column(
            "nocturne_per_person_cents",
            sa.Integer(),
            server_default=sa.text("400"),
            nullable=False,
        ),
        sa.Column("min_players", sa.Integer(), server_default=sa.text("8"), nullable=False),
        sa.Column(
            "penalty_under_min_cents",
            sa.Integer(),
            server_default=sa.text("2500"),
            nullable=False,
        ),
        sa.Column(
            "opening_hours_json",
            postgresql.JSONB(astext_type=sa.Text()),
            server_default=sa.text("'{}'::jsonb"),
            nullable=False,
        ),
        sa.Column("stripe_enabled", sa.Boolean(), server_default=sa.text("false"), nullable=False),
        sa.Column("deposit_type", sa.String(length=16), server_default="NONE", nullable=False),
        sa.Column("deposit_fixed_cents", sa.Integer(), nullable=True),
        sa.Column("deposit_percent", sa.Integer(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.CheckConstraint(
            "deposit_type IN ('NONE', 'FIXED', 'PERCENT')",
            name="ck_venue_settings_deposit_type",
        ),
    )


def downgrade() -> None:
    op.drop_table("venue_settings")
    op.drop_index("ix_booking_addons_addon_id", table_name="booking_addons")
    op.drop_index("ix_booking_addons_booking_id", table_name="booking_addons")
    op.drop_table("booking_addons")
    op.drop_index("ix_bookings_resource_id_start_time", table_name="bookings")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_resource_id", table_name="bookings")
    op.drop_index("ix_bookings_package_id", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("resources")
    op.drop_table("addons")
    op.drop_table("packages")
