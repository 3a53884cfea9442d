"""Add clients and link bookings to them.

Revision ID: 20261018_0002
Revises: 20261018_0001
Create Date: 2026-10-18 00:00:02
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20261018_0002"
down_revision: Union[str, None] = "20261018_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "clients",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=255), nullable=True),
        sa.Column("phone", sa.String(length=32), nullable=True),
        sa.Column("notes", sa.Text(), nullable=True),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    )
    op.create_index("ix_clients_email", "clients", ["email"], unique=False)
    op.create_index("ix_clients_phone", "clients", ["phone"], unique=False)

    op.add_column("bookings", sa.Column("client_id", sa.Integer(), nullable=True))
    op.create_foreign_key(
        "fk_bookings_client_id_clients",
        "bookings",
        "clients",
        ["client_id"],
        ["id"],
        ondelete="SET NULL",
    )
    op.create_index("ix_bookings_client_id", "bookings", ["client_id"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_bookings_client_id", table_name="bookings")
    op.drop_constraint("fk_bookings_client_id_clients", "bookings", type_="foreignkey")
    op.drop_column("bookings", "client_id")
    op.drop_index("ix_clients_phone", table_name="clients")
    op.drop_index("ix_clients_email", table_name="clients")
    op.drop_table("clients")
