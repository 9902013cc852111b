"""Create capacity ledger, bookings and booking days.

Revision ID: 0001
Revises:
Create Date: 2025-08-01
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
    op.create_table(
        "capacities",
        sa.Column("day", sa.Date(), nullable=False),
        sa.Column("capacity", sa.Integer(), nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("day", name="pk_capacities"),
        sa.CheckConstraint("capacity >= 0", name="ck_capacities_non_negative"),
    )

    op.create_table(
        "bookings",
        sa.Column("id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("reference", sa.String(length=40), nullable=False),
        sa.Column("customer_name", sa.String(length=120), nullable=False),
        sa.Column("customer_email", sa.String(length=120), nullable=False),
        sa.Column("vehicle_reg", sa.String(length=20), nullable=False),
        sa.Column("vehicle_reg_normalized", sa.String(length=20), nullable=False),
        sa.Column("from_date", sa.Date(), nullable=False),
        sa.Column("to_moment", sa.DateTime(timezone=True), nullable=False),
        sa.Column("status", sa.String(length=20), nullable=False),
        sa.Column("total_minor", sa.Integer(), nullable=False),
        sa.Column("currency", sa.String(length=3), nullable=False),
        sa.Column("version", sa.Integer(), nullable=False),
        sa.Column("idempotency_fingerprint", sa.String(length=64), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_bookings"),
        sa.UniqueConstraint("reference", name="uq_bookings_reference"),
        sa.UniqueConstraint(
            "idempotency_fingerprint", name="uq_bookings_idempotency_fingerprint"
        ),
        sa.CheckConstraint("total_minor >= 0", name="ck_bookings_total_non_negative"),
        sa.CheckConstraint("version >= 1", name="ck_bookings_version_positive"),
    )
    op.create_index(
        "ix_bookings_vehicle_reg_normalized", "bookings", ["vehicle_reg_normalized"]
    )
    op.create_index("ix_bookings_status", "bookings", ["status"])

    op.create_table(
        "booking_days",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("booking_id", sa.Uuid(as_uuid=True), nullable=False),
        sa.Column("day", sa.Date(), nullable=False),
        sa.PrimaryKeyConstraint("id", name="pk_booking_days"),
        sa.ForeignKeyConstraint(
            ["booking_id"],
            ["bookings.id"],
            name="fk_booking_days_booking_id_bookings",
            ondelete="CASCADE",
        ),
        sa.UniqueConstraint("booking_id", "day", name="uq_booking_days_booking_id"),
    )
    op.create_index("ix_booking_days_booking_id", "booking_days", ["booking_id"])
    op.create_index("ix_booking_days_day", "booking_days", ["day"])


def downgrade() -> None:
    op.drop_index("ix_booking_days_day", table_name="booking_days")
    op.drop_index("ix_booking_days_booking_id", table_name="booking_days")
    op.drop_table("booking_days")
    op.drop_index("ix_bookings_status", table_name="bookings")
    op.drop_index("ix_bookings_vehicle_reg_normalized", table_name="bookings")
    op.drop_table("bookings")
    op.drop_table("capacities")
