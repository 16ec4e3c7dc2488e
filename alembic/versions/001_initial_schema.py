"""Initial database schema.

Revision ID: 001_initial
Revises: None
Create Date: 2026-10-19

Creates the booking marketplace tables:
- Listings
- Bookings and inquiries
- Booking payments, host wallets and the transaction ledger
"""

from typing import Sequence

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers
revision: str = "001_initial"
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

MONEY = sa.Numeric(18, 6)
# Commission splits and balances derived from them
SHARE = sa.Numeric(20, 8)


def upgrade() -> None:
    """Create all database tables."""

    # ==================== LISTINGS ====================
    op.create_table(
        "listings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("title", sa.String(200), nullable=False),
        sa.Column("description", sa.Text),
        sa.Column("listing_type", sa.String(30), nullable=False),
        sa.Column("approval_status", sa.String(20), server_default="pending", index=True),
        sa.Column("is_available", sa.Boolean, server_default=sa.true()),
        sa.Column("price_per_night", MONEY, nullable=False),
        sa.Column("max_guests", sa.Integer, server_default="1"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== BOOKINGS ====================
    op.create_table(
        "bookings",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("guest_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id"), nullable=False, index=True),
        sa.Column("room_id", postgresql.UUID(as_uuid=True)),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("property_type", sa.String(30), nullable=False),
        sa.Column("check_in", sa.Date, nullable=False, index=True),
        sa.Column("check_out", sa.Date, nullable=False),
        sa.Column("num_guests", sa.Integer, nullable=False, server_default="1"),
        sa.Column("total_price", MONEY, nullable=False),
        sa.Column("commission_amount", SHARE, nullable=False),
        sa.Column("status", sa.String(20), server_default="pending", index=True),
        sa.Column("payment_status", sa.String(20), server_default="pending", index=True),
        sa.Column("cancelled_by", sa.String(10)),
        sa.Column("cancellation_reason", sa.Text),
        sa.Column("special_requests", sa.Text),
        sa.Column("confirmed_at", sa.DateTime(timezone=True)),
        sa.Column("cancelled_at", sa.DateTime(timezone=True)),
        sa.Column("completed_at", sa.DateTime(timezone=True)),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("check_out > check_in", name="ck_bookings_dates"),
        sa.CheckConstraint("num_guests >= 1", name="ck_bookings_num_guests"),
        sa.CheckConstraint("total_price >= 0", name="ck_bookings_total_price"),
        sa.CheckConstraint("commission_amount >= 0", name="ck_bookings_commission"),
        # No payment before the host accepts the booking
        sa.CheckConstraint(
            "payment_status = 'pending' OR status IN ('confirmed', 'completed')",
            name="ck_bookings_paid_after_confirm",
        ),
    )

    op.create_table(
        "inquiries",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("listing_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("listings.id"), nullable=False, index=True),
        sa.Column("guest_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("message", sa.Text, nullable=False),
        sa.Column("contact_phone", sa.String(20)),
        sa.Column("status", sa.String(20), server_default="new"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # ==================== PAYMENTS ====================
    op.create_table(
        "booking_payments",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("booking_id", postgresql.UUID(as_uuid=True), sa.ForeignKey("bookings.id"), nullable=False, unique=True),
        sa.Column("guest_id", postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("amount", MONEY, nullable=False),
        sa.Column("commission_rate", sa.Numeric(5, 2), nullable=False),
        sa.Column("commission_amount", SHARE, nullable=False),
        sa.Column("host_earnings", SHARE, nullable=False),
        sa.Column("currency", sa.String(3), server_default="USD"),
        sa.Column("payment_method", sa.String(30), nullable=False),
        sa.Column("transaction_reference", sa.String(100), nullable=False),
        sa.Column("status", sa.String(20), server_default="completed"),
        sa.Column("paid_at", sa.DateTime(timezone=True)),
        sa.Column("refunded_at", sa.DateTime(timezone=True)),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "host_wallets",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("host_id", postgresql.UUID(as_uuid=True), nullable=False, unique=True),
        sa.Column("wallet_number", sa.String(12)),
        sa.Column("verified", sa.Boolean, server_default=sa.false()),
        sa.Column("available_balance", SHARE, server_default="0"),
        sa.Column("total_earnings", SHARE, server_default="0"),
        sa.Column("total_commission_paid", SHARE, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    op.create_table(
        "transactions",
        sa.Column("id", postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column("user_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("type", sa.String(30), nullable=False),
        sa.Column("amount", SHARE, nullable=False),
        sa.Column("status", sa.String(20), server_default="completed"),
        sa.Column("reference_id", postgresql.UUID(as_uuid=True), nullable=False, index=True),
        sa.Column("reference_type", sa.String(20), server_default="booking"),
        sa.Column("description", sa.Text),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )


def downgrade() -> None:
    """Drop all tables in reverse dependency order."""
    op.drop_table("transactions")
    op.drop_table("host_wallets")
    op.drop_table("booking_payments")
    op.drop_table("inquiries")
    op.drop_table("bookings")
    op.drop_table("listings")
