"""initial_schema

Revision ID: 0001
Revises:
Create Date: 2026-10-19

Creates all tables for the facility reservations backend:
users, venues, bookings, audit_logs, change_requests.

Enum columns store the enum member name (SQLAlchemy ``Enum`` default).
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "0001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

role = sa.Enum("admin", "ministry_head", "cos", "dgroup_leader", name="role")
booking_status = sa.Enum("pending", "approved", "rejected", "cancelled", name="bookingstatus")
audit_action = sa.Enum(
    "reviewed", "pending", "approved", "rejected", "cancelled", "updated", "deleted", name="auditaction",
)
request_status = sa.Enum("pending", "approved", "rejected", name="requeststatus")


def upgrade() -> None:
    # --- users ---
    op.create_table(
        "users",
        sa.Column("id", sa.String(36), primary_key=True),
        sa.Column("full_name", sa.String(150), nullable=False),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("contact_number", sa.String(50), nullable=False),
        sa.Column("role", role, nullable=False, server_default="dgroup_leader"),
        sa.Column("password_hash", sa.String(255), nullable=False, server_default=""),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    # --- venues ---
    op.create_table(
        "venues",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("name", sa.String(150), nullable=False, unique=True),
        sa.Column("area", sa.String(50), nullable=False),
        sa.Column("capacity_min", sa.Integer, nullable=True),
        sa.Column("capacity_max", sa.Integer, nullable=True),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("is_active", sa.Boolean, nullable=False, server_default=sa.true()),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )

    # --- bookings ---
    op.create_table(
        "bookings",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("venue", sa.String(150), nullable=False),
        sa.Column("event_name", sa.String(255), nullable=False),
        sa.Column("purpose", sa.Text, nullable=False),
        sa.Column("attendees", sa.Integer, nullable=False),
        sa.Column("start_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_datetime", sa.DateTime(timezone=True), nullable=False),
        sa.Column("additional_needs", sa.Text, nullable=True),
        sa.Column("status", booking_status, nullable=False, server_default="pending"),
        sa.Column("reminder_sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.CheckConstraint("end_datetime > start_datetime", name="ck_bookings_range"),
    )
    op.create_index("ix_bookings_user_id", "bookings", ["user_id"])
    op.create_index("ix_bookings_venue_status_start", "bookings", ["venue", "status", "start_datetime"])

    if op.get_context().dialect.name == "postgresql":
        # Approved bookings on one venue may not overlap; '[)' ranges let
        # back-to-back bookings through. Enum columns hold member names.
        op.execute("CREATE EXTENSION IF NOT EXISTS btree_gist")
        op.execute(
            "ALTER TABLE bookings ADD CONSTRAINT ex_bookings_approved_overlap "
            "EXCLUDE USING gist (venue WITH =, tstzrange(start_datetime, end_datetime, '[)') WITH &&) "
            "WHERE (status = 'approved')"
        )

    # --- audit_logs ---
    op.create_table(
        "audit_logs",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer, nullable=False),
        sa.Column("admin_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("action", audit_action, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_audit_logs_booking_id", "audit_logs", ["booking_id"])

    # --- change_requests ---
    op.create_table(
        "change_requests",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("booking_id", sa.Integer, sa.ForeignKey("bookings.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.String(36), sa.ForeignKey("users.id"), nullable=False),
        sa.Column("event_name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text, nullable=False),
        sa.Column("status", request_status, nullable=False, server_default="pending"),
        sa.Column("admin_notes", sa.Text, nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index("ix_change_requests_booking_id", "change_requests", ["booking_id"])
    op.create_index("ix_change_requests_user_id", "change_requests", ["user_id"])


def downgrade() -> None:
    op.drop_table("change_requests")
    op.drop_table("audit_logs")
    op.drop_table("bookings")
    op.drop_table("venues")
    op.drop_table("users")
    for enum_type in (request_status, audit_action, booking_status, role):
        enum_type.drop(op.get_bind(), checkfirst=True)
