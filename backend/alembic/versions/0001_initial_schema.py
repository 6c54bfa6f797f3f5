"""Initial salon, records, appointment and kennel schema.

Revision ID: 0001
Revises:
Create Date: 2026-10-17
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None

# Enum labels are the Python member names, as the ORM stores them.
user_role_enum = postgresql.ENUM(
    "ADMIN", "MANAGER", "GROOMER", "RECEPTIONIST", name="userrole", create_type=False
)
user_status_enum = postgresql.ENUM(
    "INVITED", "ACTIVE", "SUSPENDED", name="userstatus", create_type=False
)
pet_type_enum = postgresql.ENUM("DOG", "CAT", "OTHER", name="pettype", create_type=False)
size_class_enum = postgresql.ENUM(
    "SMALL", "MEDIUM", "LARGE", "EXTRA_LARGE", name="sizeclass", create_type=False
)
appointment_status_enum = postgresql.ENUM(
    "SCHEDULED",
    "CONFIRMED",
    "ON_HOLD",
    "CHECKED_IN",
    "IN_PROGRESS",
    "READY_FOR_PICKUP",
    "COMPLETED",
    "CANCELLED",
    name="appointmentstatus",
    create_type=False,
)
payment_method_enum = postgresql.ENUM(
    "CASH",
    "CARD",
    "STRIPE",
    "SQUARE",
    "PAYPAL",
    "CHECK",
    "BANK_TRANSFER",
    name="paymentmethod",
    create_type=False,
)
payment_status_enum = postgresql.ENUM(
    "COMPLETED", "PENDING", "FAILED", name="paymentstatus", create_type=False
)

_ENUMS = (
    user_role_enum,
    user_status_enum,
    pet_type_enum,
    size_class_enum,
    appointment_status_enum,
    payment_method_enum,
    payment_status_enum,
)


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


def _salon_fk() -> sa.Column:
    return sa.Column(
        "salon_id",
        sa.Uuid(as_uuid=True),
        sa.ForeignKey("salons.id", ondelete="CASCADE"),
        nullable=False,
    )


def upgrade() -> None:
    bind = op.get_bind()
    for enum_type in _ENUMS:
        enum_type.create(bind, checkfirst=True)

    op.create_table(
        "salons",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("slug", sa.String(length=255), nullable=False, unique=True),
        *_timestamps(),
    )

    op.create_table(
        "users",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column("email", sa.String(length=320), nullable=False, unique=True),
        sa.Column("hashed_password", sa.String(length=255), nullable=False),
        sa.Column("first_name", sa.String(length=120), nullable=False),
        sa.Column("last_name", sa.String(length=120), nullable=False),
        sa.Column("phone_number", sa.String(length=32)),
        sa.Column("role", user_role_enum, nullable=False),
        sa.Column("status", user_status_enum, nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_users_salon_id", "users", ["salon_id"])

    op.create_table(
        "clients",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("email", sa.String(length=320)),
        sa.Column("phone", sa.String(length=32)),
        sa.Column("address", sa.String(length=512)),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_clients_salon_name", "clients", ["salon_id", "name"])

    op.create_table(
        "pets",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("name", sa.String(length=120), nullable=False),
        sa.Column("pet_type", pet_type_enum, nullable=False),
        sa.Column("breed", sa.String(length=120)),
        sa.Column("size", size_class_enum),
        sa.Column("age", sa.Integer()),
        sa.Column("weight", sa.Numeric(6, 2)),
        sa.Column("notes", sa.Text()),
        sa.Column("special_instructions", sa.Text()),
        sa.Column("grooming_notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index("ix_pets_client_id", "pets", ["client_id"])

    op.create_table(
        "services",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("description", sa.Text()),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("is_active", sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
    )

    op.create_table(
        "appointments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column(
            "client_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("clients.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "pet_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("pets.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("total_price", sa.Numeric(10, 2), nullable=False),
        sa.Column("status", appointment_status_enum, nullable=False),
        sa.Column("notes", sa.Text()),
        sa.Column("check_in_time", sa.DateTime(timezone=True)),
        sa.Column("checked_in_by", sa.String(length=255)),
        sa.Column("check_out_time", sa.DateTime(timezone=True)),
        sa.Column("checked_out_by", sa.String(length=255)),
        sa.Column("kennel_number", sa.String(length=32)),
        sa.Column("kennel_notes", sa.Text()),
        *_timestamps(),
    )
    op.create_index(
        "ix_appointments_salon_scheduled", "appointments", ["salon_id", "scheduled_at"]
    )
    op.create_index(
        "ix_appointments_salon_status", "appointments", ["salon_id", "status"]
    )

    op.create_table(
        "appointment_services",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "appointment_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column(
            "service_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("services.id", ondelete="RESTRICT"),
            nullable=False,
        ),
        sa.Column("price", sa.Numeric(10, 2), nullable=False),
        *_timestamps(),
    )

    op.create_table(
        "kennels",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column("kennel_number", sa.String(length=32), nullable=False),
        sa.Column("size_class", size_class_enum, nullable=False),
        sa.Column("is_occupied", sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column(
            "current_appointment_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="SET NULL"),
        ),
        sa.Column("notes", sa.Text()),
        *_timestamps(),
        sa.UniqueConstraint(
            "salon_id", "kennel_number", name="uq_kennels_salon_number"
        ),
    )

    op.create_table(
        "payments",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        _salon_fk(),
        sa.Column(
            "appointment_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="SET NULL"),
        ),
        sa.Column("amount", sa.Numeric(10, 2), nullable=False),
        sa.Column("payment_method", payment_method_enum, nullable=False),
        sa.Column("payment_status", payment_status_enum, nullable=False),
        sa.Column("transaction_id", sa.String(length=255)),
        sa.Column("notes", sa.Text()),
        sa.Column("payment_date", sa.DateTime(timezone=True), nullable=False),
        *_timestamps(),
    )
    op.create_index("ix_payments_salon_date", "payments", ["salon_id", "payment_date"])

    op.create_table(
        "audit_events",
        sa.Column("id", sa.Uuid(as_uuid=True), primary_key=True),
        sa.Column(
            "salon_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("salons.id", ondelete="SET NULL"),
        ),
        sa.Column(
            "appointment_id",
            sa.Uuid(as_uuid=True),
            sa.ForeignKey("appointments.id", ondelete="SET NULL"),
        ),
        sa.Column("actor_name", sa.String(length=255)),
        sa.Column("event_type", sa.String(length=120), nullable=False),
        sa.Column("description", sa.String(length=1024)),
        sa.Column("payload", sa.JSON()),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
        ),
    )
    op.create_index(
        "ix_audit_events_appointment_id", "audit_events", ["appointment_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_audit_events_appointment_id", table_name="audit_events")
    op.drop_table("audit_events")
    op.drop_index("ix_payments_salon_date", table_name="payments")
    op.drop_table("payments")
    op.drop_table("kennels")
    op.drop_table("appointment_services")
    op.drop_index("ix_appointments_salon_status", table_name="appointments")
    op.drop_index("ix_appointments_salon_scheduled", table_name="appointments")
    op.drop_table("appointments")
    op.drop_table("services")
    op.drop_index("ix_pets_client_id", table_name="pets")
    op.drop_table("pets")
    op.drop_index("ix_clients_salon_name", table_name="clients")
    op.drop_table("clients")
    op.drop_index("ix_users_salon_id", table_name="users")
    op.drop_table("users")
    op.drop_table("salons")

    bind = op.get_bind()
    for enum_type in reversed(_ENUMS):
        enum_type.drop(bind, checkfirst=True)
