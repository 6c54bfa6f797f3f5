"""Salon contact settings.

Revision ID: 0002
Revises: 0001
Create Date: 2026-10-18
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0002"
down_revision = "0001"
branch_labels = None
depends_on = None

_COLUMNS = (
    ("phone", 32),
    ("email", 320),
    ("address", 512),
    ("website", 255),
)


def upgrade() -> None:
    with op.batch_alter_table("salons") as batch_op:
        for name, length in _COLUMNS:
            batch_op.add_column(sa.Column(name, sa.String(length=length)))


def downgrade() -> None:
    with op.batch_alter_table("salons") as batch_op:
        for name, _ in reversed(_COLUMNS):
            batch_op.drop_column(name)
