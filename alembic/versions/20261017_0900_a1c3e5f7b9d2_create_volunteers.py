"""create volunteers table

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-17 09:00:00.000000+00:00

"""
from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d2'
down_revision: str | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Upgrade database schema."""
    op.create_table(
        'volunteers',
        sa.Column(
            'id',
            sa.Integer(),
            autoincrement=True,
            nullable=False,
            comment='Auto-incrementing integer primary key',
        ),
        sa.Column(
            'name',
            sa.String(length=255),
            nullable=False,
            comment='Full name as entered at registration',
        ),
        sa.Column(
            'phone',
            sa.String(length=32),
            nullable=False,
            comment='Contact phone number (unique registration key)',
        ),
        sa.Column(
            'email',
            sa.String(length=255),
            nullable=True,
            comment='Optional contact email',
        ),
        sa.Column(
            'ward',
            sa.String(length=120),
            nullable=False,
            comment='Free-text locality the volunteer serves',
        ),
        sa.Column(
            'interest',
            sa.String(length=255),
            nullable=True,
            comment="Optional area of interest (e.g. 'Health', 'Education')",
        ),
        sa.Column(
            'status',
            sa.Enum(
                'ACTIVE',
                'INACTIVE',
                'SUSPENDED',
                name='volunteer_status',
                native_enum=False,
                length=16,
            ),
            nullable=False,
            comment='ACTIVE, INACTIVE or SUSPENDED',
        ),
        sa.Column(
            'created_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment='Timestamp of record creation',
        ),
        sa.Column(
            'updated_at',
            sa.DateTime(timezone=True),
            server_default=sa.func.now(),
            nullable=False,
            comment='Timestamp of last update',
        ),
        sa.PrimaryKeyConstraint('id', name=op.f('pk_volunteers')),
        sa.UniqueConstraint('phone', name='uq_volunteers_phone'),
    )
    op.create_index(op.f('ix_volunteers_ward'), 'volunteers', ['ward'], unique=False)
    op.create_index(op.f('ix_volunteers_status'), 'volunteers', ['status'], unique=False)


def downgrade() -> None:
    """Downgrade database schema."""
    op.drop_index(op.f('ix_volunteers_status'), table_name='volunteers')
    op.drop_index(op.f('ix_volunteers_ward'), table_name='volunteers')
    op.drop_table('volunteers')
