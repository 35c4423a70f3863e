"""Create properties, rooms and gbookings

Revision ID: 20261019_0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy import inspect


# revision identifiers, used by Alembic.
revision: str = '20261019_0001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def _has_table(bind, name: str) -> bool:
    try:
        insp = inspect(bind)
        return insp.has_table(name)
    except Exception:
        return False

def upgrade() -> None:
    bind = op.get_bind()

    # Rooms and properties may already exist when the listing service created them first
    if not _has_table(bind, 'properties'):
        op.create_table('properties',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('address', sa.String(length=300), nullable=True),
            sa.Column('created_at', sa.DateTime(), nullable=True),
            sa.PrimaryKeyConstraint('id')
        )

    if not _has_table(bind, 'rooms'):
        op.create_table('rooms',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('property_id', sa.Integer(), nullable=False),
            sa.Column('name', sa.String(length=200), nullable=False),
            sa.Column('capacity', sa.Integer(), server_default='2', nullable=False),
            sa.Column('price', sa.String(length=50), nullable=False),
            sa.Column('available', sa.Boolean(), server_default=sa.true(), nullable=False),
            sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_rooms_property_id'), 'rooms', ['property_id'], unique=False)

    if not _has_table(bind, 'gbookings'):
        op.create_table('gbookings',
            sa.Column('id', sa.Integer(), nullable=False),
            sa.Column('traveller_id', sa.String(length=255), nullable=False),
            sa.Column('property_id', sa.Integer(), nullable=False),
            sa.Column('room_id', sa.Integer(), nullable=False),
            sa.Column('check_in', sa.Date(), nullable=False),
            sa.Column('check_out', sa.Date(), nullable=False),
            sa.Column('status', sa.String(length=20), server_default='pending', nullable=False),
            sa.Column('checkin_status', sa.String(length=20), server_default='not_checked_in', nullable=False),
            sa.Column('total_price', sa.Numeric(precision=12, scale=2), nullable=False),
            sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=True),
            sa.CheckConstraint('check_in < check_out', name='ck_gbookings_stay_range'),
            sa.ForeignKeyConstraint(['property_id'], ['properties.id'], ),
            sa.ForeignKeyConstraint(['room_id'], ['rooms.id'], ),
            sa.PrimaryKeyConstraint('id')
        )
        op.create_index(op.f('ix_gbookings_id'), 'gbookings', ['id'], unique=False)
        op.create_index(op.f('ix_gbookings_traveller_id'), 'gbookings', ['traveller_id'], unique=False)
        op.create_index(op.f('ix_gbookings_property_id'), 'gbookings', ['property_id'], unique=False)
        op.create_index(op.f('ix_gbookings_room_id'), 'gbookings', ['room_id'], unique=False)
        op.create_index('ix_gbookings_room_check_in_check_out', 'gbookings', ['room_id', 'check_in', 'check_out'], unique=False)


def downgrade() -> None:
    op.drop_table('gbookings')
    op.drop_table('rooms')
    op.drop_table('properties')
