"""Forbid overlapping non-cancelled stays per room (PostgreSQL)

Revision ID: 20261019_0002
Revises: 20261019_0001
Create Date: 2026-10-19 00:01:00.000000

"""
from typing import Sequence, Union

from alembic import op


# revision identifiers, used by Alembic.
revision: str = '20261019_0002'
down_revision: Union[str, None] = '20261019_0001'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != 'postgresql':
        # SQLite serializes writers with BEGIN IMMEDIATE instead
        return
    op.execute('CREATE EXTENSION IF NOT EXISTS btree_gist')
    # daterange() is half-open by default: check_out == next check_in is allowed
    op.execute(
        """
        ALTER TABLE gbookings
        ADD CONSTRAINT ex_gbookings_room_stay
        EXCLUDE USING gist (
            room_id WITH =,
            daterange(check_in, check_out) WITH &&
        )
        WHERE (status <> 'cancelled')
        """
    )


def downgrade() -> None:
    bind = op.get_bind()
    if bind.dialect.name != 'postgresql':
        return
    op.execute('ALTER TABLE gbookings DROP CONSTRAINT IF EXISTS ex_gbookings_room_stay')
