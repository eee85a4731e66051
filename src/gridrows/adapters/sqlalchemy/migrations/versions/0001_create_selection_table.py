"""Create the materialized selection table.

Revision ID: 0001
Revises:
Create Date: 2026-10-17 00:00:00

"""

from __future__ import annotations

from collections.abc import Sequence

import sqlalchemy as sa
from alembic import op

revision: str = "0001"
down_revision: str | Sequence[str] | None = None
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None

IDENTIFIER_COLUMNS = 50


def upgrade() -> None:
    op.create_table(
        "gridrows_selection",
        sa.Column("selection_id", sa.String(length=32), nullable=False),
        sa.Column("seq_id", sa.Integer(), nullable=False),
        *(
            sa.Column(f"c{position:03d}", sa.String(length=4000), nullable=True)
            for position in range(1, IDENTIFIER_COLUMNS + 1)
        ),
        sa.PrimaryKeyConstraint("selection_id", "seq_id"),
    )


def downgrade() -> None:
    op.drop_table("gridrows_selection")
