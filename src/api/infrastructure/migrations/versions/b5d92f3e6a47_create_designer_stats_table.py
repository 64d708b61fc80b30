"""create designer_stats table

Per-designer counters, created on a designer's first counted event.

Revision ID: b5d92f3e6a47
Revises: 8e4b7c0a5d12
Create Date: 2026-09-15 09:41:03.277560

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "b5d92f3e6a47"
down_revision: Union[str, Sequence[str], None] = "8e4b7c0a5d12"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create designer_stats."""
    op.create_table(
        "designer_stats",
        sa.Column("designer_id", sa.String(length=255), nullable=False),
        sa.Column("art_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column(
            "followers_count", sa.Integer(), nullable=False, server_default="0"
        ),
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.func.now(),
        ),
        sa.PrimaryKeyConstraint("designer_id", name="pk_designer_stats"),
        sa.CheckConstraint(
            "art_count >= 0 AND download_count >= 0 AND view_count >= 0 "
            "AND followers_count >= 0",
            name="ck_designer_stats_counters_non_negative",
        ),
    )


def downgrade() -> None:
    """Drop designer_stats."""
    op.drop_table("designer_stats")
