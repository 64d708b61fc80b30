"""create reference tables

Categories, formats and file types referenced by art groups and their
variations.

Revision ID: 3c1f8a2d9e01
Revises:
Create Date: 2026-09-14 10:02:11.418733

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "3c1f8a2d9e01"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = ("categories", "formats", "file_types")


def upgrade() -> None:
    """Create categories, formats and file_types."""
    for table in TABLES:
        op.create_table(
            table,
            sa.Column("id", sa.String(length=26), nullable=False),
            sa.Column("name", sa.String(length=100), nullable=False),
            sa.Column("slug", sa.String(length=100), nullable=False),
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
            sa.PrimaryKeyConstraint("id", name=f"pk_{table}"),
            sa.UniqueConstraint("slug", name=f"uq_{table}_slug"),
        )


def downgrade() -> None:
    """Drop the reference tables."""
    for table in reversed(TABLES):
        op.drop_table(table)
