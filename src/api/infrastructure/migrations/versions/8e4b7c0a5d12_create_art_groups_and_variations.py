"""create art groups and variations

Art groups own one or more variations. At most one variation per format per
group, and at most one primary per group. The primary rule is an EXCLUDE
constraint deferred to commit so the flag can move between rows inside one
transaction.

Revision ID: 8e4b7c0a5d12
Revises: 3c1f8a2d9e01
Create Date: 2026-09-14 10:17:45.902114

"""

from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op


# revision identifiers, used by Alembic.
revision: str = "8e4b7c0a5d12"
down_revision: Union[str, Sequence[str], None] = "3c1f8a2d9e01"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
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
    ]


def upgrade() -> None:
    """Create art_groups and art_variations with their constraints."""
    op.create_table(
        "art_groups",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("title", sa.String(length=255), nullable=False),
        sa.Column("category_id", sa.String(length=26), nullable=False),
        sa.Column("designer_id", sa.String(length=255), nullable=False),
        sa.Column(
            "is_premium", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        sa.Column(
            "is_visible", sa.Boolean(), nullable=False, server_default=sa.true()
        ),
        sa.Column(
            "status", sa.String(length=16), nullable=False, server_default="active"
        ),
        sa.Column("download_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("view_count", sa.Integer(), nullable=False, server_default="0"),
        sa.Column("like_count", sa.Integer(), nullable=False, server_default="0"),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_art_groups"),
        sa.ForeignKeyConstraint(
            ["category_id"],
            ["categories.id"],
            name="fk_art_groups_category_id_categories",
            ondelete="RESTRICT",
        ),
        sa.CheckConstraint(
            "status IN ('active', 'inactive')", name="ck_art_groups_status_valid"
        ),
        sa.CheckConstraint(
            "download_count >= 0 AND view_count >= 0 AND like_count >= 0",
            name="ck_art_groups_counters_non_negative",
        ),
    )
    op.create_index("ix_art_groups_category_id", "art_groups", ["category_id"])
    op.create_index("ix_art_groups_designer_id", "art_groups", ["designer_id"])
    op.create_index(
        "ix_art_groups_visible_created", "art_groups", ["is_visible", "created_at"]
    )

    op.create_table(
        "art_variations",
        sa.Column("id", sa.String(length=26), nullable=False),
        sa.Column("group_id", sa.String(length=26), nullable=False),
        sa.Column("format_id", sa.String(length=26), nullable=False),
        sa.Column("file_type_id", sa.String(length=26), nullable=False),
        sa.Column("image_url", sa.Text(), nullable=False),
        sa.Column("edit_url", sa.Text(), nullable=True),
        sa.Column("width", sa.Integer(), nullable=False),
        sa.Column("height", sa.Integer(), nullable=False),
        sa.Column("aspect_ratio", sa.String(length=32), nullable=False),
        sa.Column(
            "is_primary", sa.Boolean(), nullable=False, server_default=sa.false()
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name="pk_art_variations"),
        sa.ForeignKeyConstraint(
            ["group_id"],
            ["art_groups.id"],
            name="fk_art_variations_group_id_art_groups",
            ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["format_id"],
            ["formats.id"],
            name="fk_art_variations_format_id_formats",
            ondelete="RESTRICT",
        ),
        sa.ForeignKeyConstraint(
            ["file_type_id"],
            ["file_types.id"],
            name="fk_art_variations_file_type_id_file_types",
            ondelete="RESTRICT",
        ),
        sa.UniqueConstraint(
            "group_id", "format_id", name="uq_art_variations_group_id_format_id"
        ),
        sa.CheckConstraint(
            "width > 0 AND height > 0", name="ck_art_variations_dimensions_positive"
        ),
    )
    op.create_index("ix_art_variations_group_id", "art_variations", ["group_id"])
    op.create_index("ix_art_variations_format_id", "art_variations", ["format_id"])

    op.execute(
        """
        ALTER TABLE art_variations
        ADD CONSTRAINT ex_art_variations_one_primary_per_group
        EXCLUDE USING btree (group_id WITH =) WHERE (is_primary)
        DEFERRABLE INITIALLY DEFERRED
        """
    )


def downgrade() -> None:
    """Drop art_variations, then art_groups."""
    op.drop_table("art_variations")
    op.drop_table("art_groups")
