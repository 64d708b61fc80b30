"""SQLAlchemy ORM models for art groups and their variations."""

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    text,
)
from sqlalchemy.dialects.postgresql import ExcludeConstraint
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin

ONE_PRIMARY_PER_GROUP = "ex_art_variations_one_primary_per_group"
UNIQUE_FORMAT_PER_GROUP = "uq_art_variations_group_id_format_id"


class ArtGroupModel(Base, TimestampMixin):
    """ORM model for the art_groups table.

    Foreign Key Constraint:
    - category_id references categories.id with RESTRICT delete, so a
      category in use cannot disappear from under its groups
    """

    __tablename__ = "art_groups"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'inactive')", name="status_valid"),
        CheckConstraint(
            "download_count >= 0 AND view_count >= 0 AND like_count >= 0",
            name="counters_non_negative",
        ),
        Index("ix_art_groups_visible_created", "is_visible", "created_at"),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    category_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("categories.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    designer_id: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    is_premium: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )
    is_visible: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=True, server_default=text("true")
    )
    status: Mapped[str] = mapped_column(
        String(16), nullable=False, default="active", server_default="active"
    )
    download_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    like_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<ArtGroupModel(id={self.id}, title={self.title})>"


class ArtVariationModel(Base, TimestampMixin):
    """ORM model for the art_variations table.

    Constraints:
    - group_id references art_groups.id with CASCADE delete
    - at most one variation per (group, format)
    - at most one primary per group, checked at commit time so the primary
      flag can move between rows inside one transaction
    """

    __tablename__ = "art_variations"
    __table_args__ = (
        UniqueConstraint("group_id", "format_id", name=UNIQUE_FORMAT_PER_GROUP),
        CheckConstraint("width > 0 AND height > 0", name="dimensions_positive"),
        ExcludeConstraint(
            ("group_id", "="),
            name=ONE_PRIMARY_PER_GROUP,
            using="btree",
            where=text("is_primary"),
            deferrable=True,
            initially="DEFERRED",
        ),
    )

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    group_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("art_groups.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    format_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("formats.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    file_type_id: Mapped[str] = mapped_column(
        String(26),
        ForeignKey("file_types.id", ondelete="RESTRICT"),
        nullable=False,
    )
    image_url: Mapped[str] = mapped_column(Text, nullable=False)
    edit_url: Mapped[str | None] = mapped_column(Text, nullable=True)
    width: Mapped[int] = mapped_column(Integer, nullable=False)
    height: Mapped[int] = mapped_column(Integer, nullable=False)
    aspect_ratio: Mapped[str] = mapped_column(String(32), nullable=False)
    is_primary: Mapped[bool] = mapped_column(
        Boolean, nullable=False, default=False, server_default=text("false")
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<ArtVariationModel(id={self.id}, group_id={self.group_id}, "
            f"is_primary={self.is_primary})>"
        )
