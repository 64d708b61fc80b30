"""SQLAlchemy ORM model for the designer_stats table."""

from sqlalchemy import CheckConstraint, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class DesignerStatsModel(Base, TimestampMixin):
    """ORM model for per-designer counters.

    Rows are created by upsert on a designer's first counted event and are
    never deleted.
    """

    __tablename__ = "designer_stats"
    __table_args__ = (
        CheckConstraint(
            "art_count >= 0 AND download_count >= 0 AND view_count >= 0 "
            "AND followers_count >= 0",
            name="counters_non_negative",
        ),
    )

    designer_id: Mapped[str] = mapped_column(String(255), primary_key=True)
    art_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    download_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    view_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )
    followers_count: Mapped[int] = mapped_column(
        Integer, nullable=False, default=0, server_default="0"
    )

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"<DesignerStatsModel(designer_id={self.designer_id}, "
            f"art_count={self.art_count})>"
        )
