"""SQLAlchemy ORM models for the reference data tables."""

from sqlalchemy import String
from sqlalchemy.orm import Mapped, mapped_column

from infrastructure.database.models import Base, TimestampMixin


class CategoryModel(Base, TimestampMixin):
    """ORM model for the categories table."""

    __tablename__ = "categories"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<CategoryModel(id={self.id}, slug={self.slug})>"


class FormatModel(Base, TimestampMixin):
    """ORM model for the formats table."""

    __tablename__ = "formats"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<FormatModel(id={self.id}, slug={self.slug})>"


class FileTypeModel(Base, TimestampMixin):
    """ORM model for the file_types table."""

    __tablename__ = "file_types"

    id: Mapped[str] = mapped_column(String(26), primary_key=True)
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    slug: Mapped[str] = mapped_column(String(100), nullable=False, unique=True)

    def __repr__(self) -> str:
        """Return string representation."""
        return f"<FileTypeModel(id={self.id}, slug={self.slug})>"
