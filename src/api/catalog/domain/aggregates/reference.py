"""Shared reference data: categories, formats and file types.

Groups and variations point at these rows but never own them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum

from catalog.domain.exceptions import CatalogValidationError
from catalog.domain.value_objects import CategoryId, FileTypeId, FormatId

_SLUG_PATTERN = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")


class ReferenceKind(StrEnum):
    """The three kinds of reference data."""

    CATEGORY = "category"
    FORMAT = "format"
    FILE_TYPE = "file_type"


def validate_name(name: str) -> str:
    cleaned = (name or "").strip()
    if not cleaned or len(cleaned) > 100:
        raise CatalogValidationError("Name must be between 1 and 100 characters")
    return cleaned


def validate_slug(slug: str) -> str:
    """Require a lowercase kebab-case slug of at most 100 characters."""
    if not slug or len(slug) > 100 or not _SLUG_PATTERN.match(slug):
        raise CatalogValidationError(
            f"Slug must be lowercase kebab-case (got {slug!r})"
        )
    return slug


class _EditableEntry:
    """Name and slug edits shared by every kind of reference entry."""

    name: str
    slug: str

    def rename(self, name: str) -> None:
        self.name = validate_name(name)

    def change_slug(self, slug: str) -> None:
        self.slug = validate_slug(slug)


@dataclass
class Category(_EditableEntry):
    """A thematic category works are filed under (e.g. "Black Friday")."""

    id: CategoryId
    name: str
    slug: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str, slug: str) -> Category:
        return cls(
            id=CategoryId.generate(),
            name=validate_name(name),
            slug=validate_slug(slug),
        )


@dataclass
class Format(_EditableEntry):
    """A dimensions class of a variation (feed, stories, banner...)."""

    id: FormatId
    name: str
    slug: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str, slug: str) -> Format:
        return cls(
            id=FormatId.generate(),
            name=validate_name(name),
            slug=validate_slug(slug),
        )


@dataclass
class FileType(_EditableEntry):
    """The deliverable kind of a variation (canva, psd, png...)."""

    id: FileTypeId
    name: str
    slug: str
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(cls, name: str, slug: str) -> FileType:
        return cls(
            id=FileTypeId.generate(),
            name=validate_name(name),
            slug=validate_slug(slug),
        )


ReferenceEntry = Category | Format | FileType
