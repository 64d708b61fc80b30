"""ArtVariation entity: one format-specific rendition of an art group."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from catalog.domain.exceptions import CatalogValidationError
from catalog.domain.value_objects import (
    ArtGroupId,
    ArtVariationId,
    FileTypeId,
    FormatId,
    ImageDimensions,
    VariationContent,
)


def validate_url(value: str, field_name: str) -> str:
    """Require an absolute http(s) URL of at most 2048 characters."""
    cleaned = value.strip()
    if not cleaned.startswith(("http://", "https://")) or len(cleaned) > 2048:
        raise CatalogValidationError(f"{field_name} must be an absolute http(s) URL")
    return cleaned


@dataclass
class ArtVariation:
    """A single rendition (feed, stories, banner...) of an art group.

    Variations are owned by their ArtGroup and only mutated through it,
    which is what keeps the one-primary-per-group rule enforceable.
    """

    id: ArtVariationId
    group_id: ArtGroupId
    format_id: FormatId
    file_type_id: FileTypeId
    image_url: str
    dimensions: ImageDimensions
    edit_url: str | None = None
    is_primary: bool = False
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        group_id: ArtGroupId,
        content: VariationContent,
        is_primary: bool = False,
    ) -> ArtVariation:
        """Factory method for a new variation.

        Args:
            group_id: Owning group
            content: Format, file type and stored image of the variation
            is_primary: Whether the variation starts as the group's primary

        Returns:
            A new ArtVariation
        """
        now = datetime.now(UTC)
        edit_url = (
            validate_url(content.edit_url, "edit_url")
            if content.edit_url
            else None
        )
        return cls(
            id=ArtVariationId.generate(),
            group_id=group_id,
            format_id=content.format_id,
            file_type_id=content.file_type_id,
            image_url=validate_url(content.image_url, "image_url"),
            dimensions=content.dimensions,
            edit_url=edit_url,
            is_primary=is_primary,
            created_at=now,
            updated_at=now,
        )

    @property
    def width(self) -> int:
        return self.dimensions.width

    @property
    def height(self) -> int:
        return self.dimensions.height

    @property
    def aspect_ratio(self) -> str:
        return self.dimensions.aspect_ratio

    def change_edit_url(self, edit_url: str | None) -> None:
        """Replace (or clear) the external edit link."""
        self.edit_url = validate_url(edit_url, "edit_url") if edit_url else None
        self.updated_at = datetime.now(UTC)
