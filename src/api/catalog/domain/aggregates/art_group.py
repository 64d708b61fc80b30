"""ArtGroup aggregate for the Catalog context."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from catalog.domain.aggregates.art_variation import ArtVariation
from catalog.domain.exceptions import (
    CatalogValidationError,
    DuplicateFormatError,
    LastVariationError,
    VariationNotFoundError,
)
from catalog.domain.value_objects import (
    ArtGroupId,
    ArtVariationId,
    CategoryId,
    DesignerId,
    GroupStatus,
    VariationContent,
)

MAX_TITLE_LENGTH = 255


def validate_title(title: str) -> str:
    """Strip and validate a group title.

    Raises:
        CatalogValidationError: If the title is blank or too long
    """
    cleaned = (title or "").strip()
    if not cleaned:
        raise CatalogValidationError("Title must not be empty")
    if len(cleaned) > MAX_TITLE_LENGTH:
        raise CatalogValidationError(
            f"Title must be at most {MAX_TITLE_LENGTH} characters"
        )
    return cleaned


@dataclass
class ArtGroup:
    """Aggregate root for a logical creative work and its format variations.

    Business rules:
    - A group always has at least one variation
    - Exactly one variation is primary at all times
    - A group holds at most one variation per format
    - When the primary is removed, the most recently created remaining
      variation becomes primary

    Counters (downloads, views, likes) are only ever incremented by the
    database, so the aggregate treats them as read-only snapshots.
    """

    id: ArtGroupId
    title: str
    category_id: CategoryId
    designer_id: DesignerId
    is_premium: bool = False
    is_visible: bool = True
    status: GroupStatus = GroupStatus.ACTIVE
    download_count: int = 0
    view_count: int = 0
    like_count: int = 0
    variations: list[ArtVariation] = field(default_factory=list)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def create(
        cls,
        title: str,
        category_id: CategoryId,
        designer_id: DesignerId,
        first_variation: VariationContent,
        is_premium: bool = False,
    ) -> ArtGroup:
        """Factory method for a new group together with its first variation.

        The first variation is always primary, so the group is valid from the
        moment it exists.

        Args:
            title: Display title
            category_id: Category the work is filed under
            designer_id: Owning designer
            first_variation: Content of the initial (primary) variation
            is_premium: Whether the work requires a premium subscription

        Returns:
            A new ArtGroup holding exactly one primary variation
        """
        now = datetime.now(UTC)
        group = cls(
            id=ArtGroupId.generate(),
            title=validate_title(title),
            category_id=category_id,
            designer_id=designer_id,
            is_premium=is_premium,
            created_at=now,
            updated_at=now,
        )
        group.variations.append(
            ArtVariation.create(group.id, first_variation, is_primary=True)
        )
        return group

    @property
    def primary_variation(self) -> ArtVariation:
        """The variation currently flagged as primary."""
        for variation in self.variations:
            if variation.is_primary:
                return variation
        raise ValueError(f"Group {self.id} has no primary variation")

    def get_variation(self, variation_id: ArtVariationId) -> ArtVariation:
        """Look up a member variation.

        Raises:
            VariationNotFoundError: If the variation is not part of this group
        """
        for variation in self.variations:
            if variation.id == variation_id:
                return variation
        raise VariationNotFoundError(
            f"Variation {variation_id} does not belong to group {self.id}"
        )

    def ordered_variations(self) -> list[ArtVariation]:
        """Variations with the primary first, then newest first."""
        return sorted(
            self.variations,
            key=lambda v: (v.is_primary, v.created_at, v.id.value),
            reverse=True,
        )

    def is_owned_by(self, designer_id: str) -> bool:
        return self.designer_id.value == designer_id

    def add_variation(
        self, content: VariationContent, make_primary: bool = False
    ) -> ArtVariation:
        """Add a new variation, optionally making it the primary.

        Args:
            content: Format, file type and stored image of the variation
            make_primary: Move the primary flag to the new variation

        Returns:
            The newly added variation

        Raises:
            DuplicateFormatError: If the group already has this format
        """
        if any(v.format_id == content.format_id for v in self.variations):
            raise DuplicateFormatError(
                f"Group {self.id} already has a variation in format "
                f"{content.format_id}"
            )

        variation = ArtVariation.create(self.id, content)
        self.variations.append(variation)
        if make_primary:
            self._move_primary_to(variation)
        self._touch()
        return variation

    def set_primary(self, variation_id: ArtVariationId) -> bool:
        """Make the given variation the group's primary.

        Returns:
            False when the variation already was primary (nothing changed)

        Raises:
            VariationNotFoundError: If the variation is not part of this group
        """
        variation = self.get_variation(variation_id)
        if variation.is_primary:
            return False
        self._move_primary_to(variation)
        self._touch()
        return True

    def remove_variation(
        self, variation_id: ArtVariationId
    ) -> tuple[ArtVariation, ArtVariation | None]:
        """Remove a variation, reassigning the primary flag if needed.

        Returns:
            The removed variation and, when the primary was removed, the
            variation that inherited the flag

        Raises:
            VariationNotFoundError: If the variation is not part of this group
            LastVariationError: If it is the group's only variation
        """
        variation = self.get_variation(variation_id)
        if len(self.variations) == 1:
            raise LastVariationError(
                f"Variation {variation_id} is the last one of group {self.id}; "
                "delete the group instead"
            )

        self.variations = [v for v in self.variations if v.id != variation_id]
        successor = None
        if variation.is_primary:
            successor = max(self.variations, key=lambda v: (v.created_at, v.id.value))
            self._move_primary_to(successor)
        self._touch()
        return variation, successor

    def change_variation_edit_url(
        self, variation_id: ArtVariationId, edit_url: str | None
    ) -> ArtVariation:
        """Replace the external edit link of a member variation."""
        variation = self.get_variation(variation_id)
        variation.change_edit_url(edit_url)
        self._touch()
        return variation

    def rename(self, title: str) -> None:
        self.title = validate_title(title)
        self._touch()

    def change_category(self, category_id: CategoryId) -> None:
        self.category_id = category_id
        self._touch()

    def set_premium(self, is_premium: bool) -> None:
        self.is_premium = is_premium
        self._touch()

    def set_visibility(self, is_visible: bool) -> None:
        self.is_visible = is_visible
        self._touch()

    def set_status(self, status: GroupStatus) -> None:
        self.status = status
        self._touch()

    def ensure_consistent(self) -> None:
        """Assert the aggregate invariants before it is persisted.

        Raises:
            ValueError: If the group is empty or does not have exactly one primary
        """
        if not self.variations:
            raise ValueError(f"Group {self.id} has no variations")
        primaries = sum(1 for v in self.variations if v.is_primary)
        if primaries != 1:
            raise ValueError(
                f"Group {self.id} has {primaries} primary variations, expected 1"
            )

    def _move_primary_to(self, target: ArtVariation) -> None:
        for variation in self.variations:
            variation.is_primary = variation.id == target.id

    def _touch(self) -> None:
        self.updated_at = datetime.now(UTC)
