"""Value objects for the Catalog domain.

Identifiers owned by this service are ULIDs. Designer identifiers come from
the external identity provider and are treated as opaque strings.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import StrEnum
from typing import Self

from ulid import ULID

from catalog.domain.exceptions import CatalogValidationError


@dataclass(frozen=True)
class _UlidIdentifier:
    """Base for ULID-backed identifiers.

    Uses ULID for sortability and distribution-friendly generation.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def generate(cls) -> Self:
        """Generate a new identifier using ULID."""
        return cls(value=str(ULID()))

    @classmethod
    def from_string(cls, value: str) -> Self:
        """Create identifier from string value.

        Args:
            value: ULID string

        Returns:
            Identifier instance

        Raises:
            ValueError: If value is not a valid ULID
        """
        try:
            ULID.from_str(value)
        except ValueError as e:
            raise ValueError(f"Invalid {cls.__name__}: {value}") from e

        return cls(value=value)


@dataclass(frozen=True)
class ArtGroupId(_UlidIdentifier):
    """Identifier for an ArtGroup aggregate."""


@dataclass(frozen=True)
class ArtVariationId(_UlidIdentifier):
    """Identifier for an ArtVariation entity."""


@dataclass(frozen=True)
class CategoryId(_UlidIdentifier):
    """Identifier for a Category reference entry."""


@dataclass(frozen=True)
class FormatId(_UlidIdentifier):
    """Identifier for a Format reference entry."""


@dataclass(frozen=True)
class FileTypeId(_UlidIdentifier):
    """Identifier for a FileType reference entry."""


@dataclass(frozen=True)
class DesignerId:
    """Identifier of the designer who owns a group.

    Issued by the identity provider (JWT subject), so no format is assumed
    beyond being a non-empty string of at most 255 characters.
    """

    value: str

    def __str__(self) -> str:
        """Return string representation."""
        return self.value

    @classmethod
    def from_string(cls, value: str) -> DesignerId:
        """Create DesignerId, rejecting blank or oversized values."""
        if not value or not value.strip() or len(value) > 255:
            raise ValueError(f"Invalid DesignerId: {value!r}")
        return cls(value=value)


class GroupStatus(StrEnum):
    """Publication status of an art group.

    Orthogonal to visibility: an active group may be hidden and vice versa.
    """

    ACTIVE = "active"
    INACTIVE = "inactive"


@dataclass(frozen=True)
class ImageDimensions:
    """Pixel dimensions of a stored image."""

    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise CatalogValidationError(
                f"Image dimensions must be positive, got {self.width}x{self.height}"
            )

    @property
    def aspect_ratio(self) -> str:
        """Reduced ratio in ``W:H`` form, e.g. 1080x1920 -> ``9:16``."""
        divisor = math.gcd(self.width, self.height)
        return f"{self.width // divisor}:{self.height // divisor}"


@dataclass(frozen=True)
class VariationContent:
    """Everything needed to materialize one variation of a group.

    The image has already been persisted by the storage collaborator; only
    its public URL and dimensions are kept here.
    """

    format_id: FormatId
    file_type_id: FileTypeId
    image_url: str
    dimensions: ImageDimensions
    edit_url: str | None = None
