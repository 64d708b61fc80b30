"""Image storage port.

The storage collaborator persists an uploaded image somewhere publicly
reachable and reports its URL and pixel dimensions. It may be slow and may
fail; callers must not write any variation row when it fails.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from catalog.domain.value_objects import ImageDimensions

# Uploads above this size are rejected before any provider is contacted
DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class ImageUpload:
    """Raw image bytes as received from the client."""

    content: bytes
    filename: str
    content_type: str

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass(frozen=True)
class StoredImage:
    """Result of a successful upload."""

    url: str
    width: int
    height: int

    @property
    def dimensions(self) -> ImageDimensions:
        return ImageDimensions(width=self.width, height=self.height)


@runtime_checkable
class ImageStorage(Protocol):
    """Stores images and returns where they can be fetched from."""

    async def store(self, upload: ImageUpload) -> StoredImage:
        """Persist an image.

        Args:
            upload: The image to store

        Returns:
            The public URL and pixel dimensions of the stored image

        Raises:
            StorageFailureError: If the image could not be stored
        """
        ...
