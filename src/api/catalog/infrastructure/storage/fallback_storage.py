"""Composite image storage trying several providers in order."""

from __future__ import annotations

import asyncio
from typing import Sequence

from catalog.infrastructure.observability import (
    DefaultImageStorageProbe,
    ImageStorageProbe,
)
from catalog.ports.exceptions import StorageFailureError
from catalog.ports.storage import ImageStorage, ImageUpload, StoredImage


class FallbackImageStorage(ImageStorage):
    """Stores an image with the first provider that succeeds.

    A provider that fails or exceeds ``timeout_seconds`` is skipped. Invalid
    images are rejected by the first provider and are not retried.
    """

    def __init__(
        self,
        providers: Sequence[ImageStorage],
        timeout_seconds: float = 30.0,
        probe: ImageStorageProbe | None = None,
    ):
        if not providers:
            raise ValueError("At least one storage provider is required")
        self._providers = list(providers)
        self._timeout_seconds = timeout_seconds
        self._probe = probe or DefaultImageStorageProbe()

    async def store(self, upload: ImageUpload) -> StoredImage:
        """Store with each provider in turn until one succeeds.

        Raises:
            InvalidImageError: If the upload is not a decodable image
            StorageFailureError: If every provider failed
        """
        names = []
        for provider in self._providers:
            name = getattr(provider, "name", type(provider).__name__)
            names.append(name)
            try:
                return await asyncio.wait_for(
                    provider.store(upload), timeout=self._timeout_seconds
                )
            except TimeoutError:
                self._probe.provider_failed(
                    provider=name,
                    error=f"timed out after {self._timeout_seconds}s",
                )
            except StorageFailureError:
                # Provider already reported the failure
                continue

        self._probe.all_providers_failed(providers=names)
        raise StorageFailureError("Image could not be stored; try again later")
