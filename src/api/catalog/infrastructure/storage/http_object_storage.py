"""Image storage on a Supabase-compatible object storage REST API."""

from __future__ import annotations

import asyncio

import httpx
from ulid import ULID

from catalog.infrastructure.observability import (
    DefaultImageStorageProbe,
    ImageStorageProbe,
)
from catalog.infrastructure.storage.image_processing import prepare_image
from catalog.ports.exceptions import InvalidImageError, StorageFailureError
from catalog.ports.storage import ImageStorage, ImageUpload, StoredImage


class HttpObjectStorage(ImageStorage):
    """Uploads normalized images to one bucket of an object store.

    Objects are written under ``{path_prefix}/{ulid}.webp`` and served from
    the bucket's public URL.
    """

    def __init__(
        self,
        base_url: str,
        service_key: str,
        bucket: str,
        path_prefix: str = "arts",
        name: str = "primary",
        max_image_width: int = 1200,
        webp_quality: int = 80,
        client: httpx.AsyncClient | None = None,
        probe: ImageStorageProbe | None = None,
    ):
        """Initialize the storage provider.

        Args:
            base_url: Object storage endpoint, without trailing slash
            service_key: Bearer key allowed to write to the bucket
            bucket: Target bucket
            path_prefix: Folder objects are written under
            name: Provider name used in logs
            max_image_width: Wider images are downscaled to this width
            webp_quality: WebP encoder quality
            client: Shared HTTP client; a short-lived one is used per upload
                when omitted
            probe: Optional domain probe for observability
        """
        self._base_url = base_url.rstrip("/")
        self._service_key = service_key
        self._bucket = bucket
        self._path_prefix = path_prefix.strip("/")
        self.name = name
        self._max_image_width = max_image_width
        self._webp_quality = webp_quality
        self._client = client
        self._probe = probe or DefaultImageStorageProbe()

    def object_url(self, key: str) -> str:
        return f"{self._base_url}/storage/v1/object/{self._bucket}/{key}"

    def public_url(self, key: str) -> str:
        return f"{self._base_url}/storage/v1/object/public/{self._bucket}/{key}"

    async def store(self, upload: ImageUpload) -> StoredImage:
        """Normalize the image and upload it.

        Raises:
            InvalidImageError: If the upload cannot be decoded as an image
            StorageFailureError: If the object store refused the upload
        """
        try:
            prepared = await asyncio.to_thread(
                prepare_image, upload.content, self._max_image_width, self._webp_quality
            )
        except ValueError as e:
            self._probe.image_rejected(filename=upload.filename, reason=str(e))
            raise InvalidImageError(
                f"{upload.filename or 'upload'} is not a supported image"
            ) from e

        key = f"{self._path_prefix}/{str(ULID()).lower()}.webp"
        headers = {
            "Authorization": f"Bearer {self._service_key}",
            "Content-Type": prepared.content_type,
            "Cache-Control": "max-age=3600",
            "x-upsert": "false",
        }

        try:
            if self._client is not None:
                response = await self._client.post(
                    self.object_url(key), content=prepared.content, headers=headers
                )
            else:
                async with httpx.AsyncClient() as client:
                    response = await client.post(
                        self.object_url(key), content=prepared.content, headers=headers
                    )
            response.raise_for_status()
        except httpx.HTTPError as e:
            self._probe.provider_failed(provider=self.name, error=str(e))
            raise StorageFailureError(
                f"Storage provider {self.name} rejected the upload"
            ) from e

        url = self.public_url(key)
        self._probe.image_stored(
            provider=self.name,
            url=url,
            size=len(prepared.content),
            width=prepared.width,
            height=prepared.height,
        )
        return StoredImage(url=url, width=prepared.width, height=prepared.height)
