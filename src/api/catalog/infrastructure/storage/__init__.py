"""Image storage adapters."""

from catalog.infrastructure.storage.fallback_storage import FallbackImageStorage
from catalog.infrastructure.storage.http_object_storage import HttpObjectStorage
from catalog.infrastructure.storage.image_processing import (
    PreparedImage,
    prepare_image,
)

__all__ = [
    "FallbackImageStorage",
    "HttpObjectStorage",
    "PreparedImage",
    "prepare_image",
]
