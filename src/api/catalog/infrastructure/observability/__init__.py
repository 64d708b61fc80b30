"""Domain-Oriented Observability for Catalog infrastructure."""

from catalog.infrastructure.observability.repository_probe import (
    ArtGroupRepositoryProbe,
    DefaultArtGroupRepositoryProbe,
    DefaultReferenceDataRepositoryProbe,
    ReferenceDataRepositoryProbe,
)
from catalog.infrastructure.observability.storage_probe import (
    DefaultImageStorageProbe,
    ImageStorageProbe,
)

__all__ = [
    "ArtGroupRepositoryProbe",
    "DefaultArtGroupRepositoryProbe",
    "ReferenceDataRepositoryProbe",
    "DefaultReferenceDataRepositoryProbe",
    "ImageStorageProbe",
    "DefaultImageStorageProbe",
]
