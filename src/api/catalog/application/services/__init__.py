"""Catalog application services."""

from catalog.application.services.art_group_query_service import (
    ArtGroupQueryService,
)
from catalog.application.services.art_group_service import ArtGroupService
from catalog.application.services.reference_data_service import (
    ReferenceDataService,
)
from catalog.application.services.variation_service import VariationService

__all__ = [
    "ArtGroupQueryService",
    "ArtGroupService",
    "ReferenceDataService",
    "VariationService",
]
