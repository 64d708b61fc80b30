"""Domain-Oriented Observability for the Catalog application layer.

Probes for application service operations following Domain-Oriented Observability patterns.
"""

from catalog.application.observability.art_group_service_probe import (
    ArtGroupServiceProbe,
    DefaultArtGroupServiceProbe,
)
from catalog.application.observability.query_service_probe import (
    ArtGroupQueryServiceProbe,
    DefaultArtGroupQueryServiceProbe,
)
from catalog.application.observability.reference_data_service_probe import (
    DefaultReferenceDataServiceProbe,
    ReferenceDataServiceProbe,
)
from catalog.application.observability.variation_service_probe import (
    DefaultVariationServiceProbe,
    VariationServiceProbe,
)

__all__ = [
    "ArtGroupServiceProbe",
    "DefaultArtGroupServiceProbe",
    "ArtGroupQueryServiceProbe",
    "DefaultArtGroupQueryServiceProbe",
    "ReferenceDataServiceProbe",
    "DefaultReferenceDataServiceProbe",
    "VariationServiceProbe",
    "DefaultVariationServiceProbe",
]
