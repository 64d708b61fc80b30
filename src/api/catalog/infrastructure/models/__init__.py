"""SQLAlchemy ORM models for the Catalog bounded context."""

from catalog.infrastructure.models.art_group import ArtGroupModel, ArtVariationModel
from catalog.infrastructure.models.designer_stats import DesignerStatsModel
from catalog.infrastructure.models.reference import (
    CategoryModel,
    FileTypeModel,
    FormatModel,
)

__all__ = [
    "ArtGroupModel",
    "ArtVariationModel",
    "CategoryModel",
    "DesignerStatsModel",
    "FileTypeModel",
    "FormatModel",
]
