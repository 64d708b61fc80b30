"""Catalog aggregates."""

from catalog.domain.aggregates.art_group import ArtGroup, validate_title
from catalog.domain.aggregates.art_variation import ArtVariation
from catalog.domain.aggregates.designer_stats import DesignerStats
from catalog.domain.aggregates.reference import (
    Category,
    FileType,
    Format,
    ReferenceEntry,
    ReferenceKind,
)

__all__ = [
    "ArtGroup",
    "ArtVariation",
    "Category",
    "DesignerStats",
    "FileType",
    "Format",
    "ReferenceEntry",
    "ReferenceKind",
    "validate_title",
]
