"""Pydantic models for reference data requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from catalog.domain.aggregates import ReferenceEntry


class CreateReferenceEntryRequest(BaseModel):
    """Request model for creating a category, format or file type."""

    name: str = Field(..., min_length=1, max_length=100)
    slug: str = Field(..., description="Lowercase kebab-case identifier")


class UpdateReferenceEntryRequest(BaseModel):
    """Request model for renaming an entry or changing its slug."""

    name: str | None = Field(default=None, min_length=1, max_length=100)
    slug: str | None = Field(
        default=None, description="Lowercase kebab-case identifier"
    )


class ReferenceEntryResponse(BaseModel):
    id: str = Field(..., description="Entry ID (ULID format)")
    name: str
    slug: str
    created_at: datetime

    @classmethod
    def from_domain(cls, entry: ReferenceEntry) -> ReferenceEntryResponse:
        return cls(
            id=entry.id.value,
            name=entry.name,
            slug=entry.slug,
            created_at=entry.created_at,
        )
