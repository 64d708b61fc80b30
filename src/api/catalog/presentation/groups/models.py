"""Pydantic models for art group API requests and responses."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, Field

from catalog.application.value_objects import GroupUpdate
from catalog.domain.aggregates import ArtGroup, ArtVariation
from catalog.domain.value_objects import GroupStatus
from catalog.ports.read_models import ArtGroupSummary, GroupPage


class UpdateGroupRequest(BaseModel):
    """Partial update of a group; omitted fields stay unchanged.

    ``is_visible`` and ``status`` are admin-only.
    """

    title: str | None = Field(default=None, min_length=1, max_length=255)
    category_id: str | None = Field(default=None, description="Category ID (ULID)")
    is_premium: bool | None = None
    is_visible: bool | None = None
    status: GroupStatus | None = None

    def to_update(self) -> GroupUpdate:
        return GroupUpdate(
            title=self.title,
            category_id=self.category_id,
            is_premium=self.is_premium,
            is_visible=self.is_visible,
            status=self.status,
        )


class VariationResponse(BaseModel):
    """Response model for one variation of a group."""

    id: str = Field(..., description="Variation ID (ULID format)")
    group_id: str
    format_id: str
    file_type_id: str
    image_url: str
    edit_url: str | None
    width: int
    height: int
    aspect_ratio: str
    is_primary: bool
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, variation: ArtVariation) -> VariationResponse:
        return cls(
            id=variation.id.value,
            group_id=variation.group_id.value,
            format_id=variation.format_id.value,
            file_type_id=variation.file_type_id.value,
            image_url=variation.image_url,
            edit_url=variation.edit_url,
            width=variation.width,
            height=variation.height,
            aspect_ratio=variation.aspect_ratio,
            is_primary=variation.is_primary,
            created_at=variation.created_at,
            updated_at=variation.updated_at,
        )


class GroupResponse(BaseModel):
    """Response model for a group with all of its variations.

    Variations are ordered primary first, then newest first.
    """

    id: str = Field(..., description="Group ID (ULID format)")
    title: str
    category_id: str
    designer_id: str
    is_premium: bool
    is_visible: bool
    status: GroupStatus
    download_count: int
    view_count: int
    like_count: int
    primary_variation_id: str
    variations: list[VariationResponse]
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, group: ArtGroup) -> GroupResponse:
        """Convert an ArtGroup aggregate to an API response."""
        return cls(
            id=group.id.value,
            title=group.title,
            category_id=group.category_id.value,
            designer_id=group.designer_id.value,
            is_premium=group.is_premium,
            is_visible=group.is_visible,
            status=group.status,
            download_count=group.download_count,
            view_count=group.view_count,
            like_count=group.like_count,
            primary_variation_id=group.primary_variation.id.value,
            variations=[
                VariationResponse.from_domain(v) for v in group.ordered_variations()
            ],
            created_at=group.created_at,
            updated_at=group.updated_at,
        )


class GroupSummaryResponse(BaseModel):
    """One row of a group listing."""

    id: str
    title: str
    category_id: str
    designer_id: str
    is_premium: bool
    is_visible: bool
    status: GroupStatus
    download_count: int
    view_count: int
    like_count: int
    primary_variation_id: str | None
    image_url: str | None = Field(..., description="Primary variation image")
    aspect_ratio: str | None = Field(..., description="Primary variation ratio")
    variation_count: int
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_read_model(cls, summary: ArtGroupSummary) -> GroupSummaryResponse:
        return cls(
            id=summary.id,
            title=summary.title,
            category_id=summary.category_id,
            designer_id=summary.designer_id,
            is_premium=summary.is_premium,
            is_visible=summary.is_visible,
            status=summary.status,
            download_count=summary.download_count,
            view_count=summary.view_count,
            like_count=summary.like_count,
            primary_variation_id=summary.primary_variation_id,
            image_url=summary.primary_image_url,
            aspect_ratio=summary.primary_aspect_ratio,
            variation_count=summary.variation_count,
            created_at=summary.created_at,
            updated_at=summary.updated_at,
        )


class GroupPageResponse(BaseModel):
    """A page of group listings."""

    items: list[GroupSummaryResponse]
    page: int
    page_size: int
    total: int
    total_pages: int
    has_more: bool

    @classmethod
    def from_read_model(cls, page: GroupPage) -> GroupPageResponse:
        return cls(
            items=[GroupSummaryResponse.from_read_model(s) for s in page.items],
            page=page.page,
            page_size=page.page_size,
            total=page.total,
            total_pages=page.total_pages,
            has_more=page.has_more,
        )
