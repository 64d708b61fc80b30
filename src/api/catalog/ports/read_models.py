"""Read models returned by the catalog query side.

These are flat projections tailored to listing screens; they are not
aggregates and are never written back.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from catalog.domain.value_objects import GroupStatus


class GroupSortField(StrEnum):
    """Columns a listing can be ordered by."""

    CREATED_AT = "created_at"
    TITLE = "title"
    VIEWS = "views"
    DOWNLOADS = "downloads"
    LIKES = "likes"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


@dataclass(frozen=True)
class GroupListFilters:
    """Resolved listing filters.

    ``include_hidden`` has already been checked against the caller's role by
    the time a filter reaches a repository.
    """

    search: str | None = None
    category_id: str | None = None
    designer_id: str | None = None
    format_id: str | None = None
    is_premium: bool | None = None
    include_hidden: bool = False
    sort: GroupSortField = GroupSortField.CREATED_AT
    direction: SortDirection = SortDirection.DESC


@dataclass(frozen=True)
class ArtGroupSummary:
    """One row of a group listing, annotated with its primary variation."""

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
    created_at: datetime
    updated_at: datetime
    primary_variation_id: str | None
    primary_image_url: str | None
    primary_aspect_ratio: str | None
    variation_count: int


@dataclass(frozen=True)
class GroupPage:
    """A page of listing results plus the information to paginate further."""

    page: int
    page_size: int
    total: int
    items: list[ArtGroupSummary] = field(default_factory=list)

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    @property
    def has_more(self) -> bool:
        return self.page < self.total_pages
