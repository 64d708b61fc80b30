"""PostgreSQL implementation of IArtGroupQueryRepository.

Listing rows are read straight from the tables and annotated with their
primary variation through an outer join, so a page costs one query plus one
count.
"""

from __future__ import annotations

from typing import Any

from sqlalchemy import Select, and_, case, exists, func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from catalog.domain.aggregates import ArtGroup
from catalog.domain.value_objects import GroupStatus
from catalog.infrastructure.models import ArtGroupModel, ArtVariationModel
from catalog.ports.read_models import (
    ArtGroupSummary,
    GroupListFilters,
    GroupSortField,
    SortDirection,
)
from catalog.ports.repositories import IArtGroupQueryRepository

_SORT_COLUMNS = {
    GroupSortField.CREATED_AT: ArtGroupModel.created_at,
    GroupSortField.TITLE: ArtGroupModel.title,
    GroupSortField.VIEWS: ArtGroupModel.view_count,
    GroupSortField.DOWNLOADS: ArtGroupModel.download_count,
    GroupSortField.LIKES: ArtGroupModel.like_count,
}


def escape_like(value: str) -> str:
    """Escape LIKE wildcards so user input matches literally."""
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class ArtGroupQueryRepository(IArtGroupQueryRepository):
    """Read-side queries over art groups."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_groups(
        self, filters: GroupListFilters, offset: int, limit: int
    ) -> tuple[list[ArtGroupSummary], int]:
        conditions = self._conditions(filters)

        count_stmt = select(func.count()).select_from(ArtGroupModel).where(*conditions)
        total = (await self._session.execute(count_stmt)).scalar_one()
        if total == 0:
            return [], 0

        column = _SORT_COLUMNS[filters.sort]
        if filters.direction is SortDirection.ASC:
            order = (column.asc(), ArtGroupModel.id.asc())
        else:
            order = (column.desc(), ArtGroupModel.id.desc())

        stmt = (
            self._summary_select()
            .where(*conditions)
            .order_by(*order)
            .offset(offset)
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_summary(row) for row in result.all()], total

    async def list_related(
        self, group: ArtGroup, limit: int
    ) -> list[ArtGroupSummary]:
        same_category = ArtGroupModel.category_id == group.category_id.value
        same_designer = ArtGroupModel.designer_id == group.designer_id.value
        rank = case(
            (and_(same_category, same_designer), 0),
            (same_category, 1),
            else_=2,
        )

        stmt = (
            self._summary_select()
            .where(
                ArtGroupModel.id != group.id.value,
                ArtGroupModel.is_visible.is_(True),
                or_(same_category, same_designer),
            )
            .order_by(rank, ArtGroupModel.created_at.desc(), ArtGroupModel.id.desc())
            .limit(limit)
        )
        result = await self._session.execute(stmt)
        return [self._to_summary(row) for row in result.all()]

    @staticmethod
    def _conditions(filters: GroupListFilters) -> list[Any]:
        conditions: list[Any] = []
        if not filters.include_hidden:
            conditions.append(ArtGroupModel.is_visible.is_(True))
        if filters.search:
            pattern = f"%{escape_like(filters.search.strip())}%"
            conditions.append(ArtGroupModel.title.ilike(pattern, escape="\\"))
        if filters.category_id:
            conditions.append(ArtGroupModel.category_id == filters.category_id)
        if filters.designer_id:
            conditions.append(ArtGroupModel.designer_id == filters.designer_id)
        if filters.is_premium is not None:
            conditions.append(ArtGroupModel.is_premium.is_(filters.is_premium))
        if filters.format_id:
            conditions.append(
                exists().where(
                    ArtVariationModel.group_id == ArtGroupModel.id,
                    ArtVariationModel.format_id == filters.format_id,
                )
            )
        return conditions

    @staticmethod
    def _summary_select() -> Select:
        primary = aliased(ArtVariationModel, name="primary_variation")
        variation_count = (
            select(func.count(ArtVariationModel.id))
            .where(ArtVariationModel.group_id == ArtGroupModel.id)
            .correlate(ArtGroupModel)
            .scalar_subquery()
        )
        return select(
            ArtGroupModel,
            primary.id.label("primary_variation_id"),
            primary.image_url.label("primary_image_url"),
            primary.aspect_ratio.label("primary_aspect_ratio"),
            variation_count.label("variation_count"),
        ).outerjoin(
            primary,
            and_(primary.group_id == ArtGroupModel.id, primary.is_primary.is_(True)),
        )

    @staticmethod
    def _to_summary(row: Any) -> ArtGroupSummary:
        group: ArtGroupModel = row[0]
        return ArtGroupSummary(
            id=group.id,
            title=group.title,
            category_id=group.category_id,
            designer_id=group.designer_id,
            is_premium=group.is_premium,
            is_visible=group.is_visible,
            status=GroupStatus(group.status),
            download_count=group.download_count,
            view_count=group.view_count,
            like_count=group.like_count,
            created_at=group.created_at,
            updated_at=group.updated_at,
            primary_variation_id=row.primary_variation_id,
            primary_image_url=row.primary_image_url,
            primary_aspect_ratio=row.primary_aspect_ratio,
            variation_count=row.variation_count or 0,
        )
