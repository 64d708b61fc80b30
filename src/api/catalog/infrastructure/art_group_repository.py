"""PostgreSQL implementation of IArtGroupRepository.

Groups and variations live in two tables. The repository loads both to
reconstitute the aggregate and, on save, reconciles the variation rows with
the aggregate. The primary flag is always written with one UPDATE covering
every variation of the group, so the flag moves atomically.
"""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.domain.aggregates import ArtGroup, ArtVariation
from catalog.domain.exceptions import DuplicateFormatError
from catalog.domain.value_objects import (
    ArtGroupId,
    ArtVariationId,
    CategoryId,
    DesignerId,
    FileTypeId,
    FormatId,
    GroupStatus,
    ImageDimensions,
)
from catalog.infrastructure.models import ArtGroupModel, ArtVariationModel
from catalog.infrastructure.models.art_group import UNIQUE_FORMAT_PER_GROUP
from catalog.infrastructure.observability import (
    ArtGroupRepositoryProbe,
    DefaultArtGroupRepositoryProbe,
)
from catalog.ports.repositories import IArtGroupRepository


class ArtGroupRepository(IArtGroupRepository):
    """Repository for ArtGroup aggregates backed by PostgreSQL.

    Never commits; callers wrap calls in a transaction.
    """

    def __init__(
        self,
        session: AsyncSession,
        probe: ArtGroupRepositoryProbe | None = None,
    ) -> None:
        """Initialize repository with database session.

        Args:
            session: AsyncSession from FastAPI dependency injection
            probe: Optional domain probe for observability
        """
        self._session = session
        self._probe = probe or DefaultArtGroupRepositoryProbe()

    async def get_by_id(
        self, group_id: ArtGroupId, *, for_update: bool = False
    ) -> ArtGroup | None:
        """Load a group with all of its variations.

        Rows are always re-read from the database (``populate_existing``) so
        a lock taken with ``for_update`` is paired with fresh state.
        """
        stmt = (
            select(ArtGroupModel)
            .where(ArtGroupModel.id == group_id.value)
            .execution_options(populate_existing=True)
        )
        if for_update:
            stmt = stmt.with_for_update()
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if model is None:
            self._probe.group_not_found(group_id.value)
            return None

        variation_stmt = (
            select(ArtVariationModel)
            .where(ArtVariationModel.group_id == group_id.value)
            .order_by(ArtVariationModel.created_at, ArtVariationModel.id)
            .execution_options(populate_existing=True)
        )
        variation_result = await self._session.execute(variation_stmt)
        variations = variation_result.scalars().all()

        group = self._to_domain(model, variations)
        self._probe.group_retrieved(group_id.value, len(group.variations))
        return group

    async def save(self, group: ArtGroup) -> None:
        """Persist the group row and reconcile its variation rows.

        Raises:
            ValueError: If the aggregate is empty or lacks a single primary
            DuplicateFormatError: If the unique (group, format) index rejects a row
        """
        group.ensure_consistent()

        try:
            stmt = select(ArtGroupModel).where(ArtGroupModel.id == group.id.value)
            result = await self._session.execute(stmt)
            model = result.scalar_one_or_none()

            if model is None:
                model = ArtGroupModel(
                    id=group.id.value,
                    title=group.title,
                    category_id=group.category_id.value,
                    designer_id=group.designer_id.value,
                    is_premium=group.is_premium,
                    is_visible=group.is_visible,
                    status=group.status.value,
                    download_count=group.download_count,
                    view_count=group.view_count,
                    like_count=group.like_count,
                    created_at=group.created_at,
                    updated_at=group.updated_at,
                )
                self._session.add(model)
                # Group row must exist before variation rows reference it
                await self._session.flush()
            else:
                model.title = group.title
                model.category_id = group.category_id.value
                model.is_premium = group.is_premium
                model.is_visible = group.is_visible
                model.status = group.status.value
                model.updated_at = group.updated_at

            await self._sync_variations(group)
            await self._session.flush()

            # Single statement: every row of the group gets its flag at once
            await self._session.execute(
                update(ArtVariationModel)
                .where(ArtVariationModel.group_id == group.id.value)
                .values(
                    is_primary=ArtVariationModel.id
                    == group.primary_variation.id.value
                )
                .execution_options(synchronize_session=False)
            )
        except IntegrityError as e:
            if UNIQUE_FORMAT_PER_GROUP in str(e.orig):
                self._probe.duplicate_format_rejected(group.id.value)
                raise DuplicateFormatError(
                    f"Group {group.id} already has a variation in this format"
                ) from e
            raise

        self._probe.group_saved(group.id.value, len(group.variations))

    async def delete(self, group: ArtGroup) -> bool:
        """Delete all variation rows, then the group row."""
        await self._session.execute(
            delete(ArtVariationModel).where(
                ArtVariationModel.group_id == group.id.value
            )
        )
        result = await self._session.execute(
            delete(ArtGroupModel).where(ArtGroupModel.id == group.id.value)
        )
        deleted = bool(result.rowcount)
        if deleted:
            self._probe.group_deleted(group.id.value)
        return deleted

    async def increment_view_count(self, group_id: ArtGroupId) -> DesignerId | None:
        return await self._increment(group_id, ArtGroupModel.view_count)

    async def increment_download_count(
        self, group_id: ArtGroupId
    ) -> DesignerId | None:
        return await self._increment(group_id, ArtGroupModel.download_count)

    async def _increment(self, group_id: ArtGroupId, column) -> DesignerId | None:
        stmt = (
            update(ArtGroupModel)
            .where(ArtGroupModel.id == group_id.value)
            .values({column: column + 1})
            .returning(ArtGroupModel.designer_id)
            .execution_options(synchronize_session=False)
        )
        result = await self._session.execute(stmt)
        designer_id = result.scalar_one_or_none()
        return DesignerId(value=designer_id) if designer_id is not None else None

    async def _sync_variations(self, group: ArtGroup) -> None:
        """Insert, update and delete variation rows to match the aggregate.

        New rows are inserted as non-primary; the caller applies the primary
        flag afterwards.
        """
        stmt = select(ArtVariationModel).where(
            ArtVariationModel.group_id == group.id.value
        )
        result = await self._session.execute(stmt)
        existing = {m.id: m for m in result.scalars().all()}
        wanted = {v.id.value: v for v in group.variations}

        for variation_id in existing.keys() - wanted.keys():
            await self._session.delete(existing[variation_id])

        for variation in group.variations:
            model = existing.get(variation.id.value)
            if model is None:
                self._session.add(self._to_model(variation))
            elif (
                model.edit_url != variation.edit_url
                or model.updated_at != variation.updated_at
            ):
                model.edit_url = variation.edit_url
                model.updated_at = variation.updated_at

    @staticmethod
    def _to_model(variation: ArtVariation) -> ArtVariationModel:
        return ArtVariationModel(
            id=variation.id.value,
            group_id=variation.group_id.value,
            format_id=variation.format_id.value,
            file_type_id=variation.file_type_id.value,
            image_url=variation.image_url,
            edit_url=variation.edit_url,
            width=variation.width,
            height=variation.height,
            aspect_ratio=variation.aspect_ratio,
            is_primary=False,
            created_at=variation.created_at,
            updated_at=variation.updated_at,
        )

    @staticmethod
    def _to_domain(
        model: ArtGroupModel, variations: Sequence[ArtVariationModel]
    ) -> ArtGroup:
        group_id = ArtGroupId(value=model.id)
        return ArtGroup(
            id=group_id,
            title=model.title,
            category_id=CategoryId(value=model.category_id),
            designer_id=DesignerId(value=model.designer_id),
            is_premium=model.is_premium,
            is_visible=model.is_visible,
            status=GroupStatus(model.status),
            download_count=model.download_count,
            view_count=model.view_count,
            like_count=model.like_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
            variations=[
                ArtVariation(
                    id=ArtVariationId(value=v.id),
                    group_id=group_id,
                    format_id=FormatId(value=v.format_id),
                    file_type_id=FileTypeId(value=v.file_type_id),
                    image_url=v.image_url,
                    edit_url=v.edit_url,
                    dimensions=ImageDimensions(width=v.width, height=v.height),
                    is_primary=v.is_primary,
                    created_at=v.created_at,
                    updated_at=v.updated_at,
                )
                for v in variations
            ],
        )
