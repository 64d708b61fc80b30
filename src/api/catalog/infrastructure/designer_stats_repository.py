"""PostgreSQL implementation of IDesignerStatsRepository.

Every change is one statement. Creation uses INSERT ... ON CONFLICT DO
UPDATE so concurrent first events for a designer cannot create two rows or
lose an increment; decrements use GREATEST to stay at or above zero.
"""

from __future__ import annotations

from datetime import UTC, datetime

from sqlalchemy import func, select, update
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.domain.aggregates import DesignerStats
from catalog.domain.value_objects import DesignerId
from catalog.infrastructure.models import DesignerStatsModel
from catalog.ports.repositories import IDesignerStatsRepository


class DesignerStatsRepository(IDesignerStatsRepository):
    """Repository for designer counters backed by PostgreSQL."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, designer_id: DesignerId) -> DesignerStats | None:
        stmt = (
            select(DesignerStatsModel)
            .where(DesignerStatsModel.designer_id == designer_id.value)
            .execution_options(populate_existing=True)
        )
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if model is None:
            return None
        return DesignerStats(
            designer_id=DesignerId(value=model.designer_id),
            art_count=model.art_count,
            download_count=model.download_count,
            view_count=model.view_count,
            followers_count=model.followers_count,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    async def record_art_created(self, designer_id: DesignerId) -> None:
        await self._upsert_increment(designer_id, "art_count")

    async def record_art_deleted(self, designer_id: DesignerId) -> None:
        stmt = (
            update(DesignerStatsModel)
            .where(DesignerStatsModel.designer_id == designer_id.value)
            .values(
                art_count=func.greatest(DesignerStatsModel.art_count - 1, 0),
                updated_at=datetime.now(UTC),
            )
            .execution_options(synchronize_session=False)
        )
        await self._session.execute(stmt)

    async def record_view(self, designer_id: DesignerId) -> None:
        await self._upsert_increment(designer_id, "view_count")

    async def record_download(self, designer_id: DesignerId) -> None:
        await self._upsert_increment(designer_id, "download_count")

    async def _upsert_increment(self, designer_id: DesignerId, counter: str) -> None:
        now = datetime.now(UTC)
        column = getattr(DesignerStatsModel, counter)
        stmt = (
            insert(DesignerStatsModel)
            .values(
                designer_id=designer_id.value,
                created_at=now,
                updated_at=now,
                **{counter: 1},
            )
            .on_conflict_do_update(
                index_elements=[DesignerStatsModel.designer_id],
                set_={counter: column + 1, "updated_at": now},
            )
        )
        await self._session.execute(stmt)
