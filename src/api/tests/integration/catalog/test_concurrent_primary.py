"""Concurrent primary changes through two independent services.

Each service owns its own session, so the two units race for the group row
lock exactly as two API requests would.
"""

from __future__ import annotations

import asyncio
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select

from catalog.application.services import VariationService
from catalog.application.value_objects import Caller, CallerRole
from catalog.domain.aggregates import ArtVariation
from catalog.infrastructure.art_group_repository import ArtGroupRepository
from catalog.infrastructure.models import ArtVariationModel
from catalog.infrastructure.reference_data_repository import (
    ReferenceDataRepository,
)
from catalog.ports.exceptions import ConcurrentModificationError

pytestmark = pytest.mark.integration


def _service(session) -> VariationService:
    return VariationService(
        session=session,
        group_repository=ArtGroupRepository(session=session),
        reference_repository=ReferenceDataRepository(session=session),
        storage=AsyncMock(),
    )


class TestConcurrentSetPrimary:
    @pytest.mark.asyncio
    async def test_racing_requests_leave_exactly_one_primary(
        self,
        async_session,
        session_factory,
        group_repository,
        saved_group,
        content_for,
    ) -> None:
        group = await saved_group(designer="designer-1")
        stories = group.add_variation(content_for("stories", 1080, 1920))
        banner = group.add_variation(content_for("banner", 1200, 628))
        await group_repository.save(group)
        await async_session.commit()

        owner = Caller(id="designer-1", role=CallerRole.DESIGNER)

        async with session_factory() as first, session_factory() as second:
            results = await asyncio.gather(
                _service(first).set_primary(
                    owner, group.id.value, stories.id.value
                ),
                _service(second).set_primary(
                    owner, group.id.value, banner.id.value
                ),
                return_exceptions=True,
            )

        for result in results:
            assert isinstance(result, (ArtVariation, ConcurrentModificationError))
        winners = [r for r in results if isinstance(r, ArtVariation)]
        assert winners

        primary_count = await async_session.scalar(
            select(func.count())
            .select_from(ArtVariationModel)
            .where(
                ArtVariationModel.group_id == group.id.value,
                ArtVariationModel.is_primary.is_(True),
            )
        )
        assert primary_count == 1

        primary_id = await async_session.scalar(
            select(ArtVariationModel.id).where(
                ArtVariationModel.group_id == group.id.value,
                ArtVariationModel.is_primary.is_(True),
            )
        )
        assert primary_id in {winner.id.value for winner in winners}
