"""Integration test fixtures for the Catalog bounded context.

These fixtures require a running PostgreSQL instance with the catalog
migrations applied. Database settings are configured in the parent conftest.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Awaitable, Callable

import pytest
import pytest_asyncio
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from catalog.domain.aggregates import ArtGroup, Category, FileType, Format
from catalog.domain.value_objects import DesignerId, ImageDimensions, VariationContent
from catalog.infrastructure.art_group_query_repository import (
    ArtGroupQueryRepository,
)
from catalog.infrastructure.art_group_repository import ArtGroupRepository
from catalog.infrastructure.designer_stats_repository import (
    DesignerStatsRepository,
)
from catalog.infrastructure.reference_data_repository import (
    ReferenceDataRepository,
)
from infrastructure.database.engines import create_write_engine
from infrastructure.settings import DatabaseSettings

# Children before parents: variations reference groups, formats and file
# types; groups reference categories.
CATALOG_TABLES = (
    "art_variations",
    "art_groups",
    "designer_stats",
    "categories",
    "formats",
    "file_types",
)


@pytest_asyncio.fixture
async def session_factory(
    integration_db_settings: DatabaseSettings,
) -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    """Provide a session factory for tests that need several sessions."""
    engine = create_write_engine(integration_db_settings)
    factory = async_sessionmaker(engine, expire_on_commit=False)

    yield factory

    await engine.dispose()


@pytest_asyncio.fixture
async def async_session(
    session_factory: async_sessionmaker[AsyncSession],
) -> AsyncGenerator[AsyncSession, None]:
    """Provide an async session for integration tests."""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def clean_catalog_data(
    async_session: AsyncSession,
) -> AsyncGenerator[None, None]:
    """Empty every catalog table before and after each test."""

    async def cleanup() -> None:
        try:
            for table in CATALOG_TABLES:
                await async_session.execute(text(f"DELETE FROM {table}"))
            await async_session.commit()
        except Exception:
            await async_session.rollback()
            raise

    await cleanup()

    yield

    await cleanup()


@pytest.fixture
def group_repository(async_session: AsyncSession) -> ArtGroupRepository:
    return ArtGroupRepository(session=async_session)


@pytest.fixture
def stats_repository(async_session: AsyncSession) -> DesignerStatsRepository:
    return DesignerStatsRepository(session=async_session)


@pytest.fixture
def reference_repository(async_session: AsyncSession) -> ReferenceDataRepository:
    return ReferenceDataRepository(session=async_session)


@pytest.fixture
def query_repository(async_session: AsyncSession) -> ArtGroupQueryRepository:
    return ArtGroupQueryRepository(session=async_session)


@pytest_asyncio.fixture
async def reference_data(
    clean_catalog_data: None,
    async_session: AsyncSession,
    reference_repository: ReferenceDataRepository,
) -> dict[str, Category | Format | FileType]:
    """Seed two categories, three formats and one file type."""
    entries: dict[str, Category | Format | FileType] = {
        "easter": Category.create("Easter", "easter"),
        "black-friday": Category.create("Black Friday", "black-friday"),
        "feed": Format.create("Feed", "feed"),
        "stories": Format.create("Stories", "stories"),
        "banner": Format.create("Banner", "banner"),
        "canva": FileType.create("Canva", "canva"),
    }
    for entry in entries.values():
        await reference_repository.add(entry)
    await async_session.commit()
    return entries


@pytest.fixture
def content_for(reference_data) -> Callable[..., VariationContent]:
    """Build variation content for a format slug."""

    def _content(
        format_slug: str, width: int = 1080, height: int = 1080
    ) -> VariationContent:
        return VariationContent(
            format_id=reference_data[format_slug].id,
            file_type_id=reference_data["canva"].id,
            image_url=f"https://cdn.example.com/{format_slug}-{width}x{height}.webp",
            dimensions=ImageDimensions(width=width, height=height),
        )

    return _content


@pytest.fixture
def saved_group(
    async_session: AsyncSession,
    group_repository: ArtGroupRepository,
    reference_data,
    content_for,
) -> Callable[..., Awaitable[ArtGroup]]:
    """Create and commit a group with a single primary variation."""

    async def _create(
        title: str = "Easter Sale",
        category: str = "easter",
        designer: str = "designer-1",
        format_slug: str = "feed",
    ) -> ArtGroup:
        group = ArtGroup.create(
            title=title,
            category_id=reference_data[category].id,
            designer_id=DesignerId(value=designer),
            first_variation=content_for(format_slug),
        )
        await group_repository.save(group)
        await async_session.commit()
        return group

    return _create
