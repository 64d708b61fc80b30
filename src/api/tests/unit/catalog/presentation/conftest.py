"""Fixtures for catalog route tests."""

from __future__ import annotations

from unittest.mock import AsyncMock

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from catalog.application.services import (
    ArtGroupQueryService,
    ArtGroupService,
    ReferenceDataService,
    VariationService,
)
from catalog.application.value_objects import Caller, CallerRole
from catalog.domain.aggregates import ArtGroup
from catalog.domain.value_objects import (
    CategoryId,
    DesignerId,
    FileTypeId,
    FormatId,
    ImageDimensions,
    VariationContent,
)


@pytest.fixture
def mock_group_service() -> AsyncMock:
    return AsyncMock(spec=ArtGroupService)


@pytest.fixture
def mock_query_service() -> AsyncMock:
    return AsyncMock(spec=ArtGroupQueryService)


@pytest.fixture
def mock_variation_service() -> AsyncMock:
    return AsyncMock(spec=VariationService)


@pytest.fixture
def mock_reference_service() -> AsyncMock:
    return AsyncMock(spec=ReferenceDataService)


@pytest.fixture
def current_caller() -> Caller:
    return Caller(id="designer-d", role=CallerRole.DESIGNER)


@pytest.fixture
def upload_limit() -> int:
    """Upload size limit used by the routes under test."""
    return 1024


@pytest.fixture
def sample_group() -> ArtGroup:
    """A group with a single 1080x1080 feed variation."""
    return ArtGroup.create(
        title="Black Friday Promo",
        category_id=CategoryId.generate(),
        designer_id=DesignerId(value="designer-d"),
        first_variation=VariationContent(
            format_id=FormatId.generate(),
            file_type_id=FileTypeId.generate(),
            image_url="https://cdn.example.com/arts/feed.webp",
            dimensions=ImageDimensions(width=1080, height=1080),
        ),
    )


@pytest.fixture
def test_client(
    mock_group_service: AsyncMock,
    mock_query_service: AsyncMock,
    mock_variation_service: AsyncMock,
    mock_reference_service: AsyncMock,
    current_caller: Caller,
    upload_limit: int,
) -> TestClient:
    """Create TestClient with mocked services and a fixed caller."""
    from catalog.dependencies import (
        get_art_group_query_service,
        get_art_group_service,
        get_caller,
        get_max_upload_bytes,
        get_reference_data_service,
        get_variation_service,
    )
    from catalog.presentation import router

    app = FastAPI()

    app.dependency_overrides[get_art_group_service] = lambda: mock_group_service
    app.dependency_overrides[get_art_group_query_service] = lambda: mock_query_service
    app.dependency_overrides[get_variation_service] = lambda: mock_variation_service
    app.dependency_overrides[get_reference_data_service] = (
        lambda: mock_reference_service
    )
    app.dependency_overrides[get_caller] = lambda: current_caller
    app.dependency_overrides[get_max_upload_bytes] = lambda: upload_limit

    app.include_router(router)

    return TestClient(app)
