"""Wiring of catalog repositories, storage and services."""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.observability import (
    DefaultArtGroupQueryServiceProbe,
    DefaultArtGroupServiceProbe,
    DefaultReferenceDataServiceProbe,
    DefaultVariationServiceProbe,
)
from catalog.application.services import (
    ArtGroupQueryService,
    ArtGroupService,
    ReferenceDataService,
    VariationService,
)
from catalog.dependencies.authentication import get_observation_context
from catalog.infrastructure.art_group_query_repository import (
    ArtGroupQueryRepository,
)
from catalog.infrastructure.art_group_repository import ArtGroupRepository
from catalog.infrastructure.designer_stats_repository import (
    DesignerStatsRepository,
)
from catalog.infrastructure.observability import (
    DefaultArtGroupRepositoryProbe,
    DefaultImageStorageProbe,
    DefaultReferenceDataRepositoryProbe,
)
from catalog.infrastructure.reference_data_repository import (
    ReferenceDataRepository,
)
from catalog.infrastructure.storage import FallbackImageStorage, HttpObjectStorage
from catalog.ports.storage import ImageStorage
from infrastructure.database.dependencies import get_read_session, get_write_session
from infrastructure.observability import DefaultTransactionProbe
from infrastructure.settings import (
    StorageSettings,
    get_catalog_settings,
    get_storage_settings,
)
from shared_kernel.observability_context import ObservationContext


def build_image_storage(settings: StorageSettings) -> ImageStorage:
    """Create the storage chain: the primary provider, then the fallback."""
    providers = [
        HttpObjectStorage(
            base_url=settings.base_url,
            service_key=settings.service_key.get_secret_value(),
            bucket=settings.bucket,
            path_prefix=settings.path_prefix,
            name="primary",
            max_image_width=settings.max_image_width,
            webp_quality=settings.webp_quality,
        )
    ]
    if settings.fallback_base_url:
        providers.append(
            HttpObjectStorage(
                base_url=settings.fallback_base_url,
                service_key=settings.fallback_service_key.get_secret_value(),
                bucket=settings.fallback_bucket or settings.bucket,
                path_prefix=settings.path_prefix,
                name="fallback",
                max_image_width=settings.max_image_width,
                webp_quality=settings.webp_quality,
            )
        )
    return FallbackImageStorage(
        providers=providers,
        timeout_seconds=settings.upload_timeout_seconds,
        probe=DefaultImageStorageProbe(),
    )


@lru_cache
def get_image_storage() -> ImageStorage:
    """Get the process-wide image storage chain."""
    return build_image_storage(get_storage_settings())


def get_max_upload_bytes() -> int:
    """Get the upload size limit applied while reading request bodies."""
    return get_storage_settings().max_upload_bytes


def get_art_group_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ArtGroupRepository:
    return ArtGroupRepository(
        session=session,
        probe=DefaultArtGroupRepositoryProbe().with_context(context),
    )


def get_designer_stats_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
) -> DesignerStatsRepository:
    return DesignerStatsRepository(session=session)


def get_reference_data_repository(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ReferenceDataRepository:
    return ReferenceDataRepository(
        session=session,
        probe=DefaultReferenceDataRepositoryProbe().with_context(context),
    )


def get_art_group_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repository: Annotated[ArtGroupRepository, Depends(get_art_group_repository)],
    stats_repository: Annotated[
        DesignerStatsRepository, Depends(get_designer_stats_repository)
    ],
    reference_repository: Annotated[
        ReferenceDataRepository, Depends(get_reference_data_repository)
    ],
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ArtGroupService:
    """Get ArtGroupService instance.

    Repositories share the request's write session through FastAPI's
    per-request dependency cache.
    """
    return ArtGroupService(
        session=session,
        group_repository=group_repository,
        stats_repository=stats_repository,
        reference_repository=reference_repository,
        storage=storage,
        probe=DefaultArtGroupServiceProbe().with_context(context),
        max_upload_bytes=get_storage_settings().max_upload_bytes,
    )


def get_variation_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    group_repository: Annotated[ArtGroupRepository, Depends(get_art_group_repository)],
    reference_repository: Annotated[
        ReferenceDataRepository, Depends(get_reference_data_repository)
    ],
    storage: Annotated[ImageStorage, Depends(get_image_storage)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> VariationService:
    """Get VariationService instance configured from catalog settings."""
    settings = get_catalog_settings()
    return VariationService(
        session=session,
        group_repository=group_repository,
        reference_repository=reference_repository,
        storage=storage,
        probe=DefaultVariationServiceProbe().with_context(context),
        isolation_level=settings.primary_swap_isolation.value,
        attempts=settings.serialization_retries,
        transaction_probe=DefaultTransactionProbe(),
        max_upload_bytes=get_storage_settings().max_upload_bytes,
    )


def get_art_group_query_service(
    read_session: Annotated[AsyncSession, Depends(get_read_session)],
    art_group_service: Annotated[ArtGroupService, Depends(get_art_group_service)],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ArtGroupQueryService:
    """Get ArtGroupQueryService instance.

    Reads go through the read session; views are counted through the
    lifecycle service on the write session.
    """
    settings = get_catalog_settings()
    return ArtGroupQueryService(
        group_repository=ArtGroupRepository(
            session=read_session,
            probe=DefaultArtGroupRepositoryProbe().with_context(context),
        ),
        query_repository=ArtGroupQueryRepository(session=read_session),
        view_recorder=art_group_service,
        default_page_size=settings.default_page_size,
        max_page_size=settings.max_page_size,
        related_limit=settings.related_limit,
        probe=DefaultArtGroupQueryServiceProbe().with_context(context),
    )


def get_reference_data_service(
    session: Annotated[AsyncSession, Depends(get_write_session)],
    reference_repository: Annotated[
        ReferenceDataRepository, Depends(get_reference_data_repository)
    ],
    context: Annotated[ObservationContext, Depends(get_observation_context)],
) -> ReferenceDataService:
    return ReferenceDataService(
        session=session,
        reference_repository=reference_repository,
        probe=DefaultReferenceDataServiceProbe().with_context(context),
    )
