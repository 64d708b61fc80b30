"""Unit tests for ArtGroupService."""

from unittest.mock import AsyncMock, create_autospec

import pytest
from sqlalchemy.exc import SQLAlchemyError

from catalog.application.observability import ArtGroupServiceProbe
from catalog.application.services import ArtGroupService
from catalog.application.value_objects import GroupUpdate, VariationInput
from catalog.domain.aggregates import ArtGroup
from catalog.domain.exceptions import (
    CatalogValidationError,
    DuplicateFormatError,
    NoOpError,
)
from catalog.domain.value_objects import ArtGroupId, DesignerId, GroupStatus
from catalog.ports.exceptions import (
    GroupNotFoundError,
    PermissionDeniedError,
    ReferenceNotFoundError,
    StorageFailureError,
    UploadTooLargeError,
)
from catalog.ports.storage import ImageUpload


@pytest.fixture
def mock_probe():
    return create_autospec(ArtGroupServiceProbe, instance=True)


@pytest.fixture
def service(
    mock_session,
    group_repository,
    stats_repository,
    reference_repository,
    storage,
    mock_probe,
) -> ArtGroupService:
    return ArtGroupService(
        session=mock_session,
        group_repository=group_repository,
        stats_repository=stats_repository,
        reference_repository=reference_repository,
        storage=storage,
        probe=mock_probe,
    )


@pytest.fixture
def create(service, designer, category, feed_format, make_variation_input):
    async def _create(caller=None, title="Black Friday Promo") -> ArtGroup:
        return await service.create_group(
            caller or designer,
            title=title,
            category_id=category.id.value,
            variations=[make_variation_input(feed_format)],
        )

    return _create


class TestCreateGroup:
    @pytest.mark.asyncio
    async def test_creates_group_with_primary_variation(
        self, create, group_repository, designer, storage
    ):
        group = await create()

        assert group.designer_id.value == designer.id
        assert group.primary_variation.image_url == "https://cdn.example.com/arts/1.webp"
        assert (group.primary_variation.width, group.primary_variation.height) == (
            1080,
            1080,
        )
        assert group.id.value in group_repository.groups
        assert len(storage.uploads) == 1

    @pytest.mark.asyncio
    async def test_increments_designer_art_count(self, create, stats_repository):
        group = await create()

        stats = await stats_repository.get(group.designer_id)
        assert stats is not None
        assert stats.art_count == 1

    @pytest.mark.asyncio
    async def test_stats_run_inside_savepoint(self, create, mock_session):
        await create()
        mock_session.begin_nested.assert_called_once()

    @pytest.mark.asyncio
    async def test_probe_records_creation(self, create, mock_probe):
        group = await create()
        mock_probe.group_created.assert_called_once_with(
            group_id=group.id.value,
            designer_id=group.designer_id.value,
            variation_id=group.primary_variation.id.value,
            variation_count=1,
        )

    @pytest.mark.asyncio
    async def test_plain_user_cannot_publish(
        self, create, plain_user, group_repository, storage
    ):
        with pytest.raises(PermissionDeniedError):
            await create(caller=plain_user)
        assert group_repository.groups == {}
        assert storage.uploads == []

    @pytest.mark.asyncio
    async def test_anonymous_cannot_publish(self, create, anonymous):
        with pytest.raises(PermissionDeniedError):
            await create(caller=anonymous)

    @pytest.mark.asyncio
    async def test_blank_title_rejected_before_upload(self, create, storage):
        with pytest.raises(CatalogValidationError):
            await create(title="   ")
        assert storage.uploads == []

    @pytest.mark.asyncio
    async def test_unknown_category_rejected_before_upload(
        self, service, designer, feed_format, make_variation_input, storage
    ):
        with pytest.raises(ReferenceNotFoundError):
            await service.create_group(
                designer,
                title="Promo",
                category_id=ArtGroupId.generate().value,
                variations=[make_variation_input(feed_format)],
            )
        assert storage.uploads == []

    @pytest.mark.asyncio
    async def test_storage_failure_leaves_nothing_behind(
        self, create, storage, group_repository, stats_repository, mock_probe
    ):
        storage.fail = True

        with pytest.raises(StorageFailureError):
            await create()

        assert group_repository.groups == {}
        assert stats_repository.stats == {}
        mock_probe.group_creation_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_stats_failure_does_not_fail_creation(
        self, create, stats_repository, group_repository, mock_probe
    ):
        stats_repository.record_art_created = AsyncMock(
            side_effect=SQLAlchemyError("designer_stats locked")
        )

        group = await create()

        assert group.id.value in group_repository.groups
        mock_probe.designer_stats_sync_failed.assert_called_once()
        assert (
            mock_probe.designer_stats_sync_failed.call_args.kwargs["operation"]
            == "art_created"
        )


class TestCreateGroupWithSeveralFormats:
    @pytest.fixture
    def three_formats(
        self, feed_format, stories_format, banner_format, make_variation_input
    ):
        return [
            make_variation_input(feed_format),
            make_variation_input(stories_format),
            make_variation_input(banner_format),
        ]

    @pytest.mark.asyncio
    async def test_first_variation_is_primary(
        self, service, designer, category, three_formats, feed_format, storage
    ):
        group = await service.create_group(
            designer,
            title="Easter Sale",
            category_id=category.id.value,
            variations=three_formats,
        )

        assert len(group.variations) == 3
        assert [v.is_primary for v in group.variations] == [True, False, False]
        assert group.primary_variation.format_id == feed_format.id
        assert len(storage.uploads) == 3

    @pytest.mark.asyncio
    async def test_group_and_stats_commit_in_one_transaction(
        self,
        service,
        designer,
        category,
        three_formats,
        mock_session,
        stats_repository,
        mock_probe,
    ):
        group = await service.create_group(
            designer,
            title="Easter Sale",
            category_id=category.id.value,
            variations=three_formats,
        )

        # One read-only unit for the reference checks, one for the writes
        assert mock_session.begin.call_count == 2
        stats = await stats_repository.get(group.designer_id)
        assert stats.art_count == 1
        assert mock_probe.group_created.call_args.kwargs["variation_count"] == 3

    @pytest.mark.asyncio
    async def test_second_upload_failure_writes_nothing(
        self,
        service,
        designer,
        category,
        three_formats,
        storage,
        group_repository,
        stats_repository,
        mock_probe,
    ):
        storage.fail_after = 1

        with pytest.raises(StorageFailureError):
            await service.create_group(
                designer,
                title="Easter Sale",
                category_id=category.id.value,
                variations=three_formats,
            )

        assert len(storage.uploads) == 1
        assert group_repository.groups == {}
        assert group_repository.saved == []
        assert stats_repository.stats == {}
        mock_probe.group_creation_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_repeated_format_rejected_before_upload(
        self, service, designer, category, feed_format, make_variation_input, storage
    ):
        with pytest.raises(DuplicateFormatError):
            await service.create_group(
                designer,
                title="Easter Sale",
                category_id=category.id.value,
                variations=[
                    make_variation_input(feed_format),
                    make_variation_input(feed_format),
                ],
            )

        assert storage.uploads == []

    @pytest.mark.asyncio
    async def test_unknown_format_among_several_rejected_before_upload(
        self,
        service,
        designer,
        category,
        feed_format,
        file_type,
        image_upload,
        make_variation_input,
        storage,
    ):
        unknown = VariationInput(
            format_id=ArtGroupId.generate().value,
            file_type_id=file_type.id.value,
            image=image_upload,
        )

        with pytest.raises(ReferenceNotFoundError):
            await service.create_group(
                designer,
                title="Easter Sale",
                category_id=category.id.value,
                variations=[make_variation_input(feed_format), unknown],
            )

        assert storage.uploads == []

    @pytest.mark.asyncio
    async def test_empty_variation_list_rejected(self, service, designer, category):
        with pytest.raises(CatalogValidationError):
            await service.create_group(
                designer,
                title="Easter Sale",
                category_id=category.id.value,
                variations=[],
            )


class TestUploadSizeLimit:
    @pytest.mark.asyncio
    async def test_oversized_image_rejected_before_storage(
        self,
        mock_session,
        group_repository,
        stats_repository,
        reference_repository,
        storage,
        designer,
        category,
        feed_format,
        file_type,
    ):
        service = ArtGroupService(
            session=mock_session,
            group_repository=group_repository,
            stats_repository=stats_repository,
            reference_repository=reference_repository,
            storage=storage,
            max_upload_bytes=1024,
        )
        big = ImageUpload(
            content=b"\x00" * 1025, filename="big.png", content_type="image/png"
        )

        with pytest.raises(UploadTooLargeError):
            await service.create_group(
                designer,
                title="Easter Sale",
                category_id=category.id.value,
                variations=[
                    VariationInput(
                        format_id=feed_format.id.value,
                        file_type_id=file_type.id.value,
                        image=big,
                    )
                ],
            )

        assert storage.uploads == []
        assert group_repository.groups == {}


class TestUpdateGroup:
    @pytest.mark.asyncio
    async def test_owner_renames(self, create, service, designer, group_repository):
        group = await create()

        updated = await service.update_group(
            designer, group.id.value, GroupUpdate(title="Cyber Monday")
        )

        assert updated.title == "Cyber Monday"
        assert group_repository.groups[group.id.value].title == "Cyber Monday"

    @pytest.mark.asyncio
    async def test_empty_update_is_no_op(self, create, service, designer):
        group = await create()
        with pytest.raises(NoOpError):
            await service.update_group(designer, group.id.value, GroupUpdate())

    @pytest.mark.asyncio
    async def test_other_designer_denied(self, create, service, other_designer):
        group = await create()
        with pytest.raises(PermissionDeniedError):
            await service.update_group(
                other_designer, group.id.value, GroupUpdate(title="Mine now")
            )

    @pytest.mark.asyncio
    async def test_owner_cannot_change_visibility(self, create, service, designer):
        group = await create()
        with pytest.raises(PermissionDeniedError):
            await service.update_group(
                designer, group.id.value, GroupUpdate(is_visible=False)
            )

    @pytest.mark.asyncio
    async def test_admin_changes_visibility_and_status(
        self, create, service, admin, group_repository
    ):
        group = await create()

        await service.update_group(
            admin,
            group.id.value,
            GroupUpdate(is_visible=False, status=GroupStatus.INACTIVE),
        )

        stored = group_repository.groups[group.id.value]
        assert stored.is_visible is False
        assert stored.status is GroupStatus.INACTIVE

    @pytest.mark.asyncio
    async def test_unknown_category(self, create, service, designer):
        group = await create()
        with pytest.raises(ReferenceNotFoundError):
            await service.update_group(
                designer,
                group.id.value,
                GroupUpdate(category_id=ArtGroupId.generate().value),
            )

    @pytest.mark.asyncio
    async def test_moves_to_existing_category(
        self, create, service, designer, other_category
    ):
        group = await create()
        updated = await service.update_group(
            designer, group.id.value, GroupUpdate(category_id=other_category.id.value)
        )
        assert updated.category_id == other_category.id

    @pytest.mark.asyncio
    async def test_hidden_group_is_not_found_for_strangers(
        self, create, service, admin, other_designer
    ):
        group = await create()
        await service.update_group(admin, group.id.value, GroupUpdate(is_visible=False))

        with pytest.raises(GroupNotFoundError):
            await service.update_group(
                other_designer, group.id.value, GroupUpdate(title="x")
            )


class TestDeleteGroup:
    @pytest.mark.asyncio
    async def test_admin_deletes_and_stats_floor_at_zero(
        self, create, service, admin, group_repository, stats_repository
    ):
        group = await create()

        await service.delete_group(admin, group.id.value)

        assert group.id.value not in group_repository.groups
        stats = await stats_repository.get(group.designer_id)
        assert stats.art_count == 0

        with pytest.raises(GroupNotFoundError):
            await service.delete_group(admin, group.id.value)
        assert (await stats_repository.get(group.designer_id)).art_count == 0

    @pytest.mark.asyncio
    async def test_owner_cannot_delete(self, create, service, designer):
        group = await create()
        with pytest.raises(PermissionDeniedError):
            await service.delete_group(designer, group.id.value)

    @pytest.mark.asyncio
    async def test_malformed_id(self, service, admin):
        with pytest.raises(CatalogValidationError):
            await service.delete_group(admin, "nope")


class TestCounters:
    @pytest.mark.asyncio
    async def test_view_increments_group_and_designer(
        self, create, service, group_repository, stats_repository
    ):
        group = await create()

        await service.increment_view_count(group.id)

        assert group_repository.groups[group.id.value].view_count == 1
        assert (await stats_repository.get(group.designer_id)).view_count == 1

    @pytest.mark.asyncio
    async def test_view_failure_is_swallowed(
        self, create, service, group_repository, mock_probe
    ):
        group = await create()
        group_repository.increment_view_count = AsyncMock(
            side_effect=SQLAlchemyError("connection reset")
        )

        await service.increment_view_count(group.id)

        mock_probe.view_count_increment_failed.assert_called_once()

    @pytest.mark.asyncio
    async def test_download_recorded(
        self, create, service, anonymous, group_repository, stats_repository
    ):
        group = await create()

        await service.record_download(anonymous, group.id.value)

        assert group_repository.groups[group.id.value].download_count == 1
        stats = await stats_repository.get(DesignerId(value=group.designer_id.value))
        assert stats.download_count == 1

    @pytest.mark.asyncio
    async def test_download_of_hidden_group_is_not_found(
        self, create, service, admin, anonymous
    ):
        group = await create()
        await service.update_group(admin, group.id.value, GroupUpdate(is_visible=False))

        with pytest.raises(GroupNotFoundError):
            await service.record_download(anonymous, group.id.value)
