"""Art group lifecycle service for the Catalog bounded context.

Creates, edits and deletes groups, keeps designer statistics in step and
maintains the best-effort view and download counters.
"""

from __future__ import annotations

from typing import Awaitable, Callable, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.access_policy import AccessPolicy
from catalog.application.observability import (
    ArtGroupServiceProbe,
    DefaultArtGroupServiceProbe,
)
from catalog.application.services.support import (
    ensure_reference_exists,
    ensure_upload_size,
    parse_identifier,
)
from catalog.application.value_objects import Caller, GroupUpdate, VariationInput
from catalog.domain.aggregates import ArtGroup, ReferenceKind, validate_title
from catalog.domain.aggregates.art_variation import validate_url
from catalog.domain.exceptions import (
    CatalogValidationError,
    DuplicateFormatError,
    NoOpError,
)
from catalog.domain.value_objects import (
    ArtGroupId,
    CategoryId,
    DesignerId,
    FileTypeId,
    FormatId,
    VariationContent,
)
from catalog.ports.exceptions import GroupNotFoundError, PermissionDeniedError
from catalog.ports.repositories import (
    IArtGroupRepository,
    IDesignerStatsRepository,
    IReferenceDataRepository,
)
from catalog.ports.storage import DEFAULT_MAX_UPLOAD_BYTES, ImageStorage


class ArtGroupService:
    """Application service for the art group lifecycle.

    Every mutating method validates input and checks permissions before any
    write. Designer statistics are updated inside a savepoint of the main
    transaction: a statistics failure is logged and rolled back on its own
    while the group change still commits.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IArtGroupRepository,
        stats_repository: IDesignerStatsRepository,
        reference_repository: IReferenceDataRepository,
        storage: ImageStorage,
        access_policy: AccessPolicy | None = None,
        probe: ArtGroupServiceProbe | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        """Initialize ArtGroupService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            stats_repository: Repository for designer statistics
            reference_repository: Repository for category/format/file type lookups
            storage: Image storage collaborator
            access_policy: Access predicates (a shared default when omitted)
            probe: Optional domain probe for observability
            max_upload_bytes: Largest accepted image, checked before storage
        """
        self._session = session
        self._group_repository = group_repository
        self._stats_repository = stats_repository
        self._reference_repository = reference_repository
        self._storage = storage
        self._policy = access_policy or AccessPolicy()
        self._probe = probe or DefaultArtGroupServiceProbe()
        self._max_upload_bytes = max_upload_bytes

    async def create_group(
        self,
        caller: Caller,
        title: str,
        category_id: str,
        variations: Sequence[VariationInput],
        is_premium: bool = False,
    ) -> ArtGroup:
        """Create a group together with all of its initial variations.

        The first variation becomes the primary. Every image is stored before
        the transaction starts; the group row, all variation rows and the
        statistics upsert then commit as one unit, so a storage failure on
        any image leaves nothing behind.

        Args:
            caller: Who is publishing (becomes the owning designer)
            title: Group title
            category_id: Category reference
            variations: Format, file type, image and edit link per variation
            is_premium: Whether the work is premium-only

        Returns:
            The created ArtGroup aggregate

        Raises:
            PermissionDeniedError: If the caller may not publish
            CatalogValidationError: If an input is malformed or missing
            UploadTooLargeError: If an image is above the size limit
            DuplicateFormatError: If two variations share a format
            ReferenceNotFoundError: If the category, a format or a file type
                is missing
            StorageFailureError: If an image could not be stored
        """
        if not self._policy.can_publish(caller) or caller.id is None:
            self._probe.permission_denied("create_group", caller.id)
            raise PermissionDeniedError("Only designers and admins can publish art")
        if not variations:
            raise CatalogValidationError("A group needs at least one variation")

        designer_id = parse_identifier(DesignerId, caller.id, "designer id")
        clean_title = validate_title(title)
        category = parse_identifier(CategoryId, category_id, "category id")

        parsed: list[tuple[FormatId, FileTypeId, VariationInput]] = []
        for variation in variations:
            format_id = parse_identifier(FormatId, variation.format_id, "format id")
            file_type_id = parse_identifier(
                FileTypeId, variation.file_type_id, "file type id"
            )
            if variation.edit_url:
                validate_url(variation.edit_url, "edit_url")
            ensure_upload_size(variation.image, self._max_upload_bytes)
            if any(format_id == seen for seen, _, _ in parsed):
                raise DuplicateFormatError(
                    f"Format {format_id} is listed more than once"
                )
            parsed.append((format_id, file_type_id, variation))

        async with self._session.begin():
            await ensure_reference_exists(
                self._reference_repository, ReferenceKind.CATEGORY, category.value
            )
            for format_id, file_type_id, _ in parsed:
                await ensure_reference_exists(
                    self._reference_repository, ReferenceKind.FORMAT, format_id.value
                )
                await ensure_reference_exists(
                    self._reference_repository,
                    ReferenceKind.FILE_TYPE,
                    file_type_id.value,
                )

        try:
            contents = []
            for format_id, file_type_id, variation in parsed:
                stored = await self._storage.store(variation.image)
                contents.append(
                    VariationContent(
                        format_id=format_id,
                        file_type_id=file_type_id,
                        image_url=stored.url,
                        dimensions=stored.dimensions,
                        edit_url=variation.edit_url,
                    )
                )

            group = ArtGroup.create(
                title=clean_title,
                category_id=category,
                designer_id=designer_id,
                is_premium=is_premium,
                first_variation=contents[0],
            )
            for content in contents[1:]:
                group.add_variation(content)

            async with self._session.begin():
                await self._group_repository.save(group)
                await self._sync_designer_stats(
                    designer_id,
                    "art_created",
                    lambda: self._stats_repository.record_art_created(designer_id),
                )
        except Exception as e:
            self._probe.group_creation_failed(
                designer_id=designer_id.value, error=str(e)
            )
            raise

        self._probe.group_created(
            group_id=group.id.value,
            designer_id=designer_id.value,
            variation_id=group.primary_variation.id.value,
            variation_count=len(group.variations),
        )
        return group

    async def update_group(
        self, caller: Caller, group_id: str, update: GroupUpdate
    ) -> ArtGroup:
        """Apply a partial update to a group.

        Title, category and premium flag need owner-or-admin; visibility and
        status need an admin-tier caller.

        Returns:
            The updated ArtGroup aggregate

        Raises:
            NoOpError: If the update carries no fields
            GroupNotFoundError: If the group is missing or hidden from the caller
            PermissionDeniedError: If the caller may not change a requested field
            ReferenceNotFoundError: If the new category does not exist
        """
        if update.is_empty:
            raise NoOpError("Update contains no fields to change")

        gid = parse_identifier(ArtGroupId, group_id, "group id")
        new_category = (
            parse_identifier(CategoryId, update.category_id, "category id")
            if update.category_id is not None
            else None
        )
        new_title = validate_title(update.title) if update.title is not None else None

        async with self._session.begin():
            group = await self._group_repository.get_by_id(gid, for_update=True)
            if group is None or not self._policy.can_view_group(caller, group):
                raise GroupNotFoundError(f"Art group {group_id} not found")
            if not self._policy.can_manage_group(caller, group):
                self._probe.permission_denied("update_group", caller.id)
                raise PermissionDeniedError("Only the owner or an admin can edit")
            if update.touches_admin_fields and not self._policy.can_change_visibility(
                caller
            ):
                self._probe.permission_denied("change_visibility", caller.id)
                raise PermissionDeniedError(
                    "Only admins can change visibility or status"
                )

            if new_title is not None:
                group.rename(new_title)
            if new_category is not None:
                await ensure_reference_exists(
                    self._reference_repository,
                    ReferenceKind.CATEGORY,
                    new_category.value,
                )
                group.change_category(new_category)
            if update.is_premium is not None:
                group.set_premium(update.is_premium)
            if update.is_visible is not None:
                group.set_visibility(update.is_visible)
            if update.status is not None:
                group.set_status(update.status)

            await self._group_repository.save(group)

        self._probe.group_updated(group_id=gid.value, fields=update.changed_fields)
        return group

    async def delete_group(self, caller: Caller, group_id: str) -> None:
        """Hard-delete a group with all its variations (admin only).

        The designer's art count is decremented, floored at zero, in the same
        transaction.

        Raises:
            PermissionDeniedError: If the caller is not admin-tier
            GroupNotFoundError: If the group does not exist
        """
        if not self._policy.can_delete_group(caller):
            self._probe.permission_denied("delete_group", caller.id)
            raise PermissionDeniedError("Only admins can delete art groups")

        gid = parse_identifier(ArtGroupId, group_id, "group id")

        async with self._session.begin():
            group = await self._group_repository.get_by_id(gid, for_update=True)
            if group is None:
                raise GroupNotFoundError(f"Art group {group_id} not found")

            await self._group_repository.delete(group)
            await self._sync_designer_stats(
                group.designer_id,
                "art_deleted",
                lambda: self._stats_repository.record_art_deleted(group.designer_id),
            )

        self._probe.group_deleted(
            group_id=gid.value, designer_id=group.designer_id.value
        )

    async def increment_view_count(self, group_id: ArtGroupId) -> None:
        """Best-effort view counter increment for a group and its designer.

        Failures are logged and swallowed; reads never fail because of it.
        """
        try:
            async with self._session.begin():
                designer_id = await self._group_repository.increment_view_count(
                    group_id
                )
                if designer_id is not None:
                    await self._stats_repository.record_view(designer_id)
        except SQLAlchemyError as e:
            self._probe.view_count_increment_failed(
                group_id=group_id.value, error=str(e)
            )

    async def record_download(self, caller: Caller, group_id: str) -> None:
        """Count a download of a group the caller can see.

        The counter update itself is best-effort.

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
        """
        gid = parse_identifier(ArtGroupId, group_id, "group id")

        async with self._session.begin():
            group = await self._group_repository.get_by_id(gid)
        if group is None or not self._policy.can_view_group(caller, group):
            raise GroupNotFoundError(f"Art group {group_id} not found")

        try:
            async with self._session.begin():
                designer_id = await self._group_repository.increment_download_count(
                    gid
                )
                if designer_id is not None:
                    await self._stats_repository.record_download(designer_id)
        except SQLAlchemyError as e:
            self._probe.download_recording_failed(group_id=gid.value, error=str(e))
            return

        self._probe.download_recorded(group_id=gid.value, caller_id=caller.id)

    async def _sync_designer_stats(
        self,
        designer_id: DesignerId,
        operation: str,
        change: Callable[[], Awaitable[None]],
    ) -> None:
        """Apply a statistics change inside a savepoint.

        On failure only the savepoint is rolled back; the enclosing group
        operation continues and commits.
        """
        try:
            async with self._session.begin_nested():
                await change()
        except SQLAlchemyError as e:
            self._probe.designer_stats_sync_failed(
                designer_id=designer_id.value, operation=operation, error=str(e)
            )
