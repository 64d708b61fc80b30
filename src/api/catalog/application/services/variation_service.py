"""Variation manager for the Catalog bounded context.

All mutations of variation rows go through this service. Units that can move
the primary flag run at the configured isolation level with the group row
locked, and are retried as a whole when PostgreSQL reports a conflict.
"""

from __future__ import annotations

from typing import Awaitable, Callable, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.access_policy import AccessPolicy
from catalog.application.observability import (
    DefaultVariationServiceProbe,
    VariationServiceProbe,
)
from catalog.application.services.support import (
    ensure_reference_exists,
    ensure_upload_size,
    parse_identifier,
)
from catalog.application.value_objects import Caller, VariationInput
from catalog.domain.aggregates import ArtGroup, ArtVariation, ReferenceKind
from catalog.domain.aggregates.art_variation import validate_url
from catalog.domain.exceptions import DuplicateFormatError
from catalog.domain.value_objects import (
    ArtGroupId,
    ArtVariationId,
    FileTypeId,
    FormatId,
    VariationContent,
)
from catalog.ports.exceptions import (
    ConcurrentModificationError,
    GroupNotFoundError,
    PermissionDeniedError,
)
from catalog.ports.repositories import IArtGroupRepository, IReferenceDataRepository
from catalog.ports.storage import DEFAULT_MAX_UPLOAD_BYTES, ImageStorage
from infrastructure.database import RetriesExhaustedError, run_in_transaction
from infrastructure.observability import TransactionProbe

T = TypeVar("T")


class VariationService:
    """Application service for variation mutations.

    Guarantees, per group, that exactly one variation is primary after every
    committed unit and that the last variation is never removed on its own.
    """

    def __init__(
        self,
        session: AsyncSession,
        group_repository: IArtGroupRepository,
        reference_repository: IReferenceDataRepository,
        storage: ImageStorage,
        access_policy: AccessPolicy | None = None,
        probe: VariationServiceProbe | None = None,
        isolation_level: str | None = "REPEATABLE READ",
        attempts: int = 3,
        transaction_probe: TransactionProbe | None = None,
        max_upload_bytes: int = DEFAULT_MAX_UPLOAD_BYTES,
    ):
        """Initialize VariationService with dependencies.

        Args:
            session: Database session for transaction management
            group_repository: Repository for group persistence
            reference_repository: Repository for format/file type lookups
            storage: Image storage collaborator
            access_policy: Access predicates (a shared default when omitted)
            probe: Optional domain probe for observability
            isolation_level: Isolation level of primary-changing transactions
            attempts: Tries per unit when the database reports a conflict
            transaction_probe: Optional probe for transaction retries
            max_upload_bytes: Largest accepted image, checked before storage
        """
        self._session = session
        self._group_repository = group_repository
        self._reference_repository = reference_repository
        self._storage = storage
        self._policy = access_policy or AccessPolicy()
        self._probe = probe or DefaultVariationServiceProbe()
        self._isolation_level = isolation_level
        self._attempts = attempts
        self._transaction_probe = transaction_probe
        self._max_upload_bytes = max_upload_bytes

    async def add_variation(
        self,
        caller: Caller,
        group_id: str,
        variation: VariationInput,
        make_primary: bool = False,
    ) -> ArtVariation:
        """Add a variation to a group, optionally making it the primary.

        Permissions, references and the format slot are checked first, then
        the image is stored, then the row is written in one unit.

        Args:
            caller: Who is adding the variation
            group_id: Target group
            variation: Format, file type, image and edit link
            make_primary: Move the primary flag to the new variation

        Returns:
            The new ArtVariation

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
            PermissionDeniedError: If the caller is neither owner nor admin-tier
            ReferenceNotFoundError: If the format or file type is missing
            DuplicateFormatError: If the group already has this format
            UploadTooLargeError: If the image is above the size limit
            StorageFailureError: If the image could not be stored
            ConcurrentModificationError: If the unit kept conflicting
        """
        gid = parse_identifier(ArtGroupId, group_id, "group id")
        format_id = parse_identifier(FormatId, variation.format_id, "format id")
        file_type_id = parse_identifier(
            FileTypeId, variation.file_type_id, "file type id"
        )
        if variation.edit_url:
            validate_url(variation.edit_url, "edit_url")
        ensure_upload_size(variation.image, self._max_upload_bytes)

        async with self._session.begin():
            group = await self._load_manageable(caller, gid, "add_variation")
            await ensure_reference_exists(
                self._reference_repository, ReferenceKind.FORMAT, format_id.value
            )
            await ensure_reference_exists(
                self._reference_repository, ReferenceKind.FILE_TYPE, file_type_id.value
            )
            if any(v.format_id == format_id for v in group.variations):
                raise DuplicateFormatError(
                    f"Group {gid} already has a variation in format {format_id}"
                )

        try:
            stored = await self._storage.store(variation.image)
        except Exception as e:
            self._probe.variation_addition_failed(group_id=gid.value, error=str(e))
            raise

        content = VariationContent(
            format_id=format_id,
            file_type_id=file_type_id,
            image_url=stored.url,
            dimensions=stored.dimensions,
            edit_url=variation.edit_url,
        )

        async def unit() -> ArtVariation:
            locked = await self._load_manageable(caller, gid, "add_variation")
            added = locked.add_variation(content, make_primary=make_primary)
            await self._group_repository.save(locked)
            return added

        added = await self._run_unit("add_variation", gid, unit)

        self._probe.variation_added(
            group_id=gid.value,
            variation_id=added.id.value,
            format_id=format_id.value,
            is_primary=added.is_primary,
        )
        return added

    async def set_primary(
        self, caller: Caller, group_id: str, variation_id: str
    ) -> ArtVariation:
        """Move the primary flag to the named variation in one atomic unit.

        Setting the current primary again is a no-op.

        Returns:
            The variation that is now primary

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
            VariationNotFoundError: If the variation does not belong to the group
            PermissionDeniedError: If the caller is neither owner nor admin-tier
            ConcurrentModificationError: If the unit kept conflicting
        """
        gid = parse_identifier(ArtGroupId, group_id, "group id")
        vid = parse_identifier(ArtVariationId, variation_id, "variation id")

        async def unit() -> tuple[ArtVariation, ArtVariation, bool]:
            group = await self._load_manageable(caller, gid, "set_primary")
            previous = group.primary_variation
            changed = group.set_primary(vid)
            if changed:
                await self._group_repository.save(group)
            return group.get_variation(vid), previous, changed

        primary, previous, changed = await self._run_unit("set_primary", gid, unit)

        if changed:
            self._probe.primary_changed(
                group_id=gid.value,
                variation_id=primary.id.value,
                previous_variation_id=previous.id.value,
            )
        return primary

    async def remove_variation(
        self, caller: Caller, group_id: str, variation_id: str
    ) -> ArtVariation | None:
        """Remove a variation from its group.

        Removing the primary hands the flag to the most recently created
        remaining variation within the same unit.

        Returns:
            The variation that inherited the primary flag, or None when a
            non-primary variation was removed

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
            VariationNotFoundError: If the variation does not belong to the group
            PermissionDeniedError: If the caller is neither owner nor admin-tier
            LastVariationError: If it is the group's only variation
            ConcurrentModificationError: If the unit kept conflicting
        """
        gid = parse_identifier(ArtGroupId, group_id, "group id")
        vid = parse_identifier(ArtVariationId, variation_id, "variation id")

        async def unit() -> ArtVariation | None:
            group = await self._load_manageable(caller, gid, "remove_variation")
            _, successor = group.remove_variation(vid)
            await self._group_repository.save(group)
            return successor

        successor = await self._run_unit("remove_variation", gid, unit)

        self._probe.variation_removed(
            group_id=gid.value,
            variation_id=vid.value,
            new_primary_id=successor.id.value if successor else None,
        )
        return successor

    async def edit_variation_link(
        self, caller: Caller, group_id: str, variation_id: str, edit_url: str | None
    ) -> ArtVariation:
        """Replace or clear a variation's external edit link.

        Does not interact with the primary flag.

        Raises:
            GroupNotFoundError: If the group is missing or hidden from the caller
            VariationNotFoundError: If the variation does not belong to the group
            PermissionDeniedError: If the caller is neither owner nor admin-tier
            CatalogValidationError: If the link is not an http(s) URL
        """
        gid = parse_identifier(ArtGroupId, group_id, "group id")
        vid = parse_identifier(ArtVariationId, variation_id, "variation id")

        async with self._session.begin():
            group = await self._load_manageable(caller, gid, "edit_variation_link")
            variation = group.change_variation_edit_url(vid, edit_url)
            await self._group_repository.save(group)

        self._probe.edit_link_changed(group_id=gid.value, variation_id=vid.value)
        return variation

    async def _load_manageable(
        self, caller: Caller, group_id: ArtGroupId, operation: str
    ) -> ArtGroup:
        """Lock and load a group the caller is allowed to change."""
        group = await self._group_repository.get_by_id(group_id, for_update=True)
        if group is None or not self._policy.can_view_group(caller, group):
            raise GroupNotFoundError(f"Art group {group_id} not found")
        if not self._policy.can_manage_group(caller, group):
            raise PermissionDeniedError(
                f"Only the owner or an admin can {operation.replace('_', ' ')}"
            )
        return group

    async def _run_unit(
        self,
        name: str,
        group_id: ArtGroupId,
        unit: Callable[[], Awaitable[T]],
    ) -> T:
        try:
            return await run_in_transaction(
                self._session,
                unit,
                name=name,
                isolation_level=self._isolation_level,
                attempts=self._attempts,
                probe=self._transaction_probe,
            )
        except RetriesExhaustedError as e:
            self._probe.concurrent_modification(
                group_id=group_id.value, operation=name
            )
            raise ConcurrentModificationError(
                f"Art group {group_id} was modified concurrently; retry the request"
            ) from e
