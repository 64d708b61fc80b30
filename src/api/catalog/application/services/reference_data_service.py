"""Reference data service: categories, formats and file types."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy.ext.asyncio import AsyncSession

from catalog.application.access_policy import AccessPolicy
from catalog.application.observability import (
    DefaultReferenceDataServiceProbe,
    ReferenceDataServiceProbe,
)
from catalog.application.value_objects import Caller
from catalog.domain.aggregates import (
    Category,
    FileType,
    Format,
    ReferenceEntry,
    ReferenceKind,
)
from catalog.domain.exceptions import NoOpError
from catalog.ports.exceptions import (
    PermissionDeniedError,
    ReferenceNotFoundError,
)
from catalog.ports.repositories import IReferenceDataRepository

_FACTORIES = {
    ReferenceKind.CATEGORY: Category.create,
    ReferenceKind.FORMAT: Format.create,
    ReferenceKind.FILE_TYPE: FileType.create,
}


class ReferenceDataService:
    """Lists reference data for everyone; manages it for admins only."""

    def __init__(
        self,
        session: AsyncSession,
        reference_repository: IReferenceDataRepository,
        access_policy: AccessPolicy | None = None,
        probe: ReferenceDataServiceProbe | None = None,
    ):
        self._session = session
        self._reference_repository = reference_repository
        self._policy = access_policy or AccessPolicy()
        self._probe = probe or DefaultReferenceDataServiceProbe()

    async def list_entries(self, kind: ReferenceKind) -> Sequence[ReferenceEntry]:
        return await self._reference_repository.list_all(kind)

    async def create_entry(
        self, caller: Caller, kind: ReferenceKind, name: str, slug: str
    ) -> ReferenceEntry:
        """Create a category, format or file type.

        Raises:
            PermissionDeniedError: If the caller is not admin-tier
            CatalogValidationError: If the name or slug is malformed
            DuplicateSlugError: If the slug is taken
        """
        if not self._policy.can_manage_reference_data(caller):
            raise PermissionDeniedError("Only admins can manage reference data")

        entry = _FACTORIES[kind](name, slug)

        async with self._session.begin():
            await self._reference_repository.add(entry)

        self._probe.reference_entry_created(
            kind=kind.value, entry_id=entry.id.value, slug=entry.slug
        )
        return entry

    async def update_entry(
        self,
        caller: Caller,
        kind: ReferenceKind,
        entry_id: str,
        name: str | None = None,
        slug: str | None = None,
    ) -> ReferenceEntry:
        """Rename an entry or change its slug.

        Raises:
            PermissionDeniedError: If the caller is not admin-tier
            NoOpError: If neither field is supplied
            ReferenceNotFoundError: If the entry does not exist
            CatalogValidationError: If the name or slug is malformed
            DuplicateSlugError: If another entry of this kind has the slug
        """
        if not self._policy.can_manage_reference_data(caller):
            raise PermissionDeniedError("Only admins can manage reference data")
        if name is None and slug is None:
            raise NoOpError("Nothing to update")

        async with self._session.begin():
            entry = await self._reference_repository.get(kind, entry_id)
            if entry is None:
                raise ReferenceNotFoundError(f"{kind.value} {entry_id} not found")
            if name is not None:
                entry.rename(name)
            if slug is not None:
                entry.change_slug(slug)
            await self._reference_repository.update(entry)

        fields = [
            field
            for field, value in (("name", name), ("slug", slug))
            if value is not None
        ]
        self._probe.reference_entry_updated(
            kind=kind.value, entry_id=entry_id, fields=fields
        )
        return entry

    async def delete_entry(
        self, caller: Caller, kind: ReferenceKind, entry_id: str
    ) -> None:
        """Delete an entry that no art refers to.

        Raises:
            PermissionDeniedError: If the caller is not admin-tier
            ReferenceNotFoundError: If the entry does not exist
            ReferenceInUseError: If a group or variation still uses it
        """
        if not self._policy.can_manage_reference_data(caller):
            raise PermissionDeniedError("Only admins can manage reference data")

        async with self._session.begin():
            deleted = await self._reference_repository.delete(kind, entry_id)
        if not deleted:
            raise ReferenceNotFoundError(f"{kind.value} {entry_id} not found")

        self._probe.reference_entry_deleted(kind=kind.value, entry_id=entry_id)
