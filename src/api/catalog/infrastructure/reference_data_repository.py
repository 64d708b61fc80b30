"""PostgreSQL implementation of IReferenceDataRepository."""

from __future__ import annotations

from typing import Sequence

from sqlalchemy import delete, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from catalog.domain.aggregates import (
    Category,
    FileType,
    Format,
    ReferenceEntry,
    ReferenceKind,
)
from catalog.domain.value_objects import CategoryId, FileTypeId, FormatId
from catalog.infrastructure.models import CategoryModel, FileTypeModel, FormatModel
from catalog.infrastructure.observability import (
    DefaultReferenceDataRepositoryProbe,
    ReferenceDataRepositoryProbe,
)
from catalog.ports.exceptions import DuplicateSlugError, ReferenceInUseError
from catalog.ports.repositories import IReferenceDataRepository
from infrastructure.database.transactions import get_sqlstate

# SQLSTATE raised when a RESTRICT foreign key blocks a delete
FOREIGN_KEY_VIOLATION = "23503"

ReferenceModel = CategoryModel | FormatModel | FileTypeModel

_MODELS: dict[ReferenceKind, type[ReferenceModel]] = {
    ReferenceKind.CATEGORY: CategoryModel,
    ReferenceKind.FORMAT: FormatModel,
    ReferenceKind.FILE_TYPE: FileTypeModel,
}

_KINDS: dict[type, ReferenceKind] = {
    Category: ReferenceKind.CATEGORY,
    Format: ReferenceKind.FORMAT,
    FileType: ReferenceKind.FILE_TYPE,
}


class ReferenceDataRepository(IReferenceDataRepository):
    """Repository for categories, formats and file types."""

    def __init__(
        self,
        session: AsyncSession,
        probe: ReferenceDataRepositoryProbe | None = None,
    ) -> None:
        self._session = session
        self._probe = probe or DefaultReferenceDataRepositoryProbe()

    async def exists(self, kind: ReferenceKind, entry_id: str) -> bool:
        model = _MODELS[kind]
        result = await self._session.execute(
            select(model.id).where(model.id == entry_id)
        )
        return result.scalar_one_or_none() is not None

    async def list_all(self, kind: ReferenceKind) -> Sequence[ReferenceEntry]:
        model = _MODELS[kind]
        result = await self._session.execute(
            select(model).order_by(model.name, model.id)
        )
        return [self._to_domain(kind, row) for row in result.scalars().all()]

    async def add(self, entry: ReferenceEntry) -> None:
        """Insert a new entry.

        Raises:
            DuplicateSlugError: If the slug is already used for this kind
        """
        kind = _KINDS[type(entry)]
        model = _MODELS[kind]

        result = await self._session.execute(
            select(model.id).where(model.slug == entry.slug)
        )
        if result.scalar_one_or_none() is not None:
            self._probe.duplicate_slug(kind.value, entry.slug)
            raise DuplicateSlugError(f"{kind.value} slug '{entry.slug}' is taken")

        self._session.add(
            model(
                id=entry.id.value,
                name=entry.name,
                slug=entry.slug,
                created_at=entry.created_at,
                updated_at=entry.created_at,
            )
        )
        try:
            await self._session.flush()
        except IntegrityError as e:
            # Lost a race with a concurrent insert of the same slug
            self._probe.duplicate_slug(kind.value, entry.slug)
            raise DuplicateSlugError(
                f"{kind.value} slug '{entry.slug}' is taken"
            ) from e

    async def get(self, kind: ReferenceKind, entry_id: str) -> ReferenceEntry | None:
        model = _MODELS[kind]
        result = await self._session.execute(
            select(model).where(model.id == entry_id)
        )
        row = result.scalar_one_or_none()
        if row is None:
            return None
        return self._to_domain(kind, row)

    async def update(self, entry: ReferenceEntry) -> None:
        """Persist the name and slug of an existing entry.

        Raises:
            DuplicateSlugError: If another entry of this kind has the slug
        """
        kind = _KINDS[type(entry)]
        model = _MODELS[kind]

        result = await self._session.execute(
            select(model.id).where(
                model.slug == entry.slug, model.id != entry.id.value
            )
        )
        if result.scalar_one_or_none() is not None:
            self._probe.duplicate_slug(kind.value, entry.slug)
            raise DuplicateSlugError(f"{kind.value} slug '{entry.slug}' is taken")

        try:
            await self._session.execute(
                update(model)
                .where(model.id == entry.id.value)
                .values(name=entry.name, slug=entry.slug)
            )
        except IntegrityError as e:
            self._probe.duplicate_slug(kind.value, entry.slug)
            raise DuplicateSlugError(
                f"{kind.value} slug '{entry.slug}' is taken"
            ) from e

    async def delete(self, kind: ReferenceKind, entry_id: str) -> bool:
        """Delete an entry; False when it did not exist.

        Raises:
            ReferenceInUseError: If a group or variation still points at it
        """
        model = _MODELS[kind]
        try:
            result = await self._session.execute(
                delete(model).where(model.id == entry_id)
            )
        except IntegrityError as e:
            if get_sqlstate(e) != FOREIGN_KEY_VIOLATION:
                raise
            self._probe.reference_in_use(kind.value, entry_id)
            raise ReferenceInUseError(
                f"{kind.value} {entry_id} is still used by published art"
            ) from e
        return result.rowcount > 0

    @staticmethod
    def _to_domain(kind: ReferenceKind, row: ReferenceModel) -> ReferenceEntry:
        if kind is ReferenceKind.CATEGORY:
            return Category(
                id=CategoryId(value=row.id),
                name=row.name,
                slug=row.slug,
                created_at=row.created_at,
            )
        if kind is ReferenceKind.FORMAT:
            return Format(
                id=FormatId(value=row.id),
                name=row.name,
                slug=row.slug,
                created_at=row.created_at,
            )
        return FileType(
            id=FileTypeId(value=row.id),
            name=row.name,
            slug=row.slug,
            created_at=row.created_at,
        )
