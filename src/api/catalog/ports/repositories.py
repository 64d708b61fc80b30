"""Repository protocols (ports) for the Catalog bounded context.

Repository protocols define the interface for persisting and retrieving
catalog aggregates. Implementations issue parameterized statements only and
never commit: the calling service owns the transaction boundary.
"""

from __future__ import annotations

from typing import Protocol, Sequence, runtime_checkable

from catalog.domain.aggregates import ArtGroup, DesignerStats, ReferenceEntry
from catalog.domain.aggregates.reference import ReferenceKind
from catalog.domain.value_objects import ArtGroupId, DesignerId
from catalog.ports.read_models import ArtGroupSummary, GroupListFilters


@runtime_checkable
class IArtGroupRepository(Protocol):
    """Repository for ArtGroup aggregate persistence.

    Groups are always loaded together with all of their variations, so the
    aggregate can enforce its invariants before every save.
    """

    async def get_by_id(
        self, group_id: ArtGroupId, *, for_update: bool = False
    ) -> ArtGroup | None:
        """Retrieve a group and its variations.

        Args:
            group_id: The unique identifier of the group
            for_update: Lock the group row until the transaction ends. Every
                unit that may move the primary flag must load with this set.

        Returns:
            The ArtGroup aggregate, or None if not found
        """
        ...

    async def save(self, group: ArtGroup) -> None:
        """Persist a group aggregate.

        Creates or updates the group row, inserts, updates and deletes
        variation rows so they match the aggregate, and applies the primary
        flag in a single statement.

        Args:
            group: The ArtGroup aggregate to persist

        Raises:
            DuplicateFormatError: If the store rejects a second variation in
                the same format
        """
        ...

    async def delete(self, group: ArtGroup) -> bool:
        """Delete a group and, by cascade, all of its variations.

        Returns:
            True if a row was deleted, False if it was already gone
        """
        ...

    async def increment_view_count(self, group_id: ArtGroupId) -> DesignerId | None:
        """Atomically add one to the group's view counter.

        Returns:
            The owning designer, or None if the group does not exist
        """
        ...

    async def increment_download_count(
        self, group_id: ArtGroupId
    ) -> DesignerId | None:
        """Atomically add one to the group's download counter.

        Returns:
            The owning designer, or None if the group does not exist
        """
        ...


@runtime_checkable
class IDesignerStatsRepository(Protocol):
    """Repository for per-designer counters.

    All changes are single atomic statements (upsert-with-increment), so
    concurrent writers for the same designer serialize on the row lock.
    """

    async def get(self, designer_id: DesignerId) -> DesignerStats | None:
        """Retrieve a designer's counters, or None if none were recorded yet."""
        ...

    async def record_art_created(self, designer_id: DesignerId) -> None:
        """Increment art_count, creating the row with 1 if absent."""
        ...

    async def record_art_deleted(self, designer_id: DesignerId) -> None:
        """Decrement art_count, never below zero. Missing rows are ignored."""
        ...

    async def record_view(self, designer_id: DesignerId) -> None:
        """Increment view_count, creating the row if absent."""
        ...

    async def record_download(self, designer_id: DesignerId) -> None:
        """Increment download_count, creating the row if absent."""
        ...


@runtime_checkable
class IReferenceDataRepository(Protocol):
    """Repository for categories, formats and file types."""

    async def exists(self, kind: ReferenceKind, entry_id: str) -> bool:
        """Whether a reference entry of the given kind exists."""
        ...

    async def list_all(self, kind: ReferenceKind) -> Sequence[ReferenceEntry]:
        """All entries of a kind, ordered by name."""
        ...

    async def add(self, entry: ReferenceEntry) -> None:
        """Insert a new entry.

        Raises:
            DuplicateSlugError: If the slug is already used for this kind
        """
        ...

    async def get(self, kind: ReferenceKind, entry_id: str) -> ReferenceEntry | None:
        """Load one entry, or None when it does not exist."""
        ...

    async def update(self, entry: ReferenceEntry) -> None:
        """Persist the name and slug of an existing entry.

        Raises:
            DuplicateSlugError: If another entry of this kind has the slug
        """
        ...

    async def delete(self, kind: ReferenceKind, entry_id: str) -> bool:
        """Delete an entry; False when it did not exist.

        Raises:
            ReferenceInUseError: If a group or variation still points at it
        """
        ...


@runtime_checkable
class IArtGroupQueryRepository(Protocol):
    """Read-side repository producing listing projections."""

    async def list_groups(
        self, filters: GroupListFilters, offset: int, limit: int
    ) -> tuple[list[ArtGroupSummary], int]:
        """Return one page of matching groups and the total match count.

        Args:
            filters: Resolved filters (hidden groups only when include_hidden)
            offset: Rows to skip
            limit: Maximum rows to return

        Returns:
            Tuple of (page items, total number of matching groups)
        """
        ...

    async def list_related(
        self, group: ArtGroup, limit: int
    ) -> list[ArtGroupSummary]:
        """Visible groups sharing the category or designer of ``group``.

        Ranked: same category and designer, then same category, then same
        designer; newest first within a rank. ``group`` itself is excluded.
        """
        ...
