"""Fixtures for catalog unit tests.

In-memory repositories copy aggregates on the way in and out, so a unit that
fails half-way leaves nothing behind, like a rolled-back transaction.
"""

from __future__ import annotations

import copy
from typing import Sequence
from unittest.mock import AsyncMock, MagicMock

import pytest

from catalog.application.value_objects import Caller, CallerRole, VariationInput
from catalog.domain.aggregates import (
    ArtGroup,
    Category,
    DesignerStats,
    FileType,
    Format,
    ReferenceEntry,
    ReferenceKind,
)
from catalog.domain.value_objects import ArtGroupId, DesignerId
from catalog.ports.exceptions import (
    DuplicateSlugError,
    ReferenceInUseError,
    StorageFailureError,
)
from catalog.ports.read_models import ArtGroupSummary, GroupListFilters
from catalog.ports.storage import ImageUpload, StoredImage

_KINDS = {
    Category: ReferenceKind.CATEGORY,
    Format: ReferenceKind.FORMAT,
    FileType: ReferenceKind.FILE_TYPE,
}


class InMemoryArtGroupRepository:
    def __init__(self) -> None:
        self.groups: dict[str, ArtGroup] = {}
        self.saved: list[str] = []

    async def get_by_id(
        self, group_id: ArtGroupId, *, for_update: bool = False
    ) -> ArtGroup | None:
        group = self.groups.get(group_id.value)
        return copy.deepcopy(group) if group else None

    async def save(self, group: ArtGroup) -> None:
        group.ensure_consistent()
        self.groups[group.id.value] = copy.deepcopy(group)
        self.saved.append(group.id.value)

    async def delete(self, group: ArtGroup) -> bool:
        return self.groups.pop(group.id.value, None) is not None

    async def increment_view_count(self, group_id: ArtGroupId) -> DesignerId | None:
        group = self.groups.get(group_id.value)
        if group is None:
            return None
        group.view_count += 1
        return group.designer_id

    async def increment_download_count(
        self, group_id: ArtGroupId
    ) -> DesignerId | None:
        group = self.groups.get(group_id.value)
        if group is None:
            return None
        group.download_count += 1
        return group.designer_id


class InMemoryDesignerStatsRepository:
    def __init__(self) -> None:
        self.stats: dict[str, DesignerStats] = {}

    def _row(self, designer_id: DesignerId) -> DesignerStats:
        return self.stats.setdefault(
            designer_id.value, DesignerStats(designer_id=designer_id)
        )

    async def get(self, designer_id: DesignerId) -> DesignerStats | None:
        return self.stats.get(designer_id.value)

    async def record_art_created(self, designer_id: DesignerId) -> None:
        self._row(designer_id).record_art_created()

    async def record_art_deleted(self, designer_id: DesignerId) -> None:
        if designer_id.value in self.stats:
            self.stats[designer_id.value].record_art_deleted()

    async def record_view(self, designer_id: DesignerId) -> None:
        self._row(designer_id).record_view()

    async def record_download(self, designer_id: DesignerId) -> None:
        self._row(designer_id).record_download()


class InMemoryReferenceDataRepository:
    def __init__(self) -> None:
        self.entries: dict[ReferenceKind, dict[str, ReferenceEntry]] = {
            kind: {} for kind in ReferenceKind
        }
        # Entry ids that a RESTRICT foreign key would protect
        self.in_use: set[str] = set()

    async def exists(self, kind: ReferenceKind, entry_id: str) -> bool:
        return entry_id in self.entries[kind]

    async def list_all(self, kind: ReferenceKind) -> Sequence[ReferenceEntry]:
        return sorted(self.entries[kind].values(), key=lambda e: e.name)

    async def add(self, entry: ReferenceEntry) -> None:
        kind = _KINDS[type(entry)]
        if any(e.slug == entry.slug for e in self.entries[kind].values()):
            raise DuplicateSlugError(f"{kind.value} slug '{entry.slug}' is taken")
        self.entries[kind][entry.id.value] = entry

    async def get(self, kind: ReferenceKind, entry_id: str) -> ReferenceEntry | None:
        entry = self.entries[kind].get(entry_id)
        return copy.deepcopy(entry) if entry is not None else None

    async def update(self, entry: ReferenceEntry) -> None:
        kind = _KINDS[type(entry)]
        if any(
            e.slug == entry.slug and e.id.value != entry.id.value
            for e in self.entries[kind].values()
        ):
            raise DuplicateSlugError(f"{kind.value} slug '{entry.slug}' is taken")
        self.entries[kind][entry.id.value] = copy.deepcopy(entry)

    async def delete(self, kind: ReferenceKind, entry_id: str) -> bool:
        if entry_id in self.in_use:
            raise ReferenceInUseError(f"{kind.value} {entry_id} is still in use")
        return self.entries[kind].pop(entry_id, None) is not None


class InMemoryArtGroupQueryRepository:
    """Listing over an InMemoryArtGroupRepository, newest first."""

    def __init__(self, groups: InMemoryArtGroupRepository) -> None:
        self._groups = groups

    async def list_groups(
        self, filters: GroupListFilters, offset: int, limit: int
    ) -> tuple[list[ArtGroupSummary], int]:
        matches = [
            g
            for g in self._groups.groups.values()
            if (filters.include_hidden or g.is_visible)
            and (
                filters.category_id is None
                or g.category_id.value == filters.category_id
            )
            and (
                filters.designer_id is None
                or g.designer_id.value == filters.designer_id
            )
            and (
                filters.search is None
                or filters.search.lower() in g.title.lower()
            )
        ]
        matches.sort(key=lambda g: (g.created_at, g.id.value), reverse=True)
        page = matches[offset : offset + limit]
        return [summarize(g) for g in page], len(matches)

    async def list_related(self, group: ArtGroup, limit: int) -> list[ArtGroupSummary]:
        def rank(g: ArtGroup) -> int:
            same_category = g.category_id == group.category_id
            same_designer = g.designer_id == group.designer_id
            if same_category and same_designer:
                return 0
            return 1 if same_category else 2

        related = [
            g
            for g in self._groups.groups.values()
            if g.id != group.id
            and g.is_visible
            and (g.category_id == group.category_id or g.designer_id == group.designer_id)
        ]
        related.sort(key=lambda g: g.created_at, reverse=True)
        related.sort(key=rank)
        return [summarize(g) for g in related[:limit]]


def summarize(group: ArtGroup) -> ArtGroupSummary:
    primary = group.primary_variation
    return ArtGroupSummary(
        id=group.id.value,
        title=group.title,
        category_id=group.category_id.value,
        designer_id=group.designer_id.value,
        is_premium=group.is_premium,
        is_visible=group.is_visible,
        status=group.status,
        download_count=group.download_count,
        view_count=group.view_count,
        like_count=group.like_count,
        created_at=group.created_at,
        updated_at=group.updated_at,
        primary_variation_id=primary.id.value,
        primary_image_url=primary.image_url,
        primary_aspect_ratio=primary.aspect_ratio,
        variation_count=len(group.variations),
    )


class FakeImageStorage:
    """Returns a fixed-size image per upload, or fails when told to.

    ``fail_after`` lets that many uploads succeed before every later one fails.
    """

    def __init__(self, width: int = 1080, height: int = 1080) -> None:
        self.width = width
        self.height = height
        self.fail = False
        self.fail_after: int | None = None
        self.uploads: list[ImageUpload] = []

    async def store(self, upload: ImageUpload) -> StoredImage:
        if self.fail or (
            self.fail_after is not None and len(self.uploads) >= self.fail_after
        ):
            raise StorageFailureError("storage unavailable")
        self.uploads.append(upload)
        return StoredImage(
            url=f"https://cdn.example.com/arts/{len(self.uploads)}.webp",
            width=self.width,
            height=self.height,
        )


def make_transaction() -> MagicMock:
    transaction = MagicMock()
    transaction.__aenter__ = AsyncMock(return_value=None)
    transaction.__aexit__ = AsyncMock(return_value=None)
    return transaction


@pytest.fixture
def mock_session():
    """Create mock async session with transaction and savepoint support."""
    session = AsyncMock()
    session.begin = MagicMock(side_effect=lambda: make_transaction())
    session.begin_nested = MagicMock(side_effect=lambda: make_transaction())
    return session


@pytest.fixture
def group_repository() -> InMemoryArtGroupRepository:
    return InMemoryArtGroupRepository()


@pytest.fixture
def stats_repository() -> InMemoryDesignerStatsRepository:
    return InMemoryDesignerStatsRepository()


@pytest.fixture
def reference_repository() -> InMemoryReferenceDataRepository:
    return InMemoryReferenceDataRepository()


@pytest.fixture
def query_repository(group_repository) -> InMemoryArtGroupQueryRepository:
    return InMemoryArtGroupQueryRepository(group_repository)


@pytest.fixture
def storage() -> FakeImageStorage:
    return FakeImageStorage()


@pytest.fixture
def category(reference_repository) -> Category:
    entry = Category.create("Black Friday", "black-friday")
    reference_repository.entries[ReferenceKind.CATEGORY][entry.id.value] = entry
    return entry


@pytest.fixture
def other_category(reference_repository) -> Category:
    entry = Category.create("Christmas", "christmas")
    reference_repository.entries[ReferenceKind.CATEGORY][entry.id.value] = entry
    return entry


@pytest.fixture
def feed_format(reference_repository) -> Format:
    entry = Format.create("Feed", "feed")
    reference_repository.entries[ReferenceKind.FORMAT][entry.id.value] = entry
    return entry


@pytest.fixture
def stories_format(reference_repository) -> Format:
    entry = Format.create("Stories", "stories")
    reference_repository.entries[ReferenceKind.FORMAT][entry.id.value] = entry
    return entry


@pytest.fixture
def banner_format(reference_repository) -> Format:
    entry = Format.create("Banner", "banner")
    reference_repository.entries[ReferenceKind.FORMAT][entry.id.value] = entry
    return entry


@pytest.fixture
def file_type(reference_repository) -> FileType:
    entry = FileType.create("Canva", "canva")
    reference_repository.entries[ReferenceKind.FILE_TYPE][entry.id.value] = entry
    return entry


@pytest.fixture
def image_upload() -> ImageUpload:
    return ImageUpload(
        content=b"\x89PNG...", filename="feed.png", content_type="image/png"
    )


@pytest.fixture
def make_variation_input(file_type, image_upload):
    """Build a VariationInput for a format."""

    def _make(format_entry: Format, edit_url: str | None = None) -> VariationInput:
        return VariationInput(
            format_id=format_entry.id.value,
            file_type_id=file_type.id.value,
            image=image_upload,
            edit_url=edit_url,
        )

    return _make


@pytest.fixture
def designer() -> Caller:
    return Caller(id="designer-d", role=CallerRole.DESIGNER)


@pytest.fixture
def other_designer() -> Caller:
    return Caller(id="designer-e", role=CallerRole.DESIGNER)


@pytest.fixture
def admin() -> Caller:
    return Caller(id="admin-a", role=CallerRole.ADMIN)


@pytest.fixture
def designer_admin() -> Caller:
    return Caller(id="designer-admin-b", role=CallerRole.DESIGNER_ADMIN)


@pytest.fixture
def plain_user() -> Caller:
    return Caller(id="user-u", role=CallerRole.USER)


@pytest.fixture
def anonymous() -> Caller:
    return Caller.anonymous()

