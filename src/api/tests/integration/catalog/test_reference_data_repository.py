"""Integration tests for ReferenceDataRepository."""

from __future__ import annotations

import pytest

from catalog.domain.aggregates import Category, Format, ReferenceKind
from catalog.ports.exceptions import DuplicateSlugError, ReferenceInUseError

pytestmark = pytest.mark.integration


class TestReferenceDataRepository:
    @pytest.mark.asyncio
    async def test_lists_entries_ordered_by_name(
        self, reference_repository, reference_data
    ) -> None:
        formats = await reference_repository.list_all(ReferenceKind.FORMAT)

        assert [f.slug for f in formats] == ["banner", "feed", "stories"]
        assert all(isinstance(f, Format) for f in formats)

    @pytest.mark.asyncio
    async def test_exists_is_scoped_to_kind(
        self, reference_repository, reference_data
    ) -> None:
        easter = reference_data["easter"]

        assert await reference_repository.exists(
            ReferenceKind.CATEGORY, easter.id.value
        )
        assert not await reference_repository.exists(
            ReferenceKind.FORMAT, easter.id.value
        )

    @pytest.mark.asyncio
    async def test_duplicate_slug_is_rejected(
        self, async_session, reference_repository, reference_data
    ) -> None:
        with pytest.raises(DuplicateSlugError):
            await reference_repository.add(Category.create("Easter 2", "easter"))
        await async_session.rollback()

    @pytest.mark.asyncio
    async def test_same_slug_allowed_across_kinds(
        self, async_session, reference_repository, reference_data
    ) -> None:
        await reference_repository.add(Category.create("Feed", "feed"))
        await async_session.commit()

        categories = await reference_repository.list_all(ReferenceKind.CATEGORY)
        assert "feed" in [c.slug for c in categories]

    @pytest.mark.asyncio
    async def test_get_returns_entry_of_kind(
        self, reference_repository, reference_data
    ) -> None:
        feed = reference_data["feed"]

        loaded = await reference_repository.get(ReferenceKind.FORMAT, feed.id.value)

        assert isinstance(loaded, Format)
        assert loaded.slug == "feed"
        missing = await reference_repository.get(ReferenceKind.CATEGORY, feed.id.value)
        assert missing is None

    @pytest.mark.asyncio
    async def test_update_persists_name_and_slug(
        self, async_session, reference_repository, reference_data
    ) -> None:
        easter = reference_data["easter"]
        easter.rename("Easter Sunday")
        easter.change_slug("easter-sunday")

        await reference_repository.update(easter)
        await async_session.commit()

        loaded = await reference_repository.get(
            ReferenceKind.CATEGORY, easter.id.value
        )
        assert loaded is not None
        assert (loaded.name, loaded.slug) == ("Easter Sunday", "easter-sunday")

    @pytest.mark.asyncio
    async def test_update_keeping_own_slug_is_allowed(
        self, async_session, reference_repository, reference_data
    ) -> None:
        feed = reference_data["feed"]
        feed.rename("Square Feed")

        await reference_repository.update(feed)
        await async_session.commit()

        loaded = await reference_repository.get(ReferenceKind.FORMAT, feed.id.value)
        assert loaded is not None
        assert loaded.slug == "feed"

    @pytest.mark.asyncio
    async def test_update_to_taken_slug_is_rejected(
        self, async_session, reference_repository, reference_data
    ) -> None:
        stories = reference_data["stories"]
        stories.change_slug("feed")

        with pytest.raises(DuplicateSlugError):
            await reference_repository.update(stories)
        await async_session.rollback()

    @pytest.mark.asyncio
    async def test_delete_unused_entry(
        self, async_session, reference_repository, reference_data
    ) -> None:
        banner = reference_data["banner"]

        assert await reference_repository.delete(
            ReferenceKind.FORMAT, banner.id.value
        )
        await async_session.commit()

        assert not await reference_repository.exists(
            ReferenceKind.FORMAT, banner.id.value
        )

    @pytest.mark.asyncio
    async def test_delete_missing_entry_returns_false(
        self, async_session, reference_repository, reference_data
    ) -> None:
        assert not await reference_repository.delete(
            ReferenceKind.FILE_TYPE, "01ARZ3NDEKTSV4RRFFQ69G5FAV"
        )
        await async_session.rollback()

    @pytest.mark.asyncio
    @pytest.mark.parametrize(
        "kind,slug",
        [
            (ReferenceKind.CATEGORY, "easter"),
            (ReferenceKind.FORMAT, "feed"),
            (ReferenceKind.FILE_TYPE, "canva"),
        ],
    )
    async def test_delete_entry_in_use_is_rejected(
        self,
        async_session,
        reference_repository,
        reference_data,
        saved_group,
        kind,
        slug,
    ) -> None:
        await saved_group(category="easter", format_slug="feed")
        entry_id = reference_data[slug].id.value

        with pytest.raises(ReferenceInUseError):
            await reference_repository.delete(kind, entry_id)
        await async_session.rollback()

        assert await reference_repository.exists(kind, entry_id)

