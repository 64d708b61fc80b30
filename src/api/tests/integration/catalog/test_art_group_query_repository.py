"""Integration tests for ArtGroupQueryRepository."""

from __future__ import annotations

import pytest

from catalog.ports.read_models import GroupListFilters, GroupSortField, SortDirection

pytestmark = pytest.mark.integration


class TestListGroups:
    @pytest.mark.asyncio
    async def test_rows_carry_primary_variation(
        self, query_repository, saved_group
    ) -> None:
        group = await saved_group()

        items, total = await query_repository.list_groups(
            GroupListFilters(), offset=0, limit=10
        )

        assert total == 1
        assert items[0].id == group.id.value
        assert items[0].primary_variation_id == group.primary_variation.id.value
        assert items[0].primary_aspect_ratio == "1:1"
        assert items[0].variation_count == 1

    @pytest.mark.asyncio
    async def test_hidden_groups_only_with_include_hidden(
        self, async_session, group_repository, query_repository, saved_group
    ) -> None:
        await saved_group(title="Visible")
        hidden = await saved_group(title="Hidden")
        hidden.set_visibility(False)
        await group_repository.save(hidden)
        await async_session.commit()

        _, public_total = await query_repository.list_groups(
            GroupListFilters(), offset=0, limit=10
        )
        _, admin_total = await query_repository.list_groups(
            GroupListFilters(include_hidden=True), offset=0, limit=10
        )

        assert (public_total, admin_total) == (1, 2)

    @pytest.mark.asyncio
    async def test_search_matches_wildcards_literally(
        self, query_repository, saved_group
    ) -> None:
        await saved_group(title="50% off")
        await saved_group(title="500 followers")

        items, total = await query_repository.list_groups(
            GroupListFilters(search="50%"), offset=0, limit=10
        )

        assert total == 1
        assert items[0].title == "50% off"

    @pytest.mark.asyncio
    async def test_filters_by_format_of_any_variation(
        self,
        async_session,
        group_repository,
        query_repository,
        saved_group,
        content_for,
        reference_data,
    ) -> None:
        with_stories = await saved_group(title="Has stories")
        with_stories.add_variation(content_for("stories", 1080, 1920))
        await group_repository.save(with_stories)
        await saved_group(title="Feed only")
        await async_session.commit()

        items, total = await query_repository.list_groups(
            GroupListFilters(format_id=reference_data["stories"].id.value),
            offset=0,
            limit=10,
        )

        assert total == 1
        assert items[0].id == with_stories.id.value
        # The primary is still the feed variation
        assert items[0].primary_aspect_ratio == "1:1"

    @pytest.mark.asyncio
    async def test_sorts_and_pages(self, query_repository, saved_group) -> None:
        for title in ("Charlie", "Alpha", "Bravo"):
            await saved_group(title=title)

        filters = GroupListFilters(
            sort=GroupSortField.TITLE, direction=SortDirection.ASC
        )
        first, total = await query_repository.list_groups(filters, offset=0, limit=2)
        second, _ = await query_repository.list_groups(filters, offset=2, limit=2)

        assert total == 3
        assert [i.title for i in first] == ["Alpha", "Bravo"]
        assert [i.title for i in second] == ["Charlie"]


class TestListRelated:
    @pytest.mark.asyncio
    async def test_ranks_by_shared_category_and_designer(
        self, query_repository, saved_group
    ) -> None:
        source = await saved_group(category="easter", designer="designer-1")
        same_designer = await saved_group(
            title="Same designer", category="black-friday", designer="designer-1"
        )
        same_category = await saved_group(
            title="Same category", category="easter", designer="designer-2"
        )
        both = await saved_group(
            title="Both", category="easter", designer="designer-1"
        )
        await saved_group(
            title="Unrelated", category="black-friday", designer="designer-3"
        )

        related = await query_repository.list_related(source, limit=10)

        assert [r.id for r in related] == [
            both.id.value,
            same_category.id.value,
            same_designer.id.value,
        ]

    @pytest.mark.asyncio
    async def test_respects_limit(self, query_repository, saved_group) -> None:
        source = await saved_group()
        for i in range(3):
            await saved_group(title=f"Sibling {i}")

        related = await query_repository.list_related(source, limit=2)

        assert len(related) == 2
