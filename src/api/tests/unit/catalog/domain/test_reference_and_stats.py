"""Unit tests for reference data entries and designer statistics."""

import pytest

from catalog.domain.aggregates import Category, DesignerStats, FileType, Format
from catalog.domain.exceptions import CatalogValidationError
from catalog.domain.value_objects import DesignerId


class TestReferenceEntries:
    @pytest.mark.parametrize("factory", [Category.create, Format.create, FileType.create])
    def test_create_strips_name(self, factory):
        entry = factory("  Stories ", "stories")
        assert entry.name == "Stories"
        assert entry.slug == "stories"

    @pytest.mark.parametrize("slug", ["Stories", "two words", "-lead", "trail-", ""])
    def test_rejects_bad_slug(self, slug):
        with pytest.raises(CatalogValidationError):
            Category.create("Name", slug)

    def test_rejects_blank_name(self):
        with pytest.raises(CatalogValidationError):
            Format.create("  ", "feed")


class TestDesignerStats:
    def test_art_count_never_goes_negative(self):
        stats = DesignerStats(designer_id=DesignerId(value="d"))
        stats.record_art_created()
        stats.record_art_deleted()
        stats.record_art_deleted()
        assert stats.art_count == 0

    def test_counters_increment(self):
        stats = DesignerStats(designer_id=DesignerId(value="d"))
        stats.record_view()
        stats.record_download()
        stats.record_download()
        assert (stats.view_count, stats.download_count) == (1, 2)
