"""DesignerStats aggregate: per-designer counters."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import UTC, datetime

from catalog.domain.value_objects import DesignerId


@dataclass
class DesignerStats:
    """Aggregate counters keyed by designer.

    The persisted row is only ever changed with atomic SQL increments; the
    methods here describe the same arithmetic for in-memory use. Counts are
    never allowed to go below zero.
    """

    designer_id: DesignerId
    art_count: int = 0
    download_count: int = 0
    view_count: int = 0
    followers_count: int = 0
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def record_art_created(self) -> None:
        self.art_count += 1
        self.updated_at = datetime.now(UTC)

    def record_art_deleted(self) -> None:
        self.art_count = max(self.art_count - 1, 0)
        self.updated_at = datetime.now(UTC)

    def record_view(self) -> None:
        self.view_count += 1
        self.updated_at = datetime.now(UTC)

    def record_download(self) -> None:
        self.download_count += 1
        self.updated_at = datetime.now(UTC)
