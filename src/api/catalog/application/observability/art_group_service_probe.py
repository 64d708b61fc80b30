"""Protocol for art group service observability.

Defines the interface for domain probes that capture application-level
events of the group lifecycle: creation, edits, deletion, counters and
designer statistics synchronization.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ArtGroupServiceProbe(Protocol):
    """Domain probe for art group lifecycle operations."""

    def group_created(
        self,
        group_id: str,
        designer_id: str,
        variation_id: str,
        variation_count: int,
    ) -> None:
        """Record that a group was created with its initial variations."""
        ...

    def group_creation_failed(self, designer_id: str, error: str) -> None:
        """Record that group creation failed and nothing was written."""
        ...

    def group_updated(self, group_id: str, fields: list[str]) -> None:
        """Record that group metadata changed."""
        ...

    def group_deleted(self, group_id: str, designer_id: str) -> None:
        """Record that a group and its variations were deleted."""
        ...

    def permission_denied(self, operation: str, caller_id: str | None) -> None:
        """Record that a caller was refused an operation."""
        ...

    def designer_stats_sync_failed(
        self, designer_id: str, operation: str, error: str
    ) -> None:
        """Record that designer statistics could not be updated.

        The surrounding group operation still commits.
        """
        ...

    def view_count_increment_failed(self, group_id: str, error: str) -> None:
        """Record that a best-effort view increment failed."""
        ...

    def download_recorded(self, group_id: str, caller_id: str | None) -> None:
        """Record that a download was counted."""
        ...

    def download_recording_failed(self, group_id: str, error: str) -> None:
        """Record that a best-effort download increment failed."""
        ...

    def with_context(self, context: ObservationContext) -> ArtGroupServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultArtGroupServiceProbe:
    """Default implementation of ArtGroupServiceProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        """Get context metadata as kwargs for logging."""
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultArtGroupServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultArtGroupServiceProbe(logger=self._logger, context=context)

    def group_created(
        self,
        group_id: str,
        designer_id: str,
        variation_id: str,
        variation_count: int,
    ) -> None:
        self._logger.info(
            "art_group_created",
            group_id=group_id,
            designer_id=designer_id,
            variation_id=variation_id,
            variation_count=variation_count,
            **self._get_context_kwargs(),
        )

    def group_creation_failed(self, designer_id: str, error: str) -> None:
        self._logger.error(
            "art_group_creation_failed",
            designer_id=designer_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def group_updated(self, group_id: str, fields: list[str]) -> None:
        self._logger.info(
            "art_group_updated",
            group_id=group_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: str, designer_id: str) -> None:
        self._logger.info(
            "art_group_deleted",
            group_id=group_id,
            designer_id=designer_id,
            **self._get_context_kwargs(),
        )

    def permission_denied(self, operation: str, caller_id: str | None) -> None:
        self._logger.warning(
            "art_group_permission_denied",
            operation=operation,
            caller_id=caller_id,
            **self._get_context_kwargs(),
        )

    def designer_stats_sync_failed(
        self, designer_id: str, operation: str, error: str
    ) -> None:
        self._logger.error(
            "designer_stats_sync_failed",
            designer_id=designer_id,
            operation=operation,
            error=error,
            **self._get_context_kwargs(),
        )

    def view_count_increment_failed(self, group_id: str, error: str) -> None:
        self._logger.warning(
            "view_count_increment_failed",
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def download_recorded(self, group_id: str, caller_id: str | None) -> None:
        self._logger.info(
            "art_group_download_recorded",
            group_id=group_id,
            caller_id=caller_id,
            **self._get_context_kwargs(),
        )

    def download_recording_failed(self, group_id: str, error: str) -> None:
        self._logger.warning(
            "download_recording_failed",
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )
