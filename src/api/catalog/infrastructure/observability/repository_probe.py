"""Domain probes for catalog repository operations.

Following Domain-Oriented Observability patterns, these probes capture
domain-significant events of group and reference data persistence.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ArtGroupRepositoryProbe(Protocol):
    """Domain probe for art group repository operations."""

    def group_saved(self, group_id: str, variation_count: int) -> None:
        """Record that a group and its variations were persisted."""
        ...

    def group_retrieved(self, group_id: str, variation_count: int) -> None:
        """Record that a group was loaded with its variations."""
        ...

    def group_not_found(self, group_id: str) -> None:
        """Record that a group was not found."""
        ...

    def group_deleted(self, group_id: str) -> None:
        """Record that a group row was deleted."""
        ...

    def duplicate_format_rejected(self, group_id: str) -> None:
        """Record that the store rejected a second variation in one format."""
        ...

    def with_context(self, context: ObservationContext) -> ArtGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultArtGroupRepositoryProbe:
    """Default implementation of ArtGroupRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultArtGroupRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultArtGroupRepositoryProbe(logger=self._logger, context=context)

    def group_saved(self, group_id: str, variation_count: int) -> None:
        self._logger.debug(
            "art_group_saved",
            group_id=group_id,
            variation_count=variation_count,
            **self._get_context_kwargs(),
        )

    def group_retrieved(self, group_id: str, variation_count: int) -> None:
        self._logger.debug(
            "art_group_retrieved",
            group_id=group_id,
            variation_count=variation_count,
            **self._get_context_kwargs(),
        )

    def group_not_found(self, group_id: str) -> None:
        self._logger.debug(
            "art_group_not_found",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def group_deleted(self, group_id: str) -> None:
        self._logger.info(
            "art_group_row_deleted",
            group_id=group_id,
            **self._get_context_kwargs(),
        )

    def duplicate_format_rejected(self, group_id: str) -> None:
        self._logger.warning(
            "duplicate_format_rejected",
            group_id=group_id,
            **self._get_context_kwargs(),
        )


class ReferenceDataRepositoryProbe(Protocol):
    """Domain probe for reference data repository operations."""

    def duplicate_slug(self, kind: str, slug: str) -> None:
        """Record that a reference slug was already taken."""
        ...

    def reference_in_use(self, kind: str, entry_id: str) -> None:
        """Record that deleting an entry was refused because art uses it."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> ReferenceDataRepositoryProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReferenceDataRepositoryProbe:
    """Default implementation of ReferenceDataRepositoryProbe using structlog."""

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

    def with_context(
        self, context: ObservationContext
    ) -> DefaultReferenceDataRepositoryProbe:
        """Create a new probe with observation context bound."""
        return DefaultReferenceDataRepositoryProbe(
            logger=self._logger, context=context
        )

    def duplicate_slug(self, kind: str, slug: str) -> None:
        self._logger.warning(
            "duplicate_reference_slug",
            kind=kind,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def reference_in_use(self, kind: str, entry_id: str) -> None:
        self._logger.warning(
            "reference_entry_in_use",
            kind=kind,
            entry_id=entry_id,
            **self._get_context_kwargs(),
        )
