"""Protocol for reference data service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ReferenceDataServiceProbe(Protocol):
    """Domain probe for reference data management."""

    def reference_entry_created(self, kind: str, entry_id: str, slug: str) -> None:
        """Record that a category, format or file type was created."""
        ...

    def reference_entry_updated(
        self, kind: str, entry_id: str, fields: list[str]
    ) -> None:
        """Record that the name or slug of an entry changed."""
        ...

    def reference_entry_deleted(self, kind: str, entry_id: str) -> None:
        """Record that an unused entry was deleted."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> ReferenceDataServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultReferenceDataServiceProbe:
    """Default implementation of ReferenceDataServiceProbe using structlog."""

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
    ) -> DefaultReferenceDataServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultReferenceDataServiceProbe(logger=self._logger, context=context)

    def reference_entry_created(self, kind: str, entry_id: str, slug: str) -> None:
        self._logger.info(
            "reference_entry_created",
            kind=kind,
            entry_id=entry_id,
            slug=slug,
            **self._get_context_kwargs(),
        )

    def reference_entry_updated(
        self, kind: str, entry_id: str, fields: list[str]
    ) -> None:
        self._logger.info(
            "reference_entry_updated",
            kind=kind,
            entry_id=entry_id,
            fields=fields,
            **self._get_context_kwargs(),
        )

    def reference_entry_deleted(self, kind: str, entry_id: str) -> None:
        self._logger.info(
            "reference_entry_deleted",
            kind=kind,
            entry_id=entry_id,
            **self._get_context_kwargs(),
        )
