"""Protocol for catalog query service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ArtGroupQueryServiceProbe(Protocol):
    """Domain probe for catalog reads."""

    def groups_listed(
        self, total: int, page: int, page_size: int, include_hidden: bool
    ) -> None:
        """Record that a listing page was served."""
        ...

    def hidden_group_concealed(self, group_id: str, caller_id: str | None) -> None:
        """Record that a hidden group was reported as not found to a caller."""
        ...

    def with_context(
        self, context: ObservationContext
    ) -> ArtGroupQueryServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultArtGroupQueryServiceProbe:
    """Default implementation of ArtGroupQueryServiceProbe using structlog."""

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
    ) -> DefaultArtGroupQueryServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultArtGroupQueryServiceProbe(logger=self._logger, context=context)

    def groups_listed(
        self, total: int, page: int, page_size: int, include_hidden: bool
    ) -> None:
        self._logger.debug(
            "art_groups_listed",
            total=total,
            page=page,
            page_size=page_size,
            include_hidden=include_hidden,
            **self._get_context_kwargs(),
        )

    def hidden_group_concealed(self, group_id: str, caller_id: str | None) -> None:
        self._logger.info(
            "hidden_art_group_concealed",
            group_id=group_id,
            caller_id=caller_id,
            **self._get_context_kwargs(),
        )
