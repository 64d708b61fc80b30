"""Protocol for variation service observability."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class VariationServiceProbe(Protocol):
    """Domain probe for variation mutations."""

    def variation_added(
        self, group_id: str, variation_id: str, format_id: str, is_primary: bool
    ) -> None:
        """Record that a variation was added to a group."""
        ...

    def variation_addition_failed(self, group_id: str, error: str) -> None:
        """Record that adding a variation failed and nothing was written."""
        ...

    def primary_changed(
        self, group_id: str, variation_id: str, previous_variation_id: str
    ) -> None:
        """Record that the primary flag moved to another variation."""
        ...

    def variation_removed(
        self, group_id: str, variation_id: str, new_primary_id: str | None
    ) -> None:
        """Record that a variation was removed.

        ``new_primary_id`` is set when the removed variation was the primary.
        """
        ...

    def edit_link_changed(self, group_id: str, variation_id: str) -> None:
        """Record that a variation's edit link changed."""
        ...

    def concurrent_modification(self, group_id: str, operation: str) -> None:
        """Record that a unit gave up after repeated conflicts."""
        ...

    def with_context(self, context: ObservationContext) -> VariationServiceProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultVariationServiceProbe:
    """Default implementation of VariationServiceProbe using structlog."""

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
    ) -> DefaultVariationServiceProbe:
        """Create a new probe with observation context bound."""
        return DefaultVariationServiceProbe(logger=self._logger, context=context)

    def variation_added(
        self, group_id: str, variation_id: str, format_id: str, is_primary: bool
    ) -> None:
        self._logger.info(
            "variation_added",
            group_id=group_id,
            variation_id=variation_id,
            format_id=format_id,
            is_primary=is_primary,
            **self._get_context_kwargs(),
        )

    def variation_addition_failed(self, group_id: str, error: str) -> None:
        self._logger.error(
            "variation_addition_failed",
            group_id=group_id,
            error=error,
            **self._get_context_kwargs(),
        )

    def primary_changed(
        self, group_id: str, variation_id: str, previous_variation_id: str
    ) -> None:
        self._logger.info(
            "primary_variation_changed",
            group_id=group_id,
            variation_id=variation_id,
            previous_variation_id=previous_variation_id,
            **self._get_context_kwargs(),
        )

    def variation_removed(
        self, group_id: str, variation_id: str, new_primary_id: str | None
    ) -> None:
        self._logger.info(
            "variation_removed",
            group_id=group_id,
            variation_id=variation_id,
            new_primary_id=new_primary_id,
            **self._get_context_kwargs(),
        )

    def edit_link_changed(self, group_id: str, variation_id: str) -> None:
        self._logger.info(
            "variation_edit_link_changed",
            group_id=group_id,
            variation_id=variation_id,
            **self._get_context_kwargs(),
        )

    def concurrent_modification(self, group_id: str, operation: str) -> None:
        self._logger.warning(
            "variation_concurrent_modification",
            group_id=group_id,
            operation=operation,
            **self._get_context_kwargs(),
        )
