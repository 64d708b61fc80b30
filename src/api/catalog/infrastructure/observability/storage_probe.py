"""Domain probe for image storage adapters."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ImageStorageProbe(Protocol):
    """Domain probe for image uploads."""

    def image_stored(
        self, provider: str, url: str, size: int, width: int, height: int
    ) -> None:
        """Record that an image was uploaded."""
        ...

    def image_rejected(self, filename: str, reason: str) -> None:
        """Record that an upload was refused before reaching a provider."""
        ...

    def provider_failed(self, provider: str, error: str) -> None:
        """Record that one provider failed (others may still be tried)."""
        ...

    def all_providers_failed(self, providers: list[str]) -> None:
        """Record that no provider could store the image."""
        ...

    def with_context(self, context: ObservationContext) -> ImageStorageProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultImageStorageProbe:
    """Default implementation of ImageStorageProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultImageStorageProbe:
        """Create a new probe with observation context bound."""
        return DefaultImageStorageProbe(logger=self._logger, context=context)

    def image_stored(
        self, provider: str, url: str, size: int, width: int, height: int
    ) -> None:
        self._logger.info(
            "image_stored",
            provider=provider,
            url=url,
            size=size,
            width=width,
            height=height,
            **self._get_context_kwargs(),
        )

    def image_rejected(self, filename: str, reason: str) -> None:
        self._logger.warning(
            "image_rejected",
            filename=filename,
            reason=reason,
            **self._get_context_kwargs(),
        )

    def provider_failed(self, provider: str, error: str) -> None:
        self._logger.warning(
            "image_storage_provider_failed",
            provider=provider,
            error=error,
            **self._get_context_kwargs(),
        )

    def all_providers_failed(self, providers: list[str]) -> None:
        self._logger.error(
            "image_storage_failed",
            providers=providers,
            **self._get_context_kwargs(),
        )
