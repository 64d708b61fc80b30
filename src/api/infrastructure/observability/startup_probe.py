"""Domain probe for application startup and shutdown.

Records which collaborators the catalog was wired against, so a
misconfigured deployment shows up in the first lines of its log.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class StartupProbe(Protocol):
    """Domain probe for application lifecycle events."""

    def application_started(self, app_name: str, version: str) -> None:
        ...

    def image_storage_configured(
        self, bucket: str, has_fallback: bool, timeout_seconds: float
    ) -> None:
        """Record the storage chain uploads will go through."""
        ...

    def identity_provider_configured(self, issuer_url: str, role_claim: str) -> None:
        """Record where bearer tokens are validated and how roles are read."""
        ...

    def application_stopping(self, app_name: str) -> None:
        ...

    def with_context(self, context: ObservationContext) -> StartupProbe:
        ...


class DefaultStartupProbe:
    """Default implementation of StartupProbe using structlog."""

    def __init__(
        self,
        logger: structlog.stdlib.BoundLogger | None = None,
        context: ObservationContext | None = None,
    ):
        self._logger = logger or structlog.get_logger()
        self._context = context

    def _get_context_kwargs(self) -> dict[str, Any]:
        if self._context is None:
            return {}
        return self._context.as_dict()

    def with_context(self, context: ObservationContext) -> DefaultStartupProbe:
        return DefaultStartupProbe(logger=self._logger, context=context)

    def application_started(self, app_name: str, version: str) -> None:
        self._logger.info(
            "application_started",
            app_name=app_name,
            version=version,
            **self._get_context_kwargs(),
        )

    def image_storage_configured(
        self, bucket: str, has_fallback: bool, timeout_seconds: float
    ) -> None:
        self._logger.info(
            "image_storage_configured",
            bucket=bucket,
            has_fallback=has_fallback,
            timeout_seconds=timeout_seconds,
            **self._get_context_kwargs(),
        )
        if not has_fallback:
            self._logger.warning(
                "image_storage_without_fallback",
                bucket=bucket,
                **self._get_context_kwargs(),
            )

    def identity_provider_configured(self, issuer_url: str, role_claim: str) -> None:
        self._logger.info(
            "identity_provider_configured",
            issuer_url=issuer_url,
            role_claim=role_claim,
            **self._get_context_kwargs(),
        )

    def application_stopping(self, app_name: str) -> None:
        self._logger.info(
            "application_stopping",
            app_name=app_name,
            **self._get_context_kwargs(),
        )
