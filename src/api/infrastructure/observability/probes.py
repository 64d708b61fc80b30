"""Domain probes for infrastructure observability.

Domain probes provide a high-level instrumentation API oriented around
domain semantics, keeping infrastructure code clean and testable.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

import structlog

if TYPE_CHECKING:
    from shared_kernel.observability_context import ObservationContext


class ConnectionProbe(Protocol):
    """Domain probe for database connection observability.

    This probe captures domain-significant events related to database
    connections without exposing logging implementation details.
    """

    def connection_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a database connection attempt failed."""
        ...

    def pool_initialized(self, min_conn: int, max_conn: int) -> None:
        """Record that connection pool was initialized."""
        ...

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        ...

    def with_context(self, context: ObservationContext) -> ConnectionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultConnectionProbe:
    """Default implementation of ConnectionProbe using structlog.

    Supports observation context for including request-scoped metadata
    with all log events.
    """

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

    def with_context(self, context: ObservationContext) -> DefaultConnectionProbe:
        """Create a new probe with observation context bound."""
        return DefaultConnectionProbe(logger=self._logger, context=context)

    def connection_failed(self, host: str, database: str, error: Exception) -> None:
        """Record that a database connection attempt failed."""
        self._logger.error(
            "database_connection_failed",
            host=host,
            database=database,
            error=str(error),
            **self._get_context_kwargs(),
        )

    def pool_initialized(self, min_conn: int, max_conn: int) -> None:
        """Record that connection pool was initialized."""
        self._logger.info(
            "connection_pool_initialized",
            min_connections=min_conn,
            max_connections=max_conn,
            **self._get_context_kwargs(),
        )

    def pool_closed(self) -> None:
        """Record that the connection pool was closed."""
        self._logger.info(
            "connection_pool_closed",
            **self._get_context_kwargs(),
        )


class TransactionProbe(Protocol):
    """Domain probe for transactional units of work."""

    def transaction_retried(
        self, name: str, attempt: int, sqlstate: str | None
    ) -> None:
        """Record that a unit hit a retryable conflict and will run again."""
        ...

    def transaction_retries_exhausted(
        self, name: str, attempts: int, sqlstate: str | None
    ) -> None:
        """Record that a unit gave up after repeated conflicts."""
        ...

    def with_context(self, context: ObservationContext) -> TransactionProbe:
        """Create a new probe with observation context bound."""
        ...


class DefaultTransactionProbe:
    """Default implementation of TransactionProbe using structlog."""

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

    def with_context(self, context: ObservationContext) -> DefaultTransactionProbe:
        """Create a new probe with observation context bound."""
        return DefaultTransactionProbe(logger=self._logger, context=context)

    def transaction_retried(
        self, name: str, attempt: int, sqlstate: str | None
    ) -> None:
        """Record that a unit hit a retryable conflict and will run again."""
        self._logger.warning(
            "transaction_retried",
            unit=name,
            attempt=attempt,
            sqlstate=sqlstate,
            **self._get_context_kwargs(),
        )

    def transaction_retries_exhausted(
        self, name: str, attempts: int, sqlstate: str | None
    ) -> None:
        """Record that a unit gave up after repeated conflicts."""
        self._logger.error(
            "transaction_retries_exhausted",
            unit=name,
            attempts=attempts,
            sqlstate=sqlstate,
            **self._get_context_kwargs(),
        )
