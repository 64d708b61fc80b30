"""Transaction helpers for units of work that must commit atomically.

``run_in_transaction`` wraps a coroutine factory in ``session.begin()``,
optionally pins the isolation level for that transaction, and retries the
whole unit when PostgreSQL reports a serialization failure or a deadlock.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from sqlalchemy.exc import DBAPIError

from infrastructure.database.exceptions import RetriesExhaustedError
from infrastructure.observability.probes import (
    DefaultTransactionProbe,
    TransactionProbe,
)

if TYPE_CHECKING:
    from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

SERIALIZATION_FAILURE = "40001"
DEADLOCK_DETECTED = "40P01"
RETRYABLE_SQLSTATES = frozenset({SERIALIZATION_FAILURE, DEADLOCK_DETECTED})


def get_sqlstate(error: DBAPIError) -> str | None:
    """Extract the SQLSTATE code from a wrapped driver error.

    asyncpg exposes ``sqlstate`` on the original exception; the SQLAlchemy
    adapter re-raises it, so both the adapted error and its cause are checked.
    """
    for candidate in (error.orig, getattr(error.orig, "__cause__", None)):
        if candidate is None:
            continue
        code = getattr(candidate, "sqlstate", None) or getattr(
            candidate, "pgcode", None
        )
        if code:
            return str(code)
    return None


def is_retryable(error: DBAPIError) -> bool:
    """Whether the error means the whole transaction can be safely re-run."""
    return get_sqlstate(error) in RETRYABLE_SQLSTATES


async def run_in_transaction(
    session: AsyncSession,
    unit: Callable[[], Awaitable[T]],
    *,
    name: str,
    isolation_level: str | None = None,
    attempts: int = 1,
    probe: TransactionProbe | None = None,
) -> T:
    """Run ``unit`` inside a single transaction on ``session``.

    The unit is a zero-argument coroutine factory so it can be invoked again
    from scratch after a rollback. It must re-read everything it depends on.

    Args:
        session: Session that owns the transaction
        unit: Coroutine factory performing all reads and writes of the unit
        name: Name of the unit, used in observability events
        isolation_level: Optional isolation level for this transaction only
        attempts: Total tries when the database reports a retryable conflict
        probe: Optional transaction probe

    Returns:
        Whatever ``unit`` returns

    Raises:
        RetriesExhaustedError: If every attempt hit a retryable conflict
        DBAPIError: For non-retryable database failures
    """
    probe = probe or DefaultTransactionProbe()
    attempt = 0

    while True:
        attempt += 1
        try:
            async with session.begin():
                if isolation_level is not None:
                    # Must run before any other statement of the transaction
                    await session.connection(
                        execution_options={"isolation_level": isolation_level}
                    )
                return await unit()
        except DBAPIError as e:
            if not is_retryable(e):
                raise
            sqlstate = get_sqlstate(e)
            if attempt >= attempts:
                probe.transaction_retries_exhausted(
                    name=name, attempts=attempt, sqlstate=sqlstate
                )
                raise RetriesExhaustedError(
                    f"Transaction '{name}' failed after {attempt} attempt(s)",
                    attempts=attempt,
                    name=name,
                    sqlstate=sqlstate,
                ) from e
            probe.transaction_retried(name=name, attempt=attempt, sqlstate=sqlstate)
