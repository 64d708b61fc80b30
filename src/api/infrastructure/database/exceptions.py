"""Exceptions raised by the shared database helpers."""


class DatabaseError(Exception):
    """Base exception for database operations."""


class TransactionError(DatabaseError):
    """A unit of work could not be committed."""


class RetriesExhaustedError(TransactionError):
    """Raised when a unit keeps hitting serialization failures or deadlocks.

    Attributes:
        name: Name of the unit that was run
        attempts: How many times the unit was tried
        sqlstate: SQLSTATE reported by the last attempt
    """

    def __init__(
        self,
        message: str,
        attempts: int,
        name: str | None = None,
        sqlstate: str | None = None,
    ):
        super().__init__(message)
        self.name = name
        self.attempts = attempts
        self.sqlstate = sqlstate
