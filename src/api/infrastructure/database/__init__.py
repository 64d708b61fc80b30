"""Database infrastructure: engines, sessions and transactional units."""

from infrastructure.database.exceptions import (
    DatabaseError,
    RetriesExhaustedError,
    TransactionError,
)
from infrastructure.database.transactions import is_retryable, run_in_transaction

__all__ = [
    "DatabaseError",
    "RetriesExhaustedError",
    "TransactionError",
    "is_retryable",
    "run_in_transaction",
]
