"""Probes for the shared infrastructure: connections, transactions, startup.

Bounded contexts keep their own probes next to their services and
repositories; the ones here cover plumbing every context relies on.
"""

from shared_kernel.observability_context import ObservationContext
from infrastructure.observability.probes import (
    ConnectionProbe,
    DefaultConnectionProbe,
    DefaultTransactionProbe,
    TransactionProbe,
)
from infrastructure.observability.startup_probe import (
    DefaultStartupProbe,
    StartupProbe,
)

__all__ = [
    "ConnectionProbe",
    "DefaultConnectionProbe",
    "DefaultStartupProbe",
    "DefaultTransactionProbe",
    "ObservationContext",
    "StartupProbe",
    "TransactionProbe",
]
