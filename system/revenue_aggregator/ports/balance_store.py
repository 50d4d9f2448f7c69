"""Balance store port.

Defines the protocol for the durable per-user revenue table.
"""

from __future__ import annotations

from typing import Protocol

from system.revenue_aggregator.domain.models import Balance


class BalanceStore(Protocol):
    """Protocol for atomic balance mutation and point lookup."""

    def apply_delta(self, user_id: str, delta: int) -> None:
        """Create the user's row with ``delta`` or add ``delta`` to it, atomically.

        Raises:
            StorageError: On any underlying I/O or constraint failure.
        """
        ...

    def get(self, user_id: str) -> Balance | None:
        """Return the user's balance, or None if no row exists.

        Raises:
            StorageError: On any underlying I/O failure.
        """
        ...
