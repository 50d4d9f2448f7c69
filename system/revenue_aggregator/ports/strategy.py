"""Processing strategy port."""

from __future__ import annotations

from typing import Protocol

from system.revenue_aggregator.domain.models import Event


class ProcessingStrategy(Protocol):
    """Protocol for pure functions mapping an event to a signed balance delta."""

    def delta(self, event: Event) -> int:
        """Return the signed amount to apply to ``event.user_id``'s balance."""
        ...
