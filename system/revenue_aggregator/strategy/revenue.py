"""Revenue processing strategy."""

from __future__ import annotations

from typing import ClassVar

from system.revenue_aggregator.domain.models import ADD_REVENUE, SUBTRACT_REVENUE, Event


class RevenueStrategy:
    """Credit ``add_revenue`` events and debit everything else.

    Any kind other than exactly ``add_revenue`` that reaches this strategy is
    treated as a subtraction. The default registry binds it only to
    ``add_revenue`` and ``subtract_revenue``.
    """

    kinds: ClassVar[tuple[str, ...]] = (ADD_REVENUE, SUBTRACT_REVENUE)

    def delta(self, event: Event) -> int:
        if event.name == ADD_REVENUE:
            return event.value
        return -event.value
