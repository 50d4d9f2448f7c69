"""Registry mapping event kinds to processing strategies.

The registry is an explicit, constructor-built object. Adding a new kind is
a ``register`` call at startup and never touches existing strategies.
"""

from __future__ import annotations

from system.revenue_aggregator.ports.strategy import ProcessingStrategy
from system.revenue_aggregator.strategy.revenue import RevenueStrategy


class StrategyRegistry:
    """Lookup table from exact kind string to a ``ProcessingStrategy``.

    A kind without a binding resolves to None. That is an expected outcome
    ("unhandled kind"), not an error.
    """

    def __init__(self, bindings: dict[str, ProcessingStrategy] | None = None) -> None:
        self._strategies: dict[str, ProcessingStrategy] = {}
        for kind, strategy in (bindings or {}).items():
            self.register(kind, strategy)

    def register(self, kind: str, strategy: ProcessingStrategy) -> None:
        """Bind ``kind`` to ``strategy``, replacing any previous binding.

        Args:
            kind: Exact event name to match.
            strategy: Object exposing ``delta(event) -> int``.

        Raises:
            ValueError: If ``kind`` is empty.
            TypeError: If ``strategy`` has no callable ``delta``.
        """
        if not isinstance(kind, str) or not kind:
            raise ValueError("Strategy kind must be a non-empty string")
        if not callable(getattr(strategy, "delta", None)):
            raise TypeError(f"Strategy for '{kind}' must define delta(event)")
        self._strategies[kind] = strategy

    def register_strategy(self, strategy: ProcessingStrategy) -> None:
        """Bind every kind listed in ``strategy.kinds``.

        Raises:
            TypeError: If ``strategy`` declares no ``kinds``.
        """
        kinds = getattr(strategy, "kinds", None)
        if not kinds:
            raise TypeError(f"{type(strategy).__name__} must declare the kinds it handles")
        for kind in kinds:
            self.register(kind, strategy)

    def resolve(self, kind: str) -> ProcessingStrategy | None:
        return self._strategies.get(kind)

    def kinds(self) -> list[str]:
        return sorted(self._strategies)

    def __contains__(self, kind: object) -> bool:
        return kind in self._strategies

    def __len__(self) -> int:
        return len(self._strategies)


def build_default_registry() -> StrategyRegistry:
    """Return a registry holding the built-in revenue bindings."""
    registry = StrategyRegistry()
    registry.register_strategy(RevenueStrategy())
    return registry
