"""Shared fixtures for revenue_aggregator tests.

The balance store is replaced by in-memory fakes so engine, HTTP and CLI
behaviour can be tested without Postgres.
"""

from __future__ import annotations

import json
import threading
from collections.abc import Callable
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from system.revenue_aggregator.auth import SharedSecretAuth
from system.revenue_aggregator.domain.errors import StorageError
from system.revenue_aggregator.domain.models import Balance
from system.revenue_aggregator.engine import AggregationEngine
from system.revenue_aggregator.strategy.registry import StrategyRegistry, build_default_registry

SECRET = "test-secret"


@dataclass
class InMemoryBalanceStore:
    """Balance store keeping rows in a dict, serialized by a lock."""

    rows: dict[str, int] = field(default_factory=dict)
    applied: list[tuple[str, int]] = field(default_factory=list)
    _lock: threading.Lock = field(default_factory=threading.Lock, repr=False)

    def apply_delta(self, user_id: str, delta: int) -> None:
        with self._lock:
            self.rows[user_id] = self.rows.get(user_id, 0) + delta
            self.applied.append((user_id, delta))

    def get(self, user_id: str) -> Balance | None:
        with self._lock:
            if user_id not in self.rows:
                return None
            return Balance(user_id=user_id, revenue=self.rows[user_id])


@dataclass
class FlakyBalanceStore(InMemoryBalanceStore):
    """In-memory store that raises StorageError for chosen users."""

    failing_users: set[str] = field(default_factory=set)

    def apply_delta(self, user_id: str, delta: int) -> None:
        if user_id in self.failing_users:
            raise StorageError(f"write failed for {user_id}")
        super().apply_delta(user_id, delta)

    def get(self, user_id: str) -> Balance | None:
        if user_id in self.failing_users:
            raise StorageError(f"read failed for {user_id}")
        return super().get(user_id)


def event_line(user_id: str, name: str, value: int) -> str:
    return json.dumps({"userId": user_id, "name": name, "value": value})


@pytest.fixture
def store() -> InMemoryBalanceStore:
    return InMemoryBalanceStore()


@pytest.fixture
def flaky_store() -> FlakyBalanceStore:
    return FlakyBalanceStore(failing_users={"broken"})


@pytest.fixture
def registry() -> StrategyRegistry:
    return build_default_registry()


@pytest.fixture
def auth() -> SharedSecretAuth:
    return SharedSecretAuth(SECRET)


@pytest.fixture
def engine(registry, store, auth) -> AggregationEngine:
    return AggregationEngine(registry=registry, store=store, auth=auth)


@pytest.fixture
def write_events(tmp_path: Path) -> Callable[[list[str]], Path]:
    """Write raw lines to an event log and return its path."""

    def _write(lines: list[str], name: str = "events.jsonl") -> Path:
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path

    return _write


@pytest.fixture
def line() -> Callable[[str, str, int], str]:
    """Build one JSON event record."""
    return event_line


@pytest.fixture
def make_store() -> Callable[[], InMemoryBalanceStore]:
    """Factory for fresh, empty in-memory stores."""
    return InMemoryBalanceStore
