"""Postgres-backed balance store.

Balances live in one table keyed by ``user_id``. Every mutation is a single
``INSERT ... ON CONFLICT DO UPDATE`` statement, so concurrent deltas for the
same user are serialized by Postgres row locking and none are lost.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import Logger

import psycopg

from infrastructure.logging.logger import get_logger
from infrastructure.postgres.postgres import BasePostgresClient
from system.revenue_aggregator.adapters.postgres.migrations import MIGRATIONS
from system.revenue_aggregator.domain.errors import StorageError
from system.revenue_aggregator.domain.models import Balance

DEFAULT_TABLE = "users_revenue"


def _sanitize_identifier(value: str) -> str:
    out = []
    for ch in value.strip().lower():
        if ("a" <= ch <= "z") or ("0" <= ch <= "9") or ch == "_":
            out.append(ch)
        else:
            out.append("_")
    s = "".join(out).strip("_")
    return s or DEFAULT_TABLE


@dataclass(slots=True)
class PostgresBalanceStore:
    """Durable per-user revenue balances.

    Attributes:
        db: Shared pooled client; a connection is held only per statement.
        table: Table name, reduced to ``[a-z0-9_]``.
    """

    db: BasePostgresClient
    table: str = DEFAULT_TABLE
    logger: Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.table = _sanitize_identifier(self.table)
        self.logger = get_logger(self.__class__.__name__)

    def _table_q(self) -> str:
        return f'"{self.table}"'

    def migrate(self) -> None:
        """Create the balances table if it does not exist."""
        try:
            for stmt in MIGRATIONS:
                self.db.execute(stmt.format(table_q=self._table_q()))
        except psycopg.Error as e:
            raise StorageError(f"Migration of {self.table} failed: {e}") from e
        self.logger.info(f"Balance table {self.table} is ready")

    def apply_delta(self, user_id: str, delta: int) -> None:
        try:
            self.db.execute(
                f"""
                INSERT INTO {self._table_q()} (user_id, revenue)
                VALUES (%s, %s)
                ON CONFLICT (user_id) DO UPDATE SET
                  revenue = {self._table_q()}.revenue + EXCLUDED.revenue
                """,
                (user_id, delta),
            )
        except psycopg.Error as e:
            self.logger.error(f"Error updating revenue for user {user_id}: {e}")
            raise StorageError(f"Failed to apply delta {delta} for user {user_id}: {e}") from e
        self.logger.info(f"Updated revenue for user {user_id}: {delta}")

    def get(self, user_id: str) -> Balance | None:
        try:
            row = self.db.fetchone(
                f"SELECT user_id, revenue FROM {self._table_q()} WHERE user_id = %s",
                (user_id,),
            )
        except psycopg.Error as e:
            self.logger.error(f"Error querying revenue for user {user_id}: {e}")
            raise StorageError(f"Failed to read balance for user {user_id}: {e}") from e
        if row is None:
            return None
        return Balance(user_id=row["user_id"], revenue=int(row["revenue"]))
