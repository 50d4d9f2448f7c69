"""DDL for the revenue balances table."""

from __future__ import annotations

MIGRATIONS: list[str] = [
    """
    CREATE TABLE IF NOT EXISTS {table_q} (
      user_id TEXT PRIMARY KEY,
      revenue BIGINT NOT NULL DEFAULT 0
    );
    """,
]
