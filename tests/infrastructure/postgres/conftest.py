"""Shared fixtures for Postgres client tests.

psycopg_pool.ConnectionPool is patched so BasePostgresClient can be exercised
without a running database.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch

import pytest

from infrastructure.config import PostgresConfig


@pytest.fixture
def postgres_config() -> PostgresConfig:
    return PostgresConfig(
        host="db.example.com",
        port=55432,
        user="rev_user",
        password="rev_pass",
        database="revenue",
        connect_timeout=5,
        min_pool_size=2,
        max_pool_size=8,
        pool_timeout=3.0,
    )


@pytest.fixture
def mock_pool() -> dict[str, Any]:
    """Patch ConnectionPool with a pool whose connections yield one cursor."""
    with patch("infrastructure.postgres.postgres.ConnectionPool") as mock_pool_cls:
        cursor = MagicMock()
        cursor.__enter__.return_value = cursor
        cursor.__exit__.return_value = False
        cursor.rowcount = 1

        connection = MagicMock()
        connection.cursor.return_value = cursor

        connection_cm = MagicMock()
        connection_cm.__enter__.return_value = connection
        connection_cm.__exit__.return_value = False

        pool = MagicMock()
        pool.connection.return_value = connection_cm
        mock_pool_cls.return_value = pool

        yield {
            "pool_cls": mock_pool_cls,
            "pool": pool,
            "connection_cm": connection_cm,
            "connection": connection,
            "cursor": cursor,
        }
