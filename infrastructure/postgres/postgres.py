from __future__ import annotations

import threading
from typing import Any

from psycopg.rows import dict_row
from psycopg_pool import ConnectionPool

from infrastructure.client import Client
from infrastructure.logging.logger import get_logger


class BasePostgresClient(Client):
    """Pooled Postgres client.

    A connection is borrowed from the pool for the duration of a single
    statement and handed back immediately afterwards, so one client instance
    can be shared by concurrent request handlers and batch runs.
    """

    def __init__(self, config=None) -> None:
        super().__init__()
        self.logger = get_logger(self.__class__.__name__)

        if config is None:
            from infrastructure.config import PostgresConfig  # noqa: PLC0415

            config = PostgresConfig()

        self.host = config.host
        self.port = config.port
        self.user = config.user
        self.database = config.database
        self.autocommit = config.autocommit
        self.min_pool_size = config.min_pool_size
        self.max_pool_size = config.max_pool_size
        self.pool_timeout = config.pool_timeout
        self._conninfo = config.conninfo()

        self._pool: ConnectionPool | None = None
        self._pool_lock = threading.Lock()

    def _get_pool(self) -> ConnectionPool:
        if self._pool is not None:
            return self._pool
        with self._pool_lock:
            if self._pool is None:
                pool = ConnectionPool(
                    self._conninfo,
                    min_size=self.min_pool_size,
                    max_size=self.max_pool_size,
                    timeout=self.pool_timeout,
                    kwargs={"row_factory": dict_row, "autocommit": self.autocommit},
                    open=False,
                    name=f"{self.database}@{self.host}",
                )
                pool.open()
                self._pool = pool
                self.logger.info(
                    f"Postgres pool created: {self.host}:{self.port}/{self.database} "
                    f"(size {self.min_pool_size}-{self.max_pool_size})"
                )
            return self._pool

    def ping(self) -> bool:
        try:
            return self.fetchone("SELECT 1 AS ok") is not None
        except Exception as e:
            self.logger.debug(f"Postgres ping failed: {e}")
            return False

    def execute(self, query: str, params: tuple[Any, ...] | None = None) -> int:
        with self._get_pool().connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return cur.rowcount

    def fetchone(self, query: str, params: tuple[Any, ...] | None = None) -> dict[str, Any] | None:
        with self._get_pool().connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                row = cur.fetchone()
                return dict(row) if row else None

    def fetchall(self, query: str, params: tuple[Any, ...] | None = None) -> list[dict[str, Any]]:
        with self._get_pool().connection() as conn:
            with conn.cursor() as cur:
                cur.execute(query, params)
                return [dict(r) for r in cur.fetchall()]

    def close(self) -> None:
        with self._pool_lock:
            pool, self._pool = self._pool, None
        if pool is None:
            return
        pool.close()
        self.logger.info("Postgres pool closed")

    def __enter__(self) -> BasePostgresClient:
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        self.close()
        return False
