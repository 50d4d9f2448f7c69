"""Configuration models for infrastructure components.

Provides Pydantic-based configuration classes for backing services that
can be shared by any system in the repository.
"""

from __future__ import annotations

from psycopg.conninfo import make_conninfo
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class PostgresConfig(BaseSettings):
    """Postgres connection and pool configuration.

    Reads from POSTGRES_* environment variables automatically.

    Attributes:
        host: Postgres server hostname.
        port: Postgres server port.
        user: Login role.
        password: Login password.
        database: Target database name.
        connect_timeout: Connection timeout in seconds.
        autocommit: Whether pooled connections run in autocommit mode.
        min_pool_size: Connections kept open by the pool.
        max_pool_size: Upper bound on concurrently checked-out connections.
        pool_timeout: Seconds to wait for a free connection before failing.
    """

    model_config = SettingsConfigDict(
        env_prefix="POSTGRES_",
        env_file=None,
        extra="ignore",
    )

    host: str = Field(default="localhost")
    port: int = Field(default=5432)
    user: str = Field(default="postgres")
    password: str = Field(default="")
    database: str = Field(default="postgres")
    connect_timeout: int = Field(default=10)
    autocommit: bool = Field(default=True)
    min_pool_size: int = Field(default=1, ge=0)
    max_pool_size: int = Field(default=10, ge=1)
    pool_timeout: float = Field(default=30.0, gt=0)

    def conninfo(self) -> str:
        """Build a libpq connection string from the configured fields.

        Values are quoted by psycopg, so empty or space-containing passwords
        survive intact.
        """
        return make_conninfo(
            host=self.host,
            port=self.port,
            user=self.user,
            password=self.password,
            dbname=self.database,
            connect_timeout=self.connect_timeout,
        )
