"""Configuration for the revenue aggregator.

Composes the infrastructure Postgres configuration with the service's own
settings. Every value can be overridden through ``REVENUE_*`` environment
variables or passed explicitly.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from infrastructure.config import PostgresConfig


class RevenueAggregatorConfig(BaseSettings):
    """Complete revenue aggregator configuration.

    Attributes:
        postgres: Balance store connection settings (``POSTGRES_*``).
        auth_secret: Shared secret expected in the Authorization header.
        events_path: Event log replayed by ``batch`` and ``replay``.
        host: Interface the HTTP server binds to.
        port: Port the HTTP server listens on.
        server_url: Base URL the replay client posts to.
        table: Balances table name.
        request_timeout: Replay client HTTP timeout in seconds.
        stop_on_storage_error: Stop a batch at the first storage failure.
        log_level: Logging level applied by the CLI.
    """

    model_config = SettingsConfigDict(
        env_prefix="REVENUE_",
        env_file=None,
        extra="ignore",
    )

    postgres: PostgresConfig = Field(default_factory=PostgresConfig)
    auth_secret: str = Field(default="secret")
    events_path: str = Field(default="events.jsonl")
    host: str = Field(default="0.0.0.0")
    port: int = Field(default=8000)
    server_url: str = Field(default="http://localhost:8000")
    table: str = Field(default="users_revenue")
    request_timeout: float = Field(default=10.0, gt=0)
    stop_on_storage_error: bool = Field(default=False)
    log_level: str = Field(default="INFO")
