"""Command line entry point for the revenue aggregator.

Subcommands:
    serve    run the HTTP server for live ingestion and balance queries
    batch    replay an event log directly into the balance store
    replay   post an event log to a running server, one request per event
    migrate  create the balances table
    balance  print one user's balance
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from dataclasses import dataclass

import uvicorn

from infrastructure.logging.logger import configure_logging, get_logger
from infrastructure.postgres.postgres import BasePostgresClient
from system.revenue_aggregator.adapters.file.event_source import FileEventSource
from system.revenue_aggregator.adapters.postgres.balance_store import PostgresBalanceStore
from system.revenue_aggregator.api.app import create_app
from system.revenue_aggregator.auth import SharedSecretAuth
from system.revenue_aggregator.client.replay_client import ReplayClient
from system.revenue_aggregator.config import RevenueAggregatorConfig
from system.revenue_aggregator.domain.errors import SourceError, StorageError
from system.revenue_aggregator.engine import AggregationEngine
from system.revenue_aggregator.strategy.registry import build_default_registry

EXIT_OK = 0
EXIT_FAILURE = 1


@dataclass(slots=True)
class Runtime:
    """Process-owned collaborators, built once and passed by reference."""

    db: BasePostgresClient
    store: PostgresBalanceStore
    engine: AggregationEngine

    def close(self) -> None:
        self.db.close()


def build_runtime(
    config: RevenueAggregatorConfig,
    events_path: str | None = None,
    stop_on_storage_error: bool | None = None,
) -> Runtime:
    """Wire the pooled client, store and engine from configuration."""
    db = BasePostgresClient(config=config.postgres)
    store = PostgresBalanceStore(db=db, table=config.table)
    engine = AggregationEngine(
        registry=build_default_registry(),
        store=store,
        auth=SharedSecretAuth(config.auth_secret),
        batch_source=FileEventSource(events_path or config.events_path),
        stop_on_storage_error=(
            config.stop_on_storage_error if stop_on_storage_error is None else stop_on_storage_error
        ),
    )
    return Runtime(db=db, store=store, engine=engine)


class RevenueAggregatorCLI:
    """Argument parsing and subcommand dispatch."""

    def __init__(self, config: RevenueAggregatorConfig | None = None) -> None:
        self.config = config or RevenueAggregatorConfig()
        self.logger = get_logger(self.__class__.__name__)

    def build_parser(self) -> argparse.ArgumentParser:
        parser = argparse.ArgumentParser(
            prog="revenue-aggregator",
            description="Aggregate revenue events into per-user balances",
        )
        parser.add_argument("--log-level", default=None, help="Override LOG_LEVEL")
        subparsers = parser.add_subparsers(dest="command", required=True)

        serve = subparsers.add_parser("serve", help="Run the HTTP server")
        serve.add_argument("--host", default=None)
        serve.add_argument("--port", type=int, default=None)
        serve.add_argument("--migrate", action="store_true", help="Create the table first")

        batch = subparsers.add_parser("batch", help="Replay an event log into the store")
        batch.add_argument("--events", default=None, help="Path to the event log")
        batch.add_argument(
            "--stop-on-storage-error",
            action="store_true",
            default=None,
            help="Stop at the first storage failure instead of continuing",
        )

        replay = subparsers.add_parser("replay", help="Post an event log to a running server")
        replay.add_argument("--events", default=None, help="Path to the event log")
        replay.add_argument("--url", default=None, help="Server base URL")

        subparsers.add_parser("migrate", help="Create the balances table")

        balance = subparsers.add_parser("balance", help="Print a user's balance")
        balance.add_argument("user_id")

        return parser

    def run(self, argv: Sequence[str] | None = None) -> int:
        args = self.build_parser().parse_args(argv)
        configure_logging(args.log_level or self.config.log_level)

        handler = getattr(self, f"_cmd_{args.command}")
        try:
            return handler(args)
        except SourceError as e:
            self.logger.error(f"Event source failed: {e}")
            return EXIT_FAILURE
        except StorageError as e:
            self.logger.error(f"Balance store failed: {e}")
            return EXIT_FAILURE

    def _cmd_serve(self, args: argparse.Namespace) -> int:
        runtime = build_runtime(self.config)
        try:
            if args.migrate:
                runtime.store.migrate()
            app = create_app(runtime.engine, db=runtime.db)
            host = args.host or self.config.host
            port = args.port or self.config.port
            self.logger.info(f"Server running at http://{host}:{port}")
            uvicorn.run(app, host=host, port=port)
        finally:
            runtime.close()
        return EXIT_OK

    def _cmd_batch(self, args: argparse.Namespace) -> int:
        runtime = build_runtime(
            self.config,
            events_path=args.events,
            stop_on_storage_error=args.stop_on_storage_error,
        )
        try:
            summary = runtime.engine.run_batch()
        finally:
            runtime.close()
        print(json.dumps(summary.to_dict()))
        return EXIT_OK

    def _cmd_replay(self, args: argparse.Namespace) -> int:
        client = ReplayClient(
            base_url=args.url or self.config.server_url,
            auth_secret=self.config.auth_secret,
            timeout=self.config.request_timeout,
        )
        try:
            report = client.replay(args.events or self.config.events_path)
        finally:
            client.close()
        print(json.dumps({"sent": report.sent, "failed": report.failed, "skipped": report.skipped}))
        return EXIT_OK

    def _cmd_migrate(self, args: argparse.Namespace) -> int:
        runtime = build_runtime(self.config)
        try:
            runtime.store.migrate()
        finally:
            runtime.close()
        return EXIT_OK

    def _cmd_balance(self, args: argparse.Namespace) -> int:
        runtime = build_runtime(self.config)
        try:
            balance = runtime.engine.get_balance(args.user_id)
        finally:
            runtime.close()
        if balance is None:
            print(f"User {args.user_id} not found")
            return EXIT_FAILURE
        print(json.dumps(balance.to_payload()))
        return EXIT_OK


def main(argv: Sequence[str] | None = None) -> int:
    return RevenueAggregatorCLI().run(argv)


if __name__ == "__main__":
    sys.exit(main())
