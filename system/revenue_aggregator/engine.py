"""Aggregation engine.

Runs raw records through ``decode -> resolve strategy -> delta -> apply``
for both entry points:

* the live path (``submit_event``), one record per inbound request, where
  failures are returned to the caller as a rejected ``SubmitResult``;
* the batch path (``run_batch``), which drains an event source and keeps
  going past bad records, reporting counts in a ``BatchSummary``.

The engine keeps no state between calls. Balances live in the store.
"""

from __future__ import annotations

from infrastructure.logging.logger import get_logger
from system.revenue_aggregator.adapters.live.event_source import RequestEventSource
from system.revenue_aggregator.auth import SharedSecretAuth
from system.revenue_aggregator.decoder import EventDecoder
from system.revenue_aggregator.domain.errors import DecodeError, SourceError, StorageError
from system.revenue_aggregator.domain.models import (
    Balance,
    BatchSummary,
    EventOutcome,
    RejectionReason,
    SubmitResult,
)
from system.revenue_aggregator.ports.balance_store import BalanceStore
from system.revenue_aggregator.ports.event_source import EventSource
from system.revenue_aggregator.strategy.registry import StrategyRegistry


class AggregationEngine:
    """Apply revenue events to a balance store.

    Args:
        registry: Kind-to-strategy bindings.
        store: Balance store shared with every other component.
        auth: Authenticator for live submissions. When omitted, live
            submissions are not authenticated by the engine.
        decoder: Record decoder; defaults to ``EventDecoder``.
        batch_source: Source drained by ``run_batch()`` when called
            without arguments.
        stop_on_storage_error: Stop a batch at the first storage failure
            instead of continuing with the next record.
    """

    def __init__(
        self,
        registry: StrategyRegistry,
        store: BalanceStore,
        auth: SharedSecretAuth | None = None,
        decoder: EventDecoder | None = None,
        batch_source: EventSource | None = None,
        stop_on_storage_error: bool = False,
    ) -> None:
        self.registry = registry
        self.store = store
        self.auth = auth
        self.decoder = decoder or EventDecoder()
        self.batch_source = batch_source
        self.stop_on_storage_error = stop_on_storage_error
        self.logger = get_logger(self.__class__.__name__)

    def process_record(self, raw: str | bytes) -> EventOutcome:
        """Run one raw record through the pipeline and report what happened.

        Decode failures, unhandled kinds and storage failures are logged and
        turned into outcomes; nothing raised by the store escapes.
        """
        event = self.decoder.decode(raw)
        if isinstance(event, DecodeError):
            self.logger.warning(f"Skipping undecodable record ({event.reason}): {event.preview}")
            return EventOutcome.DECODE_FAILED

        strategy = self.registry.resolve(event.name)
        if strategy is None:
            self.logger.warning(
                f"No processing strategy found for event type: {event.name} (user {event.user_id})"
            )
            return EventOutcome.UNHANDLED_KIND

        delta = strategy.delta(event)
        try:
            self.store.apply_delta(event.user_id, delta)
        except StorageError as e:
            self.logger.error(f"Storage failure for user {event.user_id} delta {delta}: {e}")
            return EventOutcome.STORAGE_FAILED

        return EventOutcome.APPLIED

    def submit_event(self, raw: str | bytes | None, auth_header: str | None = None) -> SubmitResult:
        """Live path: authenticate and apply exactly one record.

        Args:
            raw: Request body holding one JSON event.
            auth_header: Value of the request's Authorization header.

        Returns:
            ``SubmitResult`` accepted (``applied`` False for an unhandled
            kind) or rejected with a ``RejectionReason``.
        """
        if self.auth is not None and not self.auth.is_authorized(auth_header):
            self.logger.warning("Rejected live event: unauthorized")
            return SubmitResult.reject(RejectionReason.UNAUTHORIZED)

        try:
            (record,) = RequestEventSource(raw).records()
        except SourceError as e:
            self.logger.warning(f"Rejected live event: {e}")
            return SubmitResult.reject(RejectionReason.MALFORMED)

        outcome = self.process_record(record)
        if outcome is EventOutcome.DECODE_FAILED:
            return SubmitResult.reject(RejectionReason.MALFORMED)
        if outcome is EventOutcome.STORAGE_FAILED:
            return SubmitResult.reject(RejectionReason.STORAGE_FAILURE)
        return SubmitResult.accept(applied=outcome is EventOutcome.APPLIED)

    def get_balance(self, user_id: str) -> Balance | None:
        """Return the user's balance, or None if the user has no events.

        Raises:
            StorageError: If the store cannot be read.
        """
        return self.store.get(user_id)

    def run_batch(self, source: EventSource | None = None) -> BatchSummary:
        """Batch path: drain ``source`` (or the configured one) to exhaustion.

        Raises:
            SourceError: If the source cannot be opened or read.
            ValueError: If no source was given or configured.
        """
        source = source if source is not None else self.batch_source
        if source is None:
            raise ValueError("run_batch needs an event source")

        summary = BatchSummary()
        self.logger.info("Batch replay started")
        for record in source.records():
            outcome = self.process_record(record)
            summary.record(outcome)
            if outcome is EventOutcome.STORAGE_FAILED and self.stop_on_storage_error:
                self.logger.error("Stopping batch replay after storage failure")
                summary.stopped_early = True
                break

        self.logger.info(
            f"Batch replay finished: applied={summary.applied} "
            f"unhandled={summary.skipped_unhandled_kind} "
            f"decode_failures={summary.failed_decode} "
            f"storage_failures={summary.failed_storage}"
        )
        return summary
