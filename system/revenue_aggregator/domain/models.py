"""Domain models for the revenue aggregator.

Events are decoded once from a raw record and then flow through the
aggregation pipeline unchanged. Balances are what the store hands back.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import Any

ADD_REVENUE = "add_revenue"
SUBTRACT_REVENUE = "subtract_revenue"


@dataclass(frozen=True, slots=True)
class Event:
    """One decoded instruction to adjust a user's revenue balance."""

    user_id: str
    name: str
    value: int

    def to_payload(self) -> dict[str, Any]:
        """Return the event in its JSON wire shape."""
        return {"userId": self.user_id, "name": self.name, "value": self.value}


@dataclass(frozen=True, slots=True)
class Balance:
    """Persisted running revenue total for one user."""

    user_id: str
    revenue: int

    def to_payload(self) -> dict[str, Any]:
        """Return the balance in its JSON wire shape."""
        return {"userId": self.user_id, "revenue": self.revenue}


class EventOutcome(StrEnum):
    """Result of running one record through the aggregation pipeline."""

    APPLIED = "applied"
    UNHANDLED_KIND = "unhandled_kind"
    DECODE_FAILED = "decode_failed"
    STORAGE_FAILED = "storage_failed"


class RejectionReason(StrEnum):
    """Why a live submission was refused."""

    UNAUTHORIZED = "unauthorized"
    MALFORMED = "malformed"
    STORAGE_FAILURE = "storage-failure"


@dataclass(frozen=True, slots=True)
class SubmitResult:
    """Outcome of a live single-event submission.

    ``applied`` is False for accepted events whose kind has no strategy.
    """

    accepted: bool
    reason: RejectionReason | None = None
    applied: bool = False

    @classmethod
    def accept(cls, applied: bool = True) -> SubmitResult:
        return cls(accepted=True, applied=applied)

    @classmethod
    def reject(cls, reason: RejectionReason) -> SubmitResult:
        return cls(accepted=False, reason=reason)


@dataclass(slots=True)
class BatchSummary:
    """Counts reported at the end of a batch replay."""

    applied: int = 0
    skipped_unhandled_kind: int = 0
    failed_decode: int = 0
    failed_storage: int = 0
    stopped_early: bool = False

    def record(self, outcome: EventOutcome) -> None:
        """Count one pipeline outcome."""
        attr = _SUMMARY_FIELDS[outcome]
        setattr(self, attr, getattr(self, attr) + 1)

    @property
    def total(self) -> int:
        return self.applied + self.skipped_unhandled_kind + self.failed_decode + self.failed_storage

    def to_dict(self) -> dict[str, int | bool]:
        return {
            "applied": self.applied,
            "skippedUnhandledKind": self.skipped_unhandled_kind,
            "failedDecode": self.failed_decode,
            "failedStorage": self.failed_storage,
            "total": self.total,
            "stoppedEarly": self.stopped_early,
        }


_SUMMARY_FIELDS: dict[EventOutcome, str] = {
    EventOutcome.APPLIED: "applied",
    EventOutcome.UNHANDLED_KIND: "skipped_unhandled_kind",
    EventOutcome.DECODE_FAILED: "failed_decode",
    EventOutcome.STORAGE_FAILED: "failed_storage",
}
