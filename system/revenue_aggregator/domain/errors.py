"""Error taxonomy for the revenue aggregator.

``DecodeError`` is returned rather than raised: the decoder is a total
function and callers branch on the result type. ``StorageError`` and
``SourceError`` are raised and reach the immediate caller.
"""

from __future__ import annotations

RAW_PREVIEW_LIMIT = 200


class RevenueAggregatorError(Exception):
    """Base class for all revenue aggregator errors."""


class DecodeError(RevenueAggregatorError):
    """A raw record could not be turned into an Event.

    Attributes:
        raw: The offending record text.
        reason: Short human-readable description of the problem.
    """

    def __init__(self, raw: str, reason: str) -> None:
        self.raw = raw
        self.reason = reason
        super().__init__(f"{reason}: {self.preview}")

    @property
    def preview(self) -> str:
        if len(self.raw) <= RAW_PREVIEW_LIMIT:
            return self.raw
        return self.raw[:RAW_PREVIEW_LIMIT] + "..."


class StorageError(RevenueAggregatorError):
    """The balance store failed to read or write."""


class SourceError(RevenueAggregatorError):
    """An event source could not be opened or read."""
