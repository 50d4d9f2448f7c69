"""Event source port.

Defines the protocol for anything that yields raw event records, whether
read from a recorded log or carried by a single inbound request.
"""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol


class EventSource(Protocol):
    """Protocol for producers of raw event records."""

    def records(self) -> Iterator[str | bytes]:
        """Yield raw records in source order until the source is exhausted.

        Raises:
            SourceError: If the source cannot be opened or read.
        """
        ...
