"""Event source for a single record carried by one inbound request."""

from __future__ import annotations

from collections.abc import Iterator

from system.revenue_aggregator.domain.errors import SourceError


class RequestEventSource:
    """Yield exactly the one raw record received with a request.

    Args:
        body: Request body as received; ``None`` means the connection
            delivered nothing.
    """

    def __init__(self, body: str | bytes | None) -> None:
        self.body = body

    def records(self) -> Iterator[str | bytes]:
        if self.body is None:
            raise SourceError("Request carried no body")
        # Bytes are passed through so the decoder can reject invalid UTF-8.
        yield self.body
